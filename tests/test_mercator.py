import pytest

from tinmesh.mercator import HALF_CIRCUMFERENCE, MercatorProjection


@pytest.fixture
def proj():
    return MercatorProjection()


@pytest.mark.parametrize("lonlat", [(0.0, 0.0), (13.4, 52.5), (-122.3, 37.8), (179.0, -80.0)])
def test_lonlat_meters_round_trip(proj, lonlat):
    back = proj.meters_to_lonlat(proj.lonlat_to_meters(lonlat))
    assert back == pytest.approx(lonlat, abs=1e-9)


def test_antimeridian_maps_to_half_circumference(proj):
    x, y = proj.lonlat_to_meters((180.0, 0.0))
    assert x == pytest.approx(HALF_CIRCUMFERENCE)
    assert y == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize("zoom", [0, 3, 10])
def test_pixels_meters_round_trip(proj, zoom):
    meters = (123456.7, -7654321.0)
    back = proj.pixels_to_meters(proj.meters_to_pixels(meters, zoom), zoom)
    assert back == pytest.approx(meters)


def test_origin_pixel_is_map_corner(proj):
    assert proj.pixels_to_meters((0, 0), 0) == pytest.approx(
        (-HALF_CIRCUMFERENCE, -HALF_CIRCUMFERENCE)
    )


def test_tile_bounds_zoom_zero_cover_world(proj):
    lo, hi = proj.tile_bounds(0, 0, 0)
    assert lo == pytest.approx((-HALF_CIRCUMFERENCE, -HALF_CIRCUMFERENCE))
    assert hi == pytest.approx((HALF_CIRCUMFERENCE, HALF_CIRCUMFERENCE))


def test_tile_bounds_adjacent_tiles_share_edge(proj):
    _, hi = proj.tile_bounds(2, 5, 4)
    lo, _ = proj.tile_bounds(3, 6, 4)
    assert lo == pytest.approx(hi)


def test_pixels_to_tile_xy_edge_belongs_to_lower_tile(proj):
    assert proj.pixels_to_tile_xy((proj.tile_size, proj.tile_size)) == (0, 0)
    assert proj.pixels_to_tile_xy((proj.tile_size + 0.5, 0.5)) == (1, 0)


def test_meters_to_tile_xy_matches_pixel_path(proj):
    meters = (1000.0, 2000.0)
    assert proj.meters_to_tile_xy(meters, 7) == proj.pixels_to_tile_xy(
        proj.meters_to_pixels(meters, 7)
    )


def test_pixels_to_raster_flips_twice_to_identity(proj):
    pix = (10.0, 20.0)
    once = proj.pixels_to_raster(pix, 1)
    assert once[0] == pix[0]
    assert proj.pixels_to_raster(once, 1) == pytest.approx(pix)