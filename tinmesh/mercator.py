"""Spherical Mercator projection between lon/lat, meters, pixels and tiles."""

from __future__ import annotations

import math
from typing import Sequence

R_EARTH = 6378137.0
"""Earth radius in meters."""
PI = math.pi
HALF_CIRCUMFERENCE = PI * R_EARTH
"""Half of the equatorial circumference in meters."""
INV_180 = 1.0 / 180.0
INV_360 = 1.0 / 360.0

Point = tuple[float, float]


class MercatorProjection:
    """Converts between geographic, projected, pixel and tile coordinates."""

    def __init__(self, tile_size: int = 256):
        self.tile_size = tile_size
        self.resolution = 2.0 * HALF_CIRCUMFERENCE / tile_size

    def lonlat_to_meters(self, lonlat: Sequence[float]) -> Point:
        lon, lat = lonlat[0], lonlat[1]
        x = lon * HALF_CIRCUMFERENCE * INV_180
        y = math.log(math.tan(PI * 0.25 + lat * PI * INV_360)) * R_EARTH
        return (x, y)

    def meters_to_lonlat(self, meters: Sequence[float]) -> Point:
        mx, my = meters[0], meters[1]
        lon = mx / HALF_CIRCUMFERENCE * 180.0
        lat = (2.0 * math.atan(math.exp(my / R_EARTH)) - PI * 0.5) * 180.0 / PI
        return (lon, lat)

    def pixels_to_meters(self, pix: Sequence[float], zoom: int) -> Point:
        res = self.resolution / (1 << zoom)
        return (pix[0] * res - HALF_CIRCUMFERENCE, pix[1] * res - HALF_CIRCUMFERENCE)

    def meters_to_pixels(self, meters: Sequence[float], zoom: int) -> Point:
        inv_res = (1 << zoom) / self.resolution
        return (
            (meters[0] + HALF_CIRCUMFERENCE) * inv_res,
            (meters[1] + HALF_CIRCUMFERENCE) * inv_res,
        )

    def pixels_to_tile_xy(self, pix: Sequence[float]) -> tuple[int, int]:
        """The tile covering the region of a pixel."""
        inv = 1.0 / self.tile_size
        return (int(math.ceil(pix[0] * inv) - 1), int(math.ceil(pix[1] * inv) - 1))

    def meters_to_tile_xy(self, meters: Sequence[float], zoom: int) -> tuple[int, int]:
        return self.pixels_to_tile_xy(self.meters_to_pixels(meters, zoom))

    def pixels_to_raster(self, pix: Sequence[float], zoom: int) -> Point:
        """Flip the y axis so that pixel rows count from the top of the map."""
        map_size = float(self.tile_size << zoom)
        return (float(pix[0]), map_size - pix[1])

    def tile_bounds(self, tx: int, ty: int, zoom: int) -> tuple[Point, Point]:
        """The (min, max) corners of a tile in meters."""
        ts = self.tile_size
        return (
            self.pixels_to_meters((tx * ts, ty * ts), zoom),
            self.pixels_to_meters(((tx + 1) * ts, (ty + 1) * ts), zoom),
        )