"""TIN meshes: Delaunay triangulation, mesh checks, OFF/OBJ/GeoJSON I/O and Mercator helpers."""

__version__ = "0.1.0"

__all__ = [
    "binaryio",
    "delaunator",
    "delaunay_mesh",
    "files",
    "mercator",
    "mesh",
    "meshio",
    "points2mesh",
]