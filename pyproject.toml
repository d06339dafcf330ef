[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinmesh"
version = "0.1.0"
description = "Triangulated irregular network meshes: Delaunay triangulation, mesh checks and OFF/OBJ/GeoJSON I/O"
requires-python = ">=3.10"
dependencies = []
keywords = ["tin", "mesh", "delaunay", "terrain", "gis", "triangulation", "quad-edge", "off", "obj", "geojson", "mercator"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tinmesh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
