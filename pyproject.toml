[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gpxparaver"
version = "0.1.0"
description = "Convert GPX tracks and routes into Paraver trace files for visualisation"
requires-python = ">=3.10"
keywords = ["gpx", "paraver", "trace", "gis", "elevation", "visualization"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
    "Topic :: Scientific/Engineering :: Visualization",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gpxparaver = "gpxparaver.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gpxparaver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
