"""Parse GPX files and write them out as Paraver trace files."""

__version__ = "0.1.0"
__all__ = ["gpx", "prv", "cli"]