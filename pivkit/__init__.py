"""PIV vector fields, interrogation grids, image loading, text output, engine base and batch runs."""

__version__ = "0.1.0"

__all__ = [
    "batch",
    "engine",
    "imageloader",
    "output",
    "output_thread",
    "pivdata",
    "point",
    "preprocess",
    "session",
]