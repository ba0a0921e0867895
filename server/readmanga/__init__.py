"""Read-Manga API server: a cached proxy over the MangaDex catalog."""

__version__ = "1.0.0"
