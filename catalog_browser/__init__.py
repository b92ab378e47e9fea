"""Terminal browser for paginated REST catalogs."""

__version__ = "0.1.0"
