"""Square thumbnail renditions for uploaded product and design images."""

__version__ = "0.1.0"
