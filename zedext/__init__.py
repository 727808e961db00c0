"""zedext — install and manage Zed editor extensions from the command line."""

__version__ = "0.1.0"
