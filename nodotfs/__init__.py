"""nodotfs: serve a directory over HTTP with dot files hidden."""

__version__ = "0.1.0"
