"""AntTracker: a terminal issue tracker for products, releases and requests."""

__version__ = "0.1.0"
