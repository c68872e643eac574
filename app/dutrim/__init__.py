"""dutrim - index a directory tree by size, mark entries and prune them."""

__version__ = "0.1.0"
