"""In-memory B+ tree map with linked leaves and range queries."""

__version__ = "0.1.0"
__all__ = ["node", "tree"]