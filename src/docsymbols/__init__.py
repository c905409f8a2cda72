"""Document symbol outline cache and positional symbol queries."""

__version__ = "0.1.0"
