"""logsage: natural-language search and debugging over heterogeneous log stores."""

__version__ = "0.1.0"
