"""ChroniQuill - dated archive of short-form and long-form writing."""

__version__ = "0.1.0"
