"""Make 10: which four-digit sequences can be turned into 10."""

__version__ = "0.1.0"
