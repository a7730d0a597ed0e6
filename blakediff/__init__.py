"""Find duplicate and missing files using BLAKE3 hash reports."""

__version__ = "0.1.0"