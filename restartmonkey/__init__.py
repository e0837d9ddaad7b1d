"""restartmonkey — restart services that still map replaced libraries."""

__version__ = "0.1.0"
