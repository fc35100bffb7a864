"""Notes portal: catalog engine and HTTP surface for a folder of HTML notes."""

__version__ = "1.0.0"
