"""Word Stamp - render styled text to PNG images, one per word."""

__version__ = "0.1.0"
