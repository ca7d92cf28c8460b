"""Building blocks for writing PDF files: fonts, images, encryption and PDF objects."""

__version__ = "0.1.0"