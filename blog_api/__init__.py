"""Blog posts API with cover image uploads."""

__version__ = "1.0.0"
