"""Chapter critique, caching and revision tools for the Muse writing app."""

__version__ = "0.1.0"
