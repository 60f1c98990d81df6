"""Music Tagger - curate a local music library from the browser."""

__version__ = "1.0.0"
