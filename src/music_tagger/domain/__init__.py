"""Domain layer for Music Tagger."""
