"""
Canonical output filenames derived from track tags.
"""

import re

UNKNOWN_ARTIST = "Unknown Artist"
UNTITLED = "Untitled"
FILENAME_SEPARATOR = " — "
OUTPUT_EXTENSION = ".mp3"

# Characters invalid in Windows/Linux/macOS filenames, plus control characters
_ILLEGAL_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_filename(filename: str) -> str:
    """Replace characters that are illegal in filenames with '_' and trim."""
    return _ILLEGAL_CHARS.sub("_", filename).strip()


def derive_filename(artist: str, title: str) -> str:
    """Pure function - compute the output filename for a track.

    >>> derive_filename("Count Basie", "Jumpin' at the Woodside")
    "Count Basie — Jumpin' at the Woodside.mp3"
    """
    return sanitize_filename(
        f"{artist or UNKNOWN_ARTIST}{FILENAME_SEPARATOR}{title or UNTITLED}{OUTPUT_EXTENSION}"
    )
