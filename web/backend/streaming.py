"""Byte-range streaming of audio files for in-browser playback and seeking."""

import re
from pathlib import Path
from typing import Iterator, Optional

from music_tagger.core.errors import TaggerError

CHUNK_SIZE = 64 * 1024

_RANGE_PATTERN = re.compile(r"^\s*bytes=(\d*)-(\d*)\s*$")


class RangeNotSatisfiableError(TaggerError):
    """Raised when a Range header cannot be served for the file size."""

    status_code = 416

    def __init__(self, file_size: int):
        self.file_size = file_size
        super().__init__("Range Not Satisfiable")


def parse_range(header: Optional[str], file_size: int) -> Optional[tuple[int, int]]:
    """Parse a single-range header into an inclusive (start, end) span.

    Supports bytes=START-END, bytes=START- and bytes=-SUFFIXLEN. An end past
    EOF is clamped to the last byte. Multi-range requests are ignored and
    answered with the whole file.

    Returns:
        (start, end), or None to serve the whole file

    Raises:
        RangeNotSatisfiableError: For malformed or unsatisfiable ranges
    """
    if not header or "," in header:
        return None

    match = _RANGE_PATTERN.match(header)
    if not match:
        raise RangeNotSatisfiableError(file_size)

    start_str, end_str = match.groups()
    if start_str == "" and end_str == "":
        raise RangeNotSatisfiableError(file_size)

    if start_str == "":
        suffix = int(end_str)
        if suffix == 0:
            raise RangeNotSatisfiableError(file_size)
        start = max(0, file_size - suffix)
        end = file_size - 1
    elif end_str == "":
        start = int(start_str)
        end = file_size - 1
    else:
        start = int(start_str)
        end = min(int(end_str), file_size - 1)

    if start > end or start >= file_size:
        raise RangeNotSatisfiableError(file_size)
    return start, end


def iter_file_range(
    path: Path, start: int, length: int, chunk_size: int = CHUNK_SIZE
) -> Iterator[bytes]:
    """Yield `length` bytes of a file starting at `start`."""
    with open(path, "rb") as f:
        f.seek(start)
        remaining = length
        while remaining > 0:
            data = f.read(min(chunk_size, remaining))
            if not data:
                break
            remaining -= len(data)
            yield data
