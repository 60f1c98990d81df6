"""
Music library domain models.

Contains data structures for representing tracks and their editable tags.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional, Union


class Root(str, Enum):
    """The two directories that partition all tracks."""

    INPUT = "input"
    OUTPUT = "output"


class TrackRecord(NamedTuple):
    """A listed track: path relative to its root plus modification time.

    Ephemeral - recomputed on every listing, no identity beyond the path string.
    """

    path: str  # Forward-slash separated, relative to the root
    mtime: datetime


@dataclass
class TagSet:
    """The editable metadata schema.

    `structure` and `quadre` share a single comment field on disk
    (see metadata.pack_comment).
    """

    title: str = ""
    artist: str = ""
    genres: list[str] = field(default_factory=list)  # Allow-listed, lowercase, sorted
    bpm: Optional[Union[int, float]] = None
    structure: str = ""
    quadre: str = ""
