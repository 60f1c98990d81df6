"""
Library domain - scanning, tag codec, filename derivation and file lifecycle.
"""

from .models import Root, TrackRecord, TagSet
from .scanner import find_music_files, list_tracks, list_library
from .metadata import (
    format_genres,
    pack_comment,
    unpack_comment,
    parse_bpm,
    read_tags,
    write_tags,
)
from .filenames import sanitize_filename, derive_filename
from .lifecycle import save_track, move_to_input, delete_track, read_track_tags

__all__ = [
    "Root",
    "TrackRecord",
    "TagSet",
    "find_music_files",
    "list_tracks",
    "list_library",
    "format_genres",
    "pack_comment",
    "unpack_comment",
    "parse_bpm",
    "read_tags",
    "write_tags",
    "sanitize_filename",
    "derive_filename",
    "save_track",
    "move_to_input",
    "delete_track",
    "read_track_tags",
]
