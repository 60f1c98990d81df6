"""
Tag codec for tagged audio files.

Reads and writes the fixed Tag Set schema to/from a file's ID3v2 block using
Mutagen. Reads are best-effort (an unreadable block yields an empty TagSet);
writes raise MetadataWriteError so a failed save is never reported as success.
"""

import math
from pathlib import Path
from typing import Iterable, Optional, Union

from loguru import logger
from mutagen import MutagenError
from mutagen.id3 import (
    COMM,
    ID3,
    ID3NoHeaderError,
    TBPM,
    TCON,
    TIT2,
    TPE1,
)

from music_tagger.core.errors import MetadataParseError, MetadataWriteError

from .models import TagSet

COMMENT_SEPARATOR = "|"
GENRE_SEPARATOR = ", "


def format_genres(
    declarations: Union[str, Iterable[str], None], allowed: Iterable[str]
) -> list[str]:
    """Normalize raw genre declarations against the allow-list.

    Comma-packed entries ("boogie woogie, lindy hop") are split into separate
    candidates, then case-folded, filtered, deduplicated and sorted.
    """
    if not declarations:
        return []
    if isinstance(declarations, str):
        declarations = [declarations]

    allowed_lower = {a.lower() for a in allowed}
    found = set()
    for declaration in declarations:
        for candidate in str(declaration).split(","):
            candidate = candidate.strip().lower()
            if candidate in allowed_lower:
                found.add(candidate)
    return sorted(found)


def pack_comment(structure: str, quadre: str) -> str:
    """Serialize the two sub-fields into one comment: "<structure>|<quadre>"."""
    return f"{structure or ''}{COMMENT_SEPARATOR}{quadre or ''}"


def unpack_comment(comment: Optional[str]) -> tuple[str, str]:
    """Split a comment into (structure, quadre).

    Only the first two '|' segments are meaningful; the rest is dropped.
    """
    if not comment:
        return "", ""
    parts = comment.split(COMMENT_SEPARATOR)
    structure = parts[0]
    quadre = parts[1] if len(parts) > 1 else ""
    return structure, quadre


def parse_bpm(value) -> Optional[Union[int, float]]:
    """Parse a BPM value; empty, negative or non-numeric input yields None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        bpm = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(bpm) or bpm < 0:
        return None
    return int(bpm) if bpm.is_integer() else bpm


def _first_text(tags: ID3, frame_id: str) -> str:
    frame = tags.get(frame_id)
    if frame is None or not frame.text:
        return ""
    return str(frame.text[0])


def load_id3(path: Union[str, Path]) -> ID3:
    """Strict parse of a file's ID3 block.

    Raises:
        MetadataParseError: If the file has no readable ID3 block
    """
    try:
        return ID3(str(path))
    except ID3NoHeaderError as e:
        raise MetadataParseError(f"No ID3 header in {path}") from e
    except (MutagenError, OSError) as e:
        raise MetadataParseError(f"Could not parse metadata for {path}: {e}") from e


def read_tags(path: Union[str, Path], allowed_genres: Iterable[str]) -> TagSet:
    """Read the Tag Set from a file, falling back to an empty TagSet.

    A missing or malformed metadata block is not an error here: the caller
    still gets a blank form to edit.
    """
    try:
        tags = load_id3(path)
    except MetadataParseError as e:
        logger.warning(f"{e}; using empty tags")
        return TagSet()

    genre_frame = tags.get("TCON")
    raw_genres = list(genre_frame.text) if genre_frame is not None else []

    comment = ""
    comments = tags.getall("COMM")
    if comments and comments[0].text:
        comment = str(comments[0].text[0])
    structure, quadre = unpack_comment(comment)

    return TagSet(
        title=_first_text(tags, "TIT2"),
        artist=_first_text(tags, "TPE1"),
        genres=format_genres(raw_genres, allowed_genres),
        bpm=parse_bpm(_first_text(tags, "TBPM")),
        structure=structure,
        quadre=quadre,
    )


def write_tags(path: Union[str, Path], tag_set: TagSet) -> None:
    """Replace the file's ID3 block with one built from tag_set.

    The audio payload after the tag is preserved.

    Raises:
        MetadataWriteError: If the tag could not be encoded or saved
    """
    tags = ID3()
    if tag_set.title:
        tags.add(TIT2(encoding=3, text=tag_set.title))
    if tag_set.artist:
        tags.add(TPE1(encoding=3, text=tag_set.artist))
    if tag_set.genres:
        tags.add(TCON(encoding=3, text=GENRE_SEPARATOR.join(tag_set.genres)))
    bpm = parse_bpm(tag_set.bpm)
    if bpm is not None:
        tags.add(TBPM(encoding=3, text=str(bpm)))
    tags.add(
        COMM(
            encoding=3,
            lang="eng",
            desc="",
            text=pack_comment(tag_set.structure, tag_set.quadre),
        )
    )

    try:
        tags.save(str(path))
    except (MutagenError, OSError, ValueError) as e:
        logger.error(f"Failed to write ID3 tags to {path}: {e}")
        raise MetadataWriteError(f"Failed to write tags to {Path(path).name}: {e}") from e
