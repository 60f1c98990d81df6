"""
File lifecycle between the input and output roots.

A track lives in exactly one root. Saving copies it into the output root
under its derived filename and rewrites its tags; move-to-input sends it back;
delete removes it for good. Every user-supplied path is checked for
containment before anything touches the disk.

State machine per track:
    DISCOVERED(root) --save--> SAVED(output, name)
    SAVED(output) --move_to_input--> DISCOVERED(input)
    any --delete--> GONE

Saves are not coordinated across requests: two concurrent saves of the same
source can leave one of them failing with NotFoundError.
"""

import os
import shutil
from dataclasses import replace
from datetime import datetime
from pathlib import Path, PurePosixPath

from loguru import logger

from music_tagger.core.config import TaggerConfig
from music_tagger.core.errors import (
    FileOperationError,
    NotFoundError,
    TaggerError,
)
from music_tagger.core.path_security import resolve_within_root

from .filenames import derive_filename
from .metadata import format_genres, parse_bpm, read_tags, write_tags
from .models import Root, TagSet, TrackRecord


def _record_for(path: Path) -> TrackRecord:
    return TrackRecord(
        path=path.name, mtime=datetime.fromtimestamp(path.stat().st_mtime)
    )


def _is_same_file(source: Path, destination: Path) -> bool:
    if source == destination:
        return True
    # Case-insensitive filesystems can map two spellings to one file
    return destination.exists() and os.path.samefile(source, destination)


def _require_file(path: Path, relative_path: str) -> None:
    if not path.is_file():
        raise NotFoundError(f"File not found: {relative_path}")


def _copy(source: Path, destination: Path) -> None:
    try:
        shutil.copy2(source, destination)
    except FileNotFoundError as e:
        raise NotFoundError(f"File not found: {source.name}") from e
    except OSError as e:
        raise FileOperationError(f"Failed to copy {source.name}: {e}") from e


def _unlink(path: Path) -> None:
    try:
        path.unlink()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError(f"File not found: {path.name}") from e
    except OSError as e:
        raise FileOperationError(f"Failed to remove {path.name}: {e}") from e


def normalize_tags(tags: TagSet, config: TaggerConfig) -> TagSet:
    """Apply the allow-list and BPM rules to tags coming from a client."""
    return replace(
        tags,
        title=(tags.title or "").strip(),
        artist=(tags.artist or "").strip(),
        genres=format_genres(tags.genres, config.allowed_genres),
        bpm=parse_bpm(tags.bpm),
        structure=tags.structure or "",
        quadre=tags.quadre or "",
    )


def read_track_tags(config: TaggerConfig, root: Root, relative_path: str) -> TagSet:
    """Read a track's tags after validating its location.

    Raises:
        ForbiddenPathError: If the path escapes its root
        NotFoundError: If the file does not exist
    """
    path = resolve_within_root(config.root_dir(root), relative_path)
    _require_file(path, relative_path)
    return read_tags(path, config.allowed_genres)


def save_track(
    config: TaggerConfig, source_root: Root, source_path: str, tags: TagSet
) -> TrackRecord:
    """Save a track into the output root under its derived name, with new tags.

    When the derived destination is the source file itself, only the tags are
    rewritten. Otherwise the file is copied (roots may be on different
    filesystems) to a hidden partial file next to the destination, tagged there
    and then renamed over the destination. The source is removed last, so a
    failed save leaves both the source and any existing output file untouched.

    Returns:
        TrackRecord for the saved file (basename, fresh mtime)

    Raises:
        ForbiddenPathError: If the source path escapes its root
        NotFoundError: If the source file does not exist
        MetadataWriteError: If tags could not be written
        FileOperationError: On any other filesystem failure
    """
    source = resolve_within_root(config.root_dir(source_root), source_path)
    _require_file(source, source_path)

    tags = normalize_tags(tags, config)
    destination = resolve_within_root(
        config.output_dir, derive_filename(tags.artist, tags.title)
    )

    if _is_same_file(source, destination):
        write_tags(source, tags)
        logger.info(f"Updated tags in place: {source.name}")
        return _record_for(source)

    # Tag a hidden copy first; an existing file at the destination is only
    # replaced once the new one is complete
    partial = destination.with_name(f".{destination.name}.part")
    try:
        _copy(source, partial)
        write_tags(partial, tags)
        os.replace(partial, destination)
    except OSError as e:
        partial.unlink(missing_ok=True)
        raise FileOperationError(f"Failed to save {destination.name}: {e}") from e
    except TaggerError:
        partial.unlink(missing_ok=True)
        raise
    _unlink(source)

    logger.info(f"Saved {Root(source_root).value}/{source_path} -> output/{destination.name}")
    return _record_for(destination)


def move_to_input(config: TaggerConfig, output_path: str) -> TrackRecord:
    """Move a file from the output root back to input, keeping only its basename.

    An existing input file with the same name is overwritten.

    Raises:
        ForbiddenPathError: If the path escapes the output root
        NotFoundError: If the file does not exist
        FileOperationError: On any other filesystem failure
    """
    source = resolve_within_root(config.output_dir, output_path)
    _require_file(source, output_path)

    basename = PurePosixPath(output_path.replace("\\", "/")).name
    destination = resolve_within_root(config.input_dir, basename)

    _copy(source, destination)
    _unlink(source)

    logger.info(f"Moved output/{output_path} back to input/{basename}")
    return _record_for(destination)


def delete_track(config: TaggerConfig, root: Root, relative_path: str) -> None:
    """Permanently delete a track.

    Raises:
        ForbiddenPathError: If the path escapes its root
        NotFoundError: If the file is already gone
        FileOperationError: On any other filesystem failure
    """
    path = resolve_within_root(config.root_dir(root), relative_path)
    _unlink(path)
    logger.info(f"Deleted {Root(root).value}/{relative_path}")
