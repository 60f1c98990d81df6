"""
Music library scanning.

Walks a root directory for audio files and returns lightweight track records.
There is no cached index: every listing re-scans the filesystem.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable

from loguru import logger

from music_tagger.core.config import TaggerConfig

from .models import TrackRecord


def is_supported_format(name: str, extensions: Iterable[str]) -> bool:
    """Check if file extension is supported (case-insensitive)."""
    return os.path.splitext(name)[1].lower() in {e.lower() for e in extensions}


def find_music_files(
    root: Path, extensions: Iterable[str] = (".mp3",)
) -> list[TrackRecord]:
    """Find all audio files under a root directory.

    Uses an explicit stack of pending directories instead of recursion, so deep
    trees cannot exhaust the call stack. Directories that cannot be read are
    logged and skipped; the scan carries on with the rest of the tree.
    Symlinked files and directories are not followed.

    Args:
        root: Directory to scan
        extensions: Accepted file extensions, including the dot

    Returns:
        TrackRecords with forward-slash paths relative to root, in no particular order
    """
    extensions = tuple(extensions)
    tracks: list[TrackRecord] = []
    pending: list[str] = [""]

    while pending:
        relative_dir = pending.pop()
        current = os.path.join(root, relative_dir)
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    entry_relative = (
                        f"{relative_dir}/{entry.name}" if relative_dir else entry.name
                    )
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            pending.append(entry_relative)
                        elif entry.is_file(
                            follow_symlinks=False
                        ) and is_supported_format(entry.name, extensions):
                            mtime = datetime.fromtimestamp(entry.stat().st_mtime)
                            tracks.append(
                                TrackRecord(
                                    path=entry_relative.replace("\\", "/"),
                                    mtime=mtime,
                                )
                            )
                    except OSError as e:
                        # File vanished or became unreadable mid-scan
                        logger.error(f"Error reading entry {entry.path}: {e}")
        except OSError as e:
            logger.error(f"Error reading directory {current}: {e}")

    return tracks


def list_tracks(root: Path, extensions: Iterable[str] = (".mp3",)) -> list[TrackRecord]:
    """Scan a root and sort newest first."""
    tracks = find_music_files(root, extensions)
    tracks.sort(key=lambda t: t.mtime, reverse=True)
    return tracks


def list_library(config: TaggerConfig) -> tuple[list[TrackRecord], list[TrackRecord]]:
    """List both roots.

    Returns:
        (input_tracks, output_tracks), each sorted by mtime descending
    """
    input_tracks = list_tracks(config.input_dir, config.audio_extensions)
    output_tracks = list_tracks(config.output_dir, config.audio_extensions)
    logger.debug(
        f"Library scan: {len(input_tracks)} input, {len(output_tracks)} output tracks"
    )
    return input_tracks, output_tracks
