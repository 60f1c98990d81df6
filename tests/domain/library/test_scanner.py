"""Tests for library scanning."""

import os
from unittest.mock import patch

import pytest

from music_tagger.domain.library.scanner import (
    find_music_files,
    is_supported_format,
    list_library,
    list_tracks,
)


def test_is_supported_format_case_insensitive():
    assert is_supported_format("song.MP3", [".mp3"])
    assert not is_supported_format("cover.jpg", [".mp3"])
    assert not is_supported_format("mp3", [".mp3"])


def test_find_music_files_recursive(tmp_path, make_audio):
    make_audio(tmp_path / "a.mp3")
    make_audio(tmp_path / "sub" / "b.Mp3")
    make_audio(tmp_path / "sub" / "deeper" / "c.mp3")
    (tmp_path / "notes.txt").write_text("not audio")

    paths = sorted(t.path for t in find_music_files(tmp_path))

    assert paths == ["a.mp3", "sub/b.Mp3", "sub/deeper/c.mp3"]


def test_find_music_files_deep_tree(tmp_path, make_audio):
    """Deep nesting does not hit the recursion limit."""
    deep = tmp_path
    for i in range(200):
        deep = deep / f"d{i}"
    make_audio(deep / "bottom.mp3")

    tracks = find_music_files(tmp_path)

    assert len(tracks) == 1
    assert tracks[0].path.endswith("/bottom.mp3")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlinks_are_skipped(tmp_path, make_audio):
    root = tmp_path / "root"
    make_audio(root / "real.mp3")
    outside = make_audio(tmp_path / "outside.mp3")
    (root / "link.mp3").symlink_to(outside)
    (root / "linked-dir").symlink_to(tmp_path, target_is_directory=True)

    assert [t.path for t in find_music_files(root)] == ["real.mp3"]


def test_unreadable_directory_is_skipped(tmp_path, make_audio):
    make_audio(tmp_path / "good" / "a.mp3")
    make_audio(tmp_path / "bad" / "b.mp3")
    real_scandir = os.scandir

    def flaky_scandir(path):
        if str(path).endswith("bad"):
            raise PermissionError("denied")
        return real_scandir(path)

    with patch("music_tagger.domain.library.scanner.os.scandir", side_effect=flaky_scandir):
        tracks = find_music_files(tmp_path)

    assert [t.path for t in tracks] == ["good/a.mp3"]


def test_missing_root_returns_empty(tmp_path):
    assert find_music_files(tmp_path / "nope") == []


def test_list_tracks_newest_first(tmp_path, make_audio):
    for name, mtime in [("old.mp3", 1_000_000), ("new.mp3", 3_000_000), ("mid.mp3", 2_000_000)]:
        path = make_audio(tmp_path / name)
        os.utime(path, (mtime, mtime))

    assert [t.path for t in list_tracks(tmp_path)] == ["new.mp3", "mid.mp3", "old.mp3"]


def test_list_library_scans_both_roots(library, make_audio):
    make_audio(library.input_dir / "in.mp3")
    make_audio(library.output_dir / "out.mp3")

    input_tracks, output_tracks = list_library(library)

    assert [t.path for t in input_tracks] == ["in.mp3"]
    assert [t.path for t in output_tracks] == ["out.mp3"]
