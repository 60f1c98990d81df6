"""Shared fixtures: a throwaway library with input and output roots."""

from pathlib import Path

import pytest

from music_tagger.core.config import TaggerConfig

# Not a real MPEG stream; mutagen's ID3 layer only needs a file to prepend a tag to
AUDIO_PAYLOAD = b"\xff\xfb\x90\x00" + bytes(range(256)) * 4


def make_audio_file(path: Path, payload: bytes = AUDIO_PAYLOAD) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


@pytest.fixture
def library(tmp_path: Path) -> TaggerConfig:
    """Config pointing at empty input/output roots under tmp_path."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    output_dir.mkdir()
    return TaggerConfig(input_dir=input_dir.resolve(), output_dir=output_dir.resolve())


@pytest.fixture
def make_audio():
    """Factory writing a fake audio payload to a path."""
    return make_audio_file
