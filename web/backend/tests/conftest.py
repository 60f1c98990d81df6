"""Pytest configuration for backend tests.

Each test gets its own input/output roots and an app built around them.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from music_tagger.core.config import TaggerConfig
from web.backend.main import create_app

AUDIO_PAYLOAD = bytes(range(256)) * 4  # 1024 bytes


@pytest.fixture
def config(tmp_path: Path) -> TaggerConfig:
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    output_dir.mkdir()
    return TaggerConfig(input_dir=input_dir.resolve(), output_dir=output_dir.resolve())


@pytest.fixture
def client(config: TaggerConfig) -> TestClient:
    return TestClient(create_app(config))


@pytest.fixture
def make_audio():
    """Factory writing a fake audio payload to a path."""

    def _make(path: Path, payload: bytes = AUDIO_PAYLOAD) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
        return path

    return _make
