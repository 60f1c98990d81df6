"""Tests for the music-tagger command line."""

from unittest.mock import patch

import pytest

from music_tagger.cli import build_parser, main, run_list


@pytest.fixture
def config_file(tmp_path, library, monkeypatch):
    for name in ("INPUT_DIR", "OUTPUT_DIR", "HOST", "PORT", "ALLOWED_GENRES"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config.toml"
    path.write_text(
        f'[library]\ninput_dir = "{library.input_dir.as_posix()}"\n'
        f'output_dir = "{library.output_dir.as_posix()}"\n'
    )
    return path


def test_parser_defaults_to_serve():
    args = build_parser().parse_args([])
    assert args.command is None


def test_missing_config_file_exits_1(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "nope.toml"), "list"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_directory_exits_1(tmp_path, capsys, monkeypatch):
    for name in ("INPUT_DIR", "OUTPUT_DIR"):
        monkeypatch.delenv(name, raising=False)
    path = tmp_path / "config.toml"
    path.write_text(f'[library]\ninput_dir = "{(tmp_path / "missing").as_posix()}"\n')

    assert main(["--config", str(path), "list"]) == 1
    assert "Input directory not found" in capsys.readouterr().err


def test_run_list_prints_tracks(library, make_audio, capsys):
    make_audio(library.input_dir / "a.mp3")
    make_audio(library.output_dir / "b.mp3")

    assert run_list(library) == 0

    out = capsys.readouterr().out
    assert "input (1 tracks)" in out
    assert "a.mp3" in out
    assert "output (1 tracks)" in out


def test_serve_applies_overrides(config_file):
    with patch("music_tagger.cli.setup_loguru"), patch(
        "music_tagger.cli.run_serve", return_value=0
    ) as run_serve:
        assert main(["--config", str(config_file), "serve", "--port", "9000"]) == 0

    config = run_serve.call_args.args[0]
    assert config.port == 9000
    assert config.host == "0.0.0.0"


def test_list_command(config_file, library, make_audio, capsys):
    make_audio(library.input_dir / "song.mp3")
    with patch("music_tagger.cli.setup_loguru"):
        assert main(["--config", str(config_file), "list"]) == 0
    assert "song.mp3" in capsys.readouterr().out
