"""
Music Tagger CLI - entry point

Starts the web server or prints the current library listing.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from music_tagger.core.config import TaggerConfig, load_config, validate_config
from music_tagger.core.errors import ConfigError
from music_tagger.core.output import setup_loguru


def _load(config_path: Optional[str]) -> TaggerConfig:
    config = load_config(Path(config_path) if config_path else None)
    validate_config(config)
    return config


def run_serve(config: TaggerConfig) -> int:
    """Run the API server until interrupted.

    Uvicorn drains in-flight connections on SIGINT/SIGTERM before exiting.

    Returns:
        Exit code
    """
    import uvicorn

    from web.backend.main import create_app

    app = create_app(config)
    logger.info(f"Music Tagger is running at http://localhost:{config.port}")
    logger.info(f"Input directory: {config.input_dir}")
    logger.info(f"Output directory: {config.output_dir}")
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)
    return 0


def run_list(config: TaggerConfig) -> int:
    """Print both roots, newest first."""
    from music_tagger.domain.library.scanner import list_library

    input_tracks, output_tracks = list_library(config)
    for label, tracks in (("input", input_tracks), ("output", output_tracks)):
        print(f"{label} ({len(tracks)} tracks) - {config.root_dir(label)}")
        for track in tracks:
            print(f"  {track.mtime:%Y-%m-%d %H:%M}  {track.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="music-tagger",
        description="Tag and file music from an input folder into an output folder",
    )
    parser.add_argument(
        "--config", help="Path to config.toml (default: $MUSIC_TAGGER_CONFIG or ./config.toml)"
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the web server (default)")
    serve.add_argument("--host", help="Bind address (overrides HOST)")
    serve.add_argument("--port", type=int, help="Listening port (overrides PORT)")

    subparsers.add_parser("list", help="List tracks in both roots")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _load(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_loguru(
        level=config.logging.level,
        log_file=Path(config.logging.log_file).expanduser() if config.logging.log_file else None,
        console_output=config.logging.console_output,
    )

    if args.command == "list":
        return run_list(config)

    if getattr(args, "host", None):
        config.host = args.host
    if getattr(args, "port", None):
        config.port = args.port
    return run_serve(config)


if __name__ == "__main__":
    sys.exit(main())
