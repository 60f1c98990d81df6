"""
Configuration management for Music Tagger
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError, ValidationError

DEFAULT_ALLOWED_GENRES = frozenset({"boogie woogie", "lindy hop"})


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # No file sink unless set
    console_output: bool = True


@dataclass
class TaggerConfig:
    """Main configuration object.

    Built once at process start and handed to every component that needs it.
    """

    input_dir: Path = field(default_factory=lambda: Path("input").resolve())
    output_dir: Path = field(default_factory=lambda: Path("output").resolve())
    host: str = "0.0.0.0"
    port: int = 8293
    allowed_origins: tuple[str, ...] = ()  # CORS origins; none means same-origin only
    allowed_genres: frozenset[str] = DEFAULT_ALLOWED_GENRES
    audio_extensions: tuple[str, ...] = (".mp3",)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def root_dir(self, root: str) -> Path:
        """Map a root label ("input" or "output") to its directory."""
        if root == "input":
            return self.input_dir
        if root == "output":
            return self.output_dir
        raise ValidationError(f"Unknown root: {root!r}")


def get_config_path(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Get the TOML configuration file path, if one exists.

    Checks in order:
    1. MUSIC_TAGGER_CONFIG environment variable
    2. config.toml in the current working directory
    """
    env = os.environ if env is None else env
    explicit = env.get("MUSIC_TAGGER_CONFIG")
    if explicit:
        return Path(explicit).expanduser()

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config
    return None


def _parse_genres(raw) -> frozenset[str]:
    if isinstance(raw, str):
        raw = raw.split(",")
    return frozenset(g.strip().lower() for g in raw if g and g.strip())


def load_config(
    config_path: Optional[Path] = None, env: Optional[Mapping[str, str]] = None
) -> TaggerConfig:
    """Load configuration from TOML and environment.

    Environment variables override TOML values:
    - PORT, HOST, ALLOWED_ORIGINS (comma separated)
    - INPUT_DIR, OUTPUT_DIR
    - ALLOWED_GENRES (comma separated)
    - LOG_LEVEL, LOG_FILE
    """
    if env is None:
        # Load .env file from the working directory if it exists
        from dotenv import load_dotenv

        load_dotenv(Path.cwd() / ".env")
        env = os.environ

    config = TaggerConfig()
    toml_data: dict = {}

    path = config_path if config_path is not None else get_config_path(env)
    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found at '{path}'")
        try:
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file '{path}': {e}") from e

    library_data = toml_data.get("library", {})
    server_data = toml_data.get("server", {})
    logging_data = toml_data.get("logging", {})

    input_dir = env.get("INPUT_DIR") or library_data.get("input_dir", "./input")
    output_dir = env.get("OUTPUT_DIR") or library_data.get("output_dir", "./output")
    config.input_dir = Path(input_dir).expanduser().resolve()
    config.output_dir = Path(output_dir).expanduser().resolve()

    genres = env.get("ALLOWED_GENRES") or library_data.get("allowed_genres")
    if genres:
        config.allowed_genres = _parse_genres(genres)

    extensions = library_data.get("audio_extensions")
    if extensions:
        config.audio_extensions = tuple(e.lower() for e in extensions)

    origins = env.get("ALLOWED_ORIGINS") or server_data.get("allowed_origins")
    if origins:
        if isinstance(origins, str):
            origins = origins.split(",")
        config.allowed_origins = tuple(o.strip() for o in origins if o.strip())

    config.host = env.get("HOST") or server_data.get("host", config.host)
    port = env.get("PORT") or server_data.get("port", config.port)
    try:
        config.port = int(port)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port: {port!r}") from e

    config.logging = LoggingConfig(
        level=env.get("LOG_LEVEL") or logging_data.get("level", "INFO"),
        log_file=env.get("LOG_FILE") or logging_data.get("log_file"),
        console_output=logging_data.get("console_output", True),
    )

    return config


def validate_config(config: TaggerConfig) -> None:
    """Refuse to run unless both root directories exist.

    Raises:
        ConfigError: If the input or output directory is missing
    """
    for label, directory in (("Input", config.input_dir), ("Output", config.output_dir)):
        if not directory.is_dir():
            raise ConfigError(f"{label} directory not found at '{directory}'.")
    if not config.allowed_genres:
        raise ConfigError("Genre allow-list must not be empty.")
