from fastapi import Request

from music_tagger.core.config import TaggerConfig


def get_config(request: Request) -> TaggerConfig:
    """FastAPI dependency for the startup configuration."""
    return request.app.state.config
