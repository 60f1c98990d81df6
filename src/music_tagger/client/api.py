"""
HTTP client for the Music Tagger backend.

Thin wrappers over the /api routes. Non-2xx responses raise ApiError carrying
the server's {"error": ...} message so callers can show it to the user.
"""

from datetime import datetime
from typing import Any, Optional
from urllib.parse import quote

import requests
from loguru import logger

from music_tagger.domain.library.models import TagSet, TrackRecord

DEFAULT_BASE_URL = "http://localhost:8293"
REQUEST_TIMEOUT = 30


class ApiError(Exception):
    """Raised when the backend answers with an error status."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(message)


def _record_from_json(data: dict[str, Any]) -> TrackRecord:
    mtime = data.get("mtime")
    if isinstance(mtime, str):
        mtime = datetime.fromisoformat(mtime.replace("Z", "+00:00"))
    return TrackRecord(path=data["path"], mtime=mtime)


def _record_to_json(record: TrackRecord) -> dict[str, Any]:
    return {"path": record.path, "mtime": record.mtime.isoformat()}


def _tags_from_json(data: dict[str, Any]) -> TagSet:
    return TagSet(
        title=data.get("title") or "",
        artist=data.get("artist") or "",
        genres=list(data.get("genres") or []),
        bpm=data.get("bpm"),
        structure=data.get("structure") or "",
        quadre=data.get("quadre") or "",
    )


def _quote_path(path: str) -> str:
    return quote(path, safe="/")


class TaggerApiClient:
    """Client for the tagger HTTP API.

    Args:
        base_url: Server root, e.g. "http://localhost:8293"
        session: Optional requests-compatible session (a TestClient works too)
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, session: Optional[Any] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _url(self, route: str) -> str:
        return f"{self.base_url}/api/{route}"

    def _check(self, response) -> Any:
        if 200 <= response.status_code < 300:
            return response.json()
        try:
            message = response.json().get("error") or "Server error"
        except ValueError:
            message = "Server error"
        logger.warning(f"API error {response.status_code}: {message}")
        raise ApiError(response.status_code, message)

    def list_files(self) -> tuple[list[TrackRecord], list[TrackRecord]]:
        data = self._check(self.session.get(self._url("files"), timeout=REQUEST_TIMEOUT))
        return (
            [_record_from_json(f) for f in data.get("inputFiles") or []],
            [_record_from_json(f) for f in data.get("outputFiles") or []],
        )

    def get_tags(self, root: str, path: str) -> TagSet:
        response = self.session.get(
            self._url(f"tags/{root}/{_quote_path(path)}"), timeout=REQUEST_TIMEOUT
        )
        return _tags_from_json(self._check(response))

    def save(self, root: str, path: str, tags: TagSet) -> TrackRecord:
        payload = {
            "sourceDir": root,
            "sourcePath": path,
            "tags": {
                "title": tags.title,
                "artist": tags.artist,
                "genres": list(tags.genres),
                "bpm": tags.bpm,
                "structure": tags.structure,
                "quadre": tags.quadre,
            },
        }
        data = self._check(
            self.session.post(self._url("save"), json=payload, timeout=REQUEST_TIMEOUT)
        )
        return _record_from_json(data["newFile"])

    def move_to_input(self, record: TrackRecord) -> TrackRecord:
        data = self._check(
            self.session.post(
                self._url("move-to-input"),
                json={"file": _record_to_json(record)},
                timeout=REQUEST_TIMEOUT,
            )
        )
        return _record_from_json(data["newFile"])

    def delete(self, root: str, path: str) -> str:
        response = self.session.delete(
            self._url(f"files/{root}/{_quote_path(path)}"), timeout=REQUEST_TIMEOUT
        )
        return self._check(response).get("message", "")

    def stream_url(self, root: str, path: str) -> str:
        """URL an audio player can load (supports Range requests)."""
        return self._url(f"play/{root}/{_quote_path(path)}")
