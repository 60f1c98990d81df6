"""Tagger exceptions, each mapped to the HTTP status the web layer returns."""


class TaggerError(Exception):
    """Base exception for tagger operations."""

    status_code: int = 500


class ValidationError(TaggerError):
    """Raised when a request is missing required fields or names an unknown root."""

    status_code = 400


class ForbiddenPathError(TaggerError):
    """Raised when a resolved path escapes its root directory."""

    status_code = 403

    def __init__(self, message: str = "Forbidden: Invalid path."):
        super().__init__(message)


class NotFoundError(TaggerError):
    """Raised when the target file does not exist."""

    status_code = 404


class MetadataParseError(TaggerError):
    """Raised when a file's ID3 block cannot be read.

    Never surfaced to HTTP callers: read_tags() recovers with an empty TagSet.
    """

    status_code = 500


class MetadataWriteError(TaggerError):
    """Raised when tags could not be encoded or persisted."""

    status_code = 500


class FileOperationError(TaggerError):
    """Raised on a generic filesystem failure during copy, move or delete."""

    status_code = 500


class ConfigError(TaggerError):
    """Raised at startup when configuration is unusable."""

    pass
