"""
Path security validation utilities for Music Tagger.

Provides functions to validate that user-supplied relative paths stay within
their root directory, preventing directory traversal attacks and symlink escapes.
"""

from pathlib import Path

from loguru import logger

from .errors import ForbiddenPathError, ValidationError


def is_path_within_root(file_path: Path, root: Path) -> bool:
    """Pure function - validates path is within the root directory.

    Uses Path.resolve() to handle symlinks and relative segments, then checks
    that the resolved path is the root itself or a child of it.

    Args:
        file_path: The file path to validate
        root: The allowed root directory

    Returns:
        True if path is within the root, False otherwise
    """
    try:
        resolved_path = file_path.resolve()
        resolved_path.relative_to(root.resolve())
        return True
    except ValueError:
        # relative_to raises ValueError if path is not a subpath
        return False
    except (OSError, RuntimeError):
        # Path.resolve() can raise OSError for invalid paths or RuntimeError for loops
        return False


def resolve_within_root(root: Path, relative_path: str) -> Path:
    """Join a user-supplied relative path onto its root and check containment.

    Any '..' segment is rejected outright, as are absolute paths and paths that
    resolve outside the root (symlink escapes) or to the root directory itself.

    Args:
        root: Root directory the path must stay inside
        relative_path: Forward-slash separated path relative to the root

    Returns:
        The resolved absolute path

    Raises:
        ValidationError: If the relative path is empty
        ForbiddenPathError: If the resolved path escapes the root
    """
    if not relative_path or not relative_path.strip():
        raise ValidationError("Missing file path.")

    if ".." in relative_path.replace("\\", "/").split("/"):
        logger.warning(f"Blocked traversal attempt under {root}: {relative_path!r}")
        raise ForbiddenPathError()

    candidate = root / relative_path
    resolved_root = root.resolve()
    resolved = candidate.resolve()

    if resolved == resolved_root or not is_path_within_root(resolved, resolved_root):
        logger.warning(f"Blocked access outside root {root}: {relative_path!r}")
        raise ForbiddenPathError()

    return resolved
