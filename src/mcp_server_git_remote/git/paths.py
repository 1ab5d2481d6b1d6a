"""Repository path normalization"""

import os
from pathlib import Path


class InvalidPathError(ValueError):
    """Raised when a caller-supplied repository path cannot be used."""


def normalize_path(raw_path: str) -> str:
    """Normalize a user-supplied repository path.

    Expands ``~``, makes the path absolute against the current working
    directory and collapses ``.`` / ``..`` segments. The filesystem is never
    consulted, so the result is a stable identity for the path as written,
    whether or not it exists.

    Args:
        raw_path: Path as received from the caller

    Returns:
        Absolute, normalized path string

    Raises:
        InvalidPathError: If the path is empty or syntactically invalid
    """
    if isinstance(raw_path, os.PathLike):
        raw_path = os.fspath(raw_path)
    if not isinstance(raw_path, str):
        raise InvalidPathError(f"Repository path must be a string, got {type(raw_path).__name__}")

    text = raw_path
    if not text.strip():
        raise InvalidPathError("Repository path is required")
    if "\x00" in text:
        raise InvalidPathError("Repository path contains a NUL byte")

    expanded = Path(text.strip()).expanduser()
    return os.path.normpath(os.path.abspath(expanded))
