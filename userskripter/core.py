"""Path handling for generated artifacts."""

from __future__ import annotations

import os
from pathlib import Path


class PathTraversalError(ValueError):
    """Raised when a path attempts to traverse outside the allowed scope."""


def normalize_resource_path(value: str) -> str:
    """Normalize *value* to an absolute path and reject traversal components."""

    if not value:
        raise ValueError("path must be a non-empty string")

    candidate = Path(value).expanduser()
    if any(part == ".." for part in candidate.parts):
        raise PathTraversalError("path may not contain '..' segments")

    if candidate.is_absolute():
        normalized = candidate
    else:
        normalized = (Path.cwd() / candidate)

    return str(normalized.resolve(strict=False))


def artifact_path(directory: str, file_name: str) -> str:
    """Join *file_name* onto *directory*, refusing names that leave it."""

    if not file_name or file_name in {".", ".."}:
        raise PathTraversalError(f"invalid artifact name '{file_name}'")
    if "/" in file_name or "\\" in file_name:
        raise PathTraversalError(f"artifact name '{file_name}' may not contain path separators")
    return os.path.join(normalize_resource_path(os.fspath(directory)), file_name)


__all__ = ["PathTraversalError", "artifact_path", "normalize_resource_path"]
