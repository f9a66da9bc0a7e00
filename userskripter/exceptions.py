"""Shared userskripter exceptions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class ConfigurationError(ValueError):
    """Raised when the build configuration is unusable."""

    def __init__(self, message: str, *, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


class MetadataBlockError(ConfigurationError):
    """Raised when a userscript metadata block cannot be serialized."""


__all__ = ["ConfigurationError", "MetadataBlockError"]
