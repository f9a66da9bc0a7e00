"""Metadata-to-source compilation."""

from __future__ import annotations

from .kotlin import Expression, MetadataCompiler, compile_to_kotlin, kotlin_string
from .settings import INTERNAL, NONE, PUBLIC, TranspilerSettings

__all__ = [
    "Expression",
    "INTERNAL",
    "MetadataCompiler",
    "NONE",
    "PUBLIC",
    "TranspilerSettings",
    "compile_to_kotlin",
    "kotlin_string",
]
