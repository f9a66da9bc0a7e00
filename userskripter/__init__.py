"""Userscript metadata block and constants generation."""

from .compiler import TranspilerSettings, compile_to_kotlin
from .metadata import UserscriptMetadata, serialize_metadata_block
from .project import ProjectInfo, UserskripterSettings

__all__ = [
    "ProjectInfo",
    "TranspilerSettings",
    "UserscriptMetadata",
    "UserskripterSettings",
    "compile_to_kotlin",
    "serialize_metadata_block",
]
