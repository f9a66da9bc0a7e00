"""Resolved host-build configuration consumed by the serializers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from userskripter.exceptions import ConfigurationError

PRODUCTION = "production"
DEVELOPMENT = "development"
COMPILATION_MODES = (PRODUCTION, DEVELOPMENT)

GREASE_MONKEY = "greasemonkey"
TAMPER_MONKEY = "tampermonkey"
SCRIPT_ENGINES = (GREASE_MONKEY, TAMPER_MONKEY)

UNSPECIFIED_VERSION = "unspecified"


@dataclass(frozen=True)
class ProjectInfo:
    """Identity of the project the userscript is built from."""

    name: str
    group: str = ""
    description: Optional[str] = None
    version: str = UNSPECIFIED_VERSION

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ConfigurationError("project name must be a non-empty string")


@dataclass
class UserskripterSettings:
    """Build-wide settings.

    Parameters
    ----------
    project:
        The project being built.
    id:
        Identifier of the userscript, the project name by default. Used for
        the file names of the generated ``user`` and ``meta`` files.
    mode:
        ``production`` (default) or ``development``.
    include_source_map:
        Whether the payload's source map is copied next to the user file.
    script_engine:
        Userscript engine targeted by the build. Every engine understands
        GreaseMonkey metadata, so ``greasemonkey`` is the default.
    """

    project: ProjectInfo
    id: str = ""
    mode: str = PRODUCTION
    include_source_map: bool = False
    script_engine: str = GREASE_MONKEY

    def __post_init__(self) -> None:
        if not self.id:
            self.id = self.project.name
        self.mode = self.mode.strip().lower()
        self.script_engine = self.script_engine.strip().lower()
        if self.mode not in COMPILATION_MODES:
            raise ConfigurationError(
                f"unknown compilation mode '{self.mode}'; expected one of {', '.join(COMPILATION_MODES)}"
            )
        if self.script_engine not in SCRIPT_ENGINES:
            raise ConfigurationError(
                f"unknown script engine '{self.script_engine}'; expected one of {', '.join(SCRIPT_ENGINES)}"
            )


__all__ = [
    "COMPILATION_MODES",
    "DEVELOPMENT",
    "GREASE_MONKEY",
    "PRODUCTION",
    "ProjectInfo",
    "SCRIPT_ENGINES",
    "TAMPER_MONKEY",
    "UNSPECIFIED_VERSION",
    "UserskripterSettings",
]
