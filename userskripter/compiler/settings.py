"""Configuration of the metadata-to-Kotlin constants compiler."""

from __future__ import annotations

import os
from typing import Callable, Dict, Optional

from userskripter.exceptions import ConfigurationError
from userskripter.metadata.property import PropertyHost, flag, single
from userskripter.project import ProjectInfo

# `val ID = ...`
NONE = "none"
# `public val ID = ...`
PUBLIC = "public"
# `internal val ID = ...`
INTERNAL = "internal"
VISIBILITIES = (NONE, PUBLIC, INTERNAL)

DEFAULT_PACKAGE_NAME = "net.ormr.userskripter.generated"
DEFAULT_OUTPUT_NAME = "UserscriptMetadata"
DEFAULT_OBJECT_NAME = "UserscriptMetadata"
SOURCE_EXTENSION = ".kt"

USEFUL_PROPERTIES = frozenset({"name", "description", "version", "author", "id"})

NameFilter = Callable[[str], bool]
NameTransformer = Callable[[str], str]


def default_property_filter(name: str) -> bool:
    return name in USEFUL_PROPERTIES


def default_name_transformer(name: str) -> str:
    return name.replace("-", "_").upper()


class TranspilerSettings(PropertyHost):
    """Options for the generated constants file.

    Parameters
    ----------
    project:
        Project whose group provides the default package name.
    default_output_directory:
        Directory used while ``outputDirectory`` is untouched.
    visibility:
        Modifier applied to the wrapper object and every property, one of
        ``none`` (default), ``public`` or ``internal``.
    property_filter:
        Predicate over property keys; only the identity fields are kept by
        default.
    name_transformer:
        Maps a property key to a Kotlin identifier; ``run-at`` becomes
        ``RUN_AT`` by default.
    """

    # Whether the compiler runs as part of `generate`.
    run_on_generate = flag("runOnGenerate", lambda self: True)
    output_directory = single("outputDirectory", lambda self: self.default_output_directory)
    output_name = single("outputName", lambda self: DEFAULT_OUTPUT_NAME)
    # Off by default: inlining const values can drastically grow the
    # compiled *.user.js file.
    use_const = flag("useConst")
    # Set to None to emit top-level properties without a wrapping object.
    object_name = single("objectName", lambda self: DEFAULT_OBJECT_NAME)
    package_name = single("packageName", lambda self: self.project.group.strip() or DEFAULT_PACKAGE_NAME)

    def __init__(
        self,
        project: ProjectInfo,
        default_output_directory: str,
        *,
        visibility: str = NONE,
        property_filter: Optional[NameFilter] = None,
        name_transformer: Optional[NameTransformer] = None,
    ) -> None:
        self.project = project
        self.default_output_directory = os.fspath(default_output_directory)
        self.visibility = visibility
        self.property_filter: NameFilter = property_filter or default_property_filter
        self.name_transformer: NameTransformer = name_transformer or default_name_transformer
        super().__init__()

    @property
    def visibility(self) -> str:
        return self._visibility

    @visibility.setter
    def visibility(self, value: str) -> None:
        normalised = (value or NONE).strip().lower()
        if normalised not in VISIBILITIES:
            raise ConfigurationError(
                f"unknown visibility '{value}'; expected one of {', '.join(VISIBILITIES)}"
            )
        self._visibility = normalised

    def transform_name(self, transformer: NameTransformer) -> None:
        self.name_transformer = transformer

    def filter_properties(self, predicate: NameFilter) -> None:
        self.property_filter = predicate

    def snapshot(self) -> Dict[str, str]:
        values = self.store.snapshot()
        values["visibility"] = self.visibility
        return values


__all__ = [
    "DEFAULT_OBJECT_NAME",
    "DEFAULT_OUTPUT_NAME",
    "DEFAULT_PACKAGE_NAME",
    "INTERNAL",
    "NONE",
    "PUBLIC",
    "SOURCE_EXTENSION",
    "TranspilerSettings",
    "USEFUL_PROPERTIES",
    "VISIBILITIES",
    "default_name_transformer",
    "default_property_filter",
]
