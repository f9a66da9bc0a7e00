"""JSON configuration loading for userskripter builds."""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from jsonschema import Draft202012Validator, ValidationError

from userskripter.compiler.settings import VISIBILITIES, TranspilerSettings
from userskripter.exceptions import ConfigurationError
from userskripter.metadata.block import UserscriptMetadata
from userskripter.metadata.header import alphabetical, comparator_from_order
from userskripter.metadata.property import FLAG, MANY, NAMED_MANY, SINGLE
from userskripter.metadata.run_at import RunAt
from userskripter.project import (
    COMPILATION_MODES,
    SCRIPT_ENGINES,
    UNSPECIFIED_VERSION,
    ProjectInfo,
    UserskripterSettings,
)

JsonDict = Dict[str, Any]

_LOGGER = logging.getLogger("userskripter.config")

DEFAULT_CONFIG_PATH = "userskripter.json"
GENERATED_SOURCES_DIR = os.path.join("generated", "userskripter", "kotlin")

_MODE_ENV = "USERSKRIPTER_MODE"
_METADATA_DIRECTIVES = ("extra", "sort", "hostedAt")

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_KIND_SCHEMAS: Mapping[str, JsonDict] = {
    FLAG: {"type": "boolean"},
    SINGLE: {"type": ["string", "null"]},
    MANY: {"type": ["array", "null"], "items": {"type": "string"}},
    NAMED_MANY: {"type": ["object", "null"], "additionalProperties": {"type": "string"}},
}


def _metadata_schema() -> JsonDict:
    properties: JsonDict = {
        field.key: copy.deepcopy(_KIND_SCHEMAS[field.kind])
        for field in UserscriptMetadata.declared_fields()
    }
    properties["extra"] = {"type": "object", "additionalProperties": _STRING_LIST}
    properties["sort"] = {
        "oneOf": [
            {"enum": ["declaration", "alphabetical"]},
            _STRING_LIST,
        ]
    }
    properties["hostedAt"] = {"type": "string", "minLength": 1}
    return {"type": "object", "properties": properties, "additionalProperties": False}


CONFIG_SCHEMA: JsonDict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["project"],
    "additionalProperties": False,
    "properties": {
        "project": {
            "type": "object",
            "required": ["name"],
            "additionalProperties": False,
            "properties": {
                "name": {"type": "string", "minLength": 1},
                "group": {"type": "string"},
                "description": {"type": ["string", "null"]},
                "version": {"type": "string"},
            },
        },
        "id": {"type": "string", "minLength": 1},
        "mode": {"enum": list(COMPILATION_MODES)},
        "includeSourceMap": {"type": "boolean"},
        "scriptEngine": {"enum": list(SCRIPT_ENGINES)},
        "metadata": _metadata_schema(),
        "transpiler": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "runOnGenerate": {"type": "boolean"},
                "outputDirectory": {"type": "string", "minLength": 1},
                "outputName": {"type": "string", "minLength": 1},
                "useConst": {"type": "boolean"},
                "objectName": {"type": ["string", "null"]},
                "packageName": {"type": "string"},
                "visibility": {"enum": list(VISIBILITIES)},
                "properties": {"oneOf": [{"const": "*"}, _STRING_LIST]},
            },
        },
    },
}


@dataclass
class Configuration:
    """Everything a build needs, resolved from one configuration file."""

    settings: UserskripterSettings
    metadata: UserscriptMetadata
    transpiler: TranspilerSettings
    build_dir: str


def _collect_errors(raw_errors: Iterable[ValidationError]):
    for error in raw_errors:
        path = list(error.absolute_path)
        yield {
            "message": error.message,
            "path": path,
        }


def validate_config(payload: Any) -> None:
    """Raise :class:`ConfigurationError` listing every schema violation."""

    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(_collect_errors(validator.iter_errors(payload)), key=lambda item: [str(p) for p in item["path"]])
    if errors:
        details = "; ".join(
            f"{'/'.join(str(part) for part in error['path']) or '<root>'}: {error['message']}" for error in errors
        )
        raise ConfigurationError(f"invalid configuration: {details}", errors=errors)


def _apply_metadata(metadata: UserscriptMetadata, section: Mapping[str, Any]) -> None:
    hosted_at = section.get("hostedAt")
    if hosted_at:
        metadata.hosted_at(hosted_at)

    for key, value in section.items():
        if key in _METADATA_DIRECTIVES:
            continue
        value = copy.deepcopy(value)
        if key == "run-at" and value is not None:
            value = RunAt.of(value)
        metadata.store.set(key, value)

    for key, values in (section.get("extra") or {}).items():
        metadata.extra(key, *values)

    order = section.get("sort")
    if order == "alphabetical":
        metadata.sort(alphabetical)
    elif isinstance(order, list):
        metadata.sort(comparator_from_order(order))


def _apply_transpiler(transpiler: TranspilerSettings, section: Mapping[str, Any]) -> None:
    for key in ("runOnGenerate", "outputDirectory", "outputName", "useConst", "objectName", "packageName"):
        if key in section:
            transpiler.store.set(key, section[key])
    if "visibility" in section:
        transpiler.visibility = section["visibility"]

    allowed = section.get("properties")
    if allowed == "*":
        transpiler.filter_properties(lambda name: True)
    elif allowed is not None:
        safelist = frozenset(allowed)
        transpiler.filter_properties(lambda name: name in safelist)


def build_configuration(payload: Mapping[str, Any], *, build_dir: str = "build") -> Configuration:
    """Validate *payload* and resolve it into settings and property stores."""

    validate_config(payload)

    project_section = payload["project"]
    project = ProjectInfo(
        name=project_section["name"],
        group=project_section.get("group", ""),
        description=project_section.get("description"),
        version=project_section.get("version", UNSPECIFIED_VERSION),
    )

    mode = os.getenv(_MODE_ENV) or payload.get("mode", "production")
    settings = UserskripterSettings(
        project=project,
        id=payload.get("id", ""),
        mode=mode,
        include_source_map=payload.get("includeSourceMap", False),
        script_engine=payload.get("scriptEngine", "greasemonkey"),
    )

    metadata = UserscriptMetadata(settings)
    _apply_metadata(metadata, payload.get("metadata") or {})

    transpiler = TranspilerSettings(project, os.path.join(build_dir, GENERATED_SOURCES_DIR))
    _apply_transpiler(transpiler, payload.get("transpiler") or {})

    _LOGGER.debug("Resolved configuration for %s (mode=%s)", settings.id, settings.mode)
    return Configuration(settings=settings, metadata=metadata, transpiler=transpiler, build_dir=build_dir)


def load_config(path: Optional[str] = None, *, build_dir: str = "build") -> Configuration:
    """Read the JSON configuration at *path* and resolve it."""

    config_path = path or DEFAULT_CONFIG_PATH
    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"configuration file not found: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"configuration file is not valid JSON: {config_path}: {exc}") from exc
    return build_configuration(payload, build_dir=build_dir)


__all__ = [
    "CONFIG_SCHEMA",
    "Configuration",
    "DEFAULT_CONFIG_PATH",
    "build_configuration",
    "load_config",
    "validate_config",
]
