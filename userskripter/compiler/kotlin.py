"""Compile userscript metadata into a Kotlin source file of constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from userskripter.compiler.settings import NONE, TranspilerSettings
from userskripter.metadata.block import UserscriptMetadata
from userskripter.metadata.property import FLAG, MANY, NAMED_MANY, MetadataProperty
from userskripter.project import UserskripterSettings

_INDENT = " " * 4
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "$": "\\$",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


@dataclass(frozen=True)
class Expression:
    """Kotlin code for one property and whether it may be ``const``."""

    code: str
    constable: bool


def kotlin_string(value: Any) -> str:
    """Return *value* as a double-quoted Kotlin string literal."""

    text = "".join(_ESCAPES.get(char, char) for char in str(value))
    return f'"{text}"'


def _list_of(values: Iterable[Any]) -> str:
    return f"listOf({', '.join(kotlin_string(value) for value in values)})"


def _map_of(values: Dict[str, Any]) -> str:
    pairs = ", ".join(f"{kotlin_string(key)} to {kotlin_string(value)}" for key, value in values.items())
    return f"mapOf({pairs})"


class MetadataCompiler:
    """Collect property expressions in insertion order and encode them."""

    def __init__(self) -> None:
        self._expressions: Dict[str, Expression] = {}

    @property
    def expressions(self) -> Dict[str, Expression]:
        return dict(self._expressions)

    def flag(self, key: str, prop: MetadataProperty) -> None:
        # Untouched flags are left out even though their default is known.
        if prop.is_manually_set:
            self._expressions[key] = Expression("true" if prop.get_value() else "false", True)

    def single(self, key: str, prop: MetadataProperty) -> None:
        value = prop.get_value()
        if value is not None:
            self._expressions[key] = Expression(kotlin_string(value), True)

    def string(self, key: str, value: str) -> None:
        self._expressions[key] = Expression(kotlin_string(value), True)

    def many(self, key: str, prop: MetadataProperty) -> None:
        self.extra(key, prop.get_value())

    def extra(self, key: str, values: Optional[List[str]]) -> None:
        if values:
            self._expressions[key] = Expression(_list_of(values), False)

    def named(self, key: str, prop: MetadataProperty) -> None:
        values = prop.get_value()
        if values:
            self._expressions[key] = Expression(_map_of(values), False)

    def add(self, key: str, prop: MetadataProperty) -> None:
        if prop.kind == FLAG:
            self.flag(key, prop)
        elif prop.kind == MANY:
            self.many(key, prop)
        elif prop.kind == NAMED_MANY:
            self.named(key, prop)
        else:
            self.single(key, prop)

    def encode(self, transpiler: TranspilerSettings) -> str:
        wrapper_name = transpiler.object_name
        visibility = "" if transpiler.visibility == NONE else f"{transpiler.visibility} "
        indent = _INDENT if wrapper_name is not None else ""

        lines: List[str] = []
        package_name = (transpiler.package_name or "").strip()
        if package_name:
            lines.extend([f"package {package_name}", ""])
        if wrapper_name is not None:
            lines.append(f"{visibility}object {wrapper_name} {{")
        for key, expression in self._expressions.items():
            if not transpiler.property_filter(key):
                continue
            prefix = "const " if expression.constable and transpiler.use_const else ""
            binding = transpiler.name_transformer(key)
            lines.append(f"{indent}{visibility}{prefix}val {binding} = {expression.code}")
        if wrapper_name is not None:
            lines.append("}")
        return "".join(f"{line.rstrip()}\n" for line in lines)


def compile_to_kotlin(
    settings: UserskripterSettings,
    metadata: UserscriptMetadata,
    transpiler: TranspilerSettings,
) -> str:
    """Return the Kotlin constants source for *metadata*."""

    compiler = MetadataCompiler()
    compiler.string("id", settings.id)
    for key, prop in metadata.store.items():
        compiler.add(key, prop)
    for key, values in metadata.extra_properties.items():
        compiler.extra(key, values)
    return compiler.encode(transpiler)


__all__ = ["Expression", "MetadataCompiler", "compile_to_kotlin", "kotlin_string"]
