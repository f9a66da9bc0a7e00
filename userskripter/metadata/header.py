"""Serializer for the ``==UserScript==`` metadata block."""

from __future__ import annotations

import functools
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from userskripter.exceptions import MetadataBlockError
from userskripter.metadata.block import Comparator, UserscriptMetadata
from userskripter.metadata.property import FLAG, MANY, NAMED_MANY

METADATA_START = "==UserScript=="
METADATA_END = "==/UserScript=="

_NAME_KEY = "name"
_BUILD_ONLY_KEYS = frozenset({"id"})


def alphabetical(left: str, right: str) -> int:
    return (left > right) - (left < right)


def comparator_from_order(order: Sequence[str]) -> Comparator:
    """Return a comparator placing *order* keys first, then the rest A-Z."""

    ranks = {key: index for index, key in enumerate(order)}

    def _compare(left: str, right: str) -> int:
        left_rank = (0, ranks[left], "") if left in ranks else (1, 0, left)
        right_rank = (0, ranks[right], "") if right in ranks else (1, 0, right)
        return (left_rank > right_rank) - (left_rank < right_rank)

    return _compare


class MetadataBlockBuilder:
    """Collect ``@key value`` lines and encode them as an aligned block."""

    def __init__(self) -> None:
        self._lines: List[Tuple[str, str]] = []

    def flag(self, key: str, value: Any) -> None:
        if value:
            self._lines.append((key, ""))

    def single(self, key: str, value: Any) -> None:
        if value is None:
            return
        text = str(value)
        if not text and key != _NAME_KEY:
            return
        if "\n" in text or "\r" in text:
            raise MetadataBlockError(f"@{key} value may not contain line breaks")
        self._lines.append((key, text))

    def many(self, key: str, values: Optional[Iterable[Any]]) -> None:
        for value in values or ():
            self.single(key, value)

    def named(self, key: str, values: Optional[Mapping[str, Any]]) -> None:
        for entry_key, value in (values or {}).items():
            self.single(key, f"{entry_key} {value}")

    def encode(self, comparator: Optional[Comparator] = None) -> str:
        names = [value for key, value in self._lines if key == _NAME_KEY]
        if not names:
            raise MetadataBlockError("@name is required for metadata blocks")

        width = max(len(key) for key, _ in self._lines)
        rest = [(key, value) for key, value in self._lines if key != _NAME_KEY]
        if comparator is not None:
            compare = functools.cmp_to_key(comparator)
            rest = sorted(rest, key=lambda line: compare(line[0]))

        body = [(_NAME_KEY, names[0])] + rest
        lines = [f"// {METADATA_START}"]
        lines.extend(f"// @{key}{' ' * (width - len(key))}  {value}" for key, value in body)
        lines.append(f"// {METADATA_END}")
        return "".join(f"{line.rstrip()}\n" for line in lines if line.strip())


def serialize_metadata_block(metadata: UserscriptMetadata) -> str:
    """Render *metadata* as a userscript header, ending with a newline.

    Raises:
        MetadataBlockError: If ``name`` resolves to ``None``.
    """

    if _NAME_KEY not in metadata.store or metadata.store.get(_NAME_KEY) is None:
        raise MetadataBlockError("@name is required for metadata blocks")

    builder = MetadataBlockBuilder()
    for key, prop in metadata.store.items():
        if key in _BUILD_ONLY_KEYS:
            continue
        value = prop.get_value()
        if prop.kind == FLAG:
            builder.flag(key, value)
        elif prop.kind == MANY:
            builder.many(key, value)
        elif prop.kind == NAMED_MANY:
            builder.named(key, value)
        else:
            builder.single(key, value)
    for key, values in metadata.extra_properties.items():
        if key not in _BUILD_ONLY_KEYS:
            builder.many(key, values)
    return builder.encode(metadata.property_sorter)


__all__ = [
    "METADATA_END",
    "METADATA_START",
    "MetadataBlockBuilder",
    "alphabetical",
    "comparator_from_order",
    "serialize_metadata_block",
]
