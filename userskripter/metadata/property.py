"""Ordered registry of typed metadata properties with lazy defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

FLAG = "flag"
SINGLE = "single"
MANY = "many"
NAMED_MANY = "named_many"

PROPERTY_KINDS = (FLAG, SINGLE, MANY, NAMED_MANY)

Supplier = Callable[[], Any]


class PropertyRegistrationError(ValueError):
    """Raised when a property cannot be added to a store."""


class UnknownPropertyError(KeyError):
    """Raised when a key was never registered with the store."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Property with key '{self.key}' is not registered."


@dataclass(frozen=True)
class Unset:
    """Slot that has never been written; reads evaluate *compute*."""

    compute: Supplier


@dataclass(frozen=True)
class Assigned:
    """Slot pinned to *value*, which may be ``None``."""

    value: Any


def _empty_default(kind: str) -> Supplier:
    if kind == FLAG:
        return lambda: False
    if kind == MANY:
        return list
    if kind == NAMED_MANY:
        return dict
    return lambda: None


class MetadataProperty:
    """A single named slot inside a :class:`PropertyStore`."""

    __slots__ = ("key", "kind", "_slot")

    def __init__(self, key: str, kind: str, default: Optional[Supplier] = None) -> None:
        if kind not in PROPERTY_KINDS:
            raise PropertyRegistrationError(f"unknown property kind '{kind}' for '{key}'")
        self.key = key
        self.kind = kind
        self._slot: Unset | Assigned = Unset(default or _empty_default(kind))

    @property
    def is_manually_set(self) -> bool:
        return isinstance(self._slot, Assigned)

    def get_value(self) -> Any:
        slot = self._slot
        if isinstance(slot, Assigned):
            return slot.value
        return slot.compute()

    def set_value(self, value: Any) -> None:
        self._slot = Assigned(value)

    def __repr__(self) -> str:
        return f"MetadataProperty(key={self.key!r}, kind={self.kind!r}, slot={self._slot!r})"


class PropertyAccessor:
    """Get/set handle bound to one key of a store."""

    __slots__ = ("key", "_store")

    def __init__(self, key: str, store: "PropertyStore") -> None:
        self.key = key
        self._store = store

    def get(self) -> Any:
        return self._store.get(self.key)

    def set(self, value: Any) -> None:
        self._store.set(self.key, value)

    @property
    def is_manually_set(self) -> bool:
        return self._store.lookup(self.key).is_manually_set


class PropertyStore:
    """Ordered key -> property mapping; shape is fixed once sealed.

    Iteration follows registration order so that serialized output is
    deterministic.
    """

    def __init__(self) -> None:
        self._properties: Dict[str, MetadataProperty] = {}
        self._sealed = False

    def register(self, key: str, kind: str, default: Optional[Supplier] = None) -> PropertyAccessor:
        """Create a property for *key* and return an accessor bound to it."""

        if self._sealed:
            raise PropertyRegistrationError(f"store is sealed; cannot register '{key}'")
        if not isinstance(key, str) or not key:
            raise PropertyRegistrationError("property key must be a non-empty string")
        if key in self._properties:
            raise PropertyRegistrationError(f"property '{key}' is already registered")
        self._properties[key] = MetadataProperty(key, kind, default)
        return PropertyAccessor(key, self)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def lookup(self, key: str) -> MetadataProperty:
        try:
            return self._properties[key]
        except KeyError:
            raise UnknownPropertyError(key) from None

    def get(self, key: str) -> Any:
        """Return the effective value of *key*."""

        return self.lookup(key).get_value()

    def set(self, key: str, value: Any) -> None:
        self.lookup(key).set_value(value)

    def is_manually_set(self, key: str) -> bool:
        return self.lookup(key).is_manually_set

    def kind_of(self, key: str) -> str:
        return self.lookup(key).kind

    def keys(self) -> List[str]:
        return list(self._properties)

    def items(self) -> Iterator[Tuple[str, MetadataProperty]]:
        return iter(list(self._properties.items()))

    def snapshot(self) -> Dict[str, str]:
        """Return ``key -> str(effective value)`` in registration order."""

        return {key: str(prop.get_value()) for key, prop in self._properties.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._properties))

    def __len__(self) -> int:
        return len(self._properties)


class MetadataField:
    """Class-level declaration of a store-backed attribute.

    Reading the attribute on an instance returns the effective value from the
    instance's store; assigning to it pins the value.
    """

    def __init__(self, key: str, kind: str, default: Optional[Callable[[Any], Any]] = None) -> None:
        if kind not in PROPERTY_KINDS:
            raise PropertyRegistrationError(f"unknown property kind '{kind}' for '{key}'")
        self.key = key
        self.kind = kind
        self.default = default
        self.attribute: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.attribute = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return instance.store.get(self.key)

    def __set__(self, instance: Any, value: Any) -> None:
        instance.store.set(self.key, value)

    def bind(self, instance: Any) -> Optional[Supplier]:
        if self.default is None:
            return None
        default = self.default
        return lambda: default(instance)


def flag(key: str, default: Optional[Callable[[Any], bool]] = None) -> MetadataField:
    return MetadataField(key, FLAG, default)


def single(key: str, default: Optional[Callable[[Any], Any]] = None) -> MetadataField:
    return MetadataField(key, SINGLE, default)


def many(key: str, default: Optional[Callable[[Any], List[str]]] = None) -> MetadataField:
    return MetadataField(key, MANY, default)


def named(key: str, default: Optional[Callable[[Any], Dict[str, str]]] = None) -> MetadataField:
    return MetadataField(key, NAMED_MANY, default)


class PropertyHost:
    """Base class for objects whose attributes are :class:`MetadataField` slots.

    Fields are registered in declaration order, base classes first, and the
    store is sealed afterwards.
    """

    def __init__(self) -> None:
        self.store = PropertyStore()
        for field in self.declared_fields():
            self.store.register(field.key, field.kind, field.bind(self))
        self.store.seal()

    @classmethod
    def declared_fields(cls) -> List[MetadataField]:
        seen: Dict[str, MetadataField] = {}
        for klass in reversed(cls.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, MetadataField):
                    seen[attribute] = value
        return list(seen.values())

    def accessor(self, key: str) -> PropertyAccessor:
        if key not in self.store:
            raise UnknownPropertyError(key)
        return PropertyAccessor(key, self.store)

    def is_manually_set(self, key: str) -> bool:
        return self.store.is_manually_set(key)


__all__ = [
    "Assigned",
    "FLAG",
    "MANY",
    "MetadataField",
    "MetadataProperty",
    "NAMED_MANY",
    "PROPERTY_KINDS",
    "PropertyAccessor",
    "PropertyHost",
    "PropertyRegistrationError",
    "PropertyStore",
    "SINGLE",
    "UnknownPropertyError",
    "Unset",
    "flag",
    "many",
    "named",
    "single",
]
