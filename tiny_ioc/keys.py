"""Resolve keys and their canonical lookup identities.

A resolve key is a raw ``str``, a :class:`Symbol`, a class, or one of the
wrapped keys :class:`StringKey`, :class:`SymbolKey` and :class:`ClassKey`. The
wrapped keys double as the lookup identity every registry is indexed by, so a
wrapped key and the raw value it carries always address the same registrations.
"""

from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .errors import InvalidKeyError

T = TypeVar("T")


class Symbol:
    """A unique token. Two symbols are equal only if they are the same object."""

    __slots__ = ("description",)

    def __init__(self, description: str = ""):
        self.description = description

    def __repr__(self):
        return f"Symbol({self.description})"


@dataclass(frozen=True)
class StringKey(Generic[T]):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidKeyError(self.value)


@dataclass(frozen=True)
class SymbolKey(Generic[T]):
    value: Symbol

    def __post_init__(self):
        if not isinstance(self.value, Symbol):
            raise InvalidKeyError(self.value)


@dataclass(frozen=True)
class ClassKey(Generic[T]):
    value: type[T]

    def __post_init__(self):
        if not is_class(self.value):
            raise InvalidKeyError(self.value)


LookupKey = Union[StringKey, SymbolKey, ClassKey]
ResolveKey = Union[LookupKey, str, Symbol, type]

_WRAPPED_KEY_TYPES = (StringKey, SymbolKey, ClassKey)


def is_class(target: Any) -> bool:
    # parameterised builtins like list[int] pass isinstance(..., type) on some interpreters
    return isinstance(target, type) and not isinstance(target, types.GenericAlias)


def string_key(name: str) -> StringKey:
    return StringKey(name)


def symbol_key(name: str) -> SymbolKey:
    """Creates a key backed by a brand new symbol, so it only matches itself."""
    return SymbolKey(Symbol(name))


def class_key(cls: type[T]) -> ClassKey[T]:
    return ClassKey(cls)


def get_lookup_key(key: Any) -> LookupKey:
    if isinstance(key, _WRAPPED_KEY_TYPES):
        return key
    if isinstance(key, str):
        return StringKey(key)
    if isinstance(key, Symbol):
        return SymbolKey(key)
    if is_class(key):
        return ClassKey(key)
    raise InvalidKeyError(key)


def is_resolve_key(target: Any) -> bool:
    return isinstance(target, (*_WRAPPED_KEY_TYPES, str, Symbol)) or is_class(target)


def key_to_string(key: Any) -> str:
    if not is_resolve_key(key):
        return repr(key)

    lookup_key = get_lookup_key(key)
    if isinstance(lookup_key, StringKey):
        return f"string({lookup_key.value})"
    if isinstance(lookup_key, SymbolKey):
        return f"symbol({lookup_key.value.description})"
    return f"class({lookup_key.value.__name__})"
