"""Tiny dependency injection container with nested scopes."""

from .builder import ContainerBuilder, RegistrationBuilder
from .core import (
    CallbackProvider,
    ClassProvider,
    Container,
    Lifetime,
    Provider,
    Registration,
    Registry,
    ResolveContext,
    Resolver,
    ValueProvider,
)
from .decorators import injectable, scoped, singleton, transient
from .errors import (
    InvalidConstructorError,
    InvalidKeyError,
    InvalidParameterError,
    MissingParameterMetadataError,
    NeedsScopedRegistrationError,
    NotFoundError,
    ResolveError,
    TinyIocError,
)
from .keys import (
    ClassKey,
    StringKey,
    Symbol,
    SymbolKey,
    class_key,
    get_lookup_key,
    is_resolve_key,
    key_to_string,
    string_key,
    symbol_key,
)
from .reflection import ClassInfoProvider, ClassResolveInfo, Inject, ParameterInfo

__all__ = [
    "CallbackProvider",
    "ClassInfoProvider",
    "ClassKey",
    "ClassProvider",
    "ClassResolveInfo",
    "Container",
    "ContainerBuilder",
    "Inject",
    "InvalidConstructorError",
    "InvalidKeyError",
    "InvalidParameterError",
    "Lifetime",
    "MissingParameterMetadataError",
    "NeedsScopedRegistrationError",
    "NotFoundError",
    "ParameterInfo",
    "Provider",
    "Registration",
    "RegistrationBuilder",
    "Registry",
    "ResolveContext",
    "ResolveError",
    "Resolver",
    "StringKey",
    "Symbol",
    "SymbolKey",
    "TinyIocError",
    "ValueProvider",
    "class_key",
    "get_lookup_key",
    "injectable",
    "is_resolve_key",
    "key_to_string",
    "scoped",
    "singleton",
    "string_key",
    "symbol_key",
    "transient",
]
