"""Tiny IOC container."""

from __future__ import annotations

import dataclasses
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol, TypeVar
from uuid import uuid4

from .errors import (
    InvalidParameterError,
    MissingParameterMetadataError,
    NeedsScopedRegistrationError,
    NotFoundError,
    ResolveError,
)
from .keys import ClassKey, LookupKey, get_lookup_key, is_class, key_to_string
from .reflection import ClassInfoProvider, get_parameter_name, requires_arguments
from .type_filters import is_constructible
from .utils import EMPTY

logger = logging.getLogger(__name__)

TService = TypeVar("TService")


class Lifetime(IntEnum):
    transient = 0
    scoped = 1
    single = 2


class ResolveContext:
    """Handed to a provider while it produces one value.

    ``resolve`` always re-enters the container the outer call started from, so
    nested dependencies see the same scope as the caller, not the scope that
    owns the registration.
    """

    __slots__ = ("container", "key", "tag")

    def __init__(self, key: Any, tag: str | None, container: Container):
        self.key = key
        self.tag = tag
        self.container = container

    @property
    def class_info(self) -> ClassInfoProvider:
        return self.container.class_info

    def resolve(self, key: Any, tag: str | None = None) -> Any:
        return self.container.resolve(key, tag)


class Provider(Protocol):
    def provide(self, context: ResolveContext) -> Any: ...


class ValueProvider(Provider):
    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def provide(self, context: ResolveContext) -> Any:
        return self.value

    def __repr__(self):
        return f"ValueProvider({self.value!r})"


class CallbackProvider(Provider):
    __slots__ = ("callback",)

    def __init__(self, callback: Callable[[ResolveContext], Any]):
        self.callback = callback

    def provide(self, context: ResolveContext) -> Any:
        return self.callback(context)

    def __repr__(self):
        return f"CallbackProvider({self.callback!r})"


class ClassProvider(Provider):
    """Builds a class by resolving its constructor dependency slots in order."""

    __slots__ = ("cls",)

    def __init__(self, cls: type):
        self.cls = cls

    def provide(self, context: ResolveContext) -> Any:
        class_info = context.class_info.get_class_info(self.cls)
        class_name = self.cls.__name__

        # slots cover a positional prefix, anything the constructor needs past it has no metadata
        if requires_arguments(self.cls, len(class_info.parameters)):
            raise MissingParameterMetadataError(
                f"cannot automatically resolve class={class_name}. no constructor metadata found.",
                key=context.key,
                tag=context.tag,
                cls=self.cls,
            )

        if not class_info.parameters:
            return self.cls()

        slots = {p.index: p for p in class_info.parameters}
        values = []

        for index in range(len(class_info.parameters)):
            parameter = slots.get(index)
            try:
                if parameter is None:
                    raise InvalidParameterError(
                        f"cannot find parameter at index={index} from constructor metadata",
                        class_name=class_name,
                        parameter_index=index,
                    )

                if parameter.key is None:
                    raise InvalidParameterError(
                        f"invalid parameter key at index={index} from constructor metadata",
                        class_name=class_name,
                        parameter_name=parameter.name or get_parameter_name(self.cls, index),
                        parameter_index=index,
                    )

                values.append(context.resolve(parameter.key, parameter.tag))
            except Exception as ex:
                parameter_name = (parameter and parameter.name) or get_parameter_name(self.cls, index)
                raise ResolveError(
                    f"failed to inject parameter={parameter_name} for class={class_name}",
                    key=context.key,
                    tag=context.tag,
                    cls=self.cls,
                    parameter_name=parameter_name,
                    parameter_index=index,
                    parameter_key=parameter.key if parameter else None,
                ) from ex

        return self.cls(*values)

    def __repr__(self):
        return f"ClassProvider({self.cls.__name__})"


@dataclass(frozen=True)
class Registration:
    key: LookupKey
    provider: Provider
    lifetime: Lifetime = Lifetime.transient
    tag: str | None = None
    id: int = 0


class Registry:
    """Append only map from lookup key to registrations in insertion order."""

    def __init__(self):
        self._registrations: dict[LookupKey, list[Registration]] = {}

    def set(self, key: LookupKey, registration: Registration):
        self._registrations.setdefault(key, []).append(registration)

    def get(self, key: LookupKey, tag: str | None = None) -> Registration | None:
        registrations = self._registrations.get(key)
        if not registrations:
            return None

        if tag is None:
            return registrations[-1]

        # most recent registration for a tag wins, same as untagged overrides
        for registration in reversed(registrations):
            if registration.tag == tag:
                return registration
        return None

    def has(self, key: LookupKey, tag: str | None = None) -> bool:
        return self.get(key, tag) is not None

    def get_all(self, key: LookupKey) -> list[Registration]:
        return list(self._registrations.get(key, ()))

    def __contains__(self, key: LookupKey):
        return bool(self._registrations.get(key))

    def __len__(self):
        return len(self._registrations)


class Resolver(Protocol):
    def resolve(self, key: Any, tag: str | None = None) -> Any: ...

    def try_resolve(self, key: Any, tag: str | None = None, default: Any = None) -> Any: ...

    def resolve_all(self, key: Any) -> list[Any]: ...

    def get_resolver(self, key: Any, tag: str | None = None) -> Callable[[], Any]: ...


def _is_cached(value: Any) -> bool:
    if value is EMPTY:
        return False
    # a falsy cached value reads the same as a missing one and gets rebuilt
    try:
        return bool(value)
    except (TypeError, ValueError):
        return True


def _expected_to_be_scoped(key: Any, tag: str | None):
    def raise_error(_: ResolveContext):
        raise NeedsScopedRegistrationError(key, tag)

    return raise_error


class Container:
    """A scope in the container tree.

    The first container created is the root. Children are created with
    :meth:`create_scope`; each owns its registry and value cache and keeps a
    reference to its parent and to the root, never the other way round.
    """

    def __init__(self, parent: Container | None = None, *, class_info: ClassInfoProvider | None = None):
        if parent is not None and class_info is not None:
            raise ValueError("class_info can only be set on the root container")

        self._id = str(uuid4())
        self.parent = parent
        self.root: Container = parent.root if parent is not None else self
        self.registry = Registry()
        self._cache: dict[LookupKey, dict[str | None, Any]] = {}
        self._applied_bundles: set[str] = set()

        if parent is None:
            self.class_info = class_info if class_info is not None else ClassInfoProvider()
            self._registration_ids = itertools.count(1)
        else:
            self.class_info = parent.class_info

        self.add_registration(Registration(key=ClassKey(Container), provider=ValueProvider(self)))
        self.add_registration(Registration(key=ClassKey(Resolver), provider=ValueProvider(self)))

    @property
    def id(self):
        return self._id

    def _get_cached(self, key: LookupKey, tag: str | None) -> Any:
        values = self._cache.get(key)
        if values is None:
            return EMPTY
        return values.get(tag, EMPTY)

    def _set_cached(self, key: LookupKey, tag: str | None, value: Any):
        self._cache.setdefault(key, {})[tag] = value

    def _find_registration(self, key: LookupKey, tag: str | None) -> Registration | None:
        container: Container | None = self
        while container is not None:
            registration = container.registry.get(key, tag)
            if registration is not None:
                return registration
            container = container.parent
        return None

    @staticmethod
    def _can_auto_wire(key: LookupKey, tag: str | None) -> bool:
        return tag is None and isinstance(key, ClassKey) and is_constructible(key.value)

    def _activate(self, registration: Registration, key: LookupKey, tag: str | None, context: ResolveContext) -> Any:
        if registration.lifetime == Lifetime.transient:
            return registration.provider.provide(context)

        cache_owner = self.root if registration.lifetime == Lifetime.single else self

        value = cache_owner._get_cached(key, tag)
        if _is_cached(value):
            return value

        value = registration.provider.provide(context)
        cache_owner._set_cached(key, tag, value)
        return value

    def resolve(self, key: type[TService] | Any, tag: str | None = None) -> TService:
        lookup_key = get_lookup_key(key)
        context = ResolveContext(key=key, tag=tag, container=self)

        registration = self._find_registration(lookup_key, tag)
        if registration is not None:
            return self._activate(registration, lookup_key, tag, context)

        if self._can_auto_wire(lookup_key, tag):
            logger.debug("auto-wiring unregistered %s", key_to_string(lookup_key))
            return ClassProvider(lookup_key.value).provide(context)

        raise NotFoundError(
            f"no registration found for key={key_to_string(lookup_key)}, tag={tag}",
            key=key,
            tag=tag,
        )

    def try_resolve(self, key: type[TService] | Any, tag: str | None = None, default: Any = None) -> TService | Any:
        """
        Resolves ``key`` or returns ``default`` when nothing can answer it.
        Failures of nested dependencies still raise.
        """
        lookup_key = get_lookup_key(key)
        if self._find_registration(lookup_key, tag) is None and not self._can_auto_wire(lookup_key, tag):
            return default
        return self.resolve(key, tag)

    def resolve_all(self, key: type[TService] | Any) -> list[TService]:
        """
        Resolves every registration of ``key`` held by the nearest container that has any,
        in registration order.
        """
        lookup_key = get_lookup_key(key)
        values = []
        for registration in self.get_registrations(lookup_key):
            context = ResolveContext(key=key, tag=registration.tag, container=self)
            if self._find_registration(lookup_key, registration.tag) is registration:
                values.append(self._activate(registration, lookup_key, registration.tag, context))
            else:
                # shadowed registrations never own the (key, tag) cache slot
                values.append(registration.provider.provide(context))
        return values

    def get_registrations(self, key: Any) -> list[Registration]:
        """The registrations of ``key`` held by the nearest container that has any."""
        lookup_key = get_lookup_key(key)
        container: Container | None = self
        while container is not None:
            if registrations := container.registry.get_all(lookup_key):
                return registrations
            container = container.parent
        return []

    def get_resolver(self, key: type[TService] | Any, tag: str | None = None) -> Callable[[], TService]:
        get_lookup_key(key)

        def resolver():
            return self.resolve(key, tag)

        return resolver

    def has(self, key: Any, tag: str | None = None) -> bool:
        return self._find_registration(get_lookup_key(key), tag) is not None

    def add_registration(self, registration: Registration) -> Registration:
        registration = dataclasses.replace(
            registration,
            key=get_lookup_key(registration.key),
            id=next(self.root._registration_ids),
        )
        self.registry.set(registration.key, registration)
        logger.debug(
            "registered %s tag=%s lifetime=%s id=%s",
            key_to_string(registration.key),
            registration.tag,
            registration.lifetime.name,
            registration.id,
        )
        return registration

    def register(
        self,
        key: type[TService] | Any,
        implementation: type[TService] | None = None,
        *,
        factory: Callable[[ResolveContext], TService] | None = None,
        instance: TService | Any = EMPTY,
        provider: Provider | None = None,
        lifetime: Lifetime | None = None,
        tag: str | None = None,
    ) -> Container:
        lookup_key = get_lookup_key(key)

        if instance is not EMPTY:
            provider = ValueProvider(instance)
            lifetime = Lifetime.single if lifetime == Lifetime.single else Lifetime.scoped
        elif factory is not None:
            provider = CallbackProvider(factory)
        elif provider is None:
            cls = implementation
            if cls is None and isinstance(lookup_key, ClassKey):
                cls = lookup_key.value
            if cls is None or not is_class(cls):
                raise ValueError(f"no implementation, factory, instance or provider given for {key_to_string(key)}")
            provider = ClassProvider(cls)
            if lifetime is None:
                lifetime = self.class_info.get_class_info(cls).lifetime

        self.add_registration(
            Registration(
                key=lookup_key,
                provider=provider,
                lifetime=lifetime if lifetime is not None else Lifetime.transient,
                tag=tag,
            )
        )
        return self

    def expect_to_be_scoped(self, key: Any, tag: str | None = None) -> Container:
        """Registers a placeholder that fails unless a child scope overrides ``key``."""
        return self.register(key, factory=_expected_to_be_scoped(key, tag), tag=tag)

    def create_scope(self, configure: Callable[[Container], Any] | None = None) -> Container:
        scope = Container(parent=self)
        logger.debug("created scope %s with parent %s", scope.id, self.id)
        if configure is not None:
            configure(scope)
        return scope

    def apply_bundle(self, bundle_fn: Callable[[Container], None]) -> Container:
        bundle_fn(self)
        return self

    def mark_bundle_applied(self, bundle_identifier: str) -> Container:
        self._applied_bundles.add(bundle_identifier)
        return self

    def has_applied_bundle(self, bundle_identifier: str) -> bool:
        return bundle_identifier in self._applied_bundles
