"""Fluent registration API on top of :class:`tiny_ioc.core.Container`.

    builder = ContainerBuilder()
    builder.add_value("greeting", "hello")
    builder.add(lambda context: Connection(context.resolve("dsn"))).key(Connection).singleton()
    builder.add_class(Repository).scoped()
    container = builder.build()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .core import CallbackProvider, ClassProvider, Container, Lifetime, Provider, Registration, ValueProvider
from .errors import InvalidConstructorError
from .keys import LookupKey, get_lookup_key, is_class
from .reflection import LIFETIME_ATTRIBUTE, ClassInfoProvider


class RegistrationBuilder:
    def __init__(self):
        self._key: LookupKey | None = None
        self._provider: Provider | None = None
        self._lifetime: Lifetime | None = None
        self._tag: str | None = None

    def key(self, key: Any) -> RegistrationBuilder:
        self._key = get_lookup_key(key)
        return self

    def with_callback(self, callback: Callable[..., Any]) -> RegistrationBuilder:
        self._provider = CallbackProvider(callback)
        return self

    def with_value(self, value: Any) -> RegistrationBuilder:
        self._provider = ValueProvider(value)
        return self

    def with_class(self, cls: type) -> RegistrationBuilder:
        if not is_class(cls):
            raise InvalidConstructorError(cls)

        self._provider = ClassProvider(cls)
        if self._key is None:
            self._key = get_lookup_key(cls)
        if self._lifetime is None:
            self._lifetime = vars(cls).get(LIFETIME_ATTRIBUTE)
        return self

    def provider(self, provider: Provider) -> RegistrationBuilder:
        self._provider = provider
        return self

    def tag(self, tag: str) -> RegistrationBuilder:
        self._tag = tag
        return self

    def lifetime(self, lifetime: Lifetime) -> RegistrationBuilder:
        self._lifetime = lifetime
        return self

    def transient(self) -> RegistrationBuilder:
        return self.lifetime(Lifetime.transient)

    def scoped(self) -> RegistrationBuilder:
        return self.lifetime(Lifetime.scoped)

    def singleton(self) -> RegistrationBuilder:
        return self.lifetime(Lifetime.single)

    def build(self) -> Registration:
        if self._key is None:
            raise ValueError("registration has no key, call key() first")
        if self._provider is None:
            raise ValueError(f"registration for {self._key} has no provider")

        return Registration(
            key=self._key,
            provider=self._provider,
            lifetime=self._lifetime if self._lifetime is not None else Lifetime.transient,
            tag=self._tag,
        )


class ContainerBuilder:
    def __init__(self):
        self._entries: list[RegistrationBuilder | Registration] = []

    def _new_builder(self) -> RegistrationBuilder:
        builder = RegistrationBuilder()
        self._entries.append(builder)
        return builder

    def add(self, callback: Callable[..., Any] | None = None) -> RegistrationBuilder:
        builder = self._new_builder()
        if callback is not None:
            builder.with_callback(callback)
        return builder

    def add_value(self, key: Any, value: Any, tag: str | None = None) -> RegistrationBuilder:
        builder = self._new_builder().key(key).with_value(value).scoped()
        if tag is not None:
            builder.tag(tag)
        return builder

    def add_single(self, key: Any, value: Any) -> RegistrationBuilder:
        return self._new_builder().key(key).with_value(value).singleton()

    def add_class(self, cls: type, key: Any = None) -> RegistrationBuilder:
        builder = self._new_builder()
        if key is not None:
            builder.key(key)
        return builder.with_class(cls)

    def add_registration(self, registration: Registration) -> ContainerBuilder:
        self._entries.append(registration)
        return self

    def include(self, other: ContainerBuilder) -> ContainerBuilder:
        self._entries.extend(other._entries)
        return self

    def build_registrations(self) -> list[Registration]:
        return [e.build() if isinstance(e, RegistrationBuilder) else e for e in self._entries]

    def apply_to(self, container: Container) -> Container:
        for registration in self.build_registrations():
            container.add_registration(registration)
        return container

    def build(self, class_info: ClassInfoProvider | None = None) -> Container:
        return self.apply_to(Container(class_info=class_info))
