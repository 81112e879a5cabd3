from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from .core import Lifetime
from .errors import InvalidConstructorError
from .keys import is_class
from .reflection import LIFETIME_ATTRIBUTE

TClass = TypeVar("TClass", bound=type)


def injectable(lifetime: Lifetime | None = None) -> Callable[[TClass], TClass]:
    """
    Marks a class as a service. The optional lifetime is used when the class is
    registered without an explicit one.
    """

    def decorator(target: TClass) -> TClass:
        if not is_class(target):
            raise InvalidConstructorError(target, f"injectable can only decorate classes, target={target!r}")
        if lifetime is not None:
            setattr(target, LIFETIME_ATTRIBUTE, lifetime)
        return target

    return decorator


def singleton() -> Callable[[TClass], TClass]:
    return injectable(Lifetime.single)


def scoped() -> Callable[[TClass], TClass]:
    return injectable(Lifetime.scoped)


def transient() -> Callable[[TClass], TClass]:
    return injectable(Lifetime.transient)
