from typing import Any

from theutilitybelt.functional.utils import constant

from .core import ResolveContext


def use_registered(key: Any, tag: str | None = None):
    """Factory that answers with whatever ``key`` resolves to in the calling scope."""

    def factory(context: ResolveContext):
        return context.resolve(key, tag)

    return factory


def use_value(value: Any):
    return constant(value)


def create_tag_mapping(key: Any):
    """Factory building ``{tag: value}`` from the tagged registrations of ``key``."""

    def factory(context: ResolveContext):
        registrations = context.container.get_registrations(key)
        return {r.tag: context.resolve(key, r.tag) for r in registrations if r.tag is not None}

    return factory
