"""Constructor metadata used to auto-wire classes.

The container only ever asks a :class:`ClassInfoProvider` for the ordered
dependency slots of a class. Slots are either registered explicitly with
:meth:`ClassInfoProvider.set_parameters` or read from the class constructor:

    class Zul:
        def __init__(self, magic: Annotated[int, Inject(MagicKey)]):
            ...

Unmarked parameters use their annotation as the resolve key. Reflection stops at
the first parameter that has a default value and no ``Inject`` marker, so the
slots always form a positional prefix of the constructor.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from .keys import get_lookup_key, is_resolve_key

logger = logging.getLogger(__name__)

LIFETIME_ATTRIBUTE = "__tiny_ioc_lifetime__"

_POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
_VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class Inject:
    key: Any
    tag: str | None = None

    def __post_init__(self):
        get_lookup_key(self.key)


@dataclass(frozen=True)
class ParameterInfo:
    index: int
    key: Any
    tag: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class ClassResolveInfo:
    cls: type
    lifetime: Any = None
    parameters: tuple[ParameterInfo, ...] = field(default_factory=tuple)


def _signature(cls: type) -> inspect.Signature | None:
    try:
        return inspect.signature(cls)
    except (TypeError, ValueError):
        return None


def requires_arguments(cls: type, provided: int = 0) -> bool:
    """True if the constructor needs more than the first ``provided`` positional arguments."""
    signature = _signature(cls)
    if signature is None:
        return False
    remaining = list(signature.parameters.values())[provided:]
    return any(p.default is inspect.Parameter.empty and p.kind not in _VARIADIC_KINDS for p in remaining)


def get_parameter_name(cls: type, index: int) -> str:
    signature = _signature(cls)
    if signature is not None:
        names = [name for name, p in signature.parameters.items() if p.kind in _POSITIONAL_KINDS]
        if 0 <= index < len(names):
            return names[index]
    return f"parameter#{index}"


def _split_annotation(annotation: Any) -> tuple[Any, Inject | None]:
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        marker = next((m for m in metadata if isinstance(m, Inject)), None)
        return base, marker
    return annotation, None


def _is_usable_key(annotation: Any) -> bool:
    if isinstance(annotation, str) or annotation is inspect.Parameter.empty or annotation is Any:
        return False
    return is_resolve_key(annotation)


def _get_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls.__init__, include_extras=True)
    except (NameError, TypeError):
        logger.debug("could not evaluate constructor annotations of %s", cls.__name__, exc_info=True)
        return {}


def _reflect_parameters(target: type) -> Iterable[ParameterInfo]:
    signature = _signature(target)
    if signature is None:
        return

    hints = _get_hints(target)

    for index, (name, parameter) in enumerate(signature.parameters.items()):
        if parameter.kind not in _POSITIONAL_KINDS:
            return

        annotation = hints.get(name, parameter.annotation)
        base, marker = _split_annotation(annotation)

        if marker is not None:
            yield ParameterInfo(index=index, key=marker.key, tag=marker.tag, name=name)
            continue

        if parameter.default is not inspect.Parameter.empty:
            return

        key = base if _is_usable_key(base) else None
        yield ParameterInfo(index=index, key=key, name=name)


class ClassInfoProvider:
    """Side table from class to its dependency slots, memoized per instance."""

    def __init__(self):
        self._explicit: dict[type, tuple[ParameterInfo, ...]] = {}
        self._cache: dict[type, ClassResolveInfo] = {}

    def set_parameters(self, cls: type, *parameters: ParameterInfo | Any) -> ClassInfoProvider:
        """
        Registers the dependency slots of ``cls``, replacing what reflection would read.
        Each entry is a ``ParameterInfo``, an ``Inject`` marker, or a plain resolve key.
        """
        slots = []
        for index, parameter in enumerate(parameters):
            if isinstance(parameter, ParameterInfo):
                slots.append(parameter)
            elif isinstance(parameter, Inject):
                slots.append(ParameterInfo(index=index, key=parameter.key, tag=parameter.tag))
            else:
                slots.append(ParameterInfo(index=index, key=parameter))

        self._explicit[cls] = tuple(sorted(slots, key=lambda p: p.index))
        self._cache.pop(cls, None)
        return self

    def get_class_info(self, cls: type) -> ClassResolveInfo:
        if info := self._cache.get(cls):
            return info

        parameters = self._explicit.get(cls)
        if parameters is None:
            parameters = tuple(_reflect_parameters(cls))

        info = ClassResolveInfo(cls=cls, lifetime=vars(cls).get(LIFETIME_ATTRIBUTE), parameters=parameters)
        self._cache[cls] = info
        return info

    def get_parameters(self, cls: type) -> tuple[ParameterInfo, ...]:
        return self.get_class_info(cls).parameters

    def clear(self):
        self._explicit.clear()
        self._cache.clear()

    def __len__(self):
        return len(self._cache)
