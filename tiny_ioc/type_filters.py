import inspect

from theutilitybelt.functional.predicate import predicate

from .keys import is_class


def _is_abstract(t: type):
    return inspect.isabstract(t)


def _is_protocol(t: type):
    return bool(getattr(t, "_is_protocol", False))


is_abstract = predicate(_is_abstract)
is_protocol = predicate(_is_protocol)
is_class_type = predicate(is_class)

is_constructible = is_class_type & ~is_abstract & ~is_protocol
is_constructible.__doc__ = "Filter for classes the container can instantiate without a registration"
