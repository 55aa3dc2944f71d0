"""
Argyle utilities shared by the definition, decoding and completion layers.

- Unset: "argument not given", for parameters where None already means something
  (long_help=None disables the long help, Unset falls back to the default).
- coalesce(value, default): resolve Unset, keep everything else as is.
- rename("name"): decorator naming generated functions.
- mirror("attr"): read-only property over self._attr returning detached copies.
"""
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset singleton (falsey, prints as "Unset").
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return type(self), ()


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    `default` if `object` is Unset, else `object` (None, 0 and "" included).
    """
    return default if object is Unset else object


def rename(name, /):
    """
    Decorator setting __name__ and __qualname__ of a generated function.
    """
    if not isinstance(name, str):
        raise TypeError("rename() argument must be a string")

    def decorator(function):
        function.__name__ = function.__qualname__ = name
        return function

    return decorator


def _detach(object):
    # strings and bytes are sequences, but immutable ones
    if isinstance(object, str | bytes):
        return object
    if isinstance(object, tuple):
        return tuple(_detach(item) for item in object)
    if isinstance(object, Sequence):
        return [_detach(item) for item in object]
    if isinstance(object, Mapping):
        return {key: _detach(value) for key, value in object.items()}
    if isinstance(object, Set):
        return frozenset(_detach(item) for item in object)
    return object


def mirror(name, /):
    """
    Property exposing `self._<name>`; containers come out as fresh copies.
    """

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter, doc="Read-only view of %r." % name)


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
)
