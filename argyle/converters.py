"""
Option value converters (pluggable per OptionSpec).

A converter turns the raw string an option received into the value bound in the
result. Converters raise ValueError on input they refuse; the decoding engine
reports that as an InvalidArgumentError for the offending option.

Built-ins
- StringConverter: identity (the default).
- DelimitedConverter(delimiter): split into a list when the value contains the
  delimiter, keep the plain string otherwise. Selected automatically when the
  option placeholder shows a delimiter example ("--names A,B").
- BooleanConverter: strict "true"/"false".
- CallableConverter(function): adapt any one-argument callable (int, float, ...).

converter(object) normalizes what a definition entry may attach: the bool type,
a Converter instance, or a plain callable.
"""
import re

# Delimiter example inside a placeholder, e.g. "A,B" / "PATH:PATH" / "X;Y".
_DELIMITED_PLACEHOLDER = re.compile(r"\[?[^\s,:;\[\]]+(?P<delimiter>[,:;])[^\s\[\]]*\]?")


class Converter:
    """
    Base strategy. Subclasses implement __call__(value) -> converted value.
    """

    def __call__(self, value, /):
        raise NotImplementedError

    def __repr__(self):
        return "%s()" % type(self).__name__


class StringConverter(Converter):
    def __call__(self, value, /):
        return value


class DelimitedConverter(Converter):
    def __init__(self, delimiter, /):
        if not isinstance(delimiter, str) or not delimiter:
            raise TypeError("DelimitedConverter delimiter must be a non-empty string")
        self.delimiter = delimiter

    def __call__(self, value, /):
        if self.delimiter in value:
            return value.split(self.delimiter)
        return value

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self.delimiter)


class BooleanConverter(Converter):
    _VALUES = {"true": True, "false": False}

    def __call__(self, value, /):
        try:
            return self._VALUES[value]
        except KeyError:
            raise ValueError("expected 'true' or 'false', got %r" % value) from None


class CallableConverter(Converter):
    def __init__(self, function, /):
        if not callable(function):
            raise TypeError("CallableConverter argument must be callable")
        self.function = function

    def __call__(self, value, /):
        try:
            return self.function(value)
        except (TypeError, ValueError) as exception:
            raise ValueError(str(exception)) from exception

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, getattr(self.function, "__name__", repr(self.function)))


def delimiter_of(placeholder, /):
    """
    Return the delimiter shown by a placeholder example ("A,B" -> ","), or None.
    """
    if placeholder and (match := _DELIMITED_PLACEHOLDER.fullmatch(placeholder)):
        return match["delimiter"]
    return None


def converter(object, /):
    """
    Normalize an attached type into a Converter.

    - bool        -> BooleanConverter()
    - Converter   -> itself
    - callable    -> CallableConverter(callable)
    """
    if object is bool:
        return BooleanConverter()
    if isinstance(object, Converter):
        return object
    if callable(object):
        return CallableConverter(object)
    raise TypeError("converter() argument must be bool, a Converter or a callable")


__all__ = (
    "Converter",
    "StringConverter",
    "DelimitedConverter",
    "BooleanConverter",
    "CallableConverter",
    "delimiter_of",
    "converter",
)
