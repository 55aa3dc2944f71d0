"""
Argyle faults (decoding failures) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing failure, grouped by
  domain (routing, options, positionals).
- CommandException and its kinds: carry a message plus read-only options, know how
  to render themselves (rich) and how to surface (print or raise).
- DefinitionError: an author mistake in the declarative definition. Never part of
  the user-facing flow; raised eagerly while building.
- InvariantViolatedError: internal consistency guard of the completion layer.
- ConfigurationError: configuration file and value encryption problems.
- trigger(): central entry point to surface a fault with runtime options
  (output sink, raise_errors).

Taxonomy
- InvalidCommandError: missing or unknown command name; carries valid_commands.
- ArgumentError: positional arity problems ("Missing mandatory argument(s)",
  "Too many arguments").
- OptionError: the option-parsing family, distinct from ArgumentError:
  InvalidOptionError, MissingOptionValueError, NeedlessOptionValueError,
  InvalidArgumentError (converter refused the value).

The decoding engine never calls trigger(); it returns faults as tagged outcomes
and leaves the decision to the boundary (argyle.argv).
"""
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .help import console, styler
from .utils import Unset, coalesce


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (211xx): MISSING_COMMAND, INVALID_COMMAND
    - options (212xx): INVALID_OPTION, MISSING_OPTION_VALUE, NEEDLESS_OPTION_VALUE,
      INVALID_ARGUMENT
    - positionals (213xx): MISSING_ARGUMENTS, TOO_MANY_ARGUMENTS
    """
    # --- routing ---
    MISSING_COMMAND       = 21101
    INVALID_COMMAND       = 21102

    # --- options ---
    INVALID_OPTION        = 21201
    MISSING_OPTION_VALUE  = 21202
    NEEDLESS_OPTION_VALUE = 21203
    INVALID_ARGUMENT      = 21204

    # --- positionals ---
    MISSING_ARGUMENTS     = 21301
    TOO_MANY_ARGUMENTS    = 21302


class DefinitionError(ValueError):
    """
    The declarative definition itself is wrong (author mistake).

    Raised while building the definition model, before any token is looked at:
    unrecognized entries, malformed placeholders, duplicated keys, misplaced
    varargs. It never goes through trigger() and is never downgraded.
    """


class InvariantViolatedError(RuntimeError):
    """
    An internal consistency check failed (a bug, not a user-input error).
    """


class ConfigurationError(Exception):
    """
    Configuration file problems: missing required keys, unknown keys or groups,
    unreadable files, encryption without a key, undecryptable values.
    """


class CommandException(Exception):
    """
    Base type of every user-facing decoding failure.

    - message: the short, human-readable reason ("Too many arguments").
    - options: read-only mapping with the fault code and any runtime context
      merged in by trigger() (output, raise_errors).
    """
    __faultcode__ = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).__faultcode__} | options)

    def __str__(self):
        return self.message

    @property
    def code(self):
        return self.options["code"]

    def __rich__(self):
        style = styler(self.options.get("colorful", False))
        return Text.assemble(
            ("Command error!", style("error-title")),
            ": ",
            (self.message, style("error-message")),
        )

    def __trigger__(self):
        if self.options.get("raise_errors", False):
            raise self from None
        console(coalesce(self.options.get("output", Unset), sys.stdout)).print(self)

    def __replace__(self, /, **overrides):
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__traceback__ = self.__traceback__
        return fault


class InvalidCommandError(CommandException):
    """
    The command token is missing or unknown at the current level.

    valid_commands lists the names accepted at that level, in definition order.
    """
    __faultcode__ = FaultCode.INVALID_COMMAND

    def __init__(self, message, /, valid_commands=(), **options):
        super().__init__(message, valid_commands=tuple(valid_commands), **options)

    @property
    def valid_commands(self):
        return list(self.options["valid_commands"])

    def __rich__(self):
        style = styler(self.options.get("colorful", False))
        renders = [super().__rich__()]
        renders.extend(Text(name, style("command-name")) for name in self.options["valid_commands"])
        return Group(*renders)


class ArgumentError(CommandException):
    __faultcode__ = FaultCode.MISSING_ARGUMENTS


class OptionError(CommandException):
    __faultcode__ = FaultCode.INVALID_OPTION


class InvalidOptionError(OptionError):
    __faultcode__ = FaultCode.INVALID_OPTION


class MissingOptionValueError(OptionError):
    __faultcode__ = FaultCode.MISSING_OPTION_VALUE


class NeedlessOptionValueError(OptionError):
    __faultcode__ = FaultCode.NEEDLESS_OPTION_VALUE


class InvalidArgumentError(OptionError):
    __faultcode__ = FaultCode.INVALID_ARGUMENT


def trigger(fault, /, **options):
    """
    Surface `fault` with runtime options merged in (see CommandException).

    Recognized options: output (text sink, default sys.stdout), colorful,
    raise_errors (raise instead of printing).
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must implement __trigger__ and __replace__")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "DefinitionError",
    "InvariantViolatedError",
    "ConfigurationError",
    "CommandException",
    "InvalidCommandError",
    "ArgumentError",
    "OptionError",
    "InvalidOptionError",
    "MissingOptionValueError",
    "NeedlessOptionValueError",
    "InvalidArgumentError",
    "trigger",
)
