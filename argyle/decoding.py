"""
Argyle decoding engine: turn a definition and a token list into a tagged outcome.

What this module provides
- decode_argv(definition, argv, *, auto_help=True, long_help=None)
  • Returns exactly one of:
      Ok(value)      leaf -> {key: value}; command tree -> ("a.b", {key: value})
      Help(context)  LeafHelp(...) or CommandsHelp(...), to be rendered by the caller
      Err(fault)     a CommandException (see argyle.faults)
  • Never writes output, never exits, never mutates `argv`.

Option scanning (OptionParser-like)
- "--" ends options, a lone "-" is positional, options and positionals interleave.
- "--name", "--name=value", "--name value"; exact long names only.
- "-a", "-ab" (cluster), "-ev_swt" (attached value), "-e v_swt" (spaced value).
- required values take the next token whatever it looks like; optional values take
  it only when it does not start with "-".

Positional binding
- fixed positionals are zipped left to right, unsupplied optional ones are omitted;
- a trailing variadic positional receives the remainder as a list.

Help
- auto_help=True: the synthetic -h/--help stops decoding and yields Help.
- auto_help=False: --help binds help=True; the rest of the line must still be valid
  (failures win over the help request). At the command level the help token
  short-circuits to {"help": True}.

Per-call state lives in an immutable Context threaded through the recursion, so the
engine is re-entrant.
"""
import logging
from collections import deque, namedtuple
from collections.abc import Mapping

from .definitions import HELP_FORMS, HELP_KEY, Interior, Leaf, build
from .faults import (
    ArgumentError,
    CommandException,
    FaultCode,
    InvalidArgumentError,
    InvalidCommandError,
    InvalidOptionError,
    MissingOptionValueError,
    NeedlessOptionValueError,
)
from .help import format_options

logger = logging.getLogger(__name__)

Ok = namedtuple("Ok", ("value",))
Help = namedtuple("Help", ("context",))
Err = namedtuple("Err", ("fault",))

LeafHelp = namedtuple("LeafHelp", ("commands", "positionals", "options_usage", "long_help"))
CommandsHelp = namedtuple("CommandsHelp", ("commands", "valid_commands"))

Context = namedtuple("Context", ("auto_help", "commands", "long_help"))


def _bind(result, option, form, value):
    try:
        result[option.key] = option.convert(value)
    except ValueError:
        raise InvalidArgumentError("invalid argument: %s %s" % (form, value)) from None


def _long(leaf, token, tokens, result, context):
    """
    Consume one long option; return True when it is the help request.
    """
    name, equals, inline = token.partition("=")
    option = leaf.lookup(name)
    if option is None:
        raise InvalidOptionError("invalid option: %s" % name)
    if option is leaf.help_option and context.auto_help:
        return True

    if not option.takes_value:
        if equals:
            raise NeedlessOptionValueError("needless argument: %s" % token)
        _bind(result, option, name, None)
        return False

    if equals:
        value = inline
    elif option.optional_value:
        value = tokens.popleft() if tokens and not tokens[0].startswith("-") else None
    elif tokens:
        value = tokens.popleft()
    else:
        raise MissingOptionValueError("missing argument: %s" % name)
    _bind(result, option, name, value)
    return False


def _short(leaf, token, tokens, result, context):
    """
    Consume a short option cluster; return True when it holds the help request.
    """
    index = 1
    while index < len(token):
        form = "-" + token[index]
        option = leaf.lookup(form)
        if option is None:
            raise InvalidOptionError("invalid option: %s" % form)
        if option is leaf.help_option and context.auto_help:
            return True

        if not option.takes_value:
            _bind(result, option, form, None)
            index += 1
            continue

        # the rest of the cluster is the value
        if attached := token[index + 1:]:
            value = attached
        elif option.optional_value:
            value = tokens.popleft() if tokens and not tokens[0].startswith("-") else None
        elif tokens:
            value = tokens.popleft()
        else:
            raise MissingOptionValueError("missing argument: %s" % form)
        _bind(result, option, form, value)
        break
    return False


def _positionals(leaf, values, result):
    positionals = leaf.positionals
    variadic = positionals[-1] if positionals and positionals[-1].variadic else None
    fixed = positionals[:-1] if variadic else positionals

    mandatory = sum(positional.mandatory for positional in positionals)
    if len(values) < mandatory:
        raise ArgumentError("Missing mandatory argument(s)")
    if variadic is None and len(values) > len(fixed):
        raise ArgumentError("Too many arguments", code=FaultCode.TOO_MANY_ARGUMENTS)
    # optional fixed positionals are filled first, they may leave the variadic empty
    if variadic is not None and variadic.mandatory and len(values) <= len(fixed):
        raise ArgumentError("Missing mandatory argument(s)")

    for positional, value in zip(fixed, values):
        result[positional.key] = value
    if variadic is not None:
        result[variadic.key] = list(values[len(fixed):])


def _scan(leaf, argv, context):
    # options are bound into the result, positional tokens are collected in order
    tokens = deque(argv)
    result = {}
    values = []
    while tokens:
        token = tokens.popleft()
        if token == "--":
            values.extend(tokens)
            break
        if token.startswith("--"):
            help_requested = _long(leaf, token, tokens, result, context)
        elif token.startswith("-") and token != "-":
            help_requested = _short(leaf, token, tokens, result, context)
        else:
            values.append(token)
            continue
        if help_requested:
            return None, None
    return result, values


def _decode_leaf(leaf, argv, context):
    long_help = leaf.long_help if leaf.long_help is not None else context.long_help

    try:
        result, values = _scan(leaf, argv, context)
        if result is None:
            logger.debug("help requested for %r", context.commands)
            return Help(LeafHelp(
                context.commands,
                leaf.positionals,
                format_options(leaf.summary),
                long_help,
            ))
        _positionals(leaf, values, result)
    except CommandException as fault:
        logger.debug("decoding failed for %r: %s", context.commands, fault)
        return Err(fault)

    if context.commands:
        return Ok((".".join(context.commands), result))
    return Ok(result)


def _dispatch(node, argv, context):
    if isinstance(node, Leaf):
        return _decode_leaf(node, argv, context)

    names = node.names
    if not argv:
        return Err(InvalidCommandError("Missing command", valid_commands=names, code=FaultCode.MISSING_COMMAND))

    token = argv[0]
    if token in HELP_FORMS:
        if context.auto_help:
            return Help(CommandsHelp(context.commands, names))
        if context.commands:
            return Ok((".".join(context.commands), {HELP_KEY: True}))
        return Ok({HELP_KEY: True})

    child = node.get(token)
    if child is None:
        return Err(InvalidCommandError("Invalid command: %s" % token, valid_commands=names))

    logger.debug("dispatching %r below %r", token, context.commands)
    return _dispatch(child, argv[1:], context._replace(commands=context.commands + (token,)))


def decode_argv(definition, argv, *, auto_help=True, long_help=None):
    """
    Decode `argv` against `definition` and return Ok, Help or Err.

    `definition` may be a built node (Leaf/Interior), a command mapping, or a list
    of leaf entries. DefinitionError propagates: it is an author mistake, not a
    decoding outcome.
    """
    if isinstance(definition, Leaf | Interior):
        node = definition
    elif isinstance(definition, Mapping):
        node = build(definition)
    else:
        node = build(*definition)

    return _dispatch(node, tuple(argv), Context(auto_help, (), long_help))


__all__ = (
    "Ok",
    "Help",
    "Err",
    "LeafHelp",
    "CommandsHelp",
    "decode_argv",
)
