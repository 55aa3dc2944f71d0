"""
Argyle boundary wrapper: decode sys.argv (or any token list) and surface the outcome.

    from argyle import decode

    options = decode(
        ["-v", "--verbose"],
        ["-o", "--output FILE", "where to write"],
        "source",
        "[*targets]",
        long_help="Copies <source> to every target.",
    )

    command, options = decode({
        "push": [["-f", "--force"], "remote", {"long_help": "Push to a remote."}],
        "remote": {"add": ["name", "url"], "remove": ["name"]},
    })

Outcomes
- success: the decoded mapping, or a (dotted_path, mapping) tuple for command trees;
- help requested: the help text is printed to `output` and None is returned;
- failure: "Command error!: <message>" is printed and None is returned, or the
  CommandException is raised when raise_errors is set.

DefinitionError always propagates.
"""
import sys
from collections.abc import Mapping

from . import help
from .decoding import Err, Help, decode_argv
from .definitions import build
from .faults import trigger
from .utils import Unset, coalesce


def decode(*definition, arguments=Unset, long_help=None, auto_help=True, raise_errors=False, output=Unset):
    """
    Decode `arguments` (default: sys.argv[1:]) against `definition`.

    A single mapping is a command tree; otherwise every positional argument is a
    leaf entry (option list, positional string, or trailing {"long_help": ...}).
    """
    arguments = coalesce(arguments, sys.argv[1:])
    output = coalesce(output, sys.stdout)

    if len(definition) == 1 and isinstance(definition[0], Mapping):
        node = build(definition[0])
    else:
        node = build(*definition)

    match decode_argv(node, arguments, auto_help=auto_help, long_help=long_help):
        case Help(context):
            help.render(context, output)
            return None
        case Err(fault):
            trigger(fault, output=output, raise_errors=raise_errors, colorful=help.colorful(output))
            return None
        case outcome:
            return outcome.value


__all__ = (
    "decode",
)
