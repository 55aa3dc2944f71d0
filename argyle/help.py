"""
Argyle help rendering (rich-based, optparse-style layout).

What this module provides
- console(output): a rich Console bound to an arbitrary text sink.
- styler(colorful): palette lookup that degrades to "" when colors are off.
- format_options(options): the option summary block, as plain text. The decoding
  engine embeds it in its help outcome, so it has to stay free of any I/O.
- render(context, output): print a help outcome (leaf usage or command listing).

Layout
    Usage: tool command1 [options] <mandatory> [<optional>]
        -a
        -b                               "-b" description
        -c, --c-switch
        -e, --e-switch VALUE
        -h, --help                       Help

    This is the long help!

Styling
- Colors are applied only when the sink is a terminal; user overrides can be
  provided through a __styles__ mapping in __main__ (same hook as faults).
"""
import os.path
import sys
from collections import defaultdict

from rich.console import Console
from rich.text import Text

# Column layout of the option summary (left column width, indentation).
SUMMARY_WIDTH = 32
SUMMARY_INDENT = " " * 4


def console(output, /):
    """
    Return a Console writing to `output` without wrapping, markup or highlighting.
    """
    return Console(file=output, soft_wrap=True, highlight=False, markup=False, emoji=False)


def colorful(output, /):
    """
    Tell whether styles should be applied for `output` (only real terminals).
    """
    isatty = getattr(output, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:  # closed stream
        return False


def styler(colorful, /):
    """
    Build a style lookup: palette entry when colorful, empty style otherwise.
    """
    styles = defaultdict(str, {
        # usage line
        "usage-label": "bold #FF4D94",
        "program-name": "bold #E6E6F0",
        "command-name": "bold #36C5F0",
        "argument": "#FFD600",

        # option summary
        "option-name": "#00E6FF",
        "placeholder": "italic #FFD600",
        "description": "#9CA3AF",

        # long help and listings
        "long-help": "#D1D5DB",
        "commands-label": "bold #22C55E",

        # faults
        "error-title": "bold #FF4DA6",
        "error-message": "#C8C8D0",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def style(name):
        return styles[name] if colorful else ""

    return style


def program_name():
    """
    Name shown in the usage line (basename of the running script).
    """
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "-"


def _forms(option):
    placeholder = " " + option.placeholder if option.placeholder else ""
    if option.short and option.long:
        return "%s, %s%s" % (option.short, option.long, placeholder)
    if option.long:
        # keep long-only forms aligned with the long column
        return "    %s%s" % (option.long, placeholder)
    return option.short + placeholder


def format_options(options, /):
    """
    Render the option summary lines (one option per line, descriptions aligned).

    Options whose left column overflows SUMMARY_WIDTH get their description on
    the following line, aligned with the others.
    """
    lines = []
    for option in options:
        left = _forms(option)
        if not option.description:
            lines.append(SUMMARY_INDENT + left)
        elif len(left) > SUMMARY_WIDTH:
            lines.append(SUMMARY_INDENT + left)
            lines.append(SUMMARY_INDENT + " " * (SUMMARY_WIDTH + 1) + option.description)
        else:
            lines.append(SUMMARY_INDENT + left.ljust(SUMMARY_WIDTH) + " " + option.description)
    return "\n".join(lines)


def usage_arguments(positionals, /):
    """
    Render positionals for the usage line: <mandatory> [<optional>] <rest>... [<rest>...]
    """
    displays = []
    for positional in positionals:
        display = "<%s>%s" % (positional.name, "..." if positional.variadic else "")
        displays.append(display if positional.mandatory else "[%s]" % display)
    return " ".join(displays)


def _leaf(context, style):
    usage = Text()
    usage.append("Usage", style("usage-label")).append(": ")
    usage.append(program_name(), style("program-name"))
    for name in context.commands:
        usage.append(" ").append(name, style("command-name"))
    usage.append(" [options]")
    if arguments := usage_arguments(context.positionals):
        usage.append(" ").append(arguments, style("argument"))

    text = Text("\n").join([usage, Text(context.options_usage, style("description"))])
    if context.long_help:
        text.append("\n\n").append(context.long_help, style("long-help"))
    return text


def _commands(context, style):
    text = Text()
    text.append("Valid commands:", style("commands-label")).append("\n\n  ")
    text.append(", ".join(context.valid_commands), style("command-name"))
    return text


def render(context, output, /):
    """
    Print a help context to `output`.

    Contexts carrying `valid_commands` are command listings; every other context
    is a leaf usage (see argyle.decoding.LeafHelp / CommandsHelp).
    """
    style = styler(colorful(output))
    if hasattr(context, "valid_commands"):
        renderable = _commands(context, style)
    else:
        renderable = _leaf(context, style)
    console(output).print(renderable)


__all__ = (
    "console",
    "colorful",
    "styler",
    "program_name",
    "format_options",
    "usage_arguments",
    "render",
)
