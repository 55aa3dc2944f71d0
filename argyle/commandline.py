"""
Argyle commandline cursor processor (the parsing half of tab completion).

Naming used throughout the completion layer

    executable --option option_parameter argument

The commandline is split into words the way a POSIX shell would (shlex). Every word
but the executable is part of `argv`. Each decoded {key: value} is a pair.

Flow
- a marker ("<tab0>", "<tab1>", ...; the first one absent from the line) is spliced
  in at the cursor offset, so that after splitting the word under the cursor can be
  found again, and the value bound to it can be recognized after decoding;
- the line is split and the executable dropped;
- the position of the marked word and of the "--" terminator (math.inf when absent)
  tell whether an option name is being completed;
- otherwise argv is decoded again with every positional made optional and the
  automatic help disabled, and the pair holding the marker is the one to complete.
"""
import logging
import math
import shlex

from .converters import DelimitedConverter
from .decoding import Ok, decode_argv
from .definitions import Interior, Leaf, build
from .faults import InvariantViolatedError
from .utils import mirror

logger = logging.getLogger(__name__)

MARKER_TEMPLATE = "<tab%d>"
OPTIONS_TERMINATOR = "--"
LONG_OPTIONS_PREFIX = "--"


class CommandlineProcessor:
    """
    Marked argv of a partially typed commandline, plus the questions completion asks.

    Build instances through process(); the constructor takes an argv that already
    carries the marker.
    """
    processed_argv = mirror("processed_argv")
    marker = mirror("marker")
    definition = mirror("definition")

    def __init__(self, processed_argv, marker, definition):
        self._processed_argv = tuple(processed_argv)
        self._marker = marker
        self._definition = definition

    @classmethod
    def process(cls, commandline, cursor, definition):
        """
        Splice a fresh marker at `cursor` (clamped to the line), split, drop the executable.

        `definition` is a built node or anything argyle.definitions.build() accepts.
        Raises ValueError (from shlex) on unbalanced quotes.
        """
        if not isinstance(definition, Leaf | Interior):
            definition = build(*definition) if isinstance(definition, list | tuple) else build(definition)

        index = 0
        while (marker := MARKER_TEMPLATE % index) in commandline:
            index += 1

        cursor = max(0, min(int(cursor), len(commandline)))
        marked = commandline[:cursor] + marker + commandline[cursor:]
        return cls(shlex.split(marked)[1:], marker, definition)

    @property
    def marked_word_position(self):
        for position, word in enumerate(self._processed_argv):
            if self._marker in word:
                return position
        raise InvariantViolatedError("cursor marker %r not found in %r" % (self._marker, self._processed_argv))

    @property
    def options_terminator_position(self):
        try:
            return self._processed_argv.index(OPTIONS_TERMINATOR)
        except ValueError:
            return math.inf

    @property
    def completing_an_option(self):
        """
        The marked word is a long option name, before any "--" terminator.
        """
        position = self.marked_word_position
        return (
            self._processed_argv[position].startswith(LONG_OPTIONS_PREFIX) and
            position < self.options_terminator_position
        )

    @property
    def parsing_error(self):
        return self._decode() is None

    @property
    def completing_word_prefix(self):
        word = self._processed_argv[self.marked_word_position]
        return word.partition(self._marker)[0]

    @property
    def leaf(self):
        """
        Leaf addressed by the leading command words (None when they name no leaf).
        """
        node = self._definition
        for word in self._processed_argv:
            if isinstance(node, Leaf):
                break
            node = node.get(word)
            if node is None:
                return None
        return node if isinstance(node, Leaf) else None

    @property
    def command_names(self):
        """
        Command names valid where the marked word stands, when it is a command word.

        Empty for leaf definitions, and when the marked word is past the commands.
        """
        node = self._definition
        for word in self._processed_argv:
            if not isinstance(node, Interior):
                break
            if self._marker in word:
                return node.names
            node = node.get(word)
            if node is None:
                break
        return []

    @property
    def completing_a_command(self):
        position = self.marked_word_position
        return (
            not self._processed_argv[position].startswith("-") and
            bool(self.command_names)
        )

    def parsed_pairs(self):
        """
        Return (key, value_prefix, value_suffix, other_pairs) for the marked value.

        The key is the first non-boolean pair whose value holds the marker. A list
        value is searched element by element when it comes from a variadic
        positional (one shell word per element); a delimited option value is one
        shell word, so it is joined back with its delimiter. other_pairs is every
        other decoded pair.
        """
        pairs = self._decode()
        if pairs is None:
            raise InvariantViolatedError("the commandline does not decode")

        for key, value in pairs.items():
            if isinstance(value, bool):
                continue
            if isinstance(value, list):
                value = self._marked_word_value(key, value)
            if value is not None and self._marker in value:
                break
        else:
            raise InvariantViolatedError("no decoded value holds the cursor marker %r" % self._marker)

        prefix, _, suffix = value.partition(self._marker)
        others = {name: other for name, other in pairs.items() if name != key}
        return key, prefix, suffix, others

    def _marked_word_value(self, key, values):
        leaf = self.leaf
        option = next((option for option in leaf.options if option.key == key), None) if leaf else None
        if option is not None and isinstance(option.converter, DelimitedConverter):
            return option.converter.delimiter.join(values)
        return next((element for element in values if isinstance(element, str) and self._marker in element), None)

    def _decode(self):
        # every positional optional, so that incomplete lines decode too
        outcome = decode_argv(self._definition.relaxed(), self._processed_argv, auto_help=False)
        if not isinstance(outcome, Ok):
            logger.debug("relaxed decoding failed: %s", outcome)
            return None
        if isinstance(self._definition, Leaf):
            return outcome.value
        if not isinstance(outcome.value, tuple):
            # top-level help in a tree; nothing to complete
            return None

        path, pairs = outcome.value
        node = self._definition
        for name in path.split("."):
            node = node.get(name)
        if not isinstance(node, Leaf):
            # help below an interior command; nothing to complete either
            return None
        return pairs


__all__ = (
    "CommandlineProcessor",
)
