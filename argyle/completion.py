"""
Argyle tab completion: answer "what can follow the cursor" for a shell.

Wiring (bash)

    complete -C 'mytool' mytool

bash then runs `mytool` with COMP_LINE/COMP_POINT set; the script builds a
TabCompletion with its own definition and calls complete() on an object
providing the value candidates:

    class Candidates:
        def output(self, prefix, suffix, pairs):
            return [path for path in os.listdir() if path.startswith(prefix)]

    if "COMP_LINE" in os.environ:
        TabCompletion(["-o", "--output FILE"], "[source]").complete(Candidates())

Cases
- completing a long option name ("--ou<tab>"): declared long names starting with
  the typed prefix (the synthetic --help is never offered);
- completing a command name in a command tree ("pu<tab>"): the command names of
  that level starting with the typed prefix;
- the line does not decode (unknown option, too many arguments, ...): nothing;
- completing a value: target.<key>(prefix, suffix, other_pairs) returns the
  candidates, written as they are (no sorting, no deduplication). A delimited
  option value ("--tags alpha,b") is passed whole, since the shell replaces the
  whole word.

Values of options with a strict converter (bool, int, ...) are never completed:
the partial word under the cursor does not convert, so the line counts as a
parsing error and nothing is written.

Entries are written joined by newlines, without a trailing newline.
"""
import logging
import os
import sys

from .commandline import CommandlineProcessor
from .definitions import Interior, Leaf, build
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class TabCompletion:
    """
    Completion resolver bound to a definition and an output sink.
    """

    def __init__(self, *definition, output=Unset):
        if len(definition) == 1 and isinstance(definition[0], Leaf | Interior):
            self.definition = definition[0]
        else:
            self.definition = build(*definition)
        self.output = coalesce(output, sys.stdout)

    def complete(self, target, commandline=Unset, cursor=Unset):
        """
        Write the candidates for the commandline/cursor pair and return them.

        Defaults: COMP_LINE and COMP_POINT from the environment (bash conventions).
        """
        commandline = coalesce(commandline, os.environ.get("COMP_LINE", ""))
        cursor = int(coalesce(cursor, os.environ.get("COMP_POINT", len(commandline))))

        processor = CommandlineProcessor.process(commandline, cursor, self.definition)

        if processor.completing_an_option:
            logger.debug("completing an option name")
            return self._write(self._complete_option(processor))
        if processor.completing_a_command:
            logger.debug("completing a command name")
            return self._write(self._complete_command(processor))
        if processor.parsing_error:
            logger.debug("commandline does not decode, no candidates")
            return []

        logger.debug("completing a value")
        return self._write(self._complete_value(processor, target))

    def _complete_option(self, processor):
        leaf = processor.leaf
        if not isinstance(leaf, Leaf):
            return []
        prefix = processor.completing_word_prefix
        return [name for name in leaf.long_names if name.startswith(prefix)]

    def _complete_command(self, processor):
        prefix = processor.completing_word_prefix
        return [name for name in processor.command_names if name.startswith(prefix)]

    def _complete_value(self, processor, target):
        key, prefix, suffix, pairs = processor.parsed_pairs()
        return list(getattr(target, key)(prefix, suffix, pairs))

    def _write(self, entries):
        self.output.write("\n".join(entries))
        return entries


__all__ = (
    "TabCompletion",
)
