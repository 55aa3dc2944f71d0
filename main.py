import os

from rich.pretty import pprint

from argyle import TabCompletion, decode

DEFINITION = (
    ["-v", "--verbose", "Print what is being done"],
    ["-f", "--format FORMAT", "Output format (json, yaml)"],
    ["-t", "--tags A,B", "Comma separated tags"],
    "source",
    "[*targets]",
    {"long_help": "Copies <source> to every target."},
)


class Candidates:
    def format(self, prefix, suffix, pairs):
        return [name for name in ("json", "yaml") if name.startswith(prefix)]

    def source(self, prefix, suffix, pairs):
        return sorted(name for name in os.listdir() if name.startswith(prefix))

    targets = source

    def tags(self, prefix, suffix, pairs):
        return []


if __name__ == '__main__':
    if "COMP_LINE" in os.environ:
        TabCompletion(*DEFINITION).complete(Candidates())
    elif (options := decode(*DEFINITION)) is not None:
        pprint(options)
