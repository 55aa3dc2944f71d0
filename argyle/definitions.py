r"""
Argyle definition model (declarative grammar, data only).

Grammar accepted by build()
- Option entry:     ["-e", "--e-switch VALUE", "description", <converter>]
  • any subset of: one short form, one long form, one description, one converter;
    at least one flag form is required.
  • placeholder (after the flag, separated by a space or "="):
      VALUE      required value
      [VALUE]    optional value
      A,B        required value, split on the shown delimiter (",", ":" or ";")
  • converter: bool (strict "true"/"false"), a Converter, or any one-argument callable.
- Positional entry: "name" (mandatory), "[name]" (optional), "*name" (variadic,
  mandatory), "[*name]" (variadic, optional).
- Long help:        {"long_help": "..."} as the last element of a leaf.
- Command tree:     {"name": [leaf entries...] | {nested tree}, ...}

Specs
- OptionSpec: flag forms, placeholder, converter, description; binding key from the
  long form ("--e-switch" -> "e_switch"), else from the short form ("-a" -> "a").
- PositionalSpec: name, mandatory, variadic.
- Leaf: options + positionals + long help, with the synthetic -h/--help option.
- Interior: ordered mapping of command name -> Leaf | Interior.

Validation highlights (raise DefinitionError)
- unrecognized entries and malformed forms/placeholders;
- duplicated binding keys within a leaf (options and positionals share them);
- more than one variadic positional, or a variadic positional that is not last.

All specs are immutable: fields are exposed through read-only properties that hand
out copies (see SpecType).
"""
import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from .converters import Converter, DelimitedConverter, StringConverter, converter, delimiter_of
from .faults import DefinitionError
from .utils import Unset, mirror

_SHORT = re.compile(r"(?P<flag>-[^\s-])\s*(?P<placeholder>\S+)?")
_LONG = re.compile(r"(?P<flag>--[^\s=\[]+)(?:(?:=|\s+)(?P<placeholder>\S+))?")
_POSITIONAL = re.compile(r"(?P<open>\[)?(?P<variadic>\*)?(?P<name>[^\s\[\]*]+)(?P<close>\])?")

HELP_FORMS = ("-h", "--help")
HELP_KEY = "help"


class SpecType(type):
    """
    Metaclass of the specs: mirrors every __introspectable__ field as a read-only
    property over "_<field>" and derives __typename__ ("OptionSpec" -> "option-spec").
    """

    def __new__(cls, name, bases, namespace, **options):
        namespace = dict(namespace)
        namespace.setdefault("__typename__", re.sub(r"(?<=[a-z])(?=[A-Z])", "-", name).lower())
        for field in namespace.get("__introspectable__", ()):
            namespace[field] = mirror(field)
        return super().__new__(cls, name, bases, namespace, **options)


class Spec(metaclass=SpecType):
    __introspectable__ = ()

    def __rich_repr__(self):
        for field in type(self).__introspectable__:
            yield field, getattr(self, field)

    def __repr__(self):
        return "%s(%s)" % (type(self).__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


class OptionSpec(Spec):
    """
    Named option, with or without a value.

    Parameters
    - short: "-x" or None.
    - long: "--name" or None (at least one of short/long).
    - placeholder: None (flag), "VALUE" (required) or "[VALUE]" (optional).
    - converter: Unset (string, or delimiter split when the placeholder shows one),
      or anything accepted by argyle.converters.converter().
    - description: one-line help text or None.
    """
    __introspectable__ = (
        "short",
        "long",
        "placeholder",
        "converter",
        "description",
    )

    def __init__(self, short=None, long=None, placeholder=None, converter=Unset, description=None):
        if short is None and long is None:
            raise DefinitionError("option must have a short or a long form")
        if short is not None and not re.fullmatch(r"-[^\s-]", str(short)):
            raise DefinitionError("invalid short option form: %r" % (short,))
        if long is not None and not re.fullmatch(r"--[^\s=\[\]]+", str(long)):
            raise DefinitionError("invalid long option form: %r" % (long,))
        if placeholder is not None and not re.fullmatch(r"\[\S+\]|[^\s\[\]]+", str(placeholder)):
            raise DefinitionError("invalid option placeholder: %r" % (placeholder,))
        if description is not None and not isinstance(description, str):
            raise DefinitionError("option description must be a string")

        if converter is not Unset:
            if placeholder is None:
                raise DefinitionError("option %s cannot convert a value it does not take" % (long or short))
            try:
                converter = _converter(converter)
            except TypeError as exception:
                raise DefinitionError(str(exception)) from None
        elif delimiter := delimiter_of(placeholder):
            converter = DelimitedConverter(delimiter)
        else:
            converter = StringConverter()

        self._short = short
        self._long = long
        self._placeholder = placeholder
        self._converter = converter
        self._description = description

    @classmethod
    def from_entry(cls, entry, /):
        """
        Build an OptionSpec from a grammar entry (list/tuple).
        """
        fields = {}

        def assign(name, value):
            if name in fields:
                raise DefinitionError("option entry %r has more than one %s" % (list(entry), name))
            fields[name] = value

        for element in entry:
            if isinstance(element, str) and element.startswith("--"):
                if not (match := _LONG.fullmatch(element.strip())):
                    raise DefinitionError("invalid long option form: %r" % element)
                assign("long", match["flag"])
                if match["placeholder"]:
                    fields["placeholder"] = match["placeholder"]
            elif isinstance(element, str) and element.startswith("-"):
                if not (match := _SHORT.fullmatch(element.strip())):
                    raise DefinitionError("invalid short option form: %r" % element)
                assign("short", match["flag"])
                if match["placeholder"]:
                    fields.setdefault("placeholder", match["placeholder"])
            elif isinstance(element, str):
                assign("description", element)
            elif element is not None:
                assign("converter", element)

        if "short" not in fields and "long" not in fields:
            raise DefinitionError("Unrecognized value: %r" % (list(entry),))
        return cls(**fields)

    @property
    def key(self):
        """
        Binding key: long form without dashes (inner dashes -> "_"), else short letter.
        """
        if self._long:
            return self._long[2:].replace("-", "_")
        return self._short[1:]

    @property
    def forms(self):
        return tuple(form for form in (self._short, self._long) if form)

    @property
    def takes_value(self):
        return self._placeholder is not None

    @property
    def optional_value(self):
        return bool(self._placeholder) and self._placeholder.startswith("[")

    def convert(self, value, /):
        """
        Value to bind: True when no value was given, the converted value otherwise.

        Raises ValueError when the converter refuses the value.
        """
        if value is None:
            return True
        return self._converter(value)


class PositionalSpec(Spec):
    __introspectable__ = (
        "name",
        "mandatory",
        "variadic",
    )

    def __init__(self, name, mandatory=True, variadic=False):
        if not isinstance(name, str) or not re.fullmatch(r"[^\s\[\]*]+", name):
            raise DefinitionError("invalid positional name: %r" % (name,))
        self._name = name
        self._mandatory = bool(mandatory)
        self._variadic = bool(variadic)

    @classmethod
    def from_entry(cls, entry, /):
        """
        Build a PositionalSpec from "name", "[name]", "*name" or "[*name]".
        """
        match = _POSITIONAL.fullmatch(entry.strip())
        if not match or bool(match["open"]) != bool(match["close"]):
            raise DefinitionError("invalid positional definition: %r" % entry)
        return cls(match["name"], mandatory=not match["open"], variadic=bool(match["variadic"]))

    @property
    def key(self):
        return self._name

    def relaxed(self):
        """
        Same positional, made optional.
        """
        return type(self)(self._name, mandatory=False, variadic=self._variadic)


class Leaf(Spec):
    """
    Command-tree node without sub-commands: options, positionals and long help.

    The synthetic help option (-h/--help, key "help") is added for every form the
    author did not claim.
    """
    __introspectable__ = (
        "options",
        "positionals",
        "long_help",
    )

    def __init__(self, options=(), positionals=(), long_help=None):
        options = tuple(options)
        positionals = tuple(positionals)

        if not all(isinstance(option, OptionSpec) for option in options):
            raise DefinitionError("leaf options must be option specs")
        if not all(isinstance(positional, PositionalSpec) for positional in positionals):
            raise DefinitionError("leaf positionals must be positional specs")
        if long_help is not None and not isinstance(long_help, str):
            raise DefinitionError("long help must be a string")

        keys = set()
        for spec in (*options, *positionals):
            if spec.key in keys:
                raise DefinitionError("duplicated key %r" % spec.key)
            keys.add(spec.key)

        forms = set()
        for option in options:
            for form in option.forms:
                if form in forms:
                    raise DefinitionError("duplicated option form %r" % form)
                forms.add(form)

        variadics = [index for index, positional in enumerate(positionals) if positional.variadic]
        if len(variadics) > 1:
            raise DefinitionError("at most one variadic positional is allowed")
        if variadics and variadics[0] != len(positionals) - 1:
            raise DefinitionError("the variadic positional must be the last one")

        self._options = options
        self._positionals = positionals
        self._long_help = long_help

        # help is registered last, only for the forms nobody claimed
        claimed = [form for form in HELP_FORMS if form not in forms]
        self._help = OptionSpec(*(form if form in claimed else None for form in HELP_FORMS), description="Help") if claimed else None
        self._table = MappingProxyType({
            **{form: option for option in options for form in option.forms},
            **({form: self._help for form in claimed}),
        })

    @property
    def help_option(self):
        return self._help

    @property
    def summary(self):
        """
        Options in help order: the declared ones, then the synthetic help.
        """
        return self._options + ((self._help,) if self._help else ())

    @property
    def long_names(self):
        """
        Declared long option names, in definition order (synthetic help excluded).
        """
        return [option.long for option in self._options if option.long]

    def lookup(self, form, /):
        """
        Return the OptionSpec registered for a flag form, or None.
        """
        return self._table.get(form)

    def relaxed(self):
        return type(self)(self._options, [positional.relaxed() for positional in self._positionals], self._long_help)


class Interior(Spec):
    """
    Command-tree node mapping command names to further nodes (definition order kept).
    """
    __introspectable__ = (
        "commands",
    )

    def __init__(self, commands):
        if not isinstance(commands, Mapping):
            raise DefinitionError("commands must be a mapping")
        for name, node in commands.items():
            if not isinstance(name, str) or not name or name.startswith("-"):
                raise DefinitionError("invalid command name: %r" % (name,))
            if not isinstance(node, Leaf | Interior):
                raise DefinitionError("command %r must map to a leaf or to nested commands" % name)
        self._commands = MappingProxyType(dict(commands))

    @property
    def names(self):
        return list(self._commands)

    def get(self, name, /):
        return self._commands.get(name)

    def relaxed(self):
        return type(self)({name: node.relaxed() for name, node in self._commands.items()})


def _converter(object):
    return object if isinstance(object, Converter) else converter(object)


def _leaf(entries):
    options = []
    positionals = []
    long_help = None

    for index, entry in enumerate(entries):
        if isinstance(entry, OptionSpec):
            options.append(entry)
        elif isinstance(entry, PositionalSpec):
            positionals.append(entry)
        elif isinstance(entry, str):
            positionals.append(PositionalSpec.from_entry(entry))
        elif isinstance(entry, Sequence):
            options.append(OptionSpec.from_entry(entry))
        elif isinstance(entry, Mapping) and index == len(entries) - 1:
            if unknown := set(entry) - {"long_help"}:
                raise DefinitionError("Unrecognized value: %r" % sorted(unknown))
            long_help = entry.get("long_help")
        else:
            # an error in the definition, not in the user input
            raise DefinitionError("Unrecognized value: %r" % (entry,))

    return Leaf(options, positionals, long_help)


def _node(object):
    if isinstance(object, Leaf | Interior):
        return object
    if isinstance(object, Mapping):
        return Interior({name: _node(node) for name, node in object.items()})
    if isinstance(object, Sequence) and not isinstance(object, str):
        return _leaf(list(object))
    raise DefinitionError("Unrecognized value: %r" % (object,))


def build(*definition):
    """
    Build the definition model from grammar entries.

    - build(leaf_or_interior)      -> returned as is
    - build({"cmd": [...], ...})   -> Interior
    - build({})                    -> empty Leaf (no definitions given)
    - build(*entries)              -> Leaf
    """
    if len(definition) == 1 and isinstance(definition[0], Leaf | Interior):
        return definition[0]
    if len(definition) == 1 and isinstance(definition[0], Mapping) and set(definition[0]) != {"long_help"}:
        return _node(definition[0]) if definition[0] else Leaf()
    return _leaf(list(definition))


__all__ = (
    "OptionSpec",
    "PositionalSpec",
    "Leaf",
    "Interior",
    "build",
    "HELP_FORMS",
    "HELP_KEY",
)
