"""
Definitions module tests (grammar entries, validation, relaxation).

Scope
- Option entries: forms, placeholders, converters and binding keys.
- Positional entries: bracket/star syntax and malformed input.
- Leaf invariants: unique keys, single trailing variadic, synthetic help.
- Trees: nesting, empty mappings, invalid command names.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argyle import DefinitionError, Interior, Leaf, OptionSpec, PositionalSpec, build
from argyle.converters import BooleanConverter, CallableConverter, DelimitedConverter, StringConverter


class TestOptionSpec(TestCase):
    """Option entries and their derived properties."""

    def testKeyFromLongForm(self):
        option = OptionSpec.from_entry(["-e", "--e-switch VALUE"])
        self.assertEqual(option.key, "e_switch")

    def testKeyFromShortFormWhenNoLongForm(self):
        option = OptionSpec.from_entry(["-a"])
        self.assertEqual(option.key, "a")

    def testPlaceholderAndDescription(self):
        option = OptionSpec.from_entry(["-f", "--f-switch VALUE", '"-f" description'])
        self.assertEqual(option.short, "-f")
        self.assertEqual(option.long, "--f-switch")
        self.assertEqual(option.placeholder, "VALUE")
        self.assertEqual(option.description, '"-f" description')
        self.assertTrue(option.takes_value)
        self.assertFalse(option.optional_value)

    def testInlinePlaceholderSeparator(self):
        option = OptionSpec.from_entry(["--name=NAME"])
        self.assertEqual(option.long, "--name")
        self.assertEqual(option.placeholder, "NAME")

    def testShortOnlyPlaceholder(self):
        option = OptionSpec.from_entry(["-n COUNT"])
        self.assertEqual(option.short, "-n")
        self.assertEqual(option.placeholder, "COUNT")

    def testOptionalPlaceholder(self):
        option = OptionSpec.from_entry(["-o", "--out [FILE]"])
        self.assertTrue(option.takes_value)
        self.assertTrue(option.optional_value)

    def testFlagConvertsToTrue(self):
        option = OptionSpec.from_entry(["-a"])
        self.assertFalse(option.takes_value)
        self.assertIs(option.convert(None), True)

    def testDefaultConverterIsString(self):
        option = OptionSpec.from_entry(["--name NAME"])
        self.assertIsInstance(option.converter, StringConverter)

    def testDelimitedPlaceholderSelectsDelimitedConverter(self):
        for placeholder, delimiter in (("A,B", ","), ("PATH:PATH", ":"), ("X;Y", ";")):
            with self.subTest(placeholder=placeholder):
                option = OptionSpec.from_entry(["--list " + placeholder])
                self.assertIsInstance(option.converter, DelimitedConverter)
                self.assertEqual(option.converter.delimiter, delimiter)

    def testAttachedConverters(self):
        self.assertIsInstance(OptionSpec.from_entry(["--on VALUE", bool]).converter, BooleanConverter)
        self.assertIsInstance(OptionSpec.from_entry(["--count N", int]).converter, CallableConverter)

    def testConverterOnFlagRejected(self):
        with self.assertRaises(DefinitionError):
            OptionSpec.from_entry(["-a", int])

    def testEntryWithoutFlagRejected(self):
        with self.assertRaises(DefinitionError):
            OptionSpec.from_entry(["only a description"])

    def testDuplicatedFormsInEntryRejected(self):
        with self.assertRaises(DefinitionError):
            OptionSpec.from_entry(["-a", "-b"])
        with self.assertRaises(DefinitionError):
            OptionSpec.from_entry(["--one", "--two"])

    def testMalformedFormsRejected(self):
        with self.assertRaises(DefinitionError):
            OptionSpec(short="-ab")
        with self.assertRaises(DefinitionError):
            OptionSpec(long="--")
        with self.assertRaises(DefinitionError):
            OptionSpec()

    def testReprUsesTypename(self):
        self.assertTrue(repr(OptionSpec("-a")).startswith("option-spec(short='-a'"))


class TestPositionalSpec(TestCase):
    """Positional syntax."""

    def testMandatory(self):
        positional = PositionalSpec.from_entry("mandatory")
        self.assertEqual((positional.name, positional.mandatory, positional.variadic), ("mandatory", True, False))

    def testOptional(self):
        positional = PositionalSpec.from_entry("[optional]")
        self.assertEqual((positional.name, positional.mandatory, positional.variadic), ("optional", False, False))

    def testVariadic(self):
        positional = PositionalSpec.from_entry("*rest")
        self.assertEqual((positional.name, positional.mandatory, positional.variadic), ("rest", True, True))

    def testOptionalVariadic(self):
        positional = PositionalSpec.from_entry("[*rest]")
        self.assertEqual((positional.name, positional.mandatory, positional.variadic), ("rest", False, True))

    def testMalformedRejected(self):
        for entry in ("[name", "name]", "", "two words", "**x"):
            with self.subTest(entry=entry):
                with self.assertRaises(DefinitionError):
                    PositionalSpec.from_entry(entry)

    def testRelaxedIsOptionalCopy(self):
        positional = PositionalSpec.from_entry("*rest")
        relaxed = positional.relaxed()
        self.assertFalse(relaxed.mandatory)
        self.assertTrue(relaxed.variadic)
        self.assertTrue(positional.mandatory)


class TestLeaf(TestCase):
    """Leaf construction and invariants."""

    def testBuildSortsEntries(self):
        leaf = build(["-a"], ["-b", "--b-switch"], "mandatory", "[optional]", {"long_help": "Long help."})
        self.assertIsInstance(leaf, Leaf)
        self.assertEqual([option.key for option in leaf.options], ["a", "b_switch"])
        self.assertEqual([positional.name for positional in leaf.positionals], ["mandatory", "optional"])
        self.assertEqual(leaf.long_help, "Long help.")

    def testDuplicatedKeysRejected(self):
        with self.assertRaises(DefinitionError):
            build(["-a"], "a")
        with self.assertRaises(DefinitionError):
            build(["-x", "--same"], ["-y", "--same"])

    def testVariadicMustBeLast(self):
        with self.assertRaises(DefinitionError):
            build("*rest", "last")

    def testSingleVariadic(self):
        with self.assertRaises(DefinitionError):
            build("*one", "*two")

    def testUnrecognizedValueRejected(self):
        with self.assertRaises(DefinitionError):
            build(["-a"], 42)

    def testLongHelpMustBeLast(self):
        with self.assertRaises(DefinitionError):
            build({"long_help": "misplaced"}, "mandatory")

    def testUnknownLeafSettingRejected(self):
        with self.assertRaises(DefinitionError):
            build("mandatory", {"long_hepl": "typo"})

    def testSyntheticHelpAppended(self):
        leaf = build(["-a"])
        self.assertEqual(leaf.summary[-1].forms, ("-h", "--help"))
        self.assertEqual(leaf.summary[-1].description, "Help")
        self.assertIs(leaf.lookup("--help"), leaf.help_option)

    def testUserClaimedHelpFormWins(self):
        leaf = build(["-h", "--host HOST"])
        self.assertEqual(leaf.lookup("-h").key, "host")
        self.assertEqual(leaf.help_option.forms, ("--help",))

    def testUserClaimedBothHelpForms(self):
        leaf = build(["-h", "--help", "Custom help"])
        self.assertIsNone(leaf.help_option)
        self.assertEqual(len(leaf.summary), 1)

    def testLongNamesExcludeHelp(self):
        leaf = build(["-o", "--opt1 ARG"], ["-O", "--opt2"], ["-x"], "arg1")
        self.assertEqual(leaf.long_names, ["--opt1", "--opt2"])

    def testRelaxedMakesPositionalsOptional(self):
        leaf = build("mandatory", "*rest")
        relaxed = leaf.relaxed()
        self.assertEqual([positional.mandatory for positional in relaxed.positionals], [False, False])
        self.assertEqual([positional.mandatory for positional in leaf.positionals], [True, True])

    def testFieldsAreReadOnly(self):
        leaf = build(["-a"], "mandatory")
        with self.assertRaises(AttributeError):
            leaf.options = ()

    def testEmptyMappingIsEmptyLeaf(self):
        leaf = build({})
        self.assertIsInstance(leaf, Leaf)
        self.assertEqual(leaf.positionals, ())


class TestInterior(TestCase):
    """Command trees."""

    def testNestedTree(self):
        tree = build({
            "command1": {"nested1a": ["arg1"], "nested1b": []},
            "command2": ["arg2"],
        })
        self.assertIsInstance(tree, Interior)
        self.assertEqual(tree.names, ["command1", "command2"])
        self.assertIsInstance(tree.get("command1"), Interior)
        self.assertEqual(tree.get("command1").names, ["nested1a", "nested1b"])
        self.assertIsInstance(tree.get("command2"), Leaf)
        self.assertIsNone(tree.get("command3"))

    def testCommandsMappingIsDetached(self):
        tree = build({"command1": []})
        commands = tree.commands
        commands["intruder"] = Leaf()
        self.assertEqual(tree.names, ["command1"])

    def testInvalidCommandNameRejected(self):
        with self.assertRaises(DefinitionError):
            build({"--command": []})

    def testInvalidCommandValueRejected(self):
        with self.assertRaises(DefinitionError):
            build({"command": "not a leaf"})

    def testRelaxedTree(self):
        tree = build({"command1": {"nested": ["arg"]}}).relaxed()
        self.assertFalse(tree.get("command1").get("nested").positionals[0].mandatory)


if __name__ == "__main__":
    unittest.main()
