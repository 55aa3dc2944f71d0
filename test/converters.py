"""
Converters module tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argyle.converters import (
    BooleanConverter,
    CallableConverter,
    Converter,
    DelimitedConverter,
    StringConverter,
    converter,
    delimiter_of,
)


class TestConverters(TestCase):

    def testStringIsIdentity(self):
        self.assertEqual(StringConverter()("v_swt"), "v_swt")

    def testDelimitedSplitsOnlyWhenPresent(self):
        split = DelimitedConverter(",")
        self.assertEqual(split("a,b,c"), ["a", "b", "c"])
        self.assertEqual(split("a"), "a")

    def testBooleanIsStrict(self):
        boolean = BooleanConverter()
        self.assertIs(boolean("true"), True)
        self.assertIs(boolean("false"), False)
        for value in ("maybe", "True", "1", ""):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    boolean(value)

    def testCallableWrapsFailures(self):
        integer = CallableConverter(int)
        self.assertEqual(integer("3"), 3)
        with self.assertRaises(ValueError):
            integer("three")

    def testDelimiterOf(self):
        self.assertEqual(delimiter_of("A,B"), ",")
        self.assertEqual(delimiter_of("[A:B]"), ":")
        self.assertIsNone(delimiter_of("VALUE"))
        self.assertIsNone(delimiter_of(None))

    def testConverterNormalization(self):
        self.assertIsInstance(converter(bool), BooleanConverter)
        self.assertIsInstance(converter(float), CallableConverter)
        custom = DelimitedConverter(";")
        self.assertIs(converter(custom), custom)
        with self.assertRaises(TypeError):
            converter("not callable")

    def testBaseConverterIsAbstract(self):
        with self.assertRaises(NotImplementedError):
            Converter()("value")


if __name__ == "__main__":
    unittest.main()
