"""
Faults module tests (codes, options, rendering, trigger).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from argyle import (
    ArgumentError,
    CommandException,
    FaultCode,
    InvalidCommandError,
    InvalidOptionError,
    OptionError,
    trigger,
)


class TestFaults(TestCase):

    def testDefaultCodes(self):
        self.assertEqual(ArgumentError("x").code, FaultCode.MISSING_ARGUMENTS)
        self.assertEqual(InvalidCommandError("x").code, FaultCode.INVALID_COMMAND)
        self.assertEqual(InvalidOptionError("x").code, FaultCode.INVALID_OPTION)

    def testExplicitCode(self):
        fault = ArgumentError("Too many arguments", code=FaultCode.TOO_MANY_ARGUMENTS)
        self.assertEqual(fault.code, FaultCode.TOO_MANY_ARGUMENTS)

    def testOptionsAreReadOnly(self):
        fault = ArgumentError("x")
        with self.assertRaises(TypeError):
            fault.options["code"] = 0

    def testOptionFamilyIsDistinct(self):
        self.assertTrue(issubclass(InvalidOptionError, OptionError))
        self.assertFalse(issubclass(InvalidOptionError, ArgumentError))
        self.assertTrue(issubclass(OptionError, CommandException))

    def testMessageMustBeAString(self):
        with self.assertRaises(TypeError):
            ArgumentError(42)

    def testValidCommandsAreCopied(self):
        fault = InvalidCommandError("Missing command", valid_commands=["a", "b"])
        fault.valid_commands.append("c")
        self.assertEqual(fault.valid_commands, ["a", "b"])


class TestTrigger(TestCase):

    def testPrints(self):
        output = io.StringIO()
        trigger(ArgumentError("Too many arguments"), output=output)
        self.assertEqual(output.getvalue(), "Command error!: Too many arguments\n")

    def testRaisesCopyWithMergedOptions(self):
        fault = InvalidCommandError("Invalid command: pizza", valid_commands=["a"])
        with self.assertRaises(InvalidCommandError) as context:
            trigger(fault, raise_errors=True)
        self.assertIsNot(context.exception, fault)
        self.assertTrue(context.exception.options["raise_errors"])
        self.assertEqual(context.exception.valid_commands, ["a"])
        self.assertNotIn("raise_errors", fault.options)

    def testRejectsNonTriggerables(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


if __name__ == "__main__":
    unittest.main()
