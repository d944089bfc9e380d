"""
Fault tests.

Scope
- Payload access on exceptions and warnings (options readable as attributes).
- copy.replace merging options while keeping the message.
- trigger(): raising, warning, and shell-mode rendering with exit status 1.
- Rich rendering (plain, fancy panel) and the __main__ hooks (__prog__,
  __codes__, __docs__).
"""
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from cmdopts import faults
from cmdopts.faults import *


def render(renderable, width=120):
    console = Console(file=io.StringIO(), color_system=None, width=width)
    console.print(renderable)
    return console.file.getvalue()


class TestPayload(TestCase):

    def setUp(self):
        self.fault = OccurrenceError(
            "option 'foo' cannot be specified more than 1 time",
            title="occurrence error",
            code=FaultCode.OCCURRENCE,
            key="foo",
            minimum=0,
            maximum=1,
            occurrences=2,
            hint="remove the extra occurrences (given 2 times)",
        )

    def testAttributes(self):
        self.assertEqual(self.fault.key, "foo")
        self.assertEqual((self.fault.minimum, self.fault.maximum, self.fault.occurrences), (0, 1, 2))
        self.assertEqual(str(self.fault), "option 'foo' cannot be specified more than 1 time")

    def testMissingAttribute(self):
        with self.assertRaises(AttributeError):
            self.fault.operand

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            self.fault.options["key"] = "bar"  # type: ignore[index]

    def testReplaceMergesOptions(self):
        replaced = copy.replace(self.fault, shell=True, key="bar")
        self.assertIsInstance(replaced, OccurrenceError)
        self.assertEqual(replaced.message, self.fault.message)
        self.assertEqual(replaced.key, "bar")
        self.assertIs(replaced.shell, True)
        self.assertEqual(self.fault.key, "foo")

    def testReplaceKeepsCause(self):
        cause = OverflowError("300 outside [-128, 127]")
        self.fault.__cause__ = cause
        self.assertIs(copy.replace(self.fault, shell=False).__cause__, cause)
        warning = EmptyInlineValueWarning("empty inline value")
        warning.__cause__ = cause
        self.assertIs(copy.replace(warning, prog="demo").__cause__, cause)

    def testHierarchy(self):
        for cls in (
            UnknownOptionError,
            UnexpectedArgumentError,
            MissingArgumentError,
            UnexpectedOperandError,
            UnexpectedOptionError,
            OccurrenceError,
            MutuallyExclusiveError,
            MutuallyInclusiveError,
            InvalidArgumentError,
        ):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, ParseException))
        self.assertTrue(issubclass(EmptyInlineValueWarning, Warning))


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(MissingArgumentError) as context:
            trigger(MissingArgumentError("option '-f' requires a value", input="-f"), prog="demo")
        self.assertEqual(context.exception.input, "-f")
        self.assertEqual(context.exception.prog, "demo")

    def testRaisedFaultKeepsCause(self):
        fault = InvalidArgumentError("invalid int8 value '300'", text="300")
        fault.__cause__ = cause = OverflowError("300 outside [-128, 127]")
        with self.assertRaises(InvalidArgumentError) as context:
            trigger(fault, prog="demo")
        self.assertIsNot(context.exception, fault)
        self.assertIs(context.exception.__cause__, cause)
        self.assertTrue(context.exception.__suppress_context__)

    def testShellRendersAndExits(self):
        stream = io.StringIO()
        fault = UnknownOptionError(
            "unknown option '-x' at first position",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="check the spelling of the option",
        )
        with mock.patch.object(faults, "console", Console(file=stream, color_system=None, width=120)):
            with self.assertRaises(SystemExit) as context:
                trigger(fault, shell=True, colorful=False, prog="demo")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("[ demo - 11112 | Unknown Option ]", stream.getvalue())
        self.assertIn("check the spelling of the option", stream.getvalue())

    def testWarningOutsideShell(self):
        with self.assertWarns(EmptyInlineValueWarning):
            trigger(EmptyInlineValueWarning("empty inline value", input="--foo"))

    def testRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestRendering(TestCase):

    def testPlain(self):
        fault = OccurrenceError(
            "option 'foo' must be specified at least 1 time",
            title="occurrence error",
            code=FaultCode.OCCURRENCE,
            prog="demo",
            colorful=False,
            hint="add the missing occurrences (given 0 times)",
        )
        output = render(fault)
        self.assertIn("[ demo - 11151 | Occurrence Error ]", output)
        self.assertIn("option 'foo' must be specified at least 1 time", output)
        self.assertIn("add the missing occurrences", output)

    def testFancyIsAPanel(self):
        fault = MissingArgumentError("option '-f' requires a value", fancy=True, prog="demo")
        self.assertIsInstance(fault.__rich__(), Panel)
        self.assertIn("option '-f' requires a value", render(fault))

    def testMainHooks(self):
        main = sys.modules["__main__"]
        with (
            mock.patch.object(main, "__prog__", "hosted", create=True),
            mock.patch.object(main, "__codes__", {FaultCode.MISSING_ARGUMENT: "E-MISSING"}, create=True),
            mock.patch.object(main, "__docs__", {FaultCode.MISSING_ARGUMENT: "see usage"}, create=True),
        ):
            fault = MissingArgumentError(
                "option '-f' requires a value",
                code=FaultCode.MISSING_ARGUMENT,
                title="missing value",
                colorful=False,
                prog="ignored",
            )
            output = render(fault)
            self.assertIn("[ hosted - E-MISSING | Missing Value ]", output)
            self.assertEqual(getdoc(FaultCode.MISSING_ARGUMENT), "see usage")
            self.assertIsNone(getdoc(FaultCode.OCCURRENCE))


class TestFaultCode(TestCase):

    def testStableValues(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.UNEXPECTED_ARGUMENT, 11113)
        self.assertEqual(FaultCode.MISSING_ARGUMENT, 11117)
        self.assertEqual(FaultCode.UNEXPECTED_OPERAND, 11121)
        self.assertEqual(FaultCode.INVALID_ARGUMENT, 11124)
        self.assertEqual(FaultCode.OCCURRENCE, 11151)
        self.assertEqual(FaultCode.MUTUALLY_EXCLUSIVE, 11152)
        self.assertEqual(FaultCode.MUTUALLY_INCLUSIVE, 11153)

    def testNormalizeDefaultsToTheNumber(self):
        self.assertEqual(FaultCode.OCCURRENCE.normalize(), "11151")

    def testGetdocRejectsIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(11151)


if __name__ == '__main__':
    unittest.main()
