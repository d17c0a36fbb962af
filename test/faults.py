"""
Faults module behavioral tests.

Scope
- Stable codes, host relabeling through __main__.__codes__.
- Fault options: class defaults, read-only mapping, __replace__.
- Rich rendering: header, message, hint, fancy panels, host program name.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured through a rich Console writing into a StringIO.
"""

import __main__
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console
from rich.panel import Panel

from covenant import (
    BindingError,
    CommandException,
    ConversionError,
    FaultCode,
    InitializationError,
    InvalidAnnotationPlacementError,
    NamingConflictError,
    OptionValueRequiredError,
    UnknownOptionError,
    UnsupportedTypeError,
)


def render(renderable):
    console = Console(file=io.StringIO(), width=120, color_system=None, force_terminal=False)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):
    """Code values and normalization."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.OPTION_VALUE_REQUIRED, 11117)
        self.assertEqual(FaultCode.CONVERSION_ERROR, 11126)
        self.assertEqual(FaultCode.NAMING_CONFLICT, 11201)
        self.assertEqual(FaultCode.INVALID_ANNOTATION_PLACEMENT, 11202)
        self.assertEqual(FaultCode.UNSUPPORTED_TYPE, 11203)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11112")

    def testNormalizeUsesHostCodes(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.CONVERSION_ERROR.normalize(), "11126")


class TestCommandException(TestCase):
    """Fault hierarchy and options."""

    def testHierarchy(self):
        for fault in (NamingConflictError, InvalidAnnotationPlacementError, UnsupportedTypeError):
            self.assertTrue(issubclass(fault, InitializationError))
        for fault in (UnknownOptionError, OptionValueRequiredError, ConversionError):
            self.assertTrue(issubclass(fault, BindingError))
        self.assertTrue(issubclass(InitializationError, CommandException))
        self.assertTrue(issubclass(BindingError, CommandException))

    def testClassDefaults(self):
        fault = ConversionError("bad value")
        self.assertEqual(fault.code, FaultCode.CONVERSION_ERROR)
        self.assertEqual(fault.options["title"], "invalid option value")
        self.assertEqual(str(fault), "bad value")

    def testOptionsOverrideDefaults(self):
        fault = ConversionError("bad value", title="custom", token="x")
        self.assertEqual(fault.options["title"], "custom")
        self.assertEqual(fault.options["token"], "x")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            ConversionError("bad value").options["token"] = "x"

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown option '-x'", input="-x")
        copy = fault.__replace__(index=3)
        self.assertIsInstance(copy, UnknownOptionError)
        self.assertIsNot(copy, fault)
        self.assertEqual(copy.message, fault.message)
        self.assertEqual(copy.options["input"], "-x")
        self.assertEqual(copy.options["index"], 3)
        self.assertNotIn("index", fault.options)

    def testReplaceMessage(self):
        copy = UnknownOptionError("unknown option '-x'").__replace__(message="elsewhere")
        self.assertEqual(copy.message, "elsewhere")
        self.assertNotIn("message", copy.options)


class TestRendering(TestCase):
    """Rich rendering of faults."""

    def testHeaderMessageAndHint(self):
        output = render(UnknownOptionError("unknown option '-x'", hint="did you mean '-y'?"))
        self.assertIn("[ covenant - 11112 | Unknown Option ]", output)
        self.assertIn("unknown option '-x'", output)
        self.assertIn("→ did you mean '-y'?", output)

    def testProgOption(self):
        output = render(NamingConflictError("clash", prog="Objects"))
        self.assertIn("[ Objects - 11201 | Naming Conflict ]", output)

    def testHostProgramName(self):
        with mock.patch.object(__main__, "__prog__", "tool", create=True):
            output = render(NamingConflictError("clash", prog="Objects"))
        self.assertIn("[ tool - 11201 | Naming Conflict ]", output)

    def testHostCodesInHeader(self):
        with mock.patch.object(__main__, "__codes__", {FaultCode.NAMING_CONFLICT: "E-NAMES"}, create=True):
            output = render(NamingConflictError("clash"))
        self.assertIn("E-NAMES", output)

    def testFancyPanel(self):
        fault = ConversionError("bad value", fancy=True)
        self.assertIsInstance(fault.__rich__(), Panel)
        self.assertIn("bad value", render(fault))

    def testWithoutHint(self):
        output = render(ConversionError("bad value"))
        self.assertNotIn("→", output)


if __name__ == "__main__":
    unittest.main()
