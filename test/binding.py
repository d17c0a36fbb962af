"""
Binding module behavioral tests.

Scope
- Event application: scalar writes, accumulation for lists, sets and maps.
- Failures: unknown names, missing values, bad values, writes to contract
  fields; their fault context (input, index, chained cause).
- Atomicity per event and reset between binds.

Conventions
- Test method names follow CamelCase per project convention.
- Events are passed pre-segmented; tokenization is covered elsewhere.
"""

import unittest
from abc import ABC, abstractmethod
from typing import Annotated
from unittest import TestCase

from covenant import (
    BigInt,
    BindingError,
    Byte,
    ConversionError,
    FaultCode,
    InitializationError,
    InvalidAnnotationPlacementError,
    Kind,
    Option,
    OptionValueRequiredError,
    Short,
    SortedSet,
    UnknownOptionError,
    bind,
    build,
    instantiate,
    option,
)


class Objects(ABC):
    @option("-b")
    @abstractmethod
    def aBoolean(self) -> bool | None: ...

    @option("-y")
    @abstractmethod
    def aByte(self) -> Byte | None: ...

    @option("-i", "--int")
    @abstractmethod
    def anInt(self) -> int: ...

    @option("-bigint")
    @abstractmethod
    def aBigInteger(self) -> BigInt: ...

    @option("-string")
    @abstractmethod
    def aString(self) -> str: ...

    @option("-list")
    @abstractmethod
    def getList(self) -> list[str]: ...

    @option("-tags")
    @abstractmethod
    def getTags(self) -> set[str]: ...

    @option("-map", type=(int, float))
    @abstractmethod
    def getMap(self) -> dict: ...

    @option("-set", type=Short)
    @abstractmethod
    def getSortedSet(self) -> SortedSet: ...


class MutableFields:
    aList: Annotated[list[str], Option("-s")] = ["x"]


class TestBinding(TestCase):
    """Successful event application."""

    def setUp(self):
        self.objects = instantiate(build(Objects))

    def testScalarEvents(self):
        bind(self.objects, [("-b", None), ("-y", "1"), ("-bigint", "7"), ("-string", "abc")])
        self.assertIs(self.objects.aBoolean(), True)
        self.assertEqual(self.objects.aByte(), 1)
        self.assertEqual(self.objects.aBigInteger(), 7)
        self.assertEqual(self.objects.aString(), "abc")

    def testExplicitBooleanValue(self):
        bind(self.objects, [("-b", "false")])
        self.assertIs(self.objects.aBoolean(), False)

    def testAliasesShareOneSlot(self):
        bind(self.objects, [("-i", "1"), ("--int", "2")])
        self.assertEqual(self.objects.anInt(), 2)

    def testListKeepsOccurrenceOrder(self):
        bind(self.objects, [("-list", "a"), ("-list", "b"), ("-list", "a")])
        self.assertEqual(self.objects.getList(), ["a", "b", "a"])

    def testUnorderedSetCollapsesDuplicates(self):
        bind(self.objects, [("-tags", "a"), ("-tags", "a"), ("-tags", "b")])
        self.assertEqual(self.objects.getTags(), {"a", "b"})

    def testSortedSetNaturalOrder(self):
        bind(self.objects, [("-set", "33"), ("-set", "22")])
        self.assertEqual(list(self.objects.getSortedSet()), [22, 33])
        self.assertEqual(self.objects.getSortedSet(), {22, 33})

    def testMapEntries(self):
        bind(self.objects, [("-map", "1=2.0"), ("-map", "3=4"), ("-map", "1=5.5")])
        self.assertEqual(self.objects.getMap(), {1: 5.5, 3: 4.0})

    def testEachBindStartsFromDefaults(self):
        bind(self.objects, [("-list", "a"), ("-i", "3")])
        bind(self.objects, [("-string", "x")])
        self.assertIsNone(self.objects.getList())
        self.assertEqual(self.objects.anInt(), 0)
        self.assertEqual(self.objects.aString(), "x")

    def testEmptyStreamResets(self):
        bind(self.objects, [("-i", "3")])
        bind(self.objects, [])
        self.assertEqual(self.objects.anInt(), 0)

    def testCustomRegistry(self):
        objects = instantiate(build(Objects, {Kind.STRING: str.upper}))
        bind(objects, [("-string", "abc"), ("-list", "x")])
        self.assertEqual(objects.aString(), "ABC")
        self.assertEqual(objects.getList(), ["X"])


class TestBindingFailures(TestCase):
    """Faults raised while binding."""

    def setUp(self):
        self.objects = instantiate(build(Objects))

    def testUnknownOption(self):
        with self.assertRaises(UnknownOptionError) as context:
            bind(self.objects, [("-i", "1"), ("-lst", "a")])
        fault = context.exception
        self.assertIsInstance(fault, BindingError)
        self.assertEqual(fault.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.options["input"], "-lst")
        self.assertEqual(fault.options["index"], 2)
        self.assertEqual(fault.message, "unknown option '-lst' at second position")
        self.assertIn("-list", fault.options["suggestions"])

    def testMissingValue(self):
        with self.assertRaises(OptionValueRequiredError) as context:
            bind(self.objects, [("-i", None)])
        self.assertEqual(context.exception.options["input"], "-i")
        self.assertEqual(context.exception.code, FaultCode.OPTION_VALUE_REQUIRED)

    def testBadValueChainsCause(self):
        with self.assertRaises(ConversionError) as context:
            bind(self.objects, [("-y", "128")])
        fault = context.exception
        self.assertEqual(fault.options["input"], "-y")
        self.assertEqual(fault.options["token"], "128")
        self.assertEqual(fault.options["index"], 1)
        self.assertIn("'-y'", fault.message)
        self.assertIsInstance(fault.__cause__, ConversionError)
        self.assertIsInstance(fault.__cause__.__cause__, OverflowError)

    def testBadMapEntry(self):
        with self.assertRaises(ConversionError):
            bind(self.objects, [("-map", "1")])

    def testEarlierWritesSurviveLaterFailure(self):
        with self.assertRaises(ConversionError):
            bind(self.objects, [("-i", "3"), ("-list", "a"), ("-y", "x"), ("-string", "never")])
        self.assertEqual(self.objects.anInt(), 3)
        self.assertEqual(self.objects.getList(), ["a"])
        self.assertIsNone(self.objects.aByte())
        self.assertIsNone(self.objects.aString())

    def testUnhashableConvertedValueLeavesSlotUntouched(self):
        objects = instantiate(build(Objects, {Kind.STRING: lambda token: [token]}))
        with self.assertRaises(ConversionError) as context:
            bind(objects, [("-tags", "a")])
        fault = context.exception
        self.assertEqual(fault.options["input"], "-tags")
        self.assertEqual(fault.options["index"], 1)
        self.assertIsInstance(fault.__cause__, TypeError)
        self.assertIsNone(objects.getTags())

    def testIncomparableSortedElementKeepsEarlierElements(self):
        objects = instantiate(build(Objects, {Kind.SHORT: lambda token: int(token) if token.isdigit() else token}))
        with self.assertRaises(ConversionError):
            bind(objects, [("-set", "33"), ("-set", "x")])
        self.assertEqual(list(objects.getSortedSet()), [33])

    def testBadMapKeyLeavesMapUntouched(self):
        objects = instantiate(build(Objects, {Kind.INT: lambda token: [token]}))
        with self.assertRaises(ConversionError):
            bind(objects, [("-map", "1=2.0")])
        self.assertIsNone(objects.getMap())

    def testWriteToFieldRejected(self):
        fields = instantiate(build(MutableFields))
        with self.assertRaises(InvalidAnnotationPlacementError) as context:
            bind(fields, [("-s", "a"), ("-s", "b"), ("-s", "c")])
        fault = context.exception
        self.assertIsInstance(fault, InitializationError)
        self.assertEqual(fault.message, "invalid option annotation on contract field")
        self.assertEqual(fault.options["index"], 1)
        self.assertEqual(fields.aList, ["x"])
        self.assertEqual(vars(MutableFields)["aList"], ["x"])

    def testForeignInstanceRejected(self):
        with self.assertRaises(TypeError):
            bind(object(), [])

    def testMalformedEventsRejected(self):
        for events in ([("-i",)], ["-i"], [(1, "2")], [("-i", 3)]):
            with self.subTest(events=events):
                with self.assertRaises(TypeError):
                    bind(self.objects, events)


if __name__ == "__main__":
    unittest.main()
