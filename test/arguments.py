"""
Arguments module behavioral tests (entry construction and rendering).

Scope
- Validate metadata sanitation shared by every entry (names, checks, overrides, separators).
- Validate rendering of each entry kind: Flag, Value, FlagOrValue, KeyValue,
  Operand, Literal, Custom, ExecutionOption.
- Validate introspection (read-only properties, repr) and sealing.

Conventions
- Test method names follow CamelCase per project convention.
- Entries are built directly; schemas are covered by the schema tests.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from gitnaut import (
    Flag,
    Value,
    FlagOrValue,
    KeyValue,
    Operand,
    Literal,
    Custom,
    ExecutionOption,
    DuplicateNameError,
    ExclusiveCheckError,
    OverrideShapeError,
    ModifierConflictError,
    OptionTypeError,
    NoneValueError,
    InvalidValueError,
)


class TestMetadata(TestCase):
    """Behavioral tests for metadata shared by every entry."""

    def testNamesAcceptStringOrList(self):
        self.assertEqual(Flag("force").names, ("force",))
        entry = Flag(["force", "f"])
        self.assertEqual(entry.name, "force")
        self.assertEqual(entry.aliases, ("f",))

    def testNamesMustBeIdentifiers(self):
        with self.assertRaises(ValueError):
            Flag("dry-run")
        with self.assertRaises(ValueError):
            Flag("_hidden")
        with self.assertRaises(TypeError):
            Flag([])

    def testDuplicateNamesWithinOneEntryRejected(self):
        with self.assertRaises(DuplicateNameError):
            Value(["message", "message"])

    def testTypeAndValidatorAreExclusive(self):
        with self.assertRaises(ExclusiveCheckError) as context:
            Value("depth", type=int, validator=lambda value: value > 0)
        self.assertEqual(str(context.exception), "cannot specify both type and validator for :depth")

    def testTypeNormalizedToTuple(self):
        self.assertEqual(Value("depth", type=int).type, (int,))
        self.assertEqual(Value("timeout", type=[int, float]).type, (int, float))
        self.assertEqual(Value("free").type, ())
        with self.assertRaises(TypeError):
            Value("depth", type="int")

    def testValidatorMustBeCallable(self):
        with self.assertRaises(TypeError):
            Value("mode", validator="a")

    def testEntriesAreSealed(self):
        with self.assertRaises(TypeError):
            class Switch(Flag):  # NOQA: F-841
                pass

    def testPropertiesAreReadOnly(self):
        entry = Flag("force")
        with self.assertRaises(AttributeError):
            entry.names = ("other",)

    def testReprListsIntrospectableFields(self):
        self.assertEqual(repr(Literal("--")), "literal(token='--')")
        self.assertTrue(repr(Operand("paths")).startswith("operand(name='paths', "))


class TestFlag(TestCase):
    """Behavioral tests for Flag rendering."""

    def testTruthyRendersSwitch(self):
        self.assertEqual(Flag("force").render(True), ["--force"])
        self.assertEqual(Flag("f").render(True), ["-f"])
        self.assertEqual(Flag("no_verify").render(True), ["--no-verify"])

    def testFalsyRendersNothing(self):
        self.assertEqual(Flag("force").render(False), [])

    def testAliasDoesNotChangeDashCount(self):
        self.assertEqual(Flag(["force", "f"]).render(True), ["--force"])
        self.assertEqual(Flag(["f", "force"]).render(True), ["-f"])

    def testNegatableRendersBothForms(self):
        entry = Flag("verify", negatable=True)
        self.assertEqual(entry.render(True), ["--verify"])
        self.assertEqual(entry.render(False), ["--no-verify"])

    def testNegatableRequiresBoolean(self):
        with self.assertRaises(OptionTypeError) as context:
            Flag("verify", negatable=True).render("yes")
        self.assertEqual(str(context.exception), "negatable flag :verify expects a boolean value, got 'yes'")

    def testStringOverrideWins(self):
        entry = Flag("force", args_override="-f")
        self.assertEqual(entry.render(True), ["-f"])
        self.assertEqual(Flag("verify", negatable=True, args_override="--check").render(False), ["--no-check"])

    def testListOverrideRendersEveryToken(self):
        entry = Flag("amend", args_override=["--amend", "--no-edit"])
        self.assertEqual(entry.render(True), ["--amend", "--no-edit"])
        self.assertEqual(entry.render(False), [])

    def testListOverrideCannotBeNegatable(self):
        with self.assertRaises(OverrideShapeError) as context:
            Flag("amend", negatable=True, args_override=["--amend", "--no-edit"])
        self.assertEqual(
            str(context.exception),
            "arrays for args_override cannot be combined with negatable=True (option :amend)"
        )

    def testInlineAndOperandModifiersRejected(self):
        with self.assertRaises(ModifierConflictError):
            Flag("force", inline=True)
        with self.assertRaises(ModifierConflictError):
            Flag("force", as_operand=True)


class TestValue(TestCase):
    """Behavioral tests for Value rendering."""

    def testSeparateForm(self):
        self.assertEqual(Value("branch").render("main"), ["--branch", "main"])

    def testInlineForms(self):
        self.assertEqual(Value("branch", inline=True).render("main"), ["--branch=main"])
        self.assertEqual(Value("n", inline=True).render(5), ["-n5"])

    def testEmptyStringSkippedUnlessAllowed(self):
        self.assertEqual(Value("message", inline=True).render(""), [])
        self.assertEqual(Value("message", inline=True, allow_empty=True).render(""), ["--message="])

    def testRepeatableRendersEachElement(self):
        entry = Value("config", repeatable=True)
        self.assertEqual(entry.render(["a=1", "b=2"]), ["--config", "a=1", "--config", "b=2"])
        self.assertEqual(entry.render("a=1"), ["--config", "a=1"])
        self.assertEqual(entry.render(["", "x"]), ["--config", "", "--config", "x"])

    def testListRequiresRepeatable(self):
        with self.assertRaises(OptionTypeError):
            Value("branch").render(["a", "b"])

    def testNoneElementsRejected(self):
        with self.assertRaises(NoneValueError) as context:
            Value("config", repeatable=True).render(["a", None])
        self.assertEqual(str(context.exception), "None values are not allowed in option :config")

    def testArrayOverrideRejected(self):
        with self.assertRaises(OverrideShapeError) as context:
            Value("branch", args_override=["-b", "--branch"])
        self.assertEqual(
            str(context.exception),
            "arrays for args_override are only supported for flag entries, not value (option :branch)"
        )

    def testAsOperandRendersBareTokens(self):
        entry = Value("pathspec", as_operand=True, repeatable=True, separator="--")
        self.assertEqual(entry.render(["a", "b"]), ["--", "a", "b"])
        self.assertEqual(entry.render([]), [])
        self.assertEqual(Value("rev", as_operand=True).render("HEAD"), ["HEAD"])

    def testModifierConflicts(self):
        with self.assertRaises(ModifierConflictError) as context:
            Value("rev", inline=True, as_operand=True)
        self.assertEqual(str(context.exception), "inline and as_operand cannot both be true for :rev")
        with self.assertRaises(ModifierConflictError):
            Value("rev", separator="--")


class TestFlagOrValue(TestCase):
    """Behavioral tests for FlagOrValue rendering."""

    def testBooleanAndStringForms(self):
        entry = FlagOrValue("gpg_sign", negatable=True, inline=True)
        self.assertEqual(entry.render(True), ["--gpg-sign"])
        self.assertEqual(entry.render(False), ["--no-gpg-sign"])
        self.assertEqual(entry.render("KEY"), ["--gpg-sign=KEY"])
        self.assertEqual(entry.render(""), [])

    def testFalseWithoutNegatableRendersNothing(self):
        self.assertEqual(FlagOrValue("color").render(False), [])
        self.assertEqual(FlagOrValue("color").render("always"), ["--color", "always"])

    def testOtherTypesRejected(self):
        with self.assertRaises(OptionTypeError) as context:
            FlagOrValue("gpg_sign").render(1)
        self.assertEqual(
            str(context.exception),
            "invalid value for flag-or-value :gpg_sign: 1 (int); expected True, False, or a str"
        )


class TestKeyValue(TestCase):
    """Behavioral tests for KeyValue rendering."""

    def testMappingRendersOnePairPerItem(self):
        entry = KeyValue("trailers", "--trailer")
        self.assertEqual(
            entry.render({"Signed-off-by": "A", "Acked": None}),
            ["--trailer", "Signed-off-by=A", "--trailer", "Acked"],
        )

    def testMappingListValuesExpand(self):
        entry = KeyValue("trailers", "--trailer")
        self.assertEqual(entry.render({"Co": ["A", "B"]}), ["--trailer", "Co=A", "--trailer", "Co=B"])

    def testListOfPairsKeepsOrderAndDuplicates(self):
        entry = KeyValue("trailers", "--trailer", key_separator=": ")
        self.assertEqual(
            entry.render([["Co", "A"], ["Co", "B"], ["Fixes"]]),
            ["--trailer", "Co: A", "--trailer", "Co: B", "--trailer", "Fixes"],
        )

    def testFlatPairIsSinglePair(self):
        self.assertEqual(KeyValue("trailers", "--trailer").render(["Co", "A"]), ["--trailer", "Co=A"])

    def testInlineAndOperandForms(self):
        self.assertEqual(KeyValue("config", "-c", inline=True).render({"a": 1}), ["-c=a=1"])
        self.assertEqual(KeyValue("pairs", as_operand=True).render({"a": 1, "b": 2}), ["a=1", "b=2"])

    def testFlagTokenDefaultsToSwitch(self):
        self.assertEqual(KeyValue("trailer").flag_token, "--trailer")

    def testInvalidInputsRejected(self):
        entry = KeyValue("trailers", "--trailer")
        with self.assertRaises(OptionTypeError) as context:
            entry.render("Co=A")
        self.assertEqual(str(context.exception), "key_value option must be a dict or list, got str")
        with self.assertRaises(InvalidValueError):
            entry.render({"Co": {"nested": "A"}})
        with self.assertRaises(InvalidValueError):
            entry.render([["a", "b", "c"]])
        with self.assertRaises(InvalidValueError):
            entry.render(["a", "b", "c"])
        with self.assertRaises(InvalidValueError):
            entry.render({"": "A"})

    def testKeyCannotContainSeparator(self):
        with self.assertRaises(InvalidValueError) as context:
            KeyValue("trailers", "--trailer").render({"a=b": "c"})
        self.assertEqual(
            str(context.exception),
            'key_value :trailers key "a=b" cannot contain the separator "="'
        )


class TestOperand(TestCase):
    """Behavioral tests for Operand rendering and shape."""

    def testSingleAndRepeatableRendering(self):
        self.assertEqual(Operand("rev").render("HEAD"), ["HEAD"])
        self.assertEqual(Operand("rev").render(None), [])
        self.assertEqual(Operand("paths", repeatable=True).render(["a", 1]), ["a", "1"])

    def testSeparatorOnlyWithValues(self):
        entry = Operand("paths", repeatable=True, separator="--")
        self.assertEqual(entry.render(["a"]), ["--", "a"])
        self.assertEqual(entry.render([]), [])

    def testFlexibility(self):
        self.assertTrue(Operand("rev").flexible)
        self.assertTrue(Operand("paths", required=True, repeatable=True).flexible)
        self.assertFalse(Operand("rev", required=True).flexible)

    def testOperandsCannotHaveAliases(self):
        with self.assertRaises(TypeError):
            Operand(["path", "p"])


class TestOtherEntries(TestCase):
    """Behavioral tests for Literal, Custom and ExecutionOption."""

    def testLiteralAlwaysRendersToken(self):
        self.assertEqual(Literal("commit").render(), ["commit"])
        self.assertIsNone(Literal("commit").name)
        with self.assertRaises(ValueError):
            Literal("")

    def testCustomEncoderOutputs(self):
        self.assertEqual(Custom("depth", lambda value: ["--depth", value]).render(3), ["--depth", "3"])
        self.assertEqual(Custom("mode", lambda value: f"--mode={value}").render("x"), ["--mode=x"])
        self.assertEqual(Custom("skip", lambda value: None).render("x"), [])

    def testCustomEncoderBadResult(self):
        with self.assertRaises(OptionTypeError):
            Custom("depth", lambda value: 3).render(1)

    def testCustomForwardsCalls(self):
        self.assertEqual(Custom("depth", lambda value: value * 2)(2), 4)

    def testExecutionOptionNeverRenders(self):
        entry = ExecutionOption("timeout", type=(int, float))
        self.assertEqual(entry.render(5), [])
        self.assertIsNone(entry.__option__())


if __name__ == "__main__":
    unittest.main()
