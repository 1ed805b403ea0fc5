"""
Utils module behavioral tests (sentinel, helpers, token derivation).

Scope
- Validate the Unset sentinel: singleton, falsey, sealed, usable in isinstance unions.
- Validate coalesce/rename/mirror helpers.
- Validate switch/negation/short token derivation.
- Validate the package metadata dunders.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

import gitnaut
from gitnaut.utils import Unset, UnsetType, coalesce, rename, mirror, switch, negation, short


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testUnsetIsFalseyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            class Other(UnsetType):  # NOQA: F-841
                pass

    def testUnsetJoinsIsinstanceUnions(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))
        self.assertFalse(isinstance(1, str | Unset))


class TestHelpers(TestCase):
    """Behavioral tests for coalesce, rename and mirror."""

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)

    def testRenameDirectAndDecoratorForms(self):
        def function():
            pass

        self.assertEqual(rename(function, "other").__name__, "other")

        @rename("decorated")
        def another():
            pass

        self.assertEqual(another.__qualname__, "decorated")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(lambda: None, 1)
        with self.assertRaises(TypeError):
            rename()

    def testMirrorReturnsFreshCopies(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = (["a"], {"k": ("v",)})

        holder = Holder()
        items = holder.items
        self.assertEqual(items, [["a"], {"k": ["v"]}])
        items[0].append("b")
        self.assertEqual(holder._items[0], ["a"])

    def testMirrorKeepsStringsIntact(self):
        class Holder:
            name = mirror("name")

            def __init__(self):
                self._name = "abc"

        self.assertEqual(Holder().name, "abc")


class TestTokens(TestCase):
    """Behavioral tests for switch, negation and short."""

    def testSwitchSingleCharacterUsesOneDash(self):
        self.assertEqual(switch("f"), "-f")

    def testSwitchLongNameUsesTwoDashesAndHyphens(self):
        self.assertEqual(switch("force"), "--force")
        self.assertEqual(switch("dry_run"), "--dry-run")

    def testNegationOfLongAndShortTokens(self):
        self.assertEqual(negation("--verify"), "--no-verify")
        self.assertEqual(negation("-n"), "--no-n")

    def testShortDetection(self):
        self.assertTrue(short("-n"))
        self.assertFalse(short("--n"))
        self.assertFalse(short("--name"))

    def testTokenHelpersRejectNonStrings(self):
        with self.assertRaises(TypeError):
            switch(1)
        with self.assertRaises(TypeError):
            negation(None)


class TestPackageMetadata(TestCase):
    """Behavioral tests for the package metadata."""

    def testTitleAndAuthor(self):
        self.assertEqual(gitnaut.__title__, "gitnaut")
        self.assertEqual(gitnaut.__author__, "gitnaut developers")
        self.assertEqual(gitnaut.__license__, "MIT")


if __name__ == "__main__":
    unittest.main()
