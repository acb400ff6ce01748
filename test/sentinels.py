"""
Tests for the Unset sentinel and helpers.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import pickle
import unittest
from unittest import TestCase

from argvreader.utils import *


class TestUnset(TestCase):
    """Semantic guarantees of the Unset singleton."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testCopiesKeepIdentity(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinal(self):
        with self.assertRaises(TypeError):
            class Sub(UnsetType): ...


class TestHelpers(TestCase):
    """Behavioral tests for coalesce() and rename()."""

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(Unset))

    def testRenameFunctionForm(self):
        def f(): ...
        rename(f, "g")
        self.assertEqual((f.__name__, f.__qualname__), ("g", "g"))

    def testRenameDecoratorForm(self):
        @rename("g")
        def f(): ...
        self.assertEqual(f.__name__, "g")

    def testRenameErrors(self):
        with self.assertRaises(TypeError):
            rename(1, "g")
        with self.assertRaises(TypeError):
            rename()


if __name__ == "__main__":
    unittest.main()
