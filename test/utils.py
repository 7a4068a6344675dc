"""
Tests for the internal helpers.

This module verifies the guarantees the rest of the package relies on:
- Unset is a falsy singleton distinct from None, stable under copying and pickling.
- mirror() hands out read-only copies of mutable containers.
- truthy() reads environment-style switches.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from sigil.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` marker.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the exported instance on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self) -> None:
        """
        The marker is falsy but never equal to other falsy values.
        """
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testCopyAndPicklePreserveIdentity(self) -> None:
        """
        copy(), deepcopy() and a pickle round-trip all hand back the same object.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            class Derived(UnsetType):  # NOQA: F-811
                pass


class HelpersTest(TestCase):
    """
    Test suite for mirror() and truthy().
    """

    def testMirrorReturnsCopies(self) -> None:
        """
        Mutating a mirrored container never reaches the backing attribute.
        """
        class Holder:
            items = mirror("items")
            label = mirror("label")

            def __init__(self):
                self._items = {"a": [1, 2]}
                self._label = "x"

        holder = Holder()
        holder.items["a"].append(3)
        self.assertEqual(holder.items, {"a": [1, 2]})
        self.assertEqual(holder.label, "x")
        self.assertEqual(Holder.items.fget.__name__, "items")
        with self.assertRaises(AttributeError):
            holder.items = {}

    def testMirrorRejectsNonStrings(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)

    def testTruthy(self) -> None:
        for text in ("1", "true", "YES", " on ", "y"):
            with self.subTest(text=text):
                self.assertTrue(truthy(text))
        for text in ("0", "false", "", None, "nope"):
            with self.subTest(text=text):
                self.assertFalse(truthy(text))


if __name__ == "__main__":
    unittest.main()
