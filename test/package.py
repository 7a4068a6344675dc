"""
Package surface tests (top-level imports and the aggregated __all__).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import importlib
import unittest
from unittest import TestCase

import sigil


class TestPackage(TestCase):
    """Behavioral tests for the sigil package namespace."""

    def testSimilarityFunctionExported(self):
        self.assertTrue(callable(sigil.similarity))
        self.assertEqual(sigil.similarity("ab", "ab"), 1.0)

    def testEveryExportedNameResolves(self):
        for name in sigil.__all__:
            with self.subTest(name=name):
                self.assertTrue(hasattr(sigil, name))

    def testSubmoduleNamesIncluded(self):
        module = importlib.import_module("sigil.similarity")
        for name in module.__all__:
            with self.subTest(name=name):
                self.assertIn(name, sigil.__all__)

    def testVersionInfo(self):
        self.assertEqual(sigil.__version__, "0.1.0")
        self.assertEqual(sigil.version_info[:3], (0, 1, 0))


if __name__ == "__main__":
    unittest.main()
