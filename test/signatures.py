"""
Signature parser behavioral tests.

Scope
- Validate each token transformation (description, default, aliases, option
  prefix, array default, optional marker, variadic marker, description lookup).
- Validate schema-level normalization (variadic demotion, alias collisions).
- Validate that malformed signatures degrade instead of raising.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from sigil import Parameter, ParameterKind, parse, parse_token


class TestParseToken(TestCase):
    """Behavioral tests for single-token parsing."""

    def testPlainArgumentIsRequiredString(self):
        name, option, p = parse_token("app")
        self.assertEqual(name, "app")
        self.assertFalse(option)
        self.assertIs(p.kind, ParameterKind.STRING)
        self.assertTrue(p.required)

    def testDefaultMakesOptional(self):
        _, _, p = parse_token("env=staging")
        self.assertFalse(p.required)
        self.assertEqual(p.default, "staging")

    def testEmptyDefaultIsNone(self):
        name, option, p = parse_token("--region=")
        self.assertEqual(name, "region")
        self.assertTrue(option)
        self.assertIs(p.kind, ParameterKind.STRING)
        self.assertFalse(p.required)
        self.assertIsNone(p.default)

    def testBooleanDefaults(self):
        _, _, yes = parse_token("--color=true")
        _, _, no = parse_token("--color=false")
        self.assertIs(yes.kind, ParameterKind.BOOLEAN)
        self.assertIs(yes.default, True)
        self.assertIs(no.default, False)

    def testBareOptionIsBooleanFlag(self):
        name, option, p = parse_token("--force")
        self.assertEqual(name, "force")
        self.assertTrue(option)
        self.assertIs(p.kind, ParameterKind.BOOLEAN)
        self.assertFalse(p.required)
        self.assertIs(p.default, False)

    def testAliases(self):
        name, _, p = parse_token("--env|e=prod")
        self.assertEqual(name, "env")
        self.assertEqual(p.aliases, ("e",))
        self.assertEqual(p.default, "prod")

    def testStarDefaultIsArray(self):
        _, option, p = parse_token("--tag=*")
        self.assertTrue(option)
        self.assertIs(p.kind, ParameterKind.STRING_ARRAY)
        self.assertEqual(p.default, [])
        self.assertFalse(p.variadic)

    def testOptionalMarker(self):
        name, _, p = parse_token("env?")
        self.assertEqual(name, "env")
        self.assertFalse(p.required)
        self.assertIsNone(p.fallback)

    def testVariadicMarker(self):
        name, _, p = parse_token("files*")
        self.assertEqual(name, "files")
        self.assertTrue(p.variadic)
        self.assertIs(p.kind, ParameterKind.STRING_ARRAY)
        self.assertEqual(p.default, [])

    def testInlineDescription(self):
        name, _, p = parse_token("--region=: target region")
        self.assertEqual(name, "region")
        self.assertEqual(p.description, "target region")

    def testDescriptionLookup(self):
        _, _, argument = parse_token("app", {"app": "application"})
        _, _, option = parse_token("--loud", {"--loud": "shout"})
        self.assertEqual(argument.description, "application")
        self.assertEqual(option.description, "shout")

    def testInlineDescriptionWins(self):
        _, _, p = parse_token("app: inline", {"app": "lookup"})
        self.assertEqual(p.description, "inline")


class TestParse(TestCase):
    """Behavioral tests for whole-signature parsing."""

    def testFullSignature(self):
        schema = parse("deploy {app} {env=staging} {tags*} {--force|f} {--region=: target region}")
        self.assertEqual(schema.name, "deploy")
        self.assertEqual(list(schema.arguments), ["app", "env", "tags"])
        self.assertEqual(set(schema.options), {"force", "region"})
        self.assertEqual(schema.option("f").name, "force")
        self.assertTrue(schema.arguments["tags"].variadic)

    def testParsingIsIdempotent(self):
        signature = "deploy {app} {env=staging} {tags*} {--force|f} {--label=*}"
        self.assertEqual(parse(signature), parse(signature))
        self.assertEqual(hash(parse(signature)), hash(parse(signature)))

    def testCommandOnly(self):
        schema = parse("status")
        self.assertEqual(schema.name, "status")
        self.assertEqual(len(schema.arguments), 0)
        self.assertEqual(len(schema.options), 0)

    def testEmptySignature(self):
        schema = parse("")
        self.assertEqual(schema.name, "")
        self.assertEqual(len(schema.arguments), 0)

    def testEmptyBracesIgnored(self):
        schema = parse("x {} {a}")
        self.assertEqual(list(schema.arguments), ["a"])

    def testVariadicNotLastIsDemoted(self):
        schema = parse("cp {sources*} {dest}")
        sources = schema.arguments["sources"]
        self.assertFalse(sources.variadic)
        self.assertIs(sources.kind, ParameterKind.STRING_ARRAY)
        self.assertEqual(list(schema.arguments), ["sources", "dest"])

    def testOnlyLastOfSeveralVariadicsSurvives(self):
        schema = parse("x {a*} {b*}")
        self.assertFalse(schema.arguments["a"].variadic)
        self.assertTrue(schema.arguments["b"].variadic)

    def testCollidingAliasDropped(self):
        schema = parse("x {--force|f} {--fast|f}")
        self.assertEqual(schema.options["force"].aliases, ("f",))
        self.assertEqual(schema.options["fast"].aliases, ())

    def testAliasShadowingOptionNameDropped(self):
        schema = parse("x {--verbose} {--debug|verbose}")
        self.assertEqual(schema.options["debug"].aliases, ())

    def testDefaultOptionsAdded(self):
        help = Parameter("help", ParameterKind.BOOLEAN, required=False, aliases=("h",))
        schema = parse("x {a}", defaults=(help,))
        self.assertIn("help", schema.options)
        self.assertEqual(schema.option("h").name, "help")

    def testSignatureOptionWinsOverDefault(self):
        help = Parameter("help", ParameterKind.BOOLEAN, required=False)
        schema = parse("x {--help=: custom help}", defaults=(help,))
        self.assertEqual(schema.options["help"].description, "custom help")

    def testDescriptionsMapping(self):
        schema = parse("greet {name} {--loud}", {"name": "who to greet", "--loud": "shout"})
        self.assertEqual(schema.argument_help("name"), "who to greet")
        self.assertEqual(schema.option_help("loud"), "shout")


if __name__ == "__main__":
    unittest.main()
