"""
Sigil resolver layer: bind raw process arguments to a command schema.

What this module provides
- tokenize(schema, argv): split argv into a raw option map (untyped shell
  input, keyed by the spelling the user typed) and positional tokens.
- resolve(schema, argv): coerce raw input into typed values and return an
  Invocation.
- validate(schema, invocation, prompter): enforce required-ness, recovering
  missing required arguments interactively when a prompter allows it.
- Invocation: the typed argument/option values of one run, with guarded
  programmatic overrides and a freeze() switch.

Two phases
- Resolution is eager for options: an unknown spelling or a missing required
  option fails at once, before anything is bound. Positional arguments that
  are missing simply take their fallback.
- Validation runs afterwards so that defaults are populated first and
  interactive recovery gets its chance before a missing argument is fatal.

Option syntax accepted by tokenize()
- '--name', '--name=value', '--name value'
- '-a', '-a=value', '-a value' (single-dash spelling of any alias)
- '-abc' bundles of single-character boolean aliases
- '--' ends option parsing; every later token is positional.
Boolean options never consume the next token. Other options bind the next
token unless it looks like another option, in which case they bind ''.
Repeated options accumulate; array kinds keep every occurrence, scalars keep
the last one.

Quick start
    from sigil import parse, resolve, validate

    schema = parse("deploy {app} {env=staging} {--force|f}")
    invocation = resolve(schema, ["api", "-f"])
    validate(schema, invocation)
    invocation.argument("env")  # 'staging'
    invocation.option("force")  # True
"""
import logging
import math
import re
from collections import deque
from types import MappingProxyType

from rich.text import Text

from .arguments import ParameterKind
from .faults import *
from .prompts import default_prompter
from .similarity import best_match
from .utils import *
from .values import convert

logger = logging.getLogger(__name__)

_NUMERIC = re.compile(r"-\d+(\.\d*)?|-\.\d+")


def _looks_like_option(token):
    return token.startswith("-") and token != "-" and not _NUMERIC.fullmatch(token)


def _unknown(schema, input):
    """
    Build the fault for an option spelling the schema does not declare.
    """
    spellings = [("-" if len(spelling) == 1 else "--") + spelling for spelling in schema.spellings]
    ratings = best_match(input, spellings).ratings if spellings else []
    suggestions = [rating.target for rating in sorted(ratings, key=lambda x: -x.rating) if rating.rating > 0.3]
    if suggestions:
        hint = "did you mean %r?" % suggestions[0]
    else:
        hint = "check the available options listed above"
    return UnknownOptionError(
        "option %r is not recognized by command %r" % (input, schema.name),
        input=input,
        schema=schema,
        suggestions=suggestions,
        hint=hint,
        docs=getdoc(FaultCode.UNKNOWN_OPTION),
    )


def tokenize(schema, argv, /):
    """
    Split argv into (raw_options, positionals) in one left-to-right pass.

    Returns
    - raw_options: dict[str, str | bool | list[str | bool]], keyed by the dash-stripped
      spelling that was typed (canonical name or alias). Array options are keyed
      by their canonical name so values typed under different aliases stay in
      argv order.
    - positionals: list[str], in order.

    Raises
    - UnknownOptionError: on the first spelling that the schema does not declare.
    """
    raw = {}
    positionals = []
    tokens = deque(argv)

    def store(spelling, value):
        if spelling in raw:
            previous = raw[spelling]
            raw[spelling] = [*previous, value] if isinstance(previous, list) else [previous, value]
        else:
            raw[spelling] = value

    def bind(input, spelling, value):
        definition = schema.option(spelling, None)
        if definition is None:
            raise _unknown(schema, input)
        if definition.kind.array:
            spelling = definition.name
        if value is not Unset:
            return store(spelling, value)
        if definition.kind is ParameterKind.BOOLEAN:
            return store(spelling, True)
        if tokens and not _looks_like_option(tokens[0]):
            return store(spelling, tokens.popleft())
        store(spelling, "")

    while tokens:
        token = str(tokens.popleft())

        if token == "--":
            positionals.extend(map(str, tokens))
            break

        if token.startswith("--"):
            spelling, equals, value = token[2:].partition("=")
            bind(token.partition("=")[0], spelling, value if equals else Unset)
        elif _looks_like_option(token):
            body = token[1:]
            spelling, equals, value = body.partition("=")
            if equals or schema.option(body, None) is not None or len(body) == 1:
                bind(token.partition("=")[0], spelling, value if equals else Unset)
            elif all(
                (definition := schema.option(char, None)) is not None and definition.kind is ParameterKind.BOOLEAN
                for char in body
            ):
                for char in body:
                    store(char, True)
            else:
                raise _unknown(schema, token)
        else:
            positionals.append(token)

    logger.debug("tokenized %r into options=%r positionals=%r", list(argv), raw, positionals)
    return raw, positionals


class Invocation:
    """
    Typed values of one command run.

    Lookups and overrides accept canonical names or aliases. Referencing a name
    the schema never declared raises UndeclaredParameterError (a programmer
    error). After freeze(), overrides raise TypeError.
    """
    __slots__ = ("_schema", "_arguments", "_options", "_frozen")

    def __init__(self, schema, arguments, options):
        self._schema = schema
        self._arguments = dict(arguments)
        self._options = dict(options)
        self._frozen = False

    @property
    def schema(self):
        return self._schema

    @property
    def arguments(self):
        return MappingProxyType(self._arguments)

    @property
    def options(self):
        return MappingProxyType(self._options)

    @property
    def frozen(self):
        return self._frozen

    def argument(self, name, /):
        return self._arguments[self._schema.argument(name).name]

    def option(self, name, /):
        return self._options[self._schema.option(name).name]

    def set_argument(self, name, value, /):
        definition = self._schema.argument(name)
        if self._frozen:
            raise TypeError("invocation is frozen, argument %r cannot be overridden" % name)
        self._arguments[definition.name] = value

    def set_option(self, name, value, /):
        definition = self._schema.option(name)
        if self._frozen:
            raise TypeError("invocation is frozen, option %r cannot be overridden" % name)
        self._options[definition.name] = value

    def freeze(self):
        self._frozen = True
        return self

    def __eq__(self, other):
        if not isinstance(other, Invocation):
            return NotImplemented
        return (self._schema, self._arguments, self._options) == (other._schema, other._arguments, other._options)

    def __rich_repr__(self):
        yield "command", self._schema.name
        yield "arguments", {
            name: "***" if self._schema.arguments[name].kind is ParameterKind.SECRET and value else value
            for name, value in self._arguments.items()
        }
        yield "options", {
            name: "***" if self._schema.options[name].kind is ParameterKind.SECRET and value else value
            for name, value in self._options.items()
        }

    def __repr__(self):
        return "invocation(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def _missing_option(schema, definition):
    return MissingRequiredOptionError(
        "option %r is required by command %r" % ("--" + definition.name, schema.name),
        name=definition.name,
        schema=schema,
        hint="pass it as %s=<value>" % ("--" + definition.name),
        docs=getdoc(FaultCode.MISSING_REQUIRED_OPTION),
    )


def _missing_argument(schema, definition):
    return MissingRequiredArgumentError(
        "argument %r is required by command %r" % (definition.name, schema.name),
        name=definition.name,
        schema=schema,
        hint="pass %s as a positional value" % ("one or more values for %r" % definition.name if definition.variadic else repr(definition.name)),
        docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
    )


def resolve(schema, argv, /):
    """
    Resolve argv against schema into an Invocation.

    Options
    - each definition searches its canonical name, then each alias, for a typed value;
    - absent optional options take their fallback;
    - absent required options raise MissingRequiredOptionError immediately.

    Arguments
    - consumed left-to-right in schema order; a variadic argument takes every
      remaining positional token; missing ones take their fallback (no error yet).

    Raises
    - UnknownOptionError, MissingRequiredOptionError, BadValueError.
    """
    raw, positionals = tokenize(schema, argv)

    options = {}
    for name, definition in schema.options.items():
        value = next((raw[spelling] for spelling in definition.spellings if spelling in raw), Unset)
        if value is Unset:
            if definition.required:
                raise _missing_option(schema, definition)
            options[name] = definition.fallback
            continue
        if isinstance(value, list) and not definition.kind.array:
            value = value[-1]
        options[name] = convert(value, definition.kind, name, definition.fallback)

    arguments = {}
    remaining = deque(positionals)
    for name, definition in schema.arguments.items():
        if definition.variadic:
            arguments[name] = convert(list(remaining), definition.kind, name, definition.fallback, role="argument")
            remaining.clear()
        elif remaining:
            arguments[name] = convert(remaining.popleft(), definition.kind, name, definition.fallback, role="argument")
        else:
            arguments[name] = definition.fallback

    if remaining:
        logger.debug("command %r ignores extra positional tokens %r", schema.name, list(remaining))

    return Invocation(schema, arguments, options)


def _missing(definition, value):
    if value is None:
        return True
    if definition.kind.array:
        return not value
    if definition.kind in (ParameterKind.STRING, ParameterKind.SECRET):
        return not str(value).strip()
    return False


def _validator(definition):
    name = definition.name

    if definition.kind.element is ParameterKind.NUMBER:
        def validate(value):
            try:
                number = float(value)
            except (TypeError, ValueError):
                return "%s must be a number" % name
            return True if math.isfinite(number) else "%s must be a number" % name
    else:
        def validate(value):
            if not (value or "").strip():
                return "%s cannot be empty" % name
            return True

    return validate


def _recover(definition, prompter):
    """
    Ask the user for a missing required argument; return the typed value or None.
    """
    if not getattr(prompter, "interactive", True):
        return None

    text = Text.assemble((definition.name, "bold yellow"), " is required")
    if definition.description:
        text.append(": ")
        text.append("(%s)" % definition.description, style="grey50")

    logger.debug("recovering missing argument %r interactively", definition.name)

    if definition.kind.array:
        answer = prompter.ask_list(text, _validator(definition))
        if not answer:
            return None
    elif definition.kind is ParameterKind.BOOLEAN:
        return prompter.confirm(text)
    else:
        answer = prompter.ask(text, None, _validator(definition), secret=definition.kind is ParameterKind.SECRET)
        if answer is None:
            return None

    return convert(answer, definition.kind, definition.name, role="argument")


def validate(schema, invocation, /, prompter=None):
    """
    Enforce required-ness on a resolved invocation.

    - required options with no value (or an empty array) raise MissingRequiredOptionError;
    - required arguments with no value (None, blank text, or an empty array)
      are recovered through the prompter; if that yields nothing,
      MissingRequiredArgumentError is raised.

    Parameters
    - prompter: a prompter (see sigil.prompts); defaults to default_prompter().
      Pass NullPrompter() to disable recovery.
    """
    for name, definition in schema.options.items():
        if definition.required and _missing(definition, invocation.option(name)):
            raise _missing_option(schema, definition)

    if prompter is None:
        prompter = default_prompter()

    for name, definition in schema.arguments.items():
        if not definition.required or not _missing(definition, invocation.argument(name)):
            continue
        value = _recover(definition, prompter)
        if value is None or _missing(definition, value):
            raise _missing_argument(schema, definition)
        invocation.set_argument(name, value)


__all__ = (
    "tokenize",
    "resolve",
    "validate",
    "Invocation",
)
