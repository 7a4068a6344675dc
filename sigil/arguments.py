r"""
Sigil parameter definitions and command schemas.

Overview
- ParameterKind: closed set of value kinds a parameter may carry
  (string, number, boolean, secret, string array, number array).
- Parameter: one positional argument or named option. Both share the same
  shape: kind, required-ness, default, aliases, variadic-ness, description.
- Schema: a command name plus its ordered arguments and its options.

Every other module (signature parser, value resolver, completion engine)
reads this model and never mutates it. Parameters and schemas are read-only
once built: fields are exposed through mirror() properties that hand out
fresh copies of container values.

Invariants (enforced on construction)
- variadic implies an array kind and an empty default.
- a required parameter ignores its default.
- aliases are unique and never equal to the parameter's own name.
- at most one variadic argument, and it must be the last one.

Quick example:
    >>> from sigil.arguments import Parameter, ParameterKind, Schema
    >>> app = Parameter("app")
    >>> tags = Parameter("tags", ParameterKind.STRING_ARRAY, required=False, variadic=True)
    >>> force = Parameter("force", ParameterKind.BOOLEAN, required=False, default=False, aliases=("f",))
    >>> schema = Schema("deploy", arguments=(app, tags), options=(force,))
    >>> schema.option("f").name
    'force'
"""
import functools
import operator
from enum import Enum
from types import MappingProxyType

from .faults import UndeclaredParameterError
from .utils import *


class ParameterKind(Enum):
    """
    The value kind of a parameter.

    SECRET converts like STRING but is never echoed back in prompts,
    fault messages or completion suggestions.
    """
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SECRET = "secret"
    STRING_ARRAY = "string[]"
    NUMBER_ARRAY = "number[]"

    @property
    def label(self):
        return self.value

    @property
    def array(self):
        return self in (ParameterKind.STRING_ARRAY, ParameterKind.NUMBER_ARRAY)

    @property
    def element(self):
        """
        Scalar kind of each element for array kinds; the kind itself otherwise.
        """
        match self:
            case ParameterKind.STRING_ARRAY:
                return ParameterKind.STRING
            case ParameterKind.NUMBER_ARRAY:
                return ParameterKind.NUMBER
            case _:
                return self

    def arrayed(self):
        """
        Array form of this kind. Booleans have no array form and stay as-is.
        """
        match self:
            case ParameterKind.STRING | ParameterKind.SECRET | ParameterKind.STRING_ARRAY:
                return ParameterKind.STRING_ARRAY
            case ParameterKind.NUMBER | ParameterKind.NUMBER_ARRAY:
                return ParameterKind.NUMBER_ARRAY
            case ParameterKind.BOOLEAN:
                return ParameterKind.BOOLEAN

    @classmethod
    def of(cls, object, /):
        """
        Accept a ParameterKind or its textual label ("string", "number[]", ...).
        """
        if isinstance(object, cls):
            return object
        try:
            return cls(object)
        except ValueError:
            raise ValueError("unknown parameter kind %r" % (object,)) from None


class Parameter:
    """
    Definition of one argument or option.

    Parameters
    - name: str, canonical name (no leading dashes).
    - kind: ParameterKind | str, defaults to STRING.
    - required: bool, defaults to True.
    - default: any, ignored when required (array kinds always fall back to []).
    - aliases: Iterable[str], alternate names; duplicates and self-aliases are dropped.
    - variadic: bool, greedy positional consumption; forces an array kind and [] default.
    - description: str | None, short help.
    """
    __slots__ = ("_name", "_kind", "_required", "_default", "_aliases", "_variadic", "_description")

    name = mirror("name")
    kind = mirror("kind")
    required = mirror("required")
    default = mirror("default")
    aliases = mirror("aliases")
    variadic = mirror("variadic")
    description = mirror("description")

    def __init__(
            self,
            name,
            kind=ParameterKind.STRING,
            /,
            *,
            required=True,
            default=None,
            aliases=(),
            variadic=False,
            description=None,
    ):
        if not isinstance(name, str):
            raise TypeError("parameter name must be a string")
        if isinstance(aliases, str):
            aliases = (aliases,)

        kind = ParameterKind.of(kind)
        if variadic:
            kind = kind.arrayed()
            if not kind.array:
                raise ValueError("variadic parameter %r must have an array kind" % name)
            default = []

        self._name = name
        self._kind = kind
        self._required = bool(required)
        self._default = list(default) if kind.array and default is not None else default
        self._aliases = tuple(dict.fromkeys(alias for alias in aliases if alias and alias != name))
        self._variadic = bool(variadic)
        self._description = description or None

    @property
    def fallback(self):
        """
        Value used when nothing was provided for this parameter.

        - array kinds: the declared default, or [] (always [] when required).
        - required scalars: None (validation decides what happens next).
        - booleans without a default: False.
        - everything else: the declared default.
        """
        if self._kind.array:
            return [] if self._required or self._default is None else list(self._default)
        if self._required:
            return None
        if self._default is None and self._kind is ParameterKind.BOOLEAN:
            return False
        return self._default

    @property
    def spellings(self):
        """
        Canonical name followed by every alias.
        """
        return (self._name, *self._aliases)

    def flags(self):
        """
        Command-line spellings: '--name', then '-a' for single-character aliases
        and '--alias' for longer ones.
        """
        return ["--" + self._name, *(("-" if len(alias) == 1 else "--") + alias for alias in self._aliases)]

    def replace(self, **changes):
        """
        Return a copy with the given fields replaced.
        """
        fields = {
            "name": self._name,
            "kind": self._kind,
            "required": self._required,
            "default": self._default,
            "aliases": self._aliases,
            "variadic": self._variadic,
            "description": self._description,
        } | changes
        return type(self)(fields.pop("name"), fields.pop("kind"), **fields)

    def __key(self):
        return (
            self._name,
            self._kind,
            self._required,
            self._default if not isinstance(self._default, list) else tuple(self._default),
            self._aliases,
            self._variadic,
            self._description,
        )

    def __eq__(self, other):
        if not isinstance(other, Parameter):
            return NotImplemented
        return self.__key() == other.__key()

    def __hash__(self):
        return hash(self.__key())

    def __rich_repr__(self):
        yield "name", self._name
        yield "kind", self._kind.label
        yield "required", self._required
        yield "default", "***" if self._kind is ParameterKind.SECRET and self._default else self._default
        yield "aliases", self._aliases
        yield "variadic", self._variadic
        yield "description", self._description

    def __repr__(self):
        return f"parameter({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


class Schema:
    """
    Parsed, structured form of a command signature.

    Parameters
    - name: str, the command name.
    - arguments: Iterable[Parameter], positional order is significant.
    - options: Iterable[Parameter], order is not significant.

    Lookups accept the canonical name or any alias; argument aliases and option
    aliases live in separate namespaces.
    """
    __slots__ = ("_name", "_arguments", "_options", "_argument_index", "_option_index")

    name = mirror("name")

    def __init__(self, name, /, arguments=(), options=()):
        if not isinstance(name, str):
            raise TypeError("schema name must be a string")

        self._name = name
        self._arguments = MappingProxyType({argument.name: argument for argument in arguments})
        self._options = MappingProxyType({option.name: option for option in options})

        variadics = [argument.name for argument in self._arguments.values() if argument.variadic]
        if len(variadics) > 1:
            raise ValueError("schema %r declares more than one variadic argument: %s" % (name, ", ".join(variadics)))
        if variadics and variadics[0] != next(reversed(self._arguments)):
            raise ValueError("schema %r variadic argument %r must be the last one" % (name, variadics[0]))

        self._argument_index = MappingProxyType(self._index(self._arguments))
        self._option_index = MappingProxyType(self._index(self._options))

    @staticmethod
    def _index(parameters):
        index = {}
        for parameter in parameters.values():
            index.setdefault(parameter.name, parameter.name)
        for parameter in parameters.values():
            for alias in parameter.aliases:
                index.setdefault(alias, parameter.name)
        return index

    @property
    def arguments(self):
        return self._arguments

    @property
    def options(self):
        return self._options

    @property
    def spellings(self):
        """
        Every option spelling (canonical names and aliases) without dashes.
        """
        return tuple(self._option_index)

    def option(self, name, /, default=Unset):
        """
        Return the option definition for a canonical name or alias.

        Raises UndeclaredParameterError when absent and no default is given.
        """
        try:
            return self._options[self._option_index[name]]
        except KeyError:
            if default is not Unset:
                return default
            raise UndeclaredParameterError(name, "option", self._options) from None

    def argument(self, name, /, default=Unset):
        """
        Return the argument definition for a canonical name or alias.

        Raises UndeclaredParameterError when absent and no default is given.
        """
        try:
            return self._arguments[self._argument_index[name]]
        except KeyError:
            if default is not Unset:
                return default
            raise UndeclaredParameterError(name, "argument", self._arguments) from None

    def option_help(self, name, /):
        return self.option(name).description

    def argument_help(self, name, /):
        return self.argument(name).description

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return (
            self._name == other._name and
            list(self._arguments.values()) == list(other._arguments.values()) and
            dict(self._options) == dict(other._options)
        )

    def __hash__(self):
        return hash((self._name, tuple(self._arguments.values()), frozenset(self._options.values())))

    def __rich_repr__(self):
        yield "name", self._name
        yield "arguments", list(self._arguments.values())
        yield "options", list(self._options.values())

    def __repr__(self):
        return f"schema({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


__all__ = (
    "ParameterKind",
    "Parameter",
    "Schema",
)
