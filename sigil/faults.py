"""
Sigil faults: the errors a command-line user can cause, and how they look.

Taxonomy (each with a stable FaultCode)
- UnknownOptionError           11201  option spelling not in the schema
- MissingRequiredOptionError   11202  required option resolved to nothing
- MissingRequiredArgumentError 11301  required argument still empty after recovery
- BadValueError                11401  raw text that does not convert to its kind
- CommandNotFoundError         11101  no registered command, no suggestion accepted

Every fault is a message plus a read-only options mapping (title, code, hint,
context such as the schema or the suggestions). Rendering goes through rich:

    [ prog — 11201 | Unknown Option ]
    option '--forse' is not recognized by command 'deploy'
    available options:
      --force, -f   skip checks   (boolean)
     → did you mean '--force'?

Host hooks, all optional attributes of __main__:
- __prog__: program name shown in the header.
- __codes__: FaultCode -> label replacing the numeric code.
- __docs__: FaultCode -> documentation string (see getdoc()).
- __styles__: style name -> rich style, merged over the defaults below.

UndeclaredParameterError is different: it reports calling code that asked a
schema for a name it never declared. It derives from LookupError and is not
meant to be caught or rendered.
"""
import copy
import sys
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


def _host(name, default):
    return getattr(sys.modules.get("__main__"), name, default)


class FaultCode(IntEnum):
    """
    stable fault identifiers, grouped by domain:
    111xx routing, 112xx options, 113xx arguments, 114xx values.
    """
    COMMAND_NOT_FOUND           = 11101

    UNKNOWN_OPTION              = 11201
    MISSING_REQUIRED_OPTION     = 11202

    MISSING_REQUIRED_ARGUMENT   = 11301

    BAD_VALUE                   = 11401

    def normalize(self):
        """
        label shown for this code: the host's __codes__ entry, else the number.
        """
        return str(_host("__codes__", {}).get(self, self.value))


_STYLES = MappingProxyType({
    "prog": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "title": "bold #FF4DA6",
    "message": "#C8C8D0",
    "arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
    "label": "bold #FFC857",
    "name": "#7CE38B",
    "descr": "#C8C8D0",
    "kind": "dim",
})


class CommandException(Exception):
    """
    Base class of every user-facing fault.

    Well-known options
    - title, code, hint: header and footer copy (subclasses preset title/code).
    - shell, fancy, colorful, prog: rendering switches, usually given to trigger().
    Anything else is context for renderers and callers (input, schema, ...).
    """
    __defaults__ = MappingProxyType({})

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str) or message is Unset
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(type(self).__defaults__ | options)

    def __str__(self):
        return "" if self.message is Unset else str(self.message)

    def __alternatives__(self):
        """
        (label, rows) listing what the user could have typed instead, or None.

        rows are (name, description, kind) triples; description and kind may be None.
        """
        return None

    def _style(self, role):
        if not self.options.get("colorful", True):
            return ""
        return (_STYLES | _host("__styles__", {})).get(role, "")

    def _header(self):
        code = self.options.get("code")
        return Text.assemble(
            "[ ",
            (str(self.options.get("prog") or _host("__prog__", "sigil")), self._style("prog")),
            " — ",
            (code.normalize() if code else "?", self._style("code")),
            " | ",
            (str(self.options.get("title", "error")).title(), self._style("title")),
            " ]",
        )

    def _table(self, rows):
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        table.add_column(no_wrap=True)
        for name, descr, kind in rows:
            table.add_row(
                Text(name, self._style("name")),
                Text(descr or "", self._style("descr")),
                Text("(%s)" % kind if kind else "", self._style("kind")),
            )
        return table

    def _body(self):
        yield Text(str(self), self._style("message"))
        if alternatives := self.__alternatives__():
            label, rows = alternatives
            yield Text(label + ":", self._style("label"))
            yield self._table(rows)
        if hint := self.options.get("hint"):
            yield Text.assemble((" → ", self._style("arrow")), (str(hint), self._style("hint")))

    def __rich__(self):
        if self.options.get("fancy", False):
            return Panel(Group(*self._body()), title=self._header(), title_align="left")
        return Group(self._header(), *self._body())

    def __trigger__(self):
        if self.options.get("shell", False):
            console.print(self)
            sys.exit(1)
        raise self from None

    def __replace__(self, /, **overrides):
        return type(self)(self.message, **(dict(self.options) | overrides))


def _parameter_rows(parameters, *, options):
    return [
        (", ".join(parameter.flags()) if options else parameter.name, parameter.description, parameter.kind.label)
        for parameter in parameters
    ]


class UnknownOptionError(CommandException):
    """
    An option spelling that the schema does not declare.

    options: input (the spelling as typed), schema, suggestions.
    """
    __defaults__ = MappingProxyType({
        "title": "unknown option",
        "code": FaultCode.UNKNOWN_OPTION,
    })

    def __alternatives__(self):
        if not (schema := self.options.get("schema")) or not schema.options:
            return None
        return "available options", _parameter_rows(schema.options.values(), options=True)


class MissingRequiredOptionError(CommandException):
    """
    A required option that resolved to no value.

    options: name, schema.
    """
    __defaults__ = MappingProxyType({
        "title": "missing required option",
        "code": FaultCode.MISSING_REQUIRED_OPTION,
    })


class MissingRequiredArgumentError(CommandException):
    """
    A required positional argument that resolved to no value, even after
    interactive recovery.

    options: name, schema.
    """
    __defaults__ = MappingProxyType({
        "title": "missing required argument",
        "code": FaultCode.MISSING_REQUIRED_ARGUMENT,
    })

    def __alternatives__(self):
        if not (schema := self.options.get("schema")) or not schema.arguments:
            return None
        return "expected arguments", _parameter_rows(schema.arguments.values(), options=False)


class BadValueError(CommandException):
    """
    A raw value that cannot be converted to the declared kind.

    options: name (parameter), value (the offending raw text), kind.
    """
    __defaults__ = MappingProxyType({
        "title": "bad value",
        "code": FaultCode.BAD_VALUE,
    })


class CommandNotFoundError(CommandException):
    """
    A command name with no registered match (and no accepted suggestion).

    options: input, suggestions.
    """
    __defaults__ = MappingProxyType({
        "title": "command not found",
        "code": FaultCode.COMMAND_NOT_FOUND,
    })

    def __alternatives__(self):
        if not (suggestions := self.options.get("suggestions")):
            return None
        return "did you mean one of these", [(name, None, None) for name in suggestions]


class UndeclaredParameterError(LookupError):
    """
    Calling code referenced a parameter name the schema does not declare.
    """

    def __init__(self, name, kind, available, /):
        super().__init__("%s %r is not declared in the command signature (declared: %s)" % (
            kind, name, ", ".join(map(repr, available)) or "none"
        ))
        self.name = name
        self.kind = kind
        self.available = tuple(available)


def trigger(fault, /, **options):
    """
    Surface a fault: copy.replace() it with options, then let it trigger itself.

    With shell=True the fault is printed to stderr and the process exits with
    status 1; otherwise the updated fault is raised.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must be a fault (__trigger__ and __replace__ required)")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    Documentation string the host registered for code in __main__.__docs__, or None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a FaultCode")
    return _host("__docs__", {}).get(code)


__all__ = (
    "CommandException",
    "UnknownOptionError",
    "MissingRequiredOptionError",
    "MissingRequiredArgumentError",
    "BadValueError",
    "CommandNotFoundError",
    "UndeclaredParameterError",
    "FaultCode",
    "trigger",
    "getdoc",
)
