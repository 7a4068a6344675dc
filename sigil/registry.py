"""
In-memory command registry.

The registry owns the schemas of every registered command, answers the
lookups the completion engine needs (names and schema by name), and turns an
unknown command name into a "did you mean" recovery:

- exact hit                     -> the name itself
- one confident candidate       -> offered for auto-run (yes/no)
- several plausible candidates  -> offered as a menu
- nothing plausible, or refused -> CommandNotFoundError listing the candidates

Example
    registry = Registry(descriptions={"app": "application name"})
    registry.register("deploy {app} {--force|f}")
    registry.find("deplyo", prompter)  # 'deploy' once the user confirms
"""
import logging

from rich.text import Text

from .faults import CommandNotFoundError, FaultCode, getdoc
from .prompts import default_prompter
from .signatures import parse
from .similarity import suggest

logger = logging.getLogger(__name__)


class Registry:
    """
    Parameters
    - descriptions: Mapping[str, str] | None, help lookup shared by every signature.
    - defaults: Iterable[Parameter], options appended to every registered schema.
    """

    def __init__(self, descriptions=None, defaults=()):
        self._descriptions = dict(descriptions or {})
        self._defaults = tuple(defaults)
        self._schemas = {}

    def register(self, signature, /, *, force=False):
        """
        Parse and register a signature; returns its schema.

        Raises ValueError when the signature has no command name, or when the
        name is already registered and force is False.
        """
        schema = parse(signature, self._descriptions, defaults=self._defaults)
        if not schema.name:
            raise ValueError("command signature %r is invalid, it must start with a command name" % signature)
        if not force and schema.name in self._schemas:
            raise ValueError("command %r is already registered" % schema.name)
        self._schemas[schema.name] = schema
        logger.debug("registered command %r", schema.name)
        return schema

    def names(self):
        return list(self._schemas)

    def schema(self, name, /):
        return self._schemas.get(name)

    def __contains__(self, name):
        return name in self._schemas

    def __iter__(self):
        return iter(self._schemas.values())

    def __len__(self):
        return len(self._schemas)

    def find(self, name, /, prompter=None):
        """
        Return the registered name to run for `name`, asking the user when
        only a close match exists.

        Raises CommandNotFoundError when nothing is accepted.
        """
        if name in self._schemas:
            return name

        if prompter is None:
            prompter = default_prompter()

        suggestion = suggest(name, self.names())
        match suggestion.kind:
            case "run":
                question = Text.assemble("command ", (name, "bold yellow"), " is not defined, did you mean ", (suggestion.names[0], "bold green"), "?")
                if prompter.confirm(question):
                    return suggestion.names[0]
            case "menu":
                question = Text.assemble("command ", (name, "bold yellow"), " is not defined, did you mean one of these?")
                if (choice := prompter.select(question, suggestion.names)) is not None:
                    return choice

        raise CommandNotFoundError(
            "command %r is not defined" % name,
            input=name,
            suggestions=suggestion.names,
            hint="did you mean %r?" % suggestion.names[0] if suggestion.names else "run with --help to list available commands",
            docs=getdoc(FaultCode.COMMAND_NOT_FOUND),
        )


__all__ = (
    "Registry",
)
