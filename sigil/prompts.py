"""
Interactive prompt capability injected into the resolver and the registry.

The library never talks to a terminal directly. Whoever needs user input
(interactive recovery of missing arguments, "did you mean" offers) receives a
Prompter and calls one of four primitives:

- ask(text, default, validate, secret=False) -> str | None
- ask_list(text, validate) -> list[str] | None
- confirm(text, default=False) -> bool
- select(text, choices) -> str | None

A validator returns True to accept the answer or a message string to reject
it (the prompt is repeated with the message shown). None means "cancelled".

Any object with these four methods can be injected. An optional `interactive`
attribute set to False marks a prompter that never asks, so callers skip it
entirely; a prompter without the attribute is treated as interactive.

Implementations
- NullPrompter: non-interactive; every question is declined (None/False).
- RichPrompter: terminal prompts through rich.prompt.
- default_prompter(): NullPrompter when stdin is not a TTY or when the
  SIGIL_NO_INTERACTION environment variable is truthy, RichPrompter otherwise.
"""
import logging
import os
import sys

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.text import Text

from .utils import truthy

logger = logging.getLogger(__name__)


class NullPrompter:
    """
    Prompter used in scripted contexts: it never asks and always declines.
    """
    interactive = False

    def ask(self, text, default=None, validate=None, *, secret=False):
        return None

    def ask_list(self, text, validate=None):
        return None

    def confirm(self, text, default=False):
        return False

    def select(self, text, choices):
        return None


class RichPrompter(NullPrompter):
    """
    Terminal prompts rendered with rich.

    Parameters
    - console: rich.console.Console | None, defaults to a stderr console so that
      prompts never pollute captured stdout.
    """
    interactive = True

    def __init__(self, console=None):
        self.console = console or Console(stderr=True)

    def _reject(self, message):
        self.console.print(Text(" → %s" % message, style="italic #FF4DA6"))

    def ask(self, text, default=None, validate=None, *, secret=False):
        options = {"console": self.console, "password": secret}
        if default is not None:
            options |= {"default": str(default), "show_default": not secret}

        while True:
            try:
                answer = Prompt.ask(text, **options)
            except (EOFError, KeyboardInterrupt):
                logger.debug("prompt %r cancelled", text)
                return None
            if validate is None or (verdict := validate(answer)) is True:
                return answer
            self._reject(verdict or "invalid value")

    def ask_list(self, text, validate=None):
        while True:
            answer = self.ask(Text.assemble(text, (" (comma separated)", "dim")))
            if answer is None:
                return None
            items = [item.strip() for item in answer.split(",") if item.strip()]
            verdicts = [verdict for verdict in map(validate or (lambda item: True), items) if verdict is not True]
            if not verdicts:
                return items
            self._reject(verdicts[0] or "invalid value")

    def confirm(self, text, default=False):
        try:
            return Confirm.ask(text, console=self.console, default=default)
        except (EOFError, KeyboardInterrupt):
            logger.debug("confirmation %r cancelled", text)
            return False

    def select(self, text, choices):
        choices = list(choices)
        if not choices:
            raise ValueError("select() requires at least one choice")

        self.console.print(text)
        for index, choice in enumerate(choices, 1):
            self.console.print(Text.assemble(("  %d) " % index, "dim"), choice))
        try:
            answer = Prompt.ask(
                "choose",
                console=self.console,
                choices=[str(index) for index in range(1, len(choices) + 1)],
                default="1",
            )
        except (EOFError, KeyboardInterrupt):
            logger.debug("selection %r cancelled", text)
            return None
        return choices[int(answer) - 1]


def default_prompter():
    """
    Pick the prompter for the current process.
    """
    if truthy(os.environ.get("SIGIL_NO_INTERACTION")):
        return NullPrompter()
    try:
        interactive = sys.stdin is not None and sys.stdin.isatty()
    except ValueError:
        interactive = False
    return RichPrompter() if interactive else NullPrompter()


__all__ = (
    "NullPrompter",
    "RichPrompter",
    "default_prompter",
)
