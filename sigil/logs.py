"""
Logging setup for host applications.

Every sigil module logs through logging.getLogger(__name__) under the "sigil"
namespace and never installs handlers on import. A host that wants to see
those records (parse decisions, suggestion outcomes, swallowed completion
failures) calls configure() once:

    from sigil.logs import configure
    configure("DEBUG")

configure() attaches a rich.logging.RichHandler writing to stderr; calling it
again only updates the level (and the console, when one is given).
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER = "sigil"


def configure(level=logging.WARNING, /, *, console=None):
    """
    Route sigil's log records through rich.

    Parameters
    - level: int | str, e.g. logging.DEBUG or "DEBUG".
    - console: rich.console.Console | None, defaults to a stderr console.

    Returns
    - logging.Logger: the "sigil" logger.
    """
    logger = logging.getLogger(LOGGER)
    logger.setLevel(level)

    handler = next((handler for handler in logger.handlers if isinstance(handler, RichHandler)), None)
    if handler is None:
        handler = RichHandler(console=console or Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    elif console is not None:
        handler.console = console

    handler.setLevel(level)
    return logger


__all__ = (
    "configure",
)
