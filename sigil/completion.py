"""
Shell completion: context parsing, classification, and suggestions.

What this module provides
- split_words(line): quote/escape-aware word splitting of a command line.
- parse_context(line, cursor): generic context from a line and a cursor offset.
- parse_bash_context(env, shell): context from COMP_LINE / COMP_POINT / COMP_CWORD
  (bash and zsh).
- parse_fish_context(args): context from fish's '--line'/'--point' arguments,
  or from the raw arguments joined with spaces when those flags are absent.
- classify(context, schema): what is being completed (CompletionType).
- complete(context, registry): suggestions for the context, using the same
  schemas the resolver uses.
- render(completion, shell): the text the shell glue prints.

Context layout
- words[0] is the program, words[1] the command, the rest its input.
- index is the word under (or right after) the cursor; it equals len(words)
  when the cursor sits past every word, and current is then ''.

Failure policy
- Completion never interrupts the user's shell: any error while looking up a
  command or reading a schema yields an empty suggestion list (logged at debug).
"""
import logging
from enum import Enum
from typing import NamedTuple

from .arguments import ParameterKind

logger = logging.getLogger(__name__)

SHELLS = ("bash", "zsh", "fish")


class CompletionType(Enum):
    COMMAND = "command"
    OPTION = "option"
    OPTION_VALUE = "option_value"
    ARGUMENT = "argument"


class Context(NamedTuple):
    line: str
    cursor: int
    words: list[str]
    index: int
    current: str
    previous: str
    shell: str | None = None


class Completion(NamedTuple):
    suggestions: list[str]
    type: CompletionType | None
    command: str | None = None


def _scan(line):
    """
    Split line into (word, start, end) spans.

    Quotes and backslashes are consumed, not kept; an unterminated quote runs
    to the end of the line. Offsets refer to the raw line.
    """
    spans = []
    word = []
    start = None
    single = double = escaped = False

    for offset, char in enumerate(line):
        if escaped:
            word.append(char)
            escaped = False
            continue
        if char == "\\":
            escaped = True
            start = offset if start is None else start
            continue
        if char == "'" and not double:
            single = not single
            start = offset if start is None else start
            continue
        if char == '"' and not single:
            double = not double
            start = offset if start is None else start
            continue
        if char == " " and not single and not double:
            if word:
                spans.append(("".join(word), start, offset))
            word = []
            start = None
            continue
        word.append(char)
        start = offset if start is None else start

    if word:
        spans.append(("".join(word), start, len(line)))
    return spans


def split_words(line, /):
    """
    Words of a command line, honoring single quotes, double quotes and escapes.

    >>> split_words("cli 'hello world' test")
    ['cli', 'hello world', 'test']
    """
    return [word for word, _, _ in _scan(line)]


def _index(spans, cursor):
    for position, (_, start, end) in enumerate(spans):
        if start <= cursor <= end:
            return position
        if position + 1 < len(spans) and end < cursor < spans[position + 1][1]:
            return position + 1
    return len(spans)


def _build(line, cursor, words, index, shell):
    index = max(0, min(index, len(words)))
    return Context(
        line=line,
        cursor=cursor,
        words=words,
        index=index,
        current=words[index] if index < len(words) else "",
        previous=words[index - 1] if 0 < index <= len(words) else "",
        shell=shell,
    )


def parse_context(line, cursor=None, /, shell=None):
    """
    Generic context: the word index is derived from the cursor offset.

    cursor defaults to the end of the line.
    """
    cursor = len(line) if cursor is None else cursor
    spans = _scan(line)
    return _build(line, cursor, [word for word, _, _ in spans], _index(spans, cursor), shell)


def _integer(text):
    try:
        return int(text or 0)
    except (TypeError, ValueError):
        return 0


def parse_bash_context(env, /, shell="bash"):
    """
    Context from bash/zsh completion variables.

    env is a mapping holding COMP_LINE, COMP_POINT and COMP_CWORD (missing or
    malformed numbers count as 0). The word index is taken from COMP_CWORD.
    """
    line = env.get("COMP_LINE") or ""
    words = split_words(line)
    return _build(line, _integer(env.get("COMP_POINT")), words, _integer(env.get("COMP_CWORD")), shell)


def parse_fish_context(args, /):
    """
    Context from fish arguments: '--line <text>' and '--point <offset>' when
    present, otherwise every argument joined with spaces and the cursor at the end.
    """
    args = list(args)
    line = ""
    cursor = 0
    for position, arg in enumerate(args[:-1]):
        if arg == "--line":
            line = args[position + 1]
        elif arg == "--point":
            cursor = _integer(args[position + 1])

    if not line and args:
        line = " ".join(args)
        cursor = len(line)

    return parse_context(line, cursor, shell="fish")


def parse_shell_context(source, shell, /):
    """
    Dispatch to the parser of a shell dialect.

    source is the environment mapping for bash/zsh and the argument list for fish.
    """
    match shell:
        case "bash" | "zsh":
            return parse_bash_context(source, shell)
        case "fish":
            return parse_fish_context(source)
        case _:
            raise ValueError("unsupported shell %r (expected one of: %s)" % (shell, ", ".join(SHELLS)))


def _clean(word):
    """
    Option name of a word: leading dashes and any '=value' tail removed.
    """
    return word.lstrip("-").partition("=")[0]


def _command(context):
    if len(context.words) >= 2 and not context.words[1].startswith("-"):
        return context.words[1]
    return None


def classify(context, schema=None, /):
    """
    Classify the completion point.

    - index <= 1                                   -> COMMAND
    - current word starts with '-'                 -> OPTION
    - previous word names a non-boolean option     -> OPTION_VALUE
    - otherwise                                    -> ARGUMENT
    """
    if context.index <= 1:
        return CompletionType.COMMAND
    if context.current.startswith("-"):
        return CompletionType.OPTION
    if context.previous.startswith("-") and schema is not None:
        definition = schema.option(_clean(context.previous), None)
        if definition is not None and definition.kind is not ParameterKind.BOOLEAN:
            return CompletionType.OPTION_VALUE
    return CompletionType.ARGUMENT


def _used(context, schema):
    """
    Canonical names of options already typed before the current word.
    """
    used = set()
    for word in context.words[2:context.index]:
        if word.startswith("-") and (definition := schema.option(_clean(word), None)) is not None:
            used.add(definition.name)
    return used


def _options(context, schema):
    used = _used(context, schema)
    suggestions = []
    for name, definition in schema.options.items():
        if name in used and not definition.kind.array:
            continue
        suggestions.extend(definition.flags())
    return suggestions


def _hints(definition):
    match definition.kind:
        case ParameterKind.BOOLEAN:
            return ["true", "false"]
        case _:
            return []


def _option_values(context, schema):
    definition = schema.option(_clean(context.previous), None)
    return _hints(definition) if definition is not None else []


def _position(context, schema):
    """
    Positional index of the current word, skipping options and their values.

    A non-boolean option typed as --name consumes the following word as its
    value. Written as --name=value it already carries the value, so the next
    word counts as a positional.
    """
    position = 0
    index = 2
    while index < context.index:
        word = context.words[index]
        if word.startswith("-"):
            definition = schema.option(_clean(word), None)
            if (
                definition is not None and
                definition.kind is not ParameterKind.BOOLEAN and
                "=" not in word and
                index + 1 < context.index
            ):
                index += 1
        else:
            position += 1
        index += 1
    return position


def _arguments(context, schema):
    definitions = list(schema.arguments.values())
    position = _position(context, schema)
    if position < len(definitions):
        return _hints(definitions[position])
    if definitions and definitions[-1].variadic:
        return _hints(definitions[-1])
    return []


def _filter(suggestions, prefix):
    if not prefix:
        return list(suggestions)
    return [suggestion for suggestion in suggestions if suggestion.startswith(prefix)]


def complete(context, registry, /):
    """
    Suggestions for a completion context.

    Parameters
    - context: Context.
    - registry: any object with names() -> Iterable[str] and
      schema(name) -> Schema | None (for example sigil.Registry).

    Returns
    - Completion(suggestions, type, command); suggestions keep only entries
      starting with the current word.
    """
    type = None
    command = None
    try:
        command = _command(context)
        schema = registry.schema(command) if command is not None else None
        type = classify(context, schema)

        match type:
            case CompletionType.COMMAND:
                suggestions = list(registry.names())
            case CompletionType.OPTION:
                suggestions = _options(context, schema) if schema is not None else []
            case CompletionType.OPTION_VALUE:
                suggestions = _option_values(context, schema)
            case CompletionType.ARGUMENT:
                suggestions = _arguments(context, schema) if schema is not None else []
            case _:
                suggestions = []

        return Completion(_filter(suggestions, context.current), type, command)
    except Exception:
        logger.debug("completion failed for %r", context.line, exc_info=True)
        return Completion([], type, command)


def render(completion, /, shell="bash"):
    """
    Shell-facing text: one suggestion per line for bash/zsh, space-joined for fish.
    """
    if shell == "fish":
        return " ".join(completion.suggestions)
    return "\n".join(completion.suggestions)


__all__ = (
    "CompletionType",
    "Context",
    "Completion",
    "split_words",
    "parse_context",
    "parse_bash_context",
    "parse_fish_context",
    "parse_shell_context",
    "classify",
    "complete",
    "render",
)
