r"""
Signature mini-language parser.

A signature is a command name followed by brace-delimited parameter tokens:

    deploy {app} {env=staging} {tags*} {--force|f} {--region=: target region}

Token syntax (applied left-to-right as successive transformations)
1. name:description   description captured after the first ':'.
2. name=default       optional; empty default -> None; 'true'/'false' -> boolean.
                      Without '=', a '--name' token is an optional boolean option
                      defaulting to False.
3. name|a|b           first segment is canonical, the rest are aliases.
4. --name             marks an option (prefix stripped); otherwise an argument.
5. default '*'        array kind with [] default (not variadic).
6. name?              optional.
7. name*              variadic: array kind, [] default, greedy positional.
8. description        falls back to descriptions[name], then descriptions['--' + name].

Failure policy
- The parser never raises. Anything it does not recognize degrades to a
  required string parameter named by the raw token, and schema-level
  conflicts are normalized instead of rejected:
  • a variadic marker on an argument that is not the last one demotes it to a
    plain (non-variadic) array argument;
  • an alias already taken in its namespace (argument aliases and option aliases
    are separate) is dropped.
  Problems surface later, when actual input is resolved against the schema.
"""
import logging
import re

from .arguments import Parameter, ParameterKind, Schema

logger = logging.getLogger(__name__)


def parse_token(token, descriptions=None, /):
    """
    Parse the inner text of one '{...}' token.

    Returns
    - tuple[str, bool, Parameter]: (name, is_option, definition)
    """
    descriptions = descriptions or {}

    name = token
    kind = ParameterKind.STRING
    required = True
    default = None
    aliases = ()
    variadic = False
    description = None
    option = False

    if ":" in name:
        name, _, description = name.partition(":")
        name = name.strip()
        description = description.strip()

    if "=" in name:
        name, _, default = name.partition("=")
        name = name.strip()
        default = default.strip()
        required = False

        if not default:
            default = None
        elif default == "true":
            default = True
            kind = ParameterKind.BOOLEAN
        elif default == "false":
            default = False
            kind = ParameterKind.BOOLEAN
    elif name.startswith("--"):
        required = False
        default = False
        kind = ParameterKind.BOOLEAN

    if "|" in name:
        name, *aliases = name.split("|")
        name = name.strip()
        aliases = tuple(alias.strip() for alias in aliases)

    if name.startswith("--"):
        option = True
        name = name[2:]

    if default == "*":
        default = []
        kind = ParameterKind.STRING_ARRAY

    if name.endswith("?"):
        required = False
        name = name[:-1]

    if name.endswith("*"):
        kind = kind.arrayed() if kind is not ParameterKind.BOOLEAN else ParameterKind.STRING_ARRAY
        variadic = True
        default = []
        name = name[:-1]

    if not description:
        description = descriptions.get(name) or descriptions.get("--" + name)

    return name, option, Parameter(
        name,
        kind,
        required=required,
        default=default,
        aliases=aliases,
        variadic=variadic,
        description=description,
    )


def _unique_aliases(parameters):
    """
    Drop aliases colliding with a name or an earlier alias of the same namespace.
    """
    taken = set(parameters)
    for name, parameter in parameters.items():
        aliases = []
        for alias in parameter.aliases:
            if alias in taken:
                logger.debug("dropping alias %r of %r: already in use", alias, name)
                continue
            taken.add(alias)
            aliases.append(alias)
        if len(aliases) != len(parameter.aliases):
            parameters[name] = parameter.replace(aliases=tuple(aliases))


def parse(signature, descriptions=None, /, *, defaults=()):
    """
    Parse a signature string into a Schema.

    Parameters
    - signature: str, e.g. "deploy {app} {--force|f}".
    - descriptions: Mapping[str, str] | None, name -> help text used when a token
      carries no inline description ('--name' keys are looked up for options too).
    - defaults: Iterable[Parameter], options added to every schema (for example a
      global --help); signature options with the same name win.

    Returns
    - Schema
    """
    command, *tokens = [piece for piece in map(str.strip, re.split(r"\{(.*?)\}", signature)) if piece] or [""]

    arguments = {}
    options = {}
    for token in tokens:
        name, option, parameter = parse_token(token, descriptions)
        (options if option else arguments)[name] = parameter

    for parameter in defaults:
        options.setdefault(parameter.name, parameter)

    names = list(arguments)
    for name in names[:-1]:
        if arguments[name].variadic:
            logger.debug("variadic argument %r is not the last one, demoting to a plain array", name)
            arguments[name] = arguments[name].replace(variadic=False, default=None)

    _unique_aliases(arguments)
    _unique_aliases(options)

    schema = Schema(command, arguments=arguments.values(), options=options.values())
    logger.debug("parsed signature %r into %r", signature, schema)
    return schema


__all__ = (
    "parse",
    "parse_token",
)
