"""
Typed value conversion for parameters.

convert() turns untyped shell input (strings, lists of strings, or the bare
True of a presence-only flag) into the domain value of a ParameterKind. It is
the single coercion site shared by the resolver and by interactive recovery.

Rules
- None/Unset input short-circuits to the given default without conversion.
- STRING, SECRET: str(value).
- NUMBER: int for integral decimal text, float otherwise; non-numeric text,
  empty text, nan, infinities, digit separators ("1_000") and hex literals
  ("0x10") raise BadValueError.
- BOOLEAN: True/"true"/"1" -> True, False/"false"/"0" -> False, anything else
  follows generic truthiness.
- STRING_ARRAY, NUMBER_ARRAY: scalars are wrapped into a one-element list and
  each element is converted with the element kind.
"""
import math
import re

from .arguments import ParameterKind
from .faults import BadValueError
from .utils import Unset

_INTEGER = re.compile(r"[+-]?\d+")


def _number(value, name, role, element=False):
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float) and math.isfinite(value):
        return value

    text = str(value).strip()
    try:
        if _INTEGER.fullmatch(text):
            return int(text)
        if "_" in text:
            raise ValueError(text)
        number = float(text)
        if not math.isfinite(number):
            raise ValueError(text)
        return number
    except ValueError:
        reason = "expected array of numbers, got %r in array" if element else "expected a number, got %r"
        raise BadValueError(
            "%s %r value is invalid: %s" % (role, name, reason % str(value)),
            name=name,
            value=str(value),
            kind=ParameterKind.NUMBER_ARRAY if element else ParameterKind.NUMBER,
            hint="pass a real number such as 3 or 2.5",
        ) from None


def _boolean(value):
    if isinstance(value, bool):
        return value
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    return bool(value)


def convert(value, kind, name, default=None, /, *, role="option"):
    """
    Convert a raw value to `kind`.

    Parameters
    - value: str | bool | list[str] | None | Unset, the raw input.
    - kind: ParameterKind | str.
    - name: str, parameter name used in fault messages.
    - default: returned as-is when value is None or Unset.
    - role: "option" | "argument", wording of fault messages.

    Raises
    - BadValueError: numeric conversion failures (per element for arrays).
    """
    if value is None or value is Unset:
        return default

    match ParameterKind.of(kind):
        case ParameterKind.STRING | ParameterKind.SECRET:
            return str(value)
        case ParameterKind.NUMBER:
            return _number(value, name, role)
        case ParameterKind.BOOLEAN:
            return _boolean(value)
        case ParameterKind.STRING_ARRAY:
            items = value if isinstance(value, list | tuple) else [value]
            return [str(item) for item in items]
        case ParameterKind.NUMBER_ARRAY:
            items = value if isinstance(value, list | tuple) else [value]
            return [_number(item, name, role, element=True) for item in items]


__all__ = (
    "convert",
)
