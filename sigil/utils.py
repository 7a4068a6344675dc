"""
Sigil utilities shared by the schema, resolver and prompt layers.

- Unset: the "nothing was typed" marker. The resolver has to keep an option
  the user never passed apart from one passed with an empty or false value,
  so None cannot play that role. Unset is falsy, prints as "Unset", survives
  copy/deepcopy/pickle as the same object and cannot be subclassed.
- mirror("attr"): read-only property over self._attr. Lists, dicts and sets
  are handed out as deep copies so a caller can never edit a schema through
  what it read from it.
- truthy(text): environment switch reading ("1", "true", "yes", "y", "on").

    >>> class Holder:
    ...     _tags = ["a"]
    ...     tags = mirror("tags")
    >>> Holder().tags
    ['a']
"""
import copy
from typing import final

_MUTABLE = (list, dict, set)


@final
class UnsetType:
    """
    Type of the Unset marker; calling it always returns the same object.
    """
    __slots__ = ()
    __instance = None

    def __new__(cls):
        if UnsetType.__instance is None:
            UnsetType.__instance = super().__new__(cls)
        return UnsetType.__instance

    def __init_subclass__(cls, **options):
        raise TypeError("UnsetType cannot be subclassed")

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


def mirror(name, /):
    """
    Property returning self._<name>, copied when it is a mutable container.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    attribute = "_" + name

    def getter(self):
        value = getattr(self, attribute)
        return copy.deepcopy(value) if isinstance(value, _MUTABLE) else value

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


def truthy(text, /):
    """
    Read an environment-style switch; None and unknown words are False.
    """
    if text is None:
        return False
    return str(text).strip().lower() in ("1", "true", "yes", "y", "on")


Unset = UnsetType()


__all__ = (
    "mirror",
    "truthy",
    "UnsetType",
    "Unset",
)
