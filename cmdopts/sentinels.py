"""
Empty value sentinel.

This module defines a process-wide singleton `empty` and its type `emptytype`.
A variable-map entry whose value is `empty` records that an option or operand
was present without a payload (a flag, or an operand without a converter).

Semantics
- Distinct from every genuine payload: "", 0, False, None and () are real
  values supplied by a converter; `empty` is never produced by one.
- Falsy: bool(empty) is False.
- Stable string form: repr(empty) == "empty" (and Rich uses a dim style).
- Identity: emptytype() always returns the same instance per interpreter, and
  copy/deepcopy/pickle preserve it.

Example
    >>> result = parse_arguments(["--verbose"], group)
    >>> result.variables.get("verbose") is empty
    True
"""
import functools

from rich.text import Text


class emptytype:
    """
    Singleton type of the “present without payload” marker.

    Notes
    - This type is final; subclassing is blocked to preserve semantics.
    - functools.cache on __new__ keeps a single instance, which is also what
      pickle and copy reconstruct through.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __rich__(self):
        """
        Rich protocol hook: render a dim 'empty' token.
        """
        return Text(repr(self), style="dim")

    def __repr__(self):
        return "empty"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'emptytype' is not an acceptable base type")


empty = emptytype()


__all__ = (
    "emptytype",
    "empty",
)
