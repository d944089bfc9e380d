"""
Constraints attached to option and operand descriptions.

A Constraint is an immutable rule object built fluently:

    constrain().occurrences(1, 2).mutual_exclusion(["quiet"]).at_position(0)

Every builder step returns a new Constraint; the original is never modified,
so one constraint may be shared between descriptions and parses.

Checks
- placement (at match time, synchronous): at_argument pins the global
  argument index of a match, at_position pins the per-family position (option
  position for options, operand position for operands). Indices are 0-based
  and observed before the counters advance.
- validation (after the stream is exhausted): occurrence bounds, mutual
  exclusion, mutual inclusion. The first violation aborts.
"""
import copy
from collections.abc import Iterable

from .faults import (
    FaultCode,
    MutuallyExclusiveError,
    MutuallyInclusiveError,
    OccurrenceError,
    UnexpectedOperandError,
    UnexpectedOptionError,
    getdoc,
)
from .utils import *


def _times(count):
    return "%d %s" % (count, "time" if count == 1 else "times")


def _keys(cls, keys):
    if isinstance(keys, str) or not isinstance(keys, Iterable):
        raise TypeError(f"{cls.__typename__} keys must be an iterable of strings")
    keys = tuple(keys)
    if not all(isinstance(key, str) for key in keys):
        raise TypeError(f"{cls.__typename__} keys must be strings")
    return frozenset(keys)


def _pin(cls, index):
    if isinstance(index, bool) or not isinstance(index, int | None):
        raise TypeError(f"{cls.__typename__} pins must be integers")
    # -1 is the historical spelling of "unpinned"
    if index is None or index == -1:
        return None
    if index < 0:
        raise ValueError(f"{cls.__typename__} pins must be -1 or non-negative")
    return index


class Constraint(metaclass=SpecType):
    """
    rule object describing where and how often a description may match.

    fields
    - minimum / maximum: occurrence bounds (maximum None means unbounded).
    - argument: required global argument index, or None.
    - position: required per-family position, or None.
    - exclusive: keys that must not appear together with the description key.
    - inclusive: keys of which at least one must appear with the description key.
    """
    __introspectable__ = (
        "minimum",
        "maximum",
        "argument",
        "position",
        "exclusive",
        "inclusive",
    )

    def __init__(
            self,
            minimum=0,
            maximum=None,
            argument=None,
            position=None,
            exclusive=(),
            inclusive=()
    ):
        cls = type(self)
        if isinstance(minimum, bool) or not isinstance(minimum, int):
            raise TypeError(f"{cls.__typename__} 'minimum' must be an integer")
        if isinstance(maximum, bool) or not isinstance(maximum, int | None):
            raise TypeError(f"{cls.__typename__} 'maximum' must be an integer or None")
        if minimum < 0:
            raise ValueError(f"{cls.__typename__} 'minimum' cannot be negative")
        if maximum is not None and maximum < minimum:
            raise ValueError(f"{cls.__typename__} 'maximum' cannot be lower than 'minimum'")

        self._minimum = minimum
        self._maximum = maximum
        self._argument = _pin(cls, argument)
        self._position = _pin(cls, position)
        self._exclusive = _keys(cls, exclusive)
        self._inclusive = _keys(cls, inclusive)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{
            "minimum": self._minimum,
            "maximum": self._maximum,
            "argument": self._argument,
            "position": self._position,
            "exclusive": self._exclusive,
            "inclusive": self._inclusive,
        } | overrides)

    def occurrences(self, minimum, maximum=Unset, /):
        """
        occurrences(n) means exactly n; occurrences(n, m) means n..m
        (m=None for no upper bound).
        """
        return copy.replace(self, minimum=minimum, maximum=coalesce(maximum, minimum))

    def at_argument(self, index, /):
        return copy.replace(self, argument=index)

    def at_position(self, index, /):
        return copy.replace(self, position=index)

    def mutual_exclusion(self, keys, /):
        return copy.replace(self, exclusive=keys)

    def mutual_inclusion(self, keys, /):
        return copy.replace(self, inclusive=keys)

    @property
    def unconstrained(self):
        return (
            self._minimum == 0 and
            self._maximum is None and
            self._argument is None and
            self._position is None and
            not self._exclusive and
            not self._inclusive
        )

    def check_placement(self, token, argument, position, /, *, operand):
        """
        raise when a match at (argument, position) breaks a pin.

        parameters
        - token: the literal text that matched (operand) or the option key.
        - argument: global 0-based argument index of this match.
        - position: 0-based index within the family (options or operands).
        - operand: True for operand matches, False for option matches.
        """
        family = "operand position" if operand else "option position"

        for pin, label, required, actual in (
            ("argument", "argument", self._argument, argument),
            ("position", family, self._position, position),
        ):
            if required is None or required == actual:
                continue

            where = "%s %s" % (ordinal(actual + 1), label)
            wanted = "%s %s" % (ordinal(required + 1), label)

            if operand:
                raise UnexpectedOperandError(
                    "unexpected operand %r at %s" % (token, where),
                    title="unexpected operand",
                    code=FaultCode.UNEXPECTED_OPERAND,
                    operand=token,
                    pin=pin,
                    required=required,
                    actual=actual,
                    hint="this operand is only accepted at the %s" % wanted,
                    docs=getdoc(FaultCode.UNEXPECTED_OPERAND)
                )
            raise UnexpectedOptionError(
                "unexpected option %r at %s" % (token, where),
                title="misplaced option",
                code=FaultCode.UNEXPECTED_OPTION,
                input=token,
                pin=pin,
                required=required,
                actual=actual,
                hint="move %r to the %s" % (token, wanted),
                docs=getdoc(FaultCode.UNEXPECTED_OPTION)
            )

    def validate(self, key, variables, /, *, kind="option"):
        """
        post-parse check of the bounds and mutual rules for one canonical key.

        parameters
        - key: canonical key of the description ("" for the default operand key).
        - variables: the VariableMap built so far.
        - kind: "option" or "operand", only used in messages.
        """
        occurrences = variables.count(key)
        label = ("%s %r" % (kind, key)) if key else "%s values" % kind

        if occurrences < self._minimum or (self._maximum is not None and occurrences > self._maximum):
            if self._maximum is not None and occurrences > self._maximum:
                message = "%s cannot be specified more than %s" % (label, _times(self._maximum))
                hint = "remove the extra occurrences (given %s)" % _times(occurrences)
            else:
                message = "%s must be specified at least %s" % (label, _times(self._minimum))
                hint = "add the missing occurrences (given %s)" % _times(occurrences)
            raise OccurrenceError(
                message,
                title="occurrence error",
                code=FaultCode.OCCURRENCE,
                key=key,
                minimum=self._minimum,
                maximum=self._maximum,
                occurrences=occurrences,
                hint=hint,
                docs=getdoc(FaultCode.OCCURRENCE)
            )

        if not occurrences:
            return

        for other in sorted(self._exclusive):
            if other != key and other in variables:
                raise MutuallyExclusiveError(
                    "%s cannot be specified along with %r" % (label, other),
                    title="mutually exclusive",
                    code=FaultCode.MUTUALLY_EXCLUSIVE,
                    key=key,
                    other=other,
                    hint="keep either %r or %r, not both" % (key, other),
                    docs=getdoc(FaultCode.MUTUALLY_EXCLUSIVE)
                )

        if self._inclusive and not any(other in variables for other in self._inclusive):
            others = tuple(sorted(self._inclusive))
            raise MutuallyInclusiveError(
                "%s must be specified along with %s" % (label, " or ".join(map(repr, others))),
                title="mutually inclusive",
                code=FaultCode.MUTUALLY_INCLUSIVE,
                key=key,
                others=others,
                hint="add %s" % " or ".join(map(repr, others)),
                docs=getdoc(FaultCode.MUTUALLY_INCLUSIVE)
            )


def constrain():
    """
    return the unconstrained Constraint, the start of a builder chain.
    """
    return Constraint()


__all__ = (
    "Constraint",
    "constrain",
)
