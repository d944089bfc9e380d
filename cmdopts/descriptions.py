r"""
Option descriptions: the declared grammar of a command line.

Overview
- OptionDescription: one declared rule, a read-only bundle of optional
  capability callables. Which capabilities are present decides how the parser
  treats the rule:
  • unpack(token) -> OptionPack
      present: the rule describes options; absent: it describes operands.
  • map_key(raw_key, position, argument, variables) -> str | None
      claims a raw key (operands: the literal token) and returns the canonical
      key; None or "" means "not mine". Options without it accept every raw
      key they unpack, using the raw key as canonical key.
  • implicit_key(position) -> str | None
      operands only: key derived from the operand position alone.
  • make_value(key, text, variables) -> value
      absent: flag-only, no value is ever carried.
  • implicit_value(key, variables) -> value
      fallback when make_value is present but no text was supplied.
  • finalize(variables)
      post-parse hook, called once per parse.
  • key_description / extended_description / implicit_value_description
      documentation for help formatters; a rule carrying a key or extended
      description is visible, otherwise hidden.
- Shape: FLAG, MANDATORY or OPTIONAL, derived from make_value/implicit_value.
- OptionsGroup: ordered, immutable sequence of descriptions. Order is the only
  tie-break: the first matching description wins.

Factories
- make_option("long,short", description, value=..., constraint=...)
- make_hidden_option("long,short", value=..., constraint=...)
- make_operand(key, description, value=..., position=-1, constraint=...)
- make_hidden_operand(key, value=..., position=-1, constraint=...)
- make_options_error() / make_operands_error(): always-matching,
  always-failing terminators rejecting anything the other rules left over.

Option specs
- "foo,f" maps both --foo and -f to "foo"; "foo" and ",f" map a single name;
  "" accepts every raw key as its own canonical key.
- flag-only options unpack bundled short flags ("-abc"); value options treat
  the rest of a short token as its value ("-fvalue").

Quick example:
    >>> group = OptionsGroup([
    ...     make_option("verbose,v", "talk more"),
    ...     make_option("output,o", "where to write", value(str)),
    ...     make_operand("file", "input file", value(str)),
    ... ])
"""
import functools
import warnings
from collections.abc import Iterable
from enum import Enum

from .constraints import Constraint
from .faults import (
    DescriptionWarning,
    FaultCode,
    UnexpectedOperandError,
    UnknownOptionError,
    getdoc,
)
from .unpack import LONG_PREFIX, SHORT_PREFIX, unpack_gnu
from .utils import *
from .values import Value

DEFAULT_OPERAND_KEY = ""


class Shape(Enum):
    """
    value handling of a description.

    - FLAG: no make_value; an attached value is an error.
    - MANDATORY: make_value without implicit_value; a value must be supplied.
    - OPTIONAL: make_value with implicit_value; the implicit value fills in.
    """
    FLAG = "flag"
    MANDATORY = "mandatory"
    OPTIONAL = "optional"


_CAPABILITIES = (
    "unpack",
    "map_key",
    "implicit_key",
    "implicit_value",
    "make_value",
    "finalize",
)

_DOCUMENTATION = (
    "key_description",
    "extended_description",
    "implicit_value_description",
)


class OptionDescription(metaclass=SpecType):
    """
    one declared option or operand rule (see the module documentation).

    Besides the capabilities, a description records
    - key: its canonical key when it has a fixed one (Unset for rules that
      accept arbitrary raw keys); constraints are validated under this key.
    - names: the raw keys it maps, used for "did you mean" suggestions.
    - constraint: the Constraint checked at match time and after parsing.
    """
    __introspectable__ = (
        "key",
        "names",
        *_CAPABILITIES,
        *_DOCUMENTATION,
        "constraint",
    )
    __displayable__ = (
        "key",
        "names",
        "shape",
        "visible",
        "constraint",
    )

    def __init__(
            self,
            *,
            unpack=None,
            map_key=None,
            implicit_key=None,
            implicit_value=None,
            make_value=None,
            finalize=None,
            key_description=None,
            extended_description=None,
            implicit_value_description=None,
            key=Unset,
            names=(),
            constraint=Unset
    ):
        cls = type(self)
        metadata = {
            "unpack": unpack,
            "map_key": map_key,
            "implicit_key": implicit_key,
            "implicit_value": implicit_value,
            "make_value": make_value,
            "finalize": finalize,
            "key_description": key_description,
            "extended_description": extended_description,
            "implicit_value_description": implicit_value_description,
        }

        for name in _CAPABILITIES:
            if metadata[name] is not None and not callable(metadata[name]):
                raise TypeError(f"{cls.__typename__} {name!r} must be callable")

        for name in _DOCUMENTATION:
            if not isinstance(metadata[name], str | None):
                raise TypeError(f"{cls.__typename__} {name!r} must be a string")
            elif isinstance(metadata[name], str) and not metadata[name].strip():
                raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")

        if not isinstance(key, str | Unset):
            raise TypeError(f"{cls.__typename__} 'key' must be a string")

        if isinstance(names, str) or not isinstance(names, Iterable):
            raise TypeError(f"{cls.__typename__} 'names' must be an iterable of non-empty strings")
        names = tuple(names)
        if not all(isinstance(name, str) and name for name in names):
            raise TypeError(f"{cls.__typename__} 'names' must be an iterable of non-empty strings")

        if not isinstance(constraint := coalesce(constraint, Constraint()), Constraint):
            raise TypeError(f"{cls.__typename__} 'constraint' must be a constraint")

        if unpack is not None and implicit_key is not None:
            raise TypeError(f"{cls.__typename__} options cannot derive an implicit key")

        if implicit_value is not None and make_value is None:
            warnings.warn(DescriptionWarning(
                f"{cls.__typename__} has an implicit value but no make_value; it is a flag and the implicit value is ignored"
            ), stacklevel=2)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._key = key
        self._names = tuple(names)
        self._constraint = constraint

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(**{
            name: getattr(self, "_" + name) for name in type(self).__introspectable__
        } | overrides)

    @property
    def option(self):
        return self._unpack is not None

    @property
    def operand(self):
        return self._unpack is None

    @property
    def shape(self):
        if self._make_value is None:
            return Shape.FLAG
        if self._implicit_value is None:
            return Shape.MANDATORY
        return Shape.OPTIONAL

    @property
    def visible(self):
        return self._key_description is not None or self._extended_description is not None

    @property
    def hidden(self):
        return not self.visible


class OptionsGroup(tuple):
    """
    ordered, immutable sequence of OptionDescription.

    Supports concatenation with another group (or any iterable of
    descriptions), keeping the declaration order of both sides.
    """

    def __new__(cls, descriptions=(), /):
        descriptions = tuple(descriptions)
        for description in descriptions:
            if not isinstance(description, OptionDescription):
                raise TypeError("options-group items must be option descriptions")
        return super().__new__(cls, descriptions)

    def __add__(self, other):
        return OptionsGroup((*self, *OptionsGroup(other)))

    @property
    def options(self):
        return tuple(description for description in self if description.option)

    @property
    def operands(self):
        return tuple(description for description in self if description.operand)

    @property
    def visible(self):
        return tuple(description for description in self if description.visible)

    @property
    def names(self):
        return tuple(dict.fromkeys(name for description in self for name in description.names))

    def __repr__(self):
        return "options-group(%s)" % ", ".join(map(repr, self))

    def __rich_repr__(self):
        yield from self


def _split(spec, delimiter):
    if not isinstance(spec, str):
        raise TypeError("option spec must be a string")
    long, _, short = spec.strip().partition(delimiter)
    long, short = long.strip(), short.strip()
    if len(short) > 1:
        raise ValueError("option spec short name must be a single character")
    if long.startswith(SHORT_PREFIX) or short == SHORT_PREFIX:
        raise ValueError("option spec names are given without their prefix")
    return long, short


def _flagged(name):
    return (SHORT_PREFIX if len(name) == 1 else LONG_PREFIX) + name


def _mapper(long, short):
    """
    build the map_key capability for a "long,short" spec.

    both names map to the long one; a single name maps only itself.
    """
    key = long or short
    names = {name for name in (long, short) if name}

    @rename("map_key")
    def map_key(raw_key, position, argument, variables, /):
        return key if raw_key in names else None

    return map_key


def _option(spec, description, value, constraint, delimiter, hidden):
    long, short = _split(spec, delimiter)

    if not isinstance(value, Value | Unset):
        raise TypeError("option value must be built with value()")
    if not isinstance(description, str | Unset):
        raise TypeError("option description must be a string")

    metadata = {
        # bundled short flags only make sense when no value can follow the key
        "unpack": functools.partial(unpack_gnu, packed=value is Unset),
        "constraint": constraint,
    }

    if long or short:
        metadata |= {
            "map_key": _mapper(long, short),
            "key": long or short,
            "names": tuple(name for name in (long, short) if name),
        }

    if value is not Unset:
        metadata["make_value"] = value.make_value
        if value.optional:
            metadata["implicit_value"] = value.implicit_value

    if not hidden:
        if long or short:
            key_description = ", ".join(_flagged(name) for name in (long, short) if name)
        else:
            key_description = LONG_PREFIX + "[all], " + SHORT_PREFIX + "[all]"
        metadata |= {
            "key_description": key_description,
            "extended_description": coalesce(description),
        }
        if value is not Unset and value.optional:
            metadata["implicit_value_description"] = value.implicit_value_description()

    return OptionDescription(**metadata)


def make_option(spec, description=Unset, /, value=Unset, constraint=Unset, *, delimiter=","):
    """
    build a visible option description.

    parameters
    - spec: "long,short", "long", ",short" or "" (accept every raw key).
    - description: extended description for help output.
    - value: a Value (see values.value); omitted for flag-only options.
    - constraint: a Constraint (see constraints.constrain).
    - delimiter: separator between the long and short names in spec.
    """
    return _option(spec, description, value, constraint, delimiter, False)


def make_hidden_option(spec, /, value=Unset, constraint=Unset, *, delimiter=","):
    """
    build an option description without documentation (hidden from help).
    """
    return _option(spec, Unset, value, constraint, delimiter, True)


def _operand(key, description, value, position, constraint, hidden):
    if not isinstance(key, str):
        raise TypeError("operand key must be a string")
    if not isinstance(description, str | Unset):
        raise TypeError("operand description must be a string")
    if not isinstance(value, Value | Unset):
        raise TypeError("operand value must be built with value()")
    if isinstance(position, bool) or not isinstance(position, int) or position < -1:
        raise ValueError("operand position must be -1 or a non-negative integer")

    metadata = {
        "key": key,
        "constraint": constraint,
    }

    if key or position >= 0:
        @rename("implicit_key")
        def implicit_key(index, /):
            return key if position == -1 or index == position else None

        metadata["implicit_key"] = implicit_key

    if value is not Unset:
        metadata["make_value"] = value.make_value

    if not hidden and description is not Unset:
        metadata["extended_description"] = description

    return OptionDescription(**metadata)


def make_operand(key=DEFAULT_OPERAND_KEY, description=Unset, /, value=Unset, position=-1, constraint=Unset):
    """
    build a visible operand description.

    parameters
    - key: canonical key of the operands it claims ("" by default).
    - description: extended description for help output.
    - value: a Value converting the operand text; omitted records `empty`.
    - position: claim only the operand at this 0-based position (-1: any).
    - constraint: a Constraint (see constraints.constrain).
    """
    return _operand(key, description, value, position, constraint, False)


def make_hidden_operand(key=DEFAULT_OPERAND_KEY, /, value=Unset, position=-1, constraint=Unset):
    return _operand(key, Unset, value, position, constraint, True)


def make_options_error():
    """
    build an option description that claims every option-looking token and
    rejects it with UnknownOptionError.

    Groups made only of operands treat "-x" as an operand; appending this
    description turns such tokens into errors instead.
    """
    @rename("map_key")
    def map_key(raw_key, position, argument, variables, /):
        raise UnknownOptionError(
            "unknown option %r at %s argument" % (raw_key, ordinal(argument + 1)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=raw_key,
            key=raw_key,
            suggestions=[],
            hint="this command does not take any option",
            docs=getdoc(FaultCode.UNKNOWN_OPTION)
        )

    return OptionDescription(unpack=functools.partial(unpack_gnu, packed=False), map_key=map_key)


def make_operands_error():
    """
    build an operand description that claims every operand and rejects it
    with UnexpectedOperandError. Placed last, it terminates the operand rules.
    """
    @rename("map_key")
    def map_key(token, position, argument, variables, /):
        raise UnexpectedOperandError(
            "unexpected operand %r at %s argument" % (token, ordinal(argument + 1)),
            title="unexpected operand",
            code=FaultCode.UNEXPECTED_OPERAND,
            operand=token,
            pin=None,
            required=None,
            actual=position,
            hint="remove this extra value",
            docs=getdoc(FaultCode.UNEXPECTED_OPERAND)
        )

    return OptionDescription(map_key=map_key)


__all__ = (
    "OptionDescription",
    "OptionsGroup",
    "Shape",
    "DEFAULT_OPERAND_KEY",
    "make_option",
    "make_hidden_option",
    "make_operand",
    "make_hidden_operand",
    "make_options_error",
    "make_operands_error",
)
