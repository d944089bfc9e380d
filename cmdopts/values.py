"""
Value conversion: text to typed payloads and back.

Overview
- Converter: a named (from_string, to_string) pair. Every failure, whatever the
  underlying exception, surfaces as InvalidArgumentError carrying the exact
  offending text.
- Built-ins (strict whole-string parsing, trailing garbage is an error)
  • bool: "true", "false", "1", "0"
  • int: unbounded Python integers
  • int8 … uint64 and the C names short, ushort, long, ulong, longlong,
    ulonglong: range-checked integers
  • float / float64 and float32 (rounded to single precision, overflow rejected)
  • char (exactly one character) and uchar (one character below 256)
  • str: the text itself
- register(type, from_string, to_string=str): user extension point. Types
  without a registration fall back to type(text) / str(value).
- Value / value(): the value capability attached to option and operand
  descriptions (make_value, implicit_value, implicit_value_description).

Example
    >>> from_string(int16, "-12")
    -12
    >>> from_string(bool, "11")
    Traceback (most recent call last):
    ...
    cmdopts.faults.InvalidArgumentError: invalid boolean value '11'
"""
import math
import re
import struct

from .faults import InvalidArgumentError, FaultCode, getdoc
from .utils import *


class Converter(metaclass=SpecType):
    """
    named text <-> value conversion pair.

    parameters
    - name: label used in fault messages ("invalid int16 value '300'").
    - parse: callable(text) -> value, may raise ValueError/TypeError/OverflowError.
    - format: callable(value) -> text (defaults to str).
    """
    __introspectable__ = ("name",)

    def __init__(self, name, parse, format=str, /):
        if not isinstance(name, str) or not name:
            raise TypeError(f"{type(self).__typename__} name must be a non-empty string")
        if not callable(parse) or not callable(format):
            raise TypeError(f"{type(self).__typename__} parse and format must be callable")
        self._name = name
        self._parse = parse
        self._format = format

    def from_string(self, text, /):
        if not isinstance(text, str):
            raise TypeError(f"{type(self).__typename__} input must be a string")
        try:
            return self._parse(text)
        except InvalidArgumentError:
            raise
        except (ValueError, TypeError, OverflowError) as exception:
            raise InvalidArgumentError(
                "invalid %s value %r" % (self._name, text),
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                text=text,
                type=self._name,
                hint="give a value of type %s" % self._name,
                docs=getdoc(FaultCode.INVALID_ARGUMENT)
            ) from exception

    def to_string(self, value, /):
        return self._format(value)


def _boolean(text):
    try:
        return {"true": True, "false": False, "1": True, "0": False}[text]
    except KeyError:
        raise ValueError("not a boolean") from None


def _integer(text):
    if not re.fullmatch(r"[+-]?[0-9]+", text):
        raise ValueError("not an integer")
    return int(text)


def _real(text):
    if not re.fullmatch(
        r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
        text,
        re.IGNORECASE
    ):
        raise ValueError("not a floating point number")
    return float(text)


def _single(text):
    number = _real(text)
    result = struct.unpack("f", struct.pack("f", number))[0]
    # finite input that rounds to infinity lies beyond single range
    if math.isfinite(number) and not math.isfinite(result):
        raise OverflowError("%r is out of float32 range" % text)
    return result


def _character(text):
    if len(text) != 1:
        raise ValueError("not a single character")
    return text


def _byte(text):
    if ord(_character(text)) > 0xFF:
        raise ValueError("not a single byte character")
    return text


def _format_boolean(value):
    return "true" if value else "false"


class Integral(Converter):
    """
    fixed-width integer converter (two's complement range when signed).
    """
    __introspectable__ = ("name", "bits", "signed")

    def __init__(self, name, bits, signed=True, /):
        self._bits = bits
        self._signed = signed
        super().__init__(name, self._bounded, str)

    @property
    def minimum(self):
        return -(1 << (self._bits - 1)) if self._signed else 0

    @property
    def maximum(self):
        return (1 << (self._bits - 1)) - 1 if self._signed else (1 << self._bits) - 1

    def _bounded(self, text):
        number = _integer(text)
        if not self.minimum <= number <= self.maximum:
            raise OverflowError("%d outside [%d, %d]" % (number, self.minimum, self.maximum))
        return number


int8 = Integral("int8", 8)
uint8 = Integral("uint8", 8, False)
int16 = Integral("int16", 16)
uint16 = Integral("uint16", 16, False)
int32 = Integral("int32", 32)
uint32 = Integral("uint32", 32, False)
int64 = Integral("int64", 64)
uint64 = Integral("uint64", 64, False)

# LP64 widths
short = int16
ushort = uint16
long = int64
ulong = uint64
longlong = int64
ulonglong = uint64

boolean = Converter("boolean", _boolean, _format_boolean)
integer = Converter("integer", _integer, str)
float64 = Converter("float64", _real, repr)
float32 = Converter("float32", _single, repr)
char = Converter("char", _character, str)
uchar = Converter("uchar", _byte, str)
string = Converter("string", str, str)

_registry = {
    bool: boolean,
    int: integer,
    float: float64,
    str: string,
}


def register(type, from_string, to_string=str, /):
    """
    register a conversion pair for a user type.

    parameters
    - type: the key later given to value(type) / from_string(type, text).
    - from_string: callable(text) -> value; ValueError, TypeError and
      OverflowError are reported as InvalidArgumentError.
    - to_string: callable(value) -> text, used for implicit value descriptions.

    returns
    - the Converter stored for the type.
    """
    converter = Converter(getattr(type, "__name__", str(type)), from_string, to_string)
    _registry[type] = converter
    return converter


def lookup(type, /):
    """
    return the Converter for a type (converters are returned unchanged).
    """
    if isinstance(type, Converter):
        return type
    try:
        return _registry[type]
    except KeyError:
        pass
    except TypeError:
        raise TypeError("lookup() argument must be hashable") from None
    if not callable(type):
        raise TypeError("lookup() argument must be a converter or a callable type")
    # default textual round trip through the type's constructor
    return Converter(getattr(type, "__name__", repr(type)), type, str)


def from_string(type, text, /):
    return lookup(type).from_string(text)


def to_string(type, value, /):
    return lookup(type).to_string(value)


class Value(metaclass=SpecType):
    """
    value capability of a description.

    A Value without an implicit default makes the value mandatory; one with an
    implicit default makes it optional (the default is used when no text is
    supplied). Instances are immutable: implicit() returns a new Value.
    """
    __introspectable__ = ("type", "default")

    def __init__(self, type=str, default=Unset, /):
        self._type = type
        self._converter = lookup(type)
        self._default = default

    @property
    def optional(self):
        return self._default is not Unset

    def implicit(self, default, /):
        return Value(self._type, default)

    def make_value(self, key, text, variables, /):
        return self._converter.from_string(text)

    def implicit_value(self, key, variables, /):
        return self._default

    def implicit_value_description(self):
        if self._default is Unset:
            return None
        return self._converter.to_string(self._default)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(overrides.get("type", self._type), overrides.get("default", self._default))


def value(type=str, implicit=Unset, /):
    """
    build a Value: value(int) is mandatory, value(int, 5) is optional.
    """
    return Value(type, implicit)


__all__ = (
    "Converter",
    "Integral",
    "Value",
    "value",
    "register",
    "lookup",
    "from_string",
    "to_string",
    "boolean",
    "integer",
    "int8",
    "uint8",
    "int16",
    "uint16",
    "int32",
    "uint32",
    "int64",
    "uint64",
    "short",
    "ushort",
    "long",
    "ulong",
    "longlong",
    "ulonglong",
    "float32",
    "float64",
    "char",
    "uchar",
    "string",
)
