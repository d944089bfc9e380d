"""
cmdopts faults (parse errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse fault.
  Codes are grouped by domain so logs and searches stay predictable.
- ParseException / ParseWarning: base types carrying a message plus a
  read-only payload (options) and knowing how to render themselves with rich.
- trigger(): central entry point to surface a fault (raise, warn, or render in
  shell mode).
- getdoc(): optional description lookup for a code from the host application.

Taxonomy
- UnknownOptionError       an option-looking token no description claims
- UnexpectedArgumentError  a value attached to a flag-only option
- MissingArgumentError     a mandatory value that was not supplied
- UnexpectedOperandError   an operand nobody claims, or a misplaced one
- UnexpectedOptionError    an option matched outside its pinned placement
- OccurrenceError          an occurrence count outside [minimum, maximum]
- MutuallyExclusiveError   two keys that cannot appear together
- MutuallyInclusiveError   a key given without any of its companions
- InvalidArgumentError     text a converter could not turn into a value

Payload
- every keyword given at construction is readable as an attribute, e.g.
  OccurrenceError(...).minimum or UnexpectedOperandError(...).operand.

Integration
- The parser builds faults with a lowercase, position-first message and calls
  trigger(fault, **ui). In non-shell mode exceptions are raised; in shell mode
  they are rendered on stderr via rich and the process exits.
"""
import copy
import inspect
import os
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the parser (stable identifiers).

    grouping (by high-level domain)
    - options (1111x)
      • UNKNOWN_OPTION, UNEXPECTED_ARGUMENT, MISSING_ARGUMENT
    - placement (1112x)
      • UNEXPECTED_OPERAND, UNEXPECTED_OPTION, INVALID_ARGUMENT
    - constraints (1115x)
      • OCCURRENCE, MUTUALLY_EXCLUSIVE, MUTUALLY_INCLUSIVE
    - warnings (12xxx)
      • EMPTY_INLINE_VALUE

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- option errors (111xx) ---
    UNKNOWN_OPTION              = 11112
    UNEXPECTED_ARGUMENT         = 11113
    MISSING_ARGUMENT            = 11117

    # --- placement and conversion errors (112xx) ---
    UNEXPECTED_OPERAND          = 11121
    UNEXPECTED_OPTION           = 11122
    INVALID_ARGUMENT            = 11124

    # --- constraint errors (115xx) ---
    OCCURRENCE                  = 11151
    MUTUALLY_EXCLUSIVE          = 11152
    MUTUALLY_INCLUSIVE          = 11153

    # --- warnings (12xxx) ---
    EMPTY_INLINE_VALUE          = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(options):
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__")
    except AttributeError:
        return options.get("prog") or os.path.basename(sys.argv[0] if sys.argv else "") or "cmdopts"


def _render(fault, defaults, kind):
    """
    shared rich renderer for exceptions and warnings.

    header: "[ prog - code | title ]", then the message and a single hint.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, defaults | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        text(_prog(options), styler("prog-name")),
        " - ",
        text(code.normalize() if isinstance(code, FaultCode) else code or "?", styler("code")),
        " | ",
        text(str(options.get("title", kind)).title(), styler(f"{kind}-title")),
        " ]"
    )
    message = text(fault.message, styler(f"{kind}-message"))
    parts = [message]
    if hint := options.get("hint"):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        try:
            width = int((console.width - 4) * options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*parts), title=header, title_align="left", width=width)

    return Group(header, *parts)


class ParseException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        # payload access: only called when normal lookup fails
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class UnknownOptionError(ParseException): ...
class UnexpectedArgumentError(ParseException): ...
class MissingArgumentError(ParseException): ...
class UnexpectedOperandError(ParseException): ...
class UnexpectedOptionError(ParseException): ...
class OccurrenceError(ParseException): ...
class MutuallyExclusiveError(ParseException): ...
class MutuallyInclusiveError(ParseException): ...
class InvalidArgumentError(ParseException): ...


class ParseWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        try:
            return self.__dict__["options"][name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class EmptyInlineValueWarning(ParseWarning): ...


class DescriptionWarning(UserWarning):
    """
    emitted while building a description whose capabilities contradict each
    other (for example an implicit value on a flag-only option).
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - outside shell mode exceptions are raised and warnings go through the
      warnings module; in shell mode both are rendered with rich on stderr.

    typical options
    - shell, fancy, colorful, prog, title, code, hint, docs, plus the payload
      of the fault (input, key, operand, minimum, …).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be an fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseException",
    "UnknownOptionError",
    "UnexpectedArgumentError",
    "MissingArgumentError",
    "UnexpectedOperandError",
    "UnexpectedOptionError",
    "OccurrenceError",
    "MutuallyExclusiveError",
    "MutuallyInclusiveError",
    "InvalidArgumentError",
    "ParseWarning",
    "EmptyInlineValueWarning",
    "DescriptionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
