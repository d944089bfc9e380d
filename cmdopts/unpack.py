r"""
Token unpacking under POSIX and GNU option syntaxes.

An unpacker classifies one raw token into an OptionPack. It never consults
the declared descriptions: deciding whether the key is known is the job of
the description's map_key capability.

POSIX
- "-f"        → prefix "-", raw_key "f"
- "-abc"      → raw_key "a", continuations ("-b", "-c")        (packed=True)
- "-fvalue"   → raw_key "f", value "value"                     (packed=False)
- "--"        → raw_key "-"  (the end-of-options literal is the parser's concern)
- "-", "x"    → empty pack (not an option)

GNU (everything POSIX does, plus)
- "--name"         → prefix "--", raw_key "name"
- "--name=value"   → raw_key "name", value "value"
- "--a\=b=c"       → raw_key "a=b", value "c"  (backslash escapes an "=")

Continuations are re-queued by the parser in front of the remaining argv, so
"-abc" behaves exactly like "-a -b -c".
"""
import re
from typing import NamedTuple

SHORT_PREFIX = "-"
LONG_PREFIX = "--"
ASSIGNMENT = "="
CEASE = "--"


class OptionPack(NamedTuple):
    """
    result of unpacking one token.

    fields
    - cease: a custom unpacker flagged the token as an end-of-options marker.
      The built-in unpackers never set it, and the parser reads such a pack as
      the option "-": options end only at the parser's literal cease token.
    - has_value: an attached value was present (possibly the empty string).
    - prefix: "-" or "--" (empty for the empty pack).
    - raw_key: key text without prefix; empty means "not an option".
    - continuations: synthetic follow-on tokens (bundled short flags).
    - value: attached value text, or None.
    """
    cease: bool = False
    has_value: bool = False
    prefix: str = ""
    raw_key: str = ""
    continuations: tuple[str, ...] = ()
    value: str | None = None

    @property
    def empty(self):
        return not self.raw_key and not self.cease


def unpack_posix(token, /, *, packed=True):
    """
    unpack a POSIX short option token.

    parameters
    - token: str, the raw argument.
    - packed: when True the characters after the key are more flags, each
      turned into a "-c" continuation; when False they form the attached value.

    returns
    - OptionPack (the empty pack when the token is not a short option).
    """
    if not isinstance(token, str):
        raise TypeError("unpack_posix() argument must be a string")

    if not token.startswith(SHORT_PREFIX) or len(token) < 2:
        return OptionPack()

    key, rest = token[1], token[2:]

    if not rest:
        return OptionPack(prefix=SHORT_PREFIX, raw_key=key)

    if packed:
        return OptionPack(
            prefix=SHORT_PREFIX,
            raw_key=key,
            continuations=tuple(SHORT_PREFIX + char for char in rest)
        )

    return OptionPack(has_value=True, prefix=SHORT_PREFIX, raw_key=key, value=rest)


def unpack_gnu(token, /, *, packed=True):
    """
    unpack a GNU long option token, falling back to POSIX rules for short ones.

    the key/value split happens on the first "=" that is not preceded by a
    backslash; an escaped "\\=" inside the key is unescaped. "--name=" carries
    an empty attached value.
    """
    if not isinstance(token, str):
        raise TypeError("unpack_gnu() argument must be a string")

    if not token.startswith(LONG_PREFIX) or token == LONG_PREFIX:
        return unpack_posix(token, packed=packed)

    body = token[len(LONG_PREFIX):]

    match re.split(r"(?<!\\)" + re.escape(ASSIGNMENT), body, maxsplit=1):
        case [key]:
            return OptionPack(prefix=LONG_PREFIX, raw_key=key.replace("\\" + ASSIGNMENT, ASSIGNMENT))
        case [key, value]:
            return OptionPack(
                has_value=True,
                prefix=LONG_PREFIX,
                raw_key=key.replace("\\" + ASSIGNMENT, ASSIGNMENT),
                value=value
            )


__all__ = (
    "OptionPack",
    "unpack_posix",
    "unpack_gnu",
    "SHORT_PREFIX",
    "LONG_PREFIX",
    "ASSIGNMENT",
    "CEASE",
)
