"""
The parse engine: a work-queue loop matching argv against an OptionsGroup.

Overview
- Parser(group, *, shell, fancy, colorful, prog, cease) holds the grammar and
  the ui settings used when surfacing faults; Parser.parse(argv) runs one
  parse and returns a ParseResult.
- parse_arguments(argv, group, ...) is the one-shot convenience wrapper.

Loop (tokens are popped from the left of a deque seeded with argv)
1. a literal argv token equal to the cease literal ("--") stops everything;
   the tokens after it are returned unconsumed.
2. option dispatch: each option description unpacks the token with its own
   unpacker and, when the pack is not empty, maps the raw key; the first
   description that maps wins. A token some description unpacked but none
   mapped is an unknown option. Values follow the description shape; a
   missing value may be taken from the next queued token unless that token is
   itself option-like or the cease literal. Once the value is resolved, the
   continuations (bundled short flags) are pushed back to the front of the
   queue, in order. "--" reaching this step (the literal under a custom cease,
   or a bundled continuation) is the option "-".
3. operand dispatch: tokens no description unpacks are offered to the operand
   descriptions in order (map_key on the literal text, else implicit_key on
   the operand position, else the default operand key).
4. placement pins are checked against the counters of the match, then the
   global argument counter and the family counter advance.

After the loop (unless partial): occurrence and mutual rules are validated in
declaration order, then every finalize hook runs once.

Counters
- argument: one per matched unit, so "-abcd" advances it by four.
- option / operand: per family, independent of each other.
- consumed: literal argv slots consumed (detached values and the cease
  literal included).
"""
import copy
import difflib
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from .descriptions import DEFAULT_OPERAND_KEY, OptionsGroup, Shape
from .sentinels import empty
from .faults import *
from .tracing import logger
from .unpack import CEASE, LONG_PREFIX, SHORT_PREFIX
from .utils import *
from .variables import VariableMap


class ParseContext:
    """
    transient counters of one parse call (never persisted).
    """
    __slots__ = ("argument", "option", "operand", "consumed")

    def __init__(self):
        self.argument = 0
        self.option = 0
        self.operand = 0
        self.consumed = 0

    def __repr__(self):
        return "parse-context(argument=%d, option=%d, operand=%d, consumed=%d)" % (
            self.argument, self.option, self.operand, self.consumed
        )


class ParseResult(NamedTuple):
    """
    outcome of a parse.

    - variables: the VariableMap (a copy of the seed plus the new entries).
    - consumed: number of literal argv tokens consumed.
    - remaining: the literal argv tokens left after the cease literal.
    - context: the final counters.
    """
    variables: VariableMap
    consumed: int
    remaining: tuple[str, ...]
    context: ParseContext


def _suggest(name, names):
    if not (suggestions := difflib.get_close_matches(name, names, 5)):
        return suggestions, "check the spelling of the option"
    flagged = (SHORT_PREFIX if len(suggestions[0]) == 1 else LONG_PREFIX) + suggestions[0]
    return suggestions, "did you mean %r?" % flagged


class Parser:
    """
    matches argument vectors against an OptionsGroup.

    parameters
    - group: OptionsGroup (or any iterable of descriptions).
    - shell: when True faults are rendered on stderr with rich and the process
      exits with status 1; otherwise they are raised.
    - fancy: render faults inside a panel.
    - colorful: style the rendered faults.
    - prog: program name shown in rendered faults (__prog__ in __main__ wins).
    - cease: the end-of-options literal.

    A Parser is read-only once built and can run any number of parses.
    """

    def __init__(self, group, /, *, shell=False, fancy=False, colorful=True, prog=Unset, cease=CEASE):
        if not isinstance(group, Iterable):
            raise TypeError("parser group must be an iterable of option descriptions")
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        if not isinstance(cease, str) or not cease:
            raise TypeError("parser 'cease' must be a non-empty string")

        self._group = group if isinstance(group, OptionsGroup) else OptionsGroup(group)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._prog = coalesce(prog)
        self._cease = cease

    group = property(lambda self: self._group)
    shell = property(lambda self: self._shell)
    fancy = property(lambda self: self._fancy)
    colorful = property(lambda self: self._colorful)
    prog = property(lambda self: self._prog)
    cease = property(lambda self: self._cease)

    def trigger(self, fault, /, **options):
        """
        surface a fault with this parser's ui settings merged in.
        """
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        trigger(copy.replace(
            fault,
            **options,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            prog=self._prog
        ))

    def _claims(self, token):
        """
        True when some option description unpacks token to a non-empty pack.
        """
        return any(not description.unpack(token).empty for description in self._group.options)

    def _match_option(self, token, context, variables):
        """
        return (description, pack, key), or None when no description unpacks
        the token.

        raises UnknownOptionError when the token is option-like but no
        description maps its raw key.
        """
        claimed = Unset

        for description in self._group.options:
            pack = description.unpack(token)
            if pack.empty:
                continue

            if pack.cease:
                # only the literal checked in parse() ends the options
                pack = pack._replace(cease=False, prefix=SHORT_PREFIX, raw_key=SHORT_PREFIX)

            claimed = coalesce(claimed, pack)

            if description.map_key is None:
                return description, pack, pack.raw_key

            key = description.map_key(pack.raw_key, context.option, context.argument, variables)
            if key:
                return description, pack, key

        if claimed is Unset:
            return None

        input = claimed.prefix + claimed.raw_key
        suggestions, hint = _suggest(claimed.raw_key, self._group.names)
        raise UnknownOptionError(
            "unknown option %r at %s position" % (input, ordinal(context.consumed)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            input=input,
            key=claimed.raw_key,
            token=token,
            index=context.consumed,
            suggestions=suggestions,
            hint=hint,
            docs=getdoc(FaultCode.UNKNOWN_OPTION)
        )

    def _match_operand(self, token, context, variables):
        for description in self._group.operands:
            if description.map_key is not None:
                key = description.map_key(token, context.operand, context.argument, variables) or None
            elif description.implicit_key is not None:
                key = description.implicit_key(context.operand)
            else:
                key = DEFAULT_OPERAND_KEY

            if key is not None:
                return description, key

        raise UnexpectedOperandError(
            "unexpected operand %r at %s position" % (token, ordinal(context.consumed)),
            title="unexpected operand",
            code=FaultCode.UNEXPECTED_OPERAND,
            operand=token,
            pin=None,
            required=None,
            actual=context.operand,
            index=context.consumed,
            hint="remove this extra value or check the expected usage",
            docs=getdoc(FaultCode.UNEXPECTED_OPERAND)
        )

    def _value(self, description, pack, key, tokens, context, variables):
        """
        resolve the value of a matched option according to its shape.
        """
        input = pack.prefix + pack.raw_key

        if description.shape is Shape.FLAG:
            if pack.has_value:
                raise UnexpectedArgumentError(
                    "flag %r at %s position cannot have a value" % (input, ordinal(context.consumed)),
                    title="flag cannot take a value",
                    code=FaultCode.UNEXPECTED_ARGUMENT,
                    input=input,
                    key=key,
                    value=pack.value,
                    index=context.consumed,
                    hint="remove the value %r" % pack.value,
                    docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT)
                )
            return empty

        if pack.has_value:
            if not pack.value:
                self.trigger(EmptyInlineValueWarning(
                    "empty inline value for option %r at %s position" % (input, ordinal(context.consumed)),
                    title="empty inline value",
                    code=FaultCode.EMPTY_INLINE_VALUE,
                    input=input,
                    key=key,
                    index=context.consumed,
                    hint="add a value after '=' (for example: %s=<value>)" % input,
                    docs=getdoc(FaultCode.EMPTY_INLINE_VALUE)
                ))
            return description.make_value(key, pack.value, variables)

        # only the next queued token may serve as a detached value
        if tokens:
            token, literal = tokens[0]
            if not (literal and token == self._cease) and not self._claims(token):
                tokens.popleft()
                context.consumed += literal
                logger.debug("detached value %r for %r", token, key)
                return description.make_value(key, token, variables)

        if description.shape is Shape.OPTIONAL:
            return description.implicit_value(key, variables)

        raise MissingArgumentError(
            "option %r at %s position requires a value" % (input, ordinal(context.consumed)),
            title="missing value",
            code=FaultCode.MISSING_ARGUMENT,
            input=input,
            key=key,
            index=context.consumed,
            hint="add a value (for example: %s <value>)" % input,
            docs=getdoc(FaultCode.MISSING_ARGUMENT)
        )

    def _validate(self, variables):
        for description in self._group:
            if description.key is Unset:
                continue
            description.constraint.validate(
                description.key, variables, kind="option" if description.option else "operand"
            )
        for description in self._group:
            if description.finalize is not None:
                description.finalize(variables)

    def parse(self, argv, variables=Unset, /, *, partial=False):
        """
        parse an argument vector.

        parameters
        - argv: iterable of strings (without the program name).
        - variables: optional VariableMap (or pairs) to seed the result; it is
          copied, never modified.
        - partial: skip the post-parse validation and finalize hooks, for
          incremental parsing where later calls complete the picture.

        returns
        - ParseResult(variables, consumed, remaining, context).

        raises
        - ParseException subclasses (see faults) unless shell mode renders
          them and exits.
        """
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argv must be an iterable of strings")
        argv = tuple(argv)
        if not all(isinstance(token, str) for token in argv):
            raise TypeError("parse() argv must contain only strings")

        context = ParseContext()
        variables = VariableMap(coalesce(variables, ()))
        tokens = deque((token, True) for token in argv)

        try:
            while tokens:
                token, literal = tokens.popleft()
                context.consumed += literal

                logger.debug("pop %r (literal=%s, pending=%d) %r", token, literal, len(tokens), context)

                if literal and token == self._cease:
                    logger.debug("cease at %d, %d token(s) left unconsumed", context.consumed, len(tokens))
                    break

                if (match := self._match_option(token, context, variables)) is not None:
                    description, pack, key = match
                    logger.debug("option %r -> %r via %r", token, key, pack)
                    description.constraint.check_placement(
                        pack.prefix + pack.raw_key, context.argument, context.option, operand=False
                    )

                    variables.add(key, self._value(description, pack, key, tokens, context, variables))
                    context.argument += 1
                    context.option += 1

                    # bundled flags run before the next argv token
                    tokens.extendleft((continuation, False) for continuation in reversed(pack.continuations))
                    continue

                description, key = self._match_operand(token, context, variables)
                logger.debug("operand %r -> %r", token, key)
                description.constraint.check_placement(token, context.argument, context.operand, operand=True)

                if description.make_value is not None:
                    variables.add(key, description.make_value(key, token, variables))
                else:
                    variables.add(key, empty)
                context.argument += 1
                context.operand += 1

            if not partial:
                self._validate(variables)
        except ParseException as fault:
            self.trigger(fault)

        return ParseResult(variables, context.consumed, tuple(token for token, _ in tokens), context)


def parse_arguments(argv, group, variables=Unset, /, *, partial=False, **options):
    """
    one-shot parse: Parser(group, **options).parse(argv, variables, partial=partial).
    """
    return Parser(group, **options).parse(argv, variables, partial=partial)


__all__ = (
    "Parser",
    "ParseContext",
    "ParseResult",
    "parse_arguments",
)
