"""
Constraint tests.

Scope
- Fluent, immutable builder (constrain().occurrences(...).at_position(...)).
- Placement pins checked at match time (check_placement).
- Post-parse validation: occurrence bounds, mutual exclusion and inclusion.
"""
import unittest
from unittest import TestCase

from cmdopts import (
    Constraint,
    MutuallyExclusiveError,
    MutuallyInclusiveError,
    OccurrenceError,
    UnexpectedOperandError,
    UnexpectedOptionError,
    VariableMap,
    constrain,
)


class TestBuilder(TestCase):

    def testUnconstrained(self):
        constraint = constrain()
        self.assertTrue(constraint.unconstrained)
        self.assertEqual((constraint.minimum, constraint.maximum), (0, None))
        self.assertIsNone(constraint.argument)
        self.assertIsNone(constraint.position)

    def testBuilderReturnsNewObjects(self):
        base = constrain()
        pinned = base.at_position(0)
        self.assertIsNot(base, pinned)
        self.assertIsNone(base.position)
        self.assertEqual(pinned.position, 0)

    def testOccurrencesSingleArgumentIsExact(self):
        constraint = constrain().occurrences(2)
        self.assertEqual((constraint.minimum, constraint.maximum), (2, 2))

    def testOccurrencesUnbounded(self):
        constraint = constrain().occurrences(1, None)
        self.assertEqual((constraint.minimum, constraint.maximum), (1, None))

    def testMinusOneClearsPins(self):
        constraint = constrain().at_argument(3).at_argument(-1)
        self.assertIsNone(constraint.argument)

    def testChainKeepsEarlierSettings(self):
        constraint = constrain().occurrences(0, 1).mutual_exclusion(["bar"]).at_position(2)
        self.assertEqual(constraint.maximum, 1)
        self.assertEqual(constraint.exclusive, frozenset({"bar"}))
        self.assertEqual(constraint.position, 2)

    def testInvalidBounds(self):
        with self.assertRaises(ValueError):
            constrain().occurrences(2, 1)
        with self.assertRaises(ValueError):
            constrain().occurrences(-1)
        with self.assertRaises(TypeError):
            constrain().occurrences(True)

    def testKeysMustBeAnIterableOfStrings(self):
        with self.assertRaises(TypeError):
            constrain().mutual_exclusion("bar")
        with self.assertRaises(TypeError):
            constrain().mutual_inclusion([1])

    def testRepr(self):
        self.assertTrue(repr(constrain()).startswith("constraint("))


class TestPlacement(TestCase):

    def testUnpinnedAcceptsAnything(self):
        constrain().check_placement("bar", 7, 3, operand=True)

    def testOperandArgumentPin(self):
        constraint = constrain().at_argument(0)
        constraint.check_placement("bar", 0, 0, operand=True)
        with self.assertRaises(UnexpectedOperandError) as context:
            constraint.check_placement("bar", 1, 0, operand=True)
        fault = context.exception
        self.assertEqual(fault.operand, "bar")
        self.assertEqual((fault.pin, fault.required, fault.actual), ("argument", 0, 1))
        self.assertEqual(fault.message, "unexpected operand 'bar' at second argument")

    def testOperandPositionPin(self):
        with self.assertRaises(UnexpectedOperandError) as context:
            constrain().at_position(0).check_placement("bar1", 2, 1, operand=True)
        self.assertEqual(context.exception.pin, "position")
        self.assertEqual(context.exception.message, "unexpected operand 'bar1' at second operand position")

    def testOptionPin(self):
        with self.assertRaises(UnexpectedOptionError) as context:
            constrain().at_argument(0).check_placement("--foo", 2, 0, operand=False)
        self.assertEqual(context.exception.input, "--foo")
        self.assertEqual(context.exception.actual, 2)


class TestValidation(TestCase):

    def testForbiddenOptionGiven(self):
        variables = VariableMap([("foo", "x")])
        with self.assertRaises(OccurrenceError) as context:
            constrain().occurrences(0).validate("foo", variables)
        fault = context.exception
        self.assertEqual(
            (fault.key, fault.minimum, fault.maximum, fault.occurrences),
            ("foo", 0, 0, 1)
        )
        self.assertEqual(fault.message, "option 'foo' cannot be specified more than 0 times")

    def testRequiredOptionMissing(self):
        with self.assertRaises(OccurrenceError) as context:
            constrain().occurrences(1).validate("foo", VariableMap())
        self.assertEqual(context.exception.occurrences, 0)
        self.assertEqual(context.exception.message, "option 'foo' must be specified at least 1 time")

    def testWithinBounds(self):
        variables = VariableMap([("foo", 1), ("foo", 2)])
        constrain().occurrences(1, 2).validate("foo", variables)
        constrain().occurrences(2, None).validate("foo", variables)

    def testDefaultOperandKeyLabel(self):
        variables = VariableMap([("", "a"), ("", "b")])
        with self.assertRaises(OccurrenceError) as context:
            constrain().occurrences(0, 1).validate("", variables, kind="operand")
        self.assertEqual(context.exception.key, "")
        self.assertEqual(context.exception.message, "operand values cannot be specified more than 1 time")

    def testMutualExclusion(self):
        variables = VariableMap([("foo", 1), ("bar", 2)])
        with self.assertRaises(MutuallyExclusiveError) as context:
            constrain().mutual_exclusion(["bar", "baz"]).validate("foo", variables)
        self.assertEqual((context.exception.key, context.exception.other), ("foo", "bar"))

    def testMutualExclusionIgnoresAbsentKey(self):
        constrain().mutual_exclusion(["bar"]).validate("foo", VariableMap([("bar", 2)]))

    def testMutualInclusion(self):
        with self.assertRaises(MutuallyInclusiveError) as context:
            constrain().mutual_inclusion(["bar", "baz"]).validate("foo", VariableMap([("foo", 1)]))
        self.assertEqual(context.exception.others, ("bar", "baz"))

    def testMutualInclusionAnyCompanionSuffices(self):
        variables = VariableMap([("foo", 1), ("baz", 3)])
        constrain().mutual_inclusion(["bar", "baz"]).validate("foo", variables)


if __name__ == '__main__':
    unittest.main()
