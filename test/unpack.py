"""
Token unpacker tests.

Scope
- unpack_posix: short options, bundled flags (packed) and attached values.
- unpack_gnu: long options, "=" splitting with backslash escapes, fallback to
  the POSIX rules for short tokens.
- "--" as the option "-" (ending the options is left to the parser), the
  re-unpacking of prefix and raw key, and the empty pack for non-options.
"""
import unittest
from unittest import TestCase

from cmdopts.unpack import *


class TestUnpackPosix(TestCase):

    def testSingleShortOption(self):
        pack = unpack_posix("-f")
        self.assertEqual(pack.prefix, "-")
        self.assertEqual(pack.raw_key, "f")
        self.assertFalse(pack.has_value)
        self.assertEqual(pack.continuations, ())
        self.assertIsNone(pack.value)

    def testBundledFlagsBecomeContinuations(self):
        pack = unpack_posix("-abcd")
        self.assertEqual(pack.raw_key, "a")
        self.assertEqual(pack.continuations, ("-b", "-c", "-d"))
        self.assertFalse(pack.has_value)

    def testUnpackedRestIsTheValue(self):
        pack = unpack_posix("-frab", packed=False)
        self.assertEqual(pack.raw_key, "f")
        self.assertTrue(pack.has_value)
        self.assertEqual(pack.value, "rab")
        self.assertEqual(pack.continuations, ())

    def testValueKeepsLeadingSpace(self):
        self.assertEqual(unpack_posix("-f bar", packed=False).value, " bar")

    def testDoubleDashIsTheDashOption(self):
        pack = unpack_posix("--")
        self.assertFalse(pack.cease)
        self.assertEqual((pack.prefix, pack.raw_key), ("-", "-"))
        self.assertEqual(unpack_posix("--x").continuations, ("-x",))

    def testReunpackingPrefixAndKey(self):
        for token in ("-f", "-abc", "-a-", "--", "--x", "-==", "-é"):
            for packed in (True, False):
                pack = unpack_posix(token, packed=packed)
                if pack.cease or pack.has_value:
                    continue
                with self.subTest(token=token, packed=packed):
                    again = unpack_posix(pack.prefix + pack.raw_key, packed=packed)
                    self.assertEqual((again.prefix, again.raw_key), (pack.prefix, pack.raw_key))
                    self.assertFalse(again.cease)
                    self.assertEqual(again.continuations, ())

    def testNotAnOption(self):
        for token in ("", "-", "foo", "f-"):
            with self.subTest(token=token):
                self.assertTrue(unpack_posix(token).empty)

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            unpack_posix(b"-f")  # type: ignore[arg-type]


class TestUnpackGnu(TestCase):

    def testLongOption(self):
        pack = unpack_gnu("--foo")
        self.assertEqual(pack.prefix, "--")
        self.assertEqual(pack.raw_key, "foo")
        self.assertFalse(pack.has_value)

    def testLongOptionWithValue(self):
        pack = unpack_gnu("--foo=bar")
        self.assertEqual(pack.raw_key, "foo")
        self.assertTrue(pack.has_value)
        self.assertEqual(pack.value, "bar")

    def testOnlyFirstAssignmentSplits(self):
        pack = unpack_gnu("--define=key=value")
        self.assertEqual(pack.raw_key, "define")
        self.assertEqual(pack.value, "key=value")

    def testEmptyAttachedValue(self):
        pack = unpack_gnu("--foo=")
        self.assertTrue(pack.has_value)
        self.assertEqual(pack.value, "")

    def testEscapedAssignmentStaysInKey(self):
        pack = unpack_gnu(r"--a\=b=c")
        self.assertEqual(pack.raw_key, "a=b")
        self.assertEqual(pack.value, "c")

    def testShortTokensFallBackToPosix(self):
        self.assertEqual(unpack_gnu("-abc").continuations, ("-b", "-c"))
        self.assertEqual(unpack_gnu("-abc", packed=False).value, "bc")

    def testBareLongPrefixFallsBackToPosix(self):
        self.assertEqual(unpack_gnu("--"), unpack_posix("--"))
        self.assertEqual(unpack_gnu("--").raw_key, "-")

    def testOperandIsEmptyPack(self):
        self.assertTrue(unpack_gnu("bar").empty)
        self.assertEqual(unpack_gnu("bar"), OptionPack())


if __name__ == '__main__':
    unittest.main()
