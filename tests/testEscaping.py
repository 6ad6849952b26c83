#!/usr/bin/env python3
#
import unittest
import logging

from skaldtypes import XmlVersion
from xmlescaping import XmlEscaper as XE

lg = logging.getLogger("testEscaping")

delims = "\"&<>'"


class TestXml10(unittest.TestCase):
    def test_delimiters(self):
        self.assertEqual(XE.escapeXml10(delims), "&quot;&amp;&lt;&gt;&apos;")
        self.assertEqual(XE.escapeXml10("AT&T <b>"), "AT&amp;T &lt;b&gt;")

    def test_dropped(self):
        self.assertEqual(XE.escapeXml10("\x02"), "")
        self.assertEqual(XE.escapeXml10("a\x00b\x08c\x0Bd\x0Ce\x1Ff"), "abcdef")
        self.assertEqual(XE.escapeXml10("x\ud800y\udfffz"), "xyz")
        self.assertEqual(XE.escapeXml10("\ufffe\uffff"), "")

    def test_referenced(self):
        self.assertEqual(XE.escapeXml10("\x7f"), "&#127;")
        self.assertEqual(XE.escapeXml10("\x84\x86\x9f"), "&#132;&#134;&#159;")

    def test_passThrough(self):
        for s in [ "\t\n\r", "\x85", "plain text", "café", "\U0001F600" ]:
            self.assertEqual(XE.escapeXml10(s), s)


class TestXml11(unittest.TestCase):
    def test_delimiters(self):
        self.assertEqual(XE.escapeXml11(delims), "&quot;&amp;&lt;&gt;&apos;")

    def test_dropped(self):
        self.assertEqual(XE.escapeXml11("\x00"), "")
        self.assertEqual(XE.escapeXml11("\ud800"), "")
        self.assertEqual(XE.escapeXml11("\ufffe\uffff"), "")

    def test_referenced(self):
        self.assertEqual(XE.escapeXml11("\x02"), "&#2;")
        self.assertEqual(XE.escapeXml11("\x01\x0B\x0C\x1F"), "&#1;&#11;&#12;&#31;")
        self.assertEqual(XE.escapeXml11("\x7f\x9f"), "&#127;&#159;")

    def test_passThrough(self):
        self.assertEqual(XE.escapeXml11("\t\n\r\x85"), "\t\n\r\x85")


class TestCharacterReference(unittest.TestCase):
    def test_delimiters(self):
        self.assertEqual(XE.referenceCharacters("'&<>\""),
            "&#39;&#38;&#60;&#62;&#34;")

    def test_noControlHandling(self):
        # Both versions are bypassed.
        for v in XmlVersion:
            self.assertEqual(XE.escapeValue("\x02<", v, True), "\x02&#60;")


class TestEscapeValue(unittest.TestCase):
    def test_none(self):
        self.assertIsNone(XE.escapeValue(None))

    def test_coercion(self):
        self.assertEqual(XE.escapeValue(12), "12")
        self.assertEqual(XE.escapeValue(1.5), "1.5")

    def test_versionPicksPolicy(self):
        self.assertEqual(XE.escapeValue("\x02", XmlVersion.V10), "")
        self.assertEqual(XE.escapeValue("\x02", XmlVersion.V11), "&#2;")
        self.assertEqual(XE.escapeValue("\x02", "1.1"), "&#2;")


class TestCommentAndCDATA(unittest.TestCase):
    def test_comment(self):
        self.assertEqual(XE.escapeComment("a--b"), "a- -b")
        self.assertEqual(XE.escapeComment("---"), "- - - ")
        self.assertEqual(XE.escapeComment("ends-"), "ends- ")
        self.assertEqual(XE.escapeComment("a - b <&>"), "a - b <&>")
        for s in [ "--", "a----b", "-x--" ]:
            self.assertNotIn("--", XE.escapeComment(s))

    def test_cdata(self):
        self.assertEqual(XE.escapeCDATA("a]]>b"), "a]]]]><![CDATA[>b")
        self.assertEqual(XE.escapeCDATA("<&>"), "<&>")


if __name__ == '__main__':
    unittest.main()
