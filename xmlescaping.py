#!/usr/bin/env python3
#
# xmlescaping: Version-aware escaping for skald's serializer.
#
# Which characters XML 1.0 and 1.1 allow as literals, and which they allow
# only as character references, differ. This picks the policy from the
# document's declared version.
#
import logging
from typing import Any, Dict

import regex

from skaldtypes import XmlVersion
from skaldenums import RWord

lg = logging.getLogger("xmlescaping")

__metadata__ = {
    "title"        : "xmlescaping",
    "description"  : "Escapers for text, attributes, comments, and CDATA.",
    "type"         : "http://purl.org/dc/dcmitype/Software",
    "language"     : "Python 3.11",
    "created"      : "2025-02",
    "modified"     : "2025-03",
    "license"      : "https://creativecommons.org/licenses/by-sa/3.0/"
}
__version__ = __metadata__['modified']

descr = """
=Description=

All the methods are static, so you don't have to instantiate XmlEscaper.

* '''escapeXml10'''(s) / '''escapeXml11'''(s)

Replace the five XML delimiter characters with their predefined named
entities, drop characters the version can't represent at all, and turn
characters it can represent only by reference into decimal char refs.

* '''referenceCharacters'''(s)

Replace just the five delimiter characters with decimal char refs, and
leave everything else alone.

* '''escapeValue'''(value, version, useCharacterReference)

str() the value and apply whichever of the above applies.

* '''escapeComment'''(s)

Break up "--" (and a trailing "-") so the comment can't end early.

* '''escapeCDATA'''(s)

Split any "]]>" across two adjacent marked sections.
"""


###############################################################################
#
_namedEntities:Dict[str, str] = {
    '"': "&quot;",
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&apos;",
}

_charRefs:Dict[str, str] = {
    "'": "&#39;",
    "&": "&#38;",
    "<": "&#60;",
    ">": "&#62;",
    '"': "&#34;",
}

# Not representable at all, even as a reference.
_drop10_re = regex.compile(
    r"[\x00-\x08\x0B\x0C\x0E-\x1F\uD800-\uDFFF\uFFFE\uFFFF]")
_drop11_re = regex.compile(
    r"[\x00\uD800-\uDFFF\uFFFE\uFFFF]")

# Delimiters, plus what may only appear as a numeric reference.
_special10_re = regex.compile(
    r"[\"&<>'\x7F-\x84\x86-\x9F]")
_special11_re = regex.compile(
    r"[\"&<>'\x01-\x08\x0B\x0C\x0E-\x1F\x7F-\x84\x86-\x9F]")

_delims_re = regex.compile(r"[\"&<>']")


class XmlEscaper:
    @staticmethod
    def _escapeOne(mat:"regex.Match") -> str:
        c = mat.group()
        if c in _namedEntities: return _namedEntities[c]
        return f"&#{ord(c)};"

    @staticmethod
    def _dropIllegal(s:str, drop_re:"regex.Pattern", version:XmlVersion) -> str:
        s, nDropped = drop_re.subn("", s)
        if nDropped:
            lg.debug("Dropped %d character(s) not allowed in XML %s.",
                nDropped, version.value)
        return s

    @staticmethod
    def escapeXml10(s:str) -> str:
        s = XmlEscaper._dropIllegal(s, _drop10_re, XmlVersion.V10)
        return _special10_re.sub(XmlEscaper._escapeOne, s)

    @staticmethod
    def escapeXml11(s:str) -> str:
        """XML 1.1 lets you refer to most C0 and C1 controls, but still
        not NUL, surrogates, or the non-characters U+FFFE and U+FFFF.
        """
        s = XmlEscaper._dropIllegal(s, _drop11_re, XmlVersion.V11)
        return _special11_re.sub(XmlEscaper._escapeOne, s)

    @staticmethod
    def referenceCharacters(s:str) -> str:
        return _delims_re.sub(lambda mat: _charRefs[mat.group()], s)

    @staticmethod
    def escapeValue(value:Any, version:XmlVersion=XmlVersion.V10,
        useCharacterReference:bool=False) -> str:
        """Escape a text or attribute value for the given XML version.
        Anything printable is accepted, and str()'d first.
        """
        if value is None: return None
        s = str(value)
        if useCharacterReference:
            return XmlEscaper.referenceCharacters(s)
        if XmlVersion(version) == XmlVersion.V11:
            return XmlEscaper.escapeXml11(s)
        return XmlEscaper.escapeXml10(s)
    escapeText = escapeAttribute = escapeValue

    @staticmethod
    def escapeComment(s:str) -> str:
        """XML defines no escaping in comments, and char refs aren't
        recognized there. So put a space between adjacent hyphens.
        """
        s = regex.sub(r"-(?=-)", "- ", s)
        if s.endswith("-"): s += " "
        return s

    @staticmethod
    def escapeCDATA(s:str) -> str:
        """End the section just inside "]]>", and start a new one holding
        the ">". Nothing else needs (or can get) escaping in CDATA.
        """
        return s.replace(RWord.CDATA_END,
            "]]" + RWord.CDATA_END + RWord.CDATA_START + ">")
