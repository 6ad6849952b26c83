#!/usr/bin/env python3
#
# Small/shared types for skald, including:
#     Exceptions
#     Enum enhancements
#     NewTypes for XML names
#
from typing import NewType, Any
from enum import Enum

__metadata__ = {
    "title"        : "skaldtypes",
    "description"  : "Exceptions, enums, and name types shared by skald.",
    "type"         : "http://purl.org/dc/dcmitype/Software",
    "language"     : "Python 3.11",
    "created"      : "2025-02",
    "modified"     : "2025-03",
    "license"      : "https://creativecommons.org/licenses/by-sa/3.0/"
}
__version__ = __metadata__['modified']


###############################################################################
# DOM-style Exceptions
#
# https://developer.mozilla.org/en-US/docs/Web/API/DOMException
# https://webidl.spec.whatwg.org/#dfn-error-names-table
#
class DOMException(Exception): pass
DE = DOMException

class HierarchyRequestError(DE): pass # would yield an incorrect node tree. (3)
class InvalidCharacterError(DE): pass # string contains invalid characters. (5)
class NotFoundError(DE): pass         # object can not be found here. (8)
class InvalidStateError(DE): pass     # object is in an invalid state. (11)

class InvalidDoctypeError(InvalidStateError): pass  # publicId w/o systemId.

### Abbreviations
#
HReqE = HierarchyRequestError
ICharE = InvalidCharacterError


###############################################################################
#
class FlexibleEnum(Enum):
    """Subclass from this to make enums that can construct from any of:
        E.XYZ       -- the usual enumclass.name form,
        E(E.XYZ)    -- an instance of the Enum as argument,
        E("XYZ")    -- a string that matches a member name,
        E("1.0")    -- a value of a member.
    """
    @classmethod
    def _missing_(cls, value: Any):
        """Handle cases where the value isn't a proper instance already.
        """
        if isinstance(value, str):
            try:
                return cls[value]
            except KeyError:
                for member in cls:
                    if member.value == value: return member
        return None

    def tostring(self) -> str:
        return self.name


###############################################################################
#
class XmlVersion(FlexibleEnum):
    """The declared XML version of a document. Besides going into the
    prolog, this picks which characters are dropped vs. referenced.
    """
    V10 = "1.0"
    V11 = "1.1"


###############################################################################
#
class NodeType(FlexibleEnum):
    ELEMENT_NODE                 = 1
    TEXT_NODE                    = 3
    CDATA_SECTION_NODE           = 4
    PROCESSING_INSTRUCTION_NODE  = 7
    COMMENT_NODE                 = 8
    DOCUMENT_TYPE_NODE           = 10


###############################################################################
# XML constructs (note caps)
#
NMTOKEN_t           = NewType("NMTOKEN_t", str)
