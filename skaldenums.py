#!/usr/bin/env python
#
from types import SimpleNamespace

### Constants

RWord = SimpleNamespace(**{
    # Namespace-declaring attribute (and prefix).
    "NS_PREFIX"      : "xmlns",

    # Reserved nodeNames
    # (PI, ELEMENT, DOCTYPE use actual names)
    "NN_TEXT"        : "#text",
    "NN_COMMENT"     : "#comment",
    "NN_CDATA"       : "#cdata-section",

    # Prolog defaults
    "DFT_ENCODING"   : "UTF-8",

    # Delimiters
    "CDATA_START"    : "<![CDATA[",
    "CDATA_END"      : "]]>",
    "COMMENT_START"  : "<!--",
    "COMMENT_END"    : "-->",
})
