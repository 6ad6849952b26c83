#!/usr/bin/env python3
#
# Shared sample trees and expected output for the skald tests.
#
import re
from types import SimpleNamespace
import logging

from skaldnodes import Element, xml

lg = logging.getLogger("makeTestDoc")

DAT = SimpleNamespace(**{
    "root_name"   : "people",
    "ns_uri"      : "http://example.com/people",
    "child_name"  : "person",
    "first"       : "John",
    "last"        : "Doe",
    "phone"       : "555-555-5555",
    "ss_href"     : "style.xsl",
    "xhtml_pub"   : "-//W3C//DTD XHTML 1.0 Strict//EN",
    "xhtml_sys"   : "http://www.w3.org/TR/xhtml1/DTD/xhtml1-strict.dtd",
})

peoplePretty = "\n".join([
    '<people xmlns="http://example.com/people">',
    '\t<person id="1">',
    '\t\t<firstName>',
    '\t\t\tJohn',
    '\t\t</firstName>',
    '\t\t<lastName>',
    '\t\t\tDoe',
    '\t\t</lastName>',
    '\t\t<phone>',
    '\t\t\t555-555-5555',
    '\t\t</phone>',
    '\t</person>',
    '</people>',
])

peopleSingleLine = "\n".join([
    '<people xmlns="http://example.com/people">',
    '\t<person id="1">',
    '\t\t<firstName>John</firstName>',
    '\t\t<lastName>Doe</lastName>',
    '\t\t<phone>555-555-5555</phone>',
    '\t</person>',
    '</people>',
])

peopleCompact = (
    '<people xmlns="http://example.com/people">'
    '<person id="1">'
    '<firstName>John</firstName>'
    '<lastName>Doe</lastName>'
    '<phone>555-555-5555</phone>'
    '</person>'
    '</people>')


###############################################################################
#
def makePeopleDoc() -> Element:
    """The 'people' document, built with the plain mutation API.
    """
    root = Element(DAT.root_name)
    root.setAttribute("xmlns", DAT.ns_uri)
    person = root.addChild(Element(DAT.child_name))
    person.setAttribute("id", 1)
    for name, value in [ ("firstName", DAT.first),
        ("lastName", DAT.last), ("phone", DAT.phone) ]:
        leaf = person.addChild(Element(name))
        leaf.text(value)
    lg.info("Built people doc.")
    return root

def makePeopleDocShorthand() -> Element:
    """The same document, built with the shorthand constructors.
    """
    root = xml(DAT.root_name, namespace=DAT.ns_uri)
    person = root.element(DAT.child_name, attrs={ "id": "1" })
    person.element("firstName", DAT.first)
    person.element("lastName", DAT.last)
    person.element("phone", DAT.phone)
    return root

def packXml(s:str) -> str:
    """Make 2 xml strings more comparable (drops the XML declaration and
    whitespace between tags).
    """
    s = re.sub(r"""<\?xml .*?\?>""", "", s)
    s = re.sub(r">\s*<", "><", s).strip()
    return s
