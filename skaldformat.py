#!/usr/bin/env python3
#
# skaldformat: Serialization options and the serializer for skald trees.
#
#pylint: disable=W0212,W0613
#
import copy
import re
import logging
from typing import Dict, Any, List, Union, IO

from skaldtypes import DOMException, NodeType, XmlVersion
from skaldenums import RWord
from xmlescaping import XmlEscaper

lg = logging.getLogger("skaldformat")

__metadata__ = {
    "title"        : "skaldformat",
    "description"  : "PrintOptions and the XML serializer for skald",
    "type"         : "http://purl.org/dc/dcmitype/Software",
    "language"     : "Python 3.11",
    "created"      : "2025-02",
    "modified"     : "2025-03",
    "license"      : "https://creativecommons.org/licenses/by-sa/3.0/"
}
__version__ = __metadata__['modified']


###############################################################################
#
class PrintOptions:
    """Options for toxml(). Callers can pass like-named
    keyword args, or construct and pass an object.

    'xmlVersion' is normally not set by callers: the serializer takes it
    from the root Element being rendered, in a copy (see derive()), so
    rendering never changes the caller's PrintOptions.

    'childOrders' maps an element's declared type to the order its
    child elements should be written in (see setChildOrders()).
    """
    def __init__(self, **kwargs):
        self.pretty:bool = True                 # Line-breaks and indentation
        self.indent:str = "\t"                  # String to repeat for indent
        self.singleLineTextElements:bool = False # <a>text</a> on one line
        self.useSelfClosingTags:bool = True     # <a/> vs. <a></a>
        self.useCharacterReference:bool = False # &#60; instead of &lt;, etc.
        self.xmlVersion:XmlVersion = XmlVersion.V10
        self.childOrders:Dict[str, List[str]] = {}

        for k, v in kwargs.items():
            self.setOption(k, v)

    def setOption(self, k:str, v:Any) -> None:  # PrintOptions
        if k == "childOrders":
            self.setChildOrders(v)
        elif k.startswith("_") or k not in self.__dict__:
            raise KeyError(f"PrintOptions: Unknown option '{k}'.")
        elif k == "xmlVersion":
            self.xmlVersion = XmlVersion(v)
        elif not isinstance(v, type(self.__dict__[k])):
            if isinstance(v, PrintOptions): raise TypeError(
                f"PrintOptions: got a PrintOptions instance for option {k}."
                " Perhaps you forgot 'options=' in the call?")
            raise TypeError(f"PrintOptions: option '{k}' expected type "
                f"{type(self.__dict__[k])}, not {type(v)}.")
        else:
            self.__dict__[k] = v
        lg.debug("PrintOptions: set %s.", k)

    def derive(self, **kwargs) -> 'PrintOptions':
        """Return a copy with the given options changed.
        """
        po = copy.copy(self)
        po.childOrders = dict(self.childOrders)
        for k, v in kwargs.items():
            po.setOption(k, v)
        return po

    def setChildOrders(self, source:Union[Dict, str, IO]) -> Dict:
        """Add a bunch of declaredType:childNames pairs to childOrders.
        Accepts either a dict, a str path, or an open file handle.
        Returns the resulting childOrders.

        In a dict, each value can be a list of names, or a string of
        space-separated names. The file format has one record per line:
            typeName: child1 child2 child3
        and lines beginning with (space and) "#" are ignored as comments.
        """
        if isinstance(source, dict):
            for typeName, names in source.items():
                if isinstance(names, str): names = names.split()
                self.childOrders[typeName] = list(names)
            return self.childOrders
        elif isinstance(source, str):
            ifh = open(source, "r", encoding="utf-8")
        else:
            ifh = source

        try:
            for i, rec in enumerate(ifh.readlines()):
                rec = rec.strip()
                if rec.startswith("#") or rec == "": continue
                typeName, colon, names = rec.partition(":")
                if not colon: raise SyntaxError(
                    f"line {i}: childOrders record lacks colon: {rec}.")
                self.childOrders[typeName.strip()] = names.split()
        finally:
            if isinstance(source, str): ifh.close()
        return self.childOrders

    @staticmethod
    def getDefaultPO(**kwargs) -> 'PrintOptions':
        return PrintOptions(**kwargs)

    def tostring(self) -> str:
        buf = "PrintOptions:\n"
        for k in sorted(self.__dict__):
            if k.startswith("_"): continue
            v = getattr(self, k)
            if isinstance(v, str): v = f"'{v}'"
            pv = re.sub(r"[\x00-\x1F]",
                lambda x: "\\x%02x" % ord(x.group()), str(v))
            buf += "    %-24s %s\n" % (k, pv)
        return buf


###############################################################################
#
class FormatXml:
    """Serialize a node and its subtree. Everything is static. Each
    _renderX method appends the pieces for one node (including its
    indentation and trailing line-break) to 'buf', given the indentation
    for its own level. Only renderDocument() joins them.
    """
    @staticmethod
    def toxml(node:'Node', po:PrintOptions=None) -> str:
        """The whole document for 'node' as root, without leading or
        trailing whitespace.
        """
        return FormatXml.renderDocument(node, po).strip()

    @staticmethod
    def renderDocument(node:'Node', po:PrintOptions=None) -> str:
        if po is None: po = PrintOptions()
        buf:List[str] = []
        if node.nodeType != NodeType.ELEMENT_NODE:
            FormatXml.render(node, "", po, buf)
            return "".join(buf)

        po = po.derive(xmlVersion=node.version)
        if node.includeXmlProlog:
            buf.append(FormatXml._prolog(node))
            buf.append(FormatXml.lineEnding(po))
        if node.doctype is not None:
            FormatXml._renderDoctype(node.doctype, "", po, buf)
        for pi in node.globalProcessingInstructions:
            FormatXml._renderPI(pi, "", po, buf)
        FormatXml.render(node, "", po, buf)
        return "".join(buf)

    @staticmethod
    def render(node:'Node', indent:str, po:PrintOptions, buf:List[str]) -> None:
        ntype = node.nodeType
        if ntype == NodeType.ELEMENT_NODE:
            FormatXml._renderElement(node, indent, po, buf)
        elif ntype == NodeType.TEXT_NODE:
            FormatXml._renderText(node, indent, po, buf)
        elif ntype == NodeType.CDATA_SECTION_NODE:
            FormatXml._renderText(node, indent, po, buf)
        elif ntype == NodeType.COMMENT_NODE:
            FormatXml._renderComment(node, indent, po, buf)
        elif ntype == NodeType.PROCESSING_INSTRUCTION_NODE:
            FormatXml._renderPI(node, indent, po, buf)
        elif ntype == NodeType.DOCUMENT_TYPE_NODE:
            FormatXml._renderDoctype(node, indent, po, buf)
        else:
            raise DOMException(f"Unknown nodeType {ntype}.")

    @staticmethod
    def lineEnding(po:PrintOptions) -> str:
        return "\n" if po.pretty else ""

    @staticmethod
    def childIndent(indent:str, po:PrintOptions) -> str:
        return indent + po.indent if po.pretty else ""

    @staticmethod
    def _prolog(node:'Element') -> str:
        sa = ""
        if node.standalone is not None:
            sa = ' standalone="%s"' % ("yes" if node.standalone else "no")
        return (f'<?xml version="{node.version.value}"'
            f' encoding="{node.encoding}"{sa}?>')

    @staticmethod
    def renderAttributes(attrs:Dict, po:PrintOptions) -> str:
        """Serialize a name:value dict as ' name="value"' pairs, in
        insertion order. None values are skipped.
        """
        if not attrs: return ""
        return "".join(
            f' {k}="{XmlEscaper.escapeValue(v, po.xmlVersion, po.useCharacterReference)}"'
            for k, v in attrs.items() if v is not None)


    ###########################################################################
    # Elements
    #
    @staticmethod
    def _renderElement(node:'Element', indent:str, po:PrintOptions,
        buf:List[str]) -> None:
        nl = FormatXml.lineEnding(po)
        name = node.nodeName
        buf.append(f"{indent}<{name}{FormatXml.renderAttributes(node.attributes, po)}")

        if FormatXml._isEmptyOrSingleEmptyText(node):
            if po.useSelfClosingTags: buf.append("/>" + nl)
            else: buf.append(f"></{name}>" + nl)
        elif (po.pretty and po.singleLineTextElements
            and len(node.childNodes) == 1 and node.childNodes[0].isText):
            buf.append(">")
            buf.append(FormatXml.renderedText(node.childNodes[0], po))
            buf.append(f"</{name}>" + nl)
        else:
            buf.append(">" + nl)
            chIndent = FormatXml.childIndent(indent, po)
            for ch in FormatXml.sortedChildren(node, po):
                if ch.isElement and ch.globalProcessingInstructions:
                    lg.debug("Ignoring global PIs on non-root element '%s'.",
                        ch.nodeName)
                FormatXml.render(ch, chIndent, po, buf)
            buf.append(f"{indent}</{name}>" + nl)

    @staticmethod
    def _isEmptyOrSingleEmptyText(node:'Element') -> bool:
        if len(node.childNodes) == 0: return True
        if len(node.childNodes) == 1 and node.childNodes[0].isText:
            return node.childNodes[0].data == ""
        return False

    @staticmethod
    def sortedChildren(node:'Element', po:PrintOptions) -> List['Node']:
        """Children in insertion order, unless there's a childOrders entry
        for the element's declared type. Then, stably sort child elements
        by where their names fall in that list (0 if not there).
        """
        order = po.childOrders.get(node.declaredType)
        if not order: return node.childNodes
        lg.debug("Reordering children of '%s' by declared type '%s'.",
            node.nodeName, node.declaredType)
        rank = { chName: i for i, chName in enumerate(order) }
        return sorted(node.childNodes,
            key=lambda ch: rank.get(ch.nodeName, 0) if ch.isElement else 0)


    ###########################################################################
    # Leaves
    #
    @staticmethod
    def renderedText(node:'Text', po:PrintOptions) -> str:
        """Just the text, escaped or wrapped as a marked section, with
        no indentation or line-break.
        """
        if node.nodeType == NodeType.CDATA_SECTION_NODE:
            return FormatXml.cdataSection(node.data)
        return XmlEscaper.escapeValue(
            node.data, po.xmlVersion, po.useCharacterReference)

    @staticmethod
    def cdataSection(data:str) -> str:
        return RWord.CDATA_START + XmlEscaper.escapeCDATA(data) + RWord.CDATA_END

    @staticmethod
    def _renderText(node:'Text', indent:str, po:PrintOptions,
        buf:List[str]) -> None:
        if node.data == "": return
        buf.append(indent + FormatXml.renderedText(node, po)
            + FormatXml.lineEnding(po))

    @staticmethod
    def _renderComment(node:'Comment', indent:str, po:PrintOptions,
        buf:List[str]) -> None:
        buf.append(indent + RWord.COMMENT_START
            + XmlEscaper.escapeComment(node.data) + RWord.COMMENT_END
            + FormatXml.lineEnding(po))

    @staticmethod
    def _renderPI(node:'ProcessingInstruction', indent:str, po:PrintOptions,
        buf:List[str]) -> None:
        buf.append(f"{indent}<?{node.target}"
            f"{FormatXml.renderAttributes(node.attributes, po)}?>"
            + FormatXml.lineEnding(po))

    @staticmethod
    def _renderDoctype(node:'Doctype', indent:str, po:PrintOptions,
        buf:List[str]) -> None:
        dcl = f"<!DOCTYPE {node.name}"
        if node.publicId is not None:
            dcl += f' PUBLIC "{node.publicId}" "{node.systemId}"'
        elif node.systemId is not None:
            dcl += f' SYSTEM "{node.systemId}"'
        buf.append(dcl + ">" + FormatXml.lineEnding(po))
