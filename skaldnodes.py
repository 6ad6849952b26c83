#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
# skaldnodes: A small document tree for building XML by API, and handing
# it to skaldformat to write out.
#
# "Here the reader will find, set out in order, such lore as he will need."
#
#pylint: disable=W0212
#
import itertools
import logging
from typing import Any, Callable, Dict, Iterable, List, Union, IO

from skaldtypes import HReqE, ICharE, NotFoundError, InvalidDoctypeError
from skaldtypes import NodeType, XmlVersion, NMTOKEN_t
from skaldenums import RWord
from skaldformat import PrintOptions, FormatXml

lg = logging.getLogger("skaldnodes")

__metadata__ = {
    "title"        : "skaldnodes",
    "description"  : "Node types and tree mutation for building XML.",
    "type"         : "http://purl.org/dc/dcmitype/Software",
    "language"     : "Python 3.11",
    "created"      : "2025-02",
    "modified"     : "2025-03",
    "license"      : "https://creativecommons.org/licenses/by-sa/3.0/"
}
__version__ = __metadata__['modified']

descr = """
=Description=

Build a tree of Element, Text, CDATA, Comment, and ProcessingInstruction
nodes, then call toxml() on the root. The root also carries what goes
before the document element: the XML declaration, a DOCTYPE, and any
document-level processing instructions.

    root = xml("people", encoding="UTF-8")
    root.xmlns = "http://example.com/people"
    person = root.element("person", attrs={ "id": 1 })
    person.element("firstName", "John")
    print(root.toxml(PrintOptions(singleLineTextElements=True)))

==Identity vs. equality==

`==` on nodes is structural (see isEqualNode()). The mutators
(insertBefore, insertAfter, removeChild, replaceChild) never use it:
they find the child by its `handle`, a number unique to each node object.
So removing one of two equal children removes the one you passed.
"""

_nextHandle = itertools.count(1)


###############################################################################
#
class Node:
    """The base class for all the node types. Only Element can have
    children or attributes.
    """
    def __init__(self, nodeName:str=None):
        self.nodeType:NodeType = None
        self.nodeName = nodeName
        self.parentNode:'Element' = None
        self.handle:int = next(_nextHandle)

    @property
    def isElement(self) -> bool:
        return self.nodeType == NodeType.ELEMENT_NODE
    @property
    def isText(self) -> bool:
        """True for CDATA too, since CDATA is a kind of Text.
        """
        return self.nodeType in (NodeType.TEXT_NODE, NodeType.CDATA_SECTION_NODE)
    @property
    def isCDATA(self) -> bool:
        return self.nodeType == NodeType.CDATA_SECTION_NODE
    @property
    def isComment(self) -> bool:
        return self.nodeType == NodeType.COMMENT_NODE
    @property
    def isPI(self) -> bool:
        return self.nodeType == NodeType.PROCESSING_INSTRUCTION_NODE
    @property
    def isDoctype(self) -> bool:
        return self.nodeType == NodeType.DOCUMENT_TYPE_NODE

    def isSameNode(self, n2:'Node') -> bool:
        return isinstance(n2, Node) and self.handle == n2.handle

    def isEqualNode(self, n2:'Node') -> bool:  # Node
        raise NotImplementedError

    def __eq__(self, other:Any) -> bool:
        return self.isEqualNode(other)

    def __ne__(self, other:Any) -> bool:
        return not self.isEqualNode(other)

    ### Serializing
    #
    def toxml(self, options:PrintOptions=None, pretty:bool=None) -> str:  # Node
        """Serialize this node (as root, if it's an Element). Leading and
        trailing whitespace is stripped.
        """
        if pretty is not None:
            options = (options or PrintOptions()).derive(pretty=pretty)
        return FormatXml.toxml(self, options)
    tostring = toxml

    def toprettyxml(self, **kwargs) -> str:
        """Shorthand to pass PrintOptions as keyword args.
        """
        return FormatXml.toxml(self, PrintOptions(**kwargs))

    def writexml(self, writer:IO, options:PrintOptions=None) -> None:
        writer.write(FormatXml.renderDocument(self, options))

    def __str__(self) -> str:
        return self.toxml()


###############################################################################
#
class Text(Node):
    """Plain character content. 'data' is stored raw, and escaped only
    when written out.
    """
    def __init__(self, data:str=""):
        if not isinstance(data, str): raise TypeError(
            f"Text data must be a str, not {type(data).__name__}.")
        super().__init__(nodeName=RWord.NN_TEXT)
        self.nodeType = NodeType.TEXT_NODE
        self.data = data

    def isEqualNode(self, n2:Any) -> bool:  # Text
        return type(n2) is type(self) and self.data == n2.data

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.data))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.data!r})"


###############################################################################
#
class CDATA(Text):
    """Like Text, but written as a CDATA marked section. Never equal to
    a plain Text node, even with the same data.
    """
    def __init__(self, data:str=""):
        super().__init__(data)
        self.nodeName = RWord.NN_CDATA
        self.nodeType = NodeType.CDATA_SECTION_NODE

CDATASection = CDATA


###############################################################################
#
class Comment(Node):
    def __init__(self, data:str=""):
        if not isinstance(data, str): raise TypeError(
            f"Comment data must be a str, not {type(data).__name__}.")
        super().__init__(nodeName=RWord.NN_COMMENT)
        self.nodeType = NodeType.COMMENT_NODE
        self.data = data

    def isEqualNode(self, n2:Any) -> bool:  # Comment
        return isinstance(n2, Comment) and self.data == n2.data

    def __hash__(self) -> int:
        return hash((RWord.NN_COMMENT, self.data))


###############################################################################
#
class ProcessingInstruction(Node):
    """A target plus ordered pseudo-attributes, as in
        <?xml-stylesheet type="text/xsl" href="style.xsl"?>
    """
    def __init__(self, target:NMTOKEN_t,
        attributes:Union[Dict, Iterable]=None, **kwattrs):
        if not target: raise ICharE("Bad PI target '%s'." % (target))
        super().__init__(nodeName=target)
        self.nodeType = NodeType.PROCESSING_INSTRUCTION_NODE
        self.attributes:Dict[str, Any] = {}
        for k, v in itertools.chain(dict(attributes or {}).items(), kwattrs.items()):
            if v is None: self.attributes.pop(k, None)
            else: self.attributes[k] = v

    @property
    def target(self) -> str:
        return self.nodeName

    def isEqualNode(self, n2:Any) -> bool:  # PI
        return (isinstance(n2, ProcessingInstruction)
            and self.target == n2.target and self.attributes == n2.attributes)

    def __hash__(self) -> int:
        return hash((self.target, _hashableAttrs(self.attributes)))

PI = ProcessingInstruction


###############################################################################
#
class Doctype(Node):
    """A DOCTYPE declaration. This only carries the names and ids to write
    out; there's no schema behind it.
    """
    def __init__(self, name:str, publicId:str=None, systemId:str=None):
        if publicId is not None and systemId is None:
            raise InvalidDoctypeError(
                "systemId must be provided if publicId is provided.")
        super().__init__(nodeName=name)
        self.nodeType = NodeType.DOCUMENT_TYPE_NODE
        self.publicId = publicId
        self.systemId = systemId

    @property
    def name(self) -> str:
        return self.nodeName

    def isEqualNode(self, n2:Any) -> bool:  # Doctype
        return (isinstance(n2, Doctype) and self.name == n2.name
            and self.publicId == n2.publicId and self.systemId == n2.systemId)

    def __hash__(self) -> int:
        return hash((self.name, self.publicId, self.systemId))


def _hashableAttrs(attrs:Dict) -> frozenset:
    """Just the names: values only have to be ==, and 1 == 1.0 == True
    even though they don't hash (or print) alike.
    """
    return frozenset(attrs)


###############################################################################
#
class Element(Node):
    """A named node with ordered attributes and ordered children.

    The fields 'includeXmlProlog', 'encoding', 'version', 'standalone',
    'doctype', and 'globalProcessingInstructions' only matter when this
    Element is rendered as the root. Setting 'encoding', 'version', or
    'standalone' turns on 'includeXmlProlog'.
    """
    def __init__(self, nodeName:NMTOKEN_t, attrs:Union[Dict, Iterable]=None):
        if not nodeName or not isinstance(nodeName, str):
            raise ICharE(f"Element name '{nodeName}' is empty or not a string.")
        super().__init__(nodeName=nodeName)
        self.nodeType = NodeType.ELEMENT_NODE
        self.attributes:Dict[str, Any] = {}
        self.childNodes:List[Node] = []

        self.includeXmlProlog:bool = False
        self._encoding:str = RWord.DFT_ENCODING
        self._version:XmlVersion = XmlVersion.V10
        self._standalone:bool = None
        self.doctype:Doctype = None
        self.globalProcessingInstructions:List[ProcessingInstruction] = []

        if attrs: self.setAttributes(attrs)

    @property
    def tagName(self) -> NMTOKEN_t: return self.nodeName

    @property
    def declaredType(self) -> str:
        """What PrintOptions.childOrders is keyed on: the class name for
        subclasses of Element, else just the element name.
        """
        if type(self) is Element: return self.nodeName
        return type(self).__name__

    ### Document-level properties
    #
    @property
    def encoding(self) -> str:
        return self._encoding

    @encoding.setter
    def encoding(self, value:str) -> None:
        self.includeXmlProlog = True
        self._encoding = value

    @property
    def version(self) -> XmlVersion:
        return self._version

    @version.setter
    def version(self, value:Union[XmlVersion, str]) -> None:
        self.includeXmlProlog = True
        self._version = XmlVersion(value)

    @property
    def standalone(self) -> bool:
        return self._standalone

    @standalone.setter
    def standalone(self, value:bool) -> None:
        self.includeXmlProlog = True
        self._standalone = value

    @property
    def xmlns(self) -> str:
        """The default namespace. For others, use declareNamespace().
        """
        return self.getAttribute(RWord.NS_PREFIX)

    @xmlns.setter
    def xmlns(self, uri:str) -> None:
        self.setAttribute(RWord.NS_PREFIX, uri)


    ###########################################################################
    # Attributes
    #
    def hasAttributes(self) -> bool:
        return bool(self.attributes)

    def hasAttribute(self, attrName:NMTOKEN_t) -> bool:
        return attrName in self.attributes

    def setAttribute(self, attrName:NMTOKEN_t, attrValue:Any) -> None:
        """Setting None removes the attribute. Re-setting an existing one
        changes the value but keeps its place in the order.
        """
        if attrValue is None:
            self.attributes.pop(attrName, None)
        else:
            self.attributes[attrName] = attrValue

    def getAttribute(self, attrName:NMTOKEN_t, default:Any=None) -> Any:
        return self.attributes.get(attrName, default)

    def removeAttribute(self, attrName:NMTOKEN_t) -> None:
        """Silent no-op if not present.
        """
        self.attributes.pop(attrName, None)

    def setAttributes(self, attrs:Union[Dict, Iterable]=None, **kwattrs) -> None:
        """Set several at once, from a dict, (name, value) pairs, and/or
        keyword args.
        """
        if attrs:
            pairs = attrs.items() if isinstance(attrs, dict) else attrs
            for k, v in pairs: self.setAttribute(k, v)
        for k, v in kwattrs.items(): self.setAttribute(k, v)

    def __getitem__(self, attrName:NMTOKEN_t) -> Any:
        return self.getAttribute(attrName)

    def __setitem__(self, attrName:NMTOKEN_t, attrValue:Any) -> None:
        self.setAttribute(attrName, attrValue)

    def __delitem__(self, attrName:NMTOKEN_t) -> None:
        self.removeAttribute(attrName)

    def declareNamespace(self, prefix:str, uri:str) -> None:
        """Sets xmlns:prefix. An empty prefix sets the default namespace.
        """
        if not prefix: self.setAttribute(RWord.NS_PREFIX, uri)
        else: self.setAttribute(f"{RWord.NS_PREFIX}:{prefix}", uri)


    ###########################################################################
    # Children
    #
    def __len__(self) -> int:
        return len(self.childNodes)

    def __iter__(self):
        return iter(self.childNodes)

    def __bool__(self) -> bool:
        """An empty element is still there (think <br/>).
        """
        return True

    def hasChildNodes(self) -> bool:
        return len(self.childNodes) > 0

    @property
    def firstChild(self) -> Node:
        return self.childNodes[0] if self.childNodes else None

    @property
    def lastChild(self) -> Node:
        return self.childNodes[-1] if self.childNodes else None

    def _findIndex(self, node:Node) -> int:
        """Find a direct child by handle (not by ==, which is structural).
        """
        if isinstance(node, Node):
            for i, ch in enumerate(self.childNodes):
                if ch.handle == node.handle: return i
        name = node.nodeName if isinstance(node, Node) else repr(node)
        raise NotFoundError(
            f"Node '{name}' is not a child of '{self.nodeName}'.")

    def _checkInsertable(self, newChild:Node) -> None:
        """Keep it a tree: one parent per node, and no cycles.
        """
        if not isinstance(newChild, Node): raise HReqE(
            f"newChild is bad type '{type(newChild).__name__}', must be a Node.")
        if newChild.isDoctype: raise HReqE(
            "Doctype can't be a child; use declareDoctype().")
        if newChild.parentNode is not None: raise HReqE(
            f"newChild already has parent (name '{newChild.parentNode.nodeName}').")
        cur = self
        while cur is not None:
            if cur.handle == newChild.handle: raise HReqE(
                f"Can't insert '{newChild.nodeName}' under itself or a descendant.")
            cur = cur.parentNode

    def _insertAt(self, i:int, newChild:Node) -> Node:
        """All insertions end up here.
        """
        self._checkInsertable(newChild)
        self.childNodes.insert(i, newChild)
        newChild.parentNode = self
        return newChild

    def addChild(self, newChild:Node) -> Node:
        return self._insertAt(len(self.childNodes), newChild)
    appendChild = addChild

    def insertBefore(self, newChild:Node, beforeSibling:Node) -> Node:
        oNum = self._findIndex(beforeSibling)
        return self._insertAt(oNum, newChild)

    def insertAfter(self, newChild:Node, afterSibling:Node) -> Node:
        oNum = self._findIndex(afterSibling)
        return self._insertAt(oNum+1, newChild)

    def removeChild(self, oldChild:Node) -> Node:
        """Detach oldChild. It can be inserted again, here or elsewhere.
        """
        oNum = self._findIndex(oldChild)
        oChild = self.childNodes.pop(oNum)
        oChild.parentNode = None
        return oChild

    def replaceChild(self, existing:Node, replacement:Node) -> Node:
        """Put 'replacement' where 'existing' is, and return 'existing'
        (now detached).
        """
        oNum = self._findIndex(existing)
        if isinstance(replacement, Node) and replacement.handle == existing.handle:
            return existing
        self._checkInsertable(replacement)
        self.childNodes[oNum] = replacement
        replacement.parentNode = self
        existing.parentNode = None
        return existing


    ###########################################################################
    # Declarations
    #
    def declareDoctype(self, name:str=None,
        publicId:str=None, systemId:str=None) -> Doctype:
        """Replace any DOCTYPE on this element. 'name' defaults to the
        element's own name.
        """
        self.doctype = Doctype(name or self.nodeName,
            publicId=publicId, systemId=systemId)
        return self.doctype

    def declareProcessingInstruction(self, target:NMTOKEN_t,
        attrs:Union[Dict, Iterable]=None, **kwattrs) -> ProcessingInstruction:
        """Add a PI as the last child.
        """
        return self.addChild(ProcessingInstruction(target, attrs, **kwattrs))

    def declareGlobalProcessingInstruction(self, target:NMTOKEN_t,
        attrs:Union[Dict, Iterable]=None, **kwattrs) -> ProcessingInstruction:
        """Add a PI to go before the document element. It's only written
        if this element is the root being rendered; otherwise ignored.
        """
        pi = ProcessingInstruction(target, attrs, **kwattrs)
        if self.parentNode is not None:
            lg.debug("Global PI '%s' on non-root '%s' won't be written "
                "unless it's rendered as root.", target, self.nodeName)
        self.globalProcessingInstructions.append(pi)
        return pi


    ###########################################################################
    # Child element selectors (direct children only; non-elements skipped)
    #
    def _childElements(self) -> List['Element']:
        return [ ch for ch in self.childNodes if ch.isElement ]

    def childrenNamed(self, name:NMTOKEN_t) -> List['Element']:
        return [ ch for ch in self._childElements() if ch.nodeName == name ]

    def childrenMatching(self, test:Callable) -> List['Element']:
        return [ ch for ch in self._childElements() if test(ch) ]

    def firstOrNullNamed(self, name:NMTOKEN_t) -> 'Element':
        for ch in self._childElements():
            if ch.nodeName == name: return ch
        return None

    def firstNamed(self, name:NMTOKEN_t) -> 'Element':
        ch = self.firstOrNullNamed(name)
        if ch is None: raise NotFoundError(
            f"No child element '{name}' under '{self.nodeName}'.")
        return ch

    def existsNamed(self, name:NMTOKEN_t) -> bool:
        return self.firstOrNullNamed(name) is not None

    def firstOrNullMatching(self, test:Callable) -> 'Element':
        for ch in self._childElements():
            if test(ch): return ch
        return None

    def firstMatching(self, test:Callable) -> 'Element':
        ch = self.firstOrNullMatching(test)
        if ch is None: raise NotFoundError(
            f"No child element of '{self.nodeName}' passes the test.")
        return ch

    def existsMatching(self, test:Callable) -> bool:
        return self.firstOrNullMatching(test) is not None


    ###########################################################################
    # Shorthand constructors. Each makes a node, appends it, and returns it.
    #
    def element(self, name:NMTOKEN_t, value:Any=None,
        attrs:Union[Dict, Iterable]=None, **kwattrs) -> 'Element':
        """Add a child element, with a text child if 'value' is given.
        Attributes can come from 'attrs' and/or keyword args.
        """
        el = self.addChild(Element(name, attrs))
        if kwattrs: el.setAttributes(**kwattrs)
        if value is not None: el.text(str(value))
        return el

    def text(self, data:str) -> Text:
        return self.addChild(Text(data))

    def cdata(self, data:str) -> CDATA:
        return self.addChild(CDATA(data))

    def comment(self, data:str) -> Comment:
        return self.addChild(Comment(data))

    def attribute(self, attrName:NMTOKEN_t, attrValue:Any) -> None:
        self.setAttribute(attrName, attrValue)


    ###########################################################################
    #
    def isEqualNode(self, n2:Any) -> bool:  # Element
        """Structural: name, encoding, version, attributes (as a map, so
        order doesn't matter), global PIs, and children, recursively.
        DOCTYPE and standalone don't count.
        """
        if n2 is self: return True
        if not isinstance(n2, Element): return False
        return (self.nodeName == n2.nodeName
            and self.encoding == n2.encoding
            and self.version == n2.version
            and self.attributes == n2.attributes
            and self.globalProcessingInstructions == n2.globalProcessingInstructions
            and self.childNodes == n2.childNodes)

    def __hash__(self) -> int:
        return hash((self.nodeName, self.encoding, self.version,
            _hashableAttrs(self.attributes),
            tuple(self.globalProcessingInstructions),
            tuple(self.childNodes)))

    def __repr__(self) -> str:
        return f"<Element '{self.nodeName}' ({len(self.childNodes)} children)>"


###############################################################################
#
def xml(rootName:NMTOKEN_t, encoding:str=None,
    version:Union[XmlVersion, str]=None, namespace:str=None) -> Element:
    """Make a root Element. Passing 'encoding' or 'version' turns on the
    XML declaration.
    """
    root = Element(rootName)
    if encoding is not None: root.encoding = encoding
    if version is not None: root.version = version
    if namespace is not None: root.xmlns = namespace
    return root
