from enum import IntEnum
from typing import Literal, NewType, NotRequired, TypedDict


StringIndex = NewType("StringIndex", int)


class NodeType(IntEnum):
    # enum values used by CDP, from the DOM standard
    # https://dom.spec.whatwg.org/#ref-for-dom-node-nodetype%E2%91%A0
    ELEMENT_NODE = 1
    ATTRIBUTE_NODE = 2
    TEXT_NODE = 3
    CDATA_SECTION_NODE = 4
    PROCESSING_INSTRUCTION_NODE = 7
    COMMENT_NODE = 8
    DOCUMENT_NODE = 9
    DOCUMENT_TYPE_NODE = 10
    DOCUMENT_FRAGMENT_NODE = 11


# --- DOM domain ---


class BackendNode(TypedDict):
    nodeType: int
    nodeName: str
    backendNodeId: int


class Node(TypedDict):
    """A node as returned by `DOM.getDocument` / `DOM.describeNode`"""

    nodeId: int
    backendNodeId: int
    nodeType: int
    nodeName: str
    localName: str
    nodeValue: str
    parentId: NotRequired[int]
    childNodeCount: NotRequired[int]
    children: NotRequired[list["Node"]]
    attributes: NotRequired[list[str]]
    documentURL: NotRequired[str]
    frameId: NotRequired[str]
    contentDocument: NotRequired["Node"]
    shadowRoots: NotRequired[list["Node"]]
    shadowRootType: NotRequired[Literal["user-agent", "open", "closed"]]
    pseudoElements: NotRequired[list["Node"]]
    pseudoType: NotRequired[str]
    distributedNodes: NotRequired[list[BackendNode]]
    assignedSlot: NotRequired[BackendNode]


class GetDocumentResult(TypedDict):
    root: Node


# --- DOMSnapshot domain ---


class RareBooleanData(TypedDict):
    index: list[int]


class RareIntegerData(TypedDict):
    index: list[int]
    value: list[int]


class RareStringData(TypedDict):
    index: list[int]
    value: list[StringIndex]


class NodeTreeSnapshot(TypedDict):
    parentIndex: NotRequired[list[int]]
    nodeType: NotRequired[list[int]]
    nodeName: NotRequired[list[StringIndex]]
    nodeValue: NotRequired[list[StringIndex]]
    shadowRootType: NotRequired[RareStringData]
    textValue: NotRequired[RareStringData]
    inputValue: NotRequired[RareStringData]
    inputChecked: NotRequired[RareBooleanData]
    optionSelected: NotRequired[RareBooleanData]
    backendNodeId: NotRequired[list[int]]
    contentDocumentIndex: NotRequired[RareIntegerData]
    pseudoType: NotRequired[RareStringData]
    attributes: NotRequired[list[list[StringIndex]]]
    isClickable: NotRequired[RareBooleanData]


class LayoutTreeSnapshot(TypedDict):
    nodeIndex: list[int]
    styles: list[list[StringIndex]]
    bounds: list[tuple[float, float, float, float]]
    text: list[StringIndex]
    offsetRects: NotRequired[list[tuple[float, float, float, float]]]
    scrollRects: NotRequired[list[tuple[float, float, float, float]]]
    clientRects: NotRequired[list[tuple[float, float, float, float]]]


class DocumentSnapshot(TypedDict):
    documentURL: StringIndex
    frameId: StringIndex
    nodes: NodeTreeSnapshot
    layout: LayoutTreeSnapshot
    contentWidth: NotRequired[int]
    contentHeight: NotRequired[int]


class DomSnapshot(TypedDict):
    documents: list[DocumentSnapshot]
    strings: list[str]
