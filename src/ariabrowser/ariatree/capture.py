# pyright: reportTypedDictNotRequiredAccess=false

"""
Capture of the live DOM into `DomDocument` trees over the Chrome DevTools Protocol.

Structure (including open shadow roots, slots and same-process iframe documents) comes from
`DOM.getDocument`; computed styles, layout bounds and live form state come from
`DOMSnapshot.captureSnapshot`. The two are joined on `backendNodeId`.
"""

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, cast
from urllib.parse import urlsplit

from playwright.async_api import CDPSession

from ariabrowser.ariatree.dom import DomDocument, DomElement, DomNode, DomText
from ariabrowser.ariatree.shapes import Rect
from ariabrowser.ariatree.snapshot import AriaSnapshot
from ariabrowser.browser.cdp.types import (
    DocumentSnapshot,
    DomSnapshot,
    GetDocumentResult,
    Node,
    NodeType,
)


logger = logging.getLogger(__name__)

# CSS properties requested in DOMSnapshot: visibility probing, pointer reachability, and the
# border/padding offsets needed to place iframe content in root document coordinates
QUERIED_STYLES = [
    "display",
    "visibility",
    "cursor",
    "pointer-events",
    "border-left-width",
    "border-top-width",
    "padding-left",
    "padding-top",
]

# no layout object and no rendered descendants
_NOT_RENDERED = {"display": "none"}
# no layout object of its own, but rendered content
_CONTENTS_ONLY = {"display": "contents"}
_EMPTY_RECT = Rect(x=0, y=0, width=0, height=0)


@dataclass
class _LayoutInfo:
    style: dict[str, str]
    bounds: Rect
    text: str = ""


@dataclass
class _SnapshotIndex:
    """DOMSnapshot data keyed by backend node id, across every captured document"""

    layout: dict[int, _LayoutInfo] = field(default_factory=dict)
    input_values: dict[int, str] = field(default_factory=dict)
    checked: set[int] = field(default_factory=set)
    selected: set[int] = field(default_factory=set)

    @classmethod
    def from_snapshot(cls, snapshot: DomSnapshot) -> "_SnapshotIndex":
        index = cls()
        strings = snapshot["strings"]
        for document in snapshot["documents"]:
            index._add_document(document, strings)
        return index

    def _add_document(self, document: DocumentSnapshot, strings: list[str]) -> None:
        nodes = document["nodes"]
        backend_ids = nodes.get("backendNodeId", [])

        layout = document["layout"]
        for layout_idx, node_idx in enumerate(layout["nodeIndex"]):
            backend_id = backend_ids[node_idx]
            text_idx = layout["text"][layout_idx] if layout_idx < len(layout["text"]) else -1
            text = strings[text_idx] if text_idx >= 0 else ""
            if (info := self.layout.get(backend_id)) is not None:
                # an element split into several layout objects, e.g. generated content
                info.text += text
                continue
            style = {
                name: strings[s_idx]
                for name, s_idx in zip(QUERIED_STYLES, layout["styles"][layout_idx])
                if s_idx >= 0
            }
            self.layout[backend_id] = _LayoutInfo(
                style=style, bounds=Rect.from_cdp(layout["bounds"][layout_idx]), text=text
            )

        for key in ("textValue", "inputValue"):
            if (values := nodes.get(key)) is not None:
                for node_idx, s_idx in zip(values["index"], values["value"]):
                    if s_idx >= 0:
                        self.input_values[backend_ids[node_idx]] = strings[s_idx]
        if (checked := nodes.get("inputChecked")) is not None:
            self.checked.update(backend_ids[i] for i in checked["index"])
        if (selected := nodes.get("optionSelected")) is not None:
            self.selected.update(backend_ids[i] for i in selected["index"])


def _origin(url: str) -> tuple[str, str] | None:
    parts = urlsplit(url)
    if parts.scheme in ("about", "data", "blob", "javascript") or not parts.scheme:
        return None
    return parts.scheme, parts.netloc


def _is_same_origin(parent_url: str, frame_url: str) -> bool:
    frame_origin = _origin(frame_url)
    # about:blank and about:srcdoc frames inherit their embedder's origin
    if frame_origin is None:
        return frame_url.startswith("about:")
    return frame_origin == _origin(parent_url)


def _px(value: str | None) -> float:
    try:
        return float((value or "0").removesuffix("px"))
    except ValueError:
        return 0


class _DocumentConverter:
    def __init__(self, index: _SnapshotIndex) -> None:
        self._index = index
        self._by_backend_id: dict[int, DomNode] = {}
        self._slots: list[tuple[DomElement, list[int]]] = []

    def convert(self, document_node: Node, offset: tuple[float, float] = (0, 0)) -> DomDocument:
        url = document_node.get("documentURL", "")
        document_element: DomElement | None = None
        for child in document_node.get("children", []):
            if child["nodeType"] == NodeType.ELEMENT_NODE:
                converted = self._convert_node(child, url, offset)
                if isinstance(converted, DomElement):
                    document_element = converted
                    break

        body = None
        if document_element is not None:
            body = next(
                (
                    c
                    for c in document_element.children
                    if isinstance(c, DomElement) and c.tag_name in ("BODY", "FRAMESET")
                ),
                None,
            )
        return DomDocument(
            url=url,
            body=body,
            document_element=document_element,
            node_id=document_node.get("nodeId"),
        )

    def resolve_slots(self) -> None:
        for slot, backend_ids in self._slots:
            slot.assigned_nodes = [
                self._by_backend_id[b] for b in backend_ids if b in self._by_backend_id
            ]

    def _convert_node(
        self, node: Node, document_url: str, offset: tuple[float, float]
    ) -> DomNode | None:
        node_type = node["nodeType"]
        backend_id = node["backendNodeId"]
        layout = self._index.layout.get(backend_id)

        if node_type == NodeType.TEXT_NODE:
            text = DomText(
                text=node.get("nodeValue", ""),
                bounds=layout.bounds.translate(*offset) if layout else _EMPTY_RECT,
                is_slotted="assignedSlot" in node,
            )
            self._by_backend_id[backend_id] = text
            return text
        if node_type != NodeType.ELEMENT_NODE:
            return None

        raw_attributes = node.get("attributes", [])
        attributes = dict(zip(raw_attributes[::2], raw_attributes[1::2]))

        children = [
            converted
            for child in node.get("children", [])
            if (converted := self._convert_node(child, document_url, offset)) is not None
        ]

        shadow_root: list[DomNode] | None = None
        for root in node.get("shadowRoots", []):
            # user-agent shadow trees (form control internals) are not part of the page content
            if root.get("shadowRootType") != "open":
                continue
            shadow_root = [
                converted
                for child in root.get("children", [])
                if (converted := self._convert_node(child, document_url, offset)) is not None
            ]

        if layout is not None:
            style = layout.style
        elif any(
            (isinstance(c, DomElement) and c.style.get("display") != "none")
            or (isinstance(c, DomText) and c.bounds is not None and not c.bounds.is_empty)
            for c in [*children, *(shadow_root or [])]
        ):
            style = dict(_CONTENTS_ONLY)
        else:
            style = dict(_NOT_RENDERED)

        tag_name = node.get("localName") or node["nodeName"]
        element = DomElement(
            tag_name,
            attributes=attributes,
            children=children,
            style=style,
            bounds=layout.bounds.translate(*offset) if layout else None,
            shadow_root=shadow_root,
            is_slotted="assignedSlot" in node,
            value=self._index.input_values.get(backend_id),
            node_id=node.get("nodeId"),
            backend_node_id=backend_id,
        )
        element.before_content, element.after_content = self._pseudo_content(node)

        if element.tag_name in ("INPUT", "OPTION"):
            if element.tag_name == "INPUT" and element.input_type in ("checkbox", "radio"):
                element.checked = backend_id in self._index.checked
            if element.tag_name == "OPTION":
                element.selected = backend_id in self._index.selected

        if element.tag_name == "SLOT" and (distributed := node.get("distributedNodes")):
            self._slots.append((element, [n["backendNodeId"] for n in distributed]))

        if element.tag_name == "IFRAME" and (content := node.get("contentDocument")) is not None:
            frame_url = content.get("documentURL", "")
            if _is_same_origin(document_url, frame_url):
                # frames without a layout box are kept too, their markers must still be cleared
                frame_bounds = element.bounds or _EMPTY_RECT.translate(*offset)
                frame_offset = (
                    frame_bounds.x
                    + _px(style.get("border-left-width"))
                    + _px(style.get("padding-left")),
                    frame_bounds.y
                    + _px(style.get("border-top-width"))
                    + _px(style.get("padding-top")),
                )
                element.content_document = self.convert(content, frame_offset)
            else:
                logger.debug("Not walking into cross-origin frame %s", frame_url)

        self._by_backend_id[backend_id] = element
        return element

    def _pseudo_content(self, node: Node) -> tuple[str | None, str | None]:
        before: str | None = None
        after: str | None = None
        for pseudo in node.get("pseudoElements", []):
            pseudo_type = pseudo.get("pseudoType")
            if pseudo_type not in ("before", "after"):
                continue
            layout = self._index.layout.get(pseudo["backendNodeId"])
            if layout is None or not layout.text:
                continue
            content = layout.text
            if layout.style.get("display", "inline") != "inline":
                content = f" {content} "
            if pseudo_type == "before":
                before = content
            else:
                after = content
        return before, after


def build_document(document: GetDocumentResult, snapshot: DomSnapshot) -> DomDocument:
    """Join a `DOM.getDocument` tree with a `DOMSnapshot.captureSnapshot` result"""
    converter = _DocumentConverter(_SnapshotIndex.from_snapshot(snapshot))
    dom_document = converter.convert(document["root"])
    converter.resolve_slots()
    return dom_document


async def capture_document(cdp_session: CDPSession) -> DomDocument:
    document = cast(
        GetDocumentResult,
        await cdp_session.send("DOM.getDocument", {"depth": -1, "pierce": True}),
    )
    snapshot = cast(
        DomSnapshot,
        await cdp_session.send(
            "DOMSnapshot.captureSnapshot",
            {"computedStyles": QUERIED_STYLES, "includeDOMRects": True},
        ),
    )
    return build_document(document, snapshot)


async def sync_markers(cdp_session: CDPSession, snapshot: AriaSnapshot) -> None:
    """
    Commit the marker attributes of `snapshot` to the live page: stale markers from an earlier
    snapshot are removed, and every issued ref is written onto its element
    """
    marker = snapshot.marker_attribute
    removals = [
        cdp_session.send("DOM.removeAttribute", {"nodeId": e.node_id, "name": marker})
        for e in snapshot.stale_elements
        if e.node_id is not None
    ]
    await _gather_logged(removals, "remove stale marker")

    writes = [
        cdp_session.send(
            "DOM.setAttributeValue", {"nodeId": e.node_id, "name": marker, "value": ref}
        )
        for ref, e in snapshot.refs.items()
        if e.node_id is not None
    ]
    await _gather_logged(writes, "write marker")


async def _gather_logged(tasks: list[Awaitable[Any]], what: str) -> None:
    results = await asyncio.gather(*tasks, return_exceptions=True)
    # nodes detached since the capture can't be marked; resolving their ref fails later
    for result in results:
        if isinstance(result, Exception):
            logger.warning("Failed to %s: %s", what, result)
