import inspect
from collections.abc import Collection
from dataclasses import dataclass
from typing import Any, cast

import pytest

from ariabrowser.ariatree.capture import QUERIED_STYLES
from ariabrowser.browser.cdp.types import (
    DocumentSnapshot,
    DomSnapshot,
    GetDocumentResult,
    Node,
    NodeType,
)


Bounds = tuple[float, float, float, float]


class CDPPageBuilder:
    """Builds matching `DOM.getDocument` and `DOMSnapshot.captureSnapshot` results"""

    def __init__(self) -> None:
        self.strings: list[str] = []
        self.documents: list[DocumentSnapshot] = []
        self._last_id = 0

    def _take_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def _string(self, value: str) -> int:
        if value not in self.strings:
            self.strings.append(value)
        return self.strings.index(value)

    def element(
        self,
        local_name: str,
        *children: Node,
        attributes: dict[str, str] | None = None,
        **extra: Any,
    ) -> Node:
        node_id = self._take_id()
        flat_attributes = [part for item in (attributes or {}).items() for part in item]
        return cast(
            Node,
            {
                "nodeId": node_id,
                "backendNodeId": node_id,
                "nodeType": NodeType.ELEMENT_NODE,
                "nodeName": local_name.upper(),
                "localName": local_name,
                "nodeValue": "",
                "attributes": flat_attributes,
                "children": list(children),
                **extra,
            },
        )

    def text(self, value: str, **extra: Any) -> Node:
        node_id = self._take_id()
        return cast(
            Node,
            {
                "nodeId": node_id,
                "backendNodeId": node_id,
                "nodeType": NodeType.TEXT_NODE,
                "nodeName": "#text",
                "localName": "",
                "nodeValue": value,
                **extra,
            },
        )

    def pseudo(self, pseudo_type: str) -> Node:
        node_id = self._take_id()
        return cast(
            Node,
            {
                "nodeId": node_id,
                "backendNodeId": node_id,
                "nodeType": NodeType.ELEMENT_NODE,
                "nodeName": f"::{pseudo_type}",
                "localName": "",
                "nodeValue": "",
                "pseudoType": pseudo_type,
            },
        )

    def document(self, url: str, html: Node) -> Node:
        node_id = self._take_id()
        return cast(
            Node,
            {
                "nodeId": node_id,
                "backendNodeId": node_id,
                "nodeType": NodeType.DOCUMENT_NODE,
                "nodeName": "#document",
                "localName": "",
                "nodeValue": "",
                "documentURL": url,
                "children": [html],
            },
        )

    def add_snapshot(
        self,
        document: Node,
        layout: dict[int, tuple[dict[str, str], Bounds] | tuple[dict[str, str], Bounds, str]],
        input_values: dict[int, str] | None = None,
        checked: Collection[int] = (),
    ) -> None:
        input_values = input_values or {}
        backend_ids = sorted({*layout, *input_values, *checked})
        index = {backend_id: i for i, backend_id in enumerate(backend_ids)}

        nodes: dict[str, Any] = {"backendNodeId": backend_ids}
        if input_values:
            nodes["inputValue"] = {
                "index": [index[b] for b in input_values],
                "value": [self._string(v) for v in input_values.values()],
            }
        if checked:
            nodes["inputChecked"] = {"index": [index[b] for b in checked]}

        layout_snapshot: dict[str, list[Any]] = {
            "nodeIndex": [],
            "styles": [],
            "bounds": [],
            "text": [],
        }
        for backend_id, (style, bounds, *text) in layout.items():
            layout_snapshot["nodeIndex"].append(index[backend_id])
            layout_snapshot["styles"].append(
                [self._string(style[name]) if name in style else -1 for name in QUERIED_STYLES]
            )
            layout_snapshot["bounds"].append(bounds)
            layout_snapshot["text"].append(self._string(text[0]) if text else -1)

        self.documents.append(
            cast(
                DocumentSnapshot,
                {
                    "documentURL": self._string(document.get("documentURL", "")),
                    "frameId": self._string(""),
                    "nodes": nodes,
                    "layout": layout_snapshot,
                },
            )
        )

    def result(self, root: Node) -> tuple[GetDocumentResult, DomSnapshot]:
        return {"root": root}, {"documents": self.documents, "strings": self.strings}


class FakeCDPSession:
    """Records every `send` and answers from `responses`, which may hold async callables"""

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses: dict[str, Any] = dict(responses or {})
        self.failing: set[str] = set()
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    async def send(self, method: str, params: dict[str, Any] | None = None) -> Any:
        self.calls.append((method, params))
        if method in self.failing:
            raise RuntimeError(f"{method} failed: node is detached")
        response = self.responses.get(method, {})
        if inspect.iscoroutinefunction(response):
            return await response(params)
        return response

    def params_for(self, method: str) -> list[dict[str, Any] | None]:
        return [params for name, params in self.calls if name == method]


@dataclass
class ExamplePage:
    document: GetDocumentResult
    snapshot: DomSnapshot
    body_id: int
    button_id: int
    input_id: int


BLOCK = {"display": "block", "visibility": "visible", "cursor": "auto", "pointer-events": "auto"}


@pytest.fixture
def cdp_page() -> CDPPageBuilder:
    return CDPPageBuilder()


@pytest.fixture
def example_page(cdp_page: CDPPageBuilder) -> ExamplePage:
    """A body holding a "Save" button and a text input containing "hello" """
    label = cdp_page.text("Save")
    button = cdp_page.element("button", label, attributes={"id": "save"})
    text_input = cdp_page.element("input", attributes={"type": "text", "name": "q"})
    body = cdp_page.element("body", button, text_input)
    html = cdp_page.element("html", body)
    root = cdp_page.document("https://shop.example.com/", html)

    cdp_page.add_snapshot(
        root,
        layout={
            html["backendNodeId"]: (BLOCK, (0, 0, 800, 600)),
            body["backendNodeId"]: (BLOCK, (0, 0, 800, 600)),
            button["backendNodeId"]: (
                {**BLOCK, "display": "inline-block", "cursor": "pointer"},
                (10, 10, 80, 30),
            ),
            label["backendNodeId"]: ({}, (12, 15, 30, 12), "Save"),
            text_input["backendNodeId"]: (
                {**BLOCK, "display": "inline-block", "cursor": "text"},
                (10, 50, 200, 24),
            ),
        },
        input_values={text_input["backendNodeId"]: "hello"},
    )
    document, snapshot = cdp_page.result(root)
    return ExamplePage(
        document=document,
        snapshot=snapshot,
        body_id=body["nodeId"],
        button_id=button["nodeId"],
        input_id=text_input["nodeId"],
    )


@pytest.fixture
def cdp_session(example_page: ExamplePage) -> FakeCDPSession:
    return FakeCDPSession(
        {
            "DOM.getDocument": example_page.document,
            "DOMSnapshot.captureSnapshot": example_page.snapshot,
        }
    )
