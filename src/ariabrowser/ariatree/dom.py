from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Union

from ariabrowser.ariatree.shapes import Rect


DomNode = Union["DomElement", "DomText"]


@dataclass(eq=False)
class DomText:
    text: str
    # rendered box of the text run, None when it is not laid out
    bounds: Rect | None = None
    is_slotted: bool = False
    parent: "DomElement | None" = field(default=None, repr=False)


@dataclass(eq=False)
class DomElement:
    """
    A captured DOM element.

    Only the state the aria tree builder needs is kept: attributes, computed styles for the
    queried properties, layout bounds and live form control state. `style` is empty for
    elements without a layout box (display: none / display: contents).
    """

    tag_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    children: list[DomNode] = field(default_factory=list)
    style: dict[str, str] = field(default_factory=dict)
    bounds: Rect | None = None

    # shadow DOM and slotting
    shadow_root: list[DomNode] | None = None
    assigned_nodes: list[DomNode] = field(default_factory=list)
    is_slotted: bool = False

    # same-origin iframe content, None for cross-origin or out-of-process frames
    content_document: "DomDocument | None" = None

    # CSS generated content (::before / ::after), None when the pseudo element is absent
    before_content: str | None = None
    after_content: str | None = None

    # live form control state
    value: str | None = None
    checked: bool | None = None
    indeterminate: bool = False
    selected: bool | None = None

    node_id: int | None = None
    backend_node_id: int | None = None

    parent: "DomElement | None" = field(default=None, repr=False)
    owner_document: "DomDocument | None" = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.tag_name = self.tag_name.upper()
        for child in self.children:
            child.parent = self
        for child in self.shadow_root or []:
            child.parent = self

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    @property
    def input_type(self) -> str:
        return (self.attributes.get("type") or "text").lower()

    def iter_elements(self) -> Iterator["DomElement"]:
        """
        Depth-first iteration over this element and its descendants, including shadow trees
        but not iframe content documents
        """
        yield self
        for child in [*self.children, *(self.shadow_root or [])]:
            if isinstance(child, DomElement):
                yield from child.iter_elements()

    def closest(self, tag_name: str) -> "DomElement | None":
        tag_name = tag_name.upper()
        element: DomElement | None = self
        while element is not None:
            if element.tag_name == tag_name:
                return element
            element = element.parent
        return None

    def contains(self, other: DomNode) -> bool:
        node: DomNode | None = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        for child in self.children:
            if isinstance(child, DomText):
                parts.append(child.text)
            else:
                parts.append(child.text_content)
        return "".join(parts)


@dataclass(eq=False)
class DomDocument:
    url: str
    body: DomElement | None
    document_element: DomElement | None = None
    node_id: int | None = None

    def __post_init__(self) -> None:
        for element in self.iter_elements():
            element.owner_document = self

    def iter_elements(self) -> Iterator[DomElement]:
        root = self.document_element or self.body
        if root is not None:
            yield from root.iter_elements()

    def get_element_by_id(self, element_id: str) -> DomElement | None:
        for element in self.iter_elements():
            if element.attributes.get("id") == element_id:
                return element
        return None

    def query_labels_for(self, element_id: str) -> list[DomElement]:
        return [
            e
            for e in self.iter_elements()
            if e.tag_name == "LABEL" and e.attributes.get("for") == element_id
        ]


def element(tag_name: str, *children: DomNode | str, **kwargs: object) -> DomElement:
    """
    Convenience constructor used by capture code and tests: string children become text nodes
    """
    nodes: list[DomNode] = [DomText(c) if isinstance(c, str) else c for c in children]
    return DomElement(tag_name, children=nodes, **kwargs)  # type: ignore[arg-type]
