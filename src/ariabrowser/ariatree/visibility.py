from pydantic import BaseModel

from ariabrowser.ariatree.dom import DomElement, DomText
from ariabrowser.ariatree.shapes import Rect


class Box(BaseModel):
    visible: bool
    rect: Rect | None = None
    style: dict[str, str] | None = None

    @property
    def cursor(self) -> str | None:
        return self.style.get("cursor") if self.style else None


def is_style_visibility_visible(element: DomElement, style: dict[str, str] | None = None) -> bool:
    style = element.style if style is None else style
    if not style:
        return True
    if style.get("display") == "none":
        return False
    # content of a closed <details> is not rendered, except for its summary
    details = element.closest("details")
    if details is not None and details is not element and "open" not in details.attributes:
        summary = element.closest("summary")
        if summary is None or summary.parent is not details:
            return False
    return style.get("visibility", "visible") == "visible"


def box(element: DomElement) -> Box:
    """
    Visibility snapshot of an element: visible when it has a non-empty layout box and its
    computed visibility allows painting.
    """
    style = element.style
    if not style:
        return Box(visible=True)

    if style.get("display") == "contents":
        for child in element.children:
            if isinstance(child, DomElement) and is_element_visible(child):
                return Box(visible=True, style=style)
            if isinstance(child, DomText) and is_visible_text_node(child):
                return Box(visible=True, style=style)
        return Box(visible=False, style=style)

    if not is_style_visibility_visible(element, style):
        return Box(visible=False, style=style)

    rect = element.bounds
    return Box(visible=rect is not None and not rect.is_empty, rect=rect, style=style)


def is_element_visible(element: DomElement) -> bool:
    return box(element).visible


def is_visible_text_node(node: DomText) -> bool:
    # text runs captured without layout information are assumed to be painted
    return node.bounds is None or not node.bounds.is_empty
