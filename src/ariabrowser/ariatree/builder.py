import logging

from ariabrowser.ariatree.dom import DomElement, DomNode, DomText
from ariabrowser.ariatree.nodes import AriaNode
from ariabrowser.ariatree.roles import (
    ARIA_CHECKED_ROLES,
    ARIA_DISABLED_ROLES,
    ARIA_EXPANDED_ROLES,
    ARIA_LEVEL_ROLES,
    ARIA_PRESSED_ROLES,
    ARIA_SELECTED_ROLES,
    RoleResolver,
    normalize_whitespace,
)
from ariabrowser.ariatree.visibility import box, is_element_visible


logger = logging.getLogger(__name__)

DEFAULT_MARKER_ATTRIBUTE = "aria-ref"
MAX_IFRAME_DEPTH = 5

# input types whose live value never becomes snapshot text
_VALUELESS_INPUT_TYPES = frozenset({"password", "checkbox", "radio", "file"})
_SENSITIVE_AUTOCOMPLETE = frozenset(
    {
        "cc-number",
        "cc-name",
        "cc-csc",
        "cc-exp",
        "cc-exp-month",
        "cc-exp-year",
        "cc-type",
        "new-password",
        "current-password",
        "one-time-code",
    }
)


def strip_markers(root: DomElement, marker_attribute: str) -> list[DomElement]:
    """
    Remove markers left by a previous snapshot, returning the elements that carried one.

    Same-origin frame documents are always cleared, whether or not the next build walks into
    them: a hidden or too deeply nested frame keeps no refs.
    """
    stripped = []
    for element in root.iter_elements():
        if element.attributes.pop(marker_attribute, None) is not None:
            stripped.append(element)
        document = element.content_document
        if document is not None and document.body is not None:
            stripped.extend(strip_markers(document.body, marker_attribute))
    return stripped


def exposes_value(element: DomElement) -> bool:
    if element.tag_name not in ("INPUT", "TEXTAREA"):
        return False
    if element.tag_name == "INPUT" and element.input_type in _VALUELESS_INPUT_TYPES:
        return False
    return (element.get_attribute("autocomplete") or "") not in _SENSITIVE_AUTOCOMPLETE


class AriaTreeBuilder:
    """
    Walks a captured DOM subtree and builds the (not yet normalized) accessibility tree.

    Same-origin iframe documents are walked inline and their top-level nodes merged into the
    node holding the iframe.
    """

    def __init__(
        self,
        resolver: RoleResolver,
        *,
        max_iframe_depth: int = MAX_IFRAME_DEPTH,
    ) -> None:
        self._resolver = resolver
        self._max_iframe_depth = max_iframe_depth

    def build(self, root: DomElement, iframe_depth: int = 0) -> AriaNode:
        visited: set[int] = set()
        fragment = AriaNode(
            role="fragment", element=root, box=box(root), receives_pointer_events=True
        )

        def visit(aria_node: AriaNode, node: DomNode) -> None:
            if id(node) in visited:
                return
            visited.add(id(node))

            if isinstance(node, DomText):
                if aria_node.role != "textbox" and node.text:
                    aria_node.children.append(node.text)
                return

            element = node
            if self._resolver.is_hidden_for_aria(element) and not is_element_visible(element):
                return

            owned: list[DomElement] = []
            if (aria_owns := element.get_attribute("aria-owns")) and root.owner_document:
                for element_id in aria_owns.split():
                    if (found := root.owner_document.get_element_by_id(element_id)) is not None:
                        owned.append(found)

            if element.tag_name == "IFRAME":
                self._visit_iframe(aria_node, element, iframe_depth)
                return

            child_node = self._to_aria_node(element)
            if child_node is not None:
                aria_node.children.append(child_node)
            process_element(child_node or aria_node, element, owned)

        def process_element(
            aria_node: AriaNode, element: DomElement, owned: list[DomElement]
        ) -> None:
            display = element.style.get("display", "inline")
            treat_as_block = display != "inline" or element.tag_name == "BR"
            if treat_as_block:
                aria_node.children.append(" ")

            aria_node.children.append(element.before_content or "")
            if element.tag_name == "SLOT" and element.assigned_nodes:
                for child in element.assigned_nodes:
                    visit(aria_node, child)
            else:
                for child in element.children:
                    if not child.is_slotted:
                        visit(aria_node, child)
                for child in element.shadow_root or []:
                    visit(aria_node, child)

            for child in owned:
                visit(aria_node, child)

            aria_node.children.append(element.after_content or "")
            if treat_as_block:
                aria_node.children.append(" ")

            if len(aria_node.children) == 1 and aria_node.children[0] == aria_node.name:
                aria_node.children = []

            if aria_node.role == "link" and (href := element.get_attribute("href")) is not None:
                aria_node.props["url"] = href

        with self._resolver.caches():
            visit(fragment, root)
        return fragment

    def _visit_iframe(self, aria_node: AriaNode, element: DomElement, iframe_depth: int) -> None:
        if iframe_depth >= self._max_iframe_depth:
            logger.debug("Skipping iframe nested deeper than %d frames", self._max_iframe_depth)
            return

        document = element.content_document
        if document is not None and document.body is not None:
            frame_tree = self.build(document.body, iframe_depth + 1)
            aria_node.children.extend(frame_tree.children)
            return

        # cross-origin or out-of-process frame, we can only show that it is there
        aria_node.children.append(
            AriaNode(role="iframe", element=element, box=box(element), receives_pointer_events=True)
        )

    def _to_aria_node(self, element: DomElement) -> AriaNode | None:
        resolver = self._resolver
        role = resolver.get_role(element) or "generic"
        if role in ("presentation", "none"):
            return None

        node = AriaNode(
            role=role,
            name=normalize_whitespace(resolver.get_accessible_name(element)),
            element=element,
            box=box(element),
            receives_pointer_events=resolver.receives_pointer_events(element),
        )

        if role in ARIA_CHECKED_ROLES:
            node.checked = resolver.get_checked(element)
        if role in ARIA_DISABLED_ROLES:
            node.disabled = resolver.get_disabled(element)
        if role in ARIA_EXPANDED_ROLES:
            node.expanded = resolver.get_expanded(element)
        if role in ARIA_LEVEL_ROLES:
            node.level = resolver.get_level(element)
        if role in ARIA_PRESSED_ROLES:
            node.pressed = resolver.get_pressed(element)
        if role in ARIA_SELECTED_ROLES:
            node.selected = resolver.get_selected(element)

        if exposes_value(element):
            node.children = [element.value or ""]

        return node
