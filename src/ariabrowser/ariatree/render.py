from ariabrowser.ariatree.dom import DomElement
from ariabrowser.ariatree.nodes import AriaNode, RefCounter
from ariabrowser.ariatree.yaml_escape import (
    quote_name,
    yaml_escape_key_if_needed,
    yaml_escape_value_if_needed,
)


MAX_NAME_LENGTH = 900


class AriaTreeRenderer:
    """
    Serializes a normalized tree to the indented snapshot text.

    Refs are handed out here, in render order, to every node that is visible and receives
    pointer events. Each allocation writes the marker attribute onto the node's element and is
    recorded in `refs` / `roles`.
    """

    def __init__(
        self,
        counter: RefCounter,
        *,
        marker_attribute: str,
        max_name_length: int = MAX_NAME_LENGTH,
    ) -> None:
        self._counter = counter
        self._marker_attribute = marker_attribute
        self._max_name_length = max_name_length
        self.refs: dict[str, DomElement] = {}
        self.roles: dict[str, str] = {}

    def _key(self, aria_node: AriaNode) -> str:
        key = aria_node.role
        if aria_node.name:
            key += " " + quote_name(aria_node.name, self._max_name_length)
        if aria_node.checked == "mixed":
            key += " [checked=mixed]"
        if aria_node.checked is True:
            key += " [checked]"
        if aria_node.disabled:
            key += " [disabled]"
        if aria_node.expanded:
            key += " [expanded]"
        if aria_node.level:
            key += f" [level={aria_node.level}]"
        if aria_node.pressed == "mixed":
            key += " [pressed=mixed]"
        if aria_node.pressed is True:
            key += " [pressed]"
        if aria_node.selected is True:
            key += " [selected]"

        # placeholders for frames we could not walk into are shown without a ref
        if aria_node.role != "iframe" and aria_node.is_pointer_reachable:
            aria_node.ref = self._counter.next_ref()
            key += f" [ref={aria_node.ref}]"
            if aria_node.has_pointer_cursor:
                key += " [cursor=pointer]"
            if aria_node.element is not None:
                aria_node.element.attributes[self._marker_attribute] = aria_node.ref
                self.refs[aria_node.ref] = aria_node.element
                self.roles[aria_node.ref] = aria_node.role
        return key

    def render(self, root: AriaNode) -> str:
        lines: list[str] = []

        def visit(aria_node: AriaNode | str, indent: str) -> None:
            if isinstance(aria_node, str):
                if text := yaml_escape_value_if_needed(aria_node):
                    lines.append(f"{indent}- text: {text}")
                return

            escaped_key = indent + "- " + yaml_escape_key_if_needed(self._key(aria_node))
            children = aria_node.children
            if not children and not aria_node.props:
                lines.append(escaped_key)
            elif len(children) == 1 and isinstance(children[0], str) and not aria_node.props:
                if children[0]:
                    lines.append(f"{escaped_key}: {yaml_escape_value_if_needed(children[0])}")
                else:
                    lines.append(escaped_key)
            else:
                lines.append(escaped_key + ":")
                for name, value in aria_node.props.items():
                    lines.append(f"{indent}  - /{name}: {yaml_escape_value_if_needed(value)}")
                for child in children:
                    visit(child, indent + "  ")

        if root.role == "fragment":
            for child in root.children:
                visit(child, "")
        else:
            visit(root, "")
        return "\n".join(lines)
