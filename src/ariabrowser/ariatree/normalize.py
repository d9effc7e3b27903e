from ariabrowser.ariatree.nodes import AriaNode
from ariabrowser.ariatree.roles import normalize_whitespace


def normalize_string_children(root: AriaNode) -> None:
    """
    Merge runs of adjacent text children into one whitespace-normalized string, dropping runs
    that normalize to nothing
    """

    def flush(buffer: list[str], normalized: list[AriaNode | str]) -> None:
        if not buffer:
            return
        if text := normalize_whitespace("".join(buffer)):
            normalized.append(text)
        buffer.clear()

    def visit(aria_node: AriaNode) -> None:
        normalized: list[AriaNode | str] = []
        buffer: list[str] = []
        for child in aria_node.children:
            if isinstance(child, str):
                buffer.append(child)
            else:
                flush(buffer, normalized)
                visit(child)
                normalized.append(child)
        flush(buffer, normalized)

        # a button named "OK" whose only text is "OK" renders once
        if len(normalized) == 1 and normalized[0] == aria_node.name:
            normalized = []
        aria_node.children = normalized

    visit(root)


def normalize_generic_roles(root: AriaNode) -> None:
    """
    Replace "generic" wrappers with their content when they hold at most one child and that
    child is a node the user can point at
    """

    def normalize_children(aria_node: AriaNode) -> list[AriaNode | str]:
        result: list[AriaNode | str] = []
        for child in aria_node.children:
            if isinstance(child, str):
                result.append(child)
            else:
                result.extend(normalize_children(child))

        remove_self = (
            aria_node.role == "generic"
            and len(result) <= 1
            and all(not isinstance(c, str) and c.is_pointer_reachable for c in result)
        )
        if remove_self:
            return result
        aria_node.children = result
        return [aria_node]

    normalize_children(root)


def normalize_tree(root: AriaNode) -> None:
    normalize_string_children(root)
    normalize_generic_roles(root)
