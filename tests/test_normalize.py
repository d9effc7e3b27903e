from ariabrowser.ariatree.nodes import AriaNode
from ariabrowser.ariatree.normalize import (
    normalize_generic_roles,
    normalize_string_children,
    normalize_tree,
)
from ariabrowser.ariatree.visibility import Box


def _node(role: str, *children: AriaNode | str, name: str = "", visible: bool = True) -> AriaNode:
    return AriaNode(role=role, name=name, box=Box(visible=visible), children=list(children))


def test_adjacent_strings_are_merged_and_trimmed() -> None:
    link = _node("link", name="Docs")
    root = _node("paragraph", "  Read ", "the\n", link, "   ", "")

    normalize_string_children(root)

    assert root.children == ["Read the", link]


def test_sole_child_equal_to_name_is_dropped() -> None:
    root = _node("fragment", _node("button", " OK ", name="OK"))

    normalize_string_children(root)

    button = root.children[0]
    assert isinstance(button, AriaNode)
    assert button.children == []


def test_generic_wrapper_around_reachable_node_is_removed() -> None:
    button = _node("button", name="Save")
    root = _node("fragment", _node("generic", _node("generic", button)))

    normalize_generic_roles(root)

    assert root.children == [button]


def test_generic_with_text_or_several_children_is_kept() -> None:
    with_text = _node("generic", "hello")
    with_two = _node("generic", _node("button", name="A"), _node("button", name="B"))
    root = _node("fragment", with_text, with_two)

    normalize_generic_roles(root)

    assert root.children == [with_text, with_two]


def test_generic_around_unreachable_node_is_kept() -> None:
    hidden = _node("button", name="Ghost", visible=False)
    wrapper = _node("generic", hidden)
    root = _node("fragment", wrapper)

    normalize_generic_roles(root)

    assert root.children == [wrapper]


def test_empty_generic_is_removed() -> None:
    root = _node("fragment", _node("generic", " ", ""), _node("heading", name="Title"))

    normalize_tree(root)

    assert [c.role for c in root.children if isinstance(c, AriaNode)] == ["heading"]
