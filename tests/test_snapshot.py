from ariabrowser.ariatree.dom import DomDocument, element
from ariabrowser.ariatree.nodes import RefCounter
from ariabrowser.ariatree.shapes import Rect
from ariabrowser.ariatree.snapshot import generate_and_render_aria_tree


def test_single_button_collapses_generic_body() -> None:
    button = element("button", "Save")
    body = element("body", button)

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == '- button "Save" [ref=E1]'
    assert snapshot.refs == {"E1": button}
    assert snapshot.roles == {"E1": "button"}
    assert button.attributes["aria-ref"] == "E1"


def test_nested_structure_renders_indented_with_refs_in_order() -> None:
    body = element(
        "body",
        element("h1", "Title"),
        element("p", "Hello ", element("a", "Docs", attributes={"href": "/docs"})),
    )

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "\n".join(
        [
            "- generic [ref=E1]:",
            '  - heading "Title" [level=1] [ref=E2]',
            "  - paragraph [ref=E3]:",
            "    - text: Hello",
            '    - link "Docs" [ref=E4]:',
            "      - /url: /docs",
        ]
    )


def test_hidden_elements_are_skipped() -> None:
    body = element(
        "body",
        element("button", "Visible"),
        element("button", "Gone", style={"display": "none"}),
        element("script", "var x = 1;", style={"display": "none"}),
    )

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == '- button "Visible" [ref=E1]'


def test_pointer_cursor_is_reported() -> None:
    button = element(
        "button",
        "Go",
        style={"display": "inline-block", "cursor": "pointer"},
        bounds=Rect(x=0, y=0, width=40, height=20),
    )

    snapshot = generate_and_render_aria_tree(element("body", button))

    assert snapshot.text == '- button "Go" [ref=E1] [cursor=pointer]'


def test_elements_without_pointer_events_get_no_ref() -> None:
    button = element(
        "button",
        "Go",
        style={"display": "inline-block", "pointer-events": "none"},
        bounds=Rect(x=0, y=0, width=40, height=20),
    )

    snapshot = generate_and_render_aria_tree(element("body", button))

    assert snapshot.text == '- generic [ref=E1]:\n  - button "Go"'
    assert "aria-ref" not in button.attributes


def test_states_are_rendered() -> None:
    body = element(
        "body",
        element("input", attributes={"type": "checkbox"}, checked=True),
        element("button", "Bold", attributes={"aria-pressed": "true"}),
        element("button", "Off", attributes={"disabled": ""}),
    )

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "\n".join(
        [
            "- generic [ref=E1]:",
            "  - checkbox [checked] [ref=E2]",
            '  - button "Bold" [pressed] [ref=E3]',
            '  - button "Off" [disabled] [ref=E4]',
        ]
    )


def test_names_needing_escape_are_quoted() -> None:
    body = element("body", element("button", "Note: read"))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == """- 'button "Note: read" [ref=E1]'"""


def test_invisible_characters_are_removed_from_names() -> None:
    body = element("body", element("button", "Sa\u200bve\u00ad"))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == '- button "Save" [ref=E1]'


def test_text_input_value_is_exposed() -> None:
    body = element("body", element("input", attributes={"type": "text"}, value="hello"))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "- textbox [ref=E1]: hello"


def test_password_value_is_redacted() -> None:
    body = element("body", element("input", attributes={"type": "password"}, value="hunter2"))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "- textbox [ref=E1]"


def test_sensitive_autocomplete_value_is_redacted() -> None:
    card_input = element(
        "input", attributes={"type": "text", "autocomplete": "cc-number"}, value="4111111111111111"
    )

    snapshot = generate_and_render_aria_tree(element("body", card_input))

    assert "4111" not in snapshot.text
    assert snapshot.text == "- textbox [ref=E1]"


def test_file_and_checkbox_values_are_not_exposed() -> None:
    body = element(
        "body",
        element("input", attributes={"type": "file"}, value="C:\\fakepath\\cv.pdf"),
        element("input", attributes={"type": "checkbox"}, value="subscribe-me"),
    )

    snapshot = generate_and_render_aria_tree(body)

    assert "fakepath" not in snapshot.text
    assert "subscribe-me" not in snapshot.text
    assert '- button "Choose File" [ref=E2]' in snapshot.text


def test_refs_are_unique_across_same_origin_iframes() -> None:
    inner_button = element("button", "Inner")
    frame_document = DomDocument(
        url="https://example.com/frame", body=element("body", inner_button)
    )
    outer_button = element("button", "Top")
    body = element("body", outer_button, element("iframe", content_document=frame_document))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "\n".join(
        [
            "- generic [ref=E1]:",
            '  - button "Top" [ref=E2]',
            '  - button "Inner" [ref=E3]',
        ]
    )
    assert snapshot.refs["E2"] is outer_button
    assert snapshot.refs["E3"] is inner_button
    assert inner_button.attributes["aria-ref"] == "E3"


def test_cross_origin_iframe_is_a_placeholder() -> None:
    frame = element("iframe", attributes={"src": "https://ads.example.net/"})
    body = element("body", element("button", "Top"), frame)

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == '- generic [ref=E1]:\n  - button "Top" [ref=E2]\n  - iframe'
    assert list(snapshot.refs) == ["E1", "E2"]
    assert "aria-ref" not in frame.attributes


def test_iframes_beyond_max_depth_are_skipped() -> None:
    frame_document = DomDocument(
        url="https://example.com/frame", body=element("body", element("button", "Inner"))
    )
    body = element(
        "body", element("button", "Top"), element("iframe", content_document=frame_document)
    )

    snapshot = generate_and_render_aria_tree(body, max_iframe_depth=0)

    assert snapshot.text == '- button "Top" [ref=E1]'


def test_markers_are_rewritten_on_every_snapshot() -> None:
    save = element("button", "Save")
    cancel = element("button", "Cancel")
    body = element("body", save, cancel)

    first = generate_and_render_aria_tree(body)
    assert first.text == (
        '- generic [ref=E1]:\n  - button "Save" [ref=E2]\n  - button "Cancel" [ref=E3]'
    )

    cancel.style = {"display": "none"}
    second = generate_and_render_aria_tree(body)

    assert second.text == '- button "Save" [ref=E1]'
    assert save.attributes["aria-ref"] == "E1"
    assert "aria-ref" not in cancel.attributes
    assert "aria-ref" not in body.attributes
    assert cancel in second.stale_elements
    assert save not in second.stale_elements


def test_markers_are_cleared_inside_frames_that_are_no_longer_walked() -> None:
    inner = element("button", "Inner")
    frame = element(
        "iframe",
        content_document=DomDocument(url="https://example.com/frame", body=element("body", inner)),
    )
    body = element("body", element("button", "A"), element("button", "C"), frame)

    first = generate_and_render_aria_tree(body)
    assert first.refs["E4"] is inner

    frame.style = {"display": "none"}
    added = element("button", "D")
    added.parent = body
    body.children.insert(2, added)
    second = generate_and_render_aria_tree(body)

    assert second.refs["E4"] is added
    assert "aria-ref" not in inner.attributes
    assert second.stale_elements == [inner]
    holders = [e for e in [*body.iter_elements(), inner] if e.attributes.get("aria-ref") == "E4"]
    assert holders == [added]


def test_markers_are_cleared_inside_frames_beyond_max_depth() -> None:
    inner = element("button", "Inner")
    frame = element(
        "iframe",
        content_document=DomDocument(url="https://example.com/frame", body=element("body", inner)),
    )
    body = element("body", element("button", "Top"), frame)

    generate_and_render_aria_tree(body)
    assert inner.attributes["aria-ref"] == "E3"

    snapshot = generate_and_render_aria_tree(body, max_iframe_depth=0)

    assert snapshot.text == '- button "Top" [ref=E1]'
    assert "aria-ref" not in inner.attributes
    assert inner in snapshot.stale_elements


def test_snapshot_is_idempotent_on_an_unchanged_tree() -> None:
    body = element(
        "body", element("button", "Save"), element("a", "Home", attributes={"href": "/"})
    )

    first = generate_and_render_aria_tree(body)
    second = generate_and_render_aria_tree(body)

    assert first.text == second.text
    assert second.stale_elements == []


def test_shared_counter_continues_numbering() -> None:
    counter = RefCounter()

    generate_and_render_aria_tree(element("body", element("button", "One")), counter)
    snapshot = generate_and_render_aria_tree(element("body", element("button", "Two")), counter)

    assert snapshot.text == '- button "Two" [ref=E2]'
    assert counter.value == 2


def test_custom_marker_attribute() -> None:
    button = element("button", "Save")

    snapshot = generate_and_render_aria_tree(element("body", button), marker_attribute="data-ref")

    assert button.attributes == {"data-ref": "E1"}
    assert snapshot.marker_attribute == "data-ref"


def test_long_names_are_truncated() -> None:
    snapshot = generate_and_render_aria_tree(
        element("body", element("button", "x" * 50)), max_name_length=10
    )

    assert snapshot.text == '- button "xxxxxxxxxx..." [ref=E1]'


def test_aria_owns_pulls_in_owned_elements() -> None:
    owned = element("li", "Owned", attributes={"id": "extra"})
    menu = element("ul", element("li", "First"), attributes={"aria-owns": "extra"})
    body = element("body", menu, element("div", owned))
    DomDocument(url="https://example.com/", body=body, document_element=element("html", body))

    snapshot = generate_and_render_aria_tree(body)

    assert snapshot.text == "\n".join(
        [
            "- list [ref=E1]:",
            "  - listitem [ref=E2]: First",
            "  - listitem [ref=E3]: Owned",
        ]
    )
