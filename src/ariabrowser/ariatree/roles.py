"""
Computed ARIA role, accessible name and state lookups for captured DOM elements.

This follows the WAI-ARIA / HTML-AAM mapping closely enough for snapshots: implicit roles by
tag name, presentational role inheritance and conflict resolution, the accessible name
computation (labelledby, aria-label, native labels, name from content, title/placeholder)
and the state attributes rendered next to each node.
"""

import re
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, replace
from typing import Literal, Protocol

from ariabrowser.ariatree.dom import DomElement, DomNode, DomText
from ariabrowser.ariatree.nodes import Checked
from ariabrowser.ariatree.visibility import is_style_visibility_visible, is_visible_text_node


VALID_ROLES = frozenset(
    {
        "alert",
        "alertdialog",
        "application",
        "article",
        "banner",
        "blockquote",
        "button",
        "caption",
        "cell",
        "checkbox",
        "code",
        "columnheader",
        "combobox",
        "complementary",
        "contentinfo",
        "definition",
        "deletion",
        "dialog",
        "directory",
        "document",
        "emphasis",
        "feed",
        "figure",
        "form",
        "generic",
        "grid",
        "gridcell",
        "group",
        "heading",
        "img",
        "insertion",
        "link",
        "list",
        "listbox",
        "listitem",
        "log",
        "main",
        "mark",
        "marquee",
        "math",
        "meter",
        "menu",
        "menubar",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "navigation",
        "none",
        "note",
        "option",
        "paragraph",
        "presentation",
        "progressbar",
        "radio",
        "radiogroup",
        "region",
        "row",
        "rowgroup",
        "rowheader",
        "scrollbar",
        "search",
        "searchbox",
        "separator",
        "slider",
        "spinbutton",
        "status",
        "strong",
        "subscript",
        "superscript",
        "switch",
        "tab",
        "table",
        "tablist",
        "tabpanel",
        "term",
        "textbox",
        "time",
        "timer",
        "toolbar",
        "tooltip",
        "tree",
        "treegrid",
        "treeitem",
    }
)

# Roles whose state is rendered in the snapshot
ARIA_CHECKED_ROLES = frozenset(
    {"checkbox", "menuitemcheckbox", "option", "radio", "switch", "menuitemradio", "treeitem"}
)
ARIA_DISABLED_ROLES = frozenset(
    {
        "application",
        "button",
        "composite",
        "gridcell",
        "group",
        "input",
        "link",
        "menuitem",
        "scrollbar",
        "separator",
        "tab",
        "checkbox",
        "columnheader",
        "combobox",
        "grid",
        "listbox",
        "menu",
        "menubar",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "radio",
        "radiogroup",
        "row",
        "rowheader",
        "searchbox",
        "select",
        "slider",
        "spinbutton",
        "switch",
        "tablist",
        "textbox",
        "toolbar",
        "tree",
        "treegrid",
        "treeitem",
    }
)
ARIA_EXPANDED_ROLES = frozenset(
    {
        "application",
        "button",
        "checkbox",
        "combobox",
        "gridcell",
        "link",
        "listbox",
        "menuitem",
        "row",
        "rowheader",
        "tab",
        "treeitem",
        "columnheader",
        "menuitemcheckbox",
        "menuitemradio",
        "switch",
    }
)
ARIA_LEVEL_ROLES = frozenset({"heading", "listitem", "row", "treeitem"})
ARIA_PRESSED_ROLES = frozenset({"button"})
ARIA_SELECTED_ROLES = frozenset(
    {"gridcell", "option", "row", "tab", "rowheader", "columnheader", "treeitem"}
)

_IGNORED_TAGS = frozenset({"STYLE", "SCRIPT", "NOSCRIPT", "TEMPLATE"})
_NATIVE_FORM_CONTROLS = frozenset({"BUTTON", "INPUT", "SELECT", "TEXTAREA", "OPTION", "OPTGROUP"})
_LANDMARK_BLOCKING_TAGS = frozenset({"ARTICLE", "ASIDE", "MAIN", "NAV", "SECTION"})
_LANDMARK_BLOCKING_ROLES = frozenset(
    {"article", "complementary", "main", "navigation", "region"}
)
_NAMING_PROHIBITED_ROLES = frozenset(
    {
        "caption",
        "code",
        "definition",
        "deletion",
        "emphasis",
        "generic",
        "insertion",
        "mark",
        "paragraph",
        "presentation",
        "strong",
        "subscript",
        "suggestion",
        "superscript",
        "term",
        "time",
    }
)
_NAME_FROM_CONTENT_ROLES = frozenset(
    {
        "button",
        "cell",
        "checkbox",
        "columnheader",
        "gridcell",
        "heading",
        "link",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "radio",
        "row",
        "rowheader",
        "switch",
        "tab",
        "tooltip",
        "treeitem",
    }
)
_DESCENDANT_NAME_FROM_CONTENT_ROLES = frozenset(
    {
        "",
        "caption",
        "code",
        "contentinfo",
        "definition",
        "deletion",
        "emphasis",
        "insertion",
        "list",
        "listitem",
        "mark",
        "none",
        "paragraph",
        "presentation",
        "region",
        "row",
        "rowgroup",
        "section",
        "strong",
        "subscript",
        "superscript",
        "table",
        "term",
        "time",
    }
)
_NAMING_LABEL_PROHIBITED = frozenset(
    {
        "caption",
        "code",
        "deletion",
        "emphasis",
        "generic",
        "insertion",
        "paragraph",
        "presentation",
        "strong",
        "subscript",
        "superscript",
    }
)
_GLOBAL_ARIA_ATTRIBUTES: dict[str, frozenset[str]] = {
    "aria-atomic": frozenset(),
    "aria-busy": frozenset(),
    "aria-controls": frozenset(),
    "aria-current": frozenset(),
    "aria-describedby": frozenset(),
    "aria-details": frozenset(),
    "aria-dropeffect": frozenset(),
    "aria-flowto": frozenset(),
    "aria-grabbed": frozenset(),
    "aria-hidden": frozenset(),
    "aria-keyshortcuts": frozenset(),
    "aria-label": _NAMING_LABEL_PROHIBITED,
    "aria-labelledby": _NAMING_LABEL_PROHIBITED,
    "aria-live": frozenset(),
    "aria-owns": frozenset(),
    "aria-relevant": frozenset(),
    "aria-roledescription": frozenset({"generic"}),
}
_INPUT_TYPE_TO_ROLE = {
    "button": "button",
    "checkbox": "checkbox",
    "image": "button",
    "number": "spinbutton",
    "radio": "radio",
    "range": "slider",
    "reset": "button",
    "submit": "button",
}
_PRESENTATION_INHERITANCE_PARENTS = {
    "DD": ("DL", "DIV"),
    "DIV": ("DL",),
    "DT": ("DL", "DIV"),
    "LI": ("OL", "UL"),
    "TBODY": ("TABLE",),
    "TD": ("TR",),
    "TFOOT": ("TABLE",),
    "TH": ("TR",),
    "THEAD": ("TABLE",),
    "TR": ("THEAD", "TBODY", "TFOOT", "TABLE"),
}
_HEADING_LEVELS = {"H1": 1, "H2": 2, "H3": 3, "H4": 4, "H5": 5, "H6": 6}
_PLACEHOLDER_INPUT_TYPES = frozenset({"text", "password", "search", "tel", "email", "url"})

_WHITESPACE = re.compile(r"\s+")
_INVISIBLE_CHARS = re.compile("[\u200b\u00ad]")


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", _INVISIBLE_CHARS.sub("", text)).strip()


class RoleResolver(Protocol):
    """Per-element accessibility lookups consumed by the tree builder"""

    def caches(self) -> AbstractContextManager[None]: ...

    def get_role(self, element: DomElement) -> str | None: ...

    def get_accessible_name(self, element: DomElement) -> str: ...

    def is_ignored(self, element: DomElement) -> bool: ...

    def is_hidden_for_aria(self, element: DomElement) -> bool: ...

    def receives_pointer_events(self, element: DomElement) -> bool: ...

    def get_checked(self, element: DomElement) -> Checked: ...

    def get_disabled(self, element: DomElement) -> bool: ...

    def get_expanded(self, element: DomElement) -> bool | None: ...

    def get_level(self, element: DomElement) -> int: ...

    def get_pressed(self, element: DomElement) -> Checked: ...

    def get_selected(self, element: DomElement) -> bool: ...


@dataclass(frozen=True)
class _NameOptions:
    visited: set[int]
    in_labelled_by: bool = False
    in_label: bool = False
    in_native_alternative: bool = False
    # whether the referencing traversal started from a hidden element
    hidden_reference: bool = False
    target: Literal["self", "descendant"] | None = None


def _parent_element(element: DomElement) -> DomElement | None:
    # shadow children keep the host as their parent, which is what we want here
    return element.parent


def _children(element: DomElement) -> list[DomNode]:
    return [*element.children, *(element.shadow_root or [])]


def _explicit_role(element: DomElement) -> str | None:
    for role in (element.get_attribute("role") or "").split(" "):
        if role.strip() in VALID_ROLES:
            return role.strip()
    return None


def _has_tab_index(element: DomElement) -> bool:
    tabindex = element.get_attribute("tabindex")
    if tabindex is None:
        return False
    try:
        int(tabindex)
    except ValueError:
        return False
    return True


def _is_natively_disabled(element: DomElement) -> bool:
    if element.tag_name not in _NATIVE_FORM_CONTROLS:
        return False
    return element.has_attribute("disabled") or _belongs_to_disabled_fieldset(element)


def _belongs_to_disabled_fieldset(element: DomElement) -> bool:
    ancestor = element.parent
    while ancestor is not None:
        if ancestor.tag_name == "FIELDSET" and ancestor.has_attribute("disabled"):
            legend = next(
                (
                    c
                    for c in ancestor.children
                    if isinstance(c, DomElement) and c.tag_name == "LEGEND"
                ),
                None,
            )
            return legend is None or not legend.contains(element)
        ancestor = ancestor.parent
    return False


def _is_natively_focusable(element: DomElement) -> bool:
    tag_name = element.tag_name
    if tag_name in ("BUTTON", "DETAILS", "SELECT", "TEXTAREA"):
        return True
    if tag_name in ("A", "AREA"):
        return element.has_attribute("href")
    if tag_name == "INPUT":
        return not element.has_attribute("hidden")
    return False


def _is_focusable(element: DomElement) -> bool:
    return not _is_natively_disabled(element) and (
        _is_natively_focusable(element) or _has_tab_index(element)
    )


def _has_global_aria_attribute(element: DomElement, for_role: str | None = None) -> bool:
    return any(
        (for_role or "") not in prohibited and element.has_attribute(attr)
        for attr, prohibited in _GLOBAL_ARIA_ATTRIBUTES.items()
    )


def _has_explicit_accessible_name(element: DomElement) -> bool:
    return element.has_attribute("aria-label") or element.has_attribute("aria-labelledby")


def _inside_landmark_blocker(element: DomElement) -> bool:
    ancestor = element.parent
    while ancestor is not None:
        role = ancestor.get_attribute("role")
        if role is None and ancestor.tag_name in _LANDMARK_BLOCKING_TAGS:
            return True
        if role in _LANDMARK_BLOCKING_ROLES:
            return True
        ancestor = ancestor.parent
    return False


def _get_id_refs(element: DomElement, ref: str | None) -> list[DomElement]:
    if not ref:
        return []
    result: list[DomElement] = []
    for element_id in ref.split():
        found = _find_by_id(element, element_id)
        if found is not None and found not in result:
            result.append(found)
    return result


def _find_by_id(element: DomElement, element_id: str) -> DomElement | None:
    if element.owner_document is not None:
        return element.owner_document.get_element_by_id(element_id)
    root = element
    while root.parent is not None:
        root = root.parent
    for candidate in root.iter_elements():
        if candidate.attributes.get("id") == element_id:
            return candidate
    return None


def _cell_role(element: DomElement) -> str:
    table = element.closest("table")
    role = _explicit_role(table) if table is not None else None
    return "gridcell" if role in ("grid", "treegrid") else "cell"


def _input_role(element: DomElement) -> str | None:
    input_type = element.input_type
    if input_type == "search":
        return "combobox" if element.has_attribute("list") else "searchbox"
    if input_type in ("email", "tel", "text", "url", ""):
        lists = _get_id_refs(element, element.get_attribute("list"))
        return "combobox" if lists and lists[0].tag_name == "DATALIST" else "textbox"
    if input_type == "hidden":
        return None
    if input_type == "file":
        return "button"
    return _INPUT_TYPE_TO_ROLE.get(input_type, "textbox")


def _img_role(element: DomElement) -> str:
    if (
        element.get_attribute("alt") == ""
        and not element.get_attribute("title")
        and not _has_global_aria_attribute(element)
        and not _has_tab_index(element)
    ):
        return "presentation"
    return "img"


def _select_role(element: DomElement) -> str:
    try:
        size = int(element.get_attribute("size") or "0")
    except ValueError:
        size = 0
    return "listbox" if element.has_attribute("multiple") or size > 1 else "combobox"


def _th_role(element: DomElement) -> str:
    scope = element.get_attribute("scope")
    if scope == "col":
        return "columnheader"
    if scope == "row":
        return "rowheader"
    return _cell_role(element)


_IMPLICIT_ROLE_BY_TAG: dict[str, Callable[[DomElement], str | None]] = {
    "A": lambda e: "link" if e.has_attribute("href") else None,
    "AREA": lambda e: "link" if e.has_attribute("href") else None,
    "ARTICLE": lambda e: "article",
    "ASIDE": lambda e: "complementary",
    "BLOCKQUOTE": lambda e: "blockquote",
    "BUTTON": lambda e: "button",
    "CAPTION": lambda e: "caption",
    "CODE": lambda e: "code",
    "DATALIST": lambda e: "listbox",
    "DD": lambda e: "definition",
    "DEL": lambda e: "deletion",
    "DETAILS": lambda e: "group",
    "DFN": lambda e: "term",
    "DIALOG": lambda e: "dialog",
    "DT": lambda e: "term",
    "EM": lambda e: "emphasis",
    "FIELDSET": lambda e: "group",
    "FIGURE": lambda e: "figure",
    "FOOTER": lambda e: None if _inside_landmark_blocker(e) else "contentinfo",
    "FORM": lambda e: "form" if _has_explicit_accessible_name(e) else None,
    "H1": lambda e: "heading",
    "H2": lambda e: "heading",
    "H3": lambda e: "heading",
    "H4": lambda e: "heading",
    "H5": lambda e: "heading",
    "H6": lambda e: "heading",
    "HEADER": lambda e: None if _inside_landmark_blocker(e) else "banner",
    "HR": lambda e: "separator",
    "HTML": lambda e: "document",
    "IMG": _img_role,
    "INPUT": _input_role,
    "INS": lambda e: "insertion",
    "LI": lambda e: "listitem",
    "MAIN": lambda e: "main",
    "MARK": lambda e: "mark",
    "MATH": lambda e: "math",
    "MENU": lambda e: "list",
    "METER": lambda e: "meter",
    "NAV": lambda e: "navigation",
    "OL": lambda e: "list",
    "OPTGROUP": lambda e: "group",
    "OPTION": lambda e: "option",
    "OUTPUT": lambda e: "status",
    "P": lambda e: "paragraph",
    "PROGRESS": lambda e: "progressbar",
    "SECTION": lambda e: "region" if _has_explicit_accessible_name(e) else None,
    "SELECT": _select_role,
    "STRONG": lambda e: "strong",
    "SUB": lambda e: "subscript",
    "SUP": lambda e: "superscript",
    "SVG": lambda e: "img",
    "TABLE": lambda e: "table",
    "TBODY": lambda e: "rowgroup",
    "TD": _cell_role,
    "TEXTAREA": lambda e: "textbox",
    "TFOOT": lambda e: "rowgroup",
    "TH": _th_role,
    "THEAD": lambda e: "rowgroup",
    "TIME": lambda e: "time",
    "TR": lambda e: "row",
    "UL": lambda e: "list",
}


class AriaRoleResolver:
    """
    Default `RoleResolver` working on captured `DomElement` trees.

    Lookups are memoized while a `caches()` block is active, which the tree builder opens for
    the duration of one snapshot.
    """

    def __init__(self) -> None:
        self._cache_name: dict[int, str] | None = None
        self._cache_hidden: dict[int, bool] | None = None
        self._cache_pointer_events: dict[int, bool] | None = None
        self._depth = 0

    @contextmanager
    def caches(self) -> Iterator[None]:
        self._depth += 1
        if self._depth == 1:
            self._cache_name, self._cache_hidden, self._cache_pointer_events = {}, {}, {}
        try:
            yield
        finally:
            self._depth -= 1
            if not self._depth:
                self._cache_name = self._cache_hidden = self._cache_pointer_events = None

    # --- roles ---

    def _implicit_role(self, element: DomElement) -> str | None:
        factory = _IMPLICIT_ROLE_BY_TAG.get(element.tag_name)
        implicit_role = factory(element) if factory else None
        if not implicit_role:
            return None
        ancestor = element
        while True:
            parent = _parent_element(ancestor)
            parents = _PRESENTATION_INHERITANCE_PARENTS.get(ancestor.tag_name)
            if not parents or parent is None or parent.tag_name not in parents:
                break
            parent_role = _explicit_role(parent)
            if parent_role in ("none", "presentation") and not (
                _has_global_aria_attribute(parent, parent_role) or _is_focusable(parent)
            ):
                return parent_role
            ancestor = parent
        return implicit_role

    def get_role(self, element: DomElement) -> str | None:
        explicit_role = _explicit_role(element)
        if not explicit_role:
            return self._implicit_role(element)
        if explicit_role in ("none", "presentation"):
            implicit_role = self._implicit_role(element)
            if _has_global_aria_attribute(element, implicit_role) or _is_focusable(element):
                return implicit_role
        return explicit_role

    # --- visibility ---

    def is_ignored(self, element: DomElement) -> bool:
        return element.tag_name in _IGNORED_TAGS

    def is_hidden_for_aria(self, element: DomElement) -> bool:
        if self.is_ignored(element):
            return True
        style = element.style
        is_slot = element.tag_name == "SLOT"
        if style.get("display") == "contents" and not is_slot:
            for child in element.children:
                if isinstance(child, DomElement) and not self.is_hidden_for_aria(child):
                    return False
                if isinstance(child, DomText) and is_visible_text_node(child):
                    return False
            return True
        is_option_in_select = element.tag_name == "OPTION" and element.closest("select") is not None
        if not is_option_in_select and not is_slot and not is_style_visibility_visible(element):
            return True
        return self._belongs_to_hidden_subtree(element)

    def _belongs_to_hidden_subtree(self, element: DomElement) -> bool:
        cache = self._cache_hidden
        if cache is not None and id(element) in cache:
            return cache[id(element)]

        parent = _parent_element(element)
        hidden = bool(
            parent is not None
            and parent.shadow_root is not None
            and element in parent.children
            and not element.is_slotted
        )
        if not hidden:
            hidden = (
                element.style.get("display") == "none"
                or (element.get_attribute("aria-hidden") or "").lower() == "true"
            )
        if not hidden and parent is not None:
            hidden = self._belongs_to_hidden_subtree(parent)

        if cache is not None:
            cache[id(element)] = hidden
        return hidden

    def receives_pointer_events(self, element: DomElement) -> bool:
        cache = self._cache_pointer_events
        visited: list[DomElement] = []
        result: bool | None = None
        current: DomElement | None = element
        while current is not None:
            if cache is not None and id(current) in cache:
                result = cache[id(current)]
                break
            visited.append(current)
            value = current.style.get("pointer-events")
            if value:
                result = value != "none"
                break
            current = _parent_element(current)

        if result is None:
            result = True
        if cache is not None:
            for e in visited:
                cache[id(e)] = result
        return result

    # --- states ---

    def get_checked(self, element: DomElement) -> Checked:
        if element.tag_name == "INPUT" and element.indeterminate:
            return "mixed"
        if element.tag_name == "INPUT" and element.input_type in ("checkbox", "radio"):
            return bool(element.checked)
        if self.get_role(element) in ARIA_CHECKED_ROLES:
            checked = element.get_attribute("aria-checked")
            if checked == "true":
                return True
            if checked == "mixed":
                return "mixed"
        return False

    def get_disabled(self, element: DomElement) -> bool:
        return _is_natively_disabled(element) or self._has_explicit_aria_disabled(element)

    def _has_explicit_aria_disabled(
        self, element: DomElement | None, is_ancestor: bool = False
    ) -> bool:
        if element is None:
            return False
        if is_ancestor or self.get_role(element) in ARIA_DISABLED_ROLES:
            attribute = (element.get_attribute("aria-disabled") or "").lower()
            if attribute == "true":
                return True
            if attribute == "false":
                return False
            return self._has_explicit_aria_disabled(_parent_element(element), True)
        return False

    def get_expanded(self, element: DomElement) -> bool | None:
        if element.tag_name == "DETAILS":
            return element.has_attribute("open")
        if self.get_role(element) in ARIA_EXPANDED_ROLES:
            expanded = element.get_attribute("aria-expanded")
            if expanded is None:
                return None
            return expanded == "true"
        return None

    def get_level(self, element: DomElement) -> int:
        if native := _HEADING_LEVELS.get(element.tag_name):
            return native
        if self.get_role(element) in ARIA_LEVEL_ROLES:
            try:
                value = int(element.get_attribute("aria-level") or "")
            except ValueError:
                return 0
            if value >= 1:
                return value
        return 0

    def get_pressed(self, element: DomElement) -> Checked:
        if self.get_role(element) in ARIA_PRESSED_ROLES:
            pressed = element.get_attribute("aria-pressed")
            if pressed == "true":
                return True
            if pressed == "mixed":
                return "mixed"
        return False

    def get_selected(self, element: DomElement) -> bool:
        if element.tag_name == "OPTION":
            return bool(element.selected)
        if self.get_role(element) in ARIA_SELECTED_ROLES:
            return (element.get_attribute("aria-selected") or "").lower() == "true"
        return False

    # --- accessible name ---

    def get_accessible_name(self, element: DomElement) -> str:
        cache = self._cache_name
        if cache is not None and id(element) in cache:
            return cache[id(element)]

        name = ""
        if (self.get_role(element) or "") not in _NAMING_PROHIBITED_ROLES:
            name = normalize_whitespace(
                self._text_alternative(element, _NameOptions(visited=set(), target="self"))
            )

        if cache is not None:
            cache[id(element)] = name
        return name

    def _labels(self, element: DomElement) -> list[DomElement]:
        labels: list[DomElement] = []
        if (element_id := element.get_attribute("id")) and element.owner_document is not None:
            labels.extend(element.owner_document.query_labels_for(element_id))
        if (label := element.closest("label")) is not None and label not in labels:
            labels.append(label)
        return labels

    def _name_from_labels(self, labels: list[DomElement], options: _NameOptions) -> str:
        names = (
            self._text_alternative(
                label,
                replace(
                    options,
                    in_label=True,
                    hidden_reference=self.is_hidden_for_aria(label),
                    in_labelled_by=False,
                    in_native_alternative=False,
                    target=None,
                ),
            )
            for label in labels
        )
        return " ".join(name for name in names if name)

    def _native_child_alternative(
        self, element: DomElement, child_tag: str, options: _NameOptions
    ) -> str | None:
        for child in element.children:
            if isinstance(child, DomElement) and child.tag_name == child_tag:
                return self._text_alternative(
                    child,
                    replace(
                        options,
                        in_native_alternative=True,
                        hidden_reference=self.is_hidden_for_aria(child),
                    ),
                )
        return None

    def _text_alternative(self, element: DomElement, options: _NameOptions) -> str:
        if id(element) in options.visited:
            return ""

        child_options = replace(
            options, target="descendant" if options.target == "self" else options.target
        )

        if self.is_ignored(element) or (
            not options.hidden_reference and self.is_hidden_for_aria(element)
        ):
            options.visited.add(id(element))
            return ""

        labelled_by = _get_id_refs(element, element.get_attribute("aria-labelledby"))
        if not options.in_labelled_by and labelled_by:
            name = " ".join(
                self._text_alternative(
                    ref,
                    replace(
                        options,
                        in_labelled_by=True,
                        hidden_reference=self.is_hidden_for_aria(ref),
                        in_label=False,
                        in_native_alternative=False,
                        target=None,
                    ),
                )
                for ref in labelled_by
            )
            if name:
                return name

        role = self.get_role(element) or ""
        tag_name = element.tag_name

        if options.in_label or options.in_labelled_by or options.target == "descendant":
            is_own_label = element in labelled_by or element in self._labels(element)
            if not is_own_label:
                if role == "textbox":
                    options.visited.add(id(element))
                    if tag_name in ("INPUT", "TEXTAREA"):
                        return element.value or ""
                    return element.text_content
                if role in ("combobox", "listbox"):
                    options.visited.add(id(element))
                    selected = [
                        e
                        for e in element.iter_elements()
                        if e.tag_name == "OPTION" and e.selected
                    ]
                    if not selected and tag_name == "INPUT":
                        return element.value or ""
                    return " ".join(self._text_alternative(o, child_options) for o in selected)
                if role in ("progressbar", "scrollbar", "slider", "spinbutton", "meter"):
                    options.visited.add(id(element))
                    if element.has_attribute("aria-valuetext"):
                        return element.get_attribute("aria-valuetext") or ""
                    if element.has_attribute("aria-valuenow"):
                        return element.get_attribute("aria-valuenow") or ""
                    return element.get_attribute("value") or ""
                if role == "menu":
                    options.visited.add(id(element))
                    return ""

        aria_label = element.get_attribute("aria-label") or ""
        if aria_label.strip():
            options.visited.add(id(element))
            return aria_label

        if role not in ("presentation", "none"):
            native = self._native_alternative(element, bool(labelled_by), options, child_options)
            if native is not None:
                return native

        if (
            (tag_name == "SUMMARY" and role not in ("presentation", "none"))
            or role in _NAME_FROM_CONTENT_ROLES
            or (options.target == "descendant" and role in _DESCENDANT_NAME_FROM_CONTENT_ROLES)
            or options.in_labelled_by
            or options.in_label
            or options.in_native_alternative
        ):
            options.visited.add(id(element))
            accumulated = self._inner_accumulated_text(element, child_options)
            trimmed = accumulated.strip() if options.target == "self" else accumulated
            if trimmed:
                return accumulated

        if role not in ("presentation", "none") or tag_name == "IFRAME":
            options.visited.add(id(element))
            title = element.get_attribute("title") or ""
            if title.strip():
                return title

        options.visited.add(id(element))
        return ""

    def _native_alternative(
        self,
        element: DomElement,
        has_labelled_by: bool,
        options: _NameOptions,
        child_options: _NameOptions,
    ) -> str | None:
        tag_name = element.tag_name
        title = element.get_attribute("title") or ""

        if tag_name == "INPUT" and element.input_type in ("button", "submit", "reset"):
            options.visited.add(id(element))
            if (element.value or "").strip():
                return element.value or ""
            if element.input_type == "submit":
                return "Submit"
            if element.input_type == "reset":
                return "Reset"
            return title

        if tag_name == "INPUT" and element.input_type == "file":
            options.visited.add(id(element))
            labels = self._labels(element)
            if labels and not options.in_labelled_by:
                return self._name_from_labels(labels, options)
            return "Choose File"

        if tag_name == "INPUT" and element.input_type == "image":
            options.visited.add(id(element))
            labels = self._labels(element)
            if labels and not options.in_labelled_by:
                return self._name_from_labels(labels, options)
            alt = element.get_attribute("alt") or ""
            if alt.strip():
                return alt
            if title.strip():
                return title
            return "Submit"

        if not has_labelled_by and tag_name == "BUTTON":
            labels = self._labels(element)
            if labels:
                options.visited.add(id(element))
                return self._name_from_labels(labels, options)

        if not has_labelled_by and tag_name in ("TEXTAREA", "SELECT", "INPUT"):
            options.visited.add(id(element))
            labels = self._labels(element)
            if labels:
                return self._name_from_labels(labels, options)
            use_placeholder = (
                tag_name == "INPUT" and element.input_type in _PLACEHOLDER_INPUT_TYPES
            ) or tag_name == "TEXTAREA"
            if not use_placeholder or title:
                return title
            return element.get_attribute("placeholder") or ""

        if not has_labelled_by and tag_name in ("FIELDSET", "FIGURE"):
            options.visited.add(id(element))
            caption_tag = "LEGEND" if tag_name == "FIELDSET" else "FIGCAPTION"
            caption = self._native_child_alternative(element, caption_tag, child_options)
            return caption if caption is not None else title

        if tag_name in ("IMG", "AREA"):
            options.visited.add(id(element))
            alt = element.get_attribute("alt") or ""
            if alt.strip():
                return alt
            return title

        if tag_name == "TABLE":
            options.visited.add(id(element))
            caption = self._native_child_alternative(element, "CAPTION", child_options)
            if caption is not None:
                return caption
            if summary := element.get_attribute("summary"):
                return summary

        return None

    def _inner_accumulated_text(self, element: DomElement, options: _NameOptions) -> str:
        tokens: list[str] = [element.before_content or ""]

        def visit(node: DomNode, skip_slotted: bool) -> None:
            if skip_slotted and node.is_slotted:
                return
            if isinstance(node, DomElement):
                display = node.style.get("display", "inline")
                token = self._text_alternative(node, options)
                if display != "inline" or node.tag_name == "BR":
                    token = f" {token} "
                tokens.append(token)
            else:
                tokens.append(node.text)

        if element.tag_name == "SLOT" and element.assigned_nodes:
            for node in element.assigned_nodes:
                visit(node, False)
        else:
            for node in _children(element):
                visit(node, True)
            for owned in _get_id_refs(element, element.get_attribute("aria-owns")):
                visit(owned, True)

        tokens.append(element.after_content or "")
        return "".join(tokens)
