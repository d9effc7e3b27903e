import logging
from dataclasses import dataclass, field

from ariabrowser.ariatree.builder import (
    DEFAULT_MARKER_ATTRIBUTE,
    MAX_IFRAME_DEPTH,
    AriaTreeBuilder,
    strip_markers,
)
from ariabrowser.ariatree.dom import DomElement
from ariabrowser.ariatree.nodes import RefCounter
from ariabrowser.ariatree.normalize import normalize_tree
from ariabrowser.ariatree.render import MAX_NAME_LENGTH, AriaTreeRenderer
from ariabrowser.ariatree.roles import AriaRoleResolver, RoleResolver


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AriaSnapshot:
    """
    Result of one snapshot: the text handed to the planner plus the marker writes it implies.

    `refs` maps every issued ref to the element now carrying it; `stale_elements` are the
    elements whose marker from an earlier snapshot was removed and not reassigned.
    """

    text: str
    marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE
    refs: dict[str, DomElement] = field(default_factory=dict)
    roles: dict[str, str] = field(default_factory=dict)
    stale_elements: list[DomElement] = field(default_factory=list)


def generate_and_render_aria_tree(
    root: DomElement,
    counter: RefCounter | None = None,
    *,
    resolver: RoleResolver | None = None,
    marker_attribute: str = DEFAULT_MARKER_ATTRIBUTE,
    max_iframe_depth: int = MAX_IFRAME_DEPTH,
    max_name_length: int = MAX_NAME_LENGTH,
) -> AriaSnapshot:
    """
    Build, normalize and render the accessibility tree under `root`.

    Numbering starts again at E1 unless a counter from an earlier call is passed in, so a ref is
    only meaningful against the snapshot text that issued it.
    """
    counter = counter if counter is not None else RefCounter()
    stale = strip_markers(root, marker_attribute)

    builder = AriaTreeBuilder(resolver or AriaRoleResolver(), max_iframe_depth=max_iframe_depth)
    tree = builder.build(root)
    normalize_tree(tree)

    renderer = AriaTreeRenderer(
        counter, marker_attribute=marker_attribute, max_name_length=max_name_length
    )
    text = renderer.render(tree)
    logger.debug("Rendered aria snapshot with %d refs", len(renderer.refs))

    marked = {id(e) for e in renderer.refs.values()}
    return AriaSnapshot(
        text=text,
        marker_attribute=marker_attribute,
        refs=renderer.refs,
        roles=renderer.roles,
        stale_elements=[e for e in stale if id(e) not in marked],
    )
