import io

from PIL import Image, ImageDraw, ImageFont

from ariabrowser.ariatree.dom import DomElement
from ariabrowser.ariatree.shapes import Rect
from ariabrowser.ariatree.snapshot import AriaSnapshot


MARK_COLORS = [
    "#e6194b",  # red
    "#3cb44b",  # green
    "#4363d8",  # blue
    "#f58231",  # orange
    "#911eb4",  # purple
    "#42d4f4",  # cyan
]

# Only meaningful click/input targets get a mark, structural containers have refs in the text
# but would only add noise to the image
MARK_INTERACTIVE_TAGS = {"A", "BUTTON", "INPUT", "SELECT", "TEXTAREA", "SUMMARY"}
MARK_INTERACTIVE_ROLES = {
    "button",
    "link",
    "textbox",
    "combobox",
    "checkbox",
    "radio",
    "switch",
    "slider",
    "spinbutton",
    "searchbox",
    "option",
    "menuitem",
    "menuitemcheckbox",
    "menuitemradio",
    "tab",
    "treeitem",
    "gridcell",
    "columnheader",
    "rowheader",
}

_FONT_SIZE = 11


def is_interactive_element(element: DomElement, role: str | None = None) -> bool:
    if element.tag_name in MARK_INTERACTIVE_TAGS:
        return True

    if element.get_attribute("contenteditable") in ("true", ""):
        return True

    if role in MARK_INTERACTIVE_ROLES:
        return True
    if any(r in MARK_INTERACTIVE_ROLES for r in (element.get_attribute("role") or "").split()):
        return True

    # focusable through tabindex without a semantic role: most likely a scripted widget
    tabindex = element.get_attribute("tabindex")
    if tabindex is not None and (role is None or role == "generic"):
        try:
            return int(tabindex) >= 0
        except ValueError:
            return False

    return False


def marked_elements(snapshot: AriaSnapshot) -> list[tuple[str, Rect]]:
    """Refs worth drawing, with their page-space bounds, in ref order"""
    marks = []
    for ref, element in snapshot.refs.items():
        if not is_interactive_element(element, snapshot.roles.get(ref)):
            continue
        if element.bounds is None or (element.bounds.width == 0 and element.bounds.height == 0):
            continue
        marks.append((ref, element.bounds))
    return marks


def apply_set_of_marks(img_bytes: bytes, viewport: Rect, snapshot: AriaSnapshot) -> bytes:
    """
    Draw an outline and a ref badge at the top-left corner of every interactive element that
    was given a ref
    """
    with io.BytesIO(img_bytes) as img_buf:
        img = Image.open(img_buf).convert("RGB")

    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default(size=_FONT_SIZE)
    visible = Rect(x=0, y=0, width=viewport.width, height=viewport.height)
    for i, (ref, bounds) in enumerate(marked_elements(snapshot)):
        # bounds are relative to the whole page
        elt_bounds = bounds.translate(-viewport.x, -viewport.y)
        if not elt_bounds.intersects_with(visible):
            continue

        color = MARK_COLORS[i % len(MARK_COLORS)]
        bbox = (elt_bounds.x, elt_bounds.y, elt_bounds.right, elt_bounds.bottom)
        draw.rectangle(bbox, outline=color, width=2)

        text_bbox = draw.textbbox((0, 0), ref, font=font)
        text_width = text_bbox[2] - text_bbox[0]
        text_height = text_bbox[3] - text_bbox[1]
        padding = 2
        draw.rectangle(
            (
                elt_bounds.x,
                elt_bounds.y,
                elt_bounds.x + text_width + 2 * padding,
                elt_bounds.y + text_height + 2 * padding,
            ),
            fill=color,
        )
        draw.text(
            (elt_bounds.x + padding, elt_bounds.y + padding - text_bbox[1]),
            ref,
            font=font,
            fill="white",
        )

    with io.BytesIO() as out_buf:
        img.save(out_buf, format="PNG")
        return out_buf.getvalue()
