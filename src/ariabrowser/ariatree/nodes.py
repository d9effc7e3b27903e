from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel

from ariabrowser.ariatree.dom import DomElement
from ariabrowser.ariatree.visibility import Box


Checked = bool | Literal["mixed"]


@dataclass(eq=False)
class AriaNode:
    """
    One node of the accessibility tree. The role doubles as the node kind: "fragment" for the
    root of a build, "iframe" for a frame we could not walk into, everything else is a computed
    ARIA role.
    """

    role: str
    box: Box
    name: str = ""
    ref: str | None = None
    children: list["AriaNode | str"] = field(default_factory=list)
    props: dict[str, str] = field(default_factory=dict)

    # state, only populated for roles that support it
    checked: Checked | None = None
    disabled: bool | None = None
    expanded: bool | None = None
    level: int | None = None
    pressed: Checked | None = None
    selected: bool | None = None

    receives_pointer_events: bool = True
    element: DomElement | None = field(default=None, repr=False)

    @property
    def is_pointer_reachable(self) -> bool:
        return self.box.visible and self.receives_pointer_events

    @property
    def has_pointer_cursor(self) -> bool:
        return self.box.cursor == "pointer"


class RefCounter(BaseModel):
    """
    Sequence shared by every frame walked during one snapshot. Pass the same instance to
    several snapshot calls to keep numbering going across them.
    """

    value: int = 0

    def next_ref(self) -> str:
        self.value += 1
        return f"E{self.value}"
