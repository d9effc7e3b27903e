import json
from collections.abc import Mapping
from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class PageAction(StrEnum):
    # element interactions
    CLICK = "click"
    HOVER = "hover"
    FILL = "fill"
    FOCUS = "focus"
    CHECK = "check"
    UNCHECK = "uncheck"
    SELECT = "select"
    ENTER = "enter"
    FILL_AND_ENTER = "fill_and_enter"

    # navigation and workflow
    WAIT = "wait"
    GOTO = "goto"
    BACK = "back"
    FORWARD = "forward"
    EXTRACT = "extract"
    ABORT = "abort"
    DONE = "done"


ELEMENT_ACTIONS = frozenset(
    {
        PageAction.CLICK,
        PageAction.HOVER,
        PageAction.FILL,
        PageAction.FOCUS,
        PageAction.CHECK,
        PageAction.UNCHECK,
        PageAction.SELECT,
        PageAction.ENTER,
        PageAction.FILL_AND_ENTER,
    }
)
# actions whose element interaction needs a non-empty value
VALUE_ACTIONS = frozenset({PageAction.FILL, PageAction.SELECT, PageAction.FILL_AND_ENTER})
# actions that may navigate or re-render, and are therefore followed by stabilization
NAVIGATING_ACTIONS = frozenset(
    {
        PageAction.CLICK,
        PageAction.ENTER,
        PageAction.SELECT,
        PageAction.FILL_AND_ENTER,
        PageAction.GOTO,
        PageAction.BACK,
        PageAction.FORWARD,
    }
)
# no-ops for the page, consumed by whoever drives the agent loop
SIGNAL_ACTIONS = frozenset({PageAction.EXTRACT, PageAction.ABORT, PageAction.DONE})


class ClickAction(BaseModel):
    action: Literal["click"] = "click"
    ref: str


class HoverAction(BaseModel):
    action: Literal["hover"] = "hover"
    ref: str


class FocusAction(BaseModel):
    action: Literal["focus"] = "focus"
    ref: str


class CheckAction(BaseModel):
    action: Literal["check"] = "check"
    ref: str


class UncheckAction(BaseModel):
    action: Literal["uncheck"] = "uncheck"
    ref: str


class EnterAction(BaseModel):
    action: Literal["enter"] = "enter"
    ref: str


class FillAction(BaseModel):
    action: Literal["fill"] = "fill"
    ref: str
    value: str = Field(min_length=1)


class SelectAction(BaseModel):
    action: Literal["select"] = "select"
    ref: str
    # option value or label
    value: str = Field(min_length=1)


class FillAndEnterAction(BaseModel):
    action: Literal["fill_and_enter"] = "fill_and_enter"
    ref: str
    value: str = Field(min_length=1)


class WaitAction(BaseModel):
    action: Literal["wait"] = "wait"
    seconds: int = Field(ge=0)


class GotoAction(BaseModel):
    action: Literal["goto"] = "goto"
    url: str = Field(min_length=1)


class BackAction(BaseModel):
    action: Literal["back"] = "back"


class ForwardAction(BaseModel):
    action: Literal["forward"] = "forward"


class ExtractAction(BaseModel):
    action: Literal["extract"] = "extract"
    # what the planner wants pulled out of the page
    value: str | None = None


class AbortAction(BaseModel):
    action: Literal["abort"] = "abort"
    # reason for giving up
    value: str | None = None


class DoneAction(BaseModel):
    action: Literal["done"] = "done"
    # final answer
    value: str | None = None


Action = Annotated[
    ClickAction
    | HoverAction
    | FocusAction
    | CheckAction
    | UncheckAction
    | EnterAction
    | FillAction
    | SelectAction
    | FillAndEnterAction
    | WaitAction
    | GotoAction
    | BackAction
    | ForwardAction
    | ExtractAction
    | AbortAction
    | DoneAction,
    Field(discriminator="action"),
]


class _UnionAction(BaseModel):
    payload: Action


def parse_action(data: str | Mapping[str, Any]) -> Action:
    """
    Build the typed action for a loosely typed `{action, ref?, value?}` payload.

    `value` is accepted in place of `seconds` for wait and of `url` for goto. Raises a pydantic
    `ValidationError` when the payload does not describe a well-formed action.
    """
    if not isinstance(data, (str, Mapping)):
        raise TypeError("data field must be str or Mapping")

    dct = dict(json.loads(data) if isinstance(data, str) else data)
    if isinstance(kind := dct.get("action"), PageAction):
        dct["action"] = kind.value

    if dct.get("action") == PageAction.WAIT and dct.get("seconds") is None and "value" in dct:
        dct["seconds"] = dct.pop("value")
    if dct.get("action") == PageAction.GOTO and dct.get("url") is None and "value" in dct:
        dct["url"] = dct.pop("value")

    return _UnionAction(payload=dct).payload  # type: ignore[arg-type]


def to_call(action: Action) -> tuple[str | None, PageAction, str | None]:
    """Lower a typed action to the `(ref, action, value)` triple the page executes"""
    kind = PageAction(action.action)
    match action:
        case WaitAction(seconds=seconds):
            return None, kind, str(seconds)
        case GotoAction(url=url):
            return None, kind, url
        case FillAction() | SelectAction() | FillAndEnterAction():
            return action.ref, kind, action.value
        case ExtractAction() | AbortAction() | DoneAction():
            return None, kind, action.value
        case BackAction() | ForwardAction():
            return None, kind, None
        case _:
            return action.ref, kind, None
