"""
Text-only checks run on a planner's action before it reaches the browser.

Nothing here touches the page: refs are looked up in the snapshot text the planner was shown,
and findings are returned as messages the caller can hand back to the planner.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from ariabrowser.actions import ELEMENT_ACTIONS, VALUE_ACTIONS, PageAction
from ariabrowser.config import ValidatorConfig


logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_VALID_KINDS = frozenset(a.value for a in PageAction)
_VALUE_REQUIRED = VALUE_ACTIONS | {PageAction.GOTO, PageAction.EXTRACT, PageAction.DONE}


def _field(action: Mapping[str, Any] | BaseModel, name: str) -> Any:
    if isinstance(action, Mapping):
        return action.get(name)
    return getattr(action, name, None)


def _parse_int(value: Any) -> int | None:
    """Integer prefix of `value` ("35s" -> 35), None when there is none"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if match := _LEADING_INT.match(str(value)):
        return int(match.group(1))
    return None


class Validator:
    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self._config = config or ValidatorConfig()

    @staticmethod
    def is_ref_valid(ref: str, snapshot: str) -> bool:
        return f"[ref={ref}]" in snapshot or f"[{ref}]" in snapshot

    def check_action(self, action: Mapping[str, Any] | BaseModel, snapshot: str) -> str | None:
        """
        Returns a description of the problem with `action` given the current page snapshot, or
        None if it looks fine
        """
        ref = _field(action, "ref")
        if ref and not self.is_ref_valid(ref, snapshot):
            logger.debug("Ref %s not present in snapshot", ref)
            return f'Can\'t find ref "{ref}" on the page. Pick a valid ref from the snapshot.'

        kind = _field(action, "action") or _field(action, "type")
        if kind == PageAction.WAIT:
            seconds = _field(action, "seconds")
            if seconds is None:
                seconds = _field(action, "value") or "0"
            seconds = _parse_int(seconds)
            if seconds is not None and seconds > self._config.max_wait_seconds:
                return "Wait time too long. Use a shorter wait time."

        return None


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = Field(default_factory=list)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int | float):
        return True
    try:
        float(str(value).strip())
    except ValueError:
        return False
    return True


class ActionValidator:
    """
    Structural validation of raw action payloads against the most recent snapshot, collecting
    every problem instead of stopping at the first
    """

    def __init__(self) -> None:
        self._snapshot = ""

    def update_page_snapshot(self, snapshot: str) -> None:
        self._snapshot = snapshot

    def validate_aria_ref(self, ref: str | None) -> ValidationResult:
        if not ref or not ref.strip():
            return ValidationResult(is_valid=False, errors=["Aria ref cannot be empty"])
        if not self._snapshot:
            return ValidationResult(
                is_valid=False, errors=["Cannot validate ref: no page snapshot available"]
            )
        ref = ref.strip()
        if f"[ref={ref}]" in self._snapshot:
            return ValidationResult(is_valid=True)
        return ValidationResult(
            is_valid=False,
            errors=[
                f'Reference "{ref}" not found on current page. Please use a valid ref from the '
                "page snapshot."
            ],
        )

    def validate_action(self, action: Mapping[str, Any]) -> ValidationResult:
        errors = self._action_errors(action)
        return ValidationResult(is_valid=not errors, errors=errors)

    def _action_errors(self, action: Mapping[str, Any]) -> list[str]:
        kind = action.get("action")
        if not isinstance(kind, str) or not kind.strip():
            return ['Missing or empty "action" field']
        if kind not in _VALID_KINDS:
            valid = ", ".join(PageAction)
            return [f'Invalid action type "{kind}". Valid actions: {valid}']
        kind = PageAction(kind)

        errors = []
        ref, value = action.get("ref"), action.get("value")
        if kind in ELEMENT_ACTIONS:
            if not ref or not isinstance(ref, str):
                errors.append(f'Action "{kind}" requires a "ref" field')
            else:
                result = self.validate_aria_ref(ref)
                errors.extend(f'Invalid ref for "{kind}" action: {e}' for e in result.errors)

        if kind == PageAction.WAIT:
            if value is None or value == "" or not _is_number(value):
                errors.append('Action "wait" requires a numeric "value" field (seconds to wait)')
        elif kind in _VALUE_REQUIRED:
            if not isinstance(value, str) or not value.strip():
                errors.append(f'Action "{kind}" requires a non-empty "value" field')

        if kind in (PageAction.BACK, PageAction.FORWARD) and (
            ref not in (None, "") or value not in (None, "")
        ):
            errors.append(f'Action "{kind}" should not have "ref" or "value" fields')

        return errors
