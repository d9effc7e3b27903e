import pytest
from pydantic import ValidationError

from ariabrowser.config import (
    NavigationRetryConfig,
    PageConfig,
    StabilizationConfig,
    calculate_timeout,
)
from ariabrowser.exceptions import (
    BrowserActionException,
    BrowserException,
    InvalidRefException,
    NavigationTimeoutException,
    RecoverableError,
)


def test_default_timeouts_double_and_cap() -> None:
    config = NavigationRetryConfig()

    assert [calculate_timeout(attempt, config) for attempt in range(1, 5)] == [
        15000,
        30000,
        60000,
        60000,
    ]


def test_custom_multiplier_rounds() -> None:
    config = NavigationRetryConfig(
        base_timeout_ms=10000, max_timeout_ms=100000, timeout_multiplier=1.5
    )

    assert [calculate_timeout(attempt, config) for attempt in range(1, 4)] == [
        10000,
        15000,
        22500,
    ]


def test_multiplier_of_one_never_escalates() -> None:
    config = NavigationRetryConfig(timeout_multiplier=1)

    assert {calculate_timeout(attempt, config) for attempt in range(1, 4)} == {15000}


def test_invalid_config_is_rejected() -> None:
    with pytest.raises(ValidationError):
        StabilizationConfig(settle_delay_ms=-1)
    with pytest.raises(ValidationError):
        NavigationRetryConfig(max_attempts=0)


def test_page_config_defaults() -> None:
    config = PageConfig()

    assert config.snapshot.marker_attribute == "aria-ref"
    assert config.snapshot.max_iframe_depth == 5
    assert config.stabilization.settle_delay_ms == 1000
    assert config.navigation.max_attempts == 3


def test_navigation_timeout_exception() -> None:
    error = NavigationTimeoutException("https://slow.example.com", 30000, 2, 3)

    assert isinstance(error, BrowserException)
    assert isinstance(error, RecoverableError)
    assert str(error) == (
        "Navigation to 'https://slow.example.com' timed out after 30000ms (attempt 2/3)"
    )
    assert error.context == {
        "url": "https://slow.example.com",
        "timeout_ms": 30000,
        "attempt": 2,
        "max_attempts": 3,
    }


def test_invalid_ref_exception() -> None:
    error = InvalidRefException("E7")

    assert "'E7'" in error.message
    assert error.context == {"ref": "E7"}
    assert InvalidRefException("E7", "can't find ref E7 on the page").message == (
        "can't find ref E7 on the page"
    )


def test_browser_action_exception_keeps_action_and_cause() -> None:
    cause = RuntimeError("detached")
    error = BrowserActionException("click", "Failed to perform click action", cause, {"ref": "E1"})

    assert error.action == "click"
    assert error.cause is cause
    assert error.context == {"ref": "E1", "action": "click"}
