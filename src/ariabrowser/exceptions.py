from typing import Any


class AriaBrowserException(Exception):
    """Base class for all errors raised by ariabrowser"""


class RecoverableError(AriaBrowserException):
    """
    An error the caller can recover from, typically by taking a fresh snapshot and trying a
    different action
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}


class BrowserException(RecoverableError):
    """Base class for errors raised while driving the page"""


class InvalidRefException(BrowserException):
    def __init__(self, ref: str, message: str | None = None) -> None:
        super().__init__(
            message
            or (
                f"Invalid element reference '{ref}'. The element does not exist on the current "
                "page. Please check the page snapshot for valid element references."
            ),
            {"ref": ref},
        )
        self.ref = ref


class BrowserActionException(BrowserException):
    def __init__(
        self,
        action: str,
        message: str,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, {**(context or {}), "action": action})
        self.action = action
        self.cause = cause


class NavigationTimeoutException(BrowserException):
    """Raised once navigation has timed out on every attempt"""

    def __init__(self, url: str, timeout_ms: int, attempt: int = 1, max_attempts: int = 1) -> None:
        super().__init__(
            f"Navigation to '{url}' timed out after {timeout_ms}ms "
            f"(attempt {attempt}/{max_attempts})",
            {
                "url": url,
                "timeout_ms": timeout_ms,
                "attempt": attempt,
                "max_attempts": max_attempts,
            },
        )
        self.url = url
        self.timeout_ms = timeout_ms
        self.attempt = attempt
        self.max_attempts = max_attempts
