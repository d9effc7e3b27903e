import asyncio
import base64
import logging
import re
from typing import cast

from playwright.async_api import CDPSession, Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ariabrowser.actions import ELEMENT_ACTIONS, NAVIGATING_ACTIONS, SIGNAL_ACTIONS, PageAction
from ariabrowser.ariatree.capture import capture_document, sync_markers
from ariabrowser.ariatree.marks import apply_set_of_marks
from ariabrowser.ariatree.nodes import RefCounter
from ariabrowser.ariatree.shapes import Rect
from ariabrowser.ariatree.snapshot import AriaSnapshot, generate_and_render_aria_tree
from ariabrowser.browser.base import (
    AsyncBrowserPage,
    BrowserPageDetails,
    PageDimensions,
    ScreenshotDetails,
    Viewport,
)
from ariabrowser.config import PageConfig, calculate_timeout
from ariabrowser.exceptions import (
    BrowserActionException,
    BrowserException,
    InvalidRefException,
    NavigationTimeoutException,
)
from ariabrowser.utils.image_processing import make_not_available_image


logger = logging.getLogger(__name__)

# refs are only ever produced by the renderer, anything else must not reach a CSS selector
_REF_PATTERN = re.compile(r"^E\d+$")


class AsyncCDPBrowserPage(AsyncBrowserPage):
    """
    A Playwright page driven through refs from aria snapshots.

    Snapshots are computed from a CDP capture of the DOM and the marker attributes they imply
    are written back to the live page, so `resolve` is a plain attribute lookup across frames.
    """

    def __init__(
        self, *, page: Page, cdp_session: CDPSession, config: PageConfig | None = None
    ) -> None:
        self._page = page
        self._cdp_session = cdp_session
        self._config = config or PageConfig()

        self._last_snapshot: AriaSnapshot | None = None

    async def init(self) -> None:
        await self.enable_domains()

    @classmethod
    async def create(cls, *, page: Page, config: PageConfig | None = None) -> "AsyncCDPBrowserPage":
        """A factory method to create this class that should be used instead of the constructor"""
        cdp_session = await page.context.new_cdp_session(page)
        browser_page = AsyncCDPBrowserPage(page=page, cdp_session=cdp_session, config=config)
        await browser_page.init()
        return browser_page

    async def enable_domains(self) -> None:
        await self._cdp_session.send("Page.enable")
        await self._cdp_session.send("DOM.enable")
        await self._cdp_session.send("DOMSnapshot.enable")

    @property
    def last_snapshot(self) -> AriaSnapshot | None:
        return self._last_snapshot

    @property
    async def url(self) -> str:
        result = await self._cdp_session.send("Page.getNavigationHistory")
        cur_idx = result["currentIndex"]
        return cast(str, result["entries"][cur_idx]["url"])

    @property
    async def title(self) -> str:
        result = await self._cdp_session.send("Page.getNavigationHistory")
        cur_idx = result["currentIndex"]
        return cast(str, result["entries"][cur_idx]["title"])

    @property
    async def viewport(self) -> Viewport | None:
        result = await self._cdp_session.send("Page.getLayoutMetrics")
        visual_viewport = result["cssVisualViewport"]

        return Viewport(
            width=int(visual_viewport["clientWidth"]),
            height=int(visual_viewport["clientHeight"]),
        )

    @property
    async def dimensions(self) -> PageDimensions:
        result = await self._cdp_session.send("Page.getLayoutMetrics")
        visual_viewport = result["cssVisualViewport"]

        return PageDimensions(
            width=int(result["cssContentSize"]["width"]),
            height=int(result["cssContentSize"]["height"]),
            scroll_x=int(visual_viewport["pageX"]),
            scroll_y=int(visual_viewport["pageY"]),
        )

    @property
    async def page_details(self) -> BrowserPageDetails:
        return BrowserPageDetails(
            url=await self.url,
            viewport=await self.viewport,
            dimensions=await self.dimensions,
            title=await self.title,
        )

    async def _get_visible_rect(self) -> Rect:
        page_info = await self.page_details
        return Rect(
            x=page_info.dimensions.scroll_x,
            y=page_info.dimensions.scroll_y,
            width=page_info.viewport.width if page_info.viewport else 0,
            height=page_info.viewport.height if page_info.viewport else 0,
        )

    # --- snapshots ---

    async def get_tree_with_refs(self, counter: RefCounter | None = None) -> str:
        """
        Take an aria snapshot of the page and mark every ref'd element on the live page.

        Numbering restarts at E1 unless `counter` is given, so previously returned refs must not
        be used once this has been called again.
        """
        document = await capture_document(self._cdp_session)
        if document.body is None:
            logger.warning("Page has no body, returning an empty snapshot")
            return ""

        snapshot_config = self._config.snapshot
        snapshot = generate_and_render_aria_tree(
            document.body,
            counter,
            marker_attribute=snapshot_config.marker_attribute,
            max_iframe_depth=snapshot_config.max_iframe_depth,
            max_name_length=snapshot_config.max_name_length,
        )
        await sync_markers(self._cdp_session, snapshot)
        self._last_snapshot = snapshot
        return snapshot.text

    async def take_screenshot(self, with_marks: bool = False) -> ScreenshotDetails:
        timeout = self._config.screenshot_timeout_s
        try:
            screenshot = await asyncio.wait_for(
                self._cdp_session.send("Page.captureScreenshot", {"format": "png"}),
                timeout=timeout,
            )
            img = base64.b64decode(screenshot["data"])
            if with_marks and self._last_snapshot is not None:
                visible_rect = await asyncio.wait_for(self._get_visible_rect(), timeout=timeout)
                img = apply_set_of_marks(img, visible_rect, self._last_snapshot)
            return ScreenshotDetails(b64_image=base64.b64encode(img).decode("utf-8"))
        except TimeoutError:
            # Fallback to a "not available" image if screenshot times out
            logger.warning("Screenshot timed out after %ss", timeout)
            return ScreenshotDetails(b64_image=make_not_available_image(), error="unavailable")

    # --- ref resolution and actions ---

    async def resolve(self, ref: str | None) -> Locator:
        """
        The single live element carrying `ref`, searched across every frame of the page.

        Raises `InvalidRefException` when no element or more than one element carries it.
        """
        if not ref or not _REF_PATTERN.match(ref):
            raise InvalidRefException(ref or "", f"can't find ref {ref} on the page")

        selector = f'[{self._config.snapshot.marker_attribute}="{ref}"]'
        found: list[Locator] = []
        total = 0
        for frame in self._page.frames:
            locator = frame.locator(selector)
            if count := await locator.count():
                found.append(locator)
                total += count

        if total == 0:
            raise InvalidRefException(ref, f"can't find ref {ref} on the page")
        if total > 1:
            raise InvalidRefException(
                ref, f"multiple elements found for ref {ref}: possible structural issue"
            )
        return found[0]

    async def perform_action(
        self, ref: str | None, action: PageAction | str, value: str | None = None
    ) -> None:
        try:
            action = PageAction(action)
        except ValueError as e:
            raise BrowserActionException(str(action), f"Unsupported action: {action}", e) from e

        logger.info("Performing %s on ref=%s", action, ref)
        try:
            await self._dispatch(ref, action, value)
            if action in NAVIGATING_ACTIONS:
                await self.stabilize()
        except BrowserException:
            # resolution, precondition and navigation errors are already structured
            raise
        except Exception as e:
            raise BrowserActionException(
                action, f"Failed to perform {action} action: {e}", e, {"ref": ref}
            ) from e

    async def _dispatch(self, ref: str | None, action: PageAction, value: str | None) -> None:
        if action in SIGNAL_ACTIONS:
            # consumed by the agent loop, nothing to do on the page
            return

        locator = await self.resolve(ref) if action in ELEMENT_ACTIONS else None

        match action:
            case PageAction.CLICK:
                await cast(Locator, locator).click()
            case PageAction.HOVER:
                await cast(Locator, locator).hover()
            case PageAction.FILL:
                await cast(Locator, locator).fill(self._require_value(action, value))
            case PageAction.FOCUS:
                await cast(Locator, locator).focus()
            case PageAction.CHECK:
                await cast(Locator, locator).check()
            case PageAction.UNCHECK:
                await cast(Locator, locator).uncheck()
            case PageAction.SELECT:
                await cast(Locator, locator).select_option(self._require_value(action, value))
            case PageAction.ENTER:
                await cast(Locator, locator).press("Enter")
            case PageAction.FILL_AND_ENTER:
                text = self._require_value(action, value)
                await cast(Locator, locator).fill(text)
                await cast(Locator, locator).press("Enter")
            case PageAction.WAIT:
                await self._page.wait_for_timeout(self._wait_seconds(value) * 1000)
            case PageAction.GOTO:
                if not value:
                    raise BrowserActionException(action, "URL required for goto action")
                await self._navigate(value)
            case PageAction.BACK:
                await self._page.go_back()
            case PageAction.FORWARD:
                await self._page.go_forward()

    @staticmethod
    def _require_value(action: PageAction, value: str | None) -> str:
        if not value:
            raise BrowserActionException(action, f"Value required for {action} action")
        return value

    @staticmethod
    def _wait_seconds(value: str | None) -> int:
        try:
            seconds = int((value or "").strip())
        except ValueError:
            seconds = -1
        if seconds < 0:
            raise BrowserActionException(PageAction.WAIT, f"Invalid wait time: {value!r}")
        return seconds

    # --- navigation ---

    async def stabilize(self) -> None:
        """
        Wait for the page to be usable: DOM content parsed (best effort), full load (bounded),
        then a fixed settle delay for post-load scripts and animations
        """
        config = self._config.stabilization
        try:
            await self._page.wait_for_load_state(
                "domcontentloaded", timeout=config.dom_content_loaded_timeout_ms
            )
        except PlaywrightTimeoutError:
            logger.debug("Timed out waiting for domcontentloaded, continuing")
        try:
            await self._page.wait_for_load_state("load", timeout=config.load_timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("Page did not finish loading in %dms, continuing", config.load_timeout_ms)
        await self._page.wait_for_timeout(config.settle_delay_ms)

    async def goto(self, url: str) -> None:
        """
        Navigate to `url`, retrying timed out attempts with a growing timeout. Other navigation
        errors propagate as raised by Playwright.
        """
        await self._navigate(url)
        await self.stabilize()

    async def _navigate(self, url: str) -> None:
        retry = self._config.navigation
        for attempt in range(1, retry.max_attempts + 1):
            timeout_ms = calculate_timeout(attempt, retry)
            try:
                await self._page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
                break
            except PlaywrightTimeoutError as e:
                if attempt == retry.max_attempts:
                    raise NavigationTimeoutException(
                        url, timeout_ms, attempt, retry.max_attempts
                    ) from e
                logger.warning(
                    "Navigation to %s timed out after %dms (attempt %d/%d), retrying with %dms",
                    url,
                    timeout_ms,
                    attempt,
                    retry.max_attempts,
                    calculate_timeout(attempt + 1, retry),
                )

    async def go_back(self) -> None:
        await self._page.go_back()
        await self.stabilize()

    async def go_forward(self) -> None:
        await self._page.go_forward()
        await self.stabilize()
