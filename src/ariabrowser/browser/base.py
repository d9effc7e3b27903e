from abc import ABC, abstractmethod
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ariabrowser.actions import PageAction


class Viewport(BaseModel):
    width: int
    height: int


class PageDimensions(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    width: int
    height: int
    scroll_y: int
    scroll_x: int


class BrowserPageDetails(BaseModel):
    url: str
    title: str
    viewport: Viewport | None
    dimensions: PageDimensions


class ScreenshotDetails(BaseModel):
    b64_image: str
    error: Literal["", "unavailable"] = ""


class AsyncBrowserPage(ABC):
    @property
    @abstractmethod
    async def url(self) -> str:
        """
        The url of the page
        """

    @property
    @abstractmethod
    async def title(self) -> str:
        """
        The title of the page
        """

    @property
    @abstractmethod
    async def viewport(self) -> Viewport | None:
        """
        Returns the viewport of the current page
        """

    @property
    @abstractmethod
    async def dimensions(self) -> PageDimensions:
        """
        Returns the dimensions of the current page
        """

    @property
    @abstractmethod
    async def page_details(self) -> BrowserPageDetails:
        """
        Returns the details of the current page
        """

    @abstractmethod
    async def goto(self, url: str) -> None:
        """
        Navigate to the page at the given URL and wait for it to settle
        """

    @abstractmethod
    async def go_back(self) -> None:
        """
        Navigate back in history and wait for the page to settle
        """

    @abstractmethod
    async def go_forward(self) -> None:
        """
        Navigate forward in history and wait for the page to settle
        """

    @abstractmethod
    async def take_screenshot(self, with_marks: bool = False) -> ScreenshotDetails:
        """
        Takes a screenshot of the current page and returns it as base64-str, optionally with
        the refs of the last snapshot drawn on it
        """

    @abstractmethod
    async def get_tree_with_refs(self) -> str:
        """
        Snapshot the page's accessibility tree, returning the text with a ref on every element
        that can be acted upon
        """

    @abstractmethod
    async def perform_action(
        self, ref: str | None, action: PageAction | str, value: str | None = None
    ) -> None:
        """
        Perform an action, resolving `ref` against the current page first for element actions
        """

    @abstractmethod
    async def stabilize(self) -> None:
        """
        Wait for the page to settle after an action that may have navigated
        """
