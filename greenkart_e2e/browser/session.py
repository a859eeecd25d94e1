import logging
import os
import uuid
from typing import Any, Dict, Optional

from playwright.async_api import BrowserContext, Page

from greenkart_e2e.browser.config import DEFAULT_CONFIG
from greenkart_e2e.browser.driver import Driver


class BrowserSession:
    """One browser, context and page, owned for the length of a spec file."""

    def __init__(self, session_id: str = None, browser_config: Dict[str, Any] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.browser_config = {**DEFAULT_CONFIG, **(browser_config or {})}
        self.driver: Optional[Driver] = None
        self._is_closed = False

    async def initialize(self):
        """Initialize browser session."""
        if self._is_closed:
            raise RuntimeError("Browser session is closed")

        logging.debug(f"Initializing browser session {self.session_id} with config: {self.browser_config}")

        try:
            self.driver = await Driver.getInstance(browser_config=self.browser_config)
            logging.debug(f"Browser session {self.session_id} initialized successfully via Driver")
        except Exception as e:
            logging.error(f"Failed to initialize browser session {self.session_id}: {e}")
            await self._cleanup()
            raise

    async def navigate_to(self, url: str, **kwargs):
        """Navigate to URL and wait until the DOM is ready."""
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")

        logging.info(f"Session {self.session_id} navigating to: {url}")
        kwargs.setdefault("timeout", 60000)
        kwargs.setdefault("wait_until", "domcontentloaded")

        page = self.driver.get_page()
        await page.goto(url, **kwargs)
        try:
            await page.wait_for_load_state("networkidle", timeout=kwargs["timeout"])
        except Exception as e:
            # Long-polling pages never go idle; the DOM is already usable
            logging.warning(f"Network did not become idle after navigating to {url}: {e}")

    async def reset_page(self):
        """Clear cookies and storage and leave the page blank between tests."""
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        page = self.driver.get_page()
        await self.driver.get_context().clear_cookies()
        await page.goto("about:blank")

    async def screenshot(self, path: str, full_page: bool = True) -> str:
        """Save a screenshot of the current page and return its path."""
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        await self.driver.get_page().screenshot(path=path, full_page=full_page)
        logging.debug(f"Screenshot saved: {path}")
        return path

    def get_page(self) -> Page:
        """Return current page via Driver."""
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver.get_page()

    def get_context(self) -> BrowserContext:
        if self._is_closed or not self.driver:
            raise RuntimeError("Browser session not initialized or closed")
        return self.driver.get_context()

    def is_closed(self) -> bool:
        """Check if session is closed."""
        return self._is_closed

    async def _cleanup(self, video_path: Optional[str] = None) -> Optional[str]:
        saved_video = None
        try:
            if self.driver and not self.driver.is_closed():
                saved_video = await self.driver.close_browser(video_path=video_path)
        except Exception as e:
            logging.error(f"Error during cleanup: {e}")
        finally:
            self.driver = None
        return saved_video

    async def close(self, video_path: Optional[str] = None) -> Optional[str]:
        """Close browser session.

        Returns the path the page recording was saved to, if any.
        """
        if self._is_closed:
            return None

        logging.debug(f"Closing browser session {self.session_id}")
        self._is_closed = True
        saved_video = await self._cleanup(video_path=video_path)
        logging.debug(f"Browser session {self.session_id} closed")
        return saved_video

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
