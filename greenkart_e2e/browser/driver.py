import logging
import os
from typing import Optional

from playwright.async_api import async_playwright


class Driver:
    @staticmethod
    async def getInstance(browser_config, *args, **kwargs):
        """Create a new Driver and launch its browser.

        Args:
            browser_config (dict): Browser configuration options, see create_browser.
        """
        logging.debug(f"Driver.getInstance called with browser_config: {browser_config}")

        driver = Driver(browser_config=browser_config)
        await driver.create_browser(browser_config=browser_config)
        return driver

    def __init__(self, browser_config=None, *args, **kwargs):
        self._is_closed = False
        self.page = None
        self.browser = None
        self.context = None
        self.playwright = None
        self.config = browser_config

    def is_closed(self):
        """Check if the browser instance is closed."""
        return getattr(self, "_is_closed", True)

    async def create_browser(self, browser_config):
        """Creates a new browser instance and sets up the page.

        Args:
            browser_config (dict): Browser configuration containing:
                - headless (bool): Whether to run browser in headless mode
                - viewport (dict): Browser viewport width and height
                - language (str): Browser locale
                - default_command_timeout (int): Element query timeout in ms
                - video_dir (str, optional): Record a video of the page into this folder

        Returns:
            Page: The page all commands run against.
        """
        try:
            viewport = browser_config["viewport"]

            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(
                headless=browser_config["headless"],
                args=[
                    "--disable-dev-shm-usage",  # Mitigate shared memory issues in Docker
                    "--no-sandbox",
                    "--disable-setuid-sandbox",
                    "--disable-gpu",
                    "--force-device-scale-factor=1",
                    f'--window-size={viewport["width"]},{viewport["height"]}',
                ],
            )

            context_options = {
                "viewport": {"width": viewport["width"], "height": viewport["height"]},
                "device_scale_factor": 1,
                "is_mobile": False,
                "locale": browser_config.get("language", "en-US"),
            }
            video_dir = browser_config.get("video_dir")
            if video_dir:
                os.makedirs(video_dir, exist_ok=True)
                context_options["record_video_dir"] = video_dir
                context_options["record_video_size"] = {"width": viewport["width"], "height": viewport["height"]}

            self.context = await self.browser.new_context(**context_options)
            self.context.set_default_timeout(browser_config.get("default_command_timeout", 4000))
            self.page = await self.context.new_page()
            self.config = browser_config

            logging.debug(f"Browser instance created successfully with config: {browser_config}")
            return self.page

        except Exception as e:
            logging.error("Failed to create browser instance.", exc_info=True)
            await self._abort_start()
            raise e

    async def _abort_start(self):
        """Release whatever create_browser managed to start before failing."""
        try:
            if self.browser is not None:
                await self.browser.close()
        except Exception as e:
            logging.warning(f"Failed to close browser after start-up error: {e}")
        try:
            if self.playwright is not None:
                await self.playwright.stop()
        except Exception as e:
            logging.warning(f"Failed to stop Playwright after start-up error: {e}")
        self.page = None
        self.context = None
        self.browser = None
        self.playwright = None
        self._is_closed = True

    def get_context(self):
        return self.context

    def get_page(self):
        """Returns the current page instance.

        Returns:
            Page: The current page instance.
        """
        return self.page

    async def close_browser(self, video_path: Optional[str] = None) -> Optional[str]:
        """Closes the browser instance and stops Playwright.

        Args:
            video_path: Where to save the page recording, if the context records one.

        Returns:
            The saved video path, or None when nothing was recorded.
        """
        saved_video = None
        try:
            if not self.is_closed():
                video = self.page.video if self.page else None
                # The recording is only flushed once the context is closed
                await self.context.close()
                if video and video_path:
                    os.makedirs(os.path.dirname(video_path) or ".", exist_ok=True)
                    await video.save_as(video_path)
                    await video.delete()
                    saved_video = video_path
                await self.browser.close()
                await self.playwright.stop()
                self._is_closed = True
                logging.debug("Browser instance closed successfully.")
            return saved_video
        except Exception as e:
            logging.error("Failed to close browser instance.", exc_info=True)
            raise e
