"""Factory for creating RemoteWebDriver instances against Appium or Selenium Grid."""

from typing import Optional
import anyio
from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.safari.options import Options as SafariOptions
from selenium.common.exceptions import WebDriverException

from ..config import Settings
from ..core.exceptions import RemoteConnectionError


class DriverFactory:
    """
    Creates RemoteWebDriver instances connected to a remote endpoint.

    All WebDriver creation is run in a thread pool to avoid blocking
    the async event loop, since Selenium's API is synchronous.
    """

    def __init__(
        self,
        remote_url: str,
        page_load_timeout: int = 30,
        implicit_wait: int = 0,
        default_capabilities: Optional[dict] = None,
    ):
        self.remote_url = remote_url
        self.page_load_timeout = page_load_timeout
        self.implicit_wait = implicit_wait
        self.default_capabilities = dict(default_capabilities or {})

    @classmethod
    def from_settings(cls, settings: Settings) -> "DriverFactory":
        return cls(
            remote_url=settings.remote_url,
            page_load_timeout=settings.page_load_timeout_seconds,
            implicit_wait=settings.implicit_wait_seconds,
            default_capabilities=settings.mobile_capabilities(),
        )

    async def create(
        self,
        browser: str = "safari",
        headless: bool = False,
        extra_capabilities: Optional[dict] = None,
    ) -> WebDriver:
        """
        Create a new RemoteWebDriver session.

        Args:
            browser: Browser type (safari, chrome, firefox, edge)
            headless: Run desktop browsers in headless mode
            extra_capabilities: Capabilities applied on top of the defaults

        Returns:
            Configured WebDriver instance

        Raises:
            RemoteConnectionError: If the session cannot be created
            ValueError: If browser type is not supported
        """
        options = self._build_options(
            browser=browser,
            headless=headless,
            extra_capabilities=extra_capabilities,
        )

        try:
            driver = await anyio.to_thread.run_sync(
                lambda: webdriver.Remote(command_executor=self.remote_url, options=options)
            )
        except WebDriverException as e:
            raise RemoteConnectionError(self.remote_url, str(e)) from e

        try:
            await anyio.to_thread.run_sync(
                lambda: driver.set_page_load_timeout(self.page_load_timeout)
            )
            await anyio.to_thread.run_sync(
                lambda: driver.implicitly_wait(self.implicit_wait)
            )
        except WebDriverException as e:
            await anyio.to_thread.run_sync(driver.quit)
            raise RemoteConnectionError(self.remote_url, str(e)) from e

        return driver

    def _build_options(
        self,
        browser: str,
        headless: bool,
        extra_capabilities: Optional[dict],
    ):
        """Build browser-specific options object."""
        options_map = {
            "safari": SafariOptions,
            "chrome": webdriver.ChromeOptions,
            "firefox": webdriver.FirefoxOptions,
            "edge": webdriver.EdgeOptions,
        }

        if browser.lower() not in options_map:
            raise ValueError(
                f"Unsupported browser: {browser}. "
                f"Supported browsers: {list(options_map.keys())}"
            )

        options = options_map[browser.lower()]()

        if browser.lower() in ("chrome", "edge"):
            options.add_argument("--no-sandbox")
            options.add_argument("--disable-dev-shm-usage")
            if headless:
                options.add_argument("--headless=new")

        elif browser.lower() == "firefox":
            if headless:
                options.add_argument("-headless")

        # Device capabilities first, then per-call overrides
        capabilities = {**self.default_capabilities, **(extra_capabilities or {})}
        for key, value in capabilities.items():
            options.set_capability(key, value)

        return options
