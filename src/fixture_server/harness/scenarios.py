"""Browser scenarios driven against fixture pages."""

import logging
from typing import Optional

import anyio
from selenium.webdriver.remote.webdriver import WebDriver

from .waits import DEFAULT_POLL_FREQUENCY, wait_for_element, wait_for_url, wait_until

logger = logging.getLogger(__name__)


async def open_link_in_new_context(
    driver: WebDriver,
    page_url: str,
    link_selector: str = "#newTabLink",
    expected_url: str = "www.google.com",
    timeout_seconds: Optional[float] = None,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
) -> dict:
    """
    Click a targeted link and follow it into the browsing context it opens.

    Loads ``page_url``, waits for the link to be visible and clickable,
    clicks it, then polls until either a new window handle appears or the
    current context navigates. If a new window appeared the driver is
    switched to it before waiting for ``expected_url``.

    Args:
        driver: Active WebDriver
        page_url: Fixture page containing the link
        link_selector: CSS selector of the anchor
        expected_url: Substring the final URL must contain
        timeout_seconds: Bound applied to each wait (default from config)

    Returns:
        Final URL, number of open windows, and whether the driver switched window

    Raises:
        WaitTimeoutError: If the link never becomes clickable or the
            navigation does not happen in time
    """
    await anyio.to_thread.run_sync(lambda: driver.get(page_url))

    await wait_for_element(driver, link_selector, "visible", timeout_seconds, poll_frequency)
    link = await wait_for_element(driver, link_selector, "clickable", timeout_seconds, poll_frequency)

    known_handles = await anyio.to_thread.run_sync(lambda: list(driver.window_handles))
    await anyio.to_thread.run_sync(link.click)

    def navigated(d: WebDriver):
        fresh = [h for h in d.window_handles if h not in known_handles]
        if fresh:
            return ("window", fresh[-1])
        if expected_url in d.current_url:
            return ("same", None)
        return False

    kind, handle = await wait_until(
        driver,
        navigated,
        f"link {link_selector} to open {expected_url}",
        timeout_seconds,
        poll_frequency,
    )

    switched = kind == "window"
    if switched:
        logger.info(f"Link {link_selector} opened new window {handle}")
        await anyio.to_thread.run_sync(lambda: driver.switch_to.window(handle))

    url = await wait_for_url(driver, expected_url, timeout_seconds=timeout_seconds, poll_frequency=poll_frequency)
    window_count = await anyio.to_thread.run_sync(lambda: len(driver.window_handles))

    return {
        "success": True,
        "url": url,
        "window_count": window_count,
        "switched_window": switched,
    }
