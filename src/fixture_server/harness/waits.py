"""Bounded condition polling against a WebDriver.

Every wait here polls an explicit condition with a timeout; nothing
sleeps for a fixed interval hoping the page caught up.
"""

import re
from typing import Any, Callable, Iterable, Literal, Optional

import anyio
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import TimeoutException

from ..config import settings
from ..core.exceptions import WaitTimeoutError

DEFAULT_POLL_FREQUENCY = 0.25

ElementCondition = Literal["exists", "visible", "clickable", "hidden"]

CONDITION_MAP = {
    "exists": EC.presence_of_element_located,
    "visible": EC.visibility_of_element_located,
    "clickable": EC.element_to_be_clickable,
    "hidden": EC.invisibility_of_element_located,
}


def _resolve_timeout(timeout_seconds: Optional[float]) -> float:
    if timeout_seconds is None:
        return settings.default_wait_timeout_seconds
    return timeout_seconds


async def wait_until(
    driver: WebDriver,
    condition: Callable[[WebDriver], Any],
    description: str,
    timeout_seconds: Optional[float] = None,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
) -> Any:
    """
    Poll ``condition`` until it returns a truthy value.

    Args:
        driver: WebDriver to poll against
        condition: Callable taking the driver, truthy when satisfied
        description: Human-readable condition used in the timeout error
        timeout_seconds: Upper bound on the wait (default from config)
        poll_frequency: Seconds between polls

    Returns:
        The condition's truthy result

    Raises:
        WaitTimeoutError: If the condition is not met in time
    """
    timeout = _resolve_timeout(timeout_seconds)
    wait = WebDriverWait(driver, timeout, poll_frequency=poll_frequency)
    try:
        return await anyio.to_thread.run_sync(lambda: wait.until(condition))
    except TimeoutException as e:
        raise WaitTimeoutError(description, timeout) from e


async def wait_for_element(
    driver: WebDriver,
    css_selector: str,
    condition: ElementCondition = "visible",
    timeout_seconds: Optional[float] = None,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
):
    """
    Wait for an element to meet a condition.

    Conditions:
    - exists: Element is present in DOM (may not be visible)
    - visible: Element is present and visible
    - clickable: Element is visible and enabled
    - hidden: Element is not visible or not in DOM

    Returns:
        The WebElement, or True for the hidden condition
    """
    if condition not in CONDITION_MAP:
        raise ValueError(
            f"Unsupported condition: {condition}. "
            f"Supported conditions: {list(CONDITION_MAP.keys())}"
        )

    locator = (By.CSS_SELECTOR, css_selector)
    return await wait_until(
        driver,
        CONDITION_MAP[condition](locator),
        f"element {css_selector} to be {condition}",
        timeout_seconds,
        poll_frequency,
    )


async def wait_for_url(
    driver: WebDriver,
    pattern: str,
    is_regex: bool = False,
    timeout_seconds: Optional[float] = None,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
) -> str:
    """Wait for the current URL to contain ``pattern`` (or match it as a regex)."""
    if is_regex:
        ec = EC.url_matches(re.compile(pattern))
    else:
        ec = EC.url_contains(pattern)

    await wait_until(driver, ec, f"URL matching {pattern!r}", timeout_seconds, poll_frequency)
    return await anyio.to_thread.run_sync(lambda: driver.current_url)


async def wait_for_new_window(
    driver: WebDriver,
    known_handles: Iterable[str],
    timeout_seconds: Optional[float] = None,
    poll_frequency: float = DEFAULT_POLL_FREQUENCY,
) -> str:
    """Wait for a window handle not in ``known_handles`` and return it."""
    known = set(known_handles)

    def new_handle(d: WebDriver):
        fresh = [h for h in d.window_handles if h not in known]
        return fresh[-1] if fresh else False

    return await wait_until(driver, new_handle, "a new window to open", timeout_seconds, poll_frequency)
