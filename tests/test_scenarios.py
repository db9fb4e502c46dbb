"""Tests for the targeted-link scenario."""

import pytest

from fixture_server.core.exceptions import WaitTimeoutError
from fixture_server.harness.scenarios import open_link_in_new_context

PAGE_URL = "http://127.0.0.1:8080/link_testing"


@pytest.mark.asyncio
async def test_follows_new_window(mock_webdriver, mock_webelement):
    """Should switch to the window opened by the click."""

    def open_tab():
        mock_webdriver.window_handles = ["window1", "window2"]

    def switch(handle):
        mock_webdriver.current_window_handle = handle
        mock_webdriver.current_url = "http://www.google.com/"

    mock_webelement.click.side_effect = open_tab
    mock_webdriver.switch_to.window.side_effect = switch

    result = await open_link_in_new_context(mock_webdriver, PAGE_URL, timeout_seconds=1, poll_frequency=0.01)

    mock_webdriver.get.assert_called_once_with(PAGE_URL)
    mock_webelement.click.assert_called_once()
    mock_webdriver.switch_to.window.assert_called_once_with("window2")
    assert result == {
        "success": True,
        "url": "http://www.google.com/",
        "window_count": 2,
        "switched_window": True,
    }


@pytest.mark.asyncio
async def test_follows_same_context_navigation(mock_webdriver, mock_webelement):
    """Should accept navigation in the current context."""

    def navigate():
        mock_webdriver.current_url = "http://127.0.0.1:8080/www.google.com"

    mock_webelement.click.side_effect = navigate

    result = await open_link_in_new_context(mock_webdriver, PAGE_URL, timeout_seconds=1, poll_frequency=0.01)

    mock_webdriver.switch_to.window.assert_not_called()
    assert result["switched_window"] is False
    assert result["window_count"] == 1
    assert "www.google.com" in result["url"]


@pytest.mark.asyncio
async def test_times_out_when_click_does_nothing(mock_webdriver, mock_webelement):
    """Should raise WaitTimeoutError if neither a window nor navigation appears."""
    with pytest.raises(WaitTimeoutError) as exc:
        await open_link_in_new_context(mock_webdriver, PAGE_URL, timeout_seconds=0.2, poll_frequency=0.05)

    assert "#newTabLink" in exc.value.condition
    mock_webelement.click.assert_called_once()


@pytest.mark.asyncio
async def test_link_never_clickable(mock_webdriver, mock_webelement):
    """Should not click a disabled link."""
    mock_webelement.is_enabled.return_value = False

    with pytest.raises(WaitTimeoutError):
        await open_link_in_new_context(mock_webdriver, PAGE_URL, timeout_seconds=0.2, poll_frequency=0.05)

    mock_webelement.click.assert_not_called()
