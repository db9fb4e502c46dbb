"""Pytest fixtures for testing the fixture server."""

import httpx
import pytest
from unittest.mock import MagicMock

from fixture_server.core.fixture_server import FixtureServer
from fixture_server.core.routes import link_testing_routes


@pytest.fixture
def link_routes():
    """Route table serving the link-testing page."""
    return link_testing_routes()


@pytest.fixture
def fixture_server(link_routes):
    """Start a fixture server on an ephemeral port and stop it after the test."""
    server = FixtureServer(link_routes, host="127.0.0.1", external_host="127.0.0.1")
    server.start()
    yield server
    server.stop()


@pytest.fixture
def http_client():
    """HTTP client that ignores proxy settings from the environment."""
    with httpx.Client(trust_env=False, timeout=5.0) as client:
        yield client


@pytest.fixture
def mock_webelement():
    """Create a mock WebElement."""
    element = MagicMock()
    element.tag_name = "a"
    element.text = "Click me"
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    element.get_attribute.return_value = "_blank"
    return element


@pytest.fixture
def mock_webdriver(mock_webelement):
    """Create a mock WebDriver with the methods the harness uses."""
    driver = MagicMock()

    # Navigation
    driver.get = MagicMock()
    driver.current_url = "http://127.0.0.1:8080/link_testing"
    driver.title = ""

    # Find elements
    driver.find_element = MagicMock(return_value=mock_webelement)
    driver.find_elements = MagicMock(return_value=[mock_webelement])

    # Window management
    driver.window_handles = ["window1"]
    driver.current_window_handle = "window1"

    # Timeouts
    driver.set_page_load_timeout = MagicMock()
    driver.implicitly_wait = MagicMock()

    # Session
    driver.session_id = "mock-session-id"
    driver.capabilities = {
        "browserName": "safari",
        "platformName": "iOS",
    }

    # Cleanup
    driver.quit = MagicMock()

    return driver
