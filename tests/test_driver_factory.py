"""Tests for DriverFactory option building and session creation."""

import pytest
from unittest.mock import MagicMock, patch
from selenium.common.exceptions import SessionNotCreatedException, WebDriverException

from fixture_server.config import Settings
from fixture_server.core.exceptions import RemoteConnectionError
from fixture_server.harness import driver_factory
from fixture_server.harness.driver_factory import DriverFactory


@pytest.fixture
def factory():
    return DriverFactory.from_settings(Settings())


class TestBuildOptions:
    """Tests for capability assembly."""

    def test_safari_mobile_capabilities(self, factory):
        """Should apply the configured device capabilities."""
        options = factory._build_options("safari", headless=False, extra_capabilities=None)

        caps = options.to_capabilities()
        assert caps["browserName"] == "safari"
        assert caps["platformName"] == "iOS"
        assert caps["appium:deviceName"] == "iPhone 6"
        assert caps["appium:platformVersion"] == "8.1"

    def test_extra_capabilities_override(self, factory):
        """Should let per-call capabilities win over defaults."""
        options = factory._build_options(
            "safari",
            headless=False,
            extra_capabilities={"appium:deviceName": "iPhone 15", "appium:autoWebview": True},
        )

        caps = options.to_capabilities()
        assert caps["appium:deviceName"] == "iPhone 15"
        assert caps["appium:autoWebview"] is True

    def test_chrome_headless(self):
        """Should add the headless flag for desktop Chrome."""
        options = DriverFactory("http://grid:4444")._build_options("chrome", headless=True, extra_capabilities=None)

        assert "--headless=new" in options.arguments

    def test_unsupported_browser(self, factory):
        """Should reject unknown browsers."""
        with pytest.raises(ValueError):
            factory._build_options("netscape", headless=False, extra_capabilities=None)


class TestCreate:
    """Tests for remote session creation."""

    @pytest.mark.asyncio
    async def test_create_configures_timeouts(self, factory, mock_webdriver):
        """Should create a Remote driver and apply timeouts."""
        with patch.object(driver_factory.webdriver, "Remote", return_value=mock_webdriver) as remote:
            driver = await factory.create()

        assert driver is mock_webdriver
        assert remote.call_args.kwargs["command_executor"] == "http://127.0.0.1:4723/wd/hub"
        mock_webdriver.set_page_load_timeout.assert_called_once_with(30)
        mock_webdriver.implicitly_wait.assert_called_once_with(0)

    @pytest.mark.asyncio
    async def test_create_maps_session_failure(self, factory):
        """Should raise RemoteConnectionError if the session cannot be created."""
        failure = SessionNotCreatedException("No simulator available")
        with patch.object(driver_factory.webdriver, "Remote", side_effect=failure):
            with pytest.raises(RemoteConnectionError) as exc:
                await factory.create()

        assert exc.value.remote_url == "http://127.0.0.1:4723/wd/hub"
        assert "No simulator available" in str(exc.value)

    @pytest.mark.asyncio
    async def test_create_quits_on_configuration_failure(self, factory, mock_webdriver):
        """Should not leak the session if timeouts cannot be set."""
        mock_webdriver.set_page_load_timeout = MagicMock(side_effect=WebDriverException("unsupported"))

        with patch.object(driver_factory.webdriver, "Remote", return_value=mock_webdriver):
            with pytest.raises(RemoteConnectionError):
                await factory.create()

        mock_webdriver.quit.assert_called_once()
