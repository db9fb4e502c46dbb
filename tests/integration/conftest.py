"""Fixtures for integration tests against a real Appium server or Selenium Grid."""

import anyio
import pytest
import pytest_asyncio

from fixture_server.config import settings
from fixture_server.core.exceptions import RemoteConnectionError
from fixture_server.core.fixture_server import FixtureServer
from fixture_server.core.routes import link_testing_routes
from fixture_server.harness.driver_factory import DriverFactory
from fixture_server.harness.remote import check_remote_ready


@pytest.fixture(scope="session")
def remote_url():
    """Return the remote WebDriver URL, skipping if it is not ready."""
    try:
        anyio.run(check_remote_ready, settings.remote_url, 5.0)
    except RemoteConnectionError as e:
        pytest.skip(f"Remote WebDriver not available: {e}")
    return settings.remote_url


@pytest.fixture
def link_server():
    """Serve the link-testing page where the device can reach it."""
    with FixtureServer(link_testing_routes(), port=settings.port) as server:
        yield server


@pytest_asyncio.fixture
async def driver(remote_url):
    """Create a remote browser session and quit it after the test."""
    factory = DriverFactory.from_settings(settings)
    drv = await factory.create(browser=settings.browser)

    yield drv

    await anyio.to_thread.run_sync(drv.quit)
