"""Selenium-side helpers for driving a browser against fixture pages."""

from .driver_factory import DriverFactory
from .waits import wait_until, wait_for_element, wait_for_url, wait_for_new_window
from .scenarios import open_link_in_new_context
from .remote import check_remote_ready

__all__ = [
    "DriverFactory",
    "wait_until",
    "wait_for_element",
    "wait_for_url",
    "wait_for_new_window",
    "open_link_in_new_context",
    "check_remote_ready",
]
