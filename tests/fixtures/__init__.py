"""Test fixtures package."""

from .fake_driver import FakeDriver, FakeTable

__all__ = [
    "FakeDriver",
    "FakeTable",
]
