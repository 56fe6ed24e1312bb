"""Shared fixtures for the kryshift test suite."""

from collections.abc import Iterator

import pytest

import kryshift as ks


@pytest.fixture(autouse=True)
def _reset_config() -> Iterator[None]:
    """Restore the global configuration after every test."""
    yield
    ks.config.reset()
