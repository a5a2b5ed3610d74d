"""Shared fixtures for unit tests."""

from datetime import UTC, datetime

import pytest

from gitscribe.types import Identity


@pytest.fixture
def alice() -> Identity:
    return Identity(name="Alice Example", email="alice@example.com")


@pytest.fixture
def bob() -> Identity:
    return Identity(name="Bob Example", email="bob@example.com")


@pytest.fixture
def fixed_date() -> datetime:
    return datetime(2009, 4, 1, 12, 30, 0, tzinfo=UTC)
