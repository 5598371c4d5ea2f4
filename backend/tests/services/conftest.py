"""Service test fixtures — frozen clock and in-memory conference store."""

import pytest

from tests.fakes import FakeConferenceRepository, FrozenClock


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def repo():
    return FakeConferenceRepository()
