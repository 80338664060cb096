"""Pytest configuration and fixtures for robust connection tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to Python path so we can import robust_connection
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from robust_connection.application.services import RetryScheduler
from robust_connection.config import build_configuration
from robust_connection.infrastructure.transport import ConnectionSupervisor
from tests.doubles import FakeConnectionProvider, HookRecorder, RecordingSleep


@pytest.fixture
def fake_provider() -> FakeConnectionProvider:
    """Create fake connection provider."""
    return FakeConnectionProvider()


@pytest.fixture
def recorder() -> HookRecorder:
    """Create hook recorder."""
    return HookRecorder()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Create recording sleep."""
    return RecordingSleep()


@pytest.fixture
def make_config(fake_provider, recorder):
    """Factory for configurations wired to the fake provider and recorder."""

    def _make(**overrides):
        options = {"provider": fake_provider, **recorder.hooks()}
        options.update(overrides)
        return build_configuration(**options)

    return _make


@pytest.fixture
def make_supervisor(make_config, recording_sleep):
    """Factory for supervisors that never really sleep."""

    def _make(**overrides):
        return ConnectionSupervisor(
            make_config(**overrides),
            scheduler=RetryScheduler(sleep=recording_sleep),
        )

    return _make
