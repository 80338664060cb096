"""Tests for the robust_connection() entry point."""

import pytest

import robust_connection
from robust_connection import (
    ConnectionFailedError,
    InvalidConfigurationError,
    LogOnlyStrategy,
)


class TestRobustConnection:
    """Test the package level helper."""

    @pytest.mark.asyncio
    async def test_returns_initial_handle(self, fake_provider, recorder):
        """Test helper resolves with the first handle after on_connect."""
        handle = await robust_connection.robust_connection(
            fake_provider,
            recorder.on_connect,
            recorder.on_disconnect,
            retry_interval=0,
        )

        assert handle == "handle-1"
        assert recorder.args("connect") == [("handle-1",)]

    @pytest.mark.asyncio
    async def test_retries_before_resolving(self, fake_provider, recorder):
        """Test transient failures are retried."""
        fake_provider.fail_next_connect(times=2)

        handle = await robust_connection.robust_connection(
            fake_provider,
            recorder.on_connect,
            recorder.on_disconnect,
            on_retry_failure=recorder.on_retry_failure,
            retry_interval=0,
            retry_attempts=5,
        )

        assert handle == "handle-1"
        assert fake_provider.connect_calls == 3
        assert [args[1] for args in recorder.args("retry_failure")] == [4, 3]

    @pytest.mark.asyncio
    async def test_initial_failure_raises(self, fake_provider, recorder):
        """Test exhausted initial connection raises after on_failure."""
        fake_provider.fail_always()

        with pytest.raises(ConnectionFailedError) as exc_info:
            await robust_connection.robust_connection(
                fake_provider,
                recorder.on_connect,
                recorder.on_disconnect,
                on_failure=recorder.on_failure,
                retry_interval=0,
                retry_attempts=2,
            )

        assert recorder.count("failure") == 1
        assert isinstance(exc_info.value.cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_invalid_options_raise(self, fake_provider, recorder):
        """Test invalid options are rejected before connecting."""
        with pytest.raises(InvalidConfigurationError):
            await robust_connection.robust_connection(
                fake_provider,
                recorder.on_connect,
                recorder.on_disconnect,
                retry_attempts=-1,
            )

        assert fake_provider.connect_calls == 0

    @pytest.mark.asyncio
    async def test_log_only_strategy_keeps_running(self, fake_provider, recorder):
        """Test a non-exiting strategy leaves the caller in control."""
        fake_provider.fail_always()

        with pytest.raises(ConnectionFailedError):
            await robust_connection.robust_connection(
                fake_provider,
                recorder.on_connect,
                recorder.on_disconnect,
                on_failure=LogOnlyStrategy(),
                retry_interval=0,
                retry_attempts=1,
            )

    def test_public_api(self):
        """Test the public names are exported."""
        for name in robust_connection.__all__:
            assert hasattr(robust_connection, name)
