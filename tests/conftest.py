"""pytest configuration and fixtures for iopipe_generic tests.

This module provides shared fixtures: a fake platform context, a fresh
TelemetryBridge, and a clean GenericHandler singleton.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from iopipe_generic import TelemetryBridge


class FakeLambdaContext:
    """Stand-in for the AWS Lambda context object.

    Does not inherit from Context, it matches structurally like the real
    runtime's context does.
    """

    def __init__(self, aws_request_id: str = "req-123", remaining_ms: int = 30_000) -> None:
        self.aws_request_id = aws_request_id
        self.function_name = "test-function"
        self._remaining_ms = remaining_ms

    def get_remaining_time_in_millis(self) -> int:
        return self._remaining_ms


@pytest.fixture
def lambda_context() -> FakeLambdaContext:
    """Provide a fake platform context."""
    return FakeLambdaContext()


@pytest.fixture
def telemetry_bridge() -> Generator[TelemetryBridge, None, None]:
    """Provide a fresh, started TelemetryBridge for each test."""
    from iopipe_generic import TelemetryBridge

    TelemetryBridge.reset_instance()
    bridge = TelemetryBridge.instance()
    bridge.start()
    yield bridge
    bridge.stop()
    TelemetryBridge.reset_instance()


@pytest.fixture
def clean_runtime() -> Generator[None, None, None]:
    """Reset the GenericHandler singleton around a test."""
    from iopipe_generic.runtime import GenericHandler

    GenericHandler.reset_instance()
    yield
    GenericHandler.reset_instance()


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow running",
    )
