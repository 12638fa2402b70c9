"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Any

import pytest

from models import Config, PipelineState


@pytest.fixture
def sample_config() -> Config:
    """Provide a sample Config object for testing."""
    return Config(
        github_token="ghp_test_token_1234567890",
        log_level="DEBUG",
        output_path="out/data.json",
    )


@pytest.fixture
def state() -> PipelineState:
    """Provide an empty pipeline state."""
    return PipelineState()


@pytest.fixture
def rate_limit_payload() -> dict[str, Any]:
    """Provide the JSON body of a rate limit only response."""
    return {
        "data": {
            "rateLimit": {
                "limit": 5000,
                "cost": 1,
                "remaining": 4999,
                "resetAt": "2024-05-01T11:00:00Z",
            }
        }
    }
