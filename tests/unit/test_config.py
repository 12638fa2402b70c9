"""Unit tests for configuration loading."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from config import load_config


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_defaults(self):
        """Test config loading with no environment variables set."""
        with (
            patch("config.load_dotenv"),
            patch.dict(os.environ, {}, clear=True),
        ):
            config = load_config()
            assert config.github_token is None
            assert config.log_level == "INFO"
            assert config.output_path == "out/data.json"
            assert config.api_timeout is None
            assert config.repository == "godotengine/godot"
            assert config.pulls_per_page == 100

    def test_load_config_with_optional_vars(self):
        """Test config loading with optional variables set."""
        with (
            patch("config.load_dotenv"),
            patch.dict(
                os.environ,
                {
                    "GITHUB_TOKEN": "ghp_test123",
                    "LOG_LEVEL": "debug",
                    "OUTPUT_PATH": "build/pulls.json",
                    "API_TIMEOUT": "30",
                },
                clear=True,
            ),
        ):
            config = load_config()
            assert config.github_token == "ghp_test123"
            assert config.log_level == "DEBUG"
            assert config.output_path == "build/pulls.json"
            assert config.api_timeout == 30

    def test_empty_token_is_anonymous(self):
        """Test an empty GITHUB_TOKEN is treated as unset."""
        with (
            patch("config.load_dotenv"),
            patch.dict(os.environ, {"GITHUB_TOKEN": ""}, clear=True),
        ):
            assert load_config().github_token is None

    def test_load_config_invalid_log_level(self):
        """Test error when LOG_LEVEL is not a known level."""
        with (
            patch("config.load_dotenv"),
            patch.dict(os.environ, {"LOG_LEVEL": "VERBOSE"}, clear=True),
            pytest.raises(ValueError, match="Invalid LOG_LEVEL"),
        ):
            load_config()

    def test_load_config_empty_output_path(self):
        """Test error when OUTPUT_PATH is blank."""
        with (
            patch("config.load_dotenv"),
            patch.dict(os.environ, {"OUTPUT_PATH": "   "}, clear=True),
            pytest.raises(ValueError, match="OUTPUT_PATH cannot be empty"),
        ):
            load_config()

    @pytest.mark.parametrize("value", ["abc", "0", "-5"])
    def test_load_config_invalid_api_timeout(self, value):
        """Test error when API_TIMEOUT is not a positive integer."""
        with (
            patch("config.load_dotenv"),
            patch.dict(os.environ, {"API_TIMEOUT": value}, clear=True),
            pytest.raises(ValueError, match="Invalid API_TIMEOUT"),
        ):
            load_config()

    def test_load_config_reads_dotenv(self):
        """Test that .env loading is attempted."""
        with (
            patch("config.load_dotenv") as mock_load_dotenv,
            patch.dict(os.environ, {}, clear=True),
        ):
            load_config()
            mock_load_dotenv.assert_called_once()
