"""Configuration loading and validation."""

from __future__ import annotations

import os

from dotenv import load_dotenv

from models import Config

GRAPHQL_URL = "https://api.github.com/graphql"

# Repository and paging are fixed for the dashboard this database feeds
REPOSITORY_OWNER = "godotengine"
REPOSITORY_NAME = "godot"
PULLS_PER_PAGE = 100

DEFAULT_OUTPUT_PATH = "out/data.json"

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Loads from .env file if present, then reads optional environment variables.
    Nothing is required: without GITHUB_TOKEN requests are sent unauthenticated
    and get a much lower rate limit.

    Returns:
        Config object with validated configuration values

    Raises:
        ValueError: If an environment variable has an invalid value
    """
    # Load .env file if it exists
    load_dotenv()

    github_token = os.getenv("GITHUB_TOKEN") or None

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    if log_level not in LOG_LEVELS:
        msg = (
            f"Invalid LOG_LEVEL '{log_level}'. "
            "Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
        raise ValueError(msg)

    output_path = os.getenv("OUTPUT_PATH", DEFAULT_OUTPUT_PATH).strip()
    if not output_path:
        msg = "OUTPUT_PATH cannot be empty"
        raise ValueError(msg)

    api_timeout_str = os.getenv("API_TIMEOUT")
    api_timeout = None
    if api_timeout_str:
        try:
            api_timeout = int(api_timeout_str)
            if api_timeout <= 0:
                msg = "API_TIMEOUT must be a positive integer"
                raise ValueError(msg)
        except ValueError as e:
            msg = f"Invalid API_TIMEOUT '{api_timeout_str}'. Must be a positive integer."
            raise ValueError(msg) from e

    return Config(
        github_token=github_token,
        log_level=log_level,
        output_path=output_path,
        api_timeout=api_timeout,
        repository_owner=REPOSITORY_OWNER,
        repository_name=REPOSITORY_NAME,
        pulls_per_page=PULLS_PER_PAGE,
    )
