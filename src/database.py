"""Building and storing the local pull request database."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from github_client import GitHubClient
from models import PipelineState
from normalizer import process_pulls

logger = logging.getLogger(__name__)


def build_database(client: GitHubClient, state: PipelineState | None = None) -> PipelineState:
    """
    Fetch and normalize all open pull requests, one page at a time.

    Rate limits are checked before and after the fetch loop for information
    only. The loop bound is re-read on every iteration, so the first response
    can extend it once the total number of pull requests is known.

    A failed page contributes no pulls and does not move the cursor, while the
    page index still advances: the next iteration requests the page after the
    last successful one, and the run may end before the final page is fetched.

    Args:
        client: GitHub client used for every request
        state: Pipeline state to fill (default: a fresh state)

    Returns:
        The filled pipeline state

    Raises:
        KeyError, TypeError: If a pull request node is malformed
    """
    if state is None:
        state = PipelineState()

    logger.info("Checking the rate limits before.")
    client.check_rate_limit()

    logger.info("Fetching pull request data from GitHub.")
    # Pages start with 1 for better presentation
    page = 1
    while page <= state.page_count:
        pulls_data = client.fetch_pulls(state, page)
        process_pulls(state, pulls_data)
        page += 1

    logger.info("Checking the rate limits after.")
    client.check_rate_limit()

    logger.info(
        f"Collected {len(state.pulls)} pull requests from {len(state.authors)} authors, "
        f"{len(state.teams)} teams and {len(state.reviewers)} reviewers"
    )
    return state


def build_snapshot(state: PipelineState, generated_at: int | None = None) -> dict[str, Any]:
    """
    Assemble the JSON document stored for the dashboard.

    Args:
        state: Filled pipeline state
        generated_at: Generation time in epoch milliseconds (default: now)

    Returns:
        Dict with generated_at, teams, reviewers, authors and pulls
    """
    if generated_at is None:
        generated_at = int(time.time() * 1000)

    return {"generated_at": generated_at, **state.to_dict()}


def write_database(snapshot: dict[str, Any], output_path: str | Path) -> bool:
    """
    Write the database snapshot as UTF-8 JSON, replacing any existing file.

    Args:
        snapshot: Document built by build_snapshot
        output_path: Destination file path

    Returns:
        True if the file was written, False if writing failed (error is logged)
    """
    path = Path(output_path)
    try:
        logger.info(f"Storing database to {path}.")
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(snapshot, f, ensure_ascii=False)
    except OSError as e:
        logger.error(f"Error saving database file: {e}")
        return False

    return True
