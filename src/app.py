"""Main application entry point for the pull request database builder."""

from __future__ import annotations

import logging
import sys

from config import load_config
from database import build_database, build_snapshot, write_database
from github_client import GitHubClient


def setup_logging(log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main() -> int:
    """
    Build the local pull request database and store it to a JSON file.

    Failed requests and a failed file write are logged but do not change the
    exit code; only an unexpected error (e.g., a malformed pull request) does.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        config = load_config()
        setup_logging(config.log_level)
        logger = logging.getLogger(__name__)

        logger.info("Building local pull request database.")
        if not config.github_token:
            logger.warning("GITHUB_TOKEN is not set; using unauthenticated requests")
        logger.debug(
            f"Configuration: repository={config.repository}, "
            f"output={config.output_path}, log_level={config.log_level}"
        )

        github_client = GitHubClient(
            token=config.github_token,
            repository_owner=config.repository_owner,
            repository_name=config.repository_name,
            pulls_per_page=config.pulls_per_page,
            timeout=config.api_timeout,
        )

        state = build_database(github_client)

        logger.info("Finalizing database.")
        snapshot = build_snapshot(state)
        if write_database(snapshot, config.output_path):
            logger.info(f"✅ Database stored to {config.output_path}")

        # Log API metrics
        metrics = github_client.metrics
        logger.info("API Metrics:")
        logger.info(f"  GraphQL calls: {metrics.graphql_calls}")
        logger.info(f"  Failed calls: {metrics.failed_calls}")
        logger.info(f"  Total cost: {metrics.total_cost}")
        logger.info(f"  Success rate: {metrics.success_rate:.1f}%")

        return 0

    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        logger = logging.getLogger(__name__)
        logger.error(f"❌ Error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
