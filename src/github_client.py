"""GitHub GraphQL client for fetching open pull requests and rate limits."""

from __future__ import annotations

import logging
import math
from typing import Any

import requests

from config import GRAPHQL_URL, PULLS_PER_PAGE, REPOSITORY_NAME, REPOSITORY_OWNER
from models import APICallMetrics, PipelineState, RateLimit
from normalizer import map_nodes

logger = logging.getLogger(__name__)

# Enables the mergeStateStatus field on pull requests
MERGE_INFO_PREVIEW = "application/vnd.github.merge-info-preview+json"

RATE_LIMIT_FIELDS = """
  rateLimit {
    limit
    cost
    remaining
    resetAt
  }
"""

LOW_QUOTA_THRESHOLD = 100


class GitHubClient:
    """
    Client for the GitHub GraphQL API.

    Every call is a single POST with a query string; there is no retry. Failed
    calls are logged and reported to the caller as empty results, so a run is
    always best-effort.
    """

    def __init__(
        self,
        token: str | None = None,
        repository_owner: str = REPOSITORY_OWNER,
        repository_name: str = REPOSITORY_NAME,
        pulls_per_page: int = PULLS_PER_PAGE,
        timeout: int | None = None,
    ) -> None:
        """
        Initialize GitHub client.

        Args:
            token: GitHub token; requests are sent unauthenticated when None
            repository_owner: Owner of the repository to scan (default: godotengine)
            repository_name: Name of the repository to scan (default: godot)
            pulls_per_page: Pull requests requested per page (default: 100)
            timeout: Request timeout in seconds (default: None, no timeout)
        """
        self.token = token
        self.repository_owner = repository_owner
        self.repository_name = repository_name
        self.pulls_per_page = pulls_per_page
        self.timeout = timeout
        self.metrics = APICallMetrics()

    @property
    def repository_id(self) -> str:
        """GraphQL arguments identifying the repository."""
        return f'owner:"{self.repository_owner}" name:"{self.repository_name}"'

    def _build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": MERGE_INFO_PREVIEW,
        }
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _post_query(self, query: str) -> requests.Response:
        """
        Send a GraphQL query.

        Args:
            query: GraphQL query string

        Returns:
            Raw HTTP response (status is not checked here)

        Raises:
            requests.RequestException: If the request could not be completed
        """
        self.metrics.graphql_calls += 1
        return requests.post(
            GRAPHQL_URL,
            json={"query": query},
            headers=self._build_headers(),
            timeout=self.timeout,
        )

    def _handle_errors(self, data: dict[str, Any]) -> None:
        """Log GraphQL errors reported alongside an otherwise successful response."""
        errors = data.get("errors")
        if errors is None:
            return

        logger.warning("Server handled the request, but there were errors:")
        for error in errors:
            logger.warning(f"  [{error.get('type')}] {error.get('message')}")

    def _record_cost(self, rate_data: dict[str, Any]) -> RateLimit:
        rate_limit = RateLimit(
            limit=rate_data["limit"],
            cost=rate_data["cost"],
            remaining=rate_data["remaining"],
            reset_at=rate_data["resetAt"],
        )
        self.metrics.total_cost += rate_limit.cost
        return rate_limit

    def check_rate_limit(self) -> RateLimit | None:
        """
        Query and log the current GraphQL rate limit.

        Purely informational: failures are logged and never affect the run.

        Returns:
            RateLimit with current quota info, or None if the check failed
        """
        query = f"""
        query {{
          {RATE_LIMIT_FIELDS}
        }}
        """

        try:
            response = self._post_query(query)
            if response.status_code != 200:
                logger.warning(
                    f"Failed to get the API rate limits; "
                    f"server responded with code {response.status_code}"
                )
                self.metrics.failed_calls += 1
                return None

            data = response.json()
            self._handle_errors(data)

            rate_limit = self._record_cost(data["data"]["rateLimit"])

        except (
            requests.RequestException,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
        ) as e:
            logger.error(f"Error checking the API rate limits: {e}")
            self.metrics.failed_calls += 1
            return None

        logger.info(
            f"[${rate_limit.cost}] Available API calls: "
            f"{rate_limit.remaining}/{rate_limit.limit}; resets at {rate_limit.reset_at}"
        )
        if rate_limit.remaining < LOW_QUOTA_THRESHOLD:
            logger.warning(
                f"⚠️  GitHub API rate limit is low: {rate_limit.remaining}/{rate_limit.limit} "
                f"remaining. Consider setting GITHUB_TOKEN or running later."
            )
        return rate_limit

    def build_pulls_query(self, last_cursor: str = "") -> str:
        """
        Build the GraphQL query for one page of open pull requests.

        Args:
            last_cursor: End cursor of the previous page; empty for the first page

        Returns:
            GraphQL query string
        """
        after_cursor = ""
        if last_cursor:
            after_cursor = f'after: "{last_cursor}"'

        return f"""
        query {{
          {RATE_LIMIT_FIELDS}
          repository({self.repository_id}) {{
            pullRequests(first:{self.pulls_per_page} {after_cursor} states: OPEN) {{
              totalCount
              pageInfo {{
                endCursor
                hasNextPage
              }}
              edges {{
                node {{
                  id
                  number
                  url
                  title
                  state
                  isDraft
                  mergeable
                  mergeStateStatus
                  createdAt
                  updatedAt

                  body

                  baseRef {{
                    name
                  }}

                  author {{
                    login
                    avatarUrl
                    url

                    ... on User {{
                      id
                    }}
                  }}

                  milestone {{
                    id
                    title
                    url
                  }}

                  labels(first: 100) {{
                    edges {{
                      node {{
                        id
                        name
                        color
                      }}
                    }}
                  }}

                  reviewRequests(first: 100) {{
                    edges {{
                      node {{
                        id
                        requestedReviewer {{
                          __typename

                          ... on Team {{
                            id
                            name
                            avatarUrl
                            slug

                            parentTeam {{
                              name
                              slug
                            }}
                          }}

                          ... on User {{
                            id
                            login
                            avatarUrl
                          }}
                        }}
                      }}
                    }}
                  }}
                }}
              }}
            }}
          }}
        }}
        """

    def fetch_pulls(self, state: PipelineState, page: int) -> list[dict[str, Any]]:
        """
        Fetch one page of open pull requests after the state's last cursor.

        On success the state's cursor and page count are updated from the
        response. On any failure nothing is updated and an empty list is
        returned, which the caller cannot tell apart from an empty page.

        Args:
            state: Pipeline state holding the pagination cursor and page count
            page: 1-based page index, used for logging

        Returns:
            List of raw pullRequest nodes
        """
        query = self.build_pulls_query(state.last_cursor)

        page_text = str(page)
        if state.page_count > 1:
            page_text = f"{page}/{state.page_count}"
        logger.info(f"Requesting page {page_text} of pull request data.")

        try:
            response = self._post_query(query)
            if response.status_code != 200:
                logger.warning(
                    f"Failed to get pull requests for '{self.repository_owner}/"
                    f"{self.repository_name}'; server responded with code {response.status_code}"
                )
                self.metrics.failed_calls += 1
                return []

            data = response.json()
            self._handle_errors(data)

            rate_limit = self._record_cost(data["data"]["rateLimit"])
            pull_requests = data["data"]["repository"]["pullRequests"]
            pulls_data = map_nodes(pull_requests)

            logger.info(
                f"[${rate_limit.cost}] Retrieved {len(pulls_data)} pull requests; processing..."
            )

            state.last_cursor = pull_requests["pageInfo"]["endCursor"] or ""
            state.page_count = math.ceil(pull_requests["totalCount"] / self.pulls_per_page)

            return pulls_data

        except (
            requests.RequestException,
            ValueError,
            KeyError,
            TypeError,
            AttributeError,
        ) as e:
            logger.error(f"Error fetching pull request data: {e}")
            self.metrics.failed_calls += 1
            return []
