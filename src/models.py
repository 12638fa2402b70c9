"""Data models for the pull request database builder."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


@dataclass
class Config:
    """Application configuration from environment variables."""

    github_token: str | None
    """GitHub token for authenticated API access (None for anonymous requests)"""

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"""

    output_path: str = "out/data.json"
    """Path of the JSON database file"""

    api_timeout: int | None = None
    """Request timeout in seconds (None uses the transport default)"""

    repository_owner: str = "godotengine"
    """Owner of the repository to scan"""

    repository_name: str = "godot"
    """Name of the repository to scan"""

    pulls_per_page: int = 100
    """Number of pull requests requested per GraphQL page"""

    @property
    def repository(self) -> str:
        """Full repository name (e.g., 'godotengine/godot')."""
        return f"{self.repository_owner}/{self.repository_name}"


@dataclass
class Author:
    """Author of one or more pull requests."""

    id: str
    user: str
    """GitHub login of the author"""

    avatar: str
    url: str
    pull_count: int = 0


@dataclass
class Team:
    """A GitHub team requested for review."""

    id: str
    name: str
    avatar: str
    slug: str
    full_name: str
    """Team name prefixed with the parent team name (e.g., 'core/rendering')"""

    full_slug: str
    """Team slug prefixed with the parent team slug"""

    pull_count: int = 0


@dataclass
class Reviewer:
    """An individual user requested for review."""

    id: str
    name: str
    avatar: str
    slug: str
    pull_count: int = 0


@dataclass
class Milestone:
    """Milestone embedded into a pull request."""

    id: str
    title: str
    url: str


@dataclass
class Label:
    """Label attached to a pull request."""

    id: str
    name: str
    color: str
    """Hex color with a leading '#'"""


@dataclass
class Link:
    """Issue referenced by a closing keyword in a pull request body."""

    full_match: str
    """Text matched in the body, verbatim"""

    keyword: str
    """Normalized keyword: 'closes', 'fixes' or 'resolves'"""

    repo: str
    """Repository of the issue (e.g., 'godotengine/godot')"""

    issue: str
    """Issue number as written in the body"""

    url: str
    """Canonical issue URL"""


@dataclass
class Pull:
    """A simplified open pull request."""

    id: str
    public_id: int
    """Pull request number within the repository"""

    url: str
    diff_url: str
    patch_url: str
    title: str
    state: str
    is_draft: bool
    authored_by: str
    """Id of the entry in the authors table"""

    created_at: str
    updated_at: str
    target_branch: str
    mergeable_state: str
    mergeable_reason: str
    milestone: Milestone | None = None
    labels: list[Label] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    teams: list[str] = field(default_factory=list)
    """Ids of requested teams; the no-team sentinel id is '' """

    reviewers: list[str] = field(default_factory=list)
    """Ids of individually requested reviewers"""


class ReviewerKind(Enum):
    """Kind of a requested reviewer, resolved from the GraphQL __typename."""

    TEAM = "Team"
    USER = "User"
    OTHER = "Other"

    @classmethod
    def from_typename(cls, typename: str | None) -> ReviewerKind:
        """Map a GraphQL __typename to a kind; unknown names become OTHER."""
        for kind in (cls.TEAM, cls.USER):
            if kind.value == typename:
                return kind
        return cls.OTHER


@dataclass
class RequestedReviewer:
    """A review request target with its kind resolved."""

    kind: ReviewerKind
    payload: dict[str, Any]
    """Raw requestedReviewer node from the API"""


@dataclass
class RateLimit:
    """GitHub GraphQL rate limit information."""

    limit: int
    cost: int
    remaining: int
    reset_at: str
    """ISO timestamp when the quota resets"""


@dataclass
class APICallMetrics:
    """Track GraphQL usage over a run."""

    graphql_calls: int = 0
    """Number of GraphQL requests issued"""

    failed_calls: int = 0
    """Number of requests that produced no usable data"""

    total_cost: int = 0
    """Sum of reported query costs"""

    @property
    def success_rate(self) -> float:
        """
        Calculate percentage of successful API calls.

        Returns 100.0 if no calls made.
        """
        if self.graphql_calls == 0:
            return 100.0
        successful = self.graphql_calls - self.failed_calls
        return (successful / self.graphql_calls) * 100


@dataclass
class PipelineState:
    """Accumulated lookup tables and pagination state of one run."""

    teams: dict[str, Team] = field(default_factory=dict)
    reviewers: dict[str, Reviewer] = field(default_factory=dict)
    authors: dict[str, Author] = field(default_factory=dict)
    pulls: list[Pull] = field(default_factory=list)

    last_cursor: str = ""
    """End cursor of the last successfully fetched page"""

    page_count: int = 1
    """Total number of pages; recalculated after every successful page"""

    def to_dict(self) -> dict[str, Any]:
        """Serialize the lookup tables and pulls into plain JSON-ready values."""
        return {
            "teams": {key: asdict(team) for key, team in self.teams.items()},
            "reviewers": {key: asdict(reviewer) for key, reviewer in self.reviewers.items()},
            "authors": {key: asdict(author) for key, author in self.authors.items()},
            "pulls": [asdict(pull) for pull in self.pulls],
        }
