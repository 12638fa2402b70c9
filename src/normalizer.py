"""Normalization of raw pull request nodes into the local database shape."""

from __future__ import annotations

import logging
from typing import Any

from link_extractor import extract_linked_issues
from models import (
    Author,
    Label,
    Milestone,
    PipelineState,
    Pull,
    RequestedReviewer,
    Reviewer,
    ReviewerKind,
    Team,
)
from url_builder import build_diff_url, build_patch_url

logger = logging.getLogger(__name__)

NO_TEAM_ID = ""
NO_TEAM_NAME = "No team assigned"
NO_TEAM_SLUG = "_"


def map_nodes(connection: dict[str, Any]) -> list[dict[str, Any]]:
    """Unwrap the nodes of a GraphQL connection's edges."""
    return [edge["node"] for edge in connection["edges"]]


def parse_requested_reviewers(pull_data: dict[str, Any]) -> list[RequestedReviewer]:
    """
    Resolve review requests of a pull request into typed variants.

    Requests whose reviewer is no longer available (null) are dropped.
    """
    requested = []
    for request in map_nodes(pull_data["reviewRequests"]):
        reviewer_data = request.get("requestedReviewer")
        if not reviewer_data:
            continue
        kind = ReviewerKind.from_typename(reviewer_data.get("__typename"))
        requested.append(RequestedReviewer(kind=kind, payload=reviewer_data))
    return requested


def _build_pull(pull_data: dict[str, Any], authored_by: str) -> Pull:
    return Pull(
        id=pull_data["id"],
        public_id=pull_data["number"],
        url=pull_data["url"],
        diff_url=build_diff_url(pull_data["url"]),
        patch_url=build_patch_url(pull_data["url"]),
        title=pull_data["title"],
        state=pull_data["state"],
        is_draft=pull_data["isDraft"],
        authored_by=authored_by,
        created_at=pull_data["createdAt"],
        updated_at=pull_data["updatedAt"],
        target_branch=pull_data["baseRef"]["name"],
        mergeable_state=pull_data["mergeable"],
        mergeable_reason=pull_data["mergeStateStatus"],
    )


def _resolve_author(state: PipelineState, author_data: dict[str, Any]) -> Author:
    author = state.authors.get(author_data["id"])
    if author is None:
        author = Author(
            id=author_data["id"],
            user=author_data["login"],
            avatar=author_data["avatarUrl"],
            url=author_data["url"],
        )
        state.authors[author.id] = author
    author.pull_count += 1
    return author


def _build_milestone(milestone_data: dict[str, Any] | None) -> Milestone | None:
    if not milestone_data:
        return None
    return Milestone(
        id=milestone_data["id"],
        title=milestone_data["title"],
        url=milestone_data["url"],
    )


def _build_labels(pull_data: dict[str, Any]) -> list[Label]:
    labels = [
        Label(id=label["id"], name=label["name"], color=f"#{label['color']}")
        for label in map_nodes(pull_data["labels"])
    ]
    # Stable sort, so labels with equal names keep the API order
    return sorted(labels, key=lambda label: label.name)


def _resolve_team(state: PipelineState, team_data: dict[str, Any]) -> Team:
    """
    Get the stored team for a review request, creating it on first sight.

    Full name and slug include the parent team, if any (e.g., 'parent/child').
    """
    team = state.teams.get(team_data["id"])
    if team is None:
        full_name = team_data["name"]
        full_slug = team_data["slug"]
        parent_team = team_data.get("parentTeam")
        if parent_team:
            full_name = f"{parent_team['name']}/{team_data['name']}"
            full_slug = f"{parent_team['slug']}/{team_data['slug']}"

        team = Team(
            id=team_data["id"],
            name=team_data["name"],
            avatar=team_data["avatarUrl"],
            slug=team_data["slug"],
            full_name=full_name,
            full_slug=full_slug,
        )
        state.teams[team.id] = team
    team.pull_count += 1
    return team


def _resolve_no_team(state: PipelineState) -> Team:
    """Get the sentinel team that tracks pulls without any requested team."""
    team = state.teams.get(NO_TEAM_ID)
    if team is None:
        team = Team(
            id=NO_TEAM_ID,
            name=NO_TEAM_NAME,
            avatar="",
            slug=NO_TEAM_SLUG,
            full_name=NO_TEAM_NAME,
            full_slug=NO_TEAM_SLUG,
        )
        state.teams[team.id] = team
    team.pull_count += 1
    return team


def _resolve_reviewer(state: PipelineState, reviewer_data: dict[str, Any]) -> Reviewer:
    reviewer = state.reviewers.get(reviewer_data["id"])
    if reviewer is None:
        reviewer = Reviewer(
            id=reviewer_data["id"],
            name=reviewer_data["login"],
            avatar=reviewer_data["avatarUrl"],
            slug=reviewer_data["login"],
        )
        state.reviewers[reviewer.id] = reviewer
    reviewer.pull_count += 1
    return reviewer


def process_pull(state: PipelineState, pull_data: dict[str, Any]) -> Pull:
    """
    Normalize a single pull request node and record it in the state.

    Args:
        state: Pipeline state holding the lookup tables and pull list
        pull_data: Raw pullRequest node from the GraphQL response

    Returns:
        The Pull appended to state.pulls

    Raises:
        KeyError, TypeError: If the node lacks required fields (e.g., a null author)
    """
    author = _resolve_author(state, pull_data["author"])
    pull = _build_pull(pull_data, author.id)

    pull.milestone = _build_milestone(pull_data.get("milestone"))
    pull.labels = _build_labels(pull_data)
    pull.links = extract_linked_issues(pull_data.get("body"))

    requested = parse_requested_reviewers(pull_data)
    requested_teams = [r.payload for r in requested if r.kind is ReviewerKind.TEAM]
    requested_users = [r.payload for r in requested if r.kind is ReviewerKind.USER]

    if requested_teams:
        for team_data in requested_teams:
            pull.teams.append(_resolve_team(state, team_data).id)
    else:
        pull.teams.append(_resolve_no_team(state).id)

    for reviewer_data in requested_users:
        pull.reviewers.append(_resolve_reviewer(state, reviewer_data).id)

    state.pulls.append(pull)
    return pull


def process_pulls(state: PipelineState, pulls_data: list[dict[str, Any]]) -> None:
    """
    Normalize one page of pull request nodes into the pipeline state.

    Pulls are appended in the order they were received. Authors, teams and
    reviewers are shared across pulls and their pull counts incremented.
    Malformed nodes are not recovered from; the error propagates.

    Args:
        state: Pipeline state to update
        pulls_data: Raw pullRequest nodes of one page
    """
    for pull_data in pulls_data:
        pull = process_pull(state, pull_data)
        logger.debug(
            f"  Processed #{pull.public_id}: {len(pull.labels)} labels, "
            f"{len(pull.links)} links, {len(pull.teams)} teams, {len(pull.reviewers)} reviewers"
        )
