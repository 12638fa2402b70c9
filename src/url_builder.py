"""GitHub URL generation utilities."""

from __future__ import annotations

GITHUB_URL = "https://github.com"


def build_issue_url(repo: str, issue_number: str | int) -> str:
    """
    Build the canonical URL of an issue.

    Args:
        repo: Repository in 'owner/name' form (e.g., "godotengine/godot")
        issue_number: Issue number

    Returns:
        Issue URL (https://github.com/owner/name/issues/123)

    Example:
        >>> build_issue_url("godotengine/godot", 123)
        'https://github.com/godotengine/godot/issues/123'
    """
    return f"{GITHUB_URL}/{repo}/issues/{issue_number}"


def build_diff_url(pull_url: str) -> str:
    """Build the URL of the plain diff for a pull request."""
    return f"{pull_url}.diff"


def build_patch_url(pull_url: str) -> str:
    """Build the URL of the mailbox patch for a pull request."""
    return f"{pull_url}.patch"
