"""Extraction of linked issues from pull request bodies."""

from __future__ import annotations

import logging
import re

from config import REPOSITORY_NAME, REPOSITORY_OWNER
from models import Link
from url_builder import GITHUB_URL, build_issue_url

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY = f"{REPOSITORY_OWNER}/{REPOSITORY_NAME}"

# https://docs.github.com/en/issues/tracking-your-work-with-issues/linking-a-pull-request-to-an-issue
MAGIC_KEYWORDS = [
    "close", "closes", "closed",
    "fix", "fixes", "fixed",
    "resolve", "resolves", "resolved",
]

# Canonical keyword by prefix of the matched keyword
KEYWORD_PREFIXES = [
    ("clo", "closes"),
    ("fix", "fixes"),
    ("reso", "resolves"),
]

# Grammar pieces: KEYWORD, optional OWNER/REPO qualifier, issue NUMBER
_KEYWORD = r"(?P<keyword>" + "|".join(MAGIC_KEYWORDS) + ")"
_REPOSITORY = r"(?P<repo>[a-z0-9\-_]+/[a-z0-9\-_]+)"
_NUMBER = r"(?P<issue>[0-9]+)"

SHORTHAND_RE = re.compile(
    rf"{_KEYWORD} (?:{_REPOSITORY})?#{_NUMBER}",
    re.IGNORECASE,
)
FULL_URL_RE = re.compile(
    rf"{_KEYWORD} {re.escape(GITHUB_URL)}/{_REPOSITORY}/issues/{_NUMBER}",
    re.IGNORECASE,
)


def normalize_keyword(keyword: str) -> str:
    """
    Collapse tense and plural variants of a closing keyword.

    Args:
        keyword: Matched keyword in any case (e.g., "Fixed", "CLOSE")

    Returns:
        'closes', 'fixes' or 'resolves'
    """
    keyword = keyword.lower()
    return next(
        canonical for prefix, canonical in KEYWORD_PREFIXES if keyword.startswith(prefix)
    )


def extract_linked_issues(pull_body: str | None) -> list[Link]:
    """
    Find issues referenced with closing keywords in a pull request body.

    Both shorthand references ("fixes #123", "closes owner/repo#45") and full
    issue URLs ("resolves https://github.com/owner/repo/issues/67") are
    recognized. Shorthand matches come first, then URL matches, each in order
    of appearance. Links are deduplicated by issue URL and the first match wins.

    Args:
        pull_body: Body text of the pull request (may be None or empty)

    Returns:
        List of Link objects
    """
    links: list[Link] = []
    if not pull_body:
        return links

    matches = [
        *SHORTHAND_RE.finditer(pull_body),
        *FULL_URL_RE.finditer(pull_body),
    ]

    seen_urls: set[str] = set()
    for match in matches:
        repository = match.group("repo") or DEFAULT_REPOSITORY
        issue_number = match.group("issue")
        issue_url = build_issue_url(repository, issue_number)

        if issue_url in seen_urls:
            continue
        seen_urls.add(issue_url)

        links.append(
            Link(
                full_match=match.group(0),
                keyword=normalize_keyword(match.group("keyword")),
                repo=repository,
                issue=issue_number,
                url=issue_url,
            )
        )

    logger.debug(f"Extracted {len(links)} linked issues from {len(matches)} matches")
    return links
