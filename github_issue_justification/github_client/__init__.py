"""GitHub client package for API interaction."""

from .app import AccessTokenProvider, GitHubApp, read_private_key
from .client import GitHubClient
from .issue_url import ISSUE_URL_PATTERN, parse_issue_url
from .models import IssueReference, IssueSnapshot, TokenScope

__all__ = [
    "AccessTokenProvider",
    "GitHubApp",
    "GitHubClient",
    "ISSUE_URL_PATTERN",
    "IssueReference",
    "IssueSnapshot",
    "TokenScope",
    "parse_issue_url",
    "read_private_key",
]
