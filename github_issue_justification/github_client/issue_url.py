"""Parse GitHub issue URLs into issue references."""

import re

from ..errors import MalformedIssueURLError
from .models import IssueReference

ISSUE_URL_PATTERN = r"^https://github\.com/([a-zA-Z0-9-]+)/([a-zA-Z0-9-]+)/issues/([0-9]+)$"

_ISSUE_URL_RE = re.compile(ISSUE_URL_PATTERN)

MAX_ISSUE_NUMBER = 2**63 - 1


def parse_issue_url(issue_url: str) -> IssueReference:
    """Extract owner, repository and issue number from an issue URL.

    Args:
        issue_url: URL such as ``https://github.com/owner/repo/issues/42``

    Returns:
        The parsed IssueReference

    Raises:
        MalformedIssueURLError: If the URL does not match ISSUE_URL_PATTERN
            or the issue number is larger than MAX_ISSUE_NUMBER
    """
    # fullmatch so a trailing newline is not accepted by "$"
    match = _ISSUE_URL_RE.fullmatch(issue_url)
    if not match:
        raise MalformedIssueURLError(
            f"issue url doesn't match pattern: {ISSUE_URL_PATTERN}"
        )

    owner, repository, number = match.groups()
    # Issue numbers are signed 64-bit on the API side.
    digits = number.lstrip("0") or "0"
    if len(digits) > len(str(MAX_ISSUE_NUMBER)) or int(digits) > MAX_ISSUE_NUMBER:
        raise MalformedIssueURLError(
            f"issue number is not a valid integer: exceeds {MAX_ISSUE_NUMBER}"
        )
    return IssueReference(
        owner=owner, repository=repository, issue_number=int(digits)
    )
