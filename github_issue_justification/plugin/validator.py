"""Check that an issue URL points at an open GitHub issue."""

import logging
from collections.abc import Callable

from ..errors import (
    AuthFailureError,
    InfraFailureError,
    InvalidJustificationError,
    IssueNotFoundError,
    MalformedIssueURLError,
)
from ..github_client.app import DEFAULT_API_BASE_URL, AccessTokenProvider
from ..github_client.client import GitHubClient
from ..github_client.issue_url import parse_issue_url
from ..github_client.models import IssueReference, IssueSnapshot, TokenScope

logger = logging.getLogger(__name__)


class IssueValidator:
    """Validates GitHub issues against the justification criteria.

    Every call to :meth:`match_issue` requests its own repository scoped token
    and builds its own API client, so concurrent calls share nothing mutable.
    """

    def __init__(
        self,
        token_provider: AccessTokenProvider,
        api_base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 10.0,
        client_factory: Callable[[str], GitHubClient] | None = None,
    ):
        self._token_provider = token_provider
        self._client_factory = client_factory or (
            lambda token: GitHubClient(token, base_url=api_base_url, timeout=timeout)
        )

    def match_issue(self, issue_url: str) -> IssueReference:
        """Parse issue info from issue_url and check the issue is open.

        Returns:
            The parsed IssueReference of the open issue

        Raises:
            InvalidJustificationError: The URL is malformed, the issue does not
                exist or it is not open
            AuthFailureError: No access token could be obtained
            InfraFailureError: The issue could not be read
        """
        try:
            reference = parse_issue_url(issue_url)
        except MalformedIssueURLError as e:
            raise InvalidJustificationError(f"invalid issue url: {e}") from e

        token = self.get_access_token(reference)
        snapshot = self.get_issue_state(reference, token)

        if not snapshot.is_open:
            raise InvalidJustificationError(
                f"issue is in state: {snapshot.state}, "
                "please make sure to use an open issue"
            )
        return reference

    def get_access_token(self, reference: IssueReference) -> str:
        """Get a token with issue read permission on the issue's repository only."""
        scope = TokenScope.for_issue(reference)
        try:
            return self._token_provider.access_token(scope)
        except Exception as e:
            logger.warning(
                f"Token exchange failed for repository {reference.repository}: {e}"
            )
            raise AuthFailureError(f"failed to get access token: {e}") from e

    def get_issue_state(self, reference: IssueReference, token: str) -> IssueSnapshot:
        """Fetch the issue's state from the GitHub API."""
        try:
            with self._client_factory(token) as client:
                return client.get_issue_state(reference)
        except IssueNotFoundError as e:
            raise InvalidJustificationError("issue not found") from e
        except Exception as e:
            logger.warning(f"Failed to read issue {reference.api_path}: {e}")
            raise InfraFailureError(f"failed to get issue info: {e}") from e
