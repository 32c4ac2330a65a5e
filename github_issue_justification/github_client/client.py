"""GitHub API client using PyGitHub."""

import logging
import math

from github import Auth, Github
from github.GithubException import GithubException, UnknownObjectException

from ..errors import IssueFetchError, IssueNotFoundError
from .app import DEFAULT_API_BASE_URL
from .models import IssueReference, IssueSnapshot

logger = logging.getLogger(__name__)

ISSUE_READ_HEADERS = {"Accept": "application/vnd.github+json"}


class GitHubClient:
    """GitHub API client authenticated with a single installation token.

    Instances are cheap and meant to live for one validation only, so the
    token they carry is never reused across calls.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 10.0,
    ):
        """Initialize GitHub client with authentication.

        Args:
            token: Installation access token
            base_url: GitHub API root
            timeout: Per-request timeout in seconds, rounded up to whole
                seconds because PyGitHub only accepts an int
        """
        if not token:
            raise ValueError("GitHub token is required.")

        # No retries: a failed read is classified immediately.
        self.github = Github(
            auth=Auth.Token(token),
            base_url=base_url.rstrip("/"),
            timeout=math.ceil(timeout),
            retry=None,
        )

    def close(self) -> None:
        self.github.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_issue_state(self, reference: IssueReference) -> IssueSnapshot:
        """Read the current state of an issue with a single API call.

        Raises:
            IssueNotFoundError: If GitHub answers 404
            IssueFetchError: On any other API, transport or decoding failure
        """
        try:
            _, data = self.github.requester.requestJsonAndCheck(
                "GET", reference.api_path, headers=dict(ISSUE_READ_HEADERS)
            )
        except UnknownObjectException as e:
            raise IssueNotFoundError(f"issue {reference.api_path} not found") from e
        except GithubException as e:
            raise IssueFetchError(
                f"unexpected status code {e.status} reading issue"
            ) from e
        except Exception as e:
            raise IssueFetchError(f"failed to read issue: {e}") from e

        state = data.get("state") if isinstance(data, dict) else None
        if not isinstance(state, str) or not state:
            raise IssueFetchError("issue response has no state field")

        logger.debug(f"Issue {reference.full_name}#{reference.issue_number} is {state}")
        return IssueSnapshot(state=state)
