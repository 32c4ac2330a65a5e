"""Tests for the issue validator."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock, patch

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey
from github.GithubException import GithubException, UnknownObjectException

from github_issue_justification.errors import (
    AccessTokenError,
    AuthFailureError,
    InfraFailureError,
    InternalValidationError,
    InvalidJustificationError,
    IssueFetchError,
    IssueNotFoundError,
)
from github_issue_justification.github_client.app import GitHubApp
from github_issue_justification.github_client.models import (
    IssueReference,
    IssueSnapshot,
    TokenScope,
)
from github_issue_justification.plugin.validator import IssueValidator

ISSUE_URL = "https://github.com/test-owner/test-repo/issues/1"
REFERENCE = IssueReference(owner="test-owner", repository="test-repo", issue_number=1)


class FakeTokenProvider:
    """Records requested scopes and returns canned tokens."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.scopes: list[TokenScope] = []

    def access_token(self, scope: TokenScope) -> str:
        self.scopes.append(scope)
        if self.error is not None:
            raise self.error
        return f"token-{len(self.scopes)}"


class FakeClient:
    """Stands in for GitHubClient."""

    def __init__(self, token: str, state: str | None, error: Exception | None):
        self.token = token
        self.state = state
        self.error = error
        self.closed = False

    def __enter__(self) -> "FakeClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True

    def get_issue_state(self, reference: IssueReference) -> IssueSnapshot:
        if self.error is not None:
            raise self.error
        assert self.state is not None
        return IssueSnapshot(state=self.state)


def _validator(
    state: str | None = "open",
    fetch_error: Exception | None = None,
    provider: FakeTokenProvider | None = None,
) -> tuple[IssueValidator, FakeTokenProvider, list[FakeClient]]:
    provider = provider or FakeTokenProvider()
    clients: list[FakeClient] = []

    def factory(token: str) -> FakeClient:
        client = FakeClient(token, state, fetch_error)
        clients.append(client)
        return client

    return IssueValidator(provider, client_factory=factory), provider, clients


class TestMatchIssue:
    """Test IssueValidator.match_issue classification."""

    def test_open_issue(self) -> None:
        """Test an open issue returns its reference."""
        validator, provider, clients = _validator()

        assert validator.match_issue(ISSUE_URL) == REFERENCE
        assert provider.scopes == [
            TokenScope(repositories=("test-repo",), permissions={"issues": "read"})
        ]
        assert [c.token for c in clients] == ["token-1"]
        assert clients[0].closed

    def test_invalid_issue_url(self) -> None:
        """Test malformed URLs are rejected without any network call."""
        validator, provider, clients = _validator()

        with pytest.raises(InvalidJustificationError, match="invalid issue url"):
            validator.match_issue("https://github.com/test-owner/test-repo")
        assert provider.scopes == []
        assert clients == []

    def test_issue_not_int(self) -> None:
        """Test a non-numeric issue number is rejected."""
        validator, _, _ = _validator()

        with pytest.raises(
            InvalidJustificationError,
            match="invalid issue url: issue url doesn't match pattern",
        ):
            validator.match_issue("https://github.com/test-owner/test-repo/issues/abc")

    def test_issue_not_open(self) -> None:
        """Test closed issues are rejected with their state."""
        validator, _, _ = _validator(state="closed")

        with pytest.raises(InvalidJustificationError) as exc_info:
            validator.match_issue(ISSUE_URL)
        assert str(exc_info.value) == (
            "issue is in state: closed, please make sure to use an open issue"
        )

    def test_issue_not_found(self) -> None:
        """Test a missing issue is rejected."""
        validator, _, _ = _validator(fetch_error=IssueNotFoundError("404"))

        with pytest.raises(InvalidJustificationError, match="issue not found"):
            validator.match_issue(ISSUE_URL)

    def test_token_failure_is_internal(self) -> None:
        """Test token exchange failures are faults, not verdicts."""
        provider = FakeTokenProvider(error=AccessTokenError("unexpected status 401"))
        validator, _, clients = _validator(provider=provider)

        with pytest.raises(AuthFailureError, match="failed to get access token") as e:
            validator.match_issue(ISSUE_URL)
        assert not isinstance(e.value, InvalidJustificationError)
        assert clients == []

    def test_fetch_failure_is_internal(self) -> None:
        """Test infrastructure failures while reading the issue are faults."""
        validator, _, _ = _validator(fetch_error=IssueFetchError("status 502"))

        with pytest.raises(InfraFailureError, match="failed to get issue info") as e:
            validator.match_issue(ISSUE_URL)
        assert isinstance(e.value, InternalValidationError)
        assert not isinstance(e.value, InvalidJustificationError)

    def test_unexpected_client_error_is_internal(self) -> None:
        """Test errors outside the known fetch failures are still faults."""
        provider = FakeTokenProvider()

        def factory(token: str) -> FakeClient:
            raise AssertionError("unexpected client error")

        validator = IssueValidator(provider, client_factory=factory)

        with pytest.raises(InfraFailureError, match="unexpected client error"):
            validator.match_issue(ISSUE_URL)

    def test_oversized_issue_number(self) -> None:
        """Test an issue number too long to convert is rejected as malformed."""
        validator, provider, _ = _validator()

        with pytest.raises(InvalidJustificationError, match="invalid issue url"):
            validator.match_issue(
                "https://github.com/test-owner/test-repo/issues/" + "9" * 5000
            )
        assert provider.scopes == []

    def test_new_token_per_call(self) -> None:
        """Test tokens are requested fresh for every validation."""
        validator, provider, clients = _validator()

        validator.match_issue(ISSUE_URL)
        validator.match_issue("https://github.com/other-owner/other-repo/issues/9")

        assert [s.repositories for s in provider.scopes] == [
            ("test-repo",),
            ("other-repo",),
        ]
        assert [c.token for c in clients] == ["token-1", "token-2"]

    def test_idempotent(self) -> None:
        """Test repeated validation of an unchanged issue gives the same result."""
        validator, _, _ = _validator(state="closed")

        messages = []
        for _ in range(3):
            with pytest.raises(InvalidJustificationError) as exc_info:
                validator.match_issue(ISSUE_URL)
            messages.append(str(exc_info.value))
        assert len(set(messages)) == 1

    def test_concurrent_calls(self) -> None:
        """Test concurrent validations do not see each other's state."""
        validator, provider, _ = _validator()
        urls = [f"https://github.com/owner-{i}/repo-{i}/issues/{i}" for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(validator.match_issue, urls))

        assert [r.repository for r in results] == [f"repo-{i}" for i in range(20)]
        assert sorted(s.repositories[0] for s in provider.scopes) == sorted(
            f"repo-{i}" for i in range(20)
        )


class TestMatchIssueWithGitHubApp:
    """Exercise the validator against the real GitHubApp and GitHubClient."""

    def _github_app(self, rsa_private_key: RSAPrivateKey, status: int) -> GitHubApp:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.headers.get("Accept") != "application/vnd.github+json":
                return httpx.Response(500, text="missing accept header")
            if not request.headers.get("Authorization", "").startswith("Bearer "):
                return httpx.Response(500, text="missing authorization header")
            return httpx.Response(status, json={"token": "this-is-the-token"})

        return GitHubApp(
            "test-github-id",
            "test-install-id",
            rsa_private_key,
            http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        )

    @patch("github_issue_justification.github_client.client.Github")
    def test_success(
        self, mock_github_class: Mock, rsa_private_key: RSAPrivateKey
    ) -> None:
        """Test an open issue validates end to end."""
        mock_github = mock_github_class.return_value
        mock_read = mock_github.requester.requestJsonAndCheck
        mock_read.return_value = ({}, {"state": "open"})

        validator = IssueValidator(self._github_app(rsa_private_key, 201))

        assert validator.match_issue(ISSUE_URL) == REFERENCE
        assert mock_github_class.call_args.kwargs["auth"].token == "this-is-the-token"

    @patch("github_issue_justification.github_client.client.Github")
    def test_unauthorized(
        self, mock_github_class: Mock, rsa_private_key: RSAPrivateKey
    ) -> None:
        """Test a rejected token exchange never reaches the issues API."""
        validator = IssueValidator(self._github_app(rsa_private_key, 401))

        with pytest.raises(AuthFailureError, match="failed to get access token"):
            validator.match_issue(ISSUE_URL)
        mock_github_class.assert_not_called()

    @patch("github_issue_justification.github_client.client.Github")
    def test_issue_not_exist(
        self, mock_github_class: Mock, rsa_private_key: RSAPrivateKey
    ) -> None:
        """Test a 404 from the issues API is a rejection."""
        mock_github = mock_github_class.return_value
        mock_github.requester.requestJsonAndCheck.side_effect = (
            UnknownObjectException(404, {"message": "Not Found"}, None)
        )

        validator = IssueValidator(self._github_app(rsa_private_key, 201))

        with pytest.raises(InvalidJustificationError, match="issue not found"):
            validator.match_issue("https://github.com/test-owner/test-repo/issues/2")

    @patch("github_issue_justification.github_client.client.Github")
    def test_server_error(
        self, mock_github_class: Mock, rsa_private_key: RSAPrivateKey
    ) -> None:
        """Test a 5xx from the issues API is an internal fault."""
        mock_github = mock_github_class.return_value
        mock_github.requester.requestJsonAndCheck.side_effect = GithubException(
            503, {"message": "Service Unavailable"}, None
        )

        validator = IssueValidator(self._github_app(rsa_private_key, 201))

        with pytest.raises(InfraFailureError) as exc_info:
            validator.match_issue(ISSUE_URL)
        assert "this-is-the-token" not in str(exc_info.value)


class TestMatchIssueWithDefaultClient:
    """Exercise the validator with its default, unpatched GitHubClient."""

    READ = "github.Requester.Requester.requestJsonAndCheck"

    def test_open_issue(self) -> None:
        """Test the default client is built and reads the issue."""
        validator = IssueValidator(FakeTokenProvider())

        with patch(self.READ, return_value=({}, {"state": "open"})) as mock_read:
            assert validator.match_issue(ISSUE_URL) == REFERENCE
        mock_read.assert_called_once()

    @pytest.mark.parametrize(
        "error",
        [
            GithubException(503, {"message": "Service Unavailable"}, None),
            RuntimeError("unexpected client error"),
        ],
    )
    def test_read_failure_is_internal(self, error: Exception) -> None:
        """Test read failures from the default client are faults."""
        validator = IssueValidator(FakeTokenProvider())

        with patch(self.READ, side_effect=error):
            with pytest.raises(InfraFailureError, match="failed to get issue info"):
                validator.match_issue(ISSUE_URL)
