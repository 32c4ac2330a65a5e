"""Pydantic models for the GitHub data this plugin reads.

API Reference: https://docs.github.com/en/rest/issues/issues
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ISSUES_READ_PERMISSIONS = {"issues": "read"}


class IssueReference(BaseModel):
    """An issue identified by owner, repository and number."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, description="Repository owner login")
    repository: str = Field(..., min_length=1, description="Repository name")
    issue_number: int = Field(..., ge=0, description="Issue number (integer)")

    @property
    def full_name(self) -> str:
        """Return the ``owner/repository`` slug."""
        return f"{self.owner}/{self.repository}"

    @property
    def api_path(self) -> str:
        """Return the REST path of the issue resource."""
        return f"/repos/{self.owner}/{self.repository}/issues/{self.issue_number}"


class TokenScope(BaseModel):
    """Repositories and permissions requested for an installation token.

    API Reference:
    https://docs.github.com/en/rest/apps/apps#create-an-installation-access-token-for-an-app
    """

    model_config = ConfigDict(frozen=True)

    repositories: tuple[str, ...] = Field(
        ..., description="Repository names the token is limited to (exactly one)"
    )
    permissions: dict[str, str] = Field(
        ..., description="Capability to access level mapping"
    )

    @field_validator("repositories")
    @classmethod
    def _single_repository(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if len(value) != 1 or not value[0]:
            raise ValueError("token scope must name exactly one repository")
        return value

    @classmethod
    def for_issue(cls, reference: IssueReference) -> "TokenScope":
        """Build the least-privilege scope needed to read one issue."""
        return cls(
            repositories=(reference.repository,),
            permissions=dict(ISSUES_READ_PERMISSIONS),
        )

    def to_request_body(self) -> dict[str, Any]:
        """Render the JSON body of the token exchange request."""
        return {
            "repositories": list(self.repositories),
            "permissions": dict(self.permissions),
        }


class IssueSnapshot(BaseModel):
    """The remote state of an issue at the time it was read."""

    model_config = ConfigDict(frozen=True)

    state: str = Field(..., description="Current state: 'open', 'closed' (string)")

    @property
    def is_open(self) -> bool:
        return self.state == "open"
