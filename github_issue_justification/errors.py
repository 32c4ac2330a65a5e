"""Failure taxonomy for GitHub issue justification checks.

Two disjoint families exist:

* ``InvalidJustificationError`` - the justification was checked and rejected.
  Callers may persist or display the message as a negative verdict.
* ``InternalValidationError`` - the check could not be completed (credential
  exchange, transport, unexpected API response). This is a fault, not proof
  that the justification is invalid.
"""


class JustificationValidationError(Exception):
    """Base class for all validation failures."""


class InvalidJustificationError(JustificationValidationError):
    """The justification was evaluated and is not acceptable."""


class InternalValidationError(JustificationValidationError):
    """The validator could not complete its check."""


class AuthFailureError(InternalValidationError):
    """Obtaining a scoped access token failed."""


class InfraFailureError(InternalValidationError):
    """Reading the issue failed for a reason other than "not found"."""


class MalformedIssueURLError(ValueError):
    """The supplied value is not a GitHub issue URL."""


class AccessTokenError(Exception):
    """The GitHub App installation token exchange failed."""


class IssueNotFoundError(LookupError):
    """GitHub answered 404 for the requested issue."""


class IssueFetchError(Exception):
    """The issue could not be read or its payload could not be decoded."""
