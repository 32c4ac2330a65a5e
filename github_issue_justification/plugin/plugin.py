"""GitHub issue justification plugin.

The plugin answers whether a justification's value is a URL of an open
GitHub issue. Rejections come back as ``valid=False`` responses; failures to
complete the check raise :class:`InternalValidationError` so that the host
can tell the two apart.
"""

import logging
from typing import Protocol

from ..config import PluginConfig
from ..errors import InvalidJustificationError
from ..github_client.app import GitHubApp, read_private_key
from ..github_client.models import IssueReference
from .models import Justification, UIData, ValidationResponse
from .validator import IssueValidator

logger = logging.getLogger(__name__)

# The justification category this plugin validates.
GITHUB_CATEGORY = "github"

ANNOTATION_KEY_ISSUE_URL = "issue_url"
ANNOTATION_KEY_ISSUE_OWNER = "issue_owner"
ANNOTATION_KEY_ISSUE_REPO = "issue_repo"
ANNOTATION_KEY_ISSUE_NUMBER = "issue_number"


class IssueMatcher(Protocol):
    def match_issue(self, issue_url: str) -> IssueReference: ...


class GitHubPlugin:
    """Validator for the ``github`` justification category."""

    def __init__(self, matcher: IssueMatcher, ui_data: UIData):
        self._matcher = matcher
        self._ui_data = ui_data

    @classmethod
    def from_config(cls, cfg: PluginConfig) -> "GitHubPlugin":
        """Wire a plugin backed by the real GitHub App and REST API.

        Raises:
            ValueError: If the configuration or private key is invalid
        """
        cfg.validate_required()
        private_key = read_private_key(cfg.github_app_private_key_pem)
        github_app = GitHubApp(
            cfg.github_app_id,
            cfg.github_app_installation_id,
            private_key,
            api_base_url=cfg.github_api_base_url,
            timeout=cfg.request_timeout,
        )
        matcher = IssueValidator(
            github_app,
            api_base_url=cfg.github_api_base_url,
            timeout=cfg.request_timeout,
        )
        return cls(matcher, UIData(display_name=cfg.display_name, hint=cfg.hint))

    def validate(self, justification: Justification) -> ValidationResponse:
        """Return the validation result for a justification.

        Raises:
            InternalValidationError: If the check could not be completed
        """
        if justification.category != GITHUB_CATEGORY:
            return ValidationResponse.invalid(
                f"failed to perform validation, expected category "
                f'"{justification.category}" to be "{GITHUB_CATEGORY}"'
            )

        try:
            reference = self._matcher.match_issue(justification.value)
        except InvalidJustificationError as e:
            logger.info(f"Rejected justification {justification.value!r}: {e}")
            return ValidationResponse.invalid(str(e))

        return ValidationResponse(
            valid=True,
            annotations={
                ANNOTATION_KEY_ISSUE_URL: justification.value,
                ANNOTATION_KEY_ISSUE_OWNER: reference.owner,
                ANNOTATION_KEY_ISSUE_REPO: reference.repository,
                ANNOTATION_KEY_ISSUE_NUMBER: str(reference.issue_number),
            },
        )

    def get_ui_data(self) -> UIData:
        """Return display data for the host UI."""
        return self._ui_data
