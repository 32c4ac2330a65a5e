"""Justification validation plugin for GitHub issues."""

from .models import Justification, UIData, ValidationResponse
from .plugin import GITHUB_CATEGORY, GitHubPlugin
from .validator import IssueValidator

__all__ = [
    "GITHUB_CATEGORY",
    "GitHubPlugin",
    "IssueValidator",
    "Justification",
    "UIData",
    "ValidationResponse",
]
