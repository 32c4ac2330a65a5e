"""Configuration for the GitHub justification plugin."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .github_client.app import DEFAULT_API_BASE_URL

DEFAULT_DISPLAY_NAME = "GitHub"
DEFAULT_HINT = (
    "The GitHub issue URL, e.g. https://github.com/<owner>/<repo>/issues/<number>"
)
DEFAULT_REQUEST_TIMEOUT = 10.0

REQUIRED_ENV_VARS = {
    "github_app_id": "GITHUB_APP_ID",
    "github_app_installation_id": "GITHUB_APP_INSTALLATION_ID",
    "github_app_private_key_pem": "GITHUB_APP_PRIVATE_KEY_PEM",
}


class PluginConfig(BaseModel):
    """Settings required for running the plugin.

    Built once at startup and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    github_app_id: str = Field("", description="ID of the GitHub App")
    github_app_installation_id: str = Field(
        "", description="Installation ID of the GitHub App"
    )
    github_app_private_key_pem: str = Field(
        "", repr=False, description="PEM encoded private key of the GitHub App"
    )
    github_api_base_url: str = Field(
        DEFAULT_API_BASE_URL, description="GitHub API root URL"
    )
    display_name: str = Field(DEFAULT_DISPLAY_NAME, description="UI display name")
    hint: str = Field(DEFAULT_HINT, description="UI hint for the justification value")
    request_timeout: float = Field(
        DEFAULT_REQUEST_TIMEOUT, gt=0, description="Per-request timeout in seconds"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PluginConfig":
        """Build configuration from environment variables."""
        env = os.environ if environ is None else environ
        timeout = env.get("GITHUB_PLUGIN_REQUEST_TIMEOUT")
        return cls(
            github_app_id=env.get("GITHUB_APP_ID", ""),
            github_app_installation_id=env.get("GITHUB_APP_INSTALLATION_ID", ""),
            github_app_private_key_pem=env.get("GITHUB_APP_PRIVATE_KEY_PEM", ""),
            github_api_base_url=env.get("GITHUB_API_BASE_URL")
            or DEFAULT_API_BASE_URL,
            display_name=env.get("GITHUB_PLUGIN_DISPLAY_NAME") or DEFAULT_DISPLAY_NAME,
            hint=env.get("GITHUB_PLUGIN_HINT") or DEFAULT_HINT,
            request_timeout=float(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT,
        )

    def validate_required(self) -> None:
        """Validate configuration and raise error if invalid."""
        for field_name, env_var in REQUIRED_ENV_VARS.items():
            if not getattr(self, field_name):
                raise ValueError(f"{env_var} is empty")
