"""Standardized CLI option definitions.

Configuration is read from the environment by ``PluginConfig.from_env``;
these flags only override it, so each defaults to ``None`` (not given).
"""

import typer

# GitHub App identity
GITHUB_APP_ID_OPTION = typer.Option(
    None, "--github-app-id", help="ID of the GitHub App [env: GITHUB_APP_ID]"
)

GITHUB_APP_INSTALLATION_ID_OPTION = typer.Option(
    None,
    "--github-app-installation-id",
    help="Installation ID of the GitHub App [env: GITHUB_APP_INSTALLATION_ID]",
)

GITHUB_APP_PRIVATE_KEY_PEM_OPTION = typer.Option(
    None,
    "--github-app-private-key-pem",
    help="PEM encoded private key of the GitHub App [env: GITHUB_APP_PRIVATE_KEY_PEM]",
    show_default=False,
)

GITHUB_API_BASE_URL_OPTION = typer.Option(
    None,
    "--github-api-base-url",
    help="GitHub API root URL, for GitHub Enterprise [env: GITHUB_API_BASE_URL]",
)

# Display options
DISPLAY_NAME_OPTION = typer.Option(
    None,
    "--display-name",
    help="Display name shown by the host UI [env: GITHUB_PLUGIN_DISPLAY_NAME]",
)

HINT_OPTION = typer.Option(
    None, "--hint", help="Hint shown by the host UI [env: GITHUB_PLUGIN_HINT]"
)

# Behavior options
REQUEST_TIMEOUT_OPTION = typer.Option(
    None,
    "--request-timeout",
    help="Timeout in seconds for each GitHub API request "
    "[env: GITHUB_PLUGIN_REQUEST_TIMEOUT]",
)

CATEGORY_OPTION = typer.Option(
    "github", "--category", "-c", help="Justification category"
)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
