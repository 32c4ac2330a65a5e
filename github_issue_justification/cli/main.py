"""Main CLI entry point."""

import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ..config import PluginConfig
from ..errors import InternalValidationError
from ..plugin.models import Justification, UIData
from ..plugin.plugin import GitHubPlugin
from .options import (
    CATEGORY_OPTION,
    DISPLAY_NAME_OPTION,
    GITHUB_API_BASE_URL_OPTION,
    GITHUB_APP_ID_OPTION,
    GITHUB_APP_INSTALLATION_ID_OPTION,
    GITHUB_APP_PRIVATE_KEY_PEM_OPTION,
    HINT_OPTION,
    REQUEST_TIMEOUT_OPTION,
    VERBOSE_OPTION,
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

EXIT_REJECTED = 1
EXIT_INTERNAL_ERROR = 2
EXIT_INVALID_CONFIG = 3

app = typer.Typer(
    name="github-justification",
    help="Validate GitHub issues as justifications for privileged actions",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)
console = Console()
err_console = Console(stderr=True)


@app.callback()
def main(verbose: bool = VERBOSE_OPTION) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(**overrides: object) -> PluginConfig:
    """Read configuration from the environment, then apply flags given."""
    try:
        cfg = PluginConfig.from_env()
        given = {name: value for name, value in overrides.items() if value is not None}
        return PluginConfig(**{**cfg.model_dump(), **given})
    except ValueError as e:
        err_console.print(f"❌ Invalid configuration: {escape(str(e))}")
        raise typer.Exit(EXIT_INVALID_CONFIG)


def _load_plugin(**overrides: object) -> GitHubPlugin:
    cfg = _load_config(**overrides)
    try:
        return GitHubPlugin.from_config(cfg)
    except ValueError as e:
        err_console.print(f"❌ Invalid configuration: {escape(str(e))}")
        raise typer.Exit(EXIT_INVALID_CONFIG)


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def validate(
    value: str = typer.Argument(..., help="Justification value, e.g. an issue URL"),
    category: str = CATEGORY_OPTION,
    github_app_id: str | None = GITHUB_APP_ID_OPTION,
    github_app_installation_id: str | None = GITHUB_APP_INSTALLATION_ID_OPTION,
    github_app_private_key_pem: str | None = GITHUB_APP_PRIVATE_KEY_PEM_OPTION,
    github_api_base_url: str | None = GITHUB_API_BASE_URL_OPTION,
    request_timeout: float | None = REQUEST_TIMEOUT_OPTION,
) -> None:
    """Validate a single justification and print the response as JSON.

    Exit codes: 0 valid, 1 rejected, 2 the check could not be completed,
    3 invalid configuration.

    Example:
        github-justification validate https://github.com/myorg/myrepo/issues/123
    """
    plugin = _load_plugin(
        github_app_id=github_app_id,
        github_app_installation_id=github_app_installation_id,
        github_app_private_key_pem=github_app_private_key_pem,
        github_api_base_url=github_api_base_url,
        request_timeout=request_timeout,
    )

    try:
        response = plugin.validate(Justification(category=category, value=value))
    except InternalValidationError as e:
        err_console.print(f"❌ Validation could not be completed: {escape(str(e))}")
        raise typer.Exit(EXIT_INTERNAL_ERROR)

    typer.echo(response.model_dump_json(indent=2))
    if not response.valid:
        raise typer.Exit(EXIT_REJECTED)


@app.command(
    name="ui-data", context_settings={"help_option_names": ["-h", "--help"]}
)
def ui_data(
    display_name: str | None = DISPLAY_NAME_OPTION,
    hint: str | None = HINT_OPTION,
) -> None:
    """Show the display name and hint returned to the host UI."""
    cfg = _load_config(display_name=display_name, hint=hint)
    data = UIData(display_name=cfg.display_name, hint=cfg.hint)
    console.print(f"[bold]Display name:[/bold] {escape(data.display_name)}")
    console.print(f"[bold]Hint:[/bold] {escape(data.hint)}")


@app.command(
    name="check-config", context_settings={"help_option_names": ["-h", "--help"]}
)
def check_config(
    github_app_id: str | None = GITHUB_APP_ID_OPTION,
    github_app_installation_id: str | None = GITHUB_APP_INSTALLATION_ID_OPTION,
    github_app_private_key_pem: str | None = GITHUB_APP_PRIVATE_KEY_PEM_OPTION,
    github_api_base_url: str | None = GITHUB_API_BASE_URL_OPTION,
    display_name: str | None = DISPLAY_NAME_OPTION,
    hint: str | None = HINT_OPTION,
    request_timeout: float | None = REQUEST_TIMEOUT_OPTION,
) -> None:
    """Check the configuration and private key without contacting GitHub."""
    plugin = _load_plugin(
        github_app_id=github_app_id,
        github_app_installation_id=github_app_installation_id,
        github_app_private_key_pem=github_app_private_key_pem,
        github_api_base_url=github_api_base_url,
        display_name=display_name,
        hint=hint,
        request_timeout=request_timeout,
    )
    logger.debug(f"Loaded plugin with UI data: {plugin.get_ui_data()!r}")
    console.print("✅ Configuration is valid")


@app.command(context_settings={"help_option_names": ["-h", "--help"]})
def version() -> None:
    """Show version information."""
    from github_issue_justification import __version__

    console.print(f"GitHub Issue Justification v{__version__}")


if __name__ == "__main__":
    app()
