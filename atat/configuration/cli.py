"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from atat.auth.device_flow import DeviceFlowAuthenticator
from atat.auth.transport import DeviceFlowTransport
from atat.configuration.env import Settings
from atat.configuration.project import ConfigKey, get_repositories, update_config
from atat.exceptions import AtatError
from atat.github.adapter import get_authenticated_login, repository_exists
from atat.github.client import get_github_client
from atat.github.exceptions import GitHubRequestError
from atat.storage.project import LocalConfigStorage
from atat.storage.tokens import FileTokenStorage
from atat.synchronize.driver import github_adapter_factory, load_sync_target, run_pull_workflow, run_push_workflow
from atat.synchronize.models import CreateIssue
from atat.synchronize.results import AppliedOperation
from atat.utils.constants import TODO_FILENAME
from atat.utils.github import split_repository
from atat.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Keep TODO.md in sync with GitHub issues.")


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report atat errors on stderr and exit with status 1."""
    try:
        yield
    except AtatError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def get_settings(ctx: typer.Context) -> Settings:
    """Return the settings resolved by the main callback."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = Settings()
    return ctx.obj["settings"]


def get_token_storage(ctx: typer.Context) -> FileTokenStorage:
    """Return the token storage rooted at the configured atat home."""
    return FileTokenStorage(get_settings(ctx).ATAT_HOME)


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Keep TODO.md in sync with GitHub issues."""
    settings = Settings()
    configure_logging(debug or settings.DEBUG)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@typer_app.command(name="login")
def login_cli(
    ctx: typer.Context,
    client_id: Annotated[str | None, Option(envvar="CLIENT_ID", help="OAuth App client ID.")] = None,
    timeout: Annotated[float | None, Option(envvar="POLL_TIMEOUT", help="Seconds to wait for browser authorization.")] = None,
) -> None:
    """Authenticate with GitHub using the device flow."""
    settings = get_settings(ctx)
    resolved_client_id = client_id or settings.CLIENT_ID
    if not resolved_client_id:
        typer.echo("Error: no OAuth client ID configured. Set CLIENT_ID or pass --client-id.", err=True)
        raise typer.Exit(1)
    poll_timeout = timeout if timeout is not None else settings.POLL_TIMEOUT

    async def login() -> str:
        async with DeviceFlowTransport(timeout=settings.HTTP_TIMEOUT) as transport:
            session = await transport.request_device_code(resolved_client_id)
            typer.echo(f"Please visit: {session.verification_uri}")
            typer.echo(f"and enter code: {session.user_code}")
            typer.echo("Open the URL in your browser and enter the code to authorize atat.")
            authenticator = DeviceFlowAuthenticator(
                resolved_client_id,
                transport.poll_access_token,
                slow_down_fallback=settings.SLOW_DOWN_FALLBACK_INTERVAL,
            )
            return await authenticator.poll_for_token(session, poll_timeout)

    with exit_on_error():
        token = asyncio.run(login())
    get_token_storage(ctx).save(token)
    typer.echo("✓ Authentication complete")


@typer_app.command(name="logout")
def logout_cli(ctx: typer.Context) -> None:
    """Remove the stored access token."""
    get_token_storage(ctx).delete()
    typer.echo("Logged out")


@typer_app.command(name="whoami")
def whoami_cli(ctx: typer.Context) -> None:
    """Show the GitHub login of the stored access token."""
    settings = get_settings(ctx)
    token = get_token_storage(ctx).load()
    if token is None:
        typer.echo("No token found. Please run `login` first.", err=True)
        raise typer.Exit(1)

    async def whoami() -> str:
        client = await get_github_client(token, settings.GITHUB_API_URL, settings.HTTP_TIMEOUT)
        return await get_authenticated_login(client)

    with exit_on_error():
        try:
            login = asyncio.run(whoami())
        except GitHubRequestError as exc:
            if exc.status_code == 401:
                typer.echo("Token invalid or expired. Please run `login` again.", err=True)
                raise typer.Exit(1) from exc
            raise
    typer.echo(login)


# --- Add a new Typer group for remote commands ---
remote_app = typer.Typer(help="Manage the repositories this project synchronizes with.")


@remote_app.callback(invoke_without_command=True)
def remote_callback(ctx: typer.Context) -> None:
    """List the configured repositories when no subcommand is given."""
    if ctx.invoked_subcommand is not None:
        return
    with exit_on_error():
        repositories = get_repositories(LocalConfigStorage().load_config())
    for repo in repositories:
        typer.echo(repo)


@remote_app.command(name="add")
def remote_add_cli(
    ctx: typer.Context,
    repo: Annotated[str, Argument(help="Repository name (owner/repo).")],
) -> None:
    """Add a repository to the project configuration after checking it exists."""
    settings = get_settings(ctx)
    config_storage = LocalConfigStorage()
    with exit_on_error():
        owner, repo_name = split_repository(repo)
        repo = f"{owner}/{repo_name}"
        config = config_storage.load_config()
        repositories = get_repositories(config)
        if repo in repositories:
            typer.echo(f"Repository {repo} is already configured.")
            return

        token = get_token_storage(ctx).load()

        async def check() -> bool:
            client = await get_github_client(token, settings.GITHUB_API_URL, settings.HTTP_TIMEOUT, allow_anonymous=True)
            return await repository_exists(client, repo)

        if not asyncio.run(check()):
            typer.echo(f"Error: Repository {repo} not found or not accessible.", err=True)
            raise typer.Exit(1)
        config_storage.save_config(update_config(config, {ConfigKey.REPOSITORIES: repositories + [repo]}))
    typer.echo(f"Added {repo}")


@remote_app.command(name="remove")
def remote_remove_cli(
    repo: Annotated[str, Argument(help="Repository name (owner/repo).")],
) -> None:
    """Remove a repository from the project configuration."""
    config_storage = LocalConfigStorage()
    with exit_on_error():
        config = config_storage.load_config()
        repositories = [configured for configured in get_repositories(config) if configured != repo]
        if repositories:
            config = update_config(config, {ConfigKey.REPOSITORIES: repositories})
        else:
            config = {}
        config_storage.save_config(config)


# --- Register the remote_app as a sub-app of the main Typer app ---
typer_app.add_typer(remote_app, name="remote")


def echo_applied_operation(applied: AppliedOperation) -> None:
    """Report one operation carried out on GitHub."""
    if isinstance(applied.operation, CreateIssue):
        typer.echo(f"Created issue #{applied.issue_number}: {applied.operation.title}")
    else:
        typer.echo(f"Closed issue #{applied.operation.number}")


@typer_app.command(name="push")
def push_cli(
    ctx: typer.Context,
    todo_path: Annotated[Path, Option("--file", envvar="TODO_FILE", help="Checklist file to push.")] = Path(TODO_FILENAME),
) -> None:
    """Create issues for new checklist items and close issues of checked items."""
    settings = get_settings(ctx)
    with exit_on_error():
        target = load_sync_target(get_token_storage(ctx), LocalConfigStorage(), todo_path)
        asyncio.run(
            run_push_workflow(
                target,
                github_adapter_factory(settings.GITHUB_API_URL),
                max_pages=settings.MAX_ISSUE_PAGES,
                on_applied=echo_applied_operation,
            )
        )


@typer_app.command(name="pull")
def pull_cli(
    ctx: typer.Context,
    todo_path: Annotated[Path, Option("--file", envvar="TODO_FILE", help="Checklist file to update.")] = Path(TODO_FILENAME),
) -> None:
    """Check items whose issues were closed and add open issues missing from the checklist."""
    settings = get_settings(ctx)
    with exit_on_error():
        target = load_sync_target(get_token_storage(ctx), LocalConfigStorage(), todo_path)
        result = asyncio.run(
            run_pull_workflow(
                target,
                github_adapter_factory(settings.GITHUB_API_URL),
                max_pages=settings.MAX_ISSUE_PAGES,
            )
        )
    if not result.changed:
        typer.echo(f"{todo_path.name} is already up to date")
        return
    for item in result.checked_items:
        typer.echo(f"Checked #{item.issue_number}: {item.text}")
    for item in result.added_items:
        typer.echo(f"Added #{item.issue_number}: {item.text}")


if __name__ == "__main__":
    typer_app()
