"""CLI entry point for gerritpick.

Usage:
  gerritpick [options] checkout|co|cherry-pick|cp [QUERY...]

Searches Gerrit for open changes, lets you pick some, and fetches them into
the current git or repo checkout.
"""

from __future__ import annotations

import importlib.metadata
import logging
import os
import shlex
import sys

import click
from rich.console import Console
from rich.logging import RichHandler

from gerritpick_cli.selector import select_items
from gerritpick_core.config import verbs
from gerritpick_core.errors import ConfigError, ParseError, TransportError

console = Console()

DEFAULT_ARGS_ENV = "GERRITPICK_DEFAULT_ARGS"


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _confirm(prompt: str) -> bool:
    return click.confirm(prompt, default=False)


@click.command("gerritpick")
@click.version_option(
    version=importlib.metadata.version("gerritpick"),
    prog_name="gerritpick",
)
@click.argument("verb", type=click.Choice(verbs(), case_sensitive=False), metavar="checkout|co|cherry-pick|cp")
@click.argument("query", nargs=-1)
@click.option("--project", "-p", default=None, help="The project to search in. Defaults to the current project.")
@click.option("--url", "-u", default=None, help="The URL of the Gerrit server (ssh:// or http(s)://).")
@click.option("--closed", "-c", "include_closed", is_flag=True, help="Include closed changes.")
@click.option("--all", "-a", "select_all", is_flag=True, help="Select every matching change.")
@click.option("--debug", is_flag=True, help="Print the query, URL and debug logs while running.")
@click.option("--file", "-f", "file", default=None, help="Read change JSON from FILE instead of Gerrit.")
@click.option(
    "--config",
    "config_path",
    default=".gerritpick.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="GERRITPICK_CONFIG",
)
@click.pass_context
def main(
    ctx: click.Context,
    verb: str,
    query: tuple[str, ...],
    project: str | None,
    url: str | None,
    include_closed: bool,
    select_all: bool,
    debug: bool,
    file: str | None,
    config_path: str,
):
    """Pick Gerrit changes and check them out or cherry-pick them.

    \b
    Environment variables:
      GERRIT_URL               Gerrit server URL when --url is not given
      GERRITPICK_DEFAULT_ARGS  Arguments prepended to every invocation
    """
    from gerritpick_core.config import load_config, parse_action
    from gerritpick_core.picker import build_query, fetch_candidates, run_pick
    from gerritpick_core.remote import RemoteClient, RemoteEndpoint
    from gerritpick_core.utils.process import run_command
    from gerritpick_core.workspace import discover_workspace

    # Flags can only switch a setting on; False leaves the config file value alone.
    overrides = {
        "url": url,
        "project": project,
        "include_closed": include_closed or None,
        "select_all": select_all or None,
        "debug": debug or None,
        "file": file,
    }
    try:
        settings = load_config(config_path, cli_overrides=overrides)
        action = parse_action(verb)
    except ConfigError as e:
        raise click.UsageError(str(e))

    _configure_logging(settings.debug)

    try:
        workspace = discover_workspace(run_command)
    except ConfigError as e:
        raise click.ClickException(str(e))

    remote_url = settings.url or workspace.remote_url
    client = None
    if remote_url:
        try:
            endpoint = RemoteEndpoint.from_url(remote_url)
        except ConfigError as e:
            raise click.UsageError(str(e))
        client = RemoteClient(endpoint, runner=run_command, debug=settings.debug)
    elif not settings.file:
        raise click.UsageError("No Gerrit URL found. Set GERRIT_URL or pass --url.")

    query_string = build_query(settings, workspace.project_name, " ".join(query))
    if settings.debug:
        console.print(f"Query: '{query_string}'", markup=False)

    candidates = fetch_candidates(query_string, client, settings.file)
    try:
        selected = select_items(
            candidates,
            render=lambda commit: commit.as_item(workspace.kind),
            select_all=settings.select_all,
        )
    except (TransportError, ParseError, FileNotFoundError) as e:
        raise click.ClickException(str(e))

    if selected is None:
        ctx.exit(1)
    if not selected:
        console.print("[yellow]No matching changes found.[/yellow]")
        return

    result = run_pick(selected, action, workspace.kind, client, runner=run_command, confirm=_confirm)
    if not result.ok:
        ctx.exit(1)


def run() -> None:
    """Console-script entry point; honours GERRITPICK_DEFAULT_ARGS."""
    default_args = shlex.split(os.environ.get(DEFAULT_ARGS_ENV, ""))
    main(args=[*default_args, *sys.argv[1:]], prog_name="gerritpick")
