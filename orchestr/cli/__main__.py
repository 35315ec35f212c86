"""Orchestr CLI - Main Entry Point."""

import logging

import click

from .. import __version__
from . import __cli_name__
from .commands.inspect import describe_container, describe_listeners, load_application
from .utils.colors import _CHECK, banner, error, info, kv, table


class OrchestrGroup(click.Group):
    """Click group with branded help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if ctx.parent is None:
            banner("Orchestr", subtitle=f"v{__version__}  {_CHECK}  container & events")
            click.echo()
        super().format_help(ctx, formatter)


@click.group(cls=OrchestrGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """Inspect Orchestr applications."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


@cli.command("container:list")
@click.option("--app", "app_ref", required=True, help="Application reference, module:attribute")
@click.pass_context
def container_list(ctx, app_ref: str):
    """List container bindings, instances and aliases."""
    try:
        app = load_application(app_ref)
        rows = describe_container(app)
    except Exception as e:
        error(f"  Failed to inspect container: {e}")
        ctx.exit(1)

    kv("Application", app_ref)
    kv("Entries", str(len(rows)))
    click.echo()
    table(["Abstract", "Kind", "Shared", "Target"], rows)


@cli.command("event:list")
@click.option("--app", "app_ref", required=True, help="Application reference, module:attribute")
@click.option("--event", "event", default=None, help="Only listeners that would run for this event")
@click.pass_context
def event_list(ctx, app_ref: str, event):
    """List registered event listeners."""
    try:
        app = load_application(app_ref)
        rows = describe_listeners(app, event)
    except Exception as e:
        error(f"  Failed to inspect listeners: {e}")
        ctx.exit(1)

    if not rows:
        info("  No listeners registered.")
        return

    table(["Event", "Listener"], rows)


def main():
    """Entry point for `orchestr` command."""
    cli(obj={})


if __name__ == "__main__":
    main()
