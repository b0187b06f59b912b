"""CLI entry point — Click group with global options."""

from __future__ import annotations

import logging

import click

from clawshield import __version__
from clawshield.config import ShieldConfig


@click.group()
@click.version_option(version=__version__, prog_name="clawshield")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """ClawShield — skill baseline and update monitoring for OpenClaw."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = ShieldConfig.load()
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    config.verbose = verbose

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _register_commands() -> None:
    from clawshield.cli.scan import scan  # noqa: F811
    from clawshield.cli.update import check_update, install_update  # noqa: F811
    from clawshield.cli.watch import watch  # noqa: F811

    main.add_command(scan)
    main.add_command(check_update)
    main.add_command(install_update)
    main.add_command(watch)


_register_commands()
