import click

from variants.infrastructure.cli.combination_commands import (
    combination_default,
    combination_delete,
    combination_list,
    combination_match,
    combination_show,
    init_db,
)
from variants.infrastructure.config import Settings
from variants.infrastructure.logging_config import configure_logging


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Variant catalog: product combination tools"""
    settings = Settings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings


@cli.group()
def combination() -> None:
    """Inspect and manage combinations."""


# Register subcommands
cli.add_command(init_db)
combination.add_command(combination_default)
combination.add_command(combination_delete)
combination.add_command(combination_list)
combination.add_command(combination_match)
combination.add_command(combination_show)
