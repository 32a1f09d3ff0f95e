"""CLI commands for combinations."""

from __future__ import annotations

import click

from variants.application.delete_combinations import DeleteCombinationsHandler
from variants.application.select_combination import SelectCombinationHandler
from variants.application.show_combination import (
    ShowCombinationHandler,
    ShowDefaultCombinationHandler,
)
from variants.domain.exceptions import DomainException
from variants.domain.model.value_objects import ProductId
from variants.infrastructure import bootstrap
from variants.infrastructure.config import Settings
from variants.infrastructure.persistence.combination_repository import (
    CombinationRepository,
)


def _repository(settings: Settings) -> CombinationRepository:
    return bootstrap.combination_repository(
        bootstrap.engine(settings), bootstrap.tables(settings)
    )


@click.command("init-db")
@click.pass_obj
def init_db(settings: Settings) -> None:
    """Create the combination tables if missing."""
    bootstrap.init_schema(bootstrap.engine(settings), bootstrap.tables(settings))
    click.echo("Schema ready.")


@click.command("show")
@click.option("--id", "combination_id", required=True, type=int, help="Combination ID.")
@click.pass_obj
def combination_show(settings: Settings, combination_id: int) -> None:
    """Show a single combination."""
    handler = ShowCombinationHandler(_repository(settings))

    try:
        dto = handler.handle(combination_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    attributes = ", ".join(str(a) for a in dto.attribute_ids) or "-"
    click.echo(f"Combination #{dto.id} (product #{dto.product_id})")
    click.echo(f"  Attributes: {attributes}")
    click.echo(f"  Default:    {'yes' if dto.default_on else 'no'}")
    click.echo(f"  Reference:  {dto.reference or '-'}")
    click.echo(f"  Price:      {dto.price_impact}")
    click.echo(f"  Weight:     {dto.weight}")
    click.echo(f"  Quantity:   {dto.quantity}")


@click.command("list")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def combination_list(settings: Settings, product_id: int) -> None:
    """List the combination IDs of a product."""
    try:
        ids = _repository(settings).get_combination_ids(ProductId(product_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not ids:
        click.echo(f"Product #{product_id} has no combinations.")
        return

    for cid in ids:
        click.echo(str(cid))


@click.command("match")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option(
    "--attribute",
    "attribute_ids",
    required=True,
    multiple=True,
    type=int,
    help="Attribute ID (repeatable).",
)
@click.pass_obj
def combination_match(
    settings: Settings, product_id: int, attribute_ids: tuple[int, ...]
) -> None:
    """Find the combination for an exact set of attributes."""
    handler = SelectCombinationHandler(_repository(settings))

    try:
        matches = handler.handle(product_id, list(attribute_ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for dto in matches:
        click.echo(f"#{dto.id} {dto.reference or '-'} {dto.price_impact}")
    if len(matches) > 1:
        click.echo(f"Warning: {len(matches)} combinations share this attribute set.")


@click.command("default")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.pass_obj
def combination_default(settings: Settings, product_id: int) -> None:
    """Show the flagged and the rule-resolved default combination."""
    handler = ShowDefaultCombinationHandler(_repository(settings))

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Flagged default:  {dto.flagged_id or '-'}")
    click.echo(f"Resolved default: {dto.resolved_id or '-'}")


@click.command("delete")
@click.option(
    "--id",
    "combination_ids",
    required=True,
    multiple=True,
    type=int,
    help="Combination ID (repeatable).",
)
@click.pass_obj
def combination_delete(settings: Settings, combination_ids: tuple[int, ...]) -> None:
    """Delete one or more combinations."""
    handler = DeleteCombinationsHandler(_repository(settings))

    try:
        report = handler.handle(list(combination_ids))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    for cid in report.deleted:
        click.echo(f"Deleted combination #{cid}")
    for failure in report.failed:
        click.echo(f"Failed #{failure.combination_id}: {failure.reason}", err=True)
    if report.failed:
        raise click.ClickException(
            f"{len(report.failed)} of {len(combination_ids)} combinations not deleted"
        )
