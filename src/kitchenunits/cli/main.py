"""Command-line interface for kitchenunits."""

from __future__ import annotations

import logging
from typing import Tuple

import click

from ..observability import configure_logging
from ..pricing import get_total_price_for_quantity, parse_price, serialize_total_price
from ..units.dimensions import format_number
from ..units.errors import QuantityError
from ..units.mixed import MixedQuantities
from ..units.quantity import ConversionTable, Quantity


def _conversions_option(func):
    return click.option(
        "--conversions",
        "conversions_text",
        default="",
        help="Conversion rules such as '100ml/150g'. Separate rules with newlines or ';'.",
    )(func)


def _load_conversions(conversions_text: str) -> ConversionTable:
    return ConversionTable.parse(conversions_text.replace(";", "\n"))


@click.group()
@click.option("--verbose", is_flag=True, help="Show diagnostics such as unrecognized units.")
def cli(verbose: bool) -> None:
    """Quantity algebra for recipes and shopping lists."""

    configure_logging(logging.DEBUG if verbose else None)


@cli.command()
@click.argument("text")
@_conversions_option
def normalize(text: str, conversions_text: str) -> None:
    """Print the canonical rendering of a quantity (or a composite 'a|b')."""

    try:
        if "|" in text:
            click.echo(str(MixedQuantities.parse(text)))
        else:
            click.echo(str(Quantity.parse(text, _load_conversions(conversions_text))))
    except QuantityError as exc:
        raise click.ClickException(str(exc))


@cli.command("sum")
@click.argument("items", nargs=-1, required=True)
@_conversions_option
def sum_command(items: Tuple[str, ...], conversions_text: str) -> None:
    """Add quantities together, converting kinds with the declared rules."""

    try:
        table = _load_conversions(conversions_text)
        total = Quantity.parse(items[0], table)
        for item in items[1:]:
            total = total.add(Quantity.parse(item, table))
    except (QuantityError, ZeroDivisionError) as exc:
        raise click.ClickException(str(exc))
    click.echo(str(total))


@cli.command()
@click.argument("numerator")
@click.argument("denominator")
@_conversions_option
def ratio(numerator: str, denominator: str, conversions_text: str) -> None:
    """Print NUMERATOR / DENOMINATOR as a plain number."""

    try:
        table = _load_conversions(conversions_text)
        value = Quantity.parse(numerator, table).divide(Quantity.parse(denominator, table))
    except (QuantityError, ZeroDivisionError) as exc:
        raise click.ClickException(str(exc))
    click.echo(format_number(value))


@cli.command()
@click.argument("price_text", metavar="PRICE")
@click.argument("quantity_text", metavar="QUANTITY")
@_conversions_option
def price(price_text: str, quantity_text: str, conversions_text: str) -> None:
    """Total PRICE (e.g. '4kr/kg') for QUANTITY (e.g. '500g|1l')."""

    try:
        parsed = parse_price(price_text, _load_conversions(conversions_text))
        quantities = MixedQuantities.parse(quantity_text)
    except QuantityError as exc:
        raise click.ClickException(str(exc))

    total = get_total_price_for_quantity(parsed, quantities)
    if total is None:
        raise click.ClickException(f"Cannot price {quantities} at {price_text}")
    click.echo(serialize_total_price(total))


if __name__ == "__main__":
    cli()
