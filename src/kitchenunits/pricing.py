"""Price parsing and valuation of composite quantities."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from kitchenunits.observability import emit_diagnostic
from kitchenunits.units.dimensions import format_number, round_half_up
from kitchenunits.units.errors import IncompatibleQuantitiesError, QuantityParseError
from kitchenunits.units.mixed import MixedQuantities
from kitchenunits.units.quantity import ConversionTable, Quantity

PRICE_RE = re.compile(r"^([0-9.]+)([^0-9/]+)(/(.*))?$")
_STARTS_WITH_DIGIT_RE = re.compile(r"^[0-9]")


@dataclass(frozen=True)
class Price:
    """``value`` ``currency`` per ``quantity`` (e.g. 4kr per 1kg)."""

    value: float
    currency: str
    quantity: Quantity

    def __str__(self) -> str:
        return f"{format_number(self.value)}{self.currency}/{self.quantity}"


@dataclass(frozen=True)
class TotalPrice:
    value: float
    currency: str

    def __str__(self) -> str:
        return serialize_total_price(self)


def _round_cents(value: float) -> float:
    return round_half_up(value * 100) / 100


def parse_price(text: str, conversions: Union[ConversionTable, str, None] = None) -> Price:
    """Parse ``"<value><currency>[/<quantity>]"``.

    A missing quantity means "per unit" (``1`` with no unit), and a quantity
    without a leading number is read as one of that unit, so ``"4kr/kg"`` is
    4kr per ``1kg``. The reference quantity carries ``conversions``.

    Raises
    ------
    QuantityParseError
        ``Invalid price`` when the overall shape does not match, ``Invalid
        quantity`` when the reference quantity cannot be parsed.
    """

    match = PRICE_RE.match(text)
    if match is None:
        raise QuantityParseError(f"Invalid price: {text}", text)

    value_text, currency, _, quantity_text = match.groups()
    try:
        value = float(value_text)
    except ValueError:
        raise QuantityParseError(f"Invalid price: {text}", text) from None

    table = ConversionTable.coerce(conversions)
    if not quantity_text:
        return Price(value, currency, Quantity.from_count(1, "", table))

    if not _STARTS_WITH_DIGIT_RE.match(quantity_text):
        quantity_text = f"1{quantity_text}"
    try:
        quantity = Quantity.parse(quantity_text, table)
    except QuantityParseError:
        raise QuantityParseError(f"Invalid quantity: {quantity_text}", quantity_text) from None
    return Price(value, currency, quantity)


def get_total_price_for_quantity(price: Price, quantities: MixedQuantities) -> Optional[TotalPrice]:
    """Price every part of ``quantities`` against ``price``.

    Each dimension is divided by the reference quantity (through the price's
    conversion rules when kinds differ) and the contributions are summed.
    Returns ``None`` when any part cannot be expressed in the reference kind.
    """

    reference = price.quantity
    try:
        total = 0.0
        for component in quantities.components(reference.conversions):
            total += component.divide(reference) * price.value
    except (IncompatibleQuantitiesError, ZeroDivisionError) as exc:
        emit_diagnostic(
            "price-incompatible",
            f"Cannot price {quantities} at {price}: {exc}",
            level=logging.ERROR,
            price=str(price),
            quantity=str(quantities),
        )
        return None

    return TotalPrice(_round_cents(total), price.currency)


def serialize_total_price(price: TotalPrice) -> str:
    return f"{format_number(_round_cents(price.value))}{price.currency}"


__all__ = [
    "PRICE_RE",
    "Price",
    "TotalPrice",
    "parse_price",
    "get_total_price_for_quantity",
    "serialize_total_price",
]
