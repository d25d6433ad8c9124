import logging

import pytest

from kitchenunits.observability import capture_diagnostics
from kitchenunits.pricing import (
    Price,
    TotalPrice,
    get_total_price_for_quantity,
    parse_price,
    serialize_total_price,
)
from kitchenunits.units import ConversionRule, ConversionTable, MixedQuantities, Quantity, QuantityParseError


def test_parse_price_without_quantity_is_per_unit():
    assert parse_price("4kr") == Price(4, "kr", Quantity.from_count(1))


def test_parse_price_binds_conversions_to_reference_quantity():
    price = parse_price("4€", "450g/1")
    assert price == Price(4, "€", Quantity.from_count(1, "", ConversionTable.parse("450g/1")))
    assert price.quantity.conversions.lookup("mass", "") == ConversionRule(
        Quantity.from_count(450, "g"), Quantity.from_count(1)
    )


def test_parse_price_with_unit_only_quantity():
    price = parse_price("4kr/kg", "100ml/150g")
    assert price.quantity == Quantity.from_count(1, "kg", "100ml/150g")
    assert price.quantity.conversions == ConversionTable(
        {"volume": {"mass": ConversionRule(Quantity.from_count(100, "ml"), Quantity.from_count(150, "g"))}}
    )
    assert str(price) == "4kr/1kg"


def test_parse_price_with_several_rules_from_the_same_kind():
    price = parse_price("8kr/12", "10ml/50g\n10ml/1")
    assert price.value == 8
    assert price.quantity.payload == Quantity.from_count(12).payload
    assert sorted(price.quantity.conversions.rules["volume"]) == ["", "mass"]


def test_parse_price_with_full_quantity():
    price = parse_price("16kr/250ml")
    assert price == Price(16, "kr", Quantity.from_count(250, "ml"))


@pytest.mark.parametrize(
    "text, message",
    [
        ("Coucou !", "Invalid price: Coucou !"),
        ("..kr", "Invalid price: ..kr"),
        ("4kr/1 2 3", "Invalid quantity: 1 2 3"),
    ],
)
def test_parse_price_errors(text, message):
    with pytest.raises(QuantityParseError) as excinfo:
        parse_price(text)
    assert str(excinfo.value) == message


def test_total_price_same_kind():
    assert get_total_price_for_quantity(parse_price("4kr/5ml"), MixedQuantities.parse("10ml")) == TotalPrice(8, "kr")
    assert get_total_price_for_quantity(parse_price("5€/3mg"), MixedQuantities.parse("10mg")) == TotalPrice(16.67, "€")


def test_total_price_converts_through_rules():
    per_unit = parse_price("4kr", "2ml/1")
    assert get_total_price_for_quantity(per_unit, MixedQuantities.parse("4ml")) == TotalPrice(8, "kr")

    per_liter = parse_price("5€/1l", "200g/1l")
    assert get_total_price_for_quantity(per_liter, MixedQuantities.parse("5kg")) == TotalPrice(125, "€")

    mixed = parse_price("10$/50cl", "1cl/10g")
    assert get_total_price_for_quantity(mixed, MixedQuantities.parse("1l|1kg")) == TotalPrice(40, "$")


def test_total_price_of_nothing_is_zero():
    assert get_total_price_for_quantity(parse_price("3€/kg"), MixedQuantities()) == TotalPrice(0, "€")


def test_total_price_reports_incompatible_quantities(caplog):
    with caplog.at_level(logging.ERROR, logger="kitchenunits"), capture_diagnostics() as diagnostics:
        total = get_total_price_for_quantity(parse_price("5€/6mg"), MixedQuantities.parse("4"))

    assert total is None
    assert [d.code for d in diagnostics] == ["price-incompatible"]
    assert diagnostics[0].level == logging.ERROR
    assert diagnostics[0].context == {"price": "5€/6mg", "quantity": "4"}
    assert any("Cannot price 4 at 5€/6mg" in record.getMessage() for record in caplog.records)


def test_total_price_with_zero_reference_is_none():
    assert get_total_price_for_quantity(parse_price("5€/0g"), MixedQuantities.parse("1kg")) is None


def test_serialize_total_price():
    assert serialize_total_price(TotalPrice(5, "€")) == "5€"
    assert serialize_total_price(TotalPrice(1 / 3, "kr")) == "0.33kr"
    assert str(TotalPrice(2.5, "$")) == "2.5$"
