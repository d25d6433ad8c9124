"""Recipe scaling and shopping helpers built on the quantity algebra.

These helpers are what a recipe sheet or shopping list calls into: they take
plain quantity text, never touch storage, and report problems as values.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from kitchenunits.pricing import Price, get_total_price_for_quantity
from kitchenunits.units.dimensions import round_half_up
from kitchenunits.units.errors import IncompatibleQuantitiesError, QuantityParseError
from kitchenunits.units.mixed import MixedQuantities
from kitchenunits.units.quantity import Quantity

logger = logging.getLogger(__name__)

_SERVINGS_RE = re.compile(r"^\s*(\d+)\s*p?\s*$")

IngredientQuantity = Union[str, float, None]


@dataclass(frozen=True)
class Ingredient:
    name: str
    quantity: IngredientQuantity = None

    def has_quantity(self) -> bool:
        return self.quantity is not None and str(self.quantity).strip() != ""


@dataclass(frozen=True)
class Recipe:
    """A recipe for ``people`` servings, written ``"<n>p"``."""

    name: str
    people: str
    ingredients: Tuple[Ingredient, ...] = field(default_factory=tuple)


def parse_servings(text: Union[str, int]) -> int:
    """Return the number of servings in ``"4p"`` (or ``"4"``)."""

    match = _SERVINGS_RE.match(str(text))
    if match is None or int(match.group(1)) <= 0:
        raise QuantityParseError(f"Invalid servings: {text}", str(text))
    return int(match.group(1))


def resize_ingredient(ingredient: Ingredient, ratio: float) -> Ingredient:
    if not ingredient.has_quantity():
        return ingredient
    scaled = MixedQuantities.parse(ingredient.quantity).multiply(ratio)
    return replace(ingredient, quantity=str(scaled))


def resize_recipe(recipe: Recipe, people: Union[str, int]) -> Recipe:
    """Scale every ingredient of ``recipe`` to ``people`` servings."""

    target = parse_servings(people)
    ratio = target / parse_servings(recipe.people)
    return Recipe(
        name=recipe.name,
        people=f"{target}p",
        ingredients=tuple(resize_ingredient(ingredient, ratio) for ingredient in recipe.ingredients),
    )


def find_unconvertible_ingredients(
    ingredients: Iterable[Ingredient],
    prices: Mapping[str, Optional[Price]],
) -> List[str]:
    """List ingredients that cannot be priced with the store's articles.

    ``prices`` maps article names to their price (``None`` when the article
    exists but has no price). An ingredient is a problem when its article is
    missing, unpriced, or when its quantity cannot be added to the price's
    reference quantity even with the price's conversion rules.
    """

    problems: List[str] = []
    for ingredient in ingredients:
        if ingredient.name not in prices:
            problems.append(f"{ingredient.name} does not exist in the selected store")
            continue

        price = prices[ingredient.name]
        if price is None:
            problems.append(f"{ingredient.name} does not have a price in the selected store")
            continue

        if not ingredient.has_quantity():
            continue
        try:
            quantity = Quantity.parse(ingredient.quantity, price.quantity.conversions)
        except QuantityParseError:
            logger.debug("Skipping unparseable quantity for %s: %r", ingredient.name, ingredient.quantity)
            continue

        try:
            price.quantity.add(quantity)
        except (IncompatibleQuantitiesError, ZeroDivisionError):
            problems.append(
                f"The quantity of {ingredient.name} ({ingredient.quantity}) could not be converted"
            )

    if problems:
        logger.info(
            "The following ingredients have configuration problems:\n%s",
            "\n".join(f"- {problem}" for problem in problems),
        )
    return problems


def total_price(lines: Iterable[Tuple[Price, MixedQuantities]]) -> Dict[str, float]:
    """Sum priced lines per currency; lines that cannot be priced are skipped."""

    totals: Dict[str, float] = {}
    for price, quantities in lines:
        line_total = get_total_price_for_quantity(price, quantities)
        if line_total is None:
            continue
        totals[line_total.currency] = totals.get(line_total.currency, 0) + line_total.value
    return {currency: round_half_up(value * 100) / 100 for currency, value in totals.items()}


@dataclass(frozen=True)
class ListItem:
    """One row of a shopping list; the same article may appear on many rows."""

    name: str
    quantity: IngredientQuantity = None


@dataclass(frozen=True)
class GeneratedListItem:
    quantity: str
    checked: bool = False


def generate_list(
    items: Iterable[ListItem],
    previous: Optional[Mapping[str, GeneratedListItem]] = None,
) -> Dict[str, GeneratedListItem]:
    """Merge shopping list rows into one entry per article.

    Quantities of rows sharing an article name are summed as mixed
    quantities. An article keeps its ``checked`` flag from ``previous`` only
    while its rendered quantity is unchanged. Rows without a name are skipped.
    """

    totals: Dict[str, MixedQuantities] = {}
    rows = 0
    for item in items:
        if not item.name:
            continue
        rows += 1
        quantity = MixedQuantities()
        if item.quantity is not None and str(item.quantity).strip():
            quantity = MixedQuantities.parse(item.quantity)
        totals[item.name] = totals[item.name].add(quantity) if item.name in totals else quantity

    previous = previous or {}
    generated: Dict[str, GeneratedListItem] = {}
    for name, total in totals.items():
        rendered = str(total)
        old = previous.get(name)
        checked = old is not None and old.quantity == rendered and old.checked
        generated[name] = GeneratedListItem(rendered, checked)
    logger.debug("Merged %d list rows into %d articles", rows, len(generated))
    return generated


__all__ = [
    "Ingredient",
    "Recipe",
    "ListItem",
    "GeneratedListItem",
    "generate_list",
    "parse_servings",
    "resize_ingredient",
    "resize_recipe",
    "find_unconvertible_ingredients",
    "total_price",
]
