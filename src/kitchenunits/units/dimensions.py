"""Scalar quantities for the four modeled physical dimensions.

Each dimension stores a single integer count expressed in its base unit
(milliliter, milligram, millimeter and squared millimeter). Counts are rounded
half-up on construction so every operation stays in integer space, and the
textual rendering picks the largest readable unit, rounding the displayed
number *up* to two decimals so a rendered quantity never understates the
stored one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import ClassVar, Mapping, Optional, Tuple, TypeVar

from .errors import IncompatibleTypesError, QuantityParseError

S = TypeVar("S", bound="ScalarQuantity")


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer, halves going toward +infinity."""

    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Return the shortest decimal text for ``value``.

    Integral values drop their decimal point (``300.0`` renders ``300``) so the
    output always matches the quantity token grammar.
    """

    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        text = f"{value:.20f}".rstrip("0").rstrip(".")
    return text


def _squared_units(units: Mapping[str, int]) -> dict[str, int]:
    squared: dict[str, int] = {}
    for unit, factor in units.items():
        for suffix in ("2", "^2", "²"):
            squared[f"{unit}{suffix}"] = factor * factor
    return squared


@dataclass(frozen=True)
class ScalarQuantity:
    """Integer count of base units for one physical dimension."""

    count: int

    name: ClassVar[str] = ""
    base_unit: ClassVar[str] = ""
    units: ClassVar[Mapping[str, int]] = MappingProxyType({})
    # Descending (threshold, unit) pairs; below every threshold the base unit
    # is used.
    render_units: ClassVar[Tuple[Tuple[int, str], ...]] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "count", round_half_up(self.count))

    # ------------------------------------------------------------------
    @classmethod
    def supports_unit(cls, unit: str) -> bool:
        return unit in cls.units

    @classmethod
    def from_unit(cls: type[S], count: float, unit: str) -> S:
        """Build a quantity from ``count`` expressed in ``unit``."""

        try:
            factor = cls.units[unit]
        except KeyError:
            raise QuantityParseError(f"Unsupported {cls.name} unit: {unit}", unit) from None
        return cls(count * factor)

    # ------------------------------------------------------------------
    def add(self: S, other: Optional[S] = None) -> S:
        if other is None:
            return self
        self._check_same_dimension(other)
        return type(self)(self.count + other.count)

    def multiply(self: S, factor: float) -> S:
        return type(self)(self.count * factor)

    def divide(self: S, other: S) -> float:
        self._check_same_dimension(other)
        return self.count / other.count

    def _check_same_dimension(self, other: ScalarQuantity) -> None:
        if type(other) is not type(self):
            raise IncompatibleTypesError(f"Incompatible types: {self.name} vs. {other.name}")

    def __add__(self: S, other: S) -> S:
        return self.add(other)

    def __mul__(self: S, factor: float) -> S:
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self: S, other: S) -> float:
        return self.divide(other)

    # ------------------------------------------------------------------
    def render_unit(self) -> str:
        for threshold, unit in self.render_units:
            if self.count >= threshold:
                return unit
        return self.base_unit

    def __str__(self) -> str:
        unit = self.render_unit()
        divisor = self.units[unit]
        value = math.ceil(self.count * 100 / divisor) / 100
        return f"{format_number(value)}{unit}"


class Volume(ScalarQuantity):
    """Volume counted in milliliters."""

    name = "volume"
    base_unit = "ml"
    units = MappingProxyType(
        {
            "ml": 1,
            "c-à-c": 5,
            "cl": 10,
            "c-à-s": 15,
            "dl": 100,
            "l": 1_000,
        }
    )
    render_units = ((1_000, "l"), (100, "dl"), (10, "cl"))

    @property
    def milliliters(self) -> int:
        return self.count


class Mass(ScalarQuantity):
    """Mass counted in milligrams. ``hg`` is accepted but never rendered."""

    name = "mass"
    base_unit = "mg"
    units = MappingProxyType(
        {
            "mg": 1,
            "g": 1_000,
            "hg": 100_000,
            "kg": 1_000_000,
        }
    )
    render_units = ((1_000_000, "kg"), (1_000, "g"))

    @property
    def milligrams(self) -> int:
        return self.count


_LENGTH_UNITS = {
    "mm": 1,
    "cm": 10,
    "dm": 100,
    "m": 1_000,
    "dam": 10_000,
    "hm": 100_000,
    "km": 1_000_000,
}


class Length(ScalarQuantity):
    """Length counted in millimeters."""

    name = "length"
    base_unit = "mm"
    units = MappingProxyType(dict(_LENGTH_UNITS))
    render_units = ((1_000_000, "km"), (1_000, "m"), (10, "cm"))

    @property
    def millimeters(self) -> int:
        return self.count


class Area(ScalarQuantity):
    """Area counted in squared millimeters.

    Every length unit is accepted squared in three spellings (``m2``, ``m^2``
    and ``m²``); rendering always uses the superscript form.
    """

    name = "area"
    base_unit = "mm²"
    units = MappingProxyType(_squared_units(_LENGTH_UNITS))
    render_units = ((1_000_000_000_000, "km²"), (1_000_000, "m²"), (100, "cm²"))

    @property
    def squared_millimeters(self) -> int:
        return self.count


DIMENSIONS: Tuple[type[ScalarQuantity], ...] = (Volume, Mass, Length, Area)
DIMENSION_NAMES: Tuple[str, ...] = tuple(dimension.name for dimension in DIMENSIONS)


def dimension_for_unit(unit: str) -> type[ScalarQuantity] | None:
    """Return the scalar type whose unit table contains ``unit``."""

    for dimension in DIMENSIONS:
        if dimension.supports_unit(unit):
            return dimension
    return None


__all__ = [
    "ScalarQuantity",
    "Volume",
    "Mass",
    "Length",
    "Area",
    "DIMENSIONS",
    "DIMENSION_NAMES",
    "dimension_for_unit",
    "format_number",
    "round_half_up",
]
