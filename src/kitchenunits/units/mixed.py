"""Composite quantities spanning several dimensions.

A recipe line or a shopping list total is rarely a single quantity: ``"4.2cl|
300g|6 gousses"`` holds a volume, a mass and a count of cloves at once.
:class:`MixedQuantities` keeps at most one scalar per dimension plus an ordered
mapping of unknown units to counts, and only divides when both sides span the
same single dimension.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple, Union

from .dimensions import Area, Length, Mass, ScalarQuantity, Volume, format_number
from .errors import QuantityParseError, UnsupportedDivisionError
from .quantity import ConversionTable, Quantity, UnknownAmount

_NAMED_FIELDS: Tuple[str, ...] = ("volume", "mass", "length", "area")
_INVALID_KEY_RE = re.compile(r"[|\s]")


@dataclass(frozen=True, eq=False)
class MixedQuantities:
    """Additive inventory of one scalar per dimension plus unknown units."""

    volume: Optional[Volume] = None
    mass: Optional[Mass] = None
    length: Optional[Length] = None
    area: Optional[Area] = None
    unknown: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key in self.unknown:
            if _INVALID_KEY_RE.search(key):
                raise QuantityParseError(f"Invalid unit: {key!r}", key)
        object.__setattr__(self, "unknown", MappingProxyType(dict(self.unknown)))

    # -- Construction -----------------------------------------------------
    @classmethod
    def parse(cls, value: Union[float, str] = "") -> "MixedQuantities":
        """Parse ``"<token>|<token>|..."``; blank segments are ignored."""

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.from_count(value)

        total = cls()
        for segment in value.split("|"):
            if not segment.strip():
                continue
            total = total.add(cls.from_quantity(Quantity.parse(segment)))
        return total

    @classmethod
    def from_count(cls, count: float, unit: str = "") -> "MixedQuantities":
        return cls.from_quantity(Quantity.from_count(count, unit))

    @classmethod
    def from_quantity(cls, quantity: Quantity) -> "MixedQuantities":
        payload = quantity.payload
        if isinstance(payload, UnknownAmount):
            return cls(unknown={payload.unit: payload.count})
        return cls(**{payload.name: payload})

    # -- Introspection ----------------------------------------------------
    def dimensions(self) -> List[str]:
        """Dimension names present, then unknown unit keys in insertion order."""

        return [key for _, key in self._entries()]

    def _entries(self) -> List[Tuple[bool, str]]:
        # (is_named, key) pairs keep an unknown unit called "volume" apart from
        # the volume dimension.
        entries = [(True, name) for name in _NAMED_FIELDS if getattr(self, name) is not None]
        entries.extend((False, key) for key in self.unknown)
        return entries

    def is_empty(self) -> bool:
        return not self._entries()

    def components(self, conversions: Union[ConversionTable, str, None] = None) -> Iterator[Quantity]:
        """Yield every present part as a single-dimension :class:`Quantity`."""

        table = ConversionTable.coerce(conversions)
        for name in _NAMED_FIELDS:
            scalar = getattr(self, name)
            if scalar is not None:
                yield Quantity(scalar, table)
        for unit, count in self.unknown.items():
            yield Quantity(UnknownAmount(unit, count), table)

    # -- Algebra ----------------------------------------------------------
    def add(self, other: Optional["MixedQuantities"] = None) -> "MixedQuantities":
        if other is None:
            return self

        merged = dict(self.unknown)
        for key, value in other.unknown.items():
            merged[key] = merged[key] + value if key in merged else value

        return MixedQuantities(
            volume=_add_scalars(self.volume, other.volume),
            mass=_add_scalars(self.mass, other.mass),
            length=_add_scalars(self.length, other.length),
            area=_add_scalars(self.area, other.area),
            unknown=merged,
        )

    def multiply(self, factor: float) -> "MixedQuantities":
        # Zero absorbs every field instead of leaving zero-valued scalars.
        if factor == 0:
            return MixedQuantities()

        return MixedQuantities(
            volume=_multiply_scalar(self.volume, factor),
            mass=_multiply_scalar(self.mass, factor),
            length=_multiply_scalar(self.length, factor),
            area=_multiply_scalar(self.area, factor),
            unknown={key: value * factor for key, value in self.unknown.items()},
        )

    def divide(self, other: "MixedQuantities") -> float:
        """Ratio of two inventories spanning the same single dimension.

        An empty inventory divided by a non-empty one is ``0``.

        Raises
        ------
        UnsupportedDivisionError
            For every other combination.
        """

        these = self._entries()
        those = other._entries()

        if not these and those:
            return 0

        if len(these) == 1 and len(those) == 1 and these[0] == those[0]:
            is_named, key = these[0]
            if is_named:
                return getattr(self, key).divide(getattr(other, key))
            return self.unknown[key] / other.unknown[key]

        raise UnsupportedDivisionError(f"Division unsupported for these quantities: {self} / {other}")

    def __add__(self, other: "MixedQuantities") -> "MixedQuantities":
        return self.add(other)

    def __mul__(self, factor: float) -> "MixedQuantities":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self, other: "MixedQuantities") -> float:
        return self.divide(other)

    # -- Value semantics --------------------------------------------------
    def _key(self) -> tuple:
        return (self.volume, self.mass, self.length, self.area, dict(self.unknown))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MixedQuantities):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash((self.volume, self.mass, self.length, self.area, frozenset(self.unknown.items())))

    def __repr__(self) -> str:
        parts = [f"{name}={getattr(self, name)!r}" for name in _NAMED_FIELDS if getattr(self, name) is not None]
        if self.unknown:
            parts.append(f"unknown={dict(self.unknown)!r}")
        return f"MixedQuantities({', '.join(parts)})"

    def __str__(self) -> str:
        rendered = [str(getattr(self, name)) for name in _NAMED_FIELDS if getattr(self, name) is not None]
        rendered.extend(
            format_number(count) if key == "" else f"{format_number(count)} {key}"
            for key, count in self.unknown.items()
        )
        return "|".join(rendered)


def _add_scalars(left: Optional[ScalarQuantity], right: Optional[ScalarQuantity]) -> Optional[ScalarQuantity]:
    if left is None:
        return right
    return left.add(right)


def _multiply_scalar(value: Optional[ScalarQuantity], factor: float) -> Optional[ScalarQuantity]:
    return None if value is None else value.multiply(factor)


def parse_mixed_quantities(value: Union[float, str] = "") -> MixedQuantities:
    return MixedQuantities.parse(value)


__all__ = ["MixedQuantities", "parse_mixed_quantities"]
