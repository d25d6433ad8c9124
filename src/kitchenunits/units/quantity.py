"""Single-dimension quantities and user-declared conversion rules.

A :class:`Quantity` is a closed sum over the four scalar dimensions and the
open ``unknown`` bucket (a count attached to an arbitrary unit string, such as
``"6 gousses"``). Quantities of different kinds can still be added or divided
when the caller declares how they relate, e.g. ``"100ml/150g"`` for a product
whose 100 milliliters weigh 150 grams. Those declarations live in a
:class:`ConversionTable`, which is parsed once and shared read-only by every
quantity derived from the same context.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from kitchenunits import config
from kitchenunits.observability import emit_diagnostic
from kitchenunits.parser.conversions_text import iter_rule_lines, split_rule

from .dimensions import Area, Length, Mass, Volume, dimension_for_unit, format_number
from .errors import IncompatibleTypesError, IncompatibleUnitsError, QuantityParseError

QUANTITY_RE = re.compile(r"^([0-9.]+)\s*(\S*)$")
_NUMBER_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")


class QuantityKind(str, Enum):
    VOLUME = "volume"
    MASS = "mass"
    LENGTH = "length"
    AREA = "area"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UnknownAmount:
    """A count attached to a unit none of the dimensions recognize."""

    unit: str
    count: float

    def __str__(self) -> str:
        if self.unit == "":
            return format_number(self.count)
        return f"{format_number(self.count)} {self.unit}"


Payload = Union[Volume, Mass, Length, Area, UnknownAmount]


def split_token(text: str) -> Tuple[float, str]:
    """Split ``"<number><optional unit>"`` into ``(count, unit)``."""

    stripped = text.strip()
    match = QUANTITY_RE.match(stripped)
    if not match or not _NUMBER_RE.match(match.group(1)):
        raise QuantityParseError(f"Invalid quantity: {text}", text)
    count = float(match.group(1))
    if not math.isfinite(count):
        raise QuantityParseError(f"Invalid quantity: {text}", text)
    return count, match.group(2)


@dataclass(frozen=True)
class ConversionRule:
    """``source`` of one kind is worth ``target`` of another kind."""

    source: "Quantity"
    target: "Quantity"

    def __iter__(self) -> Iterator["Quantity"]:
        yield self.source
        yield self.target

    def __str__(self) -> str:
        return f"{self.source}/{self.target}"


class ConversionTable:
    """Read-only two-level mapping ``unit key -> unit key -> rule``.

    Rules are stored in the direction they were declared; lookups in the
    opposite direction are the caller's responsibility (see
    :meth:`Quantity.try_convert_to`).
    """

    __slots__ = ("_rules",)

    def __init__(self, rules: Optional[Mapping[str, Mapping[str, ConversionRule]]] = None) -> None:
        frozen = {key: MappingProxyType(dict(inner)) for key, inner in (rules or {}).items()}
        self._rules: Mapping[str, Mapping[str, ConversionRule]] = MappingProxyType(frozen)

    @classmethod
    def parse(cls, conversions_text: Optional[str] = "") -> "ConversionTable":
        """Build a table from newline-separated ``"<A>/<B>"`` rules.

        A later rule for the same pair of unit keys replaces the earlier one.
        """

        rules: Dict[str, Dict[str, ConversionRule]] = {}
        for _, line in iter_rule_lines(conversions_text):
            rule = parse_conversion(line)
            rules.setdefault(rule.source.unit_key, {})[rule.target.unit_key] = rule
        return cls(rules)

    @classmethod
    def coerce(cls, conversions: Union["ConversionTable", str, None]) -> "ConversionTable":
        if conversions is None:
            return EMPTY_CONVERSIONS
        if isinstance(conversions, ConversionTable):
            return conversions
        return cls.parse(conversions)

    def lookup(self, from_key: str, to_key: str) -> Optional[ConversionRule]:
        inner = self._rules.get(from_key)
        if inner is None:
            return None
        return inner.get(to_key)

    @property
    def rules(self) -> Mapping[str, Mapping[str, ConversionRule]]:
        return self._rules

    def __iter__(self) -> Iterator[ConversionRule]:
        for inner in self._rules.values():
            yield from inner.values()

    def __len__(self) -> int:
        return sum(len(inner) for inner in self._rules.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConversionTable):
            return NotImplemented
        return {key: dict(inner) for key, inner in self._rules.items()} == {
            key: dict(inner) for key, inner in other._rules.items()
        }

    def __hash__(self) -> int:
        return hash(
            frozenset(
                (source_key, target_key, rule)
                for source_key, inner in self._rules.items()
                for target_key, rule in inner.items()
            )
        )

    def to_text(self) -> str:
        return "\n".join(str(rule) for rule in self)

    def __repr__(self) -> str:
        return f"ConversionTable({self.to_text()!r})"


EMPTY_CONVERSIONS = ConversionTable()


@dataclass(frozen=True)
class Quantity:
    """A value of exactly one kind, optionally aware of conversion rules."""

    payload: Payload
    conversions: ConversionTable = field(default=EMPTY_CONVERSIONS, repr=False)

    # -- Construction -----------------------------------------------------
    @classmethod
    def parse(
        cls,
        value: Union[float, str] = "",
        conversions: Union[ConversionTable, str, None] = None,
    ) -> "Quantity":
        """Parse a quantity token such as ``"300g"`` or ``"6 gousses"``.

        Numbers are taken as a count without unit.

        Raises
        ------
        QuantityParseError
            When ``value`` does not match ``<number><optional unit>``.
        """

        table = ConversionTable.coerce(conversions)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls.from_count(value, "", table)
        count, unit = split_token(value)
        return cls.from_count(count, unit, table)

    @classmethod
    def from_count(
        cls,
        count: float,
        unit: str = "",
        conversions: Union[ConversionTable, str, None] = None,
    ) -> "Quantity":
        """Build a quantity of ``count`` ``unit``, detecting its dimension."""

        table = ConversionTable.coerce(conversions)
        unit = (unit or "").strip()
        dimension = dimension_for_unit(unit)
        if dimension is not None:
            return cls(dimension.from_unit(count, unit), table)

        if unit not in config.silent_units():
            emit_diagnostic("unrecognized-unit", f"Unrecognized unit: {unit}", unit=unit)
        return cls(UnknownAmount(unit, count), table)

    def with_conversions(self, conversions: Union[ConversionTable, str, None]) -> "Quantity":
        """Return the same value bound to another conversion table."""

        return Quantity(self.payload, ConversionTable.coerce(conversions))

    # -- Introspection ----------------------------------------------------
    @property
    def kind(self) -> QuantityKind:
        if isinstance(self.payload, UnknownAmount):
            return QuantityKind.UNKNOWN
        return QuantityKind(self.payload.name)

    @property
    def unit_key(self) -> str:
        """Dimension name, or the literal unit for unknown quantities."""

        if isinstance(self.payload, UnknownAmount):
            return self.payload.unit
        return self.payload.name

    @property
    def count(self) -> float:
        """Count in the base unit (or in the unknown unit)."""

        return self.payload.count

    # -- Algebra ----------------------------------------------------------
    def try_convert_to(self, target: "Quantity") -> "Quantity":
        """Express ``self`` in ``target``'s kind when a rule allows it.

        The rule declared as ``self -> target`` wins over ``target -> self``.
        Without any rule ``self`` is returned unchanged.
        """

        rule = self.conversions.lookup(self.unit_key, target.unit_key)
        if rule is not None:
            return Quantity(rule.target.payload, self.conversions).multiply(self.divide(rule.source))

        rule = self.conversions.lookup(target.unit_key, self.unit_key)
        if rule is not None:
            return Quantity(rule.source.payload, self.conversions).multiply(self.divide(rule.target))

        return self

    def add(self, other: Optional["Quantity"] = None) -> "Quantity":
        if other is None:
            return self

        converted = other.try_convert_to(self)
        self._check_compatible(converted)
        mine, theirs = self.payload, converted.payload
        if isinstance(mine, UnknownAmount):
            assert isinstance(theirs, UnknownAmount)
            return Quantity(UnknownAmount(mine.unit, mine.count + theirs.count), self.conversions)
        return Quantity(mine.add(theirs), self.conversions)

    def multiply(self, factor: float) -> "Quantity":
        payload = self.payload
        if isinstance(payload, UnknownAmount):
            return Quantity(UnknownAmount(payload.unit, payload.count * factor), self.conversions)
        return Quantity(payload.multiply(factor), self.conversions)

    def divide(self, other: "Quantity") -> float:
        """Return the dimensionless ratio ``self / other``."""

        converted = other.try_convert_to(self)
        self._check_compatible(converted)
        mine, theirs = self.payload, converted.payload
        if isinstance(mine, UnknownAmount):
            return mine.count / theirs.count
        return mine.divide(theirs)

    def _check_compatible(self, other: "Quantity") -> None:
        mine, theirs = self.payload, other.payload
        if isinstance(mine, UnknownAmount) and isinstance(theirs, UnknownAmount):
            if mine.unit != theirs.unit:
                raise IncompatibleUnitsError(f"Incompatible units: {mine.unit} vs. {theirs.unit}")
            return
        if type(mine) is not type(theirs):
            raise IncompatibleTypesError(f"Incompatible types: {self.kind.value} vs. {other.kind.value}")

    def __add__(self, other: "Quantity") -> "Quantity":
        return self.add(other)

    def __mul__(self, factor: float) -> "Quantity":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __truediv__(self, other: "Quantity") -> float:
        return self.divide(other)

    def __str__(self) -> str:
        return str(self.payload)


def parse_conversion(conversion: str = "") -> ConversionRule:
    """Parse one ``"<quantityA>/<quantityB>"`` rule.

    Both sides are parsed as standalone quantities, without conversions.
    """

    left, right = split_rule(conversion)
    return ConversionRule(Quantity.parse(left), Quantity.parse(right))


def parse_quantity(value: Union[float, str], conversions: Union[ConversionTable, str, None] = None) -> Quantity:
    return Quantity.parse(value, conversions)


def parse_conversions(conversions_text: Optional[str] = "") -> ConversionTable:
    return ConversionTable.parse(conversions_text)


__all__ = [
    "QUANTITY_RE",
    "QuantityKind",
    "UnknownAmount",
    "Payload",
    "ConversionRule",
    "ConversionTable",
    "EMPTY_CONVERSIONS",
    "Quantity",
    "parse_conversion",
    "parse_conversions",
    "parse_quantity",
    "split_token",
]
