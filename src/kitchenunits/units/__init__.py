"""Quantity algebra: scalar dimensions, tagged quantities and inventories."""

from .errors import (
    IncompatibleQuantitiesError,
    IncompatibleTypesError,
    IncompatibleUnitsError,
    QuantityError,
    QuantityParseError,
    UnsupportedDivisionError,
)
from .dimensions import (
    DIMENSIONS,
    DIMENSION_NAMES,
    Area,
    Length,
    Mass,
    ScalarQuantity,
    Volume,
    dimension_for_unit,
    format_number,
    round_half_up,
)
from .quantity import (
    EMPTY_CONVERSIONS,
    ConversionRule,
    ConversionTable,
    Quantity,
    QuantityKind,
    UnknownAmount,
    parse_conversion,
    parse_conversions,
    parse_quantity,
)
from .mixed import MixedQuantities, parse_mixed_quantities

__all__ = [
    "QuantityError",
    "QuantityParseError",
    "IncompatibleQuantitiesError",
    "IncompatibleTypesError",
    "IncompatibleUnitsError",
    "UnsupportedDivisionError",
    "DIMENSIONS",
    "DIMENSION_NAMES",
    "ScalarQuantity",
    "Volume",
    "Mass",
    "Length",
    "Area",
    "dimension_for_unit",
    "format_number",
    "round_half_up",
    "EMPTY_CONVERSIONS",
    "ConversionRule",
    "ConversionTable",
    "Quantity",
    "QuantityKind",
    "UnknownAmount",
    "parse_conversion",
    "parse_conversions",
    "parse_quantity",
    "MixedQuantities",
    "parse_mixed_quantities",
]
