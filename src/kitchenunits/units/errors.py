"""Exceptions raised by the quantity algebra."""

from __future__ import annotations


class QuantityError(Exception):
    """Base class for every error raised by :mod:`kitchenunits.units`."""


class QuantityParseError(QuantityError, ValueError):
    """Raised when a quantity, conversion rule or price cannot be parsed."""

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(message)
        self.text = text


class IncompatibleQuantitiesError(QuantityError):
    """Raised when two quantities cannot be combined."""


class IncompatibleTypesError(IncompatibleQuantitiesError):
    """The quantities belong to different kinds and no rule bridges them."""


class IncompatibleUnitsError(IncompatibleQuantitiesError):
    """Both quantities are unknown but carry different unit strings."""


class UnsupportedDivisionError(IncompatibleQuantitiesError):
    """Mixed quantities spanning different or multiple dimensions."""


__all__ = [
    "QuantityError",
    "QuantityParseError",
    "IncompatibleQuantitiesError",
    "IncompatibleTypesError",
    "IncompatibleUnitsError",
    "UnsupportedDivisionError",
]
