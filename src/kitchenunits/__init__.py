"""kitchenunits - quantity algebra for recipes and shopping lists."""

from . import units
from .pricing import Price, TotalPrice, get_total_price_for_quantity, parse_price, serialize_total_price
from .units import ConversionTable, MixedQuantities, Quantity
from .version import __version__

__all__ = [
    "units",
    "ConversionTable",
    "MixedQuantities",
    "Quantity",
    "Price",
    "TotalPrice",
    "parse_price",
    "get_total_price_for_quantity",
    "serialize_total_price",
    "__version__",
]
