"""FastAPI router exposing quantity parsing, arithmetic and pricing."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from kitchenunits.observability import capture_diagnostics
from kitchenunits.pricing import get_total_price_for_quantity, parse_price, serialize_total_price
from kitchenunits.recipes import Ingredient, Recipe, resize_recipe
from kitchenunits.units.errors import IncompatibleQuantitiesError, QuantityParseError
from kitchenunits.units.mixed import MixedQuantities
from kitchenunits.units.quantity import ConversionTable, Quantity


router = APIRouter(prefix="/v1", tags=["quantities"])


def _parse_error(exc: QuantityParseError) -> HTTPException:
    return HTTPException(status_code=422, detail={"message": str(exc)})


def _incompatible(exc: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail={"message": str(exc)})


def _conversions(text: str) -> ConversionTable:
    try:
        return ConversionTable.parse(text)
    except QuantityParseError as exc:
        raise _parse_error(exc)


class NormalizeReq(BaseModel):
    text: str
    conversions: str = Field(default="", description="Newline-separated A/B conversion rules")


class NormalizeResp(BaseModel):
    quantity: str
    kind: str
    unit_key: str
    diagnostics: List[str]


@router.post("/quantities/normalize", response_model=NormalizeResp)
def normalize(req: NormalizeReq) -> NormalizeResp:
    table = _conversions(req.conversions)
    with capture_diagnostics() as diagnostics:
        try:
            quantity = Quantity.parse(req.text, table)
        except QuantityParseError as exc:
            raise _parse_error(exc)
    return NormalizeResp(
        quantity=str(quantity),
        kind=quantity.kind.value,
        unit_key=quantity.unit_key,
        diagnostics=[d.message for d in diagnostics],
    )


class SumReq(BaseModel):
    items: List[str]
    conversions: str = ""


class QuantityResp(BaseModel):
    quantity: str


@router.post("/quantities/sum", response_model=QuantityResp)
def sum_quantities(req: SumReq) -> QuantityResp:
    if not req.items:
        raise HTTPException(status_code=422, detail={"message": "At least one quantity is required"})
    table = _conversions(req.conversions)
    try:
        terms = [Quantity.parse(item, table) for item in req.items]
    except QuantityParseError as exc:
        raise _parse_error(exc)

    total = terms[0]
    try:
        for term in terms[1:]:
            total = total.add(term)
    except (IncompatibleQuantitiesError, ZeroDivisionError) as exc:
        raise _incompatible(exc)
    return QuantityResp(quantity=str(total))


class MixedSumReq(BaseModel):
    items: List[str]


@router.post("/quantities/mixed/sum", response_model=QuantityResp)
def sum_mixed(req: MixedSumReq) -> QuantityResp:
    total = MixedQuantities()
    try:
        for item in req.items:
            total = total.add(MixedQuantities.parse(item))
    except QuantityParseError as exc:
        raise _parse_error(exc)
    return QuantityResp(quantity=str(total))


class ScaleReq(BaseModel):
    text: str
    factor: float


@router.post("/quantities/mixed/scale", response_model=QuantityResp)
def scale_mixed(req: ScaleReq) -> QuantityResp:
    try:
        quantities = MixedQuantities.parse(req.text)
    except QuantityParseError as exc:
        raise _parse_error(exc)
    return QuantityResp(quantity=str(quantities.multiply(req.factor)))


class RatioReq(BaseModel):
    numerator: str
    denominator: str
    conversions: str = ""


class RatioResp(BaseModel):
    ratio: float


@router.post("/quantities/ratio", response_model=RatioResp)
def ratio(req: RatioReq) -> RatioResp:
    table = _conversions(req.conversions)
    try:
        numerator = Quantity.parse(req.numerator, table)
        denominator = Quantity.parse(req.denominator, table)
    except QuantityParseError as exc:
        raise _parse_error(exc)
    try:
        return RatioResp(ratio=numerator.divide(denominator))
    except (IncompatibleQuantitiesError, ZeroDivisionError) as exc:
        raise _incompatible(exc)


class PriceTotalReq(BaseModel):
    price: str
    quantity: str
    conversions: str = ""


class PriceTotalResp(BaseModel):
    ok: bool
    total: Optional[str] = None
    value: Optional[float] = None
    currency: Optional[str] = None
    diagnostics: List[str] = Field(default_factory=list)


@router.post("/prices/total", response_model=PriceTotalResp)
def price_total(req: PriceTotalReq) -> PriceTotalResp:
    try:
        price = parse_price(req.price, _conversions(req.conversions))
        quantities = MixedQuantities.parse(req.quantity)
    except QuantityParseError as exc:
        raise _parse_error(exc)

    with capture_diagnostics() as diagnostics:
        total = get_total_price_for_quantity(price, quantities)
    messages = [d.message for d in diagnostics]
    if total is None:
        return PriceTotalResp(ok=False, diagnostics=messages)
    return PriceTotalResp(
        ok=True,
        total=serialize_total_price(total),
        value=total.value,
        currency=total.currency,
        diagnostics=messages,
    )


class IngredientModel(BaseModel):
    name: str
    quantity: Optional[str] = None


class ResizeReq(BaseModel):
    name: str
    people: str
    target: str
    ingredients: List[IngredientModel] = Field(default_factory=list)


class ResizeResp(BaseModel):
    name: str
    people: str
    ingredients: List[IngredientModel]


@router.post("/recipes/resize", response_model=ResizeResp)
def resize(req: ResizeReq) -> ResizeResp:
    recipe = Recipe(
        name=req.name,
        people=req.people,
        ingredients=tuple(Ingredient(i.name, i.quantity) for i in req.ingredients),
    )
    try:
        resized = resize_recipe(recipe, req.target)
    except QuantityParseError as exc:
        raise _parse_error(exc)
    return ResizeResp(
        name=resized.name,
        people=resized.people,
        ingredients=[IngredientModel(name=i.name, quantity=i.quantity) for i in resized.ingredients],
    )


__all__ = ["router"]
