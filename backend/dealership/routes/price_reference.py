# backend/dealership/routes/price_reference.py
"""
FIPE price-table proxy.

Failures come back as 502 via PriceReferenceError; they never affect
inventory or sales endpoints.
"""
from flask import Blueprint

from ..services.price_reference_service import get_client

price_reference_bp = Blueprint("price_reference", __name__, url_prefix="/api/price-reference")


@price_reference_bp.get("/<string:vehicle_type>/brands")
def brands(vehicle_type: str):
    items = get_client().list_brands(vehicle_type)
    return {"items": items, "count": len(items)}


@price_reference_bp.get("/<string:vehicle_type>/brands/<string:brand_code>/models")
def models(vehicle_type: str, brand_code: str):
    items = get_client().list_models(vehicle_type, brand_code)
    return {"items": items, "count": len(items)}


@price_reference_bp.get("/<string:vehicle_type>/brands/<string:brand_code>/models/<string:model_code>/years")
def years(vehicle_type: str, brand_code: str, model_code: str):
    items = get_client().list_years(vehicle_type, brand_code, model_code)
    return {"items": items, "count": len(items)}


@price_reference_bp.get(
    "/<string:vehicle_type>/brands/<string:brand_code>/models/<string:model_code>/years/<string:year_code>"
)
def price(vehicle_type: str, brand_code: str, model_code: str, year_code: str):
    return {"price": get_client().get_price(vehicle_type, brand_code, model_code, year_code)}


@price_reference_bp.get("/<string:vehicle_type>/<string:fipe_code>/years/<string:year_code>/history")
def history(vehicle_type: str, fipe_code: str, year_code: str):
    return {"price": get_client().get_price_history(vehicle_type, fipe_code, year_code)}
