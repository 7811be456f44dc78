# backend/dealership/routes/vehicles.py
"""
Vehicle inventory routes, including the sale operation.

Domain errors raised by the services are turned into JSON by the app-level
handler registered in create_app().
"""
from flask import Blueprint, request

from ..services import vehicle_service, sale_service, expense_service

vehicles_bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


@vehicles_bp.get("")
def list_vehicles():
    """
    Query params:
    - status: one of the vehicle statuses (optional)
    - owner_id: int (optional)
    - search: substring over plate/model/brand/color (optional)
    """
    items = vehicle_service.list_vehicles(
        status=request.args.get("status") or None,
        owner_id=request.args.get("owner_id", type=int),
        search=request.args.get("search") or None,
    )
    return {"items": items, "count": len(items)}


@vehicles_bp.get("/<int:vehicle_id>")
def get_vehicle(vehicle_id: int):
    return {"vehicle": vehicle_service.get_vehicle(vehicle_id)}


@vehicles_bp.get("/by-plate/<string:plate>")
def get_vehicle_by_plate(plate: str):
    vehicle = vehicle_service.get_vehicle_by_plate(plate)
    if vehicle is None:
        return {"error": "Vehicle not found", "field": "plate"}, 404
    return {"vehicle": vehicle}


@vehicles_bp.post("")
def create_vehicle():
    payload = request.get_json(silent=True) or {}
    created = vehicle_service.create_vehicle(payload)
    return {"vehicle": created}, 201


@vehicles_bp.put("/<int:vehicle_id>")
def update_vehicle(vehicle_id: int):
    payload = request.get_json(silent=True) or {}
    updated = vehicle_service.update_vehicle(vehicle_id, payload)
    return {"vehicle": updated}


@vehicles_bp.delete("/<int:vehicle_id>")
def delete_vehicle(vehicle_id: int):
    vehicle_service.delete_vehicle(vehicle_id)
    return "", 204


@vehicles_bp.post("/<int:vehicle_id>/sell")
def sell_vehicle(vehicle_id: int):
    """
    Mark as sold. Body: sale_price_cents (required), buyer_id, sale_date,
    sale_mileage, trade_in_vehicle {...}, trade_in_value_cents,
    intermediary_id, intermediary_commission_cents.
    """
    payload = request.get_json(silent=True) or {}
    sold = sale_service.sell_vehicle(vehicle_id, payload)
    return {"vehicle": sold}


@vehicles_bp.get("/<int:vehicle_id>/expenses")
def list_vehicle_expenses(vehicle_id: int):
    items = expense_service.list_expenses_by_vehicle(vehicle_id)
    return {"items": items, "count": len(items)}
