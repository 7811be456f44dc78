# backend/dealership/routes/expenses.py
"""Vehicle expenses and store (operating) expenses."""
from flask import Blueprint, request

from ..services import expense_service

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")
store_expenses_bp = Blueprint("store_expenses", __name__, url_prefix="/api/store-expenses")


@expenses_bp.post("")
def create_expense():
    payload = request.get_json(silent=True) or {}
    created = expense_service.create_expense(
        vehicle_id=payload.get("vehicle_id"),
        description=payload.get("description"),
        amount_cents=payload.get("amount_cents"),
        date=payload.get("date"),
    )
    return {"expense": created}, 201


@expenses_bp.delete("/<int:expense_id>")
def delete_expense(expense_id: int):
    expense_service.delete_expense(expense_id)
    return "", 204


@store_expenses_bp.get("")
def list_store_expenses():
    items = expense_service.list_store_expenses(category=request.args.get("category") or None)
    return {"items": items, "count": len(items)}


@store_expenses_bp.post("")
def create_store_expense():
    payload = request.get_json(silent=True) or {}
    created = expense_service.create_store_expense(payload)
    return {"store_expense": created}, 201


@store_expenses_bp.delete("/<int:expense_id>")
def delete_store_expense(expense_id: int):
    expense_service.delete_store_expense(expense_id)
    return "", 204
