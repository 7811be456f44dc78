# backend/dealership/services/expense_service.py
"""
Expense Service

Two ledgers feed the financial reports:
- Expense: tied to exactly one vehicle, deleted with it
- StoreExpense: operating costs, independent of any vehicle
"""
from __future__ import annotations

from datetime import datetime

from ..errors import NotFoundError
from ..extensions import db
from ..models import Expense, StoreExpense, STORE_EXPENSE_CATEGORIES, Vehicle
from ..validation import ModelValidationPolicy, validate_payload, require_positive_amount
from .concurrency import atomic

EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"vehicle_id", "description", "amount_cents", "date"},
    required_on_create={"vehicle_id", "description", "amount_cents"},
)

STORE_EXPENSE_POLICY = ModelValidationPolicy(
    writable_fields={"description", "category", "amount_cents", "date"},
    required_on_create={"description", "category", "amount_cents"},
    choices={"category": STORE_EXPENSE_CATEGORIES},
)


def list_expenses_by_vehicle(vehicle_id: int) -> list[dict]:
    rows = (
        db.session.query(Expense)
        .filter(Expense.vehicle_id == vehicle_id)
        .order_by(Expense.date.desc(), Expense.id.desc())
        .all()
    )
    return [e.to_dict() for e in rows]


def create_expense(
    vehicle_id: int,
    description: str,
    amount_cents: int,
    date: datetime | str | None = None,
) -> dict:
    """
    Record a cost against a vehicle.

    Raises:
        ValidationError: malformed fields
        InvalidAmountError: amount_cents <= 0
        NotFoundError: vehicle does not exist
    """
    payload = {"vehicle_id": vehicle_id, "description": description, "amount_cents": amount_cents}
    if date is not None:
        payload["date"] = date
    patch = validate_payload(model=Expense, payload=payload, policy=EXPENSE_POLICY, partial=False)
    require_positive_amount("amount_cents", patch["amount_cents"])

    with atomic():
        if db.session.get(Vehicle, patch["vehicle_id"]) is None:
            raise NotFoundError(f"Vehicle {patch['vehicle_id']} not found", field="vehicle_id")
        expense = Expense(**patch)
        db.session.add(expense)

    return expense.to_dict()


def delete_expense(expense_id: int) -> None:
    with atomic():
        expense = db.session.get(Expense, expense_id)
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found", field="id")
        db.session.delete(expense)


def list_store_expenses(category: str | None = None) -> list[dict]:
    query = db.session.query(StoreExpense).order_by(StoreExpense.date.desc(), StoreExpense.id.desc())
    if category:
        query = query.filter(StoreExpense.category == category)
    return [e.to_dict() for e in query.all()]


def create_store_expense(payload: dict) -> dict:
    patch = validate_payload(model=StoreExpense, payload=payload, policy=STORE_EXPENSE_POLICY, partial=False)
    require_positive_amount("amount_cents", patch["amount_cents"])

    with atomic():
        expense = StoreExpense(**patch)
        db.session.add(expense)

    return expense.to_dict()


def delete_store_expense(expense_id: int) -> None:
    with atomic():
        expense = db.session.get(StoreExpense, expense_id)
        if expense is None:
            raise NotFoundError(f"Store expense {expense_id} not found", field="id")
        db.session.delete(expense)
