# backend/dealership/services/vehicle_service.py
"""
Vehicle Service (inventory side of the lifecycle)

Create/update/delete never touch SOLD or the sale fields; those belong to
sale_service. Every status write goes through lifecycle_service first.

PLATE: unique, case-sensitive exact match. A deleted vehicle's plate is free
to be reused since deletes are hard deletes.
"""
from __future__ import annotations

from sqlalchemy import or_

from ..errors import DuplicateKeyError, NotFoundError
from ..extensions import db
from ..models import Vehicle, VEHICLE_STATUSES, STATUS_AWAITING_PREP
from ..time_utils import utcnow
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_vehicle
from .concurrency import atomic
from .lifecycle_service import require_direct_transition, validate_status
from .people_service import require_person
from .reporting_service import vehicle_profit

# Sale fields, entry_date and trade-in links are written only by sale_service
VEHICLE_MUTABLE_FIELDS = {
    "plate", "brand", "model", "color",
    "year_fab", "year_model", "condition", "mileage",
    "acquisition_price_cents", "price_cents",
    "status", "owner_id",
    "price_reference_code", "price_reference_price",
    "notes",
}

VEHICLE_POLICY = ModelValidationPolicy(
    writable_fields=VEHICLE_MUTABLE_FIELDS,
    required_on_create={"plate", "brand", "model", "color"},
    choices={"status": VEHICLE_STATUSES},
)


def apply_vehicle_patch(v: Vehicle, patch: dict) -> None:
    for k, val in patch.items():
        if k not in VEHICLE_MUTABLE_FIELDS:
            continue
        setattr(v, k, val)


def require_vehicle(vehicle_id: int, *, field: str = "id") -> Vehicle:
    vehicle = db.session.get(Vehicle, vehicle_id)
    if vehicle is None:
        raise NotFoundError(f"Vehicle {vehicle_id} not found", field=field)
    return vehicle


def plate_exists(plate: str, *, exclude_id: int | None = None) -> bool:
    query = db.session.query(Vehicle.id).filter(Vehicle.plate == plate)
    if exclude_id is not None:
        query = query.filter(Vehicle.id != exclude_id)
    return query.first() is not None


def validate_vehicle_fields(payload: dict, *, partial: bool) -> dict:
    """Shared by create_vehicle and the sale service's trade-in intake."""
    patch = validate_payload(model=Vehicle, payload=payload, policy=VEHICLE_POLICY, partial=partial)
    enforce_rules_vehicle(patch, current_year=utcnow().year)
    return patch


def insert_vehicle(patch: dict, *, field_prefix: str = "") -> Vehicle:
    """
    Add a new vehicle to the current transaction without committing.

    Caller owns the transaction (see create_vehicle and sale_service).
    field_prefix is prepended to error fields, e.g. "trade_in_vehicle.".
    """
    if plate_exists(patch["plate"]):
        raise DuplicateKeyError(
            "Plate already registered",
            field=f"{field_prefix}plate",
            details={"plate": patch["plate"]},
        )
    if patch.get("owner_id") is not None:
        require_person(patch["owner_id"], field=f"{field_prefix}owner_id")

    vehicle = Vehicle(status=STATUS_AWAITING_PREP, entry_date=utcnow())
    apply_vehicle_patch(vehicle, patch)
    db.session.add(vehicle)
    db.session.flush()  # assigns vehicle.id
    return vehicle


def create_vehicle(payload: dict) -> dict:
    """
    Raises:
        ValidationError: malformed or missing fields
        InvalidTransitionError: status=SOLD requested
        DuplicateKeyError: plate already registered
        NotFoundError: owner_id does not exist
    """
    patch = validate_vehicle_fields(payload, partial=False)
    if patch.get("status") is None:
        patch.pop("status", None)
    else:
        require_direct_transition(None, patch["status"])

    with atomic():
        vehicle = insert_vehicle(patch)

    return vehicle.to_dict()


def update_vehicle(vehicle_id: int, payload: dict) -> dict:
    """
    Partial update. Never moves a vehicle into or out of SOLD.

    Raises:
        NotFoundError: vehicle or owner does not exist
        InvalidTransitionError: status change touching SOLD
        DuplicateKeyError: new plate already registered
        ValidationError: malformed fields or non-writable field
    """
    patch = validate_vehicle_fields(payload, partial=True)

    with atomic():
        vehicle = require_vehicle(vehicle_id)

        if "status" in patch:
            require_direct_transition(vehicle.status, patch["status"])

        if "plate" in patch and patch["plate"] != vehicle.plate:
            if plate_exists(patch["plate"], exclude_id=vehicle.id):
                raise DuplicateKeyError("Plate already registered", field="plate", details={"plate": patch["plate"]})

        if patch.get("owner_id") is not None:
            require_person(patch["owner_id"], field="owner_id")

        apply_vehicle_patch(vehicle, patch)

    return vehicle.to_dict()


def delete_vehicle(vehicle_id: int) -> None:
    """
    Hard delete; the vehicle's expenses go with it in the same transaction.

    A sold vehicle pointing at this one as its trade-in keeps the trade-in
    value but loses the link.
    """
    with atomic():
        vehicle = require_vehicle(vehicle_id)
        db.session.query(Vehicle).filter(Vehicle.trade_in_vehicle_id == vehicle_id).update(
            {Vehicle.trade_in_vehicle_id: None},
            synchronize_session=False,
        )
        db.session.delete(vehicle)


def get_vehicle(vehicle_id: int) -> dict:
    """Vehicle with owner, buyer, expenses and (estimated) profit."""
    vehicle = require_vehicle(vehicle_id)
    data = vehicle.to_dict()
    data["owner"] = vehicle.owner.to_dict() if vehicle.owner else None
    data["buyer"] = vehicle.buyer.to_dict() if vehicle.buyer else None
    data["intermediary"] = vehicle.intermediary.to_dict() if vehicle.intermediary else None
    data["expenses"] = [e.to_dict() for e in vehicle.expenses]
    data.update(vehicle_profit(vehicle))
    return data


def get_vehicle_by_plate(plate: str) -> dict | None:
    vehicle = db.session.query(Vehicle).filter(Vehicle.plate == plate).first()
    return vehicle.to_dict() if vehicle else None


def list_vehicles(
    status: str | None = None,
    owner_id: int | None = None,
    search: str | None = None,
) -> list[dict]:
    """
    Newest entries first.

    search is a case-insensitive substring match over plate, model, brand
    and color.
    """
    query = db.session.query(Vehicle)

    if status:
        validate_status(status)
        query = query.filter(Vehicle.status == status)
    if owner_id is not None:
        query = query.filter(Vehicle.owner_id == owner_id)
    if search:
        term = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Vehicle.plate.ilike(term),
                Vehicle.model.ilike(term),
                Vehicle.brand.ilike(term),
                Vehicle.color.ilike(term),
            )
        )

    vehicles = query.order_by(Vehicle.entry_date.desc(), Vehicle.id.desc()).all()

    items = []
    for v in vehicles:
        row = v.to_dict()
        row["owner"] = v.owner.to_dict() if v.owner else None
        items.append(row)
    return items
