"""
Sale Service - the only way a vehicle becomes SOLD

One call does up to three things inside a single transaction:
1. optionally insert the buyer's trade-in as a new AWAITING_PREP vehicle
2. move the target vehicle to SOLD with price, buyer and date
3. optionally record the intermediary and commission

Either everything commits or nothing does.
"""

from __future__ import annotations

import logging

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Vehicle, STATUS_SOLD
from ..time_utils import utcnow
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    require_positive_amount,
    enforce_rules_money,
)
from .concurrency import atomic, begin_write, lock_for_update
from .intermediary_service import require_intermediary
from .lifecycle_service import require_sale_transition
from .people_service import require_person
from .vehicle_service import insert_vehicle, validate_vehicle_fields

logger = logging.getLogger(__name__)

SALE_POLICY = ModelValidationPolicy(
    writable_fields={
        "sale_price_cents",
        "buyer_id",
        "sale_date",
        "sale_mileage",
        "trade_in_value_cents",
        "intermediary_id",
        "intermediary_commission_cents",
    },
    required_on_create={"sale_price_cents"},
)

TRADE_IN_KEY = "trade_in_vehicle"


def _validate_trade_in(descriptor) -> dict:
    if not isinstance(descriptor, dict):
        raise ValidationError(f"{TRADE_IN_KEY} must be an object", field=TRADE_IN_KEY)

    # A trade-in always enters inventory as AWAITING_PREP
    fields = {k: v for k, v in descriptor.items() if k != "status"}
    try:
        patch = validate_vehicle_fields(fields, partial=False)
    except ValidationError as exc:
        exc.field = f"{TRADE_IN_KEY}.{exc.field}" if exc.field else TRADE_IN_KEY
        raise
    return patch


def validate_sale_payload(payload: dict) -> tuple[dict, dict | None]:
    """
    Validate everything that can be checked without touching the database.

    Returns (sale_patch, trade_in_patch or None).
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    payload = dict(payload)
    descriptor = payload.pop(TRADE_IN_KEY, None)

    sale_patch = validate_payload(model=Vehicle, payload=payload, policy=SALE_POLICY, partial=False)
    require_positive_amount("sale_price_cents", sale_patch["sale_price_cents"])
    enforce_rules_money(sale_patch, {"trade_in_value_cents", "intermediary_commission_cents"})

    sale_mileage = sale_patch.get("sale_mileage")
    if sale_mileage is not None and sale_mileage < 0:
        raise ValidationError("sale_mileage must be >= 0", field="sale_mileage")

    if sale_patch.get("intermediary_commission_cents") is not None and sale_patch.get("intermediary_id") is None:
        raise ValidationError(
            "intermediary_id is required when a commission is given",
            field="intermediary_id",
        )

    trade_in_patch = _validate_trade_in(descriptor) if descriptor is not None else None
    return sale_patch, trade_in_patch


def _apply_sale(vehicle: Vehicle, sale_patch: dict, trade_in: Vehicle | None) -> None:
    vehicle.status = STATUS_SOLD
    vehicle.sale_price_cents = sale_patch["sale_price_cents"]
    vehicle.buyer_id = sale_patch.get("buyer_id")
    vehicle.sale_date = sale_patch.get("sale_date") or utcnow()
    vehicle.sale_mileage = sale_patch.get("sale_mileage")
    vehicle.trade_in_vehicle_id = trade_in.id if trade_in is not None else None
    vehicle.trade_in_value_cents = sale_patch.get("trade_in_value_cents")
    vehicle.intermediary_id = sale_patch.get("intermediary_id")
    vehicle.intermediary_commission_cents = sale_patch.get("intermediary_commission_cents")


def sell_vehicle(vehicle_id: int, payload: dict) -> dict:
    """
    Mark a vehicle as sold, optionally taking a trade-in and paying a broker.

    Raises:
        ValidationError: malformed input (nothing written)
        InvalidAmountError: sale price <= 0 or negative optional amount
        NotFoundError: vehicle, buyer, intermediary or trade-in owner missing
        DuplicateKeyError: trade-in plate already registered
        InvalidTransitionError: vehicle already SOLD (lost a concurrent sale)
    """
    sale_patch, trade_in_patch = validate_sale_payload(payload)

    with atomic(plate_field=f"{TRADE_IN_KEY}.plate"):
        begin_write()
        # populate_existing: overwrite any copy already in the session with the locked row
        vehicle = (
            lock_for_update(db.session.query(Vehicle).filter(Vehicle.id == vehicle_id))
            .populate_existing()
            .first()
        )
        if vehicle is None:
            raise NotFoundError(f"Vehicle {vehicle_id} not found", field="id")

        require_sale_transition(vehicle.status)

        if sale_patch.get("buyer_id") is not None:
            require_person(sale_patch["buyer_id"], field="buyer_id")
        if sale_patch.get("intermediary_id") is not None:
            require_intermediary(sale_patch["intermediary_id"], field="intermediary_id")

        trade_in = None
        if trade_in_patch is not None:
            trade_in = insert_vehicle(trade_in_patch, field_prefix=f"{TRADE_IN_KEY}.")

        _apply_sale(vehicle, sale_patch, trade_in)

    logger.info(
        "Vehicle %s sold for %s cents (trade-in vehicle: %s)",
        vehicle.id,
        vehicle.sale_price_cents,
        vehicle.trade_in_vehicle_id,
    )
    return vehicle.to_dict()

