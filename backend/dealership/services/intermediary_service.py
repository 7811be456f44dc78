# backend/dealership/services/intermediary_service.py
"""Intermediaries (brokers) referenced by sold vehicles."""
from __future__ import annotations

from ..errors import NotFoundError, ReferenceInUseError
from ..extensions import db
from ..models import Intermediary, Vehicle
from ..validation import ModelValidationPolicy, validate_payload
from .concurrency import atomic

INTERMEDIARY_POLICY = ModelValidationPolicy(
    writable_fields={"name", "document", "birth_date", "photo_ref"},
    required_on_create={"name", "document"},
)


def require_intermediary(intermediary_id: int, *, field: str = "intermediary_id") -> Intermediary:
    intermediary = db.session.get(Intermediary, intermediary_id)
    if intermediary is None:
        raise NotFoundError(f"Intermediary {intermediary_id} not found", field=field)
    return intermediary


def list_intermediaries() -> list[dict]:
    rows = db.session.query(Intermediary).order_by(Intermediary.name.asc(), Intermediary.id.asc()).all()
    return [i.to_dict() for i in rows]


def get_intermediary(intermediary_id: int) -> dict:
    return require_intermediary(intermediary_id, field="id").to_dict()


def create_intermediary(payload: dict) -> dict:
    patch = validate_payload(model=Intermediary, payload=payload, policy=INTERMEDIARY_POLICY, partial=False)

    with atomic():
        intermediary = Intermediary(**patch)
        db.session.add(intermediary)

    return intermediary.to_dict()


def update_intermediary(intermediary_id: int, payload: dict) -> dict:
    patch = validate_payload(model=Intermediary, payload=payload, policy=INTERMEDIARY_POLICY, partial=True)

    with atomic():
        intermediary = require_intermediary(intermediary_id, field="id")
        for k, v in patch.items():
            setattr(intermediary, k, v)

    return intermediary.to_dict()


def delete_intermediary(intermediary_id: int) -> None:
    with atomic():
        intermediary = require_intermediary(intermediary_id, field="id")
        in_use = db.session.query(Vehicle.id).filter(Vehicle.intermediary_id == intermediary_id).first()
        if in_use:
            raise ReferenceInUseError(
                "Intermediary is still referenced by sold vehicles",
                field="id",
                details={"vehicle_id": in_use.id},
            )
        db.session.delete(intermediary)
