# backend/dealership/services/people_service.py
"""
People Service

Owners (consignors) and clients (buyers). Vehicles reference people as
owner_id and buyer_id; a referenced person cannot be deleted.
"""
from __future__ import annotations

import re

from sqlalchemy import func, or_

from ..errors import NotFoundError, ReferenceInUseError
from ..extensions import db
from ..models import Person, PERSON_TYPES, Vehicle
from ..validation import ModelValidationPolicy, validate_payload
from .concurrency import atomic

PERSON_POLICY = ModelValidationPolicy(
    writable_fields={"name", "email", "phone", "document", "type"},
    required_on_create={"name", "phone", "type"},
    choices={"type": PERSON_TYPES},
)

# Lookups with fewer digits than this would match half the table
MIN_DOCUMENT_DIGITS = 3

_NON_DIGITS = re.compile(r"\D")


def require_person(person_id: int, *, field: str = "person_id") -> Person:
    person = db.session.get(Person, person_id)
    if person is None:
        raise NotFoundError(f"Person {person_id} not found", field=field)
    return person


def list_people(person_type: str | None = None) -> list[dict]:
    query = db.session.query(Person).order_by(Person.name.asc(), Person.id.asc())
    if person_type:
        query = query.filter(Person.type == person_type)
    return [p.to_dict() for p in query.all()]


def get_person(person_id: int) -> dict:
    return require_person(person_id).to_dict()


def find_person_by_document(document: str) -> dict | None:
    """
    Match on digits only so "123.456.789-00" and "12345678900" are the same.

    Returns None when the query has too few digits to be meaningful.
    """
    cleaned = _NON_DIGITS.sub("", document or "")
    if len(cleaned) < MIN_DOCUMENT_DIGITS:
        return None

    stripped = func.replace(func.replace(func.replace(Person.document, ".", ""), "-", ""), "/", "")
    person = (
        db.session.query(Person)
        .filter(Person.document.isnot(None), stripped == cleaned)
        .order_by(Person.id.asc())
        .first()
    )
    return person.to_dict() if person else None


def create_person(payload: dict) -> dict:
    patch = validate_payload(model=Person, payload=payload, policy=PERSON_POLICY, partial=False)

    with atomic():
        person = Person(**patch)
        db.session.add(person)

    return person.to_dict()


def update_person(person_id: int, payload: dict) -> dict:
    patch = validate_payload(model=Person, payload=payload, policy=PERSON_POLICY, partial=True)

    with atomic():
        person = require_person(person_id, field="id")
        for k, v in patch.items():
            setattr(person, k, v)

    return person.to_dict()


def delete_person(person_id: int) -> None:
    with atomic():
        person = require_person(person_id, field="id")
        in_use = (
            db.session.query(Vehicle.id)
            .filter(or_(Vehicle.owner_id == person_id, Vehicle.buyer_id == person_id))
            .first()
        )
        if in_use:
            raise ReferenceInUseError(
                "Person is still referenced by vehicles",
                field="id",
                details={"vehicle_id": in_use.id},
            )
        db.session.delete(person)
