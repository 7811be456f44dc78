# backend/dealership/routes/people.py
"""Owners and clients."""
from flask import Blueprint, request

from ..services import people_service

people_bp = Blueprint("people", __name__, url_prefix="/api/people")


@people_bp.get("")
def list_people():
    items = people_service.list_people(person_type=request.args.get("type") or None)
    return {"items": items, "count": len(items)}


@people_bp.get("/search-by-document")
def search_by_document():
    """Returns {"person": null} when nothing matches or the query is too short."""
    person = people_service.find_person_by_document(request.args.get("document", ""))
    return {"person": person}


@people_bp.get("/<int:person_id>")
def get_person(person_id: int):
    return {"person": people_service.get_person(person_id)}


@people_bp.post("")
def create_person():
    payload = request.get_json(silent=True) or {}
    return {"person": people_service.create_person(payload)}, 201


@people_bp.put("/<int:person_id>")
def update_person(person_id: int):
    payload = request.get_json(silent=True) or {}
    return {"person": people_service.update_person(person_id, payload)}


@people_bp.delete("/<int:person_id>")
def delete_person(person_id: int):
    people_service.delete_person(person_id)
    return "", 204
