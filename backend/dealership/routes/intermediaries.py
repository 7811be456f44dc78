# backend/dealership/routes/intermediaries.py
"""Sale intermediaries (brokers)."""
from flask import Blueprint, request

from ..services import intermediary_service

intermediaries_bp = Blueprint("intermediaries", __name__, url_prefix="/api/intermediaries")


@intermediaries_bp.get("")
def list_intermediaries():
    items = intermediary_service.list_intermediaries()
    return {"items": items, "count": len(items)}


@intermediaries_bp.get("/<int:intermediary_id>")
def get_intermediary(intermediary_id: int):
    return {"intermediary": intermediary_service.get_intermediary(intermediary_id)}


@intermediaries_bp.post("")
def create_intermediary():
    payload = request.get_json(silent=True) or {}
    return {"intermediary": intermediary_service.create_intermediary(payload)}, 201


@intermediaries_bp.put("/<int:intermediary_id>")
def update_intermediary(intermediary_id: int):
    payload = request.get_json(silent=True) or {}
    return {"intermediary": intermediary_service.update_intermediary(intermediary_id, payload)}


@intermediaries_bp.delete("/<int:intermediary_id>")
def delete_intermediary(intermediary_id: int):
    intermediary_service.delete_intermediary(intermediary_id)
    return "", 204
