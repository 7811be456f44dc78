from __future__ import annotations
from datetime import date, datetime
from dealership.time_utils import parse_iso_date, parse_iso_datetime

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Date, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta

from .errors import ValidationError, InvalidAmountError


# Maximum price: R$ 9,999,999.99 (999,999,999 cents)
# This prevents database overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999

MIN_VEHICLE_YEAR = 1900


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set (security boundary)
    - required_on_create: fields required on create
    - choices: closed string sets for enum-like columns
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    choices: dict[str, set[str]] = field(default_factory=dict)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_value(col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # String input - must be plain digits (with optional leading minus)
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{col.key} must be an integer", field=col.key)
            # Reject scientific notation (e.g., "1e15", "1E10")
            if 'e' in stripped.lower():
                raise ValidationError(
                    f"{col.key} must be a plain integer (scientific notation not allowed)",
                    field=col.key,
                )
            # Reject decimal points (e.g., "12.5")
            if '.' in stripped:
                raise ValidationError(f"{col.key} must be an integer (no decimals)", field=col.key)
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{col.key} must be an integer", field=col.key)
        # Reject floats explicitly
        if isinstance(value, float):
            raise ValidationError(f"{col.key} must be an integer, not a decimal", field=col.key)
        raise ValidationError(f"{col.key} must be an integer", field=col.key)

    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        return bool(value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime", field=col.key)
            if dt is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime", field=col.key)
            return dt
        raise ValidationError(f"{col.key} must be a datetime", field=col.key)

    if isinstance(coltype, Date):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            try:
                d = parse_iso_date(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 date", field=col.key)
            if d is None:
                raise ValidationError(f"{col.key} must be an ISO-8601 date", field=col.key)
            return d
        raise ValidationError(f"{col.key} must be a date", field=col.key)

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    - closed choice sets (policy.choices)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if payload.get(f) is None)
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                field=missing[0],
            )

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}", field=k)
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}", field=k)

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null", field=k)
            patch[k] = None
            continue

        val = _coerce_value(col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank", field=k)

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}", field=k)

        allowed = policy.choices.get(k)
        if allowed is not None and val not in allowed:
            raise ValidationError(
                f"Invalid {k} '{val}'. Must be one of: {', '.join(sorted(allowed))}",
                field=k,
            )

        patch[k] = val

    return patch


def require_positive_amount(name: str, value: Any) -> int:
    """Amounts that must be > 0 (sale price, expense amount)."""
    if value is None or isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{name} must be a positive integer amount in cents", field=name)
    if value <= 0:
        raise InvalidAmountError(f"{name} must be > 0", field=name)
    if value > MAX_PRICE_CENTS:
        raise InvalidAmountError(
            f"{name} cannot exceed {MAX_PRICE_CENTS} (R$ {MAX_PRICE_CENTS / 100:,.2f})",
            field=name,
        )
    return value


def enforce_rules_money(patch: dict, fields: set[str]) -> None:
    """Optional amounts: when present they must be within 0..MAX_PRICE_CENTS."""
    for name in fields:
        amount = patch.get(name)
        if amount is None:
            continue
        if amount < 0:
            raise InvalidAmountError(f"{name} must be >= 0", field=name)
        if amount > MAX_PRICE_CENTS:
            raise InvalidAmountError(
                f"{name} cannot exceed {MAX_PRICE_CENTS} (R$ {MAX_PRICE_CENTS / 100:,.2f})",
                field=name,
            )


def enforce_rules_vehicle(patch: dict, *, current_year: int) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    enforce_rules_money(patch, {"price_cents", "acquisition_price_cents"})

    for name in ("year_fab", "year_model"):
        year = patch.get(name)
        if year is None:
            continue
        if year < MIN_VEHICLE_YEAR or year > current_year + 1:
            raise ValidationError(
                f"{name} must be between {MIN_VEHICLE_YEAR} and {current_year + 1}",
                field=name,
            )

    mileage = patch.get("mileage")
    if mileage is not None and mileage < 0:
        raise ValidationError("mileage must be >= 0", field="mileage")
