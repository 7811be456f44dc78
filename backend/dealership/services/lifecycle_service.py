# Overview: Vehicle status state machine; the single place transitions are decided.

"""
Vehicle Lifecycle

================================================================================
STATE MACHINE:
    AWAITING_PREP <-> AVAILABLE <-> IN_MAINTENANCE <-> RESERVED   (any pair)
    any non-terminal --(sale service only)--> SOLD

    AWAITING_PREP:  Just entered inventory (default, and every trade-in)
    AVAILABLE:      On the lot, can be sold
    IN_MAINTENANCE: At the workshop
    RESERVED:       Held for a client
    SOLD:           TERMINAL. Carries sale price, sale date and buyer.

RULES:
1. Non-terminal states move freely between each other.
2. SOLD is reachable only through sale_service.sell_vehicle().
3. Nothing leaves SOLD.
================================================================================
"""

from __future__ import annotations
from typing import Literal

from ..errors import InvalidTransitionError, ValidationError
from ..models import VEHICLE_STATUSES, STATUS_SOLD

VehicleStatus = Literal["AWAITING_PREP", "AVAILABLE", "IN_MAINTENANCE", "RESERVED", "SOLD"]

TERMINAL_STATUSES = {STATUS_SOLD}
NON_TERMINAL_STATUSES = VEHICLE_STATUSES - TERMINAL_STATUSES


def validate_status(status: str) -> None:
    """
    Raises:
        ValidationError: If status is not one of VEHICLE_STATUSES
    """
    if status not in VEHICLE_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VEHICLE_STATUSES))}",
            field="status",
        )


def can_transition(from_status: str, to_status: str, *, via_sale: bool = False) -> bool:
    """
    Check if a state transition is valid according to the lifecycle rules.

    Args:
        from_status: Current status
        to_status: Desired status
        via_sale: True only when called by the sale transaction

    Returns:
        True if transition is allowed, False otherwise
    """
    validate_status(from_status)
    validate_status(to_status)

    if from_status in TERMINAL_STATUSES:
        return False

    if to_status == STATUS_SOLD:
        return via_sale

    return True


def require_direct_transition(from_status: str | None, to_status: str) -> None:
    """
    Gate for create/update: direct writes may never touch SOLD.

    from_status is None when a vehicle is being created.
    """
    validate_status(to_status)

    if to_status == STATUS_SOLD:
        raise InvalidTransitionError(
            "Use the sale operation to mark a vehicle as sold",
            field="status",
        )

    if from_status is None:
        return

    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(
            f"Cannot change status of a {from_status} vehicle",
            field="status",
            details={"from": from_status, "to": to_status},
        )


def require_sale_transition(from_status: str) -> None:
    """Gate for the sale transaction: any non-terminal vehicle may be sold once."""
    if not can_transition(from_status, STATUS_SOLD, via_sale=True):
        raise InvalidTransitionError(
            "Vehicle is already sold",
            field="status",
            details={"from": from_status, "to": STATUS_SOLD},
        )
