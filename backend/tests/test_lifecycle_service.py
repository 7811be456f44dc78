# Overview: Pytest coverage for the vehicle status state machine.

import pytest

from dealership.errors import InvalidTransitionError, ValidationError
from dealership.services.lifecycle_service import (
    NON_TERMINAL_STATUSES,
    can_transition,
    require_direct_transition,
    require_sale_transition,
    validate_status,
)


class TestValidateStatus:
    def test_known_statuses_pass(self):
        for status in ("AWAITING_PREP", "AVAILABLE", "IN_MAINTENANCE", "RESERVED", "SOLD"):
            validate_status(status)

    def test_unknown_status_rejected_with_field(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_status("Vendido")
        assert excinfo.value.field == "status"


class TestCanTransition:
    @pytest.mark.parametrize("from_status", sorted(NON_TERMINAL_STATUSES))
    @pytest.mark.parametrize("to_status", sorted(NON_TERMINAL_STATUSES))
    def test_non_terminal_states_move_freely(self, from_status, to_status):
        assert can_transition(from_status, to_status)

    @pytest.mark.parametrize("from_status", sorted(NON_TERMINAL_STATUSES))
    def test_sold_only_via_sale(self, from_status):
        assert not can_transition(from_status, "SOLD")
        assert can_transition(from_status, "SOLD", via_sale=True)

    @pytest.mark.parametrize("to_status", ["AWAITING_PREP", "AVAILABLE", "IN_MAINTENANCE", "RESERVED", "SOLD"])
    def test_nothing_leaves_sold(self, to_status):
        assert not can_transition("SOLD", to_status)
        assert not can_transition("SOLD", to_status, via_sale=True)


class TestGates:
    def test_direct_sold_on_create_rejected(self):
        with pytest.raises(InvalidTransitionError) as excinfo:
            require_direct_transition(None, "SOLD")
        assert excinfo.value.field == "status"

    def test_direct_sold_on_update_rejected(self):
        with pytest.raises(InvalidTransitionError):
            require_direct_transition("AVAILABLE", "SOLD")

    def test_unsell_rejected(self):
        with pytest.raises(InvalidTransitionError):
            require_direct_transition("SOLD", "AVAILABLE")

    def test_regular_move_allowed(self):
        require_direct_transition("AWAITING_PREP", "IN_MAINTENANCE")
        require_direct_transition(None, "RESERVED")

    def test_second_sale_rejected(self):
        require_sale_transition("RESERVED")
        with pytest.raises(InvalidTransitionError):
            require_sale_transition("SOLD")
