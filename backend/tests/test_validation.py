# Overview: Pytest coverage for payload coercion and money/year rules.

from datetime import datetime

import pytest

from dealership.errors import InvalidAmountError, ValidationError
from dealership.models import Vehicle
from dealership.time_utils import month_bounds, parse_iso_datetime, shift_month
from dealership.validation import (
    MAX_PRICE_CENTS,
    ModelValidationPolicy,
    enforce_rules_vehicle,
    require_positive_amount,
    validate_payload,
)

POLICY = ModelValidationPolicy(
    writable_fields={"plate", "brand", "mileage", "price_cents", "sale_date"},
    required_on_create={"plate"},
)


class TestValidatePayload:
    def test_integer_strings_coerced(self):
        patch = validate_payload(model=Vehicle, payload={"plate": "A", "mileage": " 1200 "}, policy=POLICY, partial=False)
        assert patch["mileage"] == 1200

    @pytest.mark.parametrize("raw", ["1e5", "12.5", 12.5, True, "abc", ""])
    def test_bad_integers_rejected(self, raw):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(model=Vehicle, payload={"mileage": raw}, policy=POLICY, partial=True)
        assert excinfo.value.field == "mileage"

    def test_strings_trimmed(self):
        patch = validate_payload(model=Vehicle, payload={"plate": "  ABC-1234 "}, policy=POLICY, partial=True)
        assert patch["plate"] == "ABC-1234"

    def test_string_length_enforced(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(model=Vehicle, payload={"plate": "X" * 17}, policy=POLICY, partial=True)
        assert excinfo.value.field == "plate"

    def test_non_nullable_null_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Vehicle, payload={"brand": None}, policy=POLICY, partial=True)

    def test_datetime_normalized_to_utc(self):
        patch = validate_payload(
            model=Vehicle,
            payload={"sale_date": "2026-03-01T02:00:00+03:00"},
            policy=POLICY,
            partial=True,
        )
        assert patch["sale_date"] == datetime(2026, 2, 28, 23, 0, 0)

    def test_not_writable_rejected(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(model=Vehicle, payload={"status": "SOLD"}, policy=POLICY, partial=True)
        assert excinfo.value.field == "status"

    def test_required_missing(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(model=Vehicle, payload={}, policy=POLICY, partial=False)
        assert excinfo.value.field == "plate"

    def test_non_dict_payload(self):
        with pytest.raises(ValidationError):
            validate_payload(model=Vehicle, payload=["plate"], policy=POLICY, partial=True)


class TestMoneyRules:
    def test_positive_amount_bounds(self):
        assert require_positive_amount("x", 1) == 1
        assert require_positive_amount("x", MAX_PRICE_CENTS) == MAX_PRICE_CENTS
        for bad in (0, -1, MAX_PRICE_CENTS + 1, None, "100", True):
            with pytest.raises(InvalidAmountError):
                require_positive_amount("x", bad)

    def test_vehicle_year_range(self):
        enforce_rules_vehicle({"year_fab": 2027}, current_year=2026)
        with pytest.raises(ValidationError) as excinfo:
            enforce_rules_vehicle({"year_model": 2028}, current_year=2026)
        assert excinfo.value.field == "year_model"
        with pytest.raises(ValidationError):
            enforce_rules_vehicle({"year_fab": 1899}, current_year=2026)

    def test_negative_mileage(self):
        with pytest.raises(ValidationError):
            enforce_rules_vehicle({"mileage": -1}, current_year=2026)

    def test_zero_asking_price_allowed(self):
        enforce_rules_vehicle({"price_cents": 0}, current_year=2026)


class TestTimeUtils:
    def test_shift_month_across_years(self):
        assert shift_month(2026, 1, -1) == (2025, 12)
        assert shift_month(2025, 12, 1) == (2026, 1)
        assert shift_month(2026, 3, -14) == (2025, 1)

    def test_month_bounds_half_open(self):
        start, end = month_bounds(0, datetime(2026, 2, 28, 23, 59, 59))
        assert start == datetime(2026, 2, 1)
        assert end == datetime(2026, 3, 1)

    def test_parse_date_only(self):
        assert parse_iso_datetime("2026-01-10") == datetime(2026, 1, 10)
        assert parse_iso_datetime("") is None
