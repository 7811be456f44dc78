# Overview: Domain error taxonomy shared by services and routes.

from __future__ import annotations


class DealershipError(Exception):
    """
    Base for every error a service raises on purpose.

    Carries a human-readable message, the offending field when there is one,
    and an optional details dict so callers can re-prompt instead of retrying.
    """
    status_code = 400

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {"error": self.message, "field": self.field}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(DealershipError):
    """400-level input problem, raised before any write."""


class InvalidAmountError(ValidationError):
    """Monetary amount out of range (e.g. non-positive sale price)."""


class NotFoundError(DealershipError):
    """Referenced id does not exist."""
    status_code = 404


class DuplicateKeyError(DealershipError):
    """Unique key collision (vehicle plate)."""
    status_code = 409


class InvalidTransitionError(DealershipError):
    """Illegal vehicle status change (to or from SOLD outside a sale)."""
    status_code = 409


class ReferenceInUseError(DealershipError):
    """Row cannot be deleted while other rows still reference it."""
    status_code = 409


class InternalStoreError(DealershipError):
    """Underlying datastore failure."""
    status_code = 500


class PriceReferenceError(DealershipError):
    """Price-reference service unreachable or returned an error. Non-fatal."""
    status_code = 502
