from __future__ import annotations

from ..extensions import db
from dealership.time_utils import to_utc_z, utcnow

# Vehicle status values (must match services/lifecycle_service.py)
STATUS_AWAITING_PREP = "AWAITING_PREP"
STATUS_AVAILABLE = "AVAILABLE"
STATUS_IN_MAINTENANCE = "IN_MAINTENANCE"
STATUS_RESERVED = "RESERVED"
STATUS_SOLD = "SOLD"

VEHICLE_STATUSES = {
    STATUS_AWAITING_PREP,
    STATUS_AVAILABLE,
    STATUS_IN_MAINTENANCE,
    STATUS_RESERVED,
    STATUS_SOLD,
}


class Vehicle(db.Model):
    """
    Inventory vehicle.

    STATUS: AWAITING_PREP / AVAILABLE / IN_MAINTENANCE / RESERVED move freely
    between each other. SOLD is terminal and only written by the sale service,
    together with sale_price_cents, sale_date and buyer_id.

    TRADE-IN: trade_in_vehicle_id points at a vehicle inserted by the same
    sale transaction, never at a pre-existing row, so links cannot cycle.
    """
    __tablename__ = "vehicles"
    __table_args__ = (
        db.UniqueConstraint("plate", name="uq_vehicles_plate"),
        db.Index("ix_vehicles_status_sale_date", "status", "sale_date"),
        db.Index("ix_vehicles_entry_date", "entry_date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    plate = db.Column(db.String(16), nullable=False)
    brand = db.Column(db.String(64), nullable=False)
    model = db.Column(db.String(128), nullable=False)
    color = db.Column(db.String(64), nullable=False)
    year_fab = db.Column(db.Integer, nullable=True)
    year_model = db.Column(db.Integer, nullable=True)
    condition = db.Column(db.String(64), nullable=True)
    mileage = db.Column(db.Integer, nullable=True)

    # Internal cost, informational only (not netted into reports)
    acquisition_price_cents = db.Column(db.Integer, nullable=True)
    # Asking price
    price_cents = db.Column(db.Integer, nullable=True)

    status = db.Column(db.String(32), nullable=False, default=STATUS_AWAITING_PREP)

    owner_id = db.Column(db.Integer, db.ForeignKey("people.id"), nullable=True, index=True)
    buyer_id = db.Column(db.Integer, db.ForeignKey("people.id"), nullable=True, index=True)

    sale_price_cents = db.Column(db.Integer, nullable=True)
    sale_date = db.Column(db.DateTime, nullable=True)
    sale_mileage = db.Column(db.Integer, nullable=True)

    # Opaque strings from the price-reference collaborator (FIPE code / price)
    price_reference_code = db.Column(db.String(32), nullable=True)
    price_reference_price = db.Column(db.String(64), nullable=True)

    trade_in_vehicle_id = db.Column(
        db.Integer,
        db.ForeignKey("vehicles.id", ondelete="SET NULL"),
        nullable=True,
    )
    trade_in_value_cents = db.Column(db.Integer, nullable=True)

    intermediary_id = db.Column(db.Integer, db.ForeignKey("intermediaries.id"), nullable=True, index=True)
    intermediary_commission_cents = db.Column(db.Integer, nullable=True)

    entry_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    notes = db.Column(db.Text, nullable=True)

    owner = db.relationship("Person", foreign_keys=[owner_id])
    buyer = db.relationship("Person", foreign_keys=[buyer_id])
    intermediary = db.relationship("Intermediary")
    trade_in_vehicle = db.relationship("Vehicle", remote_side=[id], foreign_keys=[trade_in_vehicle_id])
    expenses = db.relationship(
        "Expense",
        backref=db.backref("vehicle", lazy=True),
        cascade="all, delete-orphan",
        order_by="Expense.date.desc()",
        lazy=True,
    )

    def __repr__(self) -> str:
        return f"<Vehicle id={self.id} plate={self.plate!r} status={self.status}>"

    @property
    def is_sold(self) -> bool:
        return self.status == STATUS_SOLD

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "plate": self.plate,
            "brand": self.brand,
            "model": self.model,
            "color": self.color,
            "year_fab": self.year_fab,
            "year_model": self.year_model,
            "condition": self.condition,
            "mileage": self.mileage,
            "acquisition_price_cents": self.acquisition_price_cents,
            "price_cents": self.price_cents,
            "status": self.status,
            "owner_id": self.owner_id,
            "buyer_id": self.buyer_id,
            "sale_price_cents": self.sale_price_cents,
            "sale_date": to_utc_z(self.sale_date),
            "sale_mileage": self.sale_mileage,
            "price_reference_code": self.price_reference_code,
            "price_reference_price": self.price_reference_price,
            "trade_in_vehicle_id": self.trade_in_vehicle_id,
            "trade_in_value_cents": self.trade_in_value_cents,
            "intermediary_id": self.intermediary_id,
            "intermediary_commission_cents": self.intermediary_commission_cents,
            "entry_date": to_utc_z(self.entry_date),
            "notes": self.notes,
        }
