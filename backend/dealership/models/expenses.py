from __future__ import annotations

from ..extensions import db
from dealership.time_utils import to_utc_z, utcnow

# Fixed operating-cost categories for store expenses
STORE_EXPENSE_CATEGORIES = {
    "RENT",
    "INTERNET",
    "WATER",
    "ELECTRICITY",
    "CLEANING_SUPPLIES",
    "OFFICE_SUPPLIES",
    "PHONE",
    "INSURANCE",
    "TAXES",
    "SALARIES",
    "OTHER",
}


class Expense(db.Model):
    """
    Cost attributed to a single vehicle (preparation, repairs, fees).

    Owned by the vehicle: rows go away when the vehicle is deleted.
    """
    __tablename__ = "expenses"
    __table_args__ = (
        db.Index("ix_expenses_vehicle_date", "vehicle_id", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    vehicle_id = db.Column(
        db.Integer,
        db.ForeignKey("vehicles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    description = db.Column(db.String(255), nullable=False)

    # Authoritative storage in cents, always > 0
    amount_cents = db.Column(db.Integer, nullable=False)

    date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<Expense id={self.id} vehicle_id={self.vehicle_id} amount_cents={self.amount_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "vehicle_id": self.vehicle_id,
            "description": self.description,
            "amount_cents": self.amount_cents,
            "date": to_utc_z(self.date),
        }


class StoreExpense(db.Model):
    """Operating cost not attributable to any vehicle (rent, utilities...)."""
    __tablename__ = "store_expenses"
    __table_args__ = (
        db.Index("ix_store_expenses_category_date", "category", "date"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    description = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(32), nullable=False)
    amount_cents = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self) -> str:
        return f"<StoreExpense id={self.id} category={self.category} amount_cents={self.amount_cents}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "category": self.category,
            "amount_cents": self.amount_cents,
            "date": to_utc_z(self.date),
        }
