from __future__ import annotations

from ..extensions import db
from dealership.time_utils import to_utc_z, utcnow

PERSON_TYPE_OWNER = "OWNER"
PERSON_TYPE_CLIENT = "CLIENT"
PERSON_TYPES = {PERSON_TYPE_OWNER, PERSON_TYPE_CLIENT}


class Person(db.Model):
    """
    Vehicle owners (consignors) and clients (buyers).

    document holds CPF/CNPJ as typed by staff, punctuation included.
    Lookups by document compare digits only.
    """
    __tablename__ = "people"
    __table_args__ = (
        db.Index("ix_people_type", "type"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(32), nullable=False)
    document = db.Column(db.String(32), nullable=True, index=True)
    type = db.Column(db.String(16), nullable=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Person id={self.id} name={self.name!r} type={self.type}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "document": self.document,
            "type": self.type,
            "created_at": to_utc_z(self.created_at),
        }
