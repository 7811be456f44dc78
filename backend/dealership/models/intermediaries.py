from __future__ import annotations

from ..extensions import db
from dealership.time_utils import to_utc_z, utcnow


class Intermediary(db.Model):
    """Third-party broker who may earn a commission on a sale."""
    __tablename__ = "intermediaries"
    __table_args__ = ({"sqlite_autoincrement": True},)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    document = db.Column(db.String(32), nullable=False)
    birth_date = db.Column(db.Date, nullable=True)

    # Opaque reference handed out by the file-storage collaborator
    photo_ref = db.Column(db.String(512), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Intermediary id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "document": self.document,
            "birth_date": self.birth_date.isoformat() if self.birth_date else None,
            "photo_ref": self.photo_ref,
            "created_at": to_utc_z(self.created_at),
        }
