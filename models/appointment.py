from datetime import datetime
from sqlalchemy import text

from models.db import db

PENDING = "pending"
CONFIRMED = "confirmed"
COMPLETED = "completed"
CANCELLED = "cancelled"

STATUSES = (PENDING, CONFIRMED, COMPLETED, CANCELLED)


class Appointment(db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.String(32), primary_key=True)

    client_name = db.Column(db.String(120), nullable=False)
    client_phone = db.Column(db.String(40), nullable=False)

    date = db.Column(db.Date, nullable=False, index=True)
    time = db.Column(db.String(5), nullable=False)  # grid label, HH:MM

    status = db.Column(db.String(20), nullable=False, default=PENDING, index=True)

    # Plain references: deleting a service or professional leaves history intact
    service_id = db.Column(db.String(32), nullable=False, index=True)
    professional_id = db.Column(db.String(32), nullable=False, index=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        # One active appointment per (date, professional, time); cancelled rows free the slot
        db.Index(
            "uq_appointments_active_slot",
            "date", "professional_id", "time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    @property
    def is_active(self) -> bool:
        return self.status != CANCELLED

    @property
    def slot_key(self):
        return (self.date, self.professional_id, self.time)

    def to_dict(self):
        return {
            "id": self.id,
            "client_name": self.client_name,
            "client_phone": self.client_phone,
            "date": self.date.isoformat(),
            "time": self.time,
            "status": self.status,
            "service_id": self.service_id,
            "professional_id": self.professional_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
