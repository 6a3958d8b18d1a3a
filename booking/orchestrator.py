"""Booking orchestrator: the entry point for the public flow and the admin UI.

The public flow calls, in order, ``get_bookable_services``,
``get_bookable_professionals``, ``get_available_slots`` and
``submit_booking``. A ``SlotConflict`` from ``submit_booking`` means the
caller must re-fetch availability and let the client choose again; the
orchestrator never retries on their behalf.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from booking.errors import ValidationError
from booking.formatting import display_phone
from booking.validation import clean_appointment_patch, parse_date, parse_time_label

logger = logging.getLogger(__name__)

BOOKING_FIELDS = ("service_id", "professional_id", "date", "time", "client_name", "client_phone")


@dataclass
class AppointmentView:
    """An appointment joined at read time with its catalog records, if they still exist."""

    appointment: object
    service: Optional[object] = None
    professional: Optional[object] = None

    def to_dict(self):
        data = self.appointment.to_dict()
        data["client_phone_display"] = display_phone(self.appointment.client_phone)
        data["service"] = self.service.to_dict() if self.service else None
        data["professional"] = self.professional.to_dict() if self.professional else None
        return data


class BookingOrchestrator:
    def __init__(self, services, professionals, ledger, calendar, site_config):
        self.services = services
        self.professionals = professionals
        self.ledger = ledger
        self.calendar = calendar
        self.site_config = site_config

    # ---------- public flow ----------

    def get_bookable_services(self):
        return self.services.list()

    def get_bookable_professionals(self):
        return self.professionals.list()

    def get_available_slots(self, day, professional_id: str) -> list:
        day = parse_date(day)
        self.professionals.get(professional_id)
        return self.calendar.available_slots(day, professional_id)

    def submit_booking(self, data: dict):
        if not isinstance(data, dict):
            raise ValidationError("Expected an object")

        missing = [
            f for f in BOOKING_FIELDS
            if not (isinstance(data.get(f), str) and data.get(f).strip())
        ]
        if missing:
            raise ValidationError(f"Missing field(s): {', '.join(missing)}", fields=missing)

        fields = {f: data[f].strip() for f in BOOKING_FIELDS}
        fields["date"] = parse_date(fields["date"])
        fields["time"] = parse_time_label(fields["time"])
        if not self.calendar.is_grid_time(fields["time"]):
            raise ValidationError(f"{fields['time']} is not a bookable time", field="time")

        service = self.services.get(fields["service_id"])
        professional = self.professionals.get(fields["professional_id"])

        appointment = self.ledger.append(fields)
        logger.info(
            "booking submitted id=%s service=%s professional=%s %s %s",
            appointment.id, service.id, professional.id, appointment.date, appointment.time,
        )
        return appointment

    # ---------- admin ----------

    def _join(self, appointments) -> list:
        services = {s.id: s for s in self.services.list()}
        professionals = {p.id: p for p in self.professionals.list()}
        return [
            AppointmentView(a, services.get(a.service_id), professionals.get(a.professional_id))
            for a in appointments
        ]

    def list_for_admin(self, status: str = None, day=None) -> list:
        rows = self.ledger.list_for_admin()
        if status:
            rows = [a for a in rows if a.status == status]
        if day:
            day = parse_date(day)
            rows = [a for a in rows if a.date == day]
        return self._join(rows)

    def view(self, appointment) -> AppointmentView:
        return self._join([appointment])[0]

    def update_appointment(self, appointment_id, data: dict):
        changes = clean_appointment_patch(data)
        if not changes:
            raise ValidationError("No fields to update")
        if "time" in changes and not self.calendar.is_grid_time(changes["time"]):
            raise ValidationError(f"{changes['time']} is not a bookable time", field="time")
        if "service_id" in changes:
            self.services.get(changes["service_id"])
        if "professional_id" in changes:
            self.professionals.get(changes["professional_id"])

        return self.ledger.update_fields(appointment_id, changes)

    def set_status(self, appointment_id, new_status: str):
        return self.ledger.set_status(appointment_id, (new_status or "").strip().lower())
