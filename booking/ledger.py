"""Appointment ledger: the only place appointments are created or changed.

The ledger owns the no-double-booking rule. A slot is the tuple
``(date, professional_id, time)`` and holds at most one appointment whose
status is not ``cancelled``. Both backends re-check that rule at write time:
the in-memory ledger under a lock, the SQL ledger against a partial unique
index.
"""
import logging
import threading
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from models import db, new_id
from models.appointment import (
    Appointment,
    CANCELLED,
    COMPLETED,
    CONFIRMED,
    PENDING,
    STATUSES,
)
from booking.errors import (
    InvalidTransition,
    NotFoundError,
    SlotConflict,
    ValidationError,
)
from booking.validation import parse_date, parse_time_label, required_text

logger = logging.getLogger(__name__)

TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {COMPLETED, CANCELLED},
    COMPLETED: set(),
    CANCELLED: set(),
}

# field -> max length for the free-text ones
EDITABLE_FIELDS = {
    "client_name": 120,
    "client_phone": 40,
    "date": None,
    "time": None,
    "professional_id": 32,
    "service_id": 32,
}


def check_transition(current: str, new_status: str) -> None:
    if new_status not in STATUSES:
        raise ValidationError(f"Unknown status: {new_status}", field="status")
    if new_status not in TRANSITIONS.get(current, set()):
        raise InvalidTransition(
            f"Cannot change status from {current} to {new_status}",
            current=current,
            requested=new_status,
        )


def admin_sort_key(appointment):
    return (appointment.date, appointment.time, appointment.id)


def _slot_conflict(slot_key):
    day, professional_id, time = slot_key
    return SlotConflict(
        "This time is no longer available. Please choose another time.",
        date=day.isoformat(),
        professional_id=professional_id,
        time=time,
    )


class AppointmentLedger:
    def list_all(self) -> list:
        raise NotImplementedError

    def list_for_admin(self) -> list:
        return sorted(self.list_all(), key=admin_sort_key)

    def find(self, appointment_id):
        raise NotImplementedError

    def find_active(self, day, professional_id: str) -> list:
        raise NotImplementedError

    def append(self, fields: dict):
        raise NotImplementedError

    def update_fields(self, appointment_id, fields: dict):
        raise NotImplementedError

    def set_status(self, appointment_id, new_status: str):
        raise NotImplementedError

    def get(self, appointment_id):
        appointment = self.find(appointment_id) if appointment_id else None
        if appointment is None:
            raise NotFoundError("Appointment not found", id=appointment_id)
        return appointment

    @staticmethod
    def _new_appointment(fields: dict):
        return Appointment(
            id=new_id(),
            client_name=required_text(fields, "client_name", 120),
            client_phone=required_text(fields, "client_phone", 40),
            date=parse_date(fields.get("date")),
            time=parse_time_label(fields.get("time")),
            service_id=required_text(fields, "service_id", 32),
            professional_id=required_text(fields, "professional_id", 32),
            status=PENDING,
            created_at=datetime.utcnow(),
        )

    @staticmethod
    def _clean_changes(fields: dict) -> dict:
        unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError(f"Field(s) not editable: {', '.join(unknown)}", fields=unknown)
        changes = {}
        for key, value in fields.items():
            if key == "date":
                changes[key] = parse_date(value)
            elif key == "time":
                changes[key] = parse_time_label(value)
            else:
                changes[key] = required_text(fields, key, EDITABLE_FIELDS[key])
        return changes

    @staticmethod
    def _target_slot(appointment, changes: dict):
        return (
            changes.get("date", appointment.date),
            changes.get("professional_id", appointment.professional_id),
            changes.get("time", appointment.time),
        )


class InMemoryLedger(AppointmentLedger):
    """Reference ledger; a single lock serializes every check-and-write."""

    def __init__(self):
        self._rows = []
        self._by_id = {}
        self._lock = threading.Lock()

    def list_all(self) -> list:
        with self._lock:
            return list(self._rows)

    def find(self, appointment_id):
        return self._by_id.get(appointment_id)

    def find_active(self, day, professional_id: str) -> list:
        day = parse_date(day)
        with self._lock:
            return [
                a for a in self._rows
                if a.date == day and a.professional_id == professional_id and a.status != CANCELLED
            ]

    def _occupant(self, slot_key, exclude_id=None):
        for a in self._rows:
            if a.status != CANCELLED and a.id != exclude_id and a.slot_key == slot_key:
                return a
        return None

    def append(self, fields: dict):
        appointment = self._new_appointment(fields)
        with self._lock:
            if self._occupant(appointment.slot_key) is not None:
                logger.info("slot conflict on append %s", appointment.slot_key)
                raise _slot_conflict(appointment.slot_key)
            self._rows.append(appointment)
            self._by_id[appointment.id] = appointment
        logger.info("appointment appended id=%s slot=%s", appointment.id, appointment.slot_key)
        return appointment

    def update_fields(self, appointment_id, fields: dict):
        changes = self._clean_changes(fields)
        with self._lock:
            appointment = self.get(appointment_id)
            target = self._target_slot(appointment, changes)
            if appointment.status != CANCELLED and target != appointment.slot_key:
                if self._occupant(target, exclude_id=appointment.id) is not None:
                    raise _slot_conflict(target)
            for key, value in changes.items():
                setattr(appointment, key, value)
            appointment.updated_at = datetime.utcnow()
        return appointment

    def set_status(self, appointment_id, new_status: str):
        with self._lock:
            appointment = self.get(appointment_id)
            check_transition(appointment.status, new_status)
            appointment.status = new_status
            appointment.updated_at = datetime.utcnow()
        logger.info("appointment %s -> %s", appointment_id, new_status)
        return appointment


class SqlLedger(AppointmentLedger):
    """Durable ledger.

    The partial unique index uq_appointments_active_slot is the final guard on
    slots; status changes are compare-and-set on the status that was checked.
    """

    def list_all(self) -> list:
        return (
            Appointment.query
            .order_by(Appointment.created_at.asc(), Appointment.id.asc())
            .all()
        )

    def list_for_admin(self) -> list:
        return (
            Appointment.query
            .order_by(Appointment.date.asc(), Appointment.time.asc(), Appointment.id.asc())
            .all()
        )

    def find(self, appointment_id):
        return db.session.get(Appointment, appointment_id)

    def find_active(self, day, professional_id: str) -> list:
        day = parse_date(day)
        return (
            Appointment.query
            .filter(
                Appointment.date == day,
                Appointment.professional_id == professional_id,
                Appointment.status != CANCELLED,
            )
            .all()
        )

    def _occupant(self, slot_key, exclude_id=None):
        day, professional_id, time = slot_key
        q = Appointment.query.filter(
            Appointment.date == day,
            Appointment.professional_id == professional_id,
            Appointment.time == time,
            Appointment.status != CANCELLED,
        )
        if exclude_id is not None:
            q = q.filter(Appointment.id != exclude_id)
        return q.first()

    def _commit_slot(self, slot_key) -> None:
        try:
            db.session.commit()
        except IntegrityError:
            # Lost the race to a concurrent writer
            db.session.rollback()
            logger.info("slot conflict on commit %s", slot_key)
            raise _slot_conflict(slot_key)

    def append(self, fields: dict):
        appointment = self._new_appointment(fields)
        if self._occupant(appointment.slot_key) is not None:
            raise _slot_conflict(appointment.slot_key)

        db.session.add(appointment)
        self._commit_slot(appointment.slot_key)
        logger.info("appointment appended id=%s slot=%s", appointment.id, appointment.slot_key)
        return appointment

    def update_fields(self, appointment_id, fields: dict):
        changes = self._clean_changes(fields)
        appointment = self.get(appointment_id)
        target = self._target_slot(appointment, changes)
        if appointment.status != CANCELLED and target != appointment.slot_key:
            if self._occupant(target, exclude_id=appointment.id) is not None:
                raise _slot_conflict(target)

        for key, value in changes.items():
            setattr(appointment, key, value)
        appointment.updated_at = datetime.utcnow()
        self._commit_slot(target)
        return appointment

    def set_status(self, appointment_id, new_status: str):
        appointment = self.get(appointment_id)
        current = appointment.status
        check_transition(current, new_status)

        # Only move the row if nobody else has moved it since we read it
        changed = (
            Appointment.query
            .filter_by(id=appointment.id, status=current)
            .update(
                {"status": new_status, "updated_at": datetime.utcnow()},
                synchronize_session=False,
            )
        )
        if not changed:
            db.session.rollback()
            latest = db.session.get(Appointment, appointment.id, populate_existing=True)
            if latest is None:
                raise NotFoundError("Appointment not found", id=appointment_id)
            logger.info("stale status change on %s: now %s", appointment_id, latest.status)
            raise InvalidTransition(
                f"Cannot change status from {latest.status} to {new_status}",
                current=latest.status,
                requested=new_status,
            )

        self._commit_slot(appointment.slot_key)
        db.session.refresh(appointment)
        logger.info("appointment %s -> %s", appointment_id, new_status)
        return appointment
