from datetime import date

from flask import Blueprint, request, jsonify, current_app

from booking import SlotConflict, bookable_dates
from utils.audit import log_event
from utils.engine import booking_engine

booking_bp = Blueprint("booking", __name__)


# ---------- PUBLIC: catalog ----------
@booking_bp.get("/services")
def list_services():
    return jsonify([s.to_dict() for s in booking_engine().get_bookable_services()]), 200


@booking_bp.get("/professionals")
def list_professionals():
    return jsonify([p.to_dict() for p in booking_engine().get_bookable_professionals()]), 200


@booking_bp.get("/site-config")
def get_site_config():
    return jsonify(booking_engine().site_config.get().to_dict()), 200


# ---------- PUBLIC: availability ----------
@booking_bp.get("/booking/dates")
def list_bookable_dates():
    window = current_app.config.get("BOOKING_WINDOW_DAYS", 14)
    days = bookable_dates(date.today(), window)
    return jsonify(dates=[d.isoformat() for d in days]), 200


@booking_bp.get("/booking/slots")
def list_available_slots():
    day = request.args.get("date")
    professional_id = request.args.get("professional_id")
    if not day or not professional_id:
        return jsonify(error="date and professional_id are required"), 400

    slots = booking_engine().get_available_slots(day, professional_id)
    return jsonify(date=day, professional_id=professional_id, slots=slots), 200


# ---------- PUBLIC: book a slot (DOUBLE-BOOKING SAFE) ----------
@booking_bp.post("/booking/appointments")
def submit_booking():
    data = request.get_json(silent=True) or {}
    engine = booking_engine()

    try:
        appointment = engine.submit_booking(data)
    except SlotConflict as exc:
        log_event("BOOKING_FAIL_SLOT_TAKEN", entity="slot", metadata=exc.details)
        raise

    log_event(
        "BOOKING_CREATE",
        entity="appointment",
        entity_id=appointment.id,
        metadata={"date": appointment.date.isoformat(), "time": appointment.time},
    )
    return jsonify(engine.view(appointment).to_dict()), 201
