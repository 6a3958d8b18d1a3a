from flask import Blueprint, jsonify, request

from models.appointment import STATUSES
from utils.audit import log_event
from utils.auth_context import admin_required
from utils.engine import booking_engine

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


# ---------- ADMIN: appointments ----------
@admin_bp.get("/appointments")
@admin_required
def list_appointments():
    status = (request.args.get("status") or "").strip().lower() or None
    day = request.args.get("date") or None
    if status and status not in STATUSES:
        return jsonify(error="Unknown status", allowed=list(STATUSES)), 400

    rows = booking_engine().list_for_admin(status=status, day=day)
    return jsonify([v.to_dict() for v in rows]), 200


@admin_bp.patch("/appointments/<appointment_id>")
@admin_required
def update_appointment(appointment_id: str):
    data = request.get_json(silent=True) or {}
    engine = booking_engine()

    appointment = engine.update_appointment(appointment_id, data)
    log_event("APPOINTMENT_UPDATE", entity="appointment", entity_id=appointment_id, metadata=data)
    return jsonify(engine.view(appointment).to_dict()), 200


@admin_bp.post("/appointments/<appointment_id>/status")
@admin_required
def set_appointment_status(appointment_id: str):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().lower()
    if not status:
        return jsonify(error="status required"), 400

    engine = booking_engine()
    appointment = engine.set_status(appointment_id, status)
    log_event("APPOINTMENT_STATUS", entity="appointment", entity_id=appointment_id, metadata={"status": status})
    return jsonify(engine.view(appointment).to_dict()), 200


# ---------- ADMIN: catalog ----------
def _catalog(kind: str):
    engine = booking_engine()
    return engine.services if kind == "services" else engine.professionals


@admin_bp.get("/<any(services, professionals):kind>")
@admin_required
def list_catalog(kind: str):
    return jsonify([r.to_dict() for r in _catalog(kind).list()]), 200


@admin_bp.post("/<any(services, professionals):kind>")
@admin_required
def create_catalog_record(kind: str):
    data = request.get_json(silent=True) or {}
    record = _catalog(kind).create(data)
    log_event("CATALOG_CREATE", entity=kind, entity_id=record.id)
    return jsonify(record.to_dict()), 201


@admin_bp.patch("/<any(services, professionals):kind>/<record_id>")
@admin_required
def update_catalog_record(kind: str, record_id: str):
    data = request.get_json(silent=True) or {}
    record = _catalog(kind).update(record_id, data)
    log_event("CATALOG_UPDATE", entity=kind, entity_id=record_id, metadata=data)
    return jsonify(record.to_dict()), 200


@admin_bp.delete("/<any(services, professionals):kind>/<record_id>")
@admin_required
def delete_catalog_record(kind: str, record_id: str):
    _catalog(kind).delete(record_id)
    log_event("CATALOG_DELETE", entity=kind, entity_id=record_id)
    return jsonify(message="Deleted"), 200


# ---------- ADMIN: site config ----------
@admin_bp.get("/site-config")
@admin_required
def get_site_config():
    return jsonify(booking_engine().site_config.get().to_dict()), 200


@admin_bp.put("/site-config")
@admin_required
def save_site_config():
    data = request.get_json(silent=True) or {}
    config = booking_engine().site_config.save(data)
    log_event("SITE_CONFIG_SAVE", entity="site_config", entity_id=config.id)
    return jsonify(config.to_dict()), 200
