from flask import Blueprint, request, jsonify, g

from models.admin_user import AdminUser
from security.csrf import issue_csrf_token
from security.session import start_session, end_session
from utils.audit import log_event
from utils.auth_context import admin_required

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify(error="email and password are required"), 400

    admin = AdminUser.query.filter_by(email=email).first()
    if admin is None or not admin.authenticate(password):
        log_event("LOGIN_FAIL", admin_id=admin.id if admin else None, metadata={"email": email})
        return jsonify(error="Invalid credentials"), 401

    resp = jsonify(message="Login OK", email=admin.email)
    # one live session per admin; this also commits a re-hashed password
    ended = start_session(resp, admin)
    issue_csrf_token(resp)

    log_event("LOGIN_SUCCESS", admin_id=admin.id, metadata={"ended_sessions": ended})
    return resp, 200


@auth_bp.get("/me")
@admin_required
def me():
    return jsonify(id=g.admin.id, email=g.admin.email, full_name=g.admin.full_name), 200


@auth_bp.post("/logout")
@admin_required
def logout():
    resp = jsonify(message="Logged out")
    end_session(resp)
    log_event("LOGOUT")
    return resp, 200
