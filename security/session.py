"""Admin session cookie on top of the AdminSession table."""
from datetime import datetime
from flask import request, current_app

from models import db
from models.admin_session import AdminSession


def _cookie_name() -> str:
    return current_app.config.get("AUTH_COOKIE_NAME", "clinic_admin_session")


def _client_ip():
    return request.headers.get("X-Forwarded-For", request.remote_addr)


def start_session(resp, admin) -> int:
    """Log ``admin`` in on ``resp``; returns how many older sessions were ended."""
    lifetime = current_app.config.get("SESSION_LIFETIME_SECONDS", 8 * 60 * 60)
    raw_token, ended = AdminSession.open_for(admin, lifetime, client_ip=_client_ip())
    db.session.commit()

    resp.set_cookie(
        _cookie_name(),
        raw_token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        max_age=lifetime,
        path="/",
    )
    return ended


def resume_session():
    raw_token = request.cookies.get(_cookie_name())
    if not raw_token:
        return None

    now = datetime.utcnow()
    sess = AdminSession.live(raw_token, current_app.config.get("IDLE_TIMEOUT_SECONDS", 1800), now=now)
    if sess is not None:
        sess.last_seen_at = now
        db.session.commit()
    return sess


def end_session(resp) -> bool:
    raw_token = request.cookies.get(_cookie_name())
    ended = AdminSession.end(raw_token) if raw_token else 0
    db.session.commit()
    resp.delete_cookie(_cookie_name(), path="/")
    return bool(ended)
