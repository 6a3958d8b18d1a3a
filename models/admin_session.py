import hashlib
import secrets
from datetime import datetime, timedelta

from models.db import db


def token_digest(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


class AdminSession(db.Model):
    """A back-office login. The cookie holds the raw token; only its digest is stored."""
    __tablename__ = "admin_sessions"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("admin_users.id"), nullable=False, index=True)
    token_hash = db.Column(db.String(64), unique=True, nullable=False, index=True)

    opened_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_seen_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=True)

    client_ip = db.Column(db.String(64), nullable=True)

    admin = db.relationship("AdminUser", lazy="joined")

    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    @classmethod
    def open_for(cls, admin, lifetime_seconds: int, client_ip=None):
        """End the admin's other sessions and start a new one.

        Returns ``(raw_token, ended_count)``. The caller commits.
        """
        now = datetime.utcnow()
        ended = (
            cls.query
            .filter_by(admin_id=admin.id, ended_at=None)
            .update({"ended_at": now}, synchronize_session=False)
        )
        raw_token = secrets.token_urlsafe(32)
        db.session.add(cls(
            admin_id=admin.id,
            token_hash=token_digest(raw_token),
            opened_at=now,
            last_seen_at=now,
            expires_at=now + timedelta(seconds=lifetime_seconds),
            client_ip=client_ip,
        ))
        return raw_token, ended

    @classmethod
    def live(cls, raw_token: str, idle_seconds: int, now=None):
        """The open session for this token that is neither expired nor idle, owned by an active admin."""
        now = now or datetime.utcnow()
        return (
            cls.query
            .filter(
                cls.token_hash == token_digest(raw_token),
                cls.ended_at.is_(None),
                cls.expires_at > now,
                cls.last_seen_at > now - timedelta(seconds=idle_seconds),
                cls.admin.has(is_active=True),
            )
            .first()
        )

    @classmethod
    def end(cls, raw_token: str) -> int:
        return (
            cls.query
            .filter_by(token_hash=token_digest(raw_token), ended_at=None)
            .update({"ended_at": datetime.utcnow()}, synchronize_session=False)
        )
