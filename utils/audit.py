import json
import logging
from flask import g, has_request_context, request
from models import db
from models.audit_log import AuditLog

logger = logging.getLogger(__name__)

def log_event(action: str, entity=None, entity_id=None, metadata=None, admin_id=None):
    if admin_id is None and has_request_context():
        admin = getattr(g, "admin", None)
        admin_id = admin.id if admin is not None else None

    ip = user_agent = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
        user_agent = (request.headers.get("User-Agent") or "")[:255] or None

    row = AuditLog(
        admin_id=admin_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        ip=ip,
        user_agent=user_agent,
        metadata_json=json.dumps(metadata, default=str) if metadata else None,
    )
    db.session.add(row)
    db.session.commit()
    logger.info("audit %s %s=%s", action, entity, entity_id)
