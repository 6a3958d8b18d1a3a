from functools import wraps
from flask import g, jsonify
from security.session import resume_session

def load_current_admin():
    g.admin_session = resume_session()
    g.admin = g.admin_session.admin if g.admin_session else None

def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if g.get("admin") is None:
            return jsonify(error="Admin login required"), 401
        return fn(*args, **kwargs)
    return wrapper
