from .db import db, new_id
from .service import Service
from .professional import Professional
from .appointment import Appointment
from .site_config import SiteConfig
from .admin_user import AdminUser
from .admin_session import AdminSession
from .audit_log import AuditLog
