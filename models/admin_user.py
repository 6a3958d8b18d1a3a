from datetime import datetime
from models.db import db
from security.password import check_password, hash_password, needs_rehash

class AdminUser(db.Model):
    __tablename__ = "admin_users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def set_password(self, plain_password: str) -> None:
        self.password_hash = hash_password(plain_password)

    def authenticate(self, plain_password: str) -> bool:
        """Check the password; on success, re-hash if the configured bcrypt cost changed."""
        if not self.is_active or not check_password(plain_password, self.password_hash):
            return False
        if needs_rehash(self.password_hash):
            self.set_password(plain_password)
        return True
