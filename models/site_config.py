from datetime import datetime
from models.db import db

SITE_CONFIG_ID = 1


class SiteConfig(db.Model):
    __tablename__ = "site_config"

    # Singleton row, always SITE_CONFIG_ID
    id = db.Column(db.Integer, primary_key=True)

    hero_image_url = db.Column(db.String(500), nullable=False)
    contact_phone = db.Column(db.String(40), nullable=True)
    address = db.Column(db.String(255), nullable=True)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "hero_image_url": self.hero_image_url,
            "contact_phone": self.contact_phone,
            "address": self.address,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
