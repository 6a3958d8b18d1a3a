from datetime import datetime
from models.db import db

class Professional(db.Model):
    __tablename__ = "professionals"

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    specialty = db.Column(db.String(160), nullable=False)
    bio = db.Column(db.Text, nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "bio": self.bio,
            "photo_url": self.photo_url,
        }
