import threading
from datetime import datetime

from models import db
from models.site_config import SITE_CONFIG_ID, SiteConfig
from booking.validation import clean_site_config


class SiteConfigStore:
    """Singleton display settings; ``save`` replaces every field at once."""

    def __init__(self, default_hero_image_url: str):
        self.default_hero_image_url = default_hero_image_url

    def _default(self):
        return SiteConfig(
            id=SITE_CONFIG_ID,
            hero_image_url=self.default_hero_image_url,
            contact_phone=None,
            address=None,
            updated_at=datetime.utcnow(),
        )

    def get(self):
        raise NotImplementedError

    def save(self, fields: dict):
        raise NotImplementedError


class InMemorySiteConfigStore(SiteConfigStore):
    def __init__(self, default_hero_image_url: str):
        super().__init__(default_hero_image_url)
        self._current = None
        self._lock = threading.Lock()

    def get(self):
        with self._lock:
            if self._current is None:
                self._current = self._default()
            return self._current

    def save(self, fields: dict):
        clean = clean_site_config(fields)
        with self._lock:
            self._current = SiteConfig(id=SITE_CONFIG_ID, updated_at=datetime.utcnow(), **clean)
            return self._current


class SqlSiteConfigStore(SiteConfigStore):
    def get(self):
        row = db.session.get(SiteConfig, SITE_CONFIG_ID)
        # Unsaved config is served from defaults without writing a row
        return row if row is not None else self._default()

    def save(self, fields: dict):
        clean = clean_site_config(fields)
        row = db.session.get(SiteConfig, SITE_CONFIG_ID)
        if row is None:
            row = SiteConfig(id=SITE_CONFIG_ID)
            db.session.add(row)
        for key, value in clean.items():
            setattr(row, key, value)
        row.updated_at = datetime.utcnow()
        db.session.commit()
        return row
