"""Catalog stores for services and professionals.

Both backends share one contract: ``list``, ``get``, ``create``, ``update`` and
``delete`` over a single record type. Deleting a record never touches the
appointments that reference it.
"""
import logging
import threading
from datetime import datetime

from models import db, new_id
from models.professional import Professional
from models.service import Service
from booking.errors import NotFoundError
from booking.validation import clean_professional, clean_service

logger = logging.getLogger(__name__)


class CatalogStore:
    """Keyed collection of one catalog record type."""

    def __init__(self, model, cleaner, label: str):
        self.model = model
        self.cleaner = cleaner
        self.label = label

    def list(self):
        raise NotImplementedError

    def find(self, record_id):
        """Return the record or None."""
        raise NotImplementedError

    def create(self, fields: dict):
        raise NotImplementedError

    def update(self, record_id, fields: dict):
        raise NotImplementedError

    def delete(self, record_id) -> None:
        raise NotImplementedError

    def get(self, record_id):
        record = self.find(record_id) if record_id else None
        if record is None:
            raise NotFoundError(f"{self.label} not found", id=record_id)
        return record

    def _build(self, fields: dict):
        clean = self.cleaner(fields)
        return self.model(id=new_id(), created_at=datetime.utcnow(), **clean)


class InMemoryCatalogStore(CatalogStore):
    def __init__(self, model, cleaner, label: str):
        super().__init__(model, cleaner, label)
        self._records = {}
        self._lock = threading.Lock()

    def list(self):
        with self._lock:
            return list(self._records.values())

    def find(self, record_id):
        return self._records.get(record_id)

    def create(self, fields: dict):
        record = self._build(fields)
        with self._lock:
            self._records[record.id] = record
        logger.info("%s created id=%s", self.label, record.id)
        return record

    def update(self, record_id, fields: dict):
        changes = self.cleaner(fields, partial=True)
        with self._lock:
            record = self.get(record_id)
            for key, value in changes.items():
                setattr(record, key, value)
        return record

    def delete(self, record_id) -> None:
        with self._lock:
            if record_id not in self._records:
                raise NotFoundError(f"{self.label} not found", id=record_id)
            del self._records[record_id]
        logger.info("%s deleted id=%s", self.label, record_id)


class SqlCatalogStore(CatalogStore):
    def list(self):
        return (
            self.model.query
            .order_by(self.model.created_at.asc(), self.model.id.asc())
            .all()
        )

    def find(self, record_id):
        return db.session.get(self.model, record_id)

    def create(self, fields: dict):
        record = self._build(fields)
        db.session.add(record)
        db.session.commit()
        logger.info("%s created id=%s", self.label, record.id)
        return record

    def update(self, record_id, fields: dict):
        changes = self.cleaner(fields, partial=True)
        record = self.get(record_id)
        for key, value in changes.items():
            setattr(record, key, value)
        db.session.commit()
        return record

    def delete(self, record_id) -> None:
        record = self.get(record_id)
        db.session.delete(record)
        db.session.commit()
        logger.info("%s deleted id=%s", self.label, record_id)


def service_store(backend: str) -> CatalogStore:
    cls = SqlCatalogStore if backend == "sql" else InMemoryCatalogStore
    return cls(Service, clean_service, "Service")


def professional_store(backend: str) -> CatalogStore:
    cls = SqlCatalogStore if backend == "sql" else InMemoryCatalogStore
    return cls(Professional, clean_professional, "Professional")
