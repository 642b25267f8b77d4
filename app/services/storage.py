"""Snapshot persistence behind one ``load``/``save`` interface.

``MemoryStore`` is the local fallback used when no backend is configured.
``DocumentStore`` keeps JSON documents in the SQL database through
Flask-SQLAlchemy. The backend is chosen once in ``build_storage``; nothing
else branches on which one is in use.
"""
import json
import logging
import threading
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.services.errors import StorageError
from app.utils.db import transactional
from models import db
from models.document import Document

logger = logging.getLogger(__name__)


class Storage:
    def load(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def save(self, key: str, data: Any) -> None:
        raise NotImplementedError


class MemoryStore(Storage):
    """Process-local key-value store holding encoded JSON strings."""

    def __init__(self):
        self._data = {}
        self._lock = threading.Lock()

    def load(self, key):
        with self._lock:
            raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Corrupt snapshot for {key}") from e

    def save(self, key, data):
        try:
            raw = json.dumps(data)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot encode snapshot for {key}") from e
        with self._lock:
            self._data[key] = raw

    def keys(self):
        with self._lock:
            return sorted(self._data)


class DocumentStore(Storage):
    """Documents in the ``document`` table, one row per key."""

    def __init__(self, app):
        self.app = app

    def load(self, key):
        with self.app.app_context():
            try:
                doc = Document.query.filter_by(key=key).first()
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to load {key}") from e
            return doc.body if doc else None

    def save(self, key, data):
        with self.app.app_context():
            try:
                with transactional(f"Failed to save {key}"):
                    doc = Document.query.filter_by(key=key).first()
                    if doc:
                        doc.body = data
                    else:
                        db.session.add(Document(key=key, body=data))
            except SQLAlchemyError as e:
                raise StorageError(f"Failed to save {key}") from e


def build_storage(app) -> Storage:
    backend = (app.config.get("STORAGE_BACKEND") or "local").lower()
    if backend == "remote":
        logger.info("Using document store persistence")
        return DocumentStore(app)
    if backend == "local":
        logger.info("Using in-memory persistence")
        return MemoryStore()
    raise RuntimeError(f"Unknown STORAGE_BACKEND: {backend}")
