"""Key to JSON-document store backed by the database."""
import copy
import json
import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from speakbuddy import monitoring
from speakbuddy.exceptions import CorruptDocumentError
from speakbuddy.models.base import SessionLocal
from speakbuddy.models.models import Document

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentStore:
    """Persists whole JSON documents under string keys.

    Reads never fail: a missing, unreadable or undecodable document yields the
    caller's default. Writers serialize through ``locked(key)``.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        """Initialize the store with a session factory."""
        self.session_factory = session_factory or SessionLocal
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, key: str) -> threading.RLock:
        with self._locks_guard:
            if key not in self._locks:
                self._locks[key] = threading.RLock()
            return self._locks[key]

    @contextmanager
    def locked(self, key: str) -> Iterator[None]:
        """Hold the per-key lock for a read-modify-write cycle."""
        with self._lock_for(key):
            yield

    def get(self, key: str, default: Any = None) -> Any:
        """Get the raw JSON value stored under ``key``."""
        fallback = copy.deepcopy(default)
        session: Session = self.session_factory()
        try:
            document = session.get(Document, key)
            if document is None:
                return fallback
            return json.loads(document.payload)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Document {key} is not valid JSON, using default: {e}")
            monitoring.storage_errors.labels(operation="load").inc()
            return fallback
        except SQLAlchemyError as e:
            logger.error(f"Error reading document {key}, using default: {e}")
            monitoring.storage_errors.labels(operation="load").inc()
            return fallback
        finally:
            session.close()

    def load(self, key: str, decode: Callable[[Any], T], default: Callable[[], T]) -> T:
        """Get the document under ``key`` decoded into domain state."""
        data = self.get(key)
        if data is None:
            return default()
        try:
            return decode(data)
        except CorruptDocumentError as e:
            logger.warning(f"Document {key} is corrupt, using default: {e}")
            monitoring.storage_errors.labels(operation="load").inc()
            return default()

    def set(self, key: str, value: Any) -> bool:
        """Replace the document under ``key``. Returns False if the write failed."""
        payload = json.dumps(value, ensure_ascii=False)
        session: Session = self.session_factory()
        try:
            document = session.get(Document, key)
            if document is None:
                session.add(Document(key=key, payload=payload))
            else:
                document.payload = payload
            session.commit()
            logger.debug(f"Saved document {key} ({len(payload)} bytes)")
            return True
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Error saving document {key}: {e}")
            monitoring.storage_errors.labels(operation="save").inc()
            return False
        finally:
            session.close()

    def exists(self, key: str) -> bool:
        """Check whether a document is stored under ``key``."""
        session: Session = self.session_factory()
        try:
            return session.get(Document, key) is not None
        finally:
            session.close()
