"""Application wiring for the progress engine."""
import logging
from typing import Optional

from sqlalchemy.orm import sessionmaker

from speakbuddy.clock import ClockSource
from speakbuddy.config import Settings, ensure_directories, settings as default_settings
from speakbuddy.logging_config import setup_logging
from speakbuddy.models.base import SessionLocal, create_db_engine, init_db
from speakbuddy.services.attendance_service import AttendanceService
from speakbuddy.services.store import DocumentStore
from speakbuddy.services.vocab_service import VocabService


class SpeakBuddy:
    """Holds the engines the presentation layer calls into."""

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        clock: Optional[ClockSource] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize the application."""
        self.settings = settings or default_settings
        self.store = store or DocumentStore()
        self.clock = clock or ClockSource(self.settings.clock.timezone)
        self.attendance = AttendanceService(self.store, self.clock, self.settings.attendance)
        self.vocab = VocabService(self.store, self.settings.vocab)
        self.logger = logging.getLogger(__name__)

    @classmethod
    def create(cls, database_url: Optional[str] = None, clock: Optional[ClockSource] = None) -> "SpeakBuddy":
        """Create the database tables and wire the engines to them."""
        if database_url is None:
            init_db()
            store = DocumentStore(SessionLocal)
        else:
            engine = create_db_engine(database_url)
            init_db(engine)
            store = DocumentStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
        app = cls(store=store, clock=clock)
        app.logger.info(f"Progress engine ready (timezone {app.clock.tz.key})")
        return app


def create_app() -> SpeakBuddy:
    """Set up directories and logging, then build the application."""
    ensure_directories()
    setup_logging("Starting SpeakBuddy progress engine ...")
    return SpeakBuddy.create()
