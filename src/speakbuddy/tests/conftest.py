"""Test configuration."""
import os
from datetime import date, datetime
from pathlib import Path
from typing import Generator

import pytest
from dotenv import load_dotenv
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

# Import after environment setup
from speakbuddy.clock import ClockSource
from speakbuddy.config import AttendanceSettings, VocabSettings
from speakbuddy.models.base import create_db_engine, init_db
from speakbuddy.services.attendance_service import AttendanceService
from speakbuddy.services.store import DocumentStore
from speakbuddy.services.vocab_service import VocabService


class FixedClock(ClockSource):
    """Clock frozen on a settable date."""

    def __init__(self, today: date, timezone: str = "Asia/Seoul"):
        super().__init__(timezone)
        self.current = today

    def now(self) -> datetime:
        return datetime(self.current.year, self.current.month, self.current.day, 12, tzinfo=self.tz)

    def advance(self, days: int = 1) -> date:
        self.current = self.add_days(self.current, days)
        return self.current


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    """Create a fresh in-memory database for each test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def store(session_factory: sessionmaker) -> DocumentStore:
    """Create a document store instance."""
    return DocumentStore(session_factory)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to a known Seoul date."""
    return FixedClock(date(2025, 3, 1), timezone="Asia/Seoul")


@pytest.fixture
def make_clock():
    """Build clocks pinned to other dates."""
    return FixedClock


@pytest.fixture
def attendance_service(store: DocumentStore, clock: FixedClock) -> AttendanceService:
    """Create an attendance service with default rewards."""
    return AttendanceService(store, clock, AttendanceSettings())


@pytest.fixture
def vocab_service(store: DocumentStore) -> VocabService:
    """Create a vocabulary service with an empty starting deck."""
    return VocabService(store, VocabSettings(seed_starter_deck=False))
