"""Configuration settings for the progress engine."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
LOGS_DIR = DATA_DIR / "logs"

# Attendance rewards
DAILY_SNACKS = 1  # snacks for every successful check-in
BONUS_SNACKS = 3  # extra snacks when the streak hits a multiple of BONUS_EVERY_DAYS
BONUS_EVERY_DAYS = 7
DISTRESS_AFTER_DAYS = 3
HISTORY_LIMIT = 60

# Vocabulary
MASTERY_THRESHOLD = 2  # consecutive correct answers before a word graduates
STARTER_DECK = [
    ("meticulous", "showing great attention to detail"),
    ("alleviate", "make (suffering) less severe"),
    ("inevitable", "certain to happen; unavoidable"),
]


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        settings.paths.data_dir,
        settings.paths.logs_dir,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class PathSettings:
    """Path configuration settings."""
    data_dir: Path = DATA_DIR
    logs_dir: Path = LOGS_DIR


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'speakbuddy.db'}")
    echo: bool = _env_flag("DATABASE_ECHO")


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class ClockSettings:
    """Calendar settings."""
    timezone: str = os.getenv("REFERENCE_TIMEZONE", "Asia/Seoul")


@dataclass
class AttendanceSettings:
    """Daily check-in and reward settings."""
    document_key: str = os.getenv("ATTENDANCE_KEY", "speak_attendance_v1")
    daily_snacks: int = int(os.getenv("DAILY_SNACKS", str(DAILY_SNACKS)))
    bonus_snacks: int = int(os.getenv("BONUS_SNACKS", str(BONUS_SNACKS)))
    bonus_every_days: int = int(os.getenv("BONUS_EVERY_DAYS", str(BONUS_EVERY_DAYS)))
    distress_after_days: int = int(os.getenv("DISTRESS_AFTER_DAYS", str(DISTRESS_AFTER_DAYS)))
    history_limit: int = int(os.getenv("HISTORY_LIMIT", str(HISTORY_LIMIT)))


@dataclass
class VocabSettings:
    """Vocabulary deck settings."""
    document_key: str = os.getenv("VOCAB_KEY", "speak_vocab_v1")
    mastery_threshold: int = int(os.getenv("MASTERY_THRESHOLD", str(MASTERY_THRESHOLD)))
    seed_starter_deck: bool = _env_flag("VOCAB_SEED_STARTER_DECK")
    starter_deck: list[tuple[str, str]] = field(default_factory=lambda: list(STARTER_DECK))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_clock_settings() -> ClockSettings:
    """Get clock settings."""
    return ClockSettings()


def get_attendance_settings() -> AttendanceSettings:
    """Get attendance settings."""
    return AttendanceSettings()


def get_vocab_settings() -> VocabSettings:
    """Get vocabulary settings."""
    return VocabSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    clock: ClockSettings = field(default_factory=get_clock_settings)
    attendance: AttendanceSettings = field(default_factory=get_attendance_settings)
    vocab: VocabSettings = field(default_factory=get_vocab_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.clock.timezone:
            raise ValueError("REFERENCE_TIMEZONE is required")

        if self.attendance.document_key == self.vocab.document_key:
            raise ValueError("ATTENDANCE_KEY and VOCAB_KEY must differ")

        if self.attendance.daily_snacks < 0 or self.attendance.bonus_snacks < 0:
            raise ValueError("DAILY_SNACKS and BONUS_SNACKS cannot be negative")

        if self.attendance.bonus_every_days < 1:
            raise ValueError("BONUS_EVERY_DAYS must be positive")

        if self.attendance.distress_after_days < 1:
            raise ValueError("DISTRESS_AFTER_DAYS must be positive")

        if self.attendance.history_limit < 1:
            raise ValueError("HISTORY_LIMIT must be positive")

        if self.vocab.mastery_threshold < 1:
            raise ValueError("MASTERY_THRESHOLD must be positive")


# Create global settings instance
settings = Settings()
settings.validate()
