"""Models for attendance and vocabulary progress."""
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from speakbuddy.clock import format_date, parse_date
from speakbuddy.exceptions import CorruptDocumentError


class Buddy(Enum):
    """Pet the user checks in with."""
    CAT = "cat"
    DOG = "dog"


class Mood(Enum):
    """Read-time projection of how the buddy feels."""
    CONTENT = "content"
    DISTRESSED = "distressed"  # no check-in for several days


class ResultReason(Enum):
    """Why an operation was a no-op."""
    ALREADY_CHECKED_IN_TODAY = "already_checked_in_today"
    NO_SNACKS = "no_snacks"
    UNKNOWN_ENTRY = "unknown_entry"
    STORAGE_UNAVAILABLE = "storage_unavailable"  # the new state could not be saved


def _require_count(data: Dict[str, Any], name: str) -> int:
    value = data.get(name, 0)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise CorruptDocumentError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def normalize_history(days: Iterable[date], limit: int) -> Tuple[date, ...]:
    """Sort ascending, drop duplicates and keep the most recent ``limit`` days."""
    return tuple(sorted(set(days))[-limit:])


@dataclass(frozen=True)
class AttendanceState:
    """Daily check-in state of the single local user."""
    buddy: Optional[Buddy] = None
    snacks: int = 0
    streak: int = 0
    last_check: Optional[date] = None
    history: Tuple[date, ...] = ()

    def to_data(self) -> Dict[str, Any]:
        return {
            "buddy": self.buddy.value if self.buddy else None,
            "snacks": self.snacks,
            "streak": self.streak,
            "lastCheck": format_date(self.last_check) if self.last_check else None,
            "history": [format_date(d) for d in self.history],
        }

    @classmethod
    def from_data(cls, data: Any, history_limit: int) -> "AttendanceState":
        """Decode a stored document, raising CorruptDocumentError on bad shape."""
        if not isinstance(data, dict):
            raise CorruptDocumentError(f"attendance document must be an object, got {type(data).__name__}")

        try:
            buddy = Buddy(data["buddy"]) if data.get("buddy") is not None else None
            last_check = parse_date(data["lastCheck"]) if data.get("lastCheck") is not None else None
            raw_history = data.get("history") or []
            if not isinstance(raw_history, list):
                raise CorruptDocumentError("history must be a list")
            history = [parse_date(d) for d in raw_history]
        except (TypeError, ValueError) as e:
            raise CorruptDocumentError(f"invalid attendance document: {e}") from e

        snacks = _require_count(data, "snacks")
        streak = _require_count(data, "streak")
        if (streak == 0) != (last_check is None):
            raise CorruptDocumentError("streak and lastCheck disagree")

        if last_check is not None:
            history.append(last_check)
            if max(history) != last_check:
                raise CorruptDocumentError("history contains dates after lastCheck")

        return cls(
            buddy=buddy,
            snacks=snacks,
            streak=streak,
            last_check=last_check,
            history=normalize_history(history, history_limit),
        )


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of a check-in attempt."""
    ok: bool
    streak: Optional[int] = None
    bonus: int = 0
    reason: Optional[ResultReason] = None


@dataclass(frozen=True)
class SnackResult:
    """Outcome of feeding the buddy."""
    ok: bool
    snacks: int = 0  # balance after the call
    reason: Optional[ResultReason] = None


@dataclass(frozen=True)
class VocabEntry:
    """A word in the deck."""
    id: str
    word: str
    meaning: str
    streak: int = 0  # consecutive correct answers

    def to_data(self) -> Dict[str, Any]:
        return {"id": self.id, "word": self.word, "meaning": self.meaning, "streak": self.streak}

    def with_streak(self, streak: int) -> "VocabEntry":
        return replace(self, streak=streak)

    @classmethod
    def from_data(cls, data: Any, mastery_threshold: int) -> "VocabEntry":
        if not isinstance(data, dict):
            raise CorruptDocumentError(f"vocab entry must be an object, got {type(data).__name__}")
        for name in ("id", "word", "meaning"):
            if not isinstance(data.get(name), str) or not data[name]:
                raise CorruptDocumentError(f"vocab entry {name} must be a non-empty string")
        streak = _require_count(data, "streak")
        if streak >= mastery_threshold:
            raise CorruptDocumentError(f"vocab entry {data['id']} should have graduated (streak {streak})")
        return cls(id=data["id"], word=data["word"], meaning=data["meaning"], streak=streak)


def deck_from_data(data: Any, mastery_threshold: int) -> List[VocabEntry]:
    """Decode the stored deck, raising CorruptDocumentError on bad shape."""
    if not isinstance(data, list):
        raise CorruptDocumentError(f"vocab document must be a list, got {type(data).__name__}")
    entries = [VocabEntry.from_data(item, mastery_threshold) for item in data]
    if len({entry.id for entry in entries}) != len(entries):
        raise CorruptDocumentError("vocab document has duplicate ids")
    return entries


def deck_to_data(entries: Iterable[VocabEntry]) -> List[Dict[str, Any]]:
    return [entry.to_data() for entry in entries]


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of recording a quiz answer."""
    ok: bool
    streak: int = 0
    graduated: bool = False
    reason: Optional[ResultReason] = None
