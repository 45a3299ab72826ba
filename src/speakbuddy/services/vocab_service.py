"""Service for managing the vocabulary deck."""
import logging
import re
import uuid
from typing import Callable, List, Optional

from speakbuddy import monitoring
from speakbuddy.config import VocabSettings, settings
from speakbuddy.models.progress_models import (
    AnswerResult,
    ResultReason,
    VocabEntry,
    deck_from_data,
    deck_to_data,
)
from speakbuddy.services.store import DocumentStore

logger = logging.getLogger(__name__)


def parse_line(line: str) -> Optional[tuple[str, str]]:
    """Split ``word - meaning`` on the first dash. None if either side is empty."""
    word, dash, meaning = line.partition("-")
    word, meaning = word.strip(), meaning.strip()
    if not dash or not word or not meaning:
        return None
    return word, meaning


class VocabService:
    """Service for managing the vocabulary deck."""

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[VocabSettings] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ):
        """Initialize the service with a store."""
        self.store = store
        self.config = config or settings.vocab
        self.id_factory = id_factory

    @property
    def key(self) -> str:
        return self.config.document_key

    def _decode(self, data) -> List[VocabEntry]:
        return deck_from_data(data, self.config.mastery_threshold)

    def _load(self) -> List[VocabEntry]:
        return self.store.load(self.key, self._decode, list)

    def _save(self, deck: List[VocabEntry]) -> bool:
        return self.store.set(self.key, deck_to_data(deck))

    def seed_starter_deck(self) -> List[VocabEntry]:
        """Write the starter words if no deck has ever been stored."""
        with self.store.locked(self.key):
            if self.store.exists(self.key):
                return self._load()
            deck = [
                VocabEntry(id=self.id_factory(), word=word, meaning=meaning)
                for word, meaning in self.config.starter_deck
            ]
            self._save(deck)
            logger.info(f"Seeded starter deck with {len(deck)} words")
            return deck

    def get_deck(self) -> List[VocabEntry]:
        """Get the deck in display order."""
        if self.config.seed_starter_deck:
            return self.seed_starter_deck()
        return self._load()

    def get_entry(self, entry_id: str) -> Optional[VocabEntry]:
        return next((entry for entry in self._load() if entry.id == entry_id), None)

    def import_bulk(self, text: str) -> List[VocabEntry]:
        """Add one entry per ``word - meaning`` line, newest block first.

        Blank lines and lines without a word or a meaning are dropped silently.
        Nothing is added, and [] is returned, when the deck cannot be saved.
        """
        added = []
        for line in re.split(r"\n+", text):
            if not line.strip():
                continue
            parsed = parse_line(line)
            if parsed is None:
                logger.debug(f"Skipping malformed import line: {line!r}")
                continue
            word, meaning = parsed
            added.append(VocabEntry(id=self.id_factory(), word=word, meaning=meaning))

        if not added:
            return added

        with self.store.locked(self.key):
            if not self._save(added + self.get_deck()):
                return []

        monitoring.words_imported.inc(len(added))
        logger.info(f"Imported {len(added)} words")
        return added

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry. Returns False if it was not in the deck."""
        with self.store.locked(self.key):
            deck = self._load()
            remaining = [entry for entry in deck if entry.id != entry_id]
            if len(remaining) == len(deck):
                return False
            if not self._save(remaining):
                return False
        logger.info(f"Removed word {entry_id}")
        return True

    def record_answer(self, entry_id: str, correct: bool) -> AnswerResult:
        """Record a quiz answer; the entry graduates once its streak hits the threshold."""
        with self.store.locked(self.key):
            deck = self._load()
            index = next((i for i, entry in enumerate(deck) if entry.id == entry_id), None)
            if index is None:
                logger.debug(f"Answer for unknown word {entry_id} ignored")
                return AnswerResult(ok=False, reason=ResultReason.UNKNOWN_ENTRY)

            streak = deck[index].streak + 1 if correct else 0
            graduated = streak >= self.config.mastery_threshold
            if graduated:
                del deck[index]
            else:
                deck[index] = deck[index].with_streak(streak)
            if not self._save(deck):
                return AnswerResult(ok=False, reason=ResultReason.STORAGE_UNAVAILABLE)

        monitoring.answers_recorded.labels(correct=str(bool(correct)).lower()).inc()
        if graduated:
            monitoring.words_graduated.inc()
            logger.info(f"Word {entry_id} graduated after {streak} correct answers")
        return AnswerResult(ok=True, streak=streak, graduated=graduated)
