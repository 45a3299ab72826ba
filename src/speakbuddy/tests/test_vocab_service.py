"""Tests for vocabulary service."""
from itertools import count

import pytest
from faker import Faker

from speakbuddy.config import VocabSettings
from speakbuddy.models.progress_models import ResultReason
from speakbuddy.services.store import DocumentStore
from speakbuddy.services.vocab_service import VocabService, parse_line

fake = Faker()


@pytest.fixture
def sequential_service(store: DocumentStore) -> VocabService:
    """Vocabulary service with predictable ids."""
    ids = count(1)
    return VocabService(store, VocabSettings(seed_starter_deck=False), id_factory=lambda: f"w{next(ids)}")


def test_empty_deck_by_default(vocab_service: VocabService) -> None:
    assert vocab_service.get_deck() == []


def test_import_bulk_parses_lines(vocab_service: VocabService) -> None:
    """Test the blank line is ignored and spacing around the dash is trimmed."""
    added = vocab_service.import_bulk("alpha - first\n\nbeta-second")
    assert [(e.word, e.meaning) for e in added] == [("alpha", "first"), ("beta", "second")]
    assert all(e.streak == 0 for e in added)
    assert len({e.id for e in added}) == 2
    assert vocab_service.get_deck() == added


@pytest.mark.parametrize(
    "line",
    ["no dash here", "- meaning only", "word only -", "   -   ", ""],
)
def test_import_bulk_drops_malformed_lines(vocab_service: VocabService, line: str) -> None:
    assert vocab_service.import_bulk(line) == []
    assert vocab_service.get_deck() == []


def test_import_bulk_splits_on_first_dash_only(vocab_service: VocabService) -> None:
    added = vocab_service.import_bulk("well-known - familiar to many")
    assert added[0].word == "well"
    assert added[0].meaning == "known - familiar to many"


def test_import_bulk_handles_crlf(vocab_service: VocabService) -> None:
    added = vocab_service.import_bulk("one - 1\r\ntwo - 2\r\n")
    assert [e.word for e in added] == ["one", "two"]


@pytest.mark.parametrize("separator", ["\x0b", "\x0c", "\x1e", "\x85", "\u2028", "\u2029"])
def test_import_bulk_splits_on_newlines_only(vocab_service: VocabService, separator: str) -> None:
    """Test that other Unicode line breaks stay inside the meaning."""
    added = vocab_service.import_bulk(f"one - 1{separator}two - 2\nthree - 3")
    assert [e.word for e in added] == ["one", "three"]
    assert added[0].meaning == f"1{separator}two - 2"


def test_import_bulk_prepends_block(sequential_service: VocabService) -> None:
    """Test that new imports go in front of the existing deck in source order."""
    sequential_service.import_bulk("a - 1\nb - 2")
    sequential_service.import_bulk("c - 3\nd - 4")
    assert [e.word for e in sequential_service.get_deck()] == ["c", "d", "a", "b"]


def test_duplicate_words_are_kept(vocab_service: VocabService) -> None:
    vocab_service.import_bulk("bank - river side\nbank - money place")
    deck = vocab_service.get_deck()
    assert [e.word for e in deck] == ["bank", "bank"]
    assert deck[0].id != deck[1].id


def test_remove_entry(sequential_service: VocabService) -> None:
    sequential_service.import_bulk("a - 1\nb - 2")
    assert sequential_service.remove_entry("w1") is True
    assert [e.id for e in sequential_service.get_deck()] == ["w2"]
    assert sequential_service.remove_entry("missing") is False
    assert [e.id for e in sequential_service.get_deck()] == ["w2"]


def test_two_correct_answers_graduate(sequential_service: VocabService) -> None:
    """Test that an entry leaves the deck after two consecutive correct answers."""
    sequential_service.import_bulk("a - 1\nb - 2")

    first = sequential_service.record_answer("w1", True)
    assert first.ok is True
    assert first.graduated is False
    assert sequential_service.get_entry("w1").streak == 1

    second = sequential_service.record_answer("w1", True)
    assert second.graduated is True
    assert sequential_service.get_entry("w1") is None
    assert [e.id for e in sequential_service.get_deck()] == ["w2"]


def test_wrong_answer_resets_streak(sequential_service: VocabService) -> None:
    sequential_service.import_bulk("a - 1")
    sequential_service.record_answer("w1", True)
    result = sequential_service.record_answer("w1", False)
    assert result.ok is True
    assert result.streak == 0
    assert sequential_service.get_entry("w1").streak == 0

    sequential_service.record_answer("w1", True)
    assert sequential_service.get_entry("w1").streak == 1
    assert sequential_service.record_answer("w1", True).graduated is True
    assert sequential_service.get_deck() == []


def test_answer_for_unknown_entry(vocab_service: VocabService) -> None:
    result = vocab_service.record_answer("nope", True)
    assert result.ok is False
    assert result.reason is ResultReason.UNKNOWN_ENTRY


def test_custom_mastery_threshold(store: DocumentStore) -> None:
    service = VocabService(store, VocabSettings(mastery_threshold=3, seed_starter_deck=False))
    entry = service.import_bulk("a - 1")[0]
    service.record_answer(entry.id, True)
    assert service.record_answer(entry.id, True).graduated is False
    assert service.record_answer(entry.id, True).graduated is True


def test_starter_deck_is_seeded_once(store: DocumentStore) -> None:
    """Test the starter words are written once and keep their ids."""
    service = VocabService(store, VocabSettings(seed_starter_deck=True))
    deck = service.get_deck()
    assert [e.word for e in deck] == ["meticulous", "alleviate", "inevitable"]
    assert service.get_deck() == deck

    service.remove_entry(deck[0].id)
    assert [e.word for e in service.get_deck()] == ["alleviate", "inevitable"]


def test_starter_deck_not_reseeded_after_empty(store: DocumentStore) -> None:
    service = VocabService(store, VocabSettings(seed_starter_deck=True))
    for entry in service.get_deck():
        service.remove_entry(entry.id)
    assert service.get_deck() == []


def test_corrupt_deck_falls_back_to_empty(vocab_service: VocabService, store: DocumentStore) -> None:
    store.set("speak_vocab_v1", [{"id": "x", "word": "a", "meaning": "b", "streak": 2}])
    assert vocab_service.get_deck() == []

    store.set("speak_vocab_v1", {"not": "a list"})
    assert vocab_service.get_deck() == []


def test_deck_persists_as_documented_layout(sequential_service: VocabService, store: DocumentStore) -> None:
    word, meaning = fake.word(), fake.sentence()
    sequential_service.import_bulk(f"{word} - {meaning}")
    assert store.get("speak_vocab_v1") == [{"id": "w1", "word": word, "meaning": meaning.strip(), "streak": 0}]


@pytest.mark.parametrize(
    "line, expected",
    [
        ("alpha - first", ("alpha", "first")),
        ("  beta-second  ", ("beta", "second")),
        ("gamma -", None),
        ("no separator", None),
    ],
)
def test_parse_line(line, expected):
    assert parse_line(line) == expected


def test_failed_save_leaves_deck_unchanged(sequential_service: VocabService, mocker) -> None:
    """Test that unsaved changes are reported as failures."""
    sequential_service.import_bulk("a - 1")
    sequential_service.record_answer("w1", True)
    mocker.patch.object(sequential_service.store, "set", return_value=False)

    assert sequential_service.import_bulk("b - 2") == []

    result = sequential_service.record_answer("w1", True)
    assert result.ok is False
    assert result.reason is ResultReason.STORAGE_UNAVAILABLE
    assert result.graduated is False

    assert sequential_service.remove_entry("w1") is False
    assert [(e.id, e.streak) for e in sequential_service.get_deck()] == [("w1", 1)]
