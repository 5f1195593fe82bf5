"""Tests for data model classes."""
from datetime import datetime

from ward_vocab.db import init_db, get_connection
from ward_vocab.models import Flashcard, ReviewLog


def test_flashcard_defaults():
    f = Flashcard(term="Blutdruck", translation="Blood pressure")
    assert f.id is None
    assert f.proficiency_level == 0
    assert f.next_review_at is None
    assert f.last_reviewed_at is None
    assert f.mastered is False
    assert f.category == "General"


def test_display_term_includes_article():
    assert Flashcard(term="Skalpell", translation="Scalpel", article="das").display_term == "das Skalpell"
    assert Flashcard(term="EKG", translation="ECG").display_term == "EKG"


def test_to_record_serializes_review_fields():
    f = Flashcard(
        term="Reha", translation="Rehab", category="  Verwaltung ",
        proficiency_level=3, next_review_at=datetime(2024, 3, 24), mastered=True,
    )
    record = f.to_record()
    assert record["next_review_at"] == "2024-03-24T00:00:00"
    assert record["last_reviewed_at"] is None
    assert record["mastered"] == 1
    assert record["proficiency_level"] == 3
    assert record["category"] == "Verwaltung"


def test_from_row_round_trips_through_sqlite(tmp_db):
    init_db(tmp_db)
    original = Flashcard(
        term="Übelkeit", translation="Nausea", article="die",
        proficiency_level=2, next_review_at=datetime(2024, 3, 17),
        last_reviewed_at=datetime(2024, 3, 10, 15, 42, 7), mastered=False,
    )
    record = original.to_record()
    conn = get_connection(tmp_db)
    conn.execute(
        f"INSERT INTO flashcards ({', '.join(record)}) VALUES ({', '.join('?' * len(record))})",
        tuple(record.values()),
    )
    row = conn.execute("SELECT * FROM flashcards").fetchone()
    conn.close()
    loaded = Flashcard.from_row(row)
    assert loaded.id == 1
    assert loaded.next_review_at == original.next_review_at
    assert loaded.last_reviewed_at == original.last_reviewed_at
    assert loaded.mastered is False
    assert loaded.article == "die"


def test_from_row_treats_missing_level_as_new(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    conn.execute(
        "INSERT INTO flashcards (term, translation, proficiency_level, next_review_at) VALUES ('Puls', 'Pulse', NULL, '2024-03-12')"
    )
    row = conn.execute("SELECT * FROM flashcards").fetchone()
    conn.close()
    card = Flashcard.from_row(row)
    assert card.proficiency_level == 0
    assert card.next_review_at == datetime(2024, 3, 12)


def test_review_log_defaults():
    log = ReviewLog(card_id=1, grade="good", level_before=0, level_after=1)
    assert log.reviewed_at is None


def test_to_record_clamps_level():
    assert Flashcard(term="Puls", translation="Pulse", proficiency_level=9).to_record()["proficiency_level"] == 4
    assert Flashcard(term="Puls", translation="Pulse", proficiency_level=-1).to_record()["proficiency_level"] == 0
