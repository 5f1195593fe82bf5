"""Card collection storage and review bookkeeping.

The scheduler only computes levels and dates; this module owns the cards,
writes the results back and keeps the review history.
"""
import logging
import sqlite3
from dataclasses import replace
from datetime import datetime

from ward_vocab.db import get_connection
from ward_vocab.models import Flashcard, ReviewLog
from ward_vocab.scheduler import MAX_LEVEL, Grade, clamp_level, compute_next_review_state, is_due

logger = logging.getLogger(__name__)

UNMASTERED_LEVEL = 2

_COLUMNS = (
    "term", "translation", "article", "definition", "example_sentence",
    "example_translation", "category", "syllables", "proficiency_level",
    "next_review_at", "last_reviewed_at", "mastered",
)


class CardNotFoundError(LookupError):
    pass


class DuplicateCardError(ValueError):
    pass


def _term_exists(conn: sqlite3.Connection, term: str) -> bool:
    wanted = term.strip().casefold()
    rows = conn.execute("SELECT term FROM flashcards").fetchall()
    return any(r["term"].casefold() == wanted for r in rows)


def add_card(db_path: str, card: Flashcard) -> int:
    """Admit a new card to the emergency ward and return its id."""
    new_card = replace(
        card, term=card.term.strip(), proficiency_level=0,
        next_review_at=None, last_reviewed_at=None, mastered=False,
    )
    record = new_card.to_record()
    conn = get_connection(db_path)
    try:
        if _term_exists(conn, new_card.term):
            raise DuplicateCardError(f"'{new_card.term}' is already in the collection")
        cursor = conn.execute(
            f"INSERT INTO flashcards ({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))})",
            tuple(record[c] for c in _COLUMNS),
        )
        conn.commit()
    except sqlite3.IntegrityError as e:
        raise DuplicateCardError(f"'{new_card.term}' is already in the collection") from e
    finally:
        conn.close()
    logger.info("Added card %r (id=%s)", new_card.term, cursor.lastrowid)
    return cursor.lastrowid


def get_card(db_path: str, card_id: int) -> Flashcard:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
    conn.close()
    if row is None:
        raise CardNotFoundError(f"No card with id {card_id}")
    return Flashcard.from_row(row)


def find_card(db_path: str, term: str) -> Flashcard | None:
    """Look a card up by term, ignoring case."""
    wanted = term.strip().casefold()
    for card in list_cards(db_path):
        if card.term.casefold() == wanted:
            return card
    return None


def _update_card(conn: sqlite3.Connection, card: Flashcard) -> None:
    if card.id is None:
        raise CardNotFoundError("Card has no id; use add_card for new cards")
    record = card.to_record()
    cursor = conn.execute(
        f"UPDATE flashcards SET {', '.join(f'{c}=?' for c in _COLUMNS)} WHERE id=?",
        tuple(record[c] for c in _COLUMNS) + (card.id,),
    )
    if cursor.rowcount == 0:
        raise CardNotFoundError(f"No card with id {card.id}")


def save_card(db_path: str, card: Flashcard) -> None:
    conn = get_connection(db_path)
    try:
        with conn:
            _update_card(conn, card)
    finally:
        conn.close()


def remove_card(db_path: str, card_id: int) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise CardNotFoundError(f"No card with id {card_id}")
    logger.info("Removed card id=%s", card_id)


def list_cards(
    db_path: str,
    category: str | None = None,
    search: str | None = None,
    hide_mastered: bool = False,
) -> list[Flashcard]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM flashcards ORDER BY id").fetchall()
    conn.close()
    cards = [Flashcard.from_row(r) for r in rows]
    if hide_mastered:
        cards = [c for c in cards if not c.mastered]
    if category and category != "All":
        cards = [c for c in cards if c.category.strip() == category.strip()]
    if search and search.strip():
        q = search.strip().lower()
        cards = [
            c for c in cards
            if q in c.term.lower() or q in c.translation.lower() or q in c.definition.lower()
        ]
    return cards


def get_categories(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT DISTINCT category FROM flashcards").fetchall()
    conn.close()
    return sorted({(r["category"] or "General").strip() for r in rows})


def get_due_cards(db_path: str, limit: int | None = None, now: datetime | None = None) -> list[Flashcard]:
    """Cards ready for review, never-scheduled first, then most overdue."""
    now = now or datetime.now()
    due = [c for c in list_cards(db_path) if is_due(c, now)]
    due.sort(key=lambda c: (c.next_review_at is not None, c.next_review_at or now))
    return due[:limit] if limit is not None else due


def apply_review(card: Flashcard, grade: Grade | str, now: datetime | None = None) -> Flashcard:
    """Return a copy of the card with a graded review applied."""
    now = now or datetime.now()
    update = compute_next_review_state(card.proficiency_level, grade, now)
    return replace(
        card,
        proficiency_level=update.level,
        next_review_at=update.next_review_at,
        last_reviewed_at=now,
        mastered=update.level == MAX_LEVEL,
    )


def record_review(db_path: str, card_id: int, grade: Grade | str, now: datetime | None = None) -> Flashcard:
    now = now or datetime.now()
    grade = Grade(grade)
    card = get_card(db_path, card_id)
    updated = apply_review(card, grade, now)
    conn = get_connection(db_path)
    try:
        # Card and history row commit together or not at all.
        with conn:
            _update_card(conn, updated)
            conn.execute(
                """INSERT INTO flashcard_results (card_id, grade, level_before, level_after, reviewed_at)
                VALUES (?, ?, ?, ?, ?)""",
                (card_id, grade.value, clamp_level(card.proficiency_level), updated.proficiency_level, now.isoformat()),
            )
    finally:
        conn.close()
    logger.debug(
        "Card %s graded %s: level %s -> %s, next review %s",
        card_id, grade.value, card.proficiency_level, updated.proficiency_level,
        updated.next_review_at.date().isoformat(),
    )
    return updated


def toggle_mastered(card: Flashcard) -> Flashcard:
    """Flip the mastery flag by hand. The due date is left untouched."""
    if card.mastered:
        return replace(card, mastered=False, proficiency_level=UNMASTERED_LEVEL)
    return replace(card, mastered=True, proficiency_level=MAX_LEVEL)


def toggle_card_mastery(db_path: str, card_id: int) -> Flashcard:
    updated = toggle_mastered(get_card(db_path, card_id))
    save_card(db_path, updated)
    logger.info("Card %s mastered=%s", card_id, updated.mastered)
    return updated


def get_review_history(db_path: str, card_id: int) -> list[ReviewLog]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM flashcard_results WHERE card_id = ? ORDER BY id", (card_id,)
    ).fetchall()
    conn.close()
    return [ReviewLog.from_row(r) for r in rows]
