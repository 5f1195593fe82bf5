"""Ward occupancy and review statistics."""
from datetime import datetime

from ward_vocab.db import get_connection
from ward_vocab.flashcards import get_due_cards
from ward_vocab.scheduler import MAX_LEVEL, MIN_LEVEL, Grade


def get_retention_label(score: float) -> str:
    if score >= 85:
        return "HEALTHY"
    elif score >= 70:
        return "STABLE"
    elif score >= 50:
        return "CRITICAL"
    return "EMERGENCY"


def get_retention_color(score: float) -> str:
    if score >= 85:
        return "green"
    elif score >= 70:
        return "yellow"
    elif score >= 50:
        return "dark_orange"
    return "red"


def get_ward_counts(db_path: str) -> list[int]:
    """Number of cards in each ward, indexed by level."""
    counts = [0] * (MAX_LEVEL + 1)
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT COALESCE(proficiency_level, 0) as lvl, COUNT(*) as n FROM flashcards GROUP BY lvl"
    ).fetchall()
    conn.close()
    for r in rows:
        if MIN_LEVEL <= r["lvl"] <= MAX_LEVEL:
            counts[r["lvl"]] += r["n"]
    return counts


def get_retention_rate(db_path: str) -> float:
    """Share of graded reviews that were recalled, as a percentage."""
    conn = get_connection(db_path)
    row = conn.execute(
        "SELECT COUNT(*) as t, SUM(CASE WHEN grade != ? THEN 1 ELSE 0 END) as c FROM flashcard_results",
        (Grade.AGAIN.value,),
    ).fetchone()
    conn.close()
    if not row["t"]:
        return 0.0
    return round((row["c"] / row["t"]) * 100, 1)


def get_collection_stats(db_path: str, now: datetime | None = None) -> dict:
    conn = get_connection(db_path)
    total = conn.execute("SELECT COUNT(*) FROM flashcards").fetchone()[0]
    mastered = conn.execute("SELECT COUNT(*) FROM flashcards WHERE mastered = 1").fetchone()[0]
    reviews = conn.execute("SELECT COUNT(*) FROM flashcard_results").fetchone()[0]
    conn.close()
    return {
        "total_cards": total,
        "due_cards": len(get_due_cards(db_path, now=now)),
        "mastered_cards": mastered,
        "reviews": reviews,
        "retention": get_retention_rate(db_path),
    }
