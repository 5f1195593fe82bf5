"""Data classes for the vocabulary collection."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ward_vocab.scheduler import clamp_level


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass
class Flashcard:
    term: str
    translation: str
    id: Optional[int] = None
    article: str = ""
    definition: str = ""
    example_sentence: str = ""
    example_translation: str = ""
    category: str = "General"
    syllables: str = ""
    proficiency_level: int = 0
    next_review_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None
    mastered: bool = False

    @classmethod
    def from_row(cls, row) -> "Flashcard":
        return cls(
            id=row["id"],
            term=row["term"],
            translation=row["translation"],
            article=row["article"] or "",
            definition=row["definition"] or "",
            example_sentence=row["example_sentence"] or "",
            example_translation=row["example_translation"] or "",
            category=row["category"] or "General",
            syllables=row["syllables"] or "",
            proficiency_level=clamp_level(row["proficiency_level"]),
            next_review_at=_parse_timestamp(row["next_review_at"]),
            last_reviewed_at=_parse_timestamp(row["last_reviewed_at"]),
            mastered=bool(row["mastered"]),
        )

    def to_record(self) -> dict:
        """Column values as stored in the flashcards table."""
        return {
            "term": self.term,
            "translation": self.translation,
            "article": self.article,
            "definition": self.definition,
            "example_sentence": self.example_sentence,
            "example_translation": self.example_translation,
            "category": self.category.strip() or "General",
            "syllables": self.syllables,
            "proficiency_level": clamp_level(self.proficiency_level),
            "next_review_at": _format_timestamp(self.next_review_at),
            "last_reviewed_at": _format_timestamp(self.last_reviewed_at),
            "mastered": int(self.mastered),
        }

    @property
    def display_term(self) -> str:
        return f"{self.article} {self.term}".strip()


@dataclass
class ReviewLog:
    card_id: int
    grade: str
    level_before: int
    level_after: int
    reviewed_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row) -> "ReviewLog":
        return cls(
            card_id=row["card_id"],
            grade=row["grade"],
            level_before=row["level_before"],
            level_after=row["level_after"],
            reviewed_at=_parse_timestamp(row["reviewed_at"]),
        )
