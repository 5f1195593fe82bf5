"""Seed the collection with the bundled demo vocabulary."""
import json
import logging
from pathlib import Path

from ward_vocab.db import get_connection
from ward_vocab.flashcards import DuplicateCardError, add_card
from ward_vocab.models import Flashcard

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether the collection holds any cards yet."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM flashcards").fetchone()[0]
    conn.close()
    return count > 0


def load_demo_cards() -> list[Flashcard]:
    data = json.loads((CONTENT_DIR / "demo_cards.json").read_text(encoding="utf-8"))
    return [Flashcard(**card) for card in data["cards"]]


def seed_demo_cards(db_path: str) -> int:
    """Add the demo cards that are not in the collection yet."""
    added = 0
    for card in load_demo_cards():
        try:
            add_card(db_path, card)
        except DuplicateCardError:
            logger.debug("Demo card %r already present", card.term)
            continue
        added += 1
    return added
