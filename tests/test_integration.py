# tests/test_integration.py
"""End-to-end run of a card through every ward."""
from datetime import timedelta

from ward_vocab.db import init_db
from ward_vocab.seed import seed_demo_cards
from ward_vocab.flashcards import find_card, get_card, get_due_cards, record_review, toggle_card_mastery
from ward_vocab.scheduler import Grade, describe_dueness, describe_level
from ward_vocab.dashboard import get_collection_stats, get_ward_counts


def test_card_journey_through_the_hospital(tmp_db, now):
    init_db(tmp_db)
    seed_demo_cards(tmp_db)
    card_id = find_card(tmp_db, "Lungenentzündung").id

    # Day 0: admitted, recalled well
    assert card_id in [c.id for c in get_due_cards(tmp_db, now=now)]
    card = record_review(tmp_db, card_id, Grade.GOOD, now)
    assert describe_level(card.proficiency_level).startswith("Intensiv")
    assert describe_dueness(card.next_review_at, now) == "in 3 days"

    # Day 3: complication, back one ward
    day3 = now + timedelta(days=3)
    assert card_id in [c.id for c in get_due_cards(tmp_db, now=day3)]
    card = record_review(tmp_db, card_id, Grade.HARD, day3)
    assert card.proficiency_level == 0
    assert describe_dueness(card.next_review_at, day3) == "tomorrow"

    # Day 4: relapse keeps it in the emergency ward
    day4 = day3 + timedelta(days=1)
    card = record_review(tmp_db, card_id, Grade.AGAIN, day4)
    assert card.proficiency_level == 0
    assert card_id not in [c.id for c in get_due_cards(tmp_db, now=day4)]

    # Day 5 onwards: two easy recalls reach discharge
    day5 = day4 + timedelta(days=1)
    card = record_review(tmp_db, card_id, Grade.EASY, day5)
    card = record_review(tmp_db, card_id, Grade.EASY, day5 + timedelta(days=7))
    assert card.proficiency_level == 4
    assert get_card(tmp_db, card_id).mastered is True
    assert get_ward_counts(tmp_db) == [4, 0, 0, 0, 1]

    # Readmitted by hand: level 2, schedule untouched
    readmitted = toggle_card_mastery(tmp_db, card_id)
    assert readmitted.proficiency_level == 2
    assert readmitted.next_review_at == card.next_review_at
    stats = get_collection_stats(tmp_db, now=card.next_review_at)
    assert stats["mastered_cards"] == 0
    assert stats["reviews"] == 5
    assert stats["retention"] == 80.0
