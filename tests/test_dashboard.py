# tests/test_dashboard.py
from datetime import timedelta

from ward_vocab.db import init_db
from ward_vocab.seed import seed_demo_cards
from ward_vocab.flashcards import find_card, list_cards, record_review, save_card, toggle_card_mastery
from ward_vocab.scheduler import Grade
from ward_vocab.dashboard import (
    get_collection_stats, get_retention_label, get_retention_rate, get_ward_counts,
)


def test_ward_counts_empty(tmp_db):
    init_db(tmp_db)
    assert get_ward_counts(tmp_db) == [0, 0, 0, 0, 0]


def test_ward_counts_after_reviews(tmp_db, now):
    init_db(tmp_db)
    seed_demo_cards(tmp_db)
    cards = list_cards(tmp_db)
    record_review(tmp_db, cards[0].id, Grade.GOOD, now)
    record_review(tmp_db, cards[1].id, Grade.EASY, now)
    toggle_card_mastery(tmp_db, cards[2].id)
    assert get_ward_counts(tmp_db) == [2, 1, 1, 0, 1]


def test_ward_counts_match_total_after_bad_level_saved(tmp_db):
    init_db(tmp_db)
    seed_demo_cards(tmp_db)
    card = find_card(tmp_db, "Blinddarm")
    card.proficiency_level = 9
    save_card(tmp_db, card)
    counts = get_ward_counts(tmp_db)
    assert counts == [4, 0, 0, 0, 1]
    assert sum(counts) == get_collection_stats(tmp_db)["total_cards"]


def test_retention_rate(tmp_db, now):
    init_db(tmp_db)
    assert get_retention_rate(tmp_db) == 0.0
    seed_demo_cards(tmp_db)
    card_id = find_card(tmp_db, "Skalpell").id
    record_review(tmp_db, card_id, Grade.AGAIN, now)
    record_review(tmp_db, card_id, Grade.HARD, now)
    record_review(tmp_db, card_id, Grade.GOOD, now)
    record_review(tmp_db, card_id, Grade.EASY, now)
    assert get_retention_rate(tmp_db) == 75.0


def test_retention_label():
    assert get_retention_label(90) == "HEALTHY"
    assert get_retention_label(75) == "STABLE"
    assert get_retention_label(55) == "CRITICAL"
    assert get_retention_label(10) == "EMERGENCY"


def test_collection_stats(tmp_db, now):
    init_db(tmp_db)
    seed_demo_cards(tmp_db)
    cards = list_cards(tmp_db)
    record_review(tmp_db, cards[0].id, Grade.GOOD, now)
    toggle_card_mastery(tmp_db, cards[1].id)
    stats = get_collection_stats(tmp_db, now=now)
    assert stats == {
        "total_cards": 5,
        "due_cards": 3,
        "mastered_cards": 1,
        "reviews": 1,
        "retention": 100.0,
    }
    later = get_collection_stats(tmp_db, now=now + timedelta(days=3))
    assert later["due_cards"] == 4
