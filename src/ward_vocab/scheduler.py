"""Ward-based spaced repetition scheduling.

Cards move through five wards, from the emergency room (new or relapsed)
to discharge (mastered). Each ward has a fixed review interval:

    Level 0: Notaufnahme  (Emergency)   1 day
    Level 1: Intensiv     (ICU)         3 days
    Level 2: Station      (Ward)        7 days
    Level 3: Reha         (Rehab)      14 days
    Level 4: Entlassen    (Discharged) 30 days
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

MIN_LEVEL = 0
MAX_LEVEL = 4

INTERVAL_DAYS = {0: 1, 1: 3, 2: 7, 3: 14, 4: 30}

WARD_NAMES = (
    "Notaufnahme (Emergency)",
    "Intensiv (ICU)",
    "Station (Ward)",
    "Reha (Rehab)",
    "Entlassen (Discharged)",
)


class Grade(str, Enum):
    """How well a card was recalled."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"


@dataclass(frozen=True)
class ScheduleUpdate:
    level: int
    next_review_at: datetime


def clamp_level(level) -> int:
    """Force a stored level into the valid range. Missing levels are new cards."""
    if level is None:
        return MIN_LEVEL
    return max(MIN_LEVEL, min(MAX_LEVEL, int(level)))


def _as_datetime(moment) -> datetime:
    if isinstance(moment, datetime):
        return moment
    return datetime.combine(moment, time.min)


def start_of_day(moment: date | datetime) -> datetime:
    return datetime.combine(_as_datetime(moment).date(), time.min)


def end_of_day(moment: date | datetime) -> datetime:
    return datetime.combine(_as_datetime(moment).date(), time.max)


def _next_level(level: int, grade: Grade) -> int:
    if grade is Grade.AGAIN:
        return MIN_LEVEL
    if grade is Grade.HARD:
        return max(MIN_LEVEL, level - 1)
    if grade is Grade.GOOD:
        return min(MAX_LEVEL, level + 1)
    if grade is Grade.EASY:
        return min(MAX_LEVEL, level + 2)
    raise ValueError(f"Unhandled grade: {grade!r}")


def compute_next_review_state(
    current_level: int | None,
    grade: Grade | str,
    now: datetime | None = None,
) -> ScheduleUpdate:
    """Move a card to its next ward and schedule the following review.

    Args:
        current_level: Ward the card is in now (0-4). Out-of-range values
            are clamped, None counts as a new card.
        grade: Recall quality, a Grade or its string value.
        now: Moment of the review, defaults to the local clock.

    Returns:
        ScheduleUpdate with the new level and a due date at local midnight,
        never earlier than tomorrow.
    """
    grade = Grade(grade)
    now = now or datetime.now()
    # The interval follows the ward the card lands in, not the one it left.
    new_level = _next_level(clamp_level(current_level), grade)
    due_day = start_of_day(now) + timedelta(days=INTERVAL_DAYS[new_level])
    return ScheduleUpdate(level=new_level, next_review_at=due_day)


def is_due(item, as_of: date | datetime | None = None) -> bool:
    """Whether a card belongs in today's review queue.

    Mastered cards are never due. Cards that were never scheduled always
    are; a card can only become mastered after being scheduled, so the two
    rules do not collide for cards that went through grading.
    """
    if item.mastered:
        return False
    if item.next_review_at is None:
        return True
    return _as_datetime(item.next_review_at) <= end_of_day(as_of or datetime.now())


def describe_level(level: int | None) -> str:
    if level is None or not MIN_LEVEL <= level <= MAX_LEVEL:
        return WARD_NAMES[MIN_LEVEL]
    return WARD_NAMES[level]


def days_until(due: date | datetime, as_of: date | datetime | None = None) -> int:
    """Calendar days from as_of to due; zero or less means due."""
    today = start_of_day(as_of or datetime.now())
    return (start_of_day(due) - today).days


def describe_dueness(due: date | datetime | None, as_of: date | datetime | None = None) -> str:
    if due is None:
        return "due now"
    days = days_until(due, as_of)
    if days <= 0:
        return "due today"
    if days == 1:
        return "tomorrow"
    return f"in {days} days"
