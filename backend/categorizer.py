import re
from typing import Optional

from models import TimeSlot

# A bare 6-9, optionally followed by ":" or "am": "gym at 6", "9:30", "8am"
MORNING_HOUR_RE = re.compile(r"\b[6-9](?::|am)?\b")
DIGIT_TOKEN_RE = re.compile(r"\d+")

EVENING_PM_HOURS = {6, 7, 8, 9, 10}

MORNING_KEYWORDS = [
    "breakfast", "coffee", "gym", "workout", "exercise", "jog", "yoga",
    "meditat", "stretch", "shower", "commute", "standup", "stand-up",
    "email", "inbox", "school run", "vitamins", "sunrise",
]
AFTERNOON_KEYWORDS = [
    "meeting", "call", "errand", "grocer", "shopping", "appointment",
    "doctor", "dentist", "bank", "post office", "pick up", "review",
    "report", "presentation", "project", "study", "client", "interview",
]
EVENING_KEYWORDS = [
    "dinner", "movie", "netflix", "tv", "relax", "party", "family",
    "cook", "laundry", "dishes", "bath", "bedtime", "journal", "novel",
    "friends", "game", "concert", "date night",
]

# Declared order doubles as the tie-break priority
KEYWORD_SLOTS: list[tuple[TimeSlot, list[str]]] = [
    ("morning", MORNING_KEYWORDS),
    ("afternoon", AFTERNOON_KEYWORDS),
    ("evening", EVENING_KEYWORDS),
]


def _is_lunch(text: str) -> bool:
    return "lunch" in text


def _is_morning(text: str) -> bool:
    return "am" in text or "morning" in text or bool(MORNING_HOUR_RE.search(text))


def _is_evening_pm(text: str) -> bool:
    if "pm" not in text:
        return False
    return any(int(token) in EVENING_PM_HOURS for token in DIGIT_TOKEN_RE.findall(text))


def _is_evening(text: str) -> bool:
    return any(word in text for word in ("evening", "night", "tonight"))


PRIORITY_RULES = [
    (_is_lunch, "afternoon"),
    (_is_morning, "morning"),
    (_is_evening_pm, "evening"),
    (_is_evening, "evening"),
]


def keyword_scores(text: str) -> dict[str, int]:
    return {
        slot: sum(1 for keyword in keywords if keyword in text)
        for slot, keywords in KEYWORD_SLOTS
    }


def categorize(text: str) -> Optional[TimeSlot]:
    """
    Pick a time slot for a task from its wording.

    Priority rules are tried first and the first one that fires decides.
    Otherwise the slot with the most keyword hits wins, ties going to the
    earlier slot of the day. No hits at all leaves the task unscheduled.
    """
    normalized = text.lower()

    for rule, slot in PRIORITY_RULES:
        if rule(normalized):
            return slot

    scores = keyword_scores(normalized)
    best_slot = None
    best_score = 0
    for slot, _ in KEYWORD_SLOTS:
        if scores[slot] > best_score:
            best_slot = slot
            best_score = scores[slot]
    return best_slot
