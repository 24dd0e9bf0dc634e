from datetime import date, timedelta
from typing import Optional

from models import DayTimeSpec, TimeSlot

# Checked in order; explicit slot names win over the coarse fallbacks
TIME_SLOT_TOKENS: list[tuple[str, TimeSlot]] = [
    ("morning", "morning"),
    ("afternoon", "afternoon"),
    ("evening", "evening"),
    ("am", "morning"),
    ("pm", "afternoon"),
    ("night", "evening"),
]

# Full names before abbreviations so "monday" is reported as "monday", not "mon"
WEEKDAY_TOKENS: list[tuple[str, int]] = [
    ("monday", 0),
    ("tuesday", 1),
    ("wednesday", 2),
    ("thursday", 3),
    ("friday", 4),
    ("saturday", 5),
    ("sunday", 6),
    ("mon", 0),
    ("tue", 1),
    ("tues", 1),
    ("wed", 2),
    ("thu", 3),
    ("thurs", 3),
    ("fri", 4),
    ("sat", 5),
    ("sun", 6),
]


def extract_time_slot(spec: str) -> Optional[TimeSlot]:
    """Return the slot of the first token found in spec, if any."""
    for token, slot in TIME_SLOT_TOKENS:
        if token in spec:
            return slot
    return None


def next_weekday(target_weekday: int, today: date) -> date:
    """
    Next occurrence of target_weekday strictly after today.
    Naming today's own weekday means one week out, never today.
    """
    days_until = target_weekday - today.weekday()
    if days_until <= 0:
        days_until += 7
    return today + timedelta(days=days_until)


def extract_day(spec: str, today: date) -> tuple[Optional[str], Optional[date]]:
    if "today" in spec:
        return "today", today
    if "tomorrow" in spec:
        return "tomorrow", today + timedelta(days=1)

    for token, weekday in WEEKDAY_TOKENS:
        if token in spec:
            return token, next_weekday(weekday, today)
    return None, None


def parse_day_time_spec(spec: str, today: Optional[date] = None) -> DayTimeSpec:
    """
    Resolve a qualifier such as "tuesday morning" or "tomorrow pm".
    today defaults to the local calendar date.
    """
    normalized = spec.lower().strip()
    if today is None:
        today = date.today()

    day, target_date = extract_day(normalized, today)
    return DayTimeSpec(
        day=day,
        time_slot=extract_time_slot(normalized),
        date=target_date,
    )


def day_offset(target: date, today: Optional[date] = None) -> int:
    """Index of target within the coming week (0 = today); 0 if outside it."""
    if today is None:
        today = date.today()
    diff = (target - today).days
    if 0 <= diff < 7:
        return diff
    return 0
