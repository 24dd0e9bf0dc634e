import re
from datetime import date
from typing import Optional

from day_time import parse_day_time_spec
from models import AddTaskCommand

# Order matters: the first template that matches wins
ADD_TASK_PATTERNS = [
    re.compile(r"^add task for (.+?):\s*(.+)$", re.IGNORECASE | re.DOTALL),
    re.compile(r"^add (.+?) task:\s*(.+)$", re.IGNORECASE | re.DOTALL),
    re.compile(r"^add (.+?):\s*(.+)$", re.IGNORECASE | re.DOTALL),
    re.compile(r"^(.+?) task:\s*(.+)$", re.IGNORECASE | re.DOTALL),
    re.compile(r"^task for (.+?):\s*(.+)$", re.IGNORECASE | re.DOTALL),
]


def parse_task_command(utterance: str, today: Optional[date] = None) -> Optional[AddTaskCommand]:
    """
    Match an utterance against the add-task templates.

    Returns None when nothing matches so the caller can move on to the
    classifier. The qualifier (group 1) goes through the day/time resolver,
    the task text (group 2) keeps its original casing.
    """
    if not utterance:
        return None
    stripped = utterance.strip()

    for pattern in ADD_TASK_PATTERNS:
        match = pattern.match(stripped)
        if not match:
            continue
        spec = parse_day_time_spec(match.group(1), today=today)
        return AddTaskCommand(
            text=match.group(2).strip(),
            day=spec.day,
            time_slot=spec.time_slot,
            date=spec.date,
        )

    return None
