from collections import deque
from datetime import datetime
from itertools import count
from typing import Literal, Optional

from pydantic import BaseModel

Source = Literal["command", "classifier", "conversation"]


class InteractionEntry(BaseModel):
    id: int
    timestamp: str  # ISO format datetime string
    utterance: str
    source: Source
    intent: Optional[str] = None
    success: bool
    message: str


class InteractionLog:
    """Most recent interpretations, oldest dropped once capacity is reached."""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[InteractionEntry] = deque(maxlen=capacity)
        self._ids = count(1)

    def record(
        self,
        utterance: str,
        source: Source,
        success: bool,
        message: str,
        intent: Optional[str] = None,
    ) -> InteractionEntry:
        entry = InteractionEntry(
            id=next(self._ids),
            timestamp=datetime.now().isoformat(),
            utterance=utterance,
            source=source,
            intent=intent,
            success=success,
            message=message,
        )
        self._entries.append(entry)
        return entry

    def entries(self) -> list[InteractionEntry]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
