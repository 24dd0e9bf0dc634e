from datetime import date as Date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

TimeSlot = Literal["morning", "afternoon", "evening"]
Confidence = Literal["exact", "high", "medium", "low", "ambiguous", "none"]
IntentName = Literal[
    "add_task",
    "complete_task",
    "plan_day",
    "archive_completed",
    "list_tasks",
    "help",
]

class Task(BaseModel):
    id: str
    text: str
    completed: bool = False
    archived: bool = False  # only ever True for completed tasks
    time_slot: Optional[TimeSlot] = None
    date: Optional[str] = None  # ISO format: YYYY-MM-DD
    created_at: str  # ISO format datetime string

class TaskCreate(BaseModel):
    text: str
    time_slot: Optional[TimeSlot] = None
    date: Optional[Date] = None

class TaskUpdate(BaseModel):
    text: Optional[str] = None
    completed: Optional[bool] = None
    time_slot: Optional[TimeSlot] = None
    date: Optional[Date] = None

class Message(BaseModel):
    role: str  # "user" or "assistant"
    content: str

class ChatRequest(BaseModel):
    messages: list[Message]


class DayTimeSpec(BaseModel):
    """Qualifier pulled out of a command, e.g. "tuesday morning"."""
    day: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    date: Optional[Date] = None

class AddTaskCommand(BaseModel):
    action: Literal["add_task"] = "add_task"
    text: str
    day: Optional[str] = None
    time_slot: Optional[TimeSlot] = None
    date: Optional[Date] = None

    @property
    def is_scheduled(self) -> bool:
        return self.date is not None or self.time_slot is not None


class IntentParams(BaseModel):
    # The classifier speaks camelCase; unknown keys are dropped
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task_text: Optional[str] = Field(default=None, alias="taskText")
    task_id: Optional[str] = Field(default=None, alias="taskId")
    task_name: Optional[str] = Field(default=None, alias="taskName")
    task_number: Optional[int] = Field(default=None, alias="taskNumber")
    time_slot: Optional[TimeSlot] = Field(default=None, alias="timeSlot")
    date: Optional[Date] = None

class IntentResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    intent: IntentName
    params: IntentParams = Field(default_factory=IntentParams)


class MatchResult(BaseModel):
    task: Optional[Task] = None
    confidence: Confidence = "none"
    matches: list[Task] = Field(default_factory=list)

class ActionResult(BaseModel):
    success: bool
    message: str
