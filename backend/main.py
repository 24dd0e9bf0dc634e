from contextlib import asynccontextmanager
from datetime import date, timedelta
from typing import Optional
import logging
import uuid

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

import config
import database
from classifier import ConversationResponder, IntentClassifier
from database import (
    InvariantViolation,
    TaskStore,
    get_all_tasks,
    create_task_db,
    update_task_db,
    get_conversation,
    save_conversation
)
from day_time import day_offset
from dispatcher import IntentDispatcher
from interaction_log import InteractionLog
from models import Task, TaskCreate, TaskUpdate, ChatRequest

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    database.init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

store = TaskStore()
interaction_log = InteractionLog(config.INTERACTION_LOG_CAPACITY)
dispatcher = IntentDispatcher(store, IntentClassifier(), log=interaction_log)
responder = ConversationResponder()


@app.get("/tasks")
def get_tasks() -> list[Task]:
    return get_all_tasks()


@app.post("/tasks")
def create_task(task_data: TaskCreate) -> Task:
    return create_task_db(
        str(uuid.uuid4()),
        task_data.text,
        time_slot=task_data.time_slot,
        task_date=task_data.date.isoformat() if task_data.date else None,
    )


@app.patch("/tasks/{task_id}")
def update_task(task_id: str, task_data: TaskUpdate) -> Task:
    updates = task_data.model_dump(exclude_unset=True)
    try:
        result = update_task_db(task_id, **updates)
    except InvariantViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.post("/tasks/{task_id}/archive")
def archive_task(task_id: str) -> Task:
    try:
        result = store.set_archived(task_id)
    except InvariantViolation as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.post("/plan-day")
def plan_day() -> dict:
    result = dispatcher.run("plan_day", dispatcher.plan_day)
    return {"response": result.message, "tasks": get_all_tasks()}


def group_by_slot(tasks: list[Task]) -> dict[str, list[Task]]:
    schedule = {slot: [] for slot in config.TIME_SLOTS}
    schedule["unscheduled"] = []
    for task in tasks:
        schedule[task.time_slot or "unscheduled"].append(task)
    return schedule


@app.get("/schedule")
def get_schedule(date: Optional[date] = None) -> dict[str, list[Task]]:
    """Tasks grouped by time slot, optionally only those due on one date."""
    tasks = get_all_tasks()
    if date is not None:
        tasks = [task for task in tasks if task.date == date.isoformat()]
    return group_by_slot(tasks)


@app.get("/week")
def get_week() -> list[dict]:
    """Seven day buckets starting today. Undated and out-of-range tasks land on today."""
    today = date.today()
    days = [
        {"offset": offset, "date": (today + timedelta(days=offset)).isoformat(), "tasks": []}
        for offset in range(7)
    ]
    for task in get_all_tasks():
        offset = day_offset(date.fromisoformat(task.date), today) if task.date else 0
        days[offset]["tasks"].append(task)
    return days


@app.get("/logs")
def get_logs() -> dict:
    return {"capacity": interaction_log.capacity, "logs": interaction_log.entries()}


@app.get("/conversation")
def get_conversation_endpoint() -> list[dict]:
    """Get saved conversation history."""
    return get_conversation()


@app.post("/chat")
async def chat(chat_request: ChatRequest) -> dict:
    """Interpret the latest user message; fall back to conversation if nothing handled it."""
    conversation = [{"role": m.role, "content": m.content} for m in chat_request.messages]
    utterance = next((m["content"] for m in reversed(conversation) if m["role"] == "user"), "")
    if not utterance.strip():
        return {"response": "Say something like \"plan my day\"", "tasks": get_all_tasks()}

    tasks = get_all_tasks()
    result = await dispatcher.interpret(utterance, tasks)
    if result is not None:
        message = result.message
    else:
        logger.info("Falling back to conversation for %r", utterance)
        message = await responder.respond(utterance, conversation, tasks)
        interaction_log.record(utterance, "conversation", True, message)

    # Save conversation with assistant response
    conversation.append({"role": "assistant", "content": message})
    save_conversation(conversation)

    return {"response": message, "tasks": get_all_tasks()}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
