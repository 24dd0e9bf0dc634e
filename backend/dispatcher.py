import logging
from typing import Callable, Optional, Protocol

from categorizer import categorize
from command_parser import parse_task_command
from config import TIME_SLOTS
from database import TaskStore
from interaction_log import InteractionLog
from models import ActionResult, AddTaskCommand, IntentParams, IntentResponse, MatchResult, Task
from task_resolver import resolve_task

logger = logging.getLogger(__name__)

# Lower tiers are only ever offered back to the user, never acted on
AUTO_EXECUTE_CONFIDENCE = {"exact", "high"}

HELP_TEXT = """I can manage your day plan. Things you can say:
- "add task for tuesday morning: call the bank"
- "add buy milk" (I'll pick a time slot for it)
- "complete buy milk" or "complete task 2"
- "plan my day" to spread unscheduled tasks over morning, afternoon and evening
- "archive completed tasks"
- "list my tasks\""""


class Classifier(Protocol):
    async def classify(self, utterance: str, tasks: Optional[list[Task]] = None) -> Optional[IntentResponse]:
        ...


def open_tasks(tasks: list[Task]) -> list[Task]:
    """Non-completed tasks in display order; taskNumber indexes into this."""
    return [task for task in tasks if not task.completed]


def describe_task(task: Task) -> str:
    details = [detail for detail in (task.time_slot, task.date) if detail]
    if details:
        return f"'{task.text}' ({', '.join(details)})"
    return f"'{task.text}'"


class IntentDispatcher:
    """
    Turns an utterance into a task action.

    The command templates are tried first; a command that names a day or a
    time slot is executed without consulting the classifier. Otherwise the
    classifier's intent picks one of the handlers below. interpret() returns
    None whenever nothing was handled, so the caller can fall back to
    conversation.
    """

    def __init__(self, store: TaskStore, classifier: Classifier, log: Optional[InteractionLog] = None):
        self.store = store
        self.classifier = classifier
        self.log = log
        self.handlers: dict[str, Callable[[IntentParams, list[Task]], Optional[ActionResult]]] = {
            "add_task": self.add_task,
            "complete_task": self.complete_task,
            "plan_day": self.plan_day,
            "archive_completed": self.archive_completed,
            "list_tasks": self.list_tasks,
            "help": self.help,
        }

    async def interpret(self, utterance: str, tasks: list[Task]) -> Optional[ActionResult]:
        command = parse_task_command(utterance)
        if command is not None and command.is_scheduled:
            result = self.run("add_task", self.add_command, command)
            self._record(utterance, "command", "add_task", result)
            return result

        intent = await self.classifier.classify(utterance, tasks)
        if intent is None:
            logger.info("No intent for %r", utterance)
            return None

        handler = self.handlers.get(intent.intent)
        if handler is None:
            return None
        result = self.run(intent.intent, handler, intent.params, tasks)
        if result is not None:
            self._record(utterance, "classifier", intent.intent, result)
        return result

    def run(self, name: str, handler: Callable, *args) -> Optional[ActionResult]:
        try:
            return handler(*args)
        except Exception as e:
            logger.exception("Handler %s failed", name)
            return ActionResult(success=False, message=f"Something went wrong ({name}): {e}")

    def _record(self, utterance: str, source: str, intent: str, result: Optional[ActionResult]):
        if self.log is not None and result is not None:
            self.log.record(utterance, source, result.success, result.message, intent=intent)

    # Handlers

    def add_command(self, command: AddTaskCommand) -> ActionResult:
        time_slot = command.time_slot or categorize(command.text)
        task = self.store.create_task(command.text, task_date=command.date, time_slot=time_slot)
        return ActionResult(success=True, message=f"Added task: {describe_task(task)}")

    def add_task(self, params: IntentParams, tasks: list[Task]) -> Optional[ActionResult]:
        text = (params.task_text or "").strip()
        if not text:
            return None
        time_slot = params.time_slot or categorize(text)
        task = self.store.create_task(text, task_date=params.date, time_slot=time_slot)
        return ActionResult(success=True, message=f"Added task: {describe_task(task)}")

    def complete_task(self, params: IntentParams, tasks: list[Task]) -> Optional[ActionResult]:
        """
        Complete one task, chosen by id, then by name, then by list position.
        A name match below "high" confidence is not acted on.
        """
        if params.task_id:
            task = next((task for task in tasks if task.id == params.task_id), None)
            if task is None:
                return ActionResult(success=False, message=f"Could not find task with id '{params.task_id}'")
            return self._complete(task)

        unresolved: Optional[MatchResult] = None
        if params.task_name:
            match = resolve_task(params.task_name, tasks)
            if match.confidence in AUTO_EXECUTE_CONFIDENCE:
                return self._complete(match.task)
            unresolved = match

        if params.task_number is not None:
            candidates = open_tasks(tasks)
            if 1 <= params.task_number <= len(candidates):
                return self._complete(candidates[params.task_number - 1])
            if unresolved is None:
                return ActionResult(
                    success=False,
                    message=f"There is no task #{params.task_number}; you have {len(candidates)} open tasks",
                )

        if unresolved is not None:
            return self._unresolved(params.task_name, unresolved)
        return None

    def _complete(self, task: Task) -> ActionResult:
        # Completing is a set, not a toggle: repeating it changes nothing
        was_completed = task.completed
        updated = self.store.set_completed(task.id, True)
        if updated is None:
            return ActionResult(success=False, message=f"Could not find task matching '{task.text}'")
        if was_completed:
            return ActionResult(success=True, message=f"'{updated.text}' is already completed")
        return ActionResult(success=True, message=f"Completed task: '{updated.text}'")

    def _unresolved(self, name: str, match: MatchResult) -> ActionResult:
        if match.confidence == "ambiguous":
            options = "\n".join(
                f"{number}. {candidate.text}" for number, candidate in enumerate(match.matches, start=1)
            )
            return ActionResult(success=False, message=f"Which task did you mean by '{name}'?\n{options}")
        if match.task is not None:
            return ActionResult(
                success=False,
                message=f"Did you mean '{match.task.text}'? Say \"complete {match.task.text}\" to confirm.",
            )
        return ActionResult(success=False, message=f"Could not find task matching '{name}'")

    def plan_day(self, params: Optional[IntentParams] = None, tasks: Optional[list[Task]] = None) -> ActionResult:
        """Spread slot-less open tasks over the day in list order, round-robin."""
        if tasks is None:
            tasks = self.store.list_active_tasks()
        unscheduled = [task for task in tasks if task.time_slot is None and not task.completed]
        if not unscheduled:
            return ActionResult(success=True, message="No unscheduled tasks to plan")

        for index, task in enumerate(unscheduled):
            self.store.set_time_slot(task.id, TIME_SLOTS[index % len(TIME_SLOTS)])
        return ActionResult(success=True, message=f"Assigned {len(unscheduled)} tasks to time slots")

    def archive_completed(self, params: IntentParams, tasks: list[Task]) -> ActionResult:
        """Archive each completed task on its own; failures are reported, not raised."""
        done = [task for task in tasks if task.completed and not task.archived]
        if not done:
            return ActionResult(success=True, message="No completed tasks to archive")

        archived: list[Task] = []
        failures: list[str] = []
        for task in done:
            try:
                if self.store.set_archived(task.id) is None:
                    failures.append(f"'{task.text}' (not found)")
                    continue
            except Exception as e:
                logger.warning("Archiving %s failed: %s", task.id, e)
                failures.append(f"'{task.text}' ({e})")
                continue
            archived.append(task)

        message = f"Archived {len(archived)} completed {'task' if len(archived) == 1 else 'tasks'}"
        if failures:
            message += f". Failed to archive {len(failures)}: {', '.join(failures)}"
        return ActionResult(success=not failures, message=message)

    def list_tasks(self, params: IntentParams, tasks: list[Task]) -> ActionResult:
        pending = open_tasks(tasks)
        done = [task for task in tasks if task.completed and not task.archived]
        if not pending and not done:
            return ActionResult(success=True, message="You have no tasks")

        lines = [f"{number}. {describe_task(task)}" for number, task in enumerate(pending, start=1)]
        if not pending:
            lines.append("No open tasks")
        if done:
            lines.append(f"Completed: {', '.join(task.text for task in done)}")
        return ActionResult(success=True, message="\n".join(lines))

    def help(self, params: IntentParams, tasks: list[Task]) -> ActionResult:
        return ActionResult(success=True, message=HELP_TEXT)
