"""
Tests for task_resolver.py - matching a spoken task name to a task.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models import Task
from task_resolver import resolve_task


def make_tasks(*texts, completed=()):
    return [
        Task(id=f"id-{i}", text=text, completed=text in completed, created_at="2025-01-20T09:00:00")
        for i, text in enumerate(texts, start=1)
    ]


class TestLadder:
    """Each tier in order of precedence."""

    def test_exact(self):
        tasks = make_tasks("Buy milk and eggs", "Buy milk")
        result = resolve_task("buy milk", tasks)

        # The first task would satisfy prefix/contains, but exact wins
        assert result.confidence == "exact"
        assert result.task.id == "id-2"

    def test_exact_ignores_case_and_spacing(self):
        result = resolve_task("  CALL   Bank ", make_tasks("Call bank"))
        assert result.confidence == "exact"

    def test_prefix(self):
        result = resolve_task("write", make_tasks("Call bank", "Write report"))
        assert result.confidence == "high"
        assert result.task.text == "Write report"

    def test_all_words(self):
        result = resolve_task("quarterly send", make_tasks("Send the quarterly report"))
        assert result.confidence == "high"
        assert result.task.id == "id-1"

    def test_fuzzy_single(self):
        result = resolve_task("passport renewal", make_tasks("Renew passport", "Call bank"))
        assert result.confidence == "low"
        assert result.task.text == "Renew passport"

    def test_fuzzy_ambiguous_lists_every_candidate(self):
        tasks = make_tasks("Email Sarah about budget", "Budget review", "Walk dog")
        result = resolve_task("the budget thing", tasks)

        assert result.confidence == "ambiguous"
        assert result.task is None
        assert [task.id for task in result.matches] == ["id-1", "id-2"]

    def test_none(self):
        result = resolve_task("xylophone", make_tasks("Call bank"))
        assert result.confidence == "none"
        assert result.task is None
        assert result.matches == []

    def test_short_words_are_ignored_by_fuzzy_tier(self):
        result = resolve_task("do it", make_tasks("Call bank", "Fix door"))
        assert result.confidence == "none"


class TestAmbiguity:
    """Several tasks satisfying the same tier."""

    def test_call_mom_call_dad(self):
        result = resolve_task("call", make_tasks("Call mom", "Call dad"))

        assert result.confidence == "ambiguous"
        assert result.task is None
        assert [task.text for task in result.matches] == ["Call mom", "Call dad"]

    def test_candidates_keep_store_order(self):
        result = resolve_task("call", make_tasks("Call dad", "Call mom"))
        assert [task.text for task in result.matches] == ["Call dad", "Call mom"]


class TestCandidates:
    """Which tasks are considered at all."""

    def test_completed_tasks_are_skipped(self):
        tasks = make_tasks("Call mom", "Call dad", completed=("Call dad",))
        result = resolve_task("call", tasks)

        assert result.confidence == "high"
        assert result.task.text == "Call mom"

    def test_empty_inputs(self):
        assert resolve_task("", make_tasks("Call mom")).confidence == "none"
        assert resolve_task("call", []).confidence == "none"
