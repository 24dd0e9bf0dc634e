"""
Tests for command_parser.py - add-task templates.
"""
import pytest
import sys
import os
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from command_parser import parse_task_command

MONDAY = date(2025, 1, 20)
TUESDAY = date(2025, 1, 21)


class TestTemplates:
    """Tests for each supported phrasing."""

    def test_add_task_for(self):
        command = parse_task_command("add task for tuesday morning: Buy groceries", today=MONDAY)

        assert command is not None
        assert command.action == "add_task"
        assert command.text == "Buy groceries"
        assert command.day == "tuesday"
        assert command.time_slot == "morning"
        assert command.date == TUESDAY
        assert command.is_scheduled

    def test_text_keeps_casing_qualifier_does_not(self):
        command = parse_task_command("ADD TASK FOR Tuesday MORNING: Email Dr. Patel", today=MONDAY)

        assert command.text == "Email Dr. Patel"
        assert command.day == "tuesday"
        assert command.time_slot == "morning"

    def test_tuesday_on_a_tuesday_is_next_week(self):
        command = parse_task_command("add task for tuesday morning: Buy groceries", today=TUESDAY)
        assert command.date == date(2025, 1, 28)

    def test_add_qualifier_task(self):
        command = parse_task_command("Add Friday evening task: call mom", today=MONDAY)
        assert command.text == "call mom"
        assert command.time_slot == "evening"
        assert command.date == date(2025, 1, 24)

    def test_add_qualifier(self):
        command = parse_task_command("add tomorrow afternoon: pick up parcel", today=MONDAY)
        assert command.text == "pick up parcel"
        assert command.time_slot == "afternoon"
        assert command.date == TUESDAY

    def test_qualifier_task(self):
        command = parse_task_command("tomorrow task: water plants", today=MONDAY)
        assert command.text == "water plants"
        assert command.date == TUESDAY
        assert command.time_slot is None

    def test_task_for(self):
        command = parse_task_command("task for monday: pay rent", today=MONDAY)
        assert command.text == "pay rent"
        assert command.date == date(2025, 1, 27)

    def test_text_keeps_casing_and_is_trimmed(self):
        command = parse_task_command("  add task for today:    Email Dr. Smith  ", today=MONDAY)
        assert command.text == "Email Dr. Smith"
        assert command.date == MONDAY

    def test_qualifier_stops_at_first_colon(self):
        command = parse_task_command("add today task: review: chapter 3", today=MONDAY)
        assert command.text == "review: chapter 3"
        assert command.date == MONDAY


class TestNoMatch:
    """Utterances outside the grammar."""

    @pytest.mark.parametrize("utterance", [
        "buy milk",
        "complete buy milk",
        "plan my day",
        "add task for tuesday",
        "",
    ])
    def test_returns_none(self, utterance):
        assert parse_task_command(utterance, today=MONDAY) is None

    def test_match_without_day_or_slot_is_not_scheduled(self):
        command = parse_task_command("add milk: 2 liters", today=MONDAY)
        assert command is not None
        assert command.text == "2 liters"
        assert command.date is None
        assert command.time_slot is None
        assert not command.is_scheduled
