"""Tests for task extraction."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW
from notesense.tasks import extract_from_notes, extract_metadata, extract_tasks


class TestExtractTasks:
    def test_todo_with_due_date_and_priority(self):
        tasks = extract_tasks("TODO: call dentist tomorrow!!!")
        assert len(tasks) == 1
        task = tasks[0]
        assert task.title == "call dentist"
        assert task.priority == "high"
        expected = datetime.now(timezone.utc) + timedelta(days=1)
        assert abs((task.due_date - expected).total_seconds()) < 5
        assert task.completed is False
        assert task.extracted_from == "TODO: call dentist tomorrow!!!"

    def test_duplicate_titles_keep_first(self):
        text = "TODO: Buy milk\n- [x] buy milk."
        tasks = extract_tasks(text)
        assert len(tasks) == 1
        assert tasks[0].title == "Buy milk"
        assert tasks[0].completed is False

    def test_checkbox_state_maps_to_completed(self):
        tasks = extract_tasks("- [ ] write report\n- [x] send invoice\n[X] file taxes")
        assert [(t.title, t.completed) for t in tasks] == [
            ("write report", False),
            ("send invoice", True),
            ("file taxes", True),
        ]

    def test_modal_phrase_is_dropped(self):
        tasks = extract_tasks("Need to renew passport\nDon't forget to water plants")
        assert [t.title for t in tasks] == ["renew passport", "water plants"]

    def test_imperative_verb_is_dropped(self):
        tasks = extract_tasks("Email the landlord about the lease\n- Schedule team retro")
        assert [t.title for t in tasks] == ["the landlord about the lease", "team retro"]

    def test_imperative_keeps_due_date(self):
        tasks = extract_tasks("Call dentist tomorrow", now=NOW)
        assert tasks[0].title == "dentist"
        assert tasks[0].due_date == NOW + timedelta(days=1)

    def test_first_matching_rule_wins(self):
        # Checkbox beats the imperative rule and the TODO marker inside it.
        tasks = extract_tasks("- [ ] TODO: Call mom")
        assert tasks[0].title == "TODO: Call mom"

    def test_ignores_plain_lines_and_short_lines(self):
        text = "Meeting notes\n\nWe discussed the roadmap.\nCall\nok"
        assert extract_tasks(text) == []

    def test_empty_text(self):
        assert extract_tasks("") == []

    def test_note_id_is_attached(self):
        tasks = extract_tasks("TODO: review PR", note_id="n1")
        assert tasks[0].note_id == "n1"

    def test_non_string_fails_fast(self):
        with pytest.raises(TypeError):
            extract_tasks(None)  # type: ignore[arg-type]

    def test_title_emptied_by_metadata_is_dropped(self):
        assert extract_tasks("TODO: tomorrow!!!") == []


class TestExtractMetadata:
    @pytest.mark.parametrize(
        "text, priority, title",
        [
            ("fix the build!!!", "high", "fix the build"),
            ("urgent fix the build", "high", "fix the build"),
            ("ASAP send slides", "high", "send slides"),
            ("fix the build!!", "medium", "fix the build"),
            ("important: renew lease", "medium", ": renew lease"),
            ("fix the build!", "low", "fix the build"),
            ("tidy desk when possible", "low", "tidy desk"),
            ("fix the build", "medium", "fix the build"),
        ],
    )
    def test_priority(self, text, priority, title):
        got_priority, _, got_title = extract_metadata(text, NOW)
        assert got_priority == priority
        assert got_title == title

    @pytest.mark.parametrize(
        "text, days, title",
        [
            ("submit report today", 0, "submit report"),
            ("submit report tomorrow", 1, "submit report"),
            ("plan offsite next week", 7, "plan offsite"),
            ("renew domain next month", 30, "renew domain"),
            ("ship release in 3 days", 3, "ship release"),
            ("ship release in 1 day", 1, "ship release"),
        ],
    )
    def test_relative_due_dates(self, text, days, title):
        _, due, got_title = extract_metadata(text, NOW)
        assert due == NOW + timedelta(days=days)
        assert got_title == title

    def test_first_due_date_pattern_wins(self):
        _, due, title = extract_metadata("today or next week", NOW)
        assert due == NOW
        assert title == "or next week"

    def test_explicit_date(self):
        # NOW is 2026-03-10 12:00 UTC; 3/15 midnight is 4.5 days away -> 5.
        _, due, title = extract_metadata("file taxes by 3/15", NOW)
        assert due == NOW + timedelta(days=5)
        assert title == "file taxes"

    def test_explicit_date_with_year(self):
        _, due, title = extract_metadata("renew visa before 1-10-27", NOW)
        expected_days = -(-(datetime(2027, 1, 10, tzinfo=timezone.utc) - NOW).total_seconds() // 86400)
        assert due == NOW + timedelta(days=expected_days)
        assert title == "renew visa"

    def test_invalid_explicit_date_gives_no_due_date(self):
        _, due, title = extract_metadata("pay rent due 13/45", NOW)
        assert due is None
        assert title == "pay rent due 13/45"

    def test_no_due_date(self):
        _, due, _ = extract_metadata("water the plants", NOW)
        assert due is None

    def test_trailing_punctuation_trimmed(self):
        _, _, title = extract_metadata("send the memo.", NOW)
        assert title == "send the memo"


class TestExtractFromNotes:
    def test_concatenates_per_note(self, make_note):
        a = make_note("a", "TODO: alpha task", note_id="a")
        b = make_note("b", "TODO: alpha task\nTODO: beta task", note_id="b")
        tasks = extract_from_notes([a, b], NOW)
        assert [(t.note_id, t.title) for t in tasks] == [
            ("a", "alpha task"),
            ("b", "alpha task"),
            ("b", "beta task"),
        ]
