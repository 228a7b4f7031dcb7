"""
Tests for tracker state: id allocation, filtering and mutations.
"""

import pytest

from teamtasker.exceptions import (StorageException, TaskNotFoundException,
                                   ValidationException)
from teamtasker.models import Task, TeamMember
from teamtasker.storage import JsonFileStore
from teamtasker.tracker import (UNASSIGNED, TeamTracker, generate_id,
                                parse_member_selector)


def _reloaded(tracker: TeamTracker) -> TeamTracker:
    """A second tracker reading the same store."""
    fresh = TeamTracker(tracker.store)
    fresh.load()
    return fresh


class TestGenerateId:
    def test_empty_collection(self):
        assert generate_id([]) == 1

    def test_max_plus_one(self):
        tasks = [
            Task(id=3, description="a", assigned_to=1),
            Task(id=7, description="b", assigned_to=1),
        ]
        assert generate_id(tasks) == 8

    def test_unordered_ids(self):
        members = [
            TeamMember(id=5, name="a", email="a@x", role="r"),
            TeamMember(id=2, name="b", email="b@x", role="r"),
        ]
        assert generate_id(members) == 6

    def test_highest_id_reused_after_delete(self, tracker):
        tracker.delete_task(3)
        assert generate_id(tracker.tasks) == 3


class TestParseMemberSelector:
    @pytest.mark.parametrize("selected", ["all", "", "  ", None])
    def test_no_filter(self, selected):
        assert parse_member_selector(selected) is None

    def test_numeric(self):
        assert parse_member_selector("2") == 2
        assert parse_member_selector(3) == 3

    def test_rejects_garbage(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_member_selector("bob")
        assert exc_info.value.field_name == "filter"


class TestFilterTasks:
    def test_all_returns_every_task(self, tracker):
        assert [t.id for t in tracker.filter_tasks("all")] == [1, 2, 3]

    def test_member_filter_returns_matching_subset(self, tracker):
        tracker.add_task("Second bug", 1)
        tracker.add_task("Mockups", 2)

        selected = tracker.filter_tasks("1")

        assert [t.id for t in selected] == [1, 4]
        assert all(t.assigned_to == 1 for t in selected)

    def test_filter_by_int(self, tracker):
        assert [t.id for t in tracker.filter_tasks(2)] == [2]

    def test_unknown_member_yields_nothing(self, tracker):
        assert tracker.filter_tasks("42") == []

    def test_returns_a_copy(self, tracker):
        listed = tracker.filter_tasks()
        listed.clear()
        assert len(tracker.tasks) == 3


class TestLookups:
    def test_find_member_accepts_strings(self, tracker):
        assert tracker.find_member("2").name == "Bob Smith"
        assert tracker.find_member("nope") is None
        assert tracker.find_member(None) is None

    def test_assignee_name_for_dangling_reference(self, tracker):
        task = tracker.add_task("Orphan", 99)
        assert tracker.assignee_name(task) == UNASSIGNED
        assert tracker.assignee_name(tracker.tasks[0]) == "Alice Johnson"


class TestAddTask:
    def test_adds_open_task_and_persists(self, tracker):
        task = tracker.add_task("  Update docs  ", 3)

        assert task.id == 4
        assert task.description == "Update docs"
        assert task.assigned_to == 3
        assert task.completed is False
        assert _reloaded(tracker).tasks[-1] == task

    def test_blank_description_rejected(self, tracker):
        with pytest.raises(ValidationException) as exc_info:
            tracker.add_task("   ", 1)

        assert exc_info.value.message == "Please enter a task description"
        assert len(tracker.tasks) == 3

    def test_assignee_not_validated(self, tracker):
        assert tracker.add_task("Anything", 1234).assigned_to == 1234


class TestAddMember:
    def test_adds_member_and_persists(self, tracker):
        member = tracker.add_member(" Dana ", "dana@example.com", "PM")

        assert member.id == 4
        assert member.name == "Dana"
        assert _reloaded(tracker).members[-1] == member

    @pytest.mark.parametrize(
        "name,email,role",
        [("", "e@x", "r"), ("n", " ", "r"), ("n", "e@x", "")],
    )
    def test_any_blank_field_rejected(self, tracker, name, email, role):
        with pytest.raises(ValidationException) as exc_info:
            tracker.add_member(name, email, role)

        assert exc_info.value.message == "Please fill all member fields"
        assert len(tracker.members) == 3


class TestToggleTask:
    def test_flips_and_persists(self, tracker):
        assert tracker.toggle_task(1).completed is True
        assert _reloaded(tracker).tasks[0].completed is True

        assert tracker.toggle_task(1).completed is False
        assert _reloaded(tracker).tasks[0].completed is False

    def test_unknown_task(self, tracker):
        with pytest.raises(TaskNotFoundException) as exc_info:
            tracker.toggle_task(99)
        assert exc_info.value.task_id == 99

    def test_set_completed_is_idempotent(self, tracker):
        tracker.set_task_completed(2, True)
        assert tracker.tasks[1].completed is True

        tracker.set_task_completed(2, False)
        assert _reloaded(tracker).tasks[1].completed is False


class TestDeleteTask:
    def test_removes_exactly_one(self, tracker):
        removed = tracker.delete_task(2)

        assert removed.id == 2
        assert [t.id for t in tracker.tasks] == [1, 3]
        assert [t.id for t in _reloaded(tracker).tasks] == [1, 3]

    def test_unknown_task_leaves_list_untouched(self, tracker):
        with pytest.raises(TaskNotFoundException):
            tracker.delete_task(42)
        assert [t.id for t in tracker.tasks] == [1, 2, 3]


class TestClearCompleted:
    def test_removes_all_and_only_completed(self, tracker):
        tracker.toggle_task(3)

        removed = tracker.clear_completed()

        assert removed == 2
        assert [t.id for t in tracker.tasks] == [1]
        assert [t.id for t in _reloaded(tracker).tasks] == [1]

    def test_nothing_completed(self, tracker):
        tracker.toggle_task(2)
        assert tracker.clear_completed() == 0
        assert len(tracker.tasks) == 3

class TestFailedSave:
    """A rejected write leaves the in-memory state untouched."""

    def test_add_task(self, read_only_tracker):
        with pytest.raises(StorageException):
            read_only_tracker.add_task("Never persisted", 1)
        assert [t.id for t in read_only_tracker.tasks] == [1, 2, 3]

    def test_add_member(self, read_only_tracker):
        with pytest.raises(StorageException):
            read_only_tracker.add_member("Dana", "dana@example.com", "PM")
        assert len(read_only_tracker.members) == 3

    def test_toggle_and_set_completed(self, read_only_tracker):
        with pytest.raises(StorageException):
            read_only_tracker.toggle_task(1)
        with pytest.raises(StorageException):
            read_only_tracker.set_task_completed(2, False)

        assert [t.completed for t in read_only_tracker.tasks] == [False, True, False]

    def test_delete_and_clear_completed(self, read_only_tracker):
        with pytest.raises(StorageException):
            read_only_tracker.delete_task(1)
        with pytest.raises(StorageException):
            read_only_tracker.clear_completed()

        assert [t.id for t in read_only_tracker.tasks] == [1, 2, 3]

    def test_file_store_that_cannot_be_written(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.mkdir()
        tracker = TeamTracker(JsonFileStore(blocker))
        tracker.load()

        with pytest.raises(StorageException):
            tracker.add_task("Never persisted", 1)
        with pytest.raises(StorageException):
            tracker.toggle_task(1)

        assert [t.id for t in tracker.tasks] == [1, 2, 3]
        assert tracker.tasks[0].completed is False
        assert [p.name for p in tmp_path.iterdir()] == ["blocker"]



def test_stats(tracker):
    assert tracker.stats() == {"members": 3, "tasks": 3, "completed": 1, "open": 2}


def test_load_replaces_state(tracker):
    tracker.tasks.clear()
    tracker.load()
    # Nothing was saved, so the store still holds nothing and seeds come back.
    assert len(tracker.tasks) == 3
