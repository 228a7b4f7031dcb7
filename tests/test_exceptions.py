"""
Tests for custom exception classes.

Tests all custom exception types to ensure proper initialization
and error message formatting.
"""

from teamtasker.exceptions import (
    StorageException,
    TaskNotFoundException,
    TeamTaskerException,
    ValidationException,
)


def test_base_exception_basic() -> None:
    exc = TeamTaskerException("Test error")

    assert exc.message == "Test error"
    assert exc.details == {}
    assert str(exc) == "Test error"
    assert exc.status_code == 500


def test_base_exception_with_details() -> None:
    details = {"code": "ERR001", "context": "test_context"}
    exc = TeamTaskerException("Test error", details=details)

    assert exc.details == details


def test_validation_exception() -> None:
    """
    Test ValidationException initialization.

    The user-facing reason doubles as the message shown in the alert.
    """
    exc = ValidationException("description", "", "Please enter a task description")

    assert exc.field_name == "description"
    assert exc.value == ""
    assert exc.reason == "Please enter a task description"
    assert exc.message == "Please enter a task description"
    assert exc.status_code == 400
    assert exc.error_code == "validation_error"
    assert isinstance(exc, TeamTaskerException)


def test_task_not_found_exception() -> None:
    exc = TaskNotFoundException(12)

    assert exc.task_id == 12
    assert exc.message == "Task #12 does not exist"
    assert exc.status_code == 404


def test_storage_exception() -> None:
    exc = StorageException("tt_tasks", "disk full", {"path": "/tmp/x.json"})

    assert exc.key == "tt_tasks"
    assert exc.reason == "disk full"
    assert exc.message == "Failed to persist 'tt_tasks': disk full"
    assert exc.details["path"] == "/tmp/x.json"
    assert exc.status_code == 500
