"""
In-memory tracker state.

Holds the team member and task collections for the running process and
persists both after every mutation. All operations are linear scans over
small lists.
"""

import threading
from typing import Dict, Iterable, List, Optional, Protocol, Union

from .exceptions import TaskNotFoundException, ValidationException
from .logging_config import get_logger
from .models import Task, TeamMember
from .storage import KeyValueStore, load_data, save_data

logger = get_logger(__name__)

ALL_MEMBERS = "all"
UNASSIGNED = "Unassigned"

MemberSelector = Union[int, str, None]


class _HasId(Protocol):
    id: int


def generate_id(items: Iterable[_HasId]) -> int:
    """
    Allocate the next id for a collection.

    Returns 1 for an empty collection, otherwise one more than the largest
    id present. Ids freed by deleting the highest record are reused.
    """
    ids = [item.id for item in items]
    if not ids:
        return 1
    return max(ids) + 1


def parse_member_selector(selected: MemberSelector) -> Optional[int]:
    """
    Interpret a filter selection.

    Args:
        selected: "all", None, empty, or a member id as int or numeric string

    Returns:
        Member id to filter by, or None for no filtering

    Raises:
        ValidationException: If the selector is neither "all" nor numeric
    """
    if selected is None:
        return None
    if isinstance(selected, int):
        return selected

    value = selected.strip()
    if not value or value == ALL_MEMBERS:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationException(
            "filter", selected, "Filter must be 'all' or a member id"
        ) from None


class TeamTracker:
    """
    Team members and tasks for one tracker instance.

    Mutations build new collections and only install them once the store
    has accepted them, so a failed save leaves the in-memory state as it
    was. Mutations are serialized by a lock; readers see whole lists.

    Attributes:
        store: Key-value store the collections are persisted to
        members: Loaded team members, in creation order
        tasks: Loaded tasks, in creation order
    """

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self.members: List[TeamMember] = []
        self.tasks: List[Task] = []
        self._lock = threading.RLock()

    def load(self) -> None:
        """Replace in-memory state with what the store holds (or the seeds)."""
        with self._lock:
            self.members, self.tasks = load_data(self.store)
        logger.info(
            "Tracker state loaded",
            extra={
                "extra_fields": {
                    "storage": self.store.describe(),
                    "members": len(self.members),
                    "tasks": len(self.tasks),
                }
            },
        )

    def _commit(
        self,
        members: Optional[List[TeamMember]] = None,
        tasks: Optional[List[Task]] = None,
    ) -> None:
        """
        Persist the given collections, then make them current.

        Raises:
            StorageException: If the store rejects the write; state is unchanged
        """
        members = self.members if members is None else members
        tasks = self.tasks if tasks is None else tasks
        save_data(self.store, members, tasks)
        self.members, self.tasks = members, tasks

    # ---- lookups ----

    def find_member(self, member_id: MemberSelector) -> Optional[TeamMember]:
        try:
            wanted = int(member_id)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return next((m for m in self.members if m.id == wanted), None)

    def find_task(self, task_id: int) -> Task:
        """
        Look up a task by id.

        Raises:
            TaskNotFoundException: If no task has that id
        """
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundException(task_id)

    def assignee_name(self, task: Task) -> str:
        member = self.find_member(task.assigned_to)
        return member.name if member else UNASSIGNED

    def filter_tasks(self, selected: MemberSelector = ALL_MEMBERS) -> List[Task]:
        """
        Tasks visible under a filter selection.

        Args:
            selected: "all"/empty for every task, or a member id

        Returns:
            New list with exactly the tasks assigned to the selected member
        """
        member_id = parse_member_selector(selected)
        if member_id is None:
            return list(self.tasks)
        return [t for t in self.tasks if t.assigned_to == member_id]

    # ---- mutations ----

    def add_task(self, description: str, assigned_to: int) -> Task:
        """
        Create a task and persist.

        The assignee is not checked against the member list.

        Raises:
            ValidationException: If the description is blank
            StorageException: If the new state cannot be saved
        """
        description = (description or "").strip()
        if not description:
            raise ValidationException(
                "description", description, "Please enter a task description"
            )

        with self._lock:
            task = Task(
                id=generate_id(self.tasks),
                description=description,
                assigned_to=int(assigned_to),
                completed=False,
            )
            self._commit(tasks=[*self.tasks, task])
        logger.info(
            "Task added",
            extra={"extra_fields": {"task_id": task.id, "assigned_to": task.assigned_to}},
        )
        return task

    def add_member(self, name: str, email: str, role: str) -> TeamMember:
        """
        Create a team member and persist.

        Raises:
            ValidationException: If any field is blank
            StorageException: If the new state cannot be saved
        """
        fields: Dict[str, str] = {
            "name": (name or "").strip(),
            "email": (email or "").strip(),
            "role": (role or "").strip(),
        }
        missing = [key for key, value in fields.items() if not value]
        if missing:
            raise ValidationException(
                missing[0],
                "",
                "Please fill all member fields",
                {"missing": missing},
            )

        with self._lock:
            member = TeamMember(id=generate_id(self.members), **fields)
            self._commit(members=[*self.members, member])
        logger.info("Member added", extra={"extra_fields": {"member_id": member.id}})
        return member

    def _replace_task(self, task_id: int, completed: bool) -> Task:
        task = self.find_task(task_id)
        updated = task.model_copy(update={"completed": completed})
        self._commit(tasks=[updated if t.id == task_id else t for t in self.tasks])
        return updated

    def toggle_task(self, task_id: int) -> Task:
        with self._lock:
            task = self._replace_task(task_id, not self.find_task(task_id).completed)
        logger.info(
            "Task toggled",
            extra={"extra_fields": {"task_id": task_id, "completed": task.completed}},
        )
        return task

    def set_task_completed(self, task_id: int, completed: bool) -> Task:
        """Set the completion flag to an explicit value (checkbox semantics)."""
        with self._lock:
            task = self._replace_task(task_id, bool(completed))
        logger.info(
            "Task completion set",
            extra={"extra_fields": {"task_id": task_id, "completed": task.completed}},
        )
        return task

    def delete_task(self, task_id: int) -> Task:
        """
        Remove exactly the task with the given id.

        Returns:
            The removed task

        Raises:
            TaskNotFoundException: If no task has that id
        """
        with self._lock:
            task = self.find_task(task_id)
            self._commit(tasks=[t for t in self.tasks if t.id != task_id])
        logger.info("Task deleted", extra={"extra_fields": {"task_id": task_id}})
        return task

    def clear_completed(self) -> int:
        """
        Remove every completed task.

        Returns:
            Number of tasks removed
        """
        with self._lock:
            remaining = [t for t in self.tasks if not t.completed]
            removed = len(self.tasks) - len(remaining)
            self._commit(tasks=remaining)
        logger.info("Completed tasks cleared", extra={"extra_fields": {"removed": removed}})
        return removed

    def stats(self) -> Dict[str, int]:
        tasks = self.tasks
        completed = sum(1 for t in tasks if t.completed)
        return {
            "members": len(self.members),
            "tasks": len(tasks),
            "completed": completed,
            "open": len(tasks) - completed,
        }
