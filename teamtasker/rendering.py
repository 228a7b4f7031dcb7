"""
View helpers for the HTML fragments.

Templates are re-rendered from scratch after every mutation; these helpers
turn tracker state into the rows and option lists the templates iterate.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from fastapi.templating import Jinja2Templates
from markupsafe import Markup

from .exceptions import ValidationException
from .models import Task
from .tracker import ALL_MEMBERS, MemberSelector, TeamTracker, parse_member_selector

EMPTY_LIST_MESSAGE = "No tasks to show"

BASE_PATH = Path(__file__).resolve().parent


def escape_html(value: Any) -> Markup:
    """
    Escape ``&``, ``<`` and ``>`` in user-supplied text.

    The result is marked safe so Jinja2 autoescaping does not escape it
    a second time.
    """
    text = str(value)
    text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
    return Markup(text)


@dataclass
class TaskRow:
    task: Task
    assignee_name: str

    @property
    def css_class(self) -> str:
        return "task-item completed" if self.task.completed else "task-item"


def build_task_rows(tracker: TeamTracker, selected: MemberSelector) -> List[TaskRow]:
    """
    Rows for the task list under a filter selection.

    Args:
        tracker: Tracker holding the collections
        selected: Current filter value ("all" or a member id)

    Returns:
        One row per visible task, in collection order
    """
    return [
        TaskRow(task=task, assignee_name=tracker.assignee_name(task))
        for task in tracker.filter_tasks(selected)
    ]


def resolve_filter_value(tracker: TeamTracker, selected: MemberSelector) -> str:
    """
    Filter value to keep selected after a re-render.

    Keeps the current selection when it names an existing member, otherwise
    falls back to "all".
    """
    try:
        member_id = parse_member_selector(selected)
    except ValidationException:
        return ALL_MEMBERS
    if member_id is None or tracker.find_member(member_id) is None:
        return ALL_MEMBERS
    return str(member_id)


def assignee_options(tracker: TeamTracker) -> List[Dict[str, str]]:
    return [
        {"value": str(m.id), "label": f"{m.name} — {m.role}"} for m in tracker.members
    ]


def filter_options(tracker: TeamTracker) -> List[Dict[str, str]]:
    options = [{"value": ALL_MEMBERS, "label": "All"}]
    options.extend({"value": str(m.id), "label": m.name} for m in tracker.members)
    return options


def page_context(tracker: TeamTracker, selected: MemberSelector) -> Dict[str, Any]:
    """
    Template context shared by the full page and the fragments.

    Rows follow the selection as given; the filter select falls back to
    "All" when the selection names no current member.
    """
    try:
        rows = build_task_rows(tracker, selected)
    except ValidationException:
        rows = build_task_rows(tracker, ALL_MEMBERS)
    current = resolve_filter_value(tracker, selected)
    return {
        "members": tracker.members,
        "rows": rows,
        "current_filter": current,
        "assignee_options": assignee_options(tracker),
        "filter_options": filter_options(tracker),
        "stats": tracker.stats(),
        "empty_message": EMPTY_LIST_MESSAGE,
    }


templates = Jinja2Templates(directory=str(BASE_PATH / "templates"))
templates.env.filters["escape_html"] = escape_html
