"""
HTML page and HTMX fragment routes.

Every mutation re-renders the task list from scratch under the filter value
the page sends along with the request. Destructive actions are confirmed in
the browser through ``hx-confirm`` before the request is issued.
Handlers are plain functions so FastAPI runs them in its threadpool; saving
touches the disk.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse

from ..config import settings
from ..dependencies import get_tracker
from ..exceptions import ValidationException
from ..logging_config import get_logger
from ..metrics import track_page_view, track_task_operation, update_open_tasks
from ..rendering import page_context, templates
from ..tracker import ALL_MEMBERS, TeamTracker, parse_member_selector

logger = get_logger(__name__)

router = APIRouter(tags=["Pages"])


def parse_assignee(raw: Optional[str]) -> int:
    """
    Convert the assignee select value to a member id.

    An empty selection (no members yet) maps to 0, which renders as
    "Unassigned".

    Raises:
        ValidationException: If the value is not numeric
    """
    value = (raw or "").strip()
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        raise ValidationException(
            "assignee", raw, "Please choose an assignee from the list"
        ) from None


def _render_task_list(
    request: Request,
    tracker: TeamTracker,
    selected: Optional[str],
    headers: Optional[dict] = None,
) -> HTMLResponse:
    update_open_tasks(tracker.stats()["open"])
    return templates.TemplateResponse(
        request=request,
        name="components/task_list.html",
        context={**page_context(tracker, selected), "oob_summary": True},
        headers=headers,
    )


@router.get(
    "/",
    response_class=HTMLResponse,
    summary="Homepage",
    description="Team list, task list and the add/filter forms",
)
def homepage(
    request: Request,
    selected: str = Query(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    """
    Render the full tracker page.

    Args:
        request: FastAPI request object
        selected: Initial filter value ("all" or a member id)
        tracker: Tracker state

    Returns:
        Rendered HTML response
    """
    track_page_view("index")
    context = page_context(tracker, selected)
    context["app_name"] = settings.APP_NAME
    return templates.TemplateResponse(request=request, name="index.html", context=context)


@router.get("/tasks", response_class=HTMLResponse, summary="Task list fragment")
def task_list(
    request: Request,
    selected: str = Query(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    """Re-render the task list for a filter change or a team card click."""
    parse_member_selector(selected)
    return _render_task_list(request, tracker, selected)


@router.post("/tasks", response_class=HTMLResponse, summary="Add task")
def add_task(
    request: Request,
    description: str = Form(default=""),
    assignee: str = Form(default=""),
    selected: str = Form(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    task = tracker.add_task(description, parse_assignee(assignee))
    track_task_operation("add_task", True)
    logger.debug(f"Rendering task list after adding task #{task.id}")
    return _render_task_list(
        request, tracker, selected, headers={"HX-Trigger": "task-added"}
    )


@router.post("/tasks/{task_id}/toggle", response_class=HTMLResponse, summary="Toggle task")
def toggle_task(
    request: Request,
    task_id: int,
    selected: str = Form(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    tracker.toggle_task(task_id)
    track_task_operation("toggle_task", True)
    return _render_task_list(request, tracker, selected)


@router.post(
    "/tasks/{task_id}/completed",
    response_class=HTMLResponse,
    summary="Set task completion from checkbox",
)
def set_task_completed(
    request: Request,
    task_id: int,
    completed: bool = Form(default=False),
    selected: str = Form(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    """
    Apply the checkbox state.

    An unchecked checkbox is not submitted at all, so a missing
    ``completed`` field means the task is open.
    """
    tracker.set_task_completed(task_id, completed)
    track_task_operation("set_task_completed", True)
    return _render_task_list(request, tracker, selected)


@router.delete("/tasks/{task_id}", response_class=HTMLResponse, summary="Delete task")
def delete_task(
    request: Request,
    task_id: int,
    selected: str = Query(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    tracker.delete_task(task_id)
    track_task_operation("delete_task", True)
    return _render_task_list(request, tracker, selected)


@router.post(
    "/tasks/clear-completed",
    response_class=HTMLResponse,
    summary="Remove completed tasks",
)
def clear_completed(
    request: Request,
    selected: str = Form(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    removed = tracker.clear_completed()
    track_task_operation("clear_completed", True)
    logger.debug(f"Cleared {removed} completed tasks")
    return _render_task_list(request, tracker, selected)


@router.post("/members", response_class=HTMLResponse, summary="Add team member")
def add_member(
    request: Request,
    name: str = Form(default=""),
    email: str = Form(default=""),
    role: str = Form(default=""),
    selected: str = Form(default=ALL_MEMBERS, alias="filter"),
    tracker: TeamTracker = Depends(get_tracker),
) -> HTMLResponse:
    """
    Add a member and refresh every widget that lists members.

    The task list is the swap target; the team list and both selects are
    replaced out of band.
    """
    tracker.add_member(name, email, role)
    track_task_operation("add_member", True)
    return templates.TemplateResponse(
        request=request,
        name="components/member_added.html",
        context={
            **page_context(tracker, selected),
            "oob_summary": True,
            "oob": True,
        },
        headers={"HX-Trigger": "member-added"},
    )
