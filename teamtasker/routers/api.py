"""
JSON API for scripted access to the tracker.

Mirrors the page routes with the same validation and persistence rules.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_tracker
from ..metrics import track_task_operation
from ..models import (ClearCompletedResponse, ErrorResponse, MemberCreate,
                      MessageResponse, Task, TaskCompletedUpdate, TaskCreate,
                      TeamMember)
from ..tracker import ALL_MEMBERS, TeamTracker

router = APIRouter(prefix="/api", tags=["API"])

NOT_FOUND = {404: {"description": "Task not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Validation failed", "model": ErrorResponse}}


@router.get("/members", response_model=List[TeamMember], summary="List team members")
def list_members(tracker: TeamTracker = Depends(get_tracker)):
    return tracker.members


@router.post(
    "/members",
    response_model=TeamMember,
    status_code=status.HTTP_201_CREATED,
    responses=INVALID,
    summary="Add team member",
    name="add_member",
)
def create_member(
    payload: MemberCreate, tracker: TeamTracker = Depends(get_tracker)
):
    member = tracker.add_member(payload.name, payload.email, payload.role)
    track_task_operation("add_member", True)
    return member


@router.get(
    "/tasks",
    response_model=List[Task],
    responses=INVALID,
    summary="List tasks",
)
def list_tasks(
    selected: str = Query(
        default=ALL_MEMBERS,
        alias="filter",
        description="'all' or a member id",
    ),
    tracker: TeamTracker = Depends(get_tracker),
):
    """
    List tasks, optionally narrowed to one assignee.

    Tasks are returned with their stored field names (``assignedTo``).
    """
    return tracker.filter_tasks(selected)


@router.post(
    "/tasks",
    response_model=Task,
    status_code=status.HTTP_201_CREATED,
    responses=INVALID,
    summary="Add task",
    name="add_task",
)
def create_task(payload: TaskCreate, tracker: TeamTracker = Depends(get_tracker)):
    task = tracker.add_task(payload.description, payload.assigned_to)
    track_task_operation("add_task", True)
    return task


@router.post(
    "/tasks/clear-completed",
    response_model=ClearCompletedResponse,
    summary="Remove completed tasks",
)
def clear_completed(tracker: TeamTracker = Depends(get_tracker)):
    removed = tracker.clear_completed()
    track_task_operation("clear_completed", True)
    return ClearCompletedResponse(removed=removed)


@router.post(
    "/tasks/{task_id}/toggle",
    response_model=Task,
    responses=NOT_FOUND,
    summary="Toggle task completion",
)
def toggle_task(task_id: int, tracker: TeamTracker = Depends(get_tracker)):
    task = tracker.toggle_task(task_id)
    track_task_operation("toggle_task", True)
    return task


@router.patch(
    "/tasks/{task_id}",
    response_model=Task,
    responses=NOT_FOUND,
    summary="Set task completion",
    name="set_task_completed",
)
def update_task(
    task_id: int,
    payload: TaskCompletedUpdate,
    tracker: TeamTracker = Depends(get_tracker),
):
    task = tracker.set_task_completed(task_id, payload.completed)
    track_task_operation("set_task_completed", True)
    return task


@router.delete(
    "/tasks/{task_id}",
    response_model=MessageResponse,
    responses=NOT_FOUND,
    summary="Delete task",
)
def delete_task(task_id: int, tracker: TeamTracker = Depends(get_tracker)):
    tracker.delete_task(task_id)
    track_task_operation("delete_task", True)
    return MessageResponse(message=f"Task #{task_id} deleted")
