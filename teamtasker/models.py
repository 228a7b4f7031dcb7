"""Pydantic models for persisted records and API request/response validation."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TeamMember(BaseModel):
    """A person record tasks can be assigned to."""

    id: int
    name: str
    email: str
    role: str


class Task(BaseModel):
    """
    A unit of work with an assignee and a completion flag.

    ``assigned_to`` is serialized as ``assignedTo`` and is not checked
    against the member list; dangling references render as "Unassigned".
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    description: str
    assigned_to: int = Field(..., alias="assignedTo")
    completed: bool = False


MemberList = TypeAdapter(List[TeamMember])
TaskList = TypeAdapter(List[Task])


class MemberCreate(BaseModel):
    """Request model for adding a team member."""

    name: str = ""
    email: str = ""
    role: str = ""


class TaskCreate(BaseModel):
    """Request model for adding a task."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = ""
    assigned_to: int = Field(..., alias="assignedTo")


class TaskCompletedUpdate(BaseModel):
    """Request model for setting a task's completion flag."""

    completed: bool


class ClearCompletedResponse(BaseModel):
    removed: int


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response model."""

    detail: str
    error_code: Optional[str] = None
    field: Optional[str] = None
