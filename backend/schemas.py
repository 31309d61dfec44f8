from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import Optional, List

from models import TaskStatus, TaskPriority
from time_utils import as_utc

# Largest id accepted from clients (32-bit INTEGER column)
MAX_ID = 2**31 - 1


class CamelModel(BaseModel):
    """Wire models use camelCase JSON keys and accept snake_case on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class InputModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _reject_null(value):
    # Patch fields are optional but, when sent, may not be null
    if value is None:
        raise ValueError("Field cannot be null")
    return value


# User schemas
class UserSummary(CamelModel):
    id: int
    name: str
    email: str


class User(UserSummary):
    role: str
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def stored_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# Project schemas
class ProjectBase(InputModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)


class ProjectCreate(ProjectBase):
    pass


class ProjectUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)

    @field_validator("title", "description")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)


class Project(CamelModel):
    id: int
    title: str
    description: str
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def stored_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class ProjectSummary(CamelModel):
    id: int
    title: str


# Task schemas
class TaskBase(InputModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_date: datetime

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, value: datetime) -> datetime:
        return as_utc(value)


class TaskCreate(TaskBase):
    project_id: int = Field(..., alias="project", ge=1, le=MAX_ID)


class TaskUpdate(InputModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[datetime] = None
    project_id: Optional[int] = Field(None, alias="project", ge=1, le=MAX_ID)

    @field_validator("title", "description", "status", "priority", "project_id")
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

    @field_validator("due_date")
    @classmethod
    def normalise_due_date(cls, value: Optional[datetime]) -> datetime:
        return as_utc(_reject_null(value))


class Task(CamelModel):
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime
    project_id: int
    owner_id: int
    project: Optional[ProjectSummary] = None
    owner: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def stored_as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive values; everything is stored in UTC
        return as_utc(value)


class TaskFilters(BaseModel):
    """Optional listing criteria; the owner is supplied separately and always applied."""

    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    project_id: Optional[int] = None
    due_before: Optional[datetime] = None
    due_after: Optional[datetime] = None
    search: Optional[str] = None

    @field_validator("due_before", "due_after")
    @classmethod
    def normalise_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# Dashboard schemas
class DashboardStats(CamelModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0
    high_priority: int = 0
    due_this_week: int = 0


class StatusCount(CamelModel):
    status: TaskStatus
    count: int


# Response envelopes
class ProjectResponse(BaseModel):
    success: bool = True
    data: Project


class ProjectListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Project]


class TaskResponse(BaseModel):
    success: bool = True
    data: Task


class TaskListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Task]


class DashboardStatsResponse(BaseModel):
    success: bool = True
    data: DashboardStats


class ProjectStatsResponse(BaseModel):
    success: bool = True
    data: List[StatusCount]


class DeletedResponse(BaseModel):
    success: bool = True
    data: dict = Field(default_factory=dict)
