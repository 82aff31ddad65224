"""Instance and build request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from doccraft.core.constants import BuildStatus


class InstanceCreateRequest(BaseModel):
    """Request payload for creating an instance under a content type."""

    user_id: int = Field(..., ge=1)
    serialized: dict[str, Any] = Field(default_factory=dict)
    raw: str = ""
    state_uuid: UUID | None = None


class InstanceUpdateRequest(BaseModel):
    """Partial update; omitted fields are left alone."""

    serialized: dict[str, Any] | None = None
    raw: str | None = None
    state_uuid: UUID | None = None


class InstanceResponse(BaseModel):
    """An instance as shown to clients.  `build` is set once a build succeeded."""

    model_config = ConfigDict(from_attributes=True)

    uuid: UUID
    instance_id: str
    serialized: dict[str, Any]
    raw: str
    created_at: datetime
    updated_at: datetime
    build: str | None = None


class BuildRequest(BaseModel):
    user_id: int = Field(..., ge=1)


class BuildQueuedResponse(BaseModel):
    message: str = "Build queued"
    instance_uuid: UUID
    celery_task_id: str


class BuildHistoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    creator_id: int
    start_time: datetime
    end_time: datetime
    delay: int = Field(..., description="Build duration in milliseconds")
    exit_code: int
    status: BuildStatus
    inserted_at: datetime
