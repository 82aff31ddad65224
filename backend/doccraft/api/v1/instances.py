"""
Instance endpoints — create, show, update, delete, build history and
build trigger.

Requests name the acting user explicitly (`user_id`); authentication is
handled in front of this service.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.api.deps import get_acting_user, get_db
from doccraft.api.schemas.instances import (
    BuildHistoryResponse,
    BuildQueuedResponse,
    BuildRequest,
    InstanceCreateRequest,
    InstanceResponse,
    InstanceUpdateRequest,
)
from doccraft.core.logging import get_logger
from doccraft.repositories import build_histories as history_repository
from doccraft.repositories import content_types as content_type_repository
from doccraft.repositories import instances as instance_repository
from doccraft.repositories import states as state_repository

logger = get_logger(__name__)

router = APIRouter(tags=["Instances"])


def _not_found(what: str, identifier: object) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{what} {identifier} not found",
    )


# ─── Create ───────────────────────────────────────────────
@router.post(
    "/content-types/{content_type_uuid}/instances",
    response_model=InstanceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_instance(
    content_type_uuid: UUID,
    payload: InstanceCreateRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create an instance; its code is the next in the content type's sequence."""
    user = await get_acting_user(db, payload.user_id)

    content_type = await content_type_repository.get_content_type(db, content_type_uuid)
    if content_type is None:
        raise _not_found("Content type", content_type_uuid)

    state = None
    if payload.state_uuid is not None:
        state = await state_repository.get_state(db, payload.state_uuid)
        if state is None:
            raise _not_found("State", payload.state_uuid)

    instance = await instance_repository.create_instance(
        db,
        user,
        content_type,
        state=state,
        serialized=payload.serialized,
        raw=payload.raw,
    )
    return InstanceResponse.model_validate(instance)


# ─── Show ─────────────────────────────────────────────────
@router.get("/instances/{instance_uuid}", response_model=InstanceResponse)
async def show_instance(instance_uuid: UUID, db: AsyncSession = Depends(get_db)):
    """Instance detail; `build` points at the PDF once a build has succeeded."""
    instance = await instance_repository.show_instance(db, instance_uuid)
    if instance is None:
        raise _not_found("Instance", instance_uuid)
    return InstanceResponse.model_validate(instance)


# ─── Update ───────────────────────────────────────────────
@router.patch("/instances/{instance_uuid}", response_model=InstanceResponse)
async def update_instance(
    instance_uuid: UUID,
    payload: InstanceUpdateRequest,
    db: AsyncSession = Depends(get_db),
):
    try:
        instance = await instance_repository.update_instance(
            db,
            instance_uuid,
            serialized=payload.serialized,
            raw=payload.raw,
            state_uuid=payload.state_uuid,
        )
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    if instance is None:
        raise _not_found("Instance", instance_uuid)
    return InstanceResponse.model_validate(instance)


# ─── Delete ───────────────────────────────────────────────
@router.delete("/instances/{instance_uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_instance(instance_uuid: UUID, db: AsyncSession = Depends(get_db)) -> Response:
    """Delete an instance and its build history.  The workspace on disk is kept."""
    if not await instance_repository.delete_instance(db, instance_uuid):
        raise _not_found("Instance", instance_uuid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Build history ────────────────────────────────────────
@router.get("/instances/{instance_uuid}/history", response_model=list[BuildHistoryResponse])
async def list_build_history(
    instance_uuid: UUID,
    limit: int = 50,
    offset: int = 0,
    db: AsyncSession = Depends(get_db),
):
    """Build attempts, newest first."""
    instance = await instance_repository.get_instance(db, instance_uuid)
    if instance is None:
        raise _not_found("Instance", instance_uuid)
    rows = await history_repository.list_build_history(db, instance, offset=offset, limit=limit)
    return [BuildHistoryResponse.model_validate(row) for row in rows]


# ─── Trigger build ────────────────────────────────────────
@router.post(
    "/instances/{instance_uuid}/build",
    response_model=BuildQueuedResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def trigger_build(
    instance_uuid: UUID,
    payload: BuildRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Queue a build of the instance.

    The worker records a BuildHistory row when the renderer exits; poll
    the history or the instance's `build` field for the result.
    """
    from doccraft.tasks.build_tasks import build_instance

    user = await get_acting_user(db, payload.user_id)
    instance = await instance_repository.get_instance(db, instance_uuid)
    if instance is None:
        raise _not_found("Instance", instance_uuid)

    task = build_instance.delay(str(instance.uuid), user.id)
    logger.info(
        "Build queued",
        instance_code=instance.instance_id,
        user_id=user.id,
        celery_task_id=task.id,
    )
    return BuildQueuedResponse(instance_uuid=instance.uuid, celery_task_id=task.id)
