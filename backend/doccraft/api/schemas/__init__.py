"""API schema package."""

from doccraft.api.schemas.instances import (
    BuildHistoryResponse,
    BuildQueuedResponse,
    BuildRequest,
    InstanceCreateRequest,
    InstanceResponse,
    InstanceUpdateRequest,
)

__all__ = [
    "BuildHistoryResponse",
    "BuildQueuedResponse",
    "BuildRequest",
    "InstanceCreateRequest",
    "InstanceResponse",
    "InstanceUpdateRequest",
]
