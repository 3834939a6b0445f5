"""
Pydantic models for validation and serialization.
"""

from models.base import (
    BaseSchema,
    FrozenSchema,
)
from models.mapping import (
    MappingResponse,
    MappingListResponse,
    MappingDeleteResponse,
    QuotaStatus,
    RejectionReason,
    SelectionResult,
)
from models.controller import (
    ControllerStatus,
    ControllerState,
    Notification,
    NotificationKind,
)

__all__ = [
    # Base
    "BaseSchema",
    "FrozenSchema",

    # Mappings
    "MappingResponse",
    "MappingListResponse",
    "MappingDeleteResponse",
    "QuotaStatus",
    "RejectionReason",
    "SelectionResult",

    # Controller
    "ControllerStatus",
    "ControllerState",
    "Notification",
    "NotificationKind",
]
