"""
Mapping list controller state and notification types.
"""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import FrozenSchema
from models.mapping import MappingResponse


class ControllerStatus(str, Enum):
    """Lifecycle of a mapping list controller."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ControllerState(FrozenSchema):
    """
    Snapshot emitted on every state change.

    mappings is only meaningful in READY; error only in ERROR.
    """

    status: ControllerStatus
    mappings: tuple[MappingResponse, ...] = Field(default_factory=tuple)
    error: Optional[str] = None

    @classmethod
    def idle(cls) -> "ControllerState":
        return cls(status=ControllerStatus.IDLE)

    @classmethod
    def loading(cls) -> "ControllerState":
        return cls(status=ControllerStatus.LOADING)

    @classmethod
    def ready(cls, mappings) -> "ControllerState":
        return cls(status=ControllerStatus.READY, mappings=tuple(mappings))

    @classmethod
    def failed(cls, message: str) -> "ControllerState":
        return cls(status=ControllerStatus.ERROR, error=message)


class NotificationKind(str, Enum):
    """Notification variant shown to the user."""
    SUCCESS = "success"
    ERROR = "error"


class Notification(FrozenSchema):
    """A single user-facing notification."""

    kind: NotificationKind
    message: str
