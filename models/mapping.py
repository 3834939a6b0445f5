"""
Saved mapping schemas.

A mapping is a saved (filename, field mapping, raw CSV) record that a user
can pick again later. Rows come from the mapping_history table.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from models.base import BaseSchema, FrozenSchema


_SCALAR_TYPES = (str, int, float, bool)


def parse_timestamp(value: str) -> Optional[datetime]:
    """
    Parse an ISO timestamp as returned by Supabase.

    Returns:
        datetime, or None for blank/unparseable input
    """
    if not value:
        return None
    try:
        # fromisoformat only accepts a trailing Z from 3.11 on
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


class MappingResponse(FrozenSchema):
    """Saved mapping as read from storage."""

    id: str = Field(..., min_length=1, description="Mapping UUID")
    original_filename: str = Field(..., description="Name of the uploaded file")
    mapping_config: dict[str, str] = Field(
        default_factory=dict,
        description="Source column -> target field"
    )
    created_at: str = Field("", description="Creation timestamp (ISO), blank if unknown")
    csv_content: str = Field("", description="Raw CSV the mapping was built from")
    is_deleted: bool = Field(False, description="Soft delete flag")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, (int, str)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("created_at", mode="before")
    @classmethod
    def default_created_at(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, datetime):
            return v.isoformat()
        return v

    @field_validator("csv_content", mode="before")
    @classmethod
    def default_csv_content(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("is_deleted", mode="before")
    @classmethod
    def default_is_deleted(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("mapping_config", mode="before")
    @classmethod
    def sanitize_mapping_config(cls, v: Any) -> dict[str, str]:
        """
        Accept only a flat object of scalars.

        Scalars are stringified, nulls become "", nested values are rejected.
        """
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("mapping_config must be an object")

        clean: dict[str, str] = {}
        for key, value in v.items():
            if value is None:
                clean[str(key)] = ""
            elif isinstance(value, _SCALAR_TYPES):
                clean[str(key)] = str(value)
            else:
                raise ValueError(
                    f"mapping_config[{key!r}] must be a scalar, got {type(value).__name__}"
                )
        return clean

    @property
    def created_date(self) -> Optional[date]:
        """Calendar date of creation, None when the timestamp is blank."""
        parsed = parse_timestamp(self.created_at)
        return parsed.date() if parsed else None


class RejectionReason(str, Enum):
    """Why a mapping cannot be handed to a consumer."""
    MISSING_CONTENT = "MissingContent"


class SelectionResult(FrozenSchema):
    """Outcome of validating a mapping before reuse."""

    accepted: bool
    reason: Optional[RejectionReason] = None

    @classmethod
    def ok(cls) -> "SelectionResult":
        return cls(accepted=True)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "SelectionResult":
        return cls(accepted=False, reason=reason)


class QuotaStatus(BaseSchema):
    """Saved mapping quota usage for display."""

    active_count: int = Field(..., ge=0, description="Active saved mappings")
    limit: int = Field(..., ge=1, description="Maximum active saved mappings")
    remaining: int = Field(..., ge=0, description="Saves left before the limit")
    at_limit: bool = Field(..., description="True when new saves must be blocked")
    label: str = Field(..., description="e.g. '2/3 files saved'")
    notice: Optional[str] = Field(None, description="Shown when at the limit")


class MappingListResponse(BaseSchema):
    """Active mappings, newest first, with quota usage."""

    data: list[MappingResponse]
    total: int
    quota: QuotaStatus


class MappingDeleteResponse(BaseSchema):
    """Result of a soft delete."""

    id: str
    is_deleted: bool = True
    message: str = "Mapping deleted successfully"
