"""
Saved mappings API routes.

List active mappings with quota usage, pick one for reuse, soft-delete one.
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog

from models.mapping import (
    MappingResponse,
    MappingListResponse,
    MappingDeleteResponse,
    QuotaStatus,
)
from services.mapping_store import get_mapping_store
from services.mapping_validator import MappingSelectionValidator
from services.quota_policy import get_quota_policy
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.get("", response_model=MappingListResponse)
async def list_mappings():
    """
    List active saved mappings, newest first.

    Includes quota usage so the client can block further saves.
    """
    try:
        mappings = await get_mapping_store().load_active()

        return MappingListResponse(
            data=mappings,
            total=len(mappings),
            quota=get_quota_policy().status(len(mappings))
        )

    except Exception as e:
        return handle_error(e)


@router.get("/quota", response_model=QuotaStatus)
async def get_quota():
    """Quota usage only (no mapping content)."""
    try:
        count = await get_mapping_store().count_active()
        return get_quota_policy().status(count)

    except Exception as e:
        return handle_error(e)


@router.post("/{mapping_id}/select", response_model=MappingResponse)
async def select_mapping(mapping_id: str):
    """
    Return a mapping for reuse.

    Raises:
        404: Mapping not found or deleted
        422: Mapping has no CSV content
    """
    try:
        mapping = await get_mapping_store().get(mapping_id)
        MappingSelectionValidator().ensure_valid(mapping)

        logger.info("mapping_selected", mapping_id=mapping_id)
        return mapping

    except Exception as e:
        return handle_error(e)


@router.delete("/{mapping_id}", response_model=MappingDeleteResponse)
async def delete_mapping(mapping_id: str):
    """
    Soft-delete a mapping, freeing one quota slot.

    Raises:
        404: Mapping not found
    """
    try:
        deleted_id = await get_mapping_store().soft_delete(mapping_id)
        return MappingDeleteResponse(id=deleted_id)

    except Exception as e:
        return handle_error(e)
