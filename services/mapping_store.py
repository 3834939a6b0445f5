"""
Mapping store: persistence gateway for saved mappings.

Reads active mappings and soft-deletes them through a Supabase client.
The client is injected so tests and other callers can substitute their own.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from config.settings import settings
from models.mapping import MappingResponse, parse_timestamp
from exceptions import (
    AppError,
    MalformedMappingError,
    MappingNotFoundError,
    PersistenceError,
)

logger = structlog.get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def newest_first_key(mapping: MappingResponse) -> tuple[bool, datetime]:
    """Sort key: newest created_at first, blank or unparseable timestamps last."""
    parsed = parse_timestamp(mapping.created_at)
    if parsed is None:
        return (False, _OLDEST)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (True, parsed)


def sort_newest_first(mappings: list[MappingResponse]) -> list[MappingResponse]:
    return sorted(mappings, key=newest_first_key, reverse=True)


class MappingStore:
    """
    Saved mapping persistence.

    Every call re-reads from the client; nothing is cached here.
    """

    def __init__(self, client: Any, table: Optional[str] = None):
        self.db = client
        self.table = table or settings.mappings_table

    async def _execute(self, operation: str, build: Callable[[], Any]) -> Any:
        """
        Build and execute a query off the event loop.

        Raises:
            PersistenceError: If the client raises
        """
        try:
            return await asyncio.to_thread(lambda: build().execute())
        except AppError:
            raise
        except Exception as e:
            logger.error(
                "mapping_query_failed",
                table=self.table,
                operation=operation,
                error=str(e),
                error_type=type(e).__name__
            )
            raise PersistenceError(operation, str(e)) from e

    def _row_to_mapping(self, row: Any, operation: str = "select") -> MappingResponse:
        if not isinstance(row, dict):
            raise MalformedMappingError(
                operation,
                f"Expected a row object, got {type(row).__name__}"
            )
        try:
            return MappingResponse.model_validate(row)
        except PydanticValidationError as e:
            logger.warning(
                "malformed_mapping_row",
                mapping_id=row.get("id"),
                errors=e.error_count()
            )
            # Only strings go into details; they end up in JSON responses
            errors = [
                {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
                for err in e.errors(include_url=False, include_context=False)
            ]
            raise MalformedMappingError(
                operation,
                "Mapping row failed validation",
                details={"id": str(row.get("id")), "errors": errors}
            ) from e

    def _rows(self, response: Any, operation: str) -> list:
        data = getattr(response, "data", None)
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedMappingError(
                operation,
                f"Expected a list of rows, got {type(data).__name__}"
            )
        return data

    # ===================
    # READ OPERATIONS
    # ===================

    async def load_active(self) -> list[MappingResponse]:
        """
        Get every active mapping, newest first.

        Returns:
            List of active mappings ordered by created_at descending

        Raises:
            PersistenceError: Storage unreachable or returned malformed rows
        """
        logger.info("loading_active_mappings", table=self.table)

        response = await self._execute(
            "select",
            lambda: (
                self.db.table(self.table)
                .select("*")
                .eq("is_deleted", False)
                .order("created_at", desc=True)
            )
        )

        mappings = [self._row_to_mapping(row) for row in self._rows(response, "select")]
        active = sort_newest_first([m for m in mappings if not m.is_deleted])

        if len(active) != len(mappings):
            logger.warning(
                "deleted_mappings_filtered",
                dropped=len(mappings) - len(active)
            )

        logger.info("active_mappings_loaded", count=len(active))
        return active

    async def get(self, mapping_id: str) -> MappingResponse:
        """
        Get a single active mapping.

        Raises:
            MappingNotFoundError: No active mapping with that id
            PersistenceError: Storage failure
        """
        logger.debug("getting_mapping", mapping_id=mapping_id)

        response = await self._execute(
            "select",
            lambda: (
                self.db.table(self.table)
                .select("*")
                .eq("id", mapping_id)
                .eq("is_deleted", False)
                .limit(1)
            )
        )

        for row in self._rows(response, "select"):
            mapping = self._row_to_mapping(row)
            if mapping.id == mapping_id and not mapping.is_deleted:
                return mapping

        raise MappingNotFoundError(mapping_id)

    async def count_active(self) -> int:
        """Count active mappings without fetching their content."""
        response = await self._execute(
            "count",
            lambda: (
                self.db.table(self.table)
                .select("id", count="exact")
                .eq("is_deleted", False)
            )
        )
        count = getattr(response, "count", None)
        if count is None:
            count = len(self._rows(response, "count"))
        return count

    # ===================
    # WRITE OPERATIONS
    # ===================

    async def soft_delete(self, mapping_id: str) -> str:
        """
        Flag a mapping as deleted.

        Any non-empty update result counts as success. Returned rows are
        not validated.

        Args:
            mapping_id: Mapping UUID

        Returns:
            The id of the deleted mapping

        Raises:
            MappingNotFoundError: No mapping with that id
            PersistenceError: Storage failure
        """
        logger.info("soft_deleting_mapping", mapping_id=mapping_id)

        response = await self._execute(
            "update",
            lambda: (
                self.db.table(self.table)
                .update({"is_deleted": True})
                .eq("id", mapping_id)
            )
        )

        rows = self._rows(response, "update")
        if not rows:
            logger.warning("mapping_not_found_for_delete", mapping_id=mapping_id)
            raise MappingNotFoundError(mapping_id)

        logger.info("mapping_soft_deleted", mapping_id=mapping_id, rows=len(rows))
        return mapping_id


# Singleton instance
_store: Optional[MappingStore] = None


def get_mapping_store() -> MappingStore:
    """Get or create the MappingStore backed by the shared Supabase client."""
    global _store
    if _store is None:
        from config import get_supabase_client
        _store = MappingStore(get_supabase_client())
    return _store
