"""
Selection gate for saved mappings.

A mapping is only handed to a consumer when it still carries CSV content.
"""

from typing import Any

import structlog

from models.mapping import RejectionReason, SelectionResult
from exceptions import MissingContentError

logger = structlog.get_logger(__name__)


class MappingSelectionValidator:
    """Checks a mapping is usable before reuse."""

    def validate(self, mapping: Any) -> SelectionResult:
        """
        Reject mappings whose csv_content is missing or empty.

        Args:
            mapping: Mapping to check (anything with a csv_content attribute)

        Returns:
            SelectionResult.ok() or SelectionResult.rejected(MISSING_CONTENT)
        """
        content = getattr(mapping, "csv_content", None)
        if content is None or content == "":
            logger.warning(
                "mapping_missing_content",
                mapping_id=getattr(mapping, "id", None)
            )
            return SelectionResult.rejected(RejectionReason.MISSING_CONTENT)
        return SelectionResult.ok()

    def ensure_valid(self, mapping: Any) -> None:
        """
        Raises:
            MissingContentError: If validate() rejects the mapping
        """
        result = self.validate(mapping)
        if not result.accepted:
            raise MissingContentError(str(getattr(mapping, "id", "")))
