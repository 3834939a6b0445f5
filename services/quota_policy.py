"""
Saved mapping quota.

Display-only: storage does not reject saves over the limit, callers use
is_at_limit() to block the save action.
"""

from typing import Optional

from config.settings import settings
from models.mapping import QuotaStatus
from exceptions.errors import ValidationError


LIMIT_NOTICE = (
    "You have reached the maximum limit of {limit} saved files. "
    "Delete an existing file to save a new one."
)


class QuotaPolicy:
    """Pure quota arithmetic over an active mapping count."""

    def __init__(self, limit: Optional[int] = None):
        self.limit = settings.mapping_quota_limit if limit is None else limit
        if self.limit < 1:
            raise ValidationError(
                code="INVALID_QUOTA_LIMIT",
                message="Quota limit must be at least 1",
                details={"limit": self.limit}
            )

    def _check(self, active_count: int) -> None:
        if active_count < 0:
            raise ValidationError(
                code="INVALID_ACTIVE_COUNT",
                message="Active count cannot be negative",
                details={"active_count": active_count}
            )

    def is_at_limit(self, active_count: int) -> bool:
        self._check(active_count)
        return active_count >= self.limit

    def remaining(self, active_count: int) -> int:
        self._check(active_count)
        return max(0, self.limit - active_count)

    def usage_label(self, active_count: int) -> str:
        """e.g. '2/3 files saved'."""
        self._check(active_count)
        return f"{active_count}/{self.limit} files saved"

    def status(self, active_count: int) -> QuotaStatus:
        """Everything a UI needs to render quota usage."""
        at_limit = self.is_at_limit(active_count)
        return QuotaStatus(
            active_count=active_count,
            limit=self.limit,
            remaining=self.remaining(active_count),
            at_limit=at_limit,
            label=self.usage_label(active_count),
            notice=LIMIT_NOTICE.format(limit=self.limit) if at_limit else None,
        )


def get_quota_policy() -> QuotaPolicy:
    """QuotaPolicy with the configured limit."""
    return QuotaPolicy()
