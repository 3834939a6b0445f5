"""
Business logic services.

Saved mapping lifecycle: storage, quota, selection gate and list controller.
"""

from services.mapping_store import MappingStore, get_mapping_store, sort_newest_first
from services.quota_policy import QuotaPolicy, get_quota_policy
from services.mapping_validator import MappingSelectionValidator
from services.notifier import Notifier, LoggingNotifier, RecordingNotifier
from services.mapping_list_controller import MappingListController, get_mapping_list_controller

__all__ = [
    "MappingStore",
    "get_mapping_store",
    "sort_newest_first",
    "QuotaPolicy",
    "get_quota_policy",
    "MappingSelectionValidator",
    "Notifier",
    "LoggingNotifier",
    "RecordingNotifier",
    "MappingListController",
    "get_mapping_list_controller",
]
