"""
Mapping list controller.

Owns the in-memory list of saved mappings and the load state machine:

    IDLE -> LOADING -> READY(list)
                    -> ERROR(message)

READY and ERROR can go back to LOADING through reload(). Delete and select
are only accepted in READY. Every state change is pushed to subscribers as a
ControllerState snapshot; rendering is left to whoever subscribes.

Deletes are optimistic: the mapping leaves the list before storage answers.
On failure the list is left as is unless rollback is enabled
(settings.mapping_delete_rollback), in which case the mapping is put back.
"""

from typing import Callable, Iterable, Optional

import structlog

from config.settings import settings
from models.controller import ControllerState, ControllerStatus, NotificationKind
from models.mapping import MappingResponse, QuotaStatus
from services.mapping_store import MappingStore, get_mapping_store, sort_newest_first
from services.mapping_validator import MappingSelectionValidator
from services.notifier import LoggingNotifier, Notifier
from services.quota_policy import QuotaPolicy, get_quota_policy
from exceptions import InvalidStateError

logger = structlog.get_logger(__name__)

DELETE_SUCCESS_MESSAGE = "Mapping deleted successfully"
MISSING_CONTENT_MESSAGE = "No CSV content found for this mapping"

StateListener = Callable[[ControllerState], None]


def _error_message(error: Exception) -> str:
    """User-facing text for a failure."""
    return getattr(error, "message", None) or str(error) or type(error).__name__


class MappingListController:
    """
    Saved mappings list for one quota scope.

    Args:
        store: Where mappings are loaded from and soft-deleted
        notifier: Receives success/error notifications
        on_select: Called with a mapping the user picked, after validation
        quota: Quota policy (configured limit by default)
        validator: Selection gate
        rollback_on_delete_failure: Put a mapping back when its delete fails
    """

    def __init__(
        self,
        store: MappingStore,
        notifier: Notifier,
        on_select: Callable[[MappingResponse], None],
        quota: Optional[QuotaPolicy] = None,
        validator: Optional[MappingSelectionValidator] = None,
        rollback_on_delete_failure: Optional[bool] = None,
    ):
        self._store = store
        self._notifier = notifier
        self._on_select = on_select
        self._quota = quota or QuotaPolicy()
        self._validator = validator or MappingSelectionValidator()
        self._rollback = (
            settings.mapping_delete_rollback
            if rollback_on_delete_failure is None
            else rollback_on_delete_failure
        )

        self._state = ControllerState.idle()
        self._listeners: list[StateListener] = []
        self._alive = True
        self._load_generation = 0

    # ===================
    # STATE
    # ===================

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def status(self) -> ControllerStatus:
        return self._state.status

    @property
    def mappings(self) -> list[MappingResponse]:
        return list(self._state.mappings)

    @property
    def active_count(self) -> int:
        return len(self._state.mappings)

    @property
    def is_at_limit(self) -> bool:
        return self._quota.is_at_limit(self.active_count)

    @property
    def quota_status(self) -> QuotaStatus:
        return self._quota.status(self.active_count)

    @property
    def is_disposed(self) -> bool:
        return not self._alive

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register a state listener.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispose(self) -> None:
        """Tear down. Requests still in flight are ignored when they resolve."""
        self._alive = False
        self._listeners.clear()
        logger.debug("mapping_list_controller_disposed")

    def _set_state(self, state: ControllerState) -> None:
        if self.is_disposed:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _set_ready(self, mappings: Iterable[MappingResponse]) -> None:
        active = [m for m in mappings if not m.is_deleted]
        self._set_state(ControllerState.ready(sort_newest_first(active)))

    def _require(self, action: str, *allowed: ControllerStatus) -> None:
        if self.is_disposed or self.status not in allowed:
            current = "disposed" if self.is_disposed else self.status.value
            raise InvalidStateError(action, current, [s.value for s in allowed])

    def _notify(self, kind: NotificationKind, message: str) -> None:
        if self.is_disposed:
            return
        try:
            self._notifier.notify(kind, message)
        except Exception as e:
            logger.error("notification_failed", kind=kind.value, error=str(e))

    # ===================
    # LOADING
    # ===================

    async def start(self) -> None:
        """Initial load. Only valid once, from IDLE."""
        self._require("start", ControllerStatus.IDLE)
        await self._load()

    async def reload(self) -> None:
        """Load again after READY or ERROR (e.g. user-triggered retry)."""
        self._require("reload", ControllerStatus.READY, ControllerStatus.ERROR)
        await self._load()

    async def _load(self) -> None:
        self._load_generation += 1
        generation = self._load_generation
        self._set_state(ControllerState.loading())

        try:
            mappings = await self._store.load_active()
        except Exception as e:
            if not self._is_current_load(generation):
                return
            message = _error_message(e)
            logger.error(
                "mapping_list_load_failed",
                error=message,
                error_type=type(e).__name__
            )
            self._set_state(ControllerState.failed(message))
            self._notify(NotificationKind.ERROR, message)
            return

        if not self._is_current_load(generation):
            return

        self._set_ready(mappings)
        logger.info(
            "mapping_list_loaded",
            count=self.active_count,
            at_limit=self.is_at_limit
        )

    def _is_current_load(self, generation: int) -> bool:
        if self.is_disposed:
            logger.debug("late_load_ignored", reason="disposed")
            return False
        if generation != self._load_generation:
            logger.debug("late_load_ignored", reason="superseded")
            return False
        return True

    # ===================
    # ACTIONS
    # ===================

    async def request_delete(self, mapping_id: str) -> bool:
        """
        Soft-delete a mapping, removing it from the list right away.

        Returns:
            True if storage confirmed the delete
        """
        self._require("delete a mapping", ControllerStatus.READY)

        removed = [m for m in self._state.mappings if m.id == mapping_id]
        generation = self._load_generation
        self._set_ready(m for m in self._state.mappings if m.id != mapping_id)

        try:
            await self._store.soft_delete(mapping_id)
        except Exception as e:
            if self.is_disposed:
                return False
            message = _error_message(e)
            logger.error(
                "mapping_delete_failed",
                mapping_id=mapping_id,
                error=message,
                error_type=type(e).__name__,
                in_list=bool(removed)
            )
            if self._rollback and removed:
                self._restore(removed, generation)
            self._notify(NotificationKind.ERROR, message)
            return False

        logger.info("mapping_deleted", mapping_id=mapping_id)
        self._notify(NotificationKind.SUCCESS, DELETE_SUCCESS_MESSAGE)
        return True

    def _restore(self, removed: list[MappingResponse], generation: int) -> None:
        # A newer load already reflects storage; nothing to put back
        if generation != self._load_generation or self.status != ControllerStatus.READY:
            return
        present = {m.id for m in self._state.mappings}
        restored = [m for m in removed if m.id not in present]
        self._set_ready([*self._state.mappings, *restored])
        logger.info("mapping_delete_rolled_back", count=len(restored))

    def request_select(self, mapping: MappingResponse) -> bool:
        """
        Hand a mapping to on_select if it has CSV content.

        An exception from on_select is logged and sent as an error
        notification.

        Returns:
            True if on_select accepted the mapping
        """
        self._require("select a mapping", ControllerStatus.READY)

        result = self._validator.validate(mapping)
        if not result.accepted:
            logger.warning(
                "mapping_selection_rejected",
                mapping_id=mapping.id,
                reason=result.reason.value
            )
            self._notify(NotificationKind.ERROR, MISSING_CONTENT_MESSAGE)
            return False

        try:
            self._on_select(mapping)
        except Exception as e:
            message = _error_message(e)
            logger.error(
                "mapping_select_failed",
                mapping_id=mapping.id,
                error=message,
                error_type=type(e).__name__
            )
            self._notify(NotificationKind.ERROR, message)
            return False

        logger.info("mapping_selected", mapping_id=mapping.id)
        return True


def get_mapping_list_controller(
    on_select: Callable[[MappingResponse], None],
    notifier: Optional[Notifier] = None,
) -> MappingListController:
    """Build a controller over the shared store, logging notifications by default."""
    return MappingListController(
        store=get_mapping_store(),
        notifier=notifier if notifier is not None else LoggingNotifier(),
        on_select=on_select,
        quota=get_quota_policy(),
    )
