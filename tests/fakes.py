"""
In-memory collaborators for controller tests.
"""

import asyncio
from typing import Optional

from exceptions import MappingNotFoundError
from services.mapping_store import sort_newest_first


class FakeMappingStore:
    """
    In-memory async MappingStore.

    gate, when set, holds load_active()/soft_delete() until released.
    """

    def __init__(self, mappings: list = None):
        self.mappings = list(mappings or [])
        self.load_error: Optional[Exception] = None
        self.delete_error: Optional[Exception] = None
        self.load_gate: Optional[asyncio.Event] = None
        self.delete_gate: Optional[asyncio.Event] = None
        self.load_calls = 0
        self.deleted_ids: list[str] = []

    async def load_active(self):
        self.load_calls += 1
        if self.load_gate is not None:
            await self.load_gate.wait()
        if self.load_error is not None:
            raise self.load_error

        return sort_newest_first([m for m in self.mappings if not m.is_deleted])

    async def soft_delete(self, mapping_id: str):
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if self.delete_error is not None:
            raise self.delete_error

        for index, mapping in enumerate(self.mappings):
            if mapping.id == mapping_id:
                self.mappings[index] = mapping.model_copy(update={"is_deleted": True})
                self.deleted_ids.append(mapping_id)
                return mapping_id
        raise MappingNotFoundError(mapping_id)
