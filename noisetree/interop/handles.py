"""
Opaque integer handles for composition trees.

Drivers outside the process (or outside Python) hold integers instead
of object references.  Each handle packs a slot index with the slot's
generation, so a handle issued before a release never reaches the tree
that later reuses the slot.
"""

import logging
import threading
from typing import List, Optional

from ..engine import CompositionTree
from ..errors import StaleHandleError

logger = logging.getLogger(__name__)

SLOT_BITS = 20
SLOT_MASK = (1 << SLOT_BITS) - 1


class TreeHandleTable:
    """Slot table mapping handles to live trees."""

    def __init__(self):
        self._trees: List[Optional[CompositionTree]] = []
        self._generations: List[int] = []
        self._free: List[int] = []
        self._lock = threading.Lock()

    @staticmethod
    def _pack(slot: int, generation: int) -> int:
        return (generation << SLOT_BITS) | slot

    @staticmethod
    def _unpack(handle: int):
        return handle & SLOT_MASK, handle >> SLOT_BITS

    def insert(self, tree: CompositionTree) -> int:
        """Store `tree` and return its handle."""

        with self._lock:
            if self._free:
                slot = self._free.pop()
                self._trees[slot] = tree
            else:
                slot = len(self._trees)
                if slot > SLOT_MASK:
                    raise MemoryError(f"Tree handle table is full ({slot} live trees)")
                self._trees.append(tree)
                self._generations.append(0)

            handle = self._pack(slot, self._generations[slot])
        logger.debug("Issued tree handle %d (slot %d)", handle, slot)
        return handle

    def _resolve_slot(self, handle: int) -> int:
        if handle < 0:
            raise StaleHandleError(f"Invalid tree handle: {handle}")

        slot, generation = self._unpack(handle)
        if (
            slot >= len(self._trees)
            or self._trees[slot] is None
            or self._generations[slot] != generation
        ):
            raise StaleHandleError(f"Tree handle {handle} was released or never issued")
        return slot

    def get(self, handle: int) -> CompositionTree:
        return self._trees[self._resolve_slot(handle)]

    def release(self, handle: int) -> CompositionTree:
        """Drop the tree behind `handle`; the handle is stale afterwards."""

        with self._lock:
            slot = self._resolve_slot(handle)
            tree = self._trees[slot]
            self._trees[slot] = None
            self._generations[slot] += 1
            self._free.append(slot)
        logger.debug("Released tree handle %d (slot %d)", handle, slot)
        return tree

    def __contains__(self, handle: int) -> bool:
        try:
            self._resolve_slot(handle)
        except StaleHandleError:
            return False
        return True

    def __len__(self) -> int:
        return len(self._trees) - len(self._free)
