# FILE: services/pending_actions.py
"""
Per-owner, single-slot store for staged cart/wishlist changes.

States per owner: absent | pending(action).
- propose replaces whatever is there (last write wins)
- every read checks staleness; a stale slot is purged and reads as absent
- nothing sweeps in the background, and nothing survives a restart
"""

import logging
import time
from threading import Lock
from typing import Callable, Dict, Optional

from config import PENDING_ACTION_TTL_SECONDS
from models.pending_action import PendingAction, PendingLookup

logger = logging.getLogger("pending_actions")


class PendingActionStore:
    def __init__(
        self,
        ttl_seconds: float = PENDING_ACTION_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._slots: Dict[str, PendingAction] = {}
        self._lock = Lock()

    def now(self) -> float:
        return self._clock()

    def is_stale(self, action: PendingAction) -> bool:
        return self.now() - action.created_at > self.ttl_seconds

    # -----------------------------
    # Slot access (lock held)
    # -----------------------------
    def _lookup(self, owner_id: str, remove: bool) -> PendingLookup:
        action = self._slots.get(owner_id)
        if action is None:
            return PendingLookup()

        if self.is_stale(action):
            del self._slots[owner_id]
            logger.info(f"[PENDING_EXPIRED] owner={owner_id}, type={action.type.value}")
            return PendingLookup(expired=True)

        if remove:
            del self._slots[owner_id]
        return PendingLookup(action=action)

    # -----------------------------
    # Public API
    # -----------------------------
    def has(self, owner_id: str) -> bool:
        return self.get(owner_id) is not None

    def get(self, owner_id: str) -> Optional[PendingAction]:
        with self._lock:
            return self._lookup(owner_id, remove=False).action

    def propose(self, owner_id: str, action: PendingAction) -> None:
        with self._lock:
            replaced = self._slots.get(owner_id)
            self._slots[owner_id] = action
        if replaced is not None:
            logger.info(f"[PENDING_REPLACED] owner={owner_id}, old={replaced.type.value}, new={action.type.value}")

    def take(self, owner_id: str) -> PendingLookup:
        """Read and remove in one step, so a staged action runs at most once."""
        with self._lock:
            return self._lookup(owner_id, remove=True)

    def clear(self, owner_id: str) -> Optional[PendingAction]:
        """Drop the slot; returns the live action that was there, if any."""
        with self._lock:
            return self._lookup(owner_id, remove=True).action

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)
