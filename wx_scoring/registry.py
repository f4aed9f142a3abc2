"""
Per-cohort cache of online learner states.

A cohort is brand x category x geographic granularity. States are created
lazily and replaced atomically on update; an optional ``max_entries`` bound
evicts the least recently used cohort.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from .online import OnlineState, init_online, update_online

logger = logging.getLogger(__name__)

DEFAULT_GEO = "default"


def cohort_key(brand_key: str, category: str, geo_key: Optional[str] = None) -> str:
    return f"{brand_key}::{category}::{geo_key or DEFAULT_GEO}"


class OnlineStateRegistry:
    """Thread-safe get-or-create store of OnlineState keyed by cohort."""

    def __init__(self, dim: int, lam: float = 5.0, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.dim = dim
        self.lam = lam
        self.max_entries = max_entries
        self._states: "OrderedDict[str, OnlineState]" = OrderedDict()
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._states

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._states)

    def get(self, key: str) -> Optional[OnlineState]:
        with self._lock:
            state = self._states.get(key)
            if state is not None:
                self._states.move_to_end(key)
            return state

    def get_or_create(self, key: str) -> OnlineState:
        with self._lock:
            state = self.get(key)
            if state is None:
                state = init_online(self.dim, self.lam)
                self._put(key, state)
                logger.debug(f"Created online state for cohort {key}")
            return state

    def update(self, key: str, x: np.ndarray, reward: float) -> OnlineState:
        """Fold one observation into a cohort; matrix and vector change together."""
        with self._lock:
            new_state = update_online(self.get_or_create(key), x, reward)
            self._put(key, new_state)
            return new_state

    def evict(self, key: str) -> bool:
        with self._lock:
            return self._states.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._states.clear()

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Plain-Python copy of every cohort state."""
        with self._lock:
            return {
                key: {
                    "a": state.a.tolist(),
                    "b": state.b.tolist(),
                    "lam": state.lam,
                    "n_updates": state.n_updates,
                }
                for key, state in self._states.items()
            }

    def restore(self, snapshot: Mapping[str, Mapping[str, Any]]) -> None:
        """Replace all cohort states with those from ``snapshot``."""
        restored = OrderedDict()
        for key, raw in snapshot.items():
            a = np.array(raw["a"], dtype=float)
            b = np.array(raw["b"], dtype=float)
            if a.shape != (self.dim, self.dim) or b.shape != (self.dim,):
                raise ValueError(f"Snapshot for {key} does not match dimension {self.dim}")
            restored[key] = OnlineState(
                a=a, b=b, lam=float(raw["lam"]), n_updates=int(raw.get("n_updates", 0))
            )
        with self._lock:
            self._states = restored
            self._enforce_bound()

    def _put(self, key: str, state: OnlineState) -> None:
        self._states[key] = state
        self._states.move_to_end(key)
        self._enforce_bound()

    def _enforce_bound(self) -> None:
        if self.max_entries is None:
            return
        while len(self._states) > self.max_entries:
            evicted, _ = self._states.popitem(last=False)
            logger.warning(f"Evicted online state for cohort {evicted}")


__all__ = ["DEFAULT_GEO", "OnlineStateRegistry", "cohort_key"]
