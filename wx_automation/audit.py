"""
In-memory audit trail of automated budget changes.
"""

from __future__ import annotations

from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Deque, List, Tuple

import pandas as pd


@dataclass(frozen=True)
class AuditEntry:
    time: datetime
    category: str
    action: str
    multiplier: float
    confidence: float
    staged: Tuple[float, ...] = ()


class AuditLog:
    """Newest-first log that keeps at most ``capacity`` entries."""

    def __init__(self, capacity: int = 100):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: Deque[AuditEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, entry: AuditEntry) -> None:
        self._entries.appendleft(entry)

    def recent(self, limit: int = 10) -> List[AuditEntry]:
        return list(self._entries)[:limit]

    def to_frame(self) -> pd.DataFrame:
        columns = ["time", "category", "action", "multiplier", "confidence", "staged"]
        return pd.DataFrame([asdict(entry) for entry in self._entries], columns=columns)


__all__ = ["AuditEntry", "AuditLog"]
