"""
Tagged readings that record whether a value came from real input or a fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Computed:
    value: float


@dataclass(frozen=True)
class Defaulted:
    value: float
    reason: str


Reading = Union[Computed, Defaulted]


def is_defaulted(reading: Reading) -> bool:
    return isinstance(reading, Defaulted)


__all__ = ["Computed", "Defaulted", "Reading", "is_defaulted"]
