"""
Ridge-regularised linear bandit state (LinUCB-style).

A = lambda*I + sum(x x^T) and b = sum(x * reward) are sufficient statistics for
ridge regression; the coefficient vector is re-solved from them on demand.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

PIVOT_FLOOR = 1e-8
VARIANCE_FLOOR = 1e-8


@dataclass(frozen=True, eq=False)
class OnlineState:
    a: np.ndarray
    b: np.ndarray
    lam: float
    n_updates: int = 0

    @property
    def dim(self) -> int:
        return self.b.shape[0]


@dataclass(frozen=True)
class UCBScore:
    mean: float
    ucb: float
    variance: float


def init_online(dim: int, lam: float = 5.0) -> OnlineState:
    if dim < 1:
        raise ValueError(f"dim must be positive, got {dim}")
    return OnlineState(a=np.eye(dim) * lam, b=np.zeros(dim), lam=lam)


def solve_linear(a: np.ndarray, y: np.ndarray) -> np.ndarray:
    """
    Solve A x = y by Gauss-Jordan elimination with partial pivoting.

    Pivots smaller than PIVOT_FLOOR are replaced by the floor (sign kept),
    so singular systems return a finite, possibly inaccurate, answer.
    """
    n = y.shape[0]
    m = np.hstack([np.array(a, dtype=float), np.array(y, dtype=float).reshape(n, 1)])
    for i in range(n):
        pivot = i + int(np.argmax(np.abs(m[i:, i])))
        if pivot != i:
            m[[i, pivot]] = m[[pivot, i]]
        div = m[i, i]
        if abs(div) < PIVOT_FLOOR:
            div = PIVOT_FLOOR if div >= 0 else -PIVOT_FLOOR
        m[i, i:] /= div
        factors = m[:, i].copy()
        factors[i] = 0.0
        m[:, i:] -= np.outer(factors, m[i, i:])
    return m[:, n].copy()


def quad_form_inv(a: np.ndarray, x: np.ndarray) -> float:
    """x^T A^-1 x via one linear solve instead of an explicit inverse."""
    z = solve_linear(a, x)
    return float(np.dot(x, z))


def _check_context(state: OnlineState, x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    if x.shape != (state.dim,):
        raise ValueError(f"Context has shape {x.shape}, expected ({state.dim},)")
    return x


def theta(state: OnlineState) -> np.ndarray:
    return solve_linear(state.a, state.b)


def update_online(state: OnlineState, x: np.ndarray, reward: float) -> OnlineState:
    """Rank-1 update; returns a new state and leaves ``state`` untouched."""
    x = _check_context(state, x)
    return OnlineState(
        a=state.a + np.outer(x, x),
        b=state.b + x * reward,
        lam=state.lam,
        n_updates=state.n_updates + 1,
    )


def ucb_score(state: OnlineState, x: np.ndarray, alpha: float = 1.2) -> UCBScore:
    x = _check_context(state, x)
    mean = float(np.dot(theta(state), x))
    variance = max(VARIANCE_FLOOR, quad_form_inv(state.a, x))
    return UCBScore(mean=mean, ucb=mean + alpha * float(np.sqrt(variance)), variance=variance)


__all__ = [
    "OnlineState",
    "UCBScore",
    "init_online",
    "quad_form_inv",
    "solve_linear",
    "theta",
    "ucb_score",
    "update_online",
]
