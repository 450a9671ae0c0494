"""Dense linear solve by Gaussian elimination with partial pivoting.

Singularity is an expected outcome (floating nodes, redundant sources),
so gaussian_solve reports it in its return value instead of raising.
"""

from __future__ import annotations
import logging
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

logger = logging.getLogger(__name__)


class LinearSolution(NamedTuple):
    """Outcome of a linear solve."""
    x: Array | None  # (S,) unknowns, None when singular
    singular_column: int | None = None  # elimination column with no non-zero pivot

    @property
    def ok(self) -> bool:
        return self.x is not None


def gaussian_solve(A: Array, b: Array) -> LinearSolution:
    """
    Solve A @ x = b for dense square A.

    Pivots are chosen by largest absolute value in the pivot column
    (first such row on ties). A pivot magnitude of exactly 0 marks the
    system as singular.

    Args:
        A: (S, S) matrix
        b: (S,) right-hand side

    Returns:
        LinearSolution; x is None and singular_column is set on failure
    """
    A = jnp.asarray(A, dtype=jnp.float64)
    b = jnp.asarray(b, dtype=jnp.float64)
    S = A.shape[0]
    if A.shape != (S, S) or b.shape != (S,):
        raise ValueError(f"Expected square A and matching b, got {A.shape} and {b.shape}")

    if S == 0:
        return LinearSolution(x=jnp.zeros(0, dtype=jnp.float64))

    # Augmented matrix [A | b]
    M = jnp.concatenate([A, b[:, None]], axis=1)

    for k in range(S):
        column = jnp.abs(M[k:, k])
        offset = int(jnp.argmax(column))
        if float(column[offset]) == 0.0:
            logger.debug("No non-zero pivot in column %d of %d", k, S)
            return LinearSolution(x=None, singular_column=k)

        p = k + offset
        if p != k:
            logger.debug("Pivot swap: row %d <-> row %d", k, p)
            M = M.at[jnp.array([k, p])].set(M[jnp.array([p, k])])

        if k + 1 < S:
            factors = M[k + 1:, k] / M[k, k]
            M = M.at[k + 1:, k:].add(-factors[:, None] * M[k, k:])

    x = jnp.zeros(S, dtype=jnp.float64)
    for i in range(S - 1, -1, -1):
        s = M[i, S] - jnp.dot(M[i, i + 1:S], x[i + 1:])
        x = x.at[i].set(s / M[i, i])

    return LinearSolution(x=x)
