"""MNA matrix assembly for linear DC circuits.

Builds A (S x S) and b (S,) such that A @ x = b encodes KCL at every
non-ground node plus one branch equation per voltage source:

    [ G   B ] [ v ]   [ 0 ]
    [ B^T 0 ] [ j ] = [ E ]

G is the nodal conductance block, B the source incidence block and E the
source voltages. Ground (node 0) has no row or column.
"""

from __future__ import annotations
import logging
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array

from .circuit import Circuit

logger = logging.getLogger(__name__)


class MNASystem(NamedTuple):
    """Assembled linear system A @ x = b."""
    A: Array  # (S, S)
    b: Array  # (S,)
    num_nodes: int  # N, non-ground nodes
    num_sources: int  # M, voltage sources

    @property
    def size(self) -> int:
        return self.num_nodes + self.num_sources


def assemble(circuit: Circuit) -> MNASystem:
    """
    Stamp every component of an already-validated circuit.

    Resistors are stamped before voltage sources, each group in input order.

    Args:
        circuit: normalized circuit (terminals already checked)

    Returns:
        MNASystem with float64 A and b
    """
    N = circuit.num_nodes
    M = circuit.num_sources
    S = N + M

    A = jnp.zeros((S, S), dtype=jnp.float64)
    b = jnp.zeros(S, dtype=jnp.float64)

    for r in circuit.resistors:
        A = _stamp_conductance(A, r.n1, r.n2, 1.0 / r.value)

    for k, vs in enumerate(circuit.voltage_sources):
        A, b = _stamp_voltage_source(A, b, N + k, vs.n_plus, vs.n_minus, vs.value)

    logger.debug("Assembled MNA system: %d nodes, %d sources, size %d", N, M, S)
    return MNASystem(A=A, b=b, num_nodes=N, num_sources=M)


def _stamp_conductance(A: Array, n1: int, n2: int, g: float) -> Array:
    """Stamp conductance g between nodes n1 and n2 (0 = ground, skipped)."""
    if n1 > 0:
        A = A.at[n1 - 1, n1 - 1].add(g)
    if n2 > 0:
        A = A.at[n2 - 1, n2 - 1].add(g)
    if n1 > 0 and n2 > 0:
        A = A.at[n1 - 1, n2 - 1].add(-g)
        A = A.at[n2 - 1, n1 - 1].add(-g)
    return A


def _stamp_voltage_source(A: Array, b: Array, row: int, n_plus: int, n_minus: int,
                          value: float) -> tuple[Array, Array]:
    """
    Stamp an ideal voltage source occupying extra row/column `row`.

    Row `row` reads V(n_plus) - V(n_minus) = value; column `row` injects
    the branch current into the KCL rows of its terminals.
    """
    if n_plus > 0:
        A = A.at[n_plus - 1, row].add(1.0)
        A = A.at[row, n_plus - 1].add(1.0)
    if n_minus > 0:
        A = A.at[n_minus - 1, row].add(-1.0)
        A = A.at[row, n_minus - 1].add(-1.0)
    b = b.at[row].set(value)
    return A, b
