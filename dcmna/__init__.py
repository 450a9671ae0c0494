"""dcmna - JAX-backed DC circuit solver using Modified Nodal Analysis.

Solves linear DC circuits of resistors and ideal voltage sources:
    - topology: arbitrary node labels -> dense indices, ground at 0
    - stamping: MNA matrix assembly
    - linalg: Gaussian elimination with partial pivoting
    - results: node voltages, source currents, per-component figures

Usage:
    from dcmna import Network, R, VSource
    from dcmna import simulate   # JSON payload in, JSON result out
"""

import jax

# MNA solves are done in double precision
jax.config.update("jax_enable_x64", True)

from .errors import CircuitError, InvalidTopology, SingularMatrix  # noqa: E402
from .circuit import (  # noqa: E402
    Circuit,
    Resistor,
    VoltageSource,
    ResistorEntry,
    VoltageSourceEntry,
    validate_circuit,
)
from .network import Network, Node, ComponentRef, ComponentSpec  # noqa: E402
from .components import R, VSource  # noqa: E402
from .subcircuits import Series, Parallel, Divider  # noqa: E402
from .topology import Element, NormalizedCircuit, normalize  # noqa: E402
from .stamping import MNASystem, assemble  # noqa: E402
from .linalg import LinearSolution, gaussian_solve  # noqa: E402
from .results import ComponentResult, Solution, project  # noqa: E402
from .solver import Solver, compile_network, simulate, solve_circuit  # noqa: E402

__version__ = "0.1.0"
__all__ = [
    # Errors
    "CircuitError",
    "InvalidTopology",
    "SingularMatrix",
    # Payload
    "Circuit",
    "Resistor",
    "VoltageSource",
    "ResistorEntry",
    "VoltageSourceEntry",
    "validate_circuit",
    # Network building
    "Network",
    "Node",
    "ComponentRef",
    "ComponentSpec",
    "R",
    "VSource",
    "Series",
    "Parallel",
    "Divider",
    # Normalization
    "Element",
    "NormalizedCircuit",
    "normalize",
    # Pipeline
    "MNASystem",
    "assemble",
    "LinearSolution",
    "gaussian_solve",
    "ComponentResult",
    "Solution",
    "project",
    "Solver",
    "compile_network",
    "simulate",
    "solve_circuit",
    "__version__",
]
