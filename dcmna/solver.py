"""DC operating-point solver: normalize -> assemble -> solve -> project.

Every call is a pure function of its input; nothing is cached between
solves, so concurrent requests need no coordination.
"""

from __future__ import annotations
import logging
import math
from typing import Callable, NamedTuple

from .circuit import Circuit, floating_nodes, validate_circuit
from .errors import SingularMatrix
from .linalg import gaussian_solve
from .results import Solution, project
from .stamping import assemble

logger = logging.getLogger(__name__)


def solve_circuit(circuit: Circuit) -> Solution:
    """
    Solve a normalized circuit.

    Raises:
        InvalidTopology: terminal out of range, bad node count or value
        SingularMatrix: the circuit has no unique DC solution
    """
    validate_circuit(circuit)

    # Rounding can leave a tiny non-zero pivot for a floating block, so
    # reachability from ground is checked on the graph first
    floating = floating_nodes(circuit)
    if floating:
        column = floating[0] - 1
        raise SingularMatrix(_singular_message(circuit, column), column=column)

    system = assemble(circuit)
    result = gaussian_solve(system.A, system.b)

    if not result.ok:
        raise SingularMatrix(
            _singular_message(circuit, result.singular_column),
            column=result.singular_column,
        )
    values = [float(v) for v in result.x]
    if not all(math.isfinite(v) for v in values):
        raise SingularMatrix("Solution is not finite (numerically singular system)")

    logger.info("Solved DC circuit: %d nodes, %d resistors, %d sources",
                circuit.node_count, len(circuit.resistors), circuit.num_sources)
    return project(result.x, circuit)


def simulate(payload: dict) -> dict:
    """
    JSON-in/JSON-out entry point used by the request handler and the CLI.

    Args:
        payload: camelCase circuit description

    Returns:
        {"voltages": ..., "sourceCurrents": ..., "componentResults": ...}

    Raises:
        InvalidTopology, SingularMatrix
    """
    circuit = Circuit.from_json(payload)
    return solve_circuit(circuit).to_json()


def _singular_message(circuit: Circuit, column: int | None) -> str:
    if column is None:
        return "Singular matrix / cannot solve"
    if column < circuit.num_nodes:
        what = f"node n{column + 1}"
    else:
        what = f"voltage source i_vs{column - circuit.num_nodes}"
    return (f"Singular matrix / cannot solve: no pivot for {what} "
            "(floating node or conflicting voltage sources)")


class Solver(NamedTuple):
    """
    Compiled DC solver for a Network.

    Contains functions to solve the circuit and query the solution.
    """
    network: object  # Network reference (for node lookups)
    solve: Callable  # (params) -> Solution
    v: Callable  # (solution, node) -> node voltage
    i: Callable  # (solution, component_ref) -> signed component current
    p: Callable  # (solution, component_ref) -> signed absorbed power
    defaults: dict  # {component_name: default_value}


def compile_network(network) -> Solver:
    """
    Compile a Network into DC solver functions.

    Args:
        network: Network with components

    Returns:
        Solver with solve, v, i, p functions
    """
    defaults = network.defaults()
    specs = {comp.name: comp for comp in network.components}

    # Resistors and sources keep declaration order when lowered to a Circuit
    resistor_slots = {}
    source_slots = {}
    for comp in network.components:
        if comp.kind == "R":
            resistor_slots[comp.name] = len(resistor_slots)
        elif comp.kind == "VSource":
            source_slots[comp.name] = len(source_slots)

    def solve(params: dict | None = None) -> Solution:
        """
        Solve the network.

        Args:
            params: component values by name (merged over defaults)
        """
        return solve_circuit(network.to_circuit(params))

    def v(solution: Solution, node) -> float:
        """Voltage at a node (ground is 0)."""
        return solution.node_voltage(node.index)

    def i(solution: Solution, component_ref) -> float:
        """
        Current through a component.

        Resistors: from first to second terminal.
        Sources: MNA branch current, from positive terminal through the source.
        """
        comp = _spec(component_ref)
        if comp.kind == "VSource":
            return solution.source_current(source_slots[comp.name])
        n_a, n_b = comp.nodes
        resistance = _value(solution, comp)
        return (solution.node_voltage(n_a) - solution.node_voltage(n_b)) / resistance

    def p(solution: Solution, component_ref) -> float:
        """Power absorbed by a component (negative for a source delivering power)."""
        comp = _spec(component_ref)
        n_a, n_b = comp.nodes
        return (solution.node_voltage(n_a) - solution.node_voltage(n_b)) * i(solution, component_ref)

    def _spec(component_ref):
        if component_ref.name not in specs:
            raise ValueError(f"Component {component_ref.name} not found")
        return specs[component_ref.name]

    def _value(solution: Solution, comp) -> float:
        if solution.circuit is None:
            raise ValueError("Solution does not carry its circuit")
        return solution.circuit.resistors[resistor_slots[comp.name]].value

    return Solver(
        network=network,
        solve=solve,
        v=v,
        i=i,
        p=p,
        defaults=defaults,
    )
