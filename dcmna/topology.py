"""Topology normalization: arbitrary node labels -> dense indices with ground at 0.

A schematic editor names nodes however it likes ("GND", "out", 17, ...).
The solver only understands node indices 0..node_count-1 with 0 as the
reference. Ground is chosen by, in order:
    1. the explicit `ground` argument
    2. every node whose label is a ground alias ("0", "gnd", "ground")
    3. the first node encountered
Remaining nodes are numbered 1.. in order of first appearance.

Labels are compared as stripped strings, so 17, "17" and " 17" are one node.
"""

from __future__ import annotations
import logging
from typing import Hashable, Iterable, NamedTuple

from .circuit import (
    Circuit,
    Resistor,
    ResistorEntry,
    VoltageSource,
    VoltageSourceEntry,
    validate_circuit,
)
from .errors import InvalidTopology, SingularMatrix
from .results import Solution
from .solver import solve_circuit

logger = logging.getLogger(__name__)

GROUND_ALIASES = frozenset({"0", "gnd", "ground"})
DEFAULT_GROUND = "0"

_KINDS = {
    "r": "R",
    "resistor": "R",
    "v": "V",
    "vsource": "V",
    "voltage": "V",
}


class Element(NamedTuple):
    """A two-terminal element with caller-defined node labels."""
    kind: str  # "R" or "V" (aliases accepted, case-insensitive)
    name: str
    n1: Hashable  # first terminal / positive terminal (str or int)
    n2: Hashable  # second terminal / negative terminal
    value: float


class NormalizedCircuit(NamedTuple):
    """A Circuit plus the label bookkeeping needed to report results by name."""
    circuit: Circuit
    node_labels: tuple[str, ...]  # node_labels[i] is the label of node i
    resistor_names: tuple[str, ...]
    source_names: tuple[str, ...]

    @property
    def node_index(self) -> dict[str, int]:
        return {label: i for i, label in enumerate(self.node_labels)}

    def solve(self) -> Solution:
        """
        Solve the circuit, naming the caller's node or source when it is singular.

        Raises:
            SingularMatrix: column as reported by the solver
        """
        try:
            return solve_circuit(self.circuit)
        except SingularMatrix as exc:
            if exc.column is None:
                raise
            if exc.column < self.circuit.num_nodes:
                what = f"node '{self.node_labels[exc.column + 1]}'"
            else:
                what = f"voltage source '{self.source_names[exc.column - self.circuit.num_nodes]}'"
            raise SingularMatrix(
                f"Singular matrix / cannot solve: no pivot for {what} "
                "(floating node or conflicting voltage sources)",
                column=exc.column,
            ) from exc

    def relabel(self, solution: Solution) -> dict:
        """Render a solution keyed by the caller's node and component names."""
        voltages = {
            label: solution.voltages[f"n{i}"] for i, label in enumerate(self.node_labels)
        }
        source_currents = {
            name: solution.source_currents[f"i_vs{k}"] for k, name in enumerate(self.source_names)
        }
        component_results = {}
        for k, name in enumerate(self.resistor_names):
            component_results[name] = solution.component_results[f"resistor_{k}"].to_json()
        for k, name in enumerate(self.source_names):
            component_results[name] = solution.component_results[f"voltage_{k}"].to_json()
        return {
            "ground": self.node_labels[0],
            "voltages": voltages,
            "sourceCurrents": source_currents,
            "componentResults": component_results,
        }


def is_ground_alias(label: Hashable) -> bool:
    return str(label).strip().lower() in GROUND_ALIASES


def normalize(elements: Iterable[Element], ground: Hashable | None = None) -> NormalizedCircuit:
    """
    Build a normalized Circuit from labelled elements.

    Resistor and source reporting maps are filled in, keyed by element
    name with compId equal to the element's position within its kind.

    Args:
        elements: two-terminal elements with arbitrary hashable node labels
        ground: label of the reference node (optional)

    Returns:
        NormalizedCircuit

    Raises:
        InvalidTopology: unknown element kind, duplicate name, bad value, empty label
    """
    elements = [_canonical(e, k) for k, e in enumerate(elements)]

    if ground is None:
        labels = [label for e in elements for label in (e.n1, e.n2)]
        aliases = [label for label in labels if is_ground_alias(label)]
        if aliases:
            ground = aliases[0]
        elif labels:
            ground = labels[0]
        else:
            ground = DEFAULT_GROUND
        merge_aliases = True
    else:
        ground = _label(ground, "ground")
        merge_aliases = False

    index: dict[str, int] = {ground: 0}
    node_labels: list[str] = [ground]

    def node_of(label: str) -> int:
        if merge_aliases and is_ground_alias(label):
            return 0
        if label not in index:
            index[label] = len(node_labels)
            node_labels.append(label)
        return index[label]

    resistors, sources = [], []
    resistor_map, source_map = {}, {}
    names = set()
    for e in elements:
        if e.name in names:
            raise InvalidTopology(f"Duplicate component name '{e.name}'", e.name)
        names.add(e.name)
        a, b = node_of(e.n1), node_of(e.n2)
        if e.kind == "R":
            resistor_map[e.name] = ResistorEntry(len(resistors), a, b, e.value)
            resistors.append(Resistor(a, b, e.value))
        else:
            source_map[e.name] = VoltageSourceEntry(len(sources), a, b, e.value)
            sources.append(VoltageSource(a, b, e.value))

    circuit = Circuit(
        node_count=len(node_labels),
        resistors=tuple(resistors),
        voltage_sources=tuple(sources),
        resistor_map=resistor_map,
        voltage_source_map=source_map,
    )
    validate_circuit(circuit)
    logger.debug("Normalized %d elements onto %d nodes (ground %r)",
                 len(elements), circuit.node_count, ground)

    return NormalizedCircuit(
        circuit=circuit,
        node_labels=tuple(node_labels),
        resistor_names=tuple(resistor_map),
        source_names=tuple(source_map),
    )


def _canonical(e: Element, position: int) -> Element:
    kind = _KINDS.get(str(e.kind).strip().lower())
    if kind is None:
        raise InvalidTopology(
            f"Element '{e.name}' has unsupported type {e.kind!r} (expected R or V)",
            f"components[{position}].type",
        )
    try:
        value = float(e.value)
    except (TypeError, ValueError):
        raise InvalidTopology(
            f"Element '{e.name}' has non-numeric value {e.value!r}",
            f"components[{position}].value",
        ) from None
    return e._replace(
        kind=kind,
        n1=_label(e.n1, f"components[{position}].n1"),
        n2=_label(e.n2, f"components[{position}].n2"),
        value=value,
    )


def _label(raw: Hashable, ref: str) -> str:
    label = str(raw).strip()
    if not label:
        raise InvalidTopology(f"{ref} is an empty node label", ref)
    return label
