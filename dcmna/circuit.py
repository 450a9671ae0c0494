"""Normalized circuit payload (node 0 is ground, nodes are dense 0..node_count-1).

The payload is what the request handler receives as JSON:

    {
        "nodeCount": 2,
        "resistors": [{"n1": 1, "n2": 0, "value": 1000}],
        "voltageSources": [{"nPlus": 1, "nMinus": 0, "value": 10}],
        "resistorMap": {"r": {"compId": 7, "n1": 1, "n2": 0, "value": 1000}},
        "voltageSourceMap": {"v": {"compId": 3, "nPlus": 1, "nMinus": 0, "value": 10}}
    }

The two maps are reporting metadata only; they never influence the solve.
"""

from __future__ import annotations
import math
from typing import NamedTuple

from .errors import InvalidTopology


class Resistor(NamedTuple):
    """Two-terminal resistor, value in Ohms."""
    n1: int
    n2: int
    value: float


class VoltageSource(NamedTuple):
    """Ideal voltage source forcing V(n_plus) - V(n_minus) = value."""
    n_plus: int
    n_minus: int
    value: float


class ResistorEntry(NamedTuple):
    """Caller-side reporting record for a resistor."""
    comp_id: int
    n1: int
    n2: int
    value: float


class VoltageSourceEntry(NamedTuple):
    """Caller-side reporting record for a voltage source."""
    comp_id: int
    n_plus: int
    n_minus: int
    value: float


class Circuit(NamedTuple):
    """
    Immutable, already-normalized circuit.

    Unknown layout shared by the assembler and the projector:
        x[0 .. N-1]     non-ground node voltages (node k at x[k-1])
        x[N .. N+M-1]   voltage source branch currents
    """
    node_count: int
    resistors: tuple[Resistor, ...] = ()
    voltage_sources: tuple[VoltageSource, ...] = ()
    resistor_map: dict[str, ResistorEntry] | None = None
    voltage_source_map: dict[str, VoltageSourceEntry] | None = None

    @property
    def num_nodes(self) -> int:
        """Number of non-ground nodes (N)."""
        return self.node_count - 1

    @property
    def num_sources(self) -> int:
        """Number of voltage sources (M)."""
        return len(self.voltage_sources)

    @property
    def size(self) -> int:
        """Size of the MNA system (S = N + M)."""
        return self.num_nodes + self.num_sources

    @classmethod
    def from_json(cls, payload: dict) -> Circuit:
        """
        Parse and validate a camelCase JSON payload.

        Raises:
            InvalidTopology: on any malformed field or out-of-range terminal
        """
        if not isinstance(payload, dict):
            raise InvalidTopology("Circuit payload must be a JSON object", "payload")
        if "nodeCount" not in payload:
            raise InvalidTopology("Missing required field 'nodeCount'", "nodeCount")

        node_count = _integer(payload["nodeCount"], "nodeCount")
        resistors = tuple(
            Resistor(
                _integer(_field(r, "n1", ref), f"{ref}.n1"),
                _integer(_field(r, "n2", ref), f"{ref}.n2"),
                _number(_field(r, "value", ref), f"{ref}.value"),
            )
            for ref, r in _items(payload.get("resistors"), "resistors")
        )
        sources = tuple(
            VoltageSource(
                _integer(_field(v, "nPlus", ref), f"{ref}.nPlus"),
                _integer(_field(v, "nMinus", ref), f"{ref}.nMinus"),
                _number(_field(v, "value", ref), f"{ref}.value"),
            )
            for ref, v in _items(payload.get("voltageSources"), "voltageSources")
        )

        resistor_map = None
        if payload.get("resistorMap") is not None:
            resistor_map = {
                key: ResistorEntry(
                    _integer(_field(e, "compId", ref), f"{ref}.compId"),
                    _integer(_field(e, "n1", ref), f"{ref}.n1"),
                    _integer(_field(e, "n2", ref), f"{ref}.n2"),
                    _number(_field(e, "value", ref), f"{ref}.value"),
                )
                for key, ref, e in _entries(payload["resistorMap"], "resistorMap")
            }

        source_map = None
        if payload.get("voltageSourceMap") is not None:
            source_map = {
                key: VoltageSourceEntry(
                    _integer(_field(e, "compId", ref), f"{ref}.compId"),
                    _integer(_field(e, "nPlus", ref), f"{ref}.nPlus"),
                    _integer(_field(e, "nMinus", ref), f"{ref}.nMinus"),
                    _number(_field(e, "value", ref), f"{ref}.value"),
                )
                for key, ref, e in _entries(payload["voltageSourceMap"], "voltageSourceMap")
            }

        circuit = cls(node_count, resistors, sources, resistor_map, source_map)
        validate_circuit(circuit)
        return circuit


def validate_circuit(circuit: Circuit) -> None:
    """
    Reject a circuit that breaks the payload contract before anything is stamped.

    Zero-Ohm resistors are rejected here (infinite conductance cannot be
    stamped). Negative resistances are accepted as a linear model.

    Raises:
        InvalidTopology: naming the first offending reference
    """
    if circuit.node_count < 1:
        raise InvalidTopology(
            f"nodeCount must be >= 1 (ground is node 0), got {circuit.node_count}",
            "nodeCount",
        )

    for k, r in enumerate(circuit.resistors):
        ref = f"resistors[{k}]"
        _check_terminal(circuit, r.n1, f"{ref}.n1")
        _check_terminal(circuit, r.n2, f"{ref}.n2")
        _check_value(r.value, f"{ref}.value")
        if r.value == 0:
            raise InvalidTopology(f"{ref} has zero resistance (infinite conductance)", f"{ref}.value")

    for k, vs in enumerate(circuit.voltage_sources):
        ref = f"voltageSources[{k}]"
        _check_terminal(circuit, vs.n_plus, f"{ref}.nPlus")
        _check_terminal(circuit, vs.n_minus, f"{ref}.nMinus")
        _check_value(vs.value, f"{ref}.value")

    for key, e in (circuit.resistor_map or {}).items():
        ref = f"resistorMap[{key!r}]"
        _check_terminal(circuit, e.n1, f"{ref}.n1")
        _check_terminal(circuit, e.n2, f"{ref}.n2")
        _check_value(e.value, f"{ref}.value")
        if e.value == 0:
            raise InvalidTopology(f"{ref} has zero resistance", f"{ref}.value")

    for key, e in (circuit.voltage_source_map or {}).items():
        ref = f"voltageSourceMap[{key!r}]"
        _check_terminal(circuit, e.n_plus, f"{ref}.nPlus")
        _check_terminal(circuit, e.n_minus, f"{ref}.nMinus")
        _check_value(e.value, f"{ref}.value")


def floating_nodes(circuit: Circuit) -> list[int]:
    """
    Nodes with no resistor or source path to ground, in ascending order.

    Any such node leaves the MNA system without a unique solution.
    """
    neighbours: dict[int, set[int]] = {node: set() for node in range(circuit.node_count)}
    edges = [(r.n1, r.n2) for r in circuit.resistors]
    edges += [(vs.n_plus, vs.n_minus) for vs in circuit.voltage_sources]
    for a, b in edges:
        neighbours[a].add(b)
        neighbours[b].add(a)

    reached = {0}
    frontier = [0]
    while frontier:
        node = frontier.pop()
        for other in neighbours[node] - reached:
            reached.add(other)
            frontier.append(other)

    return [node for node in range(circuit.node_count) if node not in reached]


def _check_terminal(circuit: Circuit, node: int, ref: str) -> None:
    if not 0 <= node < circuit.node_count:
        raise InvalidTopology(
            f"{ref} references node {node}, outside [0, {circuit.node_count})", ref
        )


def _check_value(value: float, ref: str) -> None:
    if not math.isfinite(value):
        raise InvalidTopology(f"{ref} must be finite, got {value}", ref)


def _items(raw, name: str):
    """Yield (reference, entry) pairs of an optional JSON array."""
    if raw is None:
        return
    if not isinstance(raw, (list, tuple)):
        raise InvalidTopology(f"'{name}' must be an array", name)
    for k, entry in enumerate(raw):
        yield f"{name}[{k}]", entry


def _entries(raw, name: str):
    """Yield (key, reference, entry) triples of a JSON object, in insertion order."""
    if not isinstance(raw, dict):
        raise InvalidTopology(f"'{name}' must be an object", name)
    for key, entry in raw.items():
        yield key, f"{name}[{key!r}]", entry


def _field(entry, name: str, ref: str):
    if not isinstance(entry, dict):
        raise InvalidTopology(f"{ref} must be an object", ref)
    if name not in entry:
        raise InvalidTopology(f"{ref} is missing field '{name}'", f"{ref}.{name}")
    return entry[name]


def _integer(raw, ref: str) -> int:
    # bool is an int subclass; JSON true/false is never a node index
    if isinstance(raw, bool):
        raise InvalidTopology(f"{ref} must be an integer, got {raw!r}", ref)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    raise InvalidTopology(f"{ref} must be an integer, got {raw!r}", ref)


def _number(raw, ref: str) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidTopology(f"{ref} must be a number, got {raw!r}", ref)
    return float(raw)
