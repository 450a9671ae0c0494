"""Project solved MNA unknowns back onto node labels and caller components."""

from __future__ import annotations
from typing import NamedTuple

from jax import Array

from .circuit import Circuit


class ComponentResult(NamedTuple):
    """Per-component figures. Voltage, current and power are magnitudes."""
    voltage: float
    current: float
    resistance: float
    power: float

    def to_json(self) -> dict:
        return self._asdict()


class Solution(NamedTuple):
    """Result of a DC solve."""
    voltages: dict[str, float]  # "n0".."n{nodeCount-1}", n0 == 0
    source_currents: dict[str, float]  # "i_vs{k}", signed MNA branch currents
    component_results: dict[str, ComponentResult]
    circuit: Circuit | None = None  # the circuit that was solved, not serialized

    def node_voltage(self, node: int) -> float:
        return self.voltages[f"n{node}"]

    def source_current(self, k: int) -> float:
        return self.source_currents[f"i_vs{k}"]

    def to_json(self) -> dict:
        return {
            "voltages": dict(self.voltages),
            "sourceCurrents": dict(self.source_currents),
            "componentResults": {
                key: result.to_json() for key, result in self.component_results.items()
            },
        }


def project(x: Array, circuit: Circuit) -> Solution:
    """
    Map the unknown vector onto named voltages, source currents and,
    when the caller supplied reporting maps, per-component results.

    Args:
        x: (N + M,) solved unknowns
        circuit: the circuit x was solved for

    Returns:
        Solution
    """
    N = circuit.num_nodes
    values = [float(v) for v in x]

    voltages = {"n0": 0.0}
    for node in range(1, circuit.node_count):
        voltages[f"n{node}"] = values[node - 1]

    source_currents = {
        f"i_vs{k}": values[N + k] for k in range(circuit.num_sources)
    }

    component_results = component_report(voltages, source_currents, circuit)
    return Solution(voltages, source_currents, component_results, circuit)


def component_report(voltages: dict[str, float], source_currents: dict[str, float],
                     circuit: Circuit) -> dict[str, ComponentResult]:
    """
    Per-component magnitudes keyed "resistor_{compId}" / "voltage_{compId}".

    The k-th voltageSourceMap entry (insertion order) reports branch
    current i_vs{k}; surplus entries report 0.
    """
    results: dict[str, ComponentResult] = {}

    for entry in (circuit.resistor_map or {}).values():
        v_drop = voltages[f"n{entry.n1}"] - voltages[f"n{entry.n2}"]
        current = v_drop / entry.value
        results[f"resistor_{entry.comp_id}"] = _magnitudes(v_drop, current, entry.value)

    for k, entry in enumerate((circuit.voltage_source_map or {}).values()):
        v_drop = voltages[f"n{entry.n_plus}"] - voltages[f"n{entry.n_minus}"]
        current = source_currents.get(f"i_vs{k}", 0.0)
        # Ideal source: no internal resistance
        results[f"voltage_{entry.comp_id}"] = _magnitudes(v_drop, current, 0.0)

    return results


def _magnitudes(v_drop: float, current: float, resistance: float) -> ComponentResult:
    voltage = abs(v_drop)
    current = abs(current)
    return ComponentResult(
        voltage=voltage,
        current=current,
        resistance=resistance,
        power=voltage * current,
    )
