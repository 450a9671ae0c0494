"""Network and Node classes for circuit topology (immutable/functional style)."""

from __future__ import annotations
from typing import NamedTuple, TYPE_CHECKING

from .circuit import Circuit, Resistor, VoltageSource
from .errors import InvalidTopology

if TYPE_CHECKING:
    from .solver import Solver


class Node(NamedTuple):
    """A node in the circuit (electrical connection point)."""
    name: str
    index: int  # index in the MNA matrix (0 = ground)


class ComponentRef(NamedTuple):
    """Reference to a component, used to query its current and power."""
    name: str
    kind: str  # "R" or "VSource"


class ComponentSpec(NamedTuple):
    """Specification for a component (topology and optional default value)."""
    name: str
    kind: str
    nodes: tuple[int, ...]  # node indices
    defaults: tuple[tuple[str, float], ...] = ()  # ((param_name, default_value), ...)


class Network(NamedTuple):
    """
    Immutable circuit network topology.

    Build using functional style:
        net = Network()
        net, n1 = net.node("n1")
        net, r1 = R(net, n1, net.gnd, name="R1", value=1000.0)
    """
    nodes: tuple[Node, ...] = (Node("gnd", 0),)
    components: tuple[ComponentSpec, ...] = ()

    @property
    def gnd(self) -> Node:
        """Ground node (reference, always 0V)."""
        return self.nodes[0]

    @property
    def num_nodes(self) -> int:
        """Number of non-ground nodes."""
        return len(self.nodes) - 1

    def node(self, name: str) -> tuple[Network, Node]:
        """
        Create a new node.

        Returns (new_network, node). An existing node with the same name is reused.
        """
        for n in self.nodes:
            if n.name == name:
                return self, n

        new_node = Node(name, len(self.nodes))
        new_net = self._replace(nodes=self.nodes + (new_node,))
        return new_net, new_node

    def add_component(self, spec: ComponentSpec) -> tuple[Network, ComponentRef]:
        """
        Add a component specification.

        Returns (new_network, component_ref).
        """
        if any(c.name == spec.name for c in self.components):
            raise InvalidTopology(f"Component '{spec.name}' already exists", spec.name)
        new_net = self._replace(components=self.components + (spec,))
        ref = ComponentRef(spec.name, spec.kind)
        return new_net, ref

    def defaults(self) -> dict[str, float]:
        """Construction-time component values, keyed by component name."""
        merged = {}
        for comp in self.components:
            for param_name, default_value in comp.defaults:
                merged[param_name] = default_value
        return merged

    def to_circuit(self, params: dict | None = None) -> Circuit:
        """
        Lower this network to a normalized Circuit.

        Args:
            params: component values by name, overriding construction defaults

        Raises:
            InvalidTopology: if a component has no value
        """
        values = {**self.defaults(), **(params or {})}
        resistors = []
        sources = []
        for comp in self.components:
            if comp.name not in values:
                raise InvalidTopology(
                    f"No value for component '{comp.name}' (pass it at construction or in params)",
                    comp.name,
                )
            value = float(values[comp.name])
            if comp.kind == "R":
                resistors.append(Resistor(comp.nodes[0], comp.nodes[1], value))
            elif comp.kind == "VSource":
                sources.append(VoltageSource(comp.nodes[0], comp.nodes[1], value))
            else:
                raise InvalidTopology(f"Unknown component kind '{comp.kind}'", comp.name)

        return Circuit(
            node_count=len(self.nodes),
            resistors=tuple(resistors),
            voltage_sources=tuple(sources),
        )

    def compile(self) -> Solver:
        """
        Create solver functions for this network.

        Returns:
            Solver with solve, v, i and p functions
        """
        from .solver import compile_network
        return compile_network(self)
