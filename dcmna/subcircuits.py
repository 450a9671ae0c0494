"""Reusable subcircuit building blocks (functional style)."""

from __future__ import annotations

from .components import R
from .network import Network, Node


def Series(
    net: Network,
    n1: Node,
    n2: Node,
    elem1_factory,
    elem2_factory,
    prefix: str = "ser",
) -> tuple[Network, tuple]:
    """
    Chain two two-terminal elements through a new internal node.

    Topology:
        n1 ──[elem1]──(prefix_mid)──[elem2]── n2

    Each factory is called as factory(net, node_a, node_b) -> (net, ref).

    Returns:
        (new_network, (ref1, ref2, n_mid))
    """
    net, n_mid = net.node(f"{prefix}_mid")
    net, ref1 = elem1_factory(net, n1, n_mid)
    net, ref2 = elem2_factory(net, n_mid, n2)
    return net, (ref1, ref2, n_mid)


def Parallel(
    net: Network,
    n1: Node,
    n2: Node,
    elem1_factory,
    elem2_factory,
) -> tuple[Network, tuple]:
    """
    Place two two-terminal elements across the same node pair.

    Returns:
        (new_network, (ref1, ref2))
    """
    net, ref1 = elem1_factory(net, n1, n2)
    net, ref2 = elem2_factory(net, n1, n2)
    return net, (ref1, ref2)


def Divider(
    net: Network,
    n_top: Node,
    n_bottom: Node,
    *,
    name: str,
    r_top: float | None = None,
    r_bottom: float | None = None,
) -> tuple[Network, tuple]:
    """
    Resistive voltage divider with its tap exposed as a node.

    Topology:
        n_top ──[name_top]──(name_tap)──[name_bottom]── n_bottom

    Unloaded, V(tap) = V(n_bottom) + (V(n_top) - V(n_bottom)) * r_bottom / (r_top + r_bottom).
    Resistor values are ordinary params ("{name}_top", "{name}_bottom"),
    so a divider can be re-solved with other ratios without rebuilding.

    Returns:
        (new_network, (ref_top, ref_bottom, n_tap))

    Example:
        net, (r_top, r_bot, tap) = Divider(net, n_in, net.gnd, name="fb",
                                           r_top=30e3, r_bottom=10e3)
        solver = net.compile()
        solver.v(solver.solve({"vin": 12.0}), tap)  # 3.0
    """
    net, n_tap = net.node(f"{name}_tap")
    net, ref_top = R(net, n_top, n_tap, name=f"{name}_top", value=r_top)
    net, ref_bottom = R(net, n_tap, n_bottom, name=f"{name}_bottom", value=r_bottom)
    return net, (ref_top, ref_bottom, n_tap)
