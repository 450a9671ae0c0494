"""Circuit component factory functions for DC analysis (functional style).

- R stamps a conductance G = 1/R between its terminals
- VSource adds one extra MNA variable (its branch current)
"""

from __future__ import annotations

from .network import Network, Node, ComponentSpec, ComponentRef


def R(
    net: Network,
    node_a: Node,
    node_b: Node,
    *,
    name: str,
    value: float | None = None,
) -> tuple[Network, ComponentRef]:
    """
    Create a resistor.

    Positive current flows from node_a to node_b.

    Args:
        net: Network to add to
        node_a: First terminal
        node_b: Second terminal
        name: Component name (required, used as key in params)
        value: Resistance in Ohms (optional default, can be overridden at solve time)

    Returns:
        (new_network, component_ref)

    Example:
        net, r1 = R(net, n1, n2, name="R1", value=1000.0)  # 1 kOhm
    """
    defaults = ((name, value),) if value is not None else ()
    spec = ComponentSpec(
        name=name,
        kind="R",
        nodes=(node_a.index, node_b.index),
        defaults=defaults,
    )
    return net.add_component(spec)


def VSource(
    net: Network,
    node_p: Node,
    node_n: Node,
    *,
    name: str,
    value: float | None = None,
) -> tuple[Network, ComponentRef]:
    """
    Create an ideal DC voltage source: V(node_p) - V(node_n) = value.

    Its branch current is the MNA unknown, positive when flowing from
    node_p through the source to node_n, so a source driving a load
    reports a negative current.

    Args:
        net: Network to add to
        node_p: Positive terminal
        node_n: Negative terminal
        name: Component name (required, used as key in params)
        value: Voltage in Volts (optional default)

    Returns:
        (new_network, component_ref)

    Example:
        net, vs = VSource(net, n1, net.gnd, name="vs", value=5.0)
    """
    defaults = ((name, value),) if value is not None else ()
    spec = ComponentSpec(
        name=name,
        kind="VSource",
        nodes=(node_p.index, node_n.index),
        defaults=defaults,
    )
    return net.add_component(spec)
