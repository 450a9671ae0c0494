"""
Example: Voltage Divider

Demonstrates the voltage divider rule: V_out = V_in * R2 / (R1 + R2)

Three examples:
1. Simple 2-resistor divider built with the Network API
2. 4-resistor divider chain showing multiple tap points
3. The same divider sent as a JSON payload, as the web editor does

Components used: R, VSource
"""
import json

from dcmna import Network, R, VSource, simulate


def build_simple_divider():
    """Build a simple 2-resistor voltage divider.

    Circuit:
        Vs ---[R1]---+---[R2]--- GND
                     |
                    Vout
    """
    net = Network()
    net, n_top = net.node("top")      # Top of divider (Vs output)
    net, n_mid = net.node("mid")      # Middle tap point

    net, vs = VSource(net, n_top, net.gnd, name="vs")
    net, r1 = R(net, n_top, n_mid, name="R1")
    net, r2 = R(net, n_mid, net.gnd, name="R2")

    return net, {"top": n_top, "mid": n_mid}, {"vs": vs, "R1": r1, "R2": r2}


def build_chain_divider():
    """Build a 4-resistor chain divider with multiple taps.

    Circuit:
        Vs ---[R1]---+---[R2]---+---[R3]---+---[R4]--- GND
                     |          |          |
                   tap1       tap2       tap3
    """
    net = Network()
    net, n_top = net.node("top")
    net, tap1 = net.node("tap1")
    net, tap2 = net.node("tap2")
    net, tap3 = net.node("tap3")

    net, vs = VSource(net, n_top, net.gnd, name="vs")
    net, r1 = R(net, n_top, tap1, name="R1")
    net, r2 = R(net, tap1, tap2, name="R2")
    net, r3 = R(net, tap2, tap3, name="R3")
    net, r4 = R(net, tap3, net.gnd, name="R4")

    nodes = {"top": n_top, "tap1": tap1, "tap2": tap2, "tap3": tap3}
    components = {"vs": vs, "R1": r1, "R2": r2, "R3": r3, "R4": r4}
    return net, nodes, components


def simulate_simple_divider(V_in=10.0, R1=10000.0, R2=10000.0):
    """Solve the simple divider and return (output voltage, source current)."""
    net, nodes, refs = build_simple_divider()
    solver = net.compile()

    sol = solver.solve({"vs": V_in, "R1": R1, "R2": R2})
    return solver.v(sol, nodes["mid"]), solver.i(sol, refs["vs"])


def simulate_chain_divider(V_in=10.0, R_val=10000.0):
    """Solve the 4-resistor chain and return tap voltages."""
    net, nodes, _ = build_chain_divider()
    solver = net.compile()

    sol = solver.solve({"vs": V_in, "R1": R_val, "R2": R_val, "R3": R_val, "R4": R_val})
    return {name: solver.v(sol, nodes[name]) for name in ("tap1", "tap2", "tap3")}


def payload_divider(V_in=10.0, R1=10000.0, R2=10000.0):
    """The simple divider as a normalized JSON payload (node 0 = ground)."""
    return {
        "nodeCount": 3,
        "resistors": [
            {"n1": 1, "n2": 2, "value": R1},
            {"n1": 2, "n2": 0, "value": R2},
        ],
        "voltageSources": [{"nPlus": 1, "nMinus": 0, "value": V_in}],
        "resistorMap": {
            "R1": {"compId": 1, "n1": 1, "n2": 2, "value": R1},
            "R2": {"compId": 2, "n1": 2, "n2": 0, "value": R2},
        },
        "voltageSourceMap": {"vs": {"compId": 3, "nPlus": 1, "nMinus": 0, "value": V_in}},
    }


def main():
    print("=" * 60)
    print("Voltage Divider Example")
    print("=" * 60)

    print("\n1. Simple Voltage Divider (R1 = R2 = 10k)")
    print("-" * 40)
    V_in = 10.0
    v_out, i_src = simulate_simple_divider(V_in=V_in)
    print(f"   Input voltage:    {V_in:.2f} V")
    print(f"   Output voltage:   {v_out:.4f} V")
    print(f"   Expected (50%):   {V_in * 0.5:.2f} V")
    print(f"   Source current:   {i_src * 1e3:.4f} mA")

    print("\n2. Unequal Resistors (R1=10k, R2=20k)")
    print("-" * 40)
    v_out_2, _ = simulate_simple_divider(V_in=V_in, R1=10000.0, R2=20000.0)
    print(f"   Output voltage:   {v_out_2:.4f} V")
    print(f"   Expected (2/3):   {V_in * 2 / 3:.4f} V")

    print("\n3. 4-Resistor Chain (equal 10k resistors)")
    print("-" * 40)
    taps = simulate_chain_divider(V_in=V_in)
    print(f"   Tap 1 (75%):      {taps['tap1']:.4f} V (expected: {V_in*0.75:.2f})")
    print(f"   Tap 2 (50%):      {taps['tap2']:.4f} V (expected: {V_in*0.50:.2f})")
    print(f"   Tap 3 (25%):      {taps['tap3']:.4f} V (expected: {V_in*0.25:.2f})")

    print("\n4. JSON payload (what POST /api/simulate returns)")
    print("-" * 40)
    print(json.dumps(simulate(payload_divider(V_in=V_in)), indent=2))

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
