"""
Test: Normalization of labelled netlists onto dense node indices.
"""
import pytest


def divider_elements():
    from dcmna import Element

    return [
        Element("V", "V1", "vcc", "gnd", 10.0),
        Element("R", "R1", "vcc", "out", 1000.0),
        Element("R", "R2", "out", "gnd", 1000.0),
    ]


def test_ground_alias_becomes_node_zero():
    from dcmna import normalize

    norm = normalize(divider_elements())

    assert norm.node_labels == ("gnd", "vcc", "out")
    assert norm.node_index == {"gnd": 0, "vcc": 1, "out": 2}
    assert norm.circuit.node_count == 3
    assert norm.circuit.voltage_sources[0].n_plus == 1
    assert norm.circuit.voltage_sources[0].n_minus == 0


def test_first_node_is_ground_without_alias():
    """No explicit ground and no alias: first encountered node is the reference."""
    from dcmna import Element, normalize, solve_circuit

    norm = normalize([
        Element("V", "V1", "x", "y", 5.0),
        Element("R", "R1", "x", "y", 100.0),
    ])
    assert norm.node_labels[0] == "x"

    result = norm.relabel(solve_circuit(norm.circuit))
    assert result["voltages"]["x"] == 0.0
    assert result["voltages"]["y"] == pytest.approx(-5.0)


def test_explicit_ground_wins():
    from dcmna import Element, normalize, solve_circuit

    norm = normalize([
        Element("V", "V1", "x", "y", 5.0),
        Element("R", "R1", "x", "y", 100.0),
    ], ground="y")

    result = norm.relabel(solve_circuit(norm.circuit))
    assert result["ground"] == "y"
    assert result["voltages"]["x"] == pytest.approx(5.0)


def test_explicit_ground_keeps_alias_labels_distinct():
    """With an explicit ground, a node called "gnd" is just another node."""
    from dcmna import Element, normalize

    norm = normalize([
        Element("R", "R1", "a", "gnd", 1.0),
        Element("R", "R2", "gnd", "ref", 1.0),
    ], ground="ref")

    assert norm.node_labels == ("ref", "a", "gnd")


def test_ground_aliases_merge():
    """"0", "GND" and integer 0 all mean the same reference node."""
    from dcmna import Element, normalize

    norm = normalize([
        Element("V", "V1", "a", "GND", 3.0),
        Element("R", "R1", "a", "0", 10.0),
        Element("R", "R2", "a", 0, 10.0),
    ])

    assert norm.circuit.node_count == 2
    assert all(r.n2 == 0 for r in norm.circuit.resistors)


def test_empty_netlist():
    from dcmna import normalize, solve_circuit

    norm = normalize([])
    assert norm.node_labels == ("0",)
    assert norm.relabel(solve_circuit(norm.circuit))["voltages"] == {"0": 0.0}


def test_reporting_maps_are_built():
    from dcmna import normalize

    circuit = normalize(divider_elements()).circuit

    assert list(circuit.resistor_map) == ["R1", "R2"]
    assert circuit.resistor_map["R2"].comp_id == 1
    assert circuit.voltage_source_map["V1"].comp_id == 0


def test_relabel_by_name():
    from dcmna import normalize, solve_circuit

    norm = normalize(divider_elements())
    result = norm.relabel(solve_circuit(norm.circuit))

    assert result["voltages"]["out"] == pytest.approx(5.0)
    assert result["sourceCurrents"]["V1"] == pytest.approx(-0.005)
    assert result["componentResults"]["R1"]["voltage"] == pytest.approx(5.0)
    assert result["componentResults"]["R2"]["power"] == pytest.approx(0.025)
    assert result["componentResults"]["V1"]["current"] == pytest.approx(0.005)


@pytest.mark.parametrize("kind", ["r", "Resistor", "V", "vsource", "voltage"])
def test_kind_aliases(kind):
    from dcmna import Element, normalize

    normalize([Element(kind, "X1", "a", "gnd", 1.0)])


def test_unknown_kind():
    from dcmna import Element, normalize, InvalidTopology

    with pytest.raises(InvalidTopology) as excinfo:
        normalize([Element("C", "C1", "a", "gnd", 1e-6)])
    assert excinfo.value.reference == "components[0].type"


def test_duplicate_name():
    from dcmna import Element, normalize, InvalidTopology

    with pytest.raises(InvalidTopology):
        normalize([
            Element("R", "R1", "a", "gnd", 1.0),
            Element("R", "R1", "a", "b", 1.0),
        ])


def test_non_numeric_value():
    from dcmna import Element, normalize, InvalidTopology

    with pytest.raises(InvalidTopology) as excinfo:
        normalize([Element("R", "R1", "a", "gnd", "1k")])
    assert excinfo.value.reference == "components[0].value"


def test_integer_and_string_labels_are_one_node():
    """1 and "1" name the same node, so the source drives R1 and R2 in series."""
    from dcmna import Element, normalize

    norm = normalize([
        Element("V", "V1", 1, "gnd", 5.0),
        Element("R", "R1", 1, "1", 10.0),
        Element("R", "R2", "1", "gnd", 10.0),
    ])

    assert norm.node_labels == ("gnd", "1")
    result = norm.relabel(norm.solve())
    assert result["voltages"] == {"gnd": 0.0, "1": pytest.approx(5.0)}
    assert result["componentResults"]["R1"]["current"] == 0.0
    assert result["componentResults"]["R2"]["current"] == pytest.approx(0.5)


def test_labels_are_stripped():
    from dcmna import Element, normalize

    norm = normalize([
        Element("R", "R1", " out", "gnd", 1.0),
        Element("R", "R2", "out ", "gnd", 1.0),
    ], ground=" gnd ")

    assert norm.node_labels == ("gnd", "out")


def test_empty_label():
    from dcmna import Element, normalize, InvalidTopology

    with pytest.raises(InvalidTopology) as excinfo:
        normalize([Element("R", "R1", "a", "  ", 1.0)])
    assert excinfo.value.reference == "components[0].n2"


def test_singular_names_node_label():
    """A floating node is reported by the caller's label, not its index."""
    from dcmna import Element, normalize, SingularMatrix

    norm = normalize([
        Element("V", "V1", "vcc", "gnd", 5.0),
        Element("R", "R1", "vcc", "gnd", 100.0),
        Element("R", "R2", "island_a", "island_b", 100.0),
    ])

    with pytest.raises(SingularMatrix) as excinfo:
        norm.solve()
    assert excinfo.value.column == 1
    assert "'island_a'" in str(excinfo.value)


def test_singular_names_source():
    from dcmna import Element, normalize, SingularMatrix

    norm = normalize([
        Element("V", "Vmain", "a", "gnd", 5.0),
        Element("V", "Vbackup", "a", "gnd", 6.0),
        Element("R", "R1", "a", "gnd", 100.0),
    ])

    with pytest.raises(SingularMatrix) as excinfo:
        norm.solve()
    assert excinfo.value.column == 2
    assert "'Vbackup'" in str(excinfo.value)
