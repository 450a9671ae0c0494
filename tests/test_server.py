"""
Test: HTTP request handler (FastAPI).
"""
import pytest


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from dcmna.config import Settings
    from dcmna.server import create_app

    app = create_app(Settings(frontend_urls=("https://app.example",)))
    return TestClient(app)


DEMO_CIRCUIT = {
    "nodeCount": 2,
    "resistors": [{"n1": 1, "n2": 0, "value": 1000}],
    "voltageSources": [{"nPlus": 1, "nMinus": 0, "value": 10}],
}


def test_simulate_demo_circuit(client):
    response = client.post("/api/simulate", json=DEMO_CIRCUIT)

    assert response.status_code == 200
    body = response.json()
    assert body["voltages"]["n1"] == pytest.approx(10.0)
    assert body["voltages"]["n0"] == 0.0
    assert body["sourceCurrents"]["i_vs0"] == pytest.approx(-0.01)
    assert body["componentResults"] == {}


def test_simulate_with_maps(client):
    payload = dict(DEMO_CIRCUIT)
    payload["resistorMap"] = {"k": {"compId": 3, "n1": 1, "n2": 0, "value": 1000}}
    payload["voltageSourceMap"] = {"s": {"compId": 4, "nPlus": 1, "nMinus": 0, "value": 10}}

    body = client.post("/api/simulate", json=payload).json()

    assert body["componentResults"]["resistor_3"]["power"] == pytest.approx(0.1)
    assert body["componentResults"]["voltage_4"]["resistance"] == 0.0


def test_singular_maps_to_422(client):
    response = client.post("/api/simulate", json={"nodeCount": 3, **{
        k: v for k, v in DEMO_CIRCUIT.items() if k != "nodeCount"}})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "singular_matrix"
    assert body["column"] == 1


def test_invalid_topology_maps_to_400(client):
    payload = dict(DEMO_CIRCUIT, resistors=[{"n1": 1, "n2": 7, "value": 10}])

    response = client.post("/api/simulate", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "invalid_topology"
    assert body["reference"] == "resistors[0].n2"


def test_zero_node_count_maps_to_400(client):
    response = client.post("/api/simulate", json={"nodeCount": 0})
    assert response.status_code == 400
    assert response.json()["reference"] == "nodeCount"


def test_schema_error(client):
    """Wrong JSON shape is rejected by request validation."""
    response = client.post("/api/simulate", json={"resistors": []})
    assert response.status_code == 422
    assert "detail" in response.json()


def test_netlist_endpoint(client):
    netlist = {
        "components": [
            {"type": "V", "name": "V1", "n1": "vcc", "n2": "GND", "value": 12},
            {"type": "R", "name": "R1", "n1": "vcc", "n2": "out", "value": 2000},
            {"type": "R", "name": "R2", "n1": "out", "n2": "GND", "value": 1000},
        ]
    }
    response = client.post("/api/simulate/netlist", json=netlist)

    assert response.status_code == 200
    body = response.json()
    assert body["ground"] == "GND"
    assert body["voltages"]["out"] == pytest.approx(4.0)
    assert body["sourceCurrents"]["V1"] == pytest.approx(-0.004)
    assert body["componentResults"]["R1"]["voltage"] == pytest.approx(8.0)


def test_netlist_integer_nodes_and_explicit_ground(client):
    netlist = {
        "ground": 2,
        "components": [
            {"type": "V", "name": "V1", "n1": 1, "n2": 2, "value": 3},
            {"type": "R", "name": "R1", "n1": 1, "n2": 2, "value": 1},
        ],
    }
    body = client.post("/api/simulate/netlist", json=netlist).json()
    assert body["voltages"] == {"2": 0.0, "1": pytest.approx(3.0)}


def test_netlist_unknown_type(client):
    netlist = {"components": [{"type": "D", "name": "D1", "n1": "a", "n2": "0", "value": 1}]}
    response = client.post("/api/simulate/netlist", json=netlist)

    assert response.status_code == 400
    assert response.json()["reference"] == "components[0].type"


def test_boolean_node_count_rejected(client):
    """JSON true is not coerced to nodeCount 1."""
    response = client.post("/api/simulate", json={"nodeCount": True})
    assert response.status_code == 422
    assert "detail" in response.json()


@pytest.mark.parametrize("n1", [True, "1", 1.0])
def test_non_integer_terminal_rejected(client, n1):
    payload = dict(DEMO_CIRCUIT, resistors=[{"n1": n1, "n2": 0, "value": 1000}])

    response = client.post("/api/simulate", json=payload)

    assert response.status_code == 422
    assert "detail" in response.json()


def test_string_value_rejected(client):
    payload = dict(DEMO_CIRCUIT, voltageSources=[{"nPlus": 1, "nMinus": 0, "value": "10"}])
    assert client.post("/api/simulate", json=payload).status_code == 422


def test_netlist_mixed_label_types_share_a_node(client):
    netlist = {
        "components": [
            {"type": "V", "name": "V1", "n1": 1, "n2": "gnd", "value": 5},
            {"type": "R", "name": "R1", "n1": 1, "n2": "1", "value": 10},
            {"type": "R", "name": "R2", "n1": "1", "n2": "gnd", "value": 10},
        ]
    }
    response = client.post("/api/simulate/netlist", json=netlist)

    assert response.status_code == 200
    body = response.json()
    assert body["voltages"] == {"gnd": 0.0, "1": pytest.approx(5.0)}
    assert body["sourceCurrents"]["V1"] == pytest.approx(-0.5)


def test_netlist_singular_names_label(client):
    netlist = {
        "components": [
            {"type": "V", "name": "V1", "n1": "vcc", "n2": "gnd", "value": 5},
            {"type": "R", "name": "R1", "n1": "vcc", "n2": "gnd", "value": 100},
            {"type": "R", "name": "R2", "n1": "tank", "n2": "tap", "value": 100},
        ]
    }
    response = client.post("/api/simulate/netlist", json=netlist)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "singular_matrix"
    assert "'tank'" in body["detail"]


def test_health(client):
    assert client.get("/api/health").json() == {"status": "Server is running"}

    body = client.get("/api/test/health").json()
    assert body["status"] == "OK"
    assert body["message"] == "Backend is running"
    assert "timestamp" in body


def test_echo(client):
    body = client.post("/api/test/echo", json={"message": "hi"}).json()
    assert body["received"] == "hi"
    assert body["echo"] == "Echo: hi"


def test_cors_allows_listed_and_local_origins(client):
    listed = client.get("/api/health", headers={"Origin": "https://app.example"})
    assert listed.headers.get("access-control-allow-origin") == "https://app.example"

    local = client.get("/api/health", headers={"Origin": "http://localhost:5173"})
    assert local.headers.get("access-control-allow-origin") == "http://localhost:5173"


def test_cors_denies_other_origins(client):
    response = client.get("/api/health", headers={"Origin": "https://evil.example"})

    assert response.status_code == 200
    assert "access-control-allow-origin" not in response.headers
