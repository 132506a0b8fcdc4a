from __future__ import annotations

import pytest

import app as app_module
from ridematch.driver import Driver
from ridematch.system import RideShareSystem

from conftest import build_graph


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch):
    system = RideShareSystem(graph=build_graph(5, [(1, 0, 3.0), (2, 0, 1.0), (0, 3, 4.0)]))
    system.add_driver(Driver("A", "Far Driver", 1))
    system.add_driver(Driver("B", "Near Driver", 2))
    monkeypatch.setattr(app_module, "system", system)

    app_module.app.config["TESTING"] = True
    with app_module.app.test_client() as client:
        yield client


def _ride(pickup: int, destination: int) -> dict:
    return {"passengerId": "P1", "pickupLocation": pickup, "destinationLocation": destination}


def test_health(client) -> None:
    for path in ("/health", "/api/health"):
        response = client.get(path)
        assert response.status_code == 200
        assert response.get_json()["graphNodes"] == 5


def test_graph_export(client) -> None:
    data = client.get("/api/graph").get_json()["data"]
    assert data["numVertices"] == 5
    assert len(data["edges"]) == 3


def test_node_lookup(client) -> None:
    response = client.get("/api/nodes/0")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["node"]["name"] == "Stop 0"
    assert {road["destination"] for road in data["adjacentNodes"]} == {1, 2, 3}

    missing = client.get("/api/nodes/99")
    assert missing.status_code == 404
    assert missing.get_json()["success"] is False


def test_shortest_path(client) -> None:
    response = client.post("/api/path/shortest", json={"source": 2, "destination": 3})
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["path"] == [2, 0, 3]
    assert data["distance"] == 5.0
    assert data["sourceNode"]["id"] == 2

    assert client.post("/api/path/shortest", json={"source": 2, "destination": 4}).status_code == 404
    assert client.post("/api/path/shortest", json={"source": 2, "destination": 42}).status_code == 400
    assert client.post("/api/path/shortest", json={"source": "x", "destination": 1}).status_code == 400
    assert client.post("/api/path/shortest", data="not json").status_code == 400


def test_driver_crud(client) -> None:
    created = client.post("/api/drivers", json={"id": "C", "name": "New", "currentLocation": 3})
    assert created.status_code == 201
    assert created.get_json()["data"]["vehicleType"] == "Sedan"

    assert client.post("/api/drivers", json={"id": "C", "name": "Dup", "currentLocation": 3}).status_code == 409
    assert client.post("/api/drivers", json={"id": "E", "currentLocation": 42}).status_code == 400
    assert client.post("/api/drivers", json={"name": "No Id", "currentLocation": 1}).status_code == 400

    assert client.get("/api/drivers/C").get_json()["data"]["currentLocation"] == 3
    assert client.delete("/api/drivers/C").status_code == 200
    assert client.get("/api/drivers/C").status_code == 404
    assert client.delete("/api/drivers/C").status_code == 404


def test_driver_listing_filters_available(client) -> None:
    client.put("/api/drivers/A/availability", json={"isAvailable": False})

    everyone = client.get("/api/drivers").get_json()["data"]
    available = client.get("/api/drivers?available=true").get_json()["data"]
    assert [d["id"] for d in everyone] == ["A", "B"]
    assert [d["id"] for d in available] == ["B"]


def test_driver_updates(client) -> None:
    moved = client.put("/api/drivers/A/location", json={"location": 3})
    assert moved.get_json()["data"]["currentLocation"] == 3
    assert client.put("/api/drivers/A/location", json={"location": 42}).status_code == 400
    assert client.put("/api/drivers/ghost/location", json={"location": 3}).status_code == 404

    assert client.put("/api/drivers/A/availability", json={"isAvailable": "no"}).status_code == 400
    assert client.put("/api/drivers/ghost/availability", json={"isAvailable": True}).status_code == 404

    completed = client.post("/api/drivers/A/complete", json={"dropoffLocation": 0})
    assert completed.get_json()["data"]["completedRides"] == 1
    assert completed.get_json()["data"]["currentLocation"] == 0
    assert client.post("/api/drivers/A/complete").status_code == 200
    assert client.post("/api/drivers/ghost/complete").status_code == 404


def test_find_ride(client) -> None:
    response = client.post("/api/rides/find", json=_ride(0, 3))
    assert response.status_code == 200
    body = response.get_json()
    assert body["driver"]["id"] == "B"
    assert body["estimatedTime"] == 7

    unmatched = client.post("/api/rides/find", json=_ride(0, 0))
    assert unmatched.status_code == 404
    assert unmatched.get_json()["message"] == "Pickup and destination cannot be the same"

    assert client.post("/api/rides/find", json={"pickupLocation": 0}).status_code == 400


def test_queue_and_process(client) -> None:
    queued = client.post("/api/rides/request", json=_ride(0, 3))
    assert queued.status_code == 202
    assert queued.get_json()["data"]["requestId"] == "R0001"
    assert client.get("/api/queue").get_json()["queueSize"] == 1

    processed = client.post("/api/rides/process").get_json()
    assert processed["success"] is True
    assert processed["data"]["assignedDriver"]["id"] == "B"
    assert processed["queueSize"] == 0

    empty = client.post("/api/rides/process").get_json()
    assert empty["success"] is False
    assert empty["data"]["errorMessage"] == "No pending ride requests"

    demand = client.get("/api/demand").get_json()["data"]
    assert demand["totalRequests"] == 1
    assert demand["successfulMatches"] == 1
    assert demand["hotspots"] == [0]


def test_direct_dispatch(client) -> None:
    body = client.post("/api/rides/dispatch", json=_ride(0, 4)).get_json()
    assert body["success"] is False
    assert body["data"]["errorMessage"] == "No route found from pickup to destination"

    body = client.post("/api/rides/dispatch", json=_ride(0, 3)).get_json()
    assert body["success"] is True
    assert body["data"]["totalDistance"] == 5.0


def test_analytics_and_state(client) -> None:
    client.post("/api/rides/find", json=_ride(0, 3))

    analytics = client.get("/api/analytics").get_json()["analytics"]
    assert analytics["driverUtilization"] == 0.5

    state = client.get("/api/system/state").get_json()["system"]
    assert len(state["drivers"]) == 2


def test_reset_regenerates_city(client) -> None:
    response = client.post("/api/system/reset", json={"seed": 7})
    assert response.status_code == 200
    assert app_module.system.seed == 7
    assert app_module.system.dispatch.registry.count() == 12


def test_unknown_route_is_json_404(client) -> None:
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json()["success"] is False
