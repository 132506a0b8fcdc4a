from __future__ import annotations

from ridematch.driver import Driver
from ridematch.driver_registry import DriverRegistry


def _registry() -> DriverRegistry:
    registry = DriverRegistry()
    registry.add(Driver("D2", "Bea", 4))
    registry.add(Driver("D1", "Ali", 2, vehicle_type="SUV", rating=4.7))
    registry.add(Driver("D3", "Cam", 7, is_available=False))
    return registry


def test_add_rejects_duplicate_ids() -> None:
    registry = _registry()

    assert not registry.add(Driver("D1", "Someone Else", 9))
    assert registry.get("D1").name == "Ali"
    assert registry.logs.to_list()[-1] == "Failed to add driver D1: already exists"


def test_registry_stores_and_returns_copies() -> None:
    registry = DriverRegistry()
    original = Driver("D9", "Dee", 1)
    registry.add(original)

    original.current_location = 5
    fetched = registry.get("D9")
    fetched.is_available = False

    assert registry.get("D9").current_location == 1
    assert registry.get("D9").is_available


def test_listings_are_sorted_by_id() -> None:
    registry = _registry()

    assert [d.id for d in registry.all_drivers()] == ["D1", "D2", "D3"]
    assert [d.id for d in registry.available_drivers()] == ["D1", "D2"]
    assert registry.count() == 3
    assert registry.available_count() == 2


def test_unknown_ids_fail_softly() -> None:
    registry = _registry()

    assert registry.get("nope") is None
    assert not registry.remove("nope")
    assert not registry.update_location("nope", 3)
    assert not registry.update_availability("nope", True)
    assert not registry.complete_ride("nope")
    assert len(registry) == 3
    assert "Failed to remove driver nope: not found" in registry.logs.to_list()


def test_update_location_and_availability() -> None:
    registry = _registry()

    assert registry.update_location("D2", 11)
    assert registry.update_availability("D2", False)

    driver = registry.get("D2")
    assert driver.current_location == 11
    assert not driver.is_available
    assert "Updated driver D2 location from 4 to 11" in registry.logs.to_list()
    assert registry.logs.to_list()[-1] == "Updated driver D2 availability to busy"


def test_complete_ride_frees_driver_and_counts_ride() -> None:
    registry = _registry()

    assert registry.complete_ride("D3", 0)
    driver = registry.get("D3")
    assert driver.is_available
    assert driver.completed_rides == 1
    assert driver.current_location == 0

    assert registry.complete_ride("D3")
    assert registry.get("D3").current_location == 0
    assert registry.get("D3").completed_rides == 2


def test_remove_and_membership() -> None:
    registry = _registry()

    assert "D2" in registry
    assert registry.remove("D2")
    assert "D2" not in registry
    assert len(registry) == 2


def test_to_dict_uses_camel_case_keys() -> None:
    exported = _registry().to_dict()

    assert exported["totalDrivers"] == 3
    assert exported["availableDrivers"] == 2
    assert exported["drivers"][0] == {
        "id": "D1",
        "name": "Ali",
        "currentLocation": 2,
        "isAvailable": True,
        "vehicleType": "SUV",
        "rating": 4.7,
        "completedRides": 0,
    }


def test_driver_round_trips_through_dict() -> None:
    driver = Driver("D5", "Eve", 3, False, "Luxury", 4.2, 17)
    assert Driver.from_dict(driver.to_dict()) == driver


def test_clear_logs() -> None:
    registry = _registry()
    assert len(registry.logs) == 3
    registry.clear_logs()
    assert len(registry.logs) == 0
