"""
Driver registry keyed by driver id.

Lookups and updates are O(1) on average. Reads hand out copies so callers
cannot change registry state by mutating a returned Driver. Unknown ids make
mutating calls return False instead of raising.
"""

import logging
from typing import Dict, List, Optional

from .driver import Driver
from .logs import LogSink

logger = logging.getLogger(__name__)


class DriverRegistry:
    def __init__(self, sink: Optional[LogSink] = None):
        self.drivers: Dict[str, Driver] = {}
        self.logs = sink if sink is not None else LogSink(logger)

    def add(self, driver: Driver) -> bool:
        """Add a new driver"""
        if driver.id in self.drivers:
            self.logs.record(f"Failed to add driver {driver.id}: already exists")
            return False

        self.drivers[driver.id] = driver.copy()
        self.logs.record(f"Added driver {driver.id} ({driver.name}) at location {driver.current_location}")
        return True

    def remove(self, driver_id: str) -> bool:
        if driver_id not in self.drivers:
            self.logs.record(f"Failed to remove driver {driver_id}: not found")
            return False

        del self.drivers[driver_id]
        self.logs.record(f"Removed driver {driver_id}")
        return True

    def get(self, driver_id: str) -> Optional[Driver]:
        driver = self.drivers.get(driver_id)
        return driver.copy() if driver else None

    def update_location(self, driver_id: str, new_location: int) -> bool:
        driver = self.drivers.get(driver_id)
        if driver is None:
            self.logs.record(f"Failed to update location for driver {driver_id}: not found")
            return False

        old_location = driver.current_location
        driver.update_location(new_location)
        self.logs.record(f"Updated driver {driver_id} location from {old_location} to {new_location}")
        return True

    def update_availability(self, driver_id: str, available: bool) -> bool:
        driver = self.drivers.get(driver_id)
        if driver is None:
            self.logs.record(f"Failed to update availability for driver {driver_id}: not found")
            return False

        driver.is_available = available
        self.logs.record(f"Updated driver {driver_id} availability to {'available' if available else 'busy'}")
        return True

    def complete_ride(self, driver_id: str, dropoff_location: Optional[int] = None) -> bool:
        """Mark a ride finished: bump the ride counter and free the driver"""
        driver = self.drivers.get(driver_id)
        if driver is None:
            self.logs.record(f"Failed to complete ride for driver {driver_id}: not found")
            return False

        driver.complete_ride(dropoff_location)
        self.logs.record(
            f"Driver {driver_id} completed ride #{driver.completed_rides} at location {driver.current_location}"
        )
        return True

    def available_drivers(self) -> List[Driver]:
        """Snapshot of available drivers ordered by id"""
        return [self.drivers[d].copy() for d in sorted(self.drivers) if self.drivers[d].is_available]

    def all_drivers(self) -> List[Driver]:
        return [self.drivers[d].copy() for d in sorted(self.drivers)]

    def count(self) -> int:
        return len(self.drivers)

    def available_count(self) -> int:
        return len([d for d in self.drivers.values() if d.is_available])

    def clear_logs(self):
        self.logs.clear()

    def __contains__(self, driver_id: str) -> bool:
        return driver_id in self.drivers

    def __len__(self) -> int:
        return len(self.drivers)

    def to_dict(self):
        return {
            'totalDrivers': self.count(),
            'availableDrivers': self.available_count(),
            'drivers': [d.to_dict() for d in self.all_drivers()]
        }
