"""
Dispatch engine: greedy ride matching on top of the shortest path engine.

A request is validated, matched to the available driver with the smallest
road distance to the pickup, routed from pickup to destination, and only
then is the driver committed. Every failure is returned as a structured
result and leaves the driver registry untouched.

Enqueued requests also feed a bounded sliding window used for short-term
demand analysis (hotspots and match counts).
"""

import logging
from collections import Counter, deque
from typing import Deque, Dict, List, Optional, Tuple

from . import config
from .city import RoadGraph
from .dijkstra import PathResult, ShortestPathEngine
from .driver import Driver
from .driver_registry import DriverRegistry
from .logs import LogSink
from .trip import RideRequest

logger = logging.getLogger(__name__)

NO_PENDING_REQUESTS = "No pending ride requests"
INVALID_PICKUP = "Invalid pickup location"
INVALID_DESTINATION = "Invalid destination location"
SAME_LOCATION = "Pickup and destination cannot be the same"
NO_AVAILABLE_DRIVERS = "No available drivers found"
NO_REACHABLE_DRIVER = "No reachable driver found"
NO_ROUTE = "No route found from pickup to destination"
MATCHED = "Ride matched successfully"


class NearestDriver:
    """Winner of the greedy search with its route to the pickup"""

    def __init__(self, driver: Driver, route: PathResult):
        self.driver = driver
        self.route = route

    @property
    def distance(self) -> float:
        return self.route.distance


class DispatchResult:
    def __init__(self, success: bool = False, error_message: str = ""):
        self.success = success
        self.error_message = error_message

        self.assigned_driver: Optional[Driver] = None
        self.driver_to_pickup_distance = 0.0
        self.driver_to_pickup_path: List[int] = []
        self.driver_to_pickup_eta = 0.0

        self.pickup_to_destination_distance = 0.0
        self.pickup_to_destination_path: List[int] = []
        self.pickup_to_destination_eta = 0.0

        self.total_distance = 0.0
        self.total_eta = 0.0

        self.matching_logs: List[str] = []
        self.dijkstra_logs: List[str] = []
        self.heap_logs: List[str] = []

    @classmethod
    def failure(cls, message: str, matching_logs: Optional[List[str]] = None) -> 'DispatchResult':
        result = cls(success=False, error_message=message)
        result.matching_logs = list(matching_logs or [])
        return result

    @property
    def logs(self) -> Dict[str, List[str]]:
        return {
            'matching': list(self.matching_logs),
            'dijkstra': list(self.dijkstra_logs),
            'heap': list(self.heap_logs)
        }

    def to_dict(self):
        if not self.success:
            return {
                'success': False,
                'errorMessage': self.error_message,
                'logs': self.logs
            }

        return {
            'success': True,
            'assignedDriver': self.assigned_driver.to_dict() if self.assigned_driver else None,
            'driverToPickupDistance': self.driver_to_pickup_distance,
            'driverToPickupPath': list(self.driver_to_pickup_path),
            'driverToPickupETA': self.driver_to_pickup_eta,
            'pickupToDestinationDistance': self.pickup_to_destination_distance,
            'pickupToDestinationPath': list(self.pickup_to_destination_path),
            'pickupToDestinationETA': self.pickup_to_destination_eta,
            'totalDistance': self.total_distance,
            'totalETA': self.total_eta,
            'logs': self.logs
        }


class RideMatch:
    """Compact result of find_ride"""

    def __init__(self, success: bool = False, message: str = ""):
        self.success = success
        self.message = message
        self.driver: Optional[Driver] = None
        self.distance_to_pickup = 0.0
        self.distance_to_destination = 0.0
        self.total_distance = 0.0
        self.estimated_time = 0
        self.path_to_pickup: List[int] = []
        self.path_to_destination: List[int] = []

    def to_dict(self):
        data = {
            'success': self.success,
            'message': self.message
        }
        if self.success:
            data.update({
                'driver': self.driver.to_dict() if self.driver else None,
                'distanceToPickup': self.distance_to_pickup,
                'distanceToDestination': self.distance_to_destination,
                'totalDistance': self.total_distance,
                'estimatedTime': self.estimated_time,
                'pathToPickup': list(self.path_to_pickup),
                'pathToDestination': list(self.path_to_destination)
            })
        return data


class DemandStats:
    def __init__(self, total_requests: int = 0, successful_matches: int = 0, failed_matches: int = 0,
                 avg_wait_time: float = 0.0, hotspots: Optional[List[int]] = None):
        self.total_requests = total_requests
        self.successful_matches = successful_matches
        self.failed_matches = failed_matches
        self.avg_wait_time = avg_wait_time
        self.hotspots = hotspots or []

    def to_dict(self):
        return {
            'totalRequests': self.total_requests,
            'successfulMatches': self.successful_matches,
            'failedMatches': self.failed_matches,
            'avgWaitTime': self.avg_wait_time,
            'hotspots': list(self.hotspots)
        }


class WindowEntry:
    """A windowed request and, once processed, how it turned out"""

    def __init__(self, request: RideRequest):
        self.request = request
        self.matched: Optional[bool] = None
        self.wait_time: Optional[float] = None


class DispatchEngine:
    """Greedy nearest-driver dispatcher.

    The graph is borrowed from the caller and only read. Registry, request
    queue and demand window are mutated one request at a time; a host that
    calls in from several threads must serialize access itself.
    """

    def __init__(self, graph: RoadGraph, registry: Optional[DriverRegistry] = None,
                 window_size: int = config.SLIDING_WINDOW_SIZE,
                 average_speed: float = config.AVERAGE_SPEED_KMH):
        if window_size <= 0:
            raise ValueError(f"Window size must be positive: {window_size}")
        self.graph = graph
        self.registry = registry if registry is not None else DriverRegistry()
        self.paths = ShortestPathEngine(graph, average_speed)
        self.average_speed = average_speed
        self.window_size = window_size
        self.request_queue: Deque[RideRequest] = deque()
        self.recent: Deque[WindowEntry] = deque(maxlen=window_size)
        self.logs = LogSink(logger)

    # ------------------------------------------------------------------
    # Request queue and demand window
    # ------------------------------------------------------------------

    def enqueue(self, request: RideRequest):
        """Queue a request and record it in the demand window"""
        self.request_queue.append(request)
        self.recent.append(WindowEntry(request))
        self.logs.record(
            f"Added ride request {request.request_id} "
            f"(pickup: {request.pickup_location}, destination: {request.destination_location})"
        )

    def queue_size(self) -> int:
        return len(self.request_queue)

    def recent_requests(self) -> List[RideRequest]:
        """Windowed requests, oldest first"""
        return [entry.request for entry in self.recent]

    def process_next(self) -> DispatchResult:
        """Dequeue the oldest request and dispatch it"""
        if not self.request_queue:
            return DispatchResult.failure(NO_PENDING_REQUESTS)

        request = self.request_queue.popleft()
        result = self.process_request(request)
        self._record_outcome(request, result)
        return result

    def _record_outcome(self, request: RideRequest, result: DispatchResult):
        for entry in self.recent:
            if entry.request is request:
                entry.matched = result.success
                entry.wait_time = result.driver_to_pickup_eta if result.success else None
                return

    def analyze_demand(self) -> DemandStats:
        """Summarize the sliding window.

        Hotspots are the most frequent pickup locations, most frequent
        first; equal counts are ordered by ascending location id.
        """
        stats = DemandStats(total_requests=len(self.recent))
        if not self.recent:
            return stats

        waits = []
        for entry in self.recent:
            if entry.matched is True:
                stats.successful_matches += 1
                waits.append(entry.wait_time)
            elif entry.matched is False:
                stats.failed_matches += 1

        if waits:
            stats.avg_wait_time = sum(waits) / len(waits)

        frequency = Counter(entry.request.pickup_location for entry in self.recent)
        ranked = sorted(frequency.items(), key=lambda item: (-item[1], item[0]))
        stats.hotspots = [location for location, _ in ranked[:config.HOTSPOT_COUNT]]
        return stats

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _validate(self, request: RideRequest) -> Optional[str]:
        if not self.graph.location_exists(request.pickup_location):
            return INVALID_PICKUP
        if not self.graph.location_exists(request.destination_location):
            return INVALID_DESTINATION
        if request.pickup_location == request.destination_location:
            return SAME_LOCATION
        return None

    def _search(self, pickup_location: int) -> Tuple[Optional[NearestDriver], str]:
        available = self.registry.available_drivers()
        if not available:
            self.logs.record("No available drivers found")
            return None, NO_AVAILABLE_DRIVERS

        self.logs.record(
            f"Searching for nearest driver among {len(available)} available drivers using Greedy approach"
        )

        nearest: Optional[NearestDriver] = None
        for driver in available:
            route = self.paths.shortest_path(driver.current_location, pickup_location)
            if not route.found:
                self.logs.record(f"  Driver {driver.id} at location {driver.current_location} cannot reach pickup")
                continue

            if nearest is None or route.distance < nearest.distance:
                nearest = NearestDriver(driver, route)
                self.logs.record(
                    f"  Driver {driver.id} at location {driver.current_location} "
                    f"has distance {route.distance:.2f} km to pickup"
                )

        if nearest is None:
            self.logs.record("Could not find reachable driver")
            return None, NO_REACHABLE_DRIVER

        self.logs.record(f"Selected nearest driver: {nearest.driver.id} (distance: {nearest.distance:.2f} km)")
        return nearest, ""

    def find_nearest_driver(self, pickup_location: int) -> Optional[NearestDriver]:
        """Available driver with the smallest road distance to pickup, if any can reach it"""
        nearest, _ = self._search(pickup_location)
        return nearest

    def process_request(self, request: RideRequest) -> DispatchResult:
        """Match a request immediately, bypassing the queue"""
        self.logs.clear()
        self.logs.record(f"Processing ride request {request.request_id}")

        error = self._validate(request)
        if error:
            self.logs.record(f"Error: {error}")
            logger.info("Request %s rejected: %s", request.request_id, error)
            return DispatchResult.failure(error, self.logs.to_list())

        nearest, error = self._search(request.pickup_location)
        if nearest is None:
            logger.info("Request %s unmatched: %s", request.request_id, error)
            return DispatchResult.failure(error, self.logs.to_list())

        route = self.paths.shortest_path(request.pickup_location, request.destination_location)
        if not route.found:
            self.logs.record(f"Error: {NO_ROUTE}")
            logger.info("Request %s unmatched: %s", request.request_id, NO_ROUTE)
            return DispatchResult.failure(NO_ROUTE, self.logs.to_list())

        self.registry.update_availability(nearest.driver.id, False)

        result = DispatchResult(success=True)
        result.assigned_driver = self.registry.get(nearest.driver.id)
        result.driver_to_pickup_distance = nearest.route.distance
        result.driver_to_pickup_path = list(nearest.route.path)
        result.driver_to_pickup_eta = nearest.route.eta

        result.pickup_to_destination_distance = route.distance
        result.pickup_to_destination_path = list(route.path)
        result.pickup_to_destination_eta = route.eta

        result.total_distance = result.driver_to_pickup_distance + result.pickup_to_destination_distance
        result.total_eta = result.driver_to_pickup_eta + result.pickup_to_destination_eta

        self.logs.record(
            f"Ride matched successfully. Total distance: {result.total_distance:.2f} km, "
            f"Total ETA: {result.total_eta:.1f} min"
        )
        result.matching_logs = self.logs.to_list()
        result.dijkstra_logs = nearest.route.logs + route.logs
        result.heap_logs = nearest.route.heap_logs + route.heap_logs

        logger.info("Request %s matched to driver %s", request.request_id, nearest.driver.id)
        return result

    def find_ride(self, request: RideRequest) -> RideMatch:
        """Point-in-time match without touching the queue or the demand window"""
        self.logs.clear()

        error = self._validate(request)
        if error:
            return RideMatch(False, error)

        nearest, error = self._search(request.pickup_location)
        if nearest is None:
            return RideMatch(False, error)

        route = self.paths.shortest_path(request.pickup_location, request.destination_location)
        if not route.found:
            return RideMatch(False, NO_ROUTE)

        self.registry.update_availability(nearest.driver.id, False)

        match = RideMatch(True, MATCHED)
        match.driver = self.registry.get(nearest.driver.id)
        match.distance_to_pickup = nearest.route.distance
        match.distance_to_destination = route.distance
        match.total_distance = match.distance_to_pickup + match.distance_to_destination
        match.estimated_time = int(self.paths.estimate_eta(match.total_distance, self.average_speed))
        match.path_to_pickup = list(nearest.route.path)
        match.path_to_destination = list(route.path)
        return match

    # ------------------------------------------------------------------
    # Driver management
    # ------------------------------------------------------------------

    def add_driver(self, driver: Driver) -> bool:
        return self.registry.add(driver)

    def remove_driver(self, driver_id: str) -> bool:
        return self.registry.remove(driver_id)

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        return self.registry.get(driver_id)

    def all_drivers(self) -> List[Driver]:
        return self.registry.all_drivers()

    def available_drivers(self) -> List[Driver]:
        return self.registry.available_drivers()

    def update_driver_location(self, driver_id: str, new_location: int) -> bool:
        """Move a driver; unknown drivers and unknown locations return False"""
        if not self.graph.location_exists(new_location):
            self.logs.record(f"Failed to move driver {driver_id}: location {new_location} not found")
            return False
        return self.registry.update_location(driver_id, new_location)

    def set_driver_availability(self, driver_id: str, available: bool) -> bool:
        return self.registry.update_availability(driver_id, available)

    def complete_ride(self, driver_id: str, dropoff_location: Optional[int] = None) -> bool:
        if dropoff_location is not None and not self.graph.location_exists(dropoff_location):
            self.logs.record(f"Failed to complete ride for {driver_id}: location {dropoff_location} not found")
            return False
        return self.registry.complete_ride(driver_id, dropoff_location)
