import logging
from datetime import datetime
from typing import Dict, Optional

from . import config
from .city import RoadGraph
from .dispatch import DispatchEngine
from .driver import Driver
from .generator import generate_city
from .trip import RideRequest

logger = logging.getLogger(__name__)


class RideShareSystem:
    """Owns the city graph and the dispatch engine serving it.

    The engine only borrows the graph; resetting the system builds a new
    graph and a new engine together.
    """

    def __init__(self, num_locations: int = config.CITY_SIZE, seed: Optional[int] = config.CITY_SEED,
                 graph: Optional[RoadGraph] = None):
        self.num_locations = num_locations
        self.seed = seed
        self.graph: RoadGraph = graph if graph is not None else RoadGraph(0)
        self.dispatch = DispatchEngine(self.graph)
        self.next_request_id = 1
        self.started_at = datetime.now()

        if graph is None:
            self.reset()

    def reset(self, seed: Optional[int] = None):
        """Regenerate the city and reload the seed drivers"""
        if seed is not None:
            self.seed = seed

        city = generate_city(self.num_locations, self.seed)
        self.graph = city.graph
        self.dispatch = DispatchEngine(self.graph)
        self.next_request_id = 1

        for driver in city.drivers:
            self.dispatch.add_driver(driver)

        logger.info(
            "System initialized: %d locations, %d drivers (%d available)",
            self.graph.vertex_count(), self.dispatch.registry.count(), self.dispatch.registry.available_count()
        )

    def new_request(self, passenger_id: str, pickup: int, destination: int) -> RideRequest:
        """Create a request with the next sequential id"""
        request_id = f"R{self.next_request_id:04d}"
        self.next_request_id += 1
        return RideRequest(request_id, pickup, destination, passenger_id)

    def add_driver(self, driver: Driver) -> bool:
        return self.dispatch.add_driver(driver)

    def get_health(self) -> Dict:
        return {
            'status': 'healthy',
            'service': 'Ride Dispatch',
            'timestamp': datetime.now().isoformat(),
            'graphNodes': self.graph.vertex_count(),
            'totalDrivers': self.dispatch.registry.count(),
            'availableDrivers': self.dispatch.registry.available_count()
        }

    def get_analytics(self) -> Dict:
        """Demand window summary plus fleet utilization"""
        total_drivers = self.dispatch.registry.count()
        available = self.dispatch.registry.available_count()
        utilization = (total_drivers - available) / total_drivers if total_drivers > 0 else 0

        analytics = self.dispatch.analyze_demand().to_dict()
        analytics.update({
            'queueSize': self.dispatch.queue_size(),
            'totalDrivers': total_drivers,
            'availableDrivers': available,
            'driverUtilization': round(utilization, 2)
        })
        return analytics

    def get_state(self) -> Dict:
        """Get complete system state"""
        return {
            'graph': self.graph.to_dict(),
            'drivers': [d.to_dict() for d in self.dispatch.all_drivers()],
            'recentRequests': [r.to_dict() for r in self.dispatch.recent_requests()],
            'analytics': self.get_analytics()
        }
