"""
Procedural city generator for demos and tests.

Builds a RoadGraph of clustered locations joined by several classes of road
(highways, arterials, local streets, ring roads, shortcuts), then links any
disconnected components so every location is reachable. Also provides a
fixed seed roster of drivers.

Passing the same seed always yields the same city.
"""

import logging
import math
import random
from typing import List, Optional

from . import config
from .city import RoadGraph
from .driver import Driver

logger = logging.getLogger(__name__)

LOCATION_NAMES = [
    # Downtown
    "City Hall", "Financial District", "Business Center", "Central Station", "City Square",
    # Residential
    "Maple Grove", "Oak Hills", "Pine Valley", "Riverside", "Sunset Heights", "Harbor View",
    # Commercial
    "Shopping Mall", "Market Place", "Plaza", "Trade Center", "Outlet Mall",
    # Education
    "University", "College", "High School", "Elementary School", "Library",
    # Healthcare
    "General Hospital", "Medical Center", "Clinic", "Emergency Care",
    # Transport
    "Airport", "Train Station", "Bus Terminal", "Metro Hub", "Ferry Terminal",
    # Recreation
    "Central Park", "Sports Stadium", "Theater", "Museum", "Convention Center", "Zoo",
    # Industrial
    "Industrial Park", "Warehouse District", "Factory Zone", "Tech Park",
    # Misc
    "Hotel District", "Restaurant Row", "Gym", "Police Station", "Fire Station", "Post Office",
]

HIGHWAY_NAMES = ["Interstate-95", "Highway-1", "Express Route", "Freeway", "Parkway"]
ARTERIAL_NAMES = ["Main Street", "Broadway", "Avenue", "Boulevard", "Road"]
STREET_SUFFIXES = ["Street", "Lane", "Drive", "Court", "Way", "Place", "Circle"]
SHORTCUT_NAMES = ["Bridge", "Tunnel", "Overpass", "Underpass", "Connector"]

# (id, name, location, vehicle, rating, completed rides, available)
SEED_DRIVERS = [
    ("D001", "Rajesh Kumar", 0, "Sedan", 4.8, 234, True),
    ("D002", "Priya Sharma", 8, "SUV", 4.9, 412, True),
    ("D003", "Amit Patel", 15, "Sedan", 4.7, 189, True),
    ("D004", "Sneha Reddy", 22, "Compact", 4.6, 156, True),
    ("D005", "Vikram Singh", 30, "SUV", 4.9, 567, True),
    ("D006", "Anjali Verma", 35, "Sedan", 4.8, 301, False),
    ("D007", "Arjun Mehta", 42, "Luxury", 5.0, 89, True),
    ("D008", "Kavya Iyer", 48, "Sedan", 4.7, 267, True),
    ("D009", "Rahul Gupta", 12, "SUV", 4.9, 345, True),
    ("D010", "Deepika Nair", 25, "Compact", 4.8, 278, True),
    ("D011", "Sanjay Desai", 38, "Sedan", 4.6, 198, True),
    ("D012", "Neha Kapoor", 45, "Luxury", 4.9, 156, False),
]


class CityData:
    def __init__(self, graph: RoadGraph, drivers: List[Driver]):
        self.graph = graph
        self.drivers = drivers

    def to_dict(self):
        return {
            'graph': self.graph.to_dict(),
            'drivers': [d.to_dict() for d in self.drivers]
        }


class _NodeData:
    def __init__(self, id: int, lat: float, lon: float, sector: int):
        self.id = id
        self.lat = lat
        self.lon = lon
        self.sector = sector


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres between two points"""
    lon1, lat1, lon2, lat2 = map(math.radians, [lon1, lat1, lon2, lat2])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * 6371.0 * math.asin(math.sqrt(a))


def ordinal_suffix(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def _distance(nodes: List[_NodeData], a: int, b: int) -> float:
    return haversine_distance(nodes[a].lat, nodes[a].lon, nodes[b].lat, nodes[b].lon)


def _create_nodes(graph: RoadGraph, rng: random.Random, num_nodes: int) -> List[_NodeData]:
    """Cluster locations three to a sector on a square grid of sectors"""
    sectors_per_side = max(1, math.ceil(math.sqrt(num_nodes / 3.0)))
    origin_lat, origin_lon = config.CITY_ORIGIN
    nodes = []

    for i in range(num_nodes):
        sector = i // 3
        row, col = divmod(sector, sectors_per_side)
        sub_position = i % 3

        lat = origin_lat + row * config.SECTOR_SPACING_DEG + rng.uniform(-0.5, 0.5) * 0.015 + sub_position * 0.008
        lon = origin_lon + col * config.SECTOR_SPACING_DEG + rng.uniform(-0.5, 0.5) * 0.015 + sub_position * 0.008

        name = LOCATION_NAMES[i] if i < len(LOCATION_NAMES) else f"Location {i}"
        graph.add_location(i, name, lat, lon)
        nodes.append(_NodeData(i, lat, lon, sector))

    return nodes


def _create_highways(graph: RoadGraph, rng: random.Random, nodes: List[_NodeData]):
    num_nodes = len(nodes)

    for i in range(0, num_nodes - 5, 5):
        weight = _distance(nodes, i, i + 5) * config.HIGHWAY_WEIGHT
        graph.add_road(i, i + 5, weight, rng.choice(HIGHWAY_NAMES))

    step = math.ceil(math.sqrt(num_nodes))
    for i in range(0, num_nodes - step, step):
        weight = _distance(nodes, i, i + step) * config.HIGHWAY_WEIGHT
        graph.add_road(i, i + step, weight, "Highway North-South")


def _create_arterial_roads(graph: RoadGraph, rng: random.Random, nodes: List[_NodeData]):
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            distance = _distance(nodes, i, j)
            if 1.0 < distance < 4.0 and rng.random() < config.ARTERIAL_PROBABILITY:
                graph.add_road(i, j, distance * config.ARTERIAL_WEIGHT, rng.choice(ARTERIAL_NAMES))


def _create_local_streets(graph: RoadGraph, rng: random.Random, nodes: List[_NodeData]):
    for i in range(len(nodes)):
        for j in range(i + 1, len(nodes)):
            distance = _distance(nodes, i, j)
            if distance < 1.5 and rng.random() < config.LOCAL_STREET_PROBABILITY:
                number = rng.randint(1, 100)
                name = f"{number}{ordinal_suffix(number)} {rng.choice(STREET_SUFFIXES)}"
                graph.add_road(i, j, distance * config.LOCAL_STREET_WEIGHT, name)


def _create_ring_roads(graph: RoadGraph, nodes: List[_NodeData]):
    num_nodes = len(nodes)
    center_lat = sum(n.lat for n in nodes) / num_nodes
    center_lon = sum(n.lon for n in nodes) / num_nodes

    by_distance = sorted(
        (haversine_distance(n.lat, n.lon, center_lat, center_lon), n.id) for n in nodes
    )

    inner_size = num_nodes // 3
    for k in range(inner_size - 1):
        a, b = by_distance[k][1], by_distance[k + 1][1]
        distance = _distance(nodes, a, b)
        if distance < 3.0:
            graph.add_road(a, b, distance * config.RING_ROAD_WEIGHT, "Inner Ring Road")

    for k in range((num_nodes * 2) // 3, num_nodes - 1):
        a, b = by_distance[k][1], by_distance[k + 1][1]
        distance = _distance(nodes, a, b)
        if distance < 4.0:
            graph.add_road(a, b, distance * config.RING_ROAD_WEIGHT, "Outer Ring Road")


def _create_shortcuts(graph: RoadGraph, rng: random.Random, nodes: List[_NodeData]):
    num_nodes = len(nodes)
    for k in range(min(config.MAX_SHORTCUTS, num_nodes // 5)):
        a = rng.randrange(num_nodes)
        b = rng.randrange(num_nodes)
        if a == b:
            continue
        distance = _distance(nodes, a, b)
        if 2.0 < distance < 6.0:
            graph.add_road(a, b, distance * config.SHORTCUT_WEIGHT, f"{rng.choice(SHORTCUT_NAMES)} {k + 1}")


def connected_components(graph: RoadGraph) -> List[List[int]]:
    """Vertex groups joined by roads in either direction, each sorted, ordered by smallest member"""
    parent = list(range(graph.vertex_count()))

    def find(x: int) -> int:
        while parent[x] != x:
            parent[x] = parent[parent[x]]
            x = parent[x]
        return x

    for vertex in range(graph.vertex_count()):
        for road in graph.neighbors(vertex):
            a, b = find(vertex), find(road.destination)
            if a != b:
                parent[a] = b

    groups = {}
    for vertex in range(graph.vertex_count()):
        groups.setdefault(find(vertex), []).append(vertex)
    return sorted(groups.values(), key=lambda group: group[0])


def _ensure_connectivity(graph: RoadGraph, nodes: List[_NodeData]):
    components = connected_components(graph)
    for k in range(len(components) - 1):
        a = components[k][0]
        b = components[k + 1][0]
        weight = _distance(nodes, a, b) * config.CONNECTOR_WEIGHT
        graph.add_road(a, b, weight, f"Connector Highway {k + 1}")

    if len(components) > 1:
        logger.debug("Joined %d disconnected components", len(components))


def generate_drivers(num_nodes: int) -> List[Driver]:
    """Seed driver roster with locations wrapped into the city's range"""
    drivers = []
    for driver_id, name, location, vehicle, rating, rides, available in SEED_DRIVERS:
        drivers.append(Driver(driver_id, name, location % num_nodes, available, vehicle, rating, rides))
    return drivers


def generate_city(num_nodes: int = config.DEFAULT_CITY_SIZE, seed: Optional[int] = None) -> CityData:
    """Generate a connected city graph plus the seed drivers"""
    if num_nodes <= 0:
        raise ValueError(f"City needs at least one location: {num_nodes}")

    rng = random.Random(seed)
    graph = RoadGraph(num_nodes)

    nodes = _create_nodes(graph, rng, num_nodes)
    _create_highways(graph, rng, nodes)
    _create_arterial_roads(graph, rng, nodes)
    _create_local_streets(graph, rng, nodes)
    _create_ring_roads(graph, nodes)
    _create_shortcuts(graph, rng, nodes)
    _ensure_connectivity(graph, nodes)

    logger.info("Generated city with %d locations and %d roads", num_nodes, graph.edge_count() // 2)
    return CityData(graph, generate_drivers(num_nodes))
