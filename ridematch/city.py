import logging
from typing import Dict, List, Tuple

from .errors import InvalidWeightError, LocationNotFoundError, OutOfRangeError

logger = logging.getLogger(__name__)


class Location:
    __slots__ = ('_id', '_name', '_latitude', '_longitude')

    def __init__(self, id: int, name: str, latitude: float, longitude: float):
        self._id = id
        self._name = name
        self._latitude = latitude
        self._longitude = longitude

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def latitude(self) -> float:
        return self._latitude

    @property
    def longitude(self) -> float:
        return self._longitude

    def __eq__(self, other):
        if not isinstance(other, Location):
            return NotImplemented
        return self.to_tuple() == other.to_tuple()

    def __hash__(self):
        return hash(self.to_tuple())

    def __repr__(self):
        return f"Location({self._id}, {self._name!r}, {self._latitude}, {self._longitude})"

    def to_tuple(self) -> Tuple[int, str, float, float]:
        return (self._id, self._name, self._latitude, self._longitude)

    def to_dict(self):
        return {
            'id': self._id,
            'name': self._name,
            'latitude': self._latitude,
            'longitude': self._longitude
        }


class Road:
    """A directed, weighted entry in a source location's adjacency list."""

    __slots__ = ('_destination', '_weight', '_name')

    def __init__(self, destination: int, weight: float, name: str = ""):
        self._destination = destination
        self._weight = float(weight)
        self._name = name

    @property
    def destination(self) -> int:
        return self._destination

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def name(self) -> str:
        return self._name

    def __eq__(self, other):
        if not isinstance(other, Road):
            return NotImplemented
        return (self._destination, self._weight, self._name) == (other._destination, other._weight, other._name)

    def __hash__(self):
        return hash((self._destination, self._weight, self._name))

    def __repr__(self):
        return f"Road(-> {self._destination}, {self._weight}, {self._name!r})"

    def to_dict(self):
        return {
            'destination': self._destination,
            'weight': self._weight,
            'roadName': self._name
        }


class RoadGraph:
    """Static city map stored as an adjacency list.

    The vertex count is fixed at construction. Location metadata is optional
    per vertex and registered with add_location. Roads can only be added.
    """

    def __init__(self, num_vertices: int):
        if num_vertices < 0:
            raise ValueError(f"Vertex count cannot be negative: {num_vertices}")
        self.num_vertices = num_vertices
        self.adjacency_list: List[List[Road]] = [[] for _ in range(num_vertices)]
        self.locations: Dict[int, Location] = {}

    def _check_vertex(self, vertex: int):
        if not isinstance(vertex, int) or vertex < 0 or vertex >= self.num_vertices:
            raise OutOfRangeError(vertex, self.num_vertices)

    def _check_road(self, src: int, dest: int, weight: float):
        self._check_vertex(src)
        self._check_vertex(dest)
        # NaN fails this comparison too
        if not weight >= 0:
            raise InvalidWeightError(weight)

    def vertex_count(self) -> int:
        return self.num_vertices

    def edge_count(self) -> int:
        """Number of directed adjacency entries"""
        return sum(len(roads) for roads in self.adjacency_list)

    def add_location(self, id: int, name: str, latitude: float, longitude: float):
        """Register display metadata for a vertex"""
        self._check_vertex(id)
        self.locations[id] = Location(id, name, latitude, longitude)

    def add_road(self, src: int, dest: int, weight: float, name: str = ""):
        """Add a two-way road between two locations"""
        self._check_road(src, dest, weight)
        self.adjacency_list[src].append(Road(dest, weight, name))
        self.adjacency_list[dest].append(Road(src, weight, name))

    def add_directed_road(self, src: int, dest: int, weight: float, name: str = ""):
        """Add a one-way road"""
        self._check_road(src, dest, weight)
        self.adjacency_list[src].append(Road(dest, weight, name))

    def neighbors(self, vertex: int) -> List[Road]:
        self._check_vertex(vertex)
        return list(self.adjacency_list[vertex])

    def location(self, id: int) -> Location:
        if id not in self.locations:
            raise LocationNotFoundError(id)
        return self.locations[id]

    def location_exists(self, id: int) -> bool:
        return id in self.locations

    def all_locations(self) -> List[Location]:
        """Registered locations ordered by id"""
        return [self.locations[loc_id] for loc_id in sorted(self.locations)]

    def validate(self) -> bool:
        """Check every road points at a valid vertex with a non-negative weight"""
        for src, roads in enumerate(self.adjacency_list):
            for road in roads:
                if road.destination < 0 or road.destination >= self.num_vertices:
                    logger.warning("Road %d -> %d points outside the graph", src, road.destination)
                    return False
                if not road.weight >= 0:
                    logger.warning("Road %d -> %d has negative weight %s", src, road.destination, road.weight)
                    return False
        return True

    def to_dict(self):
        """Convert graph data to dictionary for JSON serialization"""
        return {
            'numVertices': self.num_vertices,
            'nodes': [loc.to_dict() for loc in self.all_locations()],
            'edges': self._get_roads_data()
        }

    def _get_roads_data(self):
        """List each two-way road once, from its lower-numbered end"""
        roads = []

        for src, neighbors in enumerate(self.adjacency_list):
            for road in neighbors:
                if src < road.destination:
                    roads.append({
                        'source': src,
                        'destination': road.destination,
                        'weight': road.weight,
                        'roadName': road.name
                    })

        return roads
