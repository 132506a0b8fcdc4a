"""Contract errors raised on API misuse.

Expected runtime outcomes (no driver, no route, empty queue) are reported as
structured results instead; see dispatch.py.
"""


class RideMatchError(Exception):
    pass


class OutOfRangeError(RideMatchError, IndexError):
    """A vertex or location id outside [0, vertex_count)."""

    def __init__(self, vertex: int, vertex_count: int):
        super().__init__(f"Invalid vertex index {vertex} (graph has {vertex_count} vertices)")
        self.vertex = vertex
        self.vertex_count = vertex_count


class InvalidWeightError(RideMatchError, ValueError):
    def __init__(self, weight: float):
        super().__init__(f"Road weight cannot be negative: {weight}")
        self.weight = weight


class LocationNotFoundError(RideMatchError, LookupError):
    def __init__(self, location_id: int):
        super().__init__(f"Location {location_id} not found")
        self.location_id = location_id


class InvalidSourceError(RideMatchError, ValueError):
    def __init__(self, source: int):
        super().__init__(f"Source node {source} does not exist")
        self.source = source
