"""
Dijkstra's shortest path algorithm over a RoadGraph.

Uses IndexedMinHeap as the frontier, so each vertex holds a single tentative
entry that is lowered in place. The engine never mutates the graph.

Time complexity: O((V + E) log V). Space: O(V).
"""

import logging
import math
from typing import List, Optional, Tuple

from . import config
from .city import RoadGraph
from .errors import InvalidSourceError
from .logs import LogSink
from .min_heap import IndexedMinHeap

logger = logging.getLogger(__name__)


class ShortestPathTree:
    """Single-source distance and predecessor tables.

    Attributes:
        source: Vertex the search started from
        distances: Best distance per vertex, math.inf when unreached
        predecessors: Previous vertex on the best path, None for the source and unreached vertices
        processing_order: (vertex, distance) pairs in the order they were settled
        logs: Algorithm step messages
        heap_logs: Priority queue operation messages
    """

    def __init__(self, source: int, num_vertices: int):
        self.source = source
        self.distances: List[float] = [math.inf] * num_vertices
        self.predecessors: List[Optional[int]] = [None] * num_vertices
        self.processing_order: List[Tuple[int, float]] = []
        self.logs: List[str] = []
        self.heap_logs: List[str] = []

    def is_reachable(self, vertex: int) -> bool:
        return self.distances[vertex] != math.inf

    def to_dict(self):
        return {
            'source': self.source,
            'distances': [None if d == math.inf else d for d in self.distances],
            'predecessors': list(self.predecessors),
            'logs': list(self.logs)
        }


class PathResult:
    def __init__(self, source: int, destination: int):
        self.source = source
        self.destination = destination
        self.found = False
        self.path: List[int] = []
        self.distance: float = 0.0
        self.eta: float = 0.0
        self.road_names: List[str] = []
        self.logs: List[str] = []
        self.heap_logs: List[str] = []

    def to_dict(self):
        return {
            'found': self.found,
            'source': self.source,
            'destination': self.destination,
            'path': list(self.path),
            'distance': self.distance,
            'eta': self.eta,
            'roadNames': list(self.road_names)
        }


class ShortestPathEngine:
    def __init__(self, graph: RoadGraph, average_speed: float = config.AVERAGE_SPEED_KMH):
        self.graph = graph
        self.average_speed = average_speed

    def single_source_distances(self, source: int) -> ShortestPathTree:
        """Run Dijkstra from source over the whole reachable graph"""
        if not self.graph.location_exists(source):
            raise InvalidSourceError(source)

        tree = ShortestPathTree(source, self.graph.vertex_count())
        steps = LogSink(logger)
        heap_sink = LogSink(logger)

        tree.distances[source] = 0.0
        frontier = IndexedMinHeap(heap_sink)
        frontier.insert(source, 0.0)

        steps.record(f"Starting Dijkstra from node {source}")

        while frontier:
            current = frontier.extract_min()
            u = current.vertex

            # Stale entry: a better distance was recorded after this one was queued
            if current.distance > tree.distances[u]:
                continue

            tree.processing_order.append((u, current.distance))
            steps.record(f"Processing node {u} with distance {current.distance:.2f}")

            for road in self.graph.neighbors(u):
                v = road.destination
                candidate = tree.distances[u] + road.weight

                if candidate < tree.distances[v]:
                    steps.record(
                        f"  Relaxing edge {u} -> {v}: distance updated from "
                        f"{tree.distances[v]:.2f} to {candidate:.2f}"
                    )
                    tree.distances[v] = candidate
                    tree.predecessors[v] = u
                    frontier.decrease_key(v, candidate)

        steps.record(f"Dijkstra completed. Processed {len(tree.processing_order)} nodes.")

        tree.logs = steps.to_list()
        tree.heap_logs = heap_sink.to_list()
        return tree

    def shortest_path(self, source: int, destination: int) -> PathResult:
        """Find the shortest route between two known locations.

        Unknown endpoints and unreachable destinations produce a result with
        found=False rather than an exception.
        """
        result = PathResult(source, destination)

        if not self.graph.location_exists(source) or not self.graph.location_exists(destination):
            result.logs.append(f"Unknown endpoint for path {source} -> {destination}")
            return result

        tree = self.single_source_distances(source)
        result.logs = list(tree.logs)
        result.heap_logs = list(tree.heap_logs)

        if tree.distances[destination] == math.inf:
            result.logs.append(f"No path found from {source} to {destination}")
            return result

        result.path = self.reconstruct_path(source, destination, tree.predecessors)
        result.distance = tree.distances[destination]
        result.eta = self.estimate_eta(result.distance, self.average_speed)
        result.road_names = self._road_names(result.path)
        result.found = True

        result.logs.append(
            f"Path found: {' -> '.join(str(v) for v in result.path)} "
            f"(Distance: {result.distance:.2f} km, ETA: {result.eta:.1f} min)"
        )
        return result

    def _road_names(self, path: List[int]) -> List[str]:
        names = []
        for start, end in zip(path, path[1:]):
            for road in self.graph.neighbors(start):
                if road.destination == end:
                    names.append(road.name)
                    break
        return names

    def path_weight(self, path: List[int]) -> float:
        """Sum the cheapest road weight along each hop of a path"""
        total = 0.0
        for start, end in zip(path, path[1:]):
            weights = [road.weight for road in self.graph.neighbors(start) if road.destination == end]
            if not weights:
                return math.inf
            total += min(weights)
        return total

    @staticmethod
    def reconstruct_path(source: int, destination: int, predecessors: List[Optional[int]]) -> List[int]:
        """Walk predecessors back from destination and reverse"""
        path = []
        current: Optional[int] = destination
        while current is not None:
            path.append(current)
            if current == source:
                break
            current = predecessors[current]
        path.reverse()
        return path

    @staticmethod
    def estimate_eta(distance: float, average_speed: float = config.AVERAGE_SPEED_KMH) -> float:
        """Minutes needed to cover distance at average_speed"""
        return (distance / average_speed) * 60.0
