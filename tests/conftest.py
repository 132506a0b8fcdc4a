from __future__ import annotations

import pytest

from ridematch.city import RoadGraph
from ridematch.dispatch import DispatchEngine
from ridematch.driver import Driver


def build_graph(num_vertices: int, roads: list[tuple[int, int, float]], names: bool = True) -> RoadGraph:
    graph = RoadGraph(num_vertices)
    for vertex in range(num_vertices):
        graph.add_location(vertex, f"Stop {vertex}", 40.0 + vertex * 0.01, -74.0 - vertex * 0.01)
    for src, dest, weight in roads:
        graph.add_road(src, dest, weight, f"Road {src}-{dest}" if names else "")
    return graph


@pytest.fixture
def diamond_graph() -> RoadGraph:
    # 0-1 (2), 1-2 (2), 2-3 (1), 0-2 (5): cheapest 0 -> 3 goes through 1
    return build_graph(4, [(0, 1, 2.0), (1, 2, 2.0), (2, 3, 1.0), (0, 2, 5.0)])


@pytest.fixture
def star_graph() -> RoadGraph:
    # Pickup at 0; vertex 1 is 3 away, vertex 2 is 1 away, 3 is a destination, 4 is isolated
    return build_graph(5, [(1, 0, 3.0), (2, 0, 1.0), (0, 3, 4.0)])


@pytest.fixture
def star_engine(star_graph: RoadGraph) -> DispatchEngine:
    engine = DispatchEngine(star_graph)
    engine.add_driver(Driver("A", "Far Driver", 1))
    engine.add_driver(Driver("B", "Near Driver", 2))
    return engine
