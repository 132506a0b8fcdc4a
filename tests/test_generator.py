from __future__ import annotations

import pytest

from ridematch.city import RoadGraph
from ridematch.dijkstra import ShortestPathEngine
from ridematch.generator import (
    connected_components,
    generate_city,
    generate_drivers,
    haversine_distance,
    ordinal_suffix,
)

from conftest import build_graph


def test_same_seed_builds_same_city() -> None:
    first = generate_city(30, seed=11)
    second = generate_city(30, seed=11)

    assert first.to_dict() == second.to_dict()


def test_generated_city_is_connected_and_valid() -> None:
    for seed in (1, 2, 3):
        graph = generate_city(50, seed=seed).graph

        assert graph.validate()
        assert connected_components(graph) == [list(range(50))]
        assert [location.id for location in graph.all_locations()] == list(range(50))


def test_every_location_is_reachable_from_location_zero() -> None:
    graph = generate_city(40, seed=5).graph
    tree = ShortestPathEngine(graph).single_source_distances(0)

    assert all(tree.is_reachable(vertex) for vertex in range(40))


def test_roads_are_non_negative_and_named() -> None:
    graph = generate_city(25, seed=8).graph

    for vertex in range(graph.vertex_count()):
        for road in graph.neighbors(vertex):
            assert road.weight >= 0
            assert road.name


def test_location_names_fall_back_past_the_named_list() -> None:
    graph = generate_city(60, seed=4).graph

    assert graph.location(0).name == "City Hall"
    assert graph.location(59).name == "Location 59"


def test_seed_drivers() -> None:
    drivers = generate_city(50, seed=1).drivers

    assert [d.id for d in drivers] == [f"D{n:03d}" for n in range(1, 13)]
    assert {d.id for d in drivers if not d.is_available} == {"D006", "D012"}


def test_driver_locations_wrap_into_small_cities() -> None:
    drivers = generate_drivers(4)
    assert all(0 <= d.current_location < 4 for d in drivers)

    city = generate_city(1, seed=0)
    assert city.graph.vertex_count() == 1
    assert all(d.current_location == 0 for d in city.drivers)


def test_city_needs_at_least_one_location() -> None:
    with pytest.raises(ValueError):
        generate_city(0)


def test_connected_components_groups_both_directions() -> None:
    graph = build_graph(6, [(0, 2, 1.0), (4, 5, 1.0)])
    graph.add_directed_road(3, 1, 1.0)

    assert connected_components(graph) == [[0, 2], [1, 3], [4, 5]]
    assert connected_components(RoadGraph(0)) == []


def test_haversine_distance() -> None:
    assert haversine_distance(40.0, -74.0, 40.0, -74.0) == 0.0
    assert haversine_distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


@pytest.mark.parametrize("n,suffix", [(1, "st"), (2, "nd"), (3, "rd"), (4, "th"), (11, "th"), (12, "th"), (13, "th"), (21, "st"), (92, "nd"), (100, "th")])
def test_ordinal_suffix(n: int, suffix: str) -> None:
    assert ordinal_suffix(n) == suffix
