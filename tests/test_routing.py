import pytest

from campusroute.core.geo import GeoPoint
from campusroute.domain.models import LineFeature, LineStringGeometry
from campusroute.network.graph import Edge, RoadGraph, Vertex, build_graph
from campusroute.network.routing import RouteCancelledError, deadline_after, plan_route, shortest_path


def _line(road_id, coords):
    return LineFeature(id=road_id, geometry=LineStringGeometry(coordinates=coords))


def _graph(points, edges):
    """Hand-built graph with explicit weights: `edges` is a list of (a, b, weight)."""
    vertices = {vid: Vertex(id=vid, point=GeoPoint(*lonlat)) for vid, lonlat in points.items()}
    for a, b, w in edges:
        vertices[a].edges.append(Edge(to=b, weight_m=w, road_id=f"{a}{b}"))
        vertices[b].edges.append(Edge(to=a, weight_m=w, road_id=f"{a}{b}"))
    return RoadGraph(vertices)


ABC = {"A": (0.0, 0.0), "B": (0.001, 0.0), "C": (0.002, 0.0)}


def test_three_vertex_path_goes_through_the_middle():
    graph = _graph(ABC, [("A", "B", 100.0), ("B", "C", 150.0)])
    route = shortest_path(graph, "A", "C")
    assert route is not None
    assert route.node_ids == ["A", "B", "C"]
    assert route.path == [(0.0, 0.0), (0.001, 0.0), (0.002, 0.0)]
    assert route.distance_m == 250.0
    assert route.distance_km == 0.25


def test_same_start_and_end_is_a_single_point():
    graph = _graph(ABC, [("A", "B", 100.0), ("B", "C", 150.0)])
    route = shortest_path(graph, "B", "B")
    assert route.node_ids == ["B"]
    assert route.path == [(0.001, 0.0)]
    assert route.distance_m == 0


def test_disconnected_components_have_no_route():
    points = {**ABC, "D": (1.0, 1.0), "E": (1.001, 1.0)}
    graph = _graph(points, [("A", "B", 100.0), ("B", "C", 150.0), ("D", "E", 10.0)])
    assert shortest_path(graph, "A", "E") is None
    assert shortest_path(graph, "E", "A") is None


def test_unknown_vertex_ids_have_no_route():
    graph = _graph(ABC, [("A", "B", 100.0)])
    assert shortest_path(graph, "A", "Z") is None
    assert shortest_path(graph, "Z", "A") is None


def test_cheaper_detour_beats_direct_edge():
    points = {**ABC, "D": (0.001, 0.001)}
    graph = _graph(points, [("A", "C", 500.0), ("A", "B", 100.0), ("B", "C", 150.0), ("A", "D", 10.0)])
    route = shortest_path(graph, "A", "C")
    assert route.node_ids == ["A", "B", "C"]
    assert route.distance_m == 250.0


def test_equal_cost_alternatives_are_resolved_deterministically():
    points = {"S": (0.0, 0.0), "M1": (0.001, 0.001), "M2": (0.001, -0.001), "T": (0.002, 0.0)}
    edges = [("S", "M2", 5.0), ("S", "M1", 5.0), ("M1", "T", 5.0), ("M2", "T", 5.0)]
    routes = {tuple(shortest_path(_graph(points, edges), "S", "T").node_ids) for _ in range(5)}
    assert len(routes) == 1
    assert shortest_path(_graph(points, edges), "S", "T").distance_m == 10.0


def test_plan_route_snaps_picks_and_crosses_features_at_shared_vertex():
    graph = build_graph(
        [
            _line("south", [(116.3400, 39.9900), (116.3410, 39.9900)]),
            _line("east", [(116.3410, 39.9900), (116.3410, 39.9910)]),
        ]
    )
    route = plan_route(graph, GeoPoint(lon=116.33995, lat=39.98998), GeoPoint(lon=116.34102, lat=39.99104))
    assert route is not None
    assert route.path == [(116.3400, 39.9900), (116.3410, 39.9900), (116.3410, 39.9910)]
    assert route.distance_m == pytest.approx(sum(e.weight_m for e in graph.neighbors(route.node_ids[1])))


def test_plan_route_on_empty_graph_returns_none():
    assert plan_route(build_graph([]), GeoPoint(lon=0, lat=0), GeoPoint(lon=1, lat=1)) is None


def test_cancel_check_aborts_search():
    graph = _graph(ABC, [("A", "B", 100.0), ("B", "C", 150.0)])
    with pytest.raises(RouteCancelledError):
        shortest_path(graph, "A", "C", should_cancel=lambda: True)


def test_deadline_after():
    assert deadline_after(None) is None
    assert deadline_after(60)() is False
    assert deadline_after(0)() is True
