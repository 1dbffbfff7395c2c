import pytest

from campusroute.core.geo import GeoPoint, haversine_m, vertex_key


def test_haversine_thousandth_degree_latitude_at_equator_is_about_111m():
    d = haversine_m(GeoPoint(lon=0.0, lat=0.0), GeoPoint(lon=0.0, lat=0.001))
    assert d == pytest.approx(111.0, rel=0.01)


def test_haversine_is_symmetric_and_zero_for_same_point():
    a = GeoPoint(lon=116.3400, lat=39.9900)
    b = GeoPoint(lon=116.3420, lat=39.9910)
    assert haversine_m(a, a) == 0.0
    assert haversine_m(a, b) == pytest.approx(haversine_m(b, a))


def test_vertex_key_rounds_to_six_decimals():
    assert vertex_key(116.34, 39.99) == "116.340000,39.990000"
    # Differences below the sixth decimal collapse to the same identity.
    assert vertex_key(116.3400001, 39.9900004) == vertex_key(116.34, 39.99)
    assert vertex_key(116.340001, 39.99) != vertex_key(116.34, 39.99)


def test_vertex_key_precision_is_configurable():
    assert vertex_key(1.23456, 2.34567, precision=2) == "1.23,2.35"
