import json

import pytest

from campusroute.domain.models import MultiLineStringGeometry
from campusroute.network.loader import load_line_features, parse_line_features


def _fc(*features):
    return {"type": "FeatureCollection", "features": list(features)}


def _feature(geometry, properties=None, **extra):
    return {"type": "Feature", "geometry": geometry, "properties": properties, **extra}


def test_parse_keeps_only_line_geometries():
    payload = _fc(
        _feature({"type": "LineString", "coordinates": [[116.34, 39.99], [116.341, 39.99]]}, {"id": "r1"}),
        _feature({"type": "MultiLineString", "coordinates": [[[116.34, 39.99], [116.34, 39.991]]]}, {"id": "r2"}),
        _feature({"type": "Point", "coordinates": [116.34, 39.99]}, {"id": "gate"}),
        _feature({"type": "Polygon", "coordinates": []}, {"id": "lawn"}),
        _feature(None, {"id": "nothing"}),
    )
    features = parse_line_features(payload)
    assert [f.id for f in features] == ["r1", "r2"]
    assert isinstance(features[1].geometry, MultiLineStringGeometry)


def test_feature_id_falls_back_to_top_level_id_then_unknown():
    line = {"type": "LineString", "coordinates": [[0, 0], [0, 1]]}
    features = parse_line_features(
        _fc(
            _feature(line, {"id": 7}),
            _feature(line, {"name": "no id"}, id="osm-42"),
            _feature(line, None),
        )
    )
    assert [f.id for f in features] == ["7", "osm-42", "unknown"]
    assert features[1].properties == {"name": "no id"}


def test_elevation_is_dropped_and_short_lines_are_kept():
    features = parse_line_features(
        _fc(
            _feature({"type": "LineString", "coordinates": [[116.34, 39.99, 52.0], [116.341, 39.99, 53.5]]}),
            _feature({"type": "LineString", "coordinates": [[116.34, 39.99]]}),
        )
    )
    assert features[0].parts() == [[(116.34, 39.99), (116.341, 39.99)]]
    assert features[1].parts() == [[(116.34, 39.99)]]


def test_malformed_feature_is_skipped_not_fatal():
    features = parse_line_features(
        _fc(
            _feature({"type": "LineString", "coordinates": [[116.34], [116.341, 39.99]]}, {"id": "bad"}),
            _feature({"type": "LineString", "coordinates": [[116.34, 39.99], [116.341, 39.99]]}, {"id": "good"}),
        )
    )
    assert [f.id for f in features] == ["good"]


def test_non_feature_collection_is_rejected():
    with pytest.raises(ValueError, match="FeatureCollection"):
        parse_line_features({"type": "Feature"})
    with pytest.raises(ValueError, match="FeatureCollection"):
        parse_line_features([])


def test_load_line_features_from_file(tmp_path):
    path = tmp_path / "roads.geojson"
    path.write_text(
        json.dumps(_fc(_feature({"type": "LineString", "coordinates": [[0, 0], [0, 1]]}, {"id": "r"}))),
        encoding="utf-8",
    )
    assert [f.id for f in load_line_features(path)] == ["r"]


def test_load_line_features_rejects_invalid_json(tmp_path):
    path = tmp_path / "roads.geojson"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid GeoJSON"):
        load_line_features(path)


def test_null_position_skips_only_that_feature():
    features = parse_line_features(
        _fc(
            _feature({"type": "LineString", "coordinates": [[None, 39.99], [116.341, 39.99]]}, {"id": "null-lon"}),
            _feature({"type": "LineString", "coordinates": [[116.34, 39.99], [116.341, 39.99]]}, {"id": "good"}),
        )
    )
    assert [f.id for f in features] == ["good"]


def test_scalar_coordinates_skip_only_that_feature():
    features = parse_line_features(
        _fc(
            _feature({"type": "LineString", "coordinates": 5}, {"id": "scalar"}),
            _feature({"type": "MultiLineString", "coordinates": [5, [[0, 0], [0, 1]]]}, {"id": "scalar-part"}),
            _feature({"type": "MultiLineString", "coordinates": "0,0 0,1"}, {"id": "string"}),
            _feature({"type": "LineString", "coordinates": [[116.34, 39.99], [116.341, 39.99]]}, {"id": "good"}),
        )
    )
    assert [f.id for f in features] == ["good"]
