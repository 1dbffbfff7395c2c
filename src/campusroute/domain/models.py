"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- road geometry coming out of the loader (`LineFeature`)
- route queries from the API/CLI (`RouteQuery`)
- routing output handed to renderers (`RouteResult`, `RouteResponse`)

Feature properties are carried as an opaque mapping; the routing core never
inspects them beyond the feature id.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from campusroute.core.geo import GeoPoint

Position = tuple[float, float]


def _to_position(value: Any) -> Position:
    # GeoJSON positions may carry a trailing elevation; only lon/lat are used.
    if not isinstance(value, (list, tuple)) or len(value) < 2:
        raise ValueError(f"position must have at least two numbers, got {value!r}")
    try:
        return (float(value[0]), float(value[1]))
    except (TypeError, ValueError) as e:
        raise ValueError(f"position must hold numbers, got {value!r}") from e


def _as_sequence(value: Any, what: str) -> list | tuple:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{what} must be a list, got {type(value).__name__}")
    return value


class Coordinate(BaseModel):
    """A longitude/latitude pair in decimal degrees."""

    lon: float = Field(..., ge=-180, le=180)
    lat: float = Field(..., ge=-90, le=90)

    def to_point(self) -> GeoPoint:
        return GeoPoint(lon=self.lon, lat=self.lat)


class LineStringGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: list[Position] = Field(default_factory=list)

    @field_validator("coordinates", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> list[Position]:
        return [_to_position(p) for p in _as_sequence(value, "coordinates")]

    def parts(self) -> list[list[Position]]:
        return [self.coordinates]


class MultiLineStringGeometry(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: list[list[Position]] = Field(default_factory=list)

    @field_validator("coordinates", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> list[list[Position]]:
        return [
            [_to_position(p) for p in _as_sequence(part, "line part")]
            for part in _as_sequence(value, "coordinates")
        ]

    def parts(self) -> list[list[Position]]:
        return self.coordinates


LineGeometry = Annotated[
    Union[LineStringGeometry, MultiLineStringGeometry],
    Field(discriminator="type"),
]


class LineFeature(BaseModel):
    """A road feature: single- or multi-part line plus its untouched attributes."""

    id: str = "unknown"
    geometry: LineGeometry
    properties: dict[str, Any] = Field(default_factory=dict)

    def parts(self) -> list[list[Position]]:
        return self.geometry.parts()


class RouteQuery(BaseModel):
    """Two user-picked coordinates to route between."""

    start: Coordinate
    end: Coordinate


class RouteResult(BaseModel):
    """A computed route: vertex coordinates from start to end (inclusive) and its length."""

    model_config = ConfigDict(frozen=True)

    path: list[Position]
    node_ids: list[str]
    distance_m: float = Field(..., ge=0)

    @computed_field
    @property
    def distance_km(self) -> float:
        return round(self.distance_m / 1000.0, 2)


class RouteResponse(BaseModel):
    """API envelope: either a route or the reason there is none."""

    found: bool
    reason: Literal["network_not_ready", "no_route"] | None = None
    route: RouteResult | None = None


class NetworkStatus(BaseModel):
    """Summary of the road graph currently in use."""

    ready: bool
    vertex_count: int = 0
    edge_count: int = 0
    feature_count: int = 0
    source: str | None = None
    loaded_at: datetime | None = None
