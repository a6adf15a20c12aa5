"""Coordinate conversion for upstream map positions.

The upstream API emits positions either as decimal degrees ("126.9812345")
or as fixed-point integers scaled by 10^7 ("1269812345"). Decimal degrees never
exceed 180 in magnitude, so anything at or above 1000 is treated as
fixed-point.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Iterable
from urllib.parse import quote

from ..core.config import settings
from ..data.catalog import ContentType
from ..schemas.tours import Coordinates, RouteLinks
from ..schemas.upstream import TourItem

logger = logging.getLogger(__name__)

FIXED_POINT_THRESHOLD = 1000
FIXED_POINT_SCALE = 10_000_000
MISSING_COORDINATE = "0"

DEFAULT_CENTER = Coordinates(lng=settings.default_center_lng, lat=settings.default_center_lat)
DEFAULT_ZOOM = settings.default_zoom

_LEADING_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

MARKER_COLORS = {
    ContentType.TOURIST_SPOT: "#3B82F6",
    ContentType.CULTURAL_FACILITY: "#8B5CF6",
    ContentType.FESTIVAL: "#EC4899",
    ContentType.TRAVEL_COURSE: "#10B981",
    ContentType.LEISURE_SPORTS: "#F59E0B",
    ContentType.ACCOMMODATION: "#6366F1",
    ContentType.SHOPPING: "#EAB308",
    ContentType.RESTAURANT: "#EF4444",
}
DEFAULT_MARKER_COLOR = "#6B7280"


class InvalidCoordinate(ValueError):
    """Raised internally when a raw coordinate cannot be parsed."""


def parse_coordinate(raw: object) -> float:
    """Parse the leading number of a raw coordinate value."""

    if isinstance(raw, bool) or raw is None:
        raise InvalidCoordinate(f"Invalid coordinate: {raw!r}")
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        match = _LEADING_FLOAT.match(str(raw))
        if match is None:
            raise InvalidCoordinate(f"Invalid coordinate: {raw!r}")
        value = float(match.group(1))
    if not math.isfinite(value):
        raise InvalidCoordinate(f"Invalid coordinate: {raw!r}")
    return value


def convert(raw: object) -> float:
    """Return decimal degrees for a raw coordinate, or 0.0 when unusable."""

    try:
        value = parse_coordinate(raw)
    except InvalidCoordinate as exc:
        logger.warning("%s", exc)
        return 0.0

    if abs(value) >= FIXED_POINT_THRESHOLD:
        return value / FIXED_POINT_SCALE
    return value


def has_coordinates(item: TourItem) -> bool:
    """True when both raw coordinates are present, numeric and non-zero."""

    for raw in (item.mapx, item.mapy):
        if not raw or raw == MISSING_COORDINATE:
            return False
        try:
            parse_coordinate(raw)
        except InvalidCoordinate:
            return False
    return True


def to_coordinates(item: TourItem) -> Coordinates | None:
    """Converted position of an item, or None when it has none."""

    if not has_coordinates(item):
        return None
    lng = convert(item.mapx)
    lat = convert(item.mapy)
    if lng == 0 or lat == 0:
        return None
    return Coordinates(lng=lng, lat=lat)


def calculate_center(items: Iterable[TourItem]) -> Coordinates | None:
    """Mean position of all items with usable coordinates."""

    valid = [item for item in items if has_coordinates(item)]
    if not valid:
        return None

    sum_lng = sum(convert(item.mapx) for item in valid)
    sum_lat = sum(convert(item.mapy) for item in valid)
    return Coordinates(lng=sum_lng / len(valid), lat=sum_lat / len(valid))


def marker_color(content_type_id: str | None) -> str:
    content_type = ContentType.parse(content_type_id)
    if content_type is None:
        return DEFAULT_MARKER_COLOR
    return MARKER_COLORS.get(content_type, DEFAULT_MARKER_COLOR)


def route_urls(lat: float, lng: float, title: str | None = None) -> RouteLinks:
    """Directions links for the Naver Map app and web client."""

    encoded_title = quote(title, safe="") if title else ""
    mobile = f"nmap://route/car?dlat={lat}&dlng={lng}"
    if encoded_title:
        mobile += f"&dname={encoded_title}"
    destination = encoded_title or quote("목적지", safe="")
    web = f"https://map.naver.com/v5/directions/-/-/-/{destination}?c={lng},{lat},0,0,dh"
    return RouteLinks(mobile=mobile, web=web)


def format_coordinates(lat: float, lng: float, precision: int = 6) -> str:
    return f"{lat:.{precision}f}, {lng:.{precision}f}"
