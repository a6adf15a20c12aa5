"""Map view composition: markers, centre and zoom."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from ..schemas.tours import MapView, Marker
from ..schemas.upstream import TourItem
from .capabilities import SdkReadiness
from .coordinates import DEFAULT_CENTER, DEFAULT_ZOOM, calculate_center, marker_color, to_coordinates

logger = logging.getLogger(__name__)


def build_map_view(items: Iterable[TourItem], selected_id: str | None = None) -> MapView:
    """Markers for every item with a usable position, centred on their mean."""

    items = list(items)
    markers: list[Marker] = []
    seen: set[str] = set()
    for item in items:
        if item.contentid in seen:
            continue
        location = to_coordinates(item)
        if location is None:
            continue
        seen.add(item.contentid)
        markers.append(
            Marker(
                id=item.contentid,
                title=item.title,
                lng=location.lng,
                lat=location.lat,
                color=marker_color(item.contenttypeid),
                selected=item.contentid == selected_id,
            )
        )

    center = calculate_center(items) or DEFAULT_CENTER
    return MapView(center=center, zoom=DEFAULT_ZOOM, markers=markers)


async def render_map(view: MapView, readiness: SdkReadiness, timeout: float | None = None) -> Any:
    """Wait for the map SDK and hand it the view; returns the SDK's result."""

    sdk = await readiness.wait(timeout)
    logger.debug("Rendering %d markers at %s", len(view.markers), view.center)
    return sdk.render(view)
