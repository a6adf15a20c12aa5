"""Tour detail assembly from the common, intro and image records."""
from __future__ import annotations

import logging
from typing import Sequence

from ..data.catalog import ContentType, content_type_name
from ..schemas.tours import GalleryImage, OperatingInfo, TourDetailView
from ..schemas.upstream import TourDetail, TourImage, TourIntro
from .capabilities import ClientCapabilities
from .contacts import reconcile
from .coordinates import route_urls, to_coordinates
from .text import clean_field, is_blank, sanitize_text
from .tour_api import TourApiClient, TourApiError

logger = logging.getLogger(__name__)

_OPERATING_TIME_FIELDS = ("usetime", "usetimeculture", "usetimeleports")
_REST_DATE_FIELDS = ("restdate", "restdateculture", "restdateleports", "restdatefood")
_FEE_FIELDS = ("usefee", "usefeeleports", "usefeeculture")
_CAPACITY_FIELDS = ("accomcount", "accomcountculture", "accomcountleports")
_EXPERIENCE_FIELDS = ("expguide", "expagerange", "expagerangeleports")


async def get_tour_detail(client: TourApiClient, content_id: str) -> TourDetailView | None:
    """Return the assembled detail view, or None when the content id is unknown.

    Only the common record is required. Intro and image failures degrade to
    an empty section.
    """

    common = await client.get_detail_common(content_id)
    if common is None:
        return None

    intro: TourIntro | None = None
    if common.contenttypeid:
        try:
            intro = await client.get_detail_intro(content_id, common.contenttypeid)
        except TourApiError as exc:
            logger.warning("Intro lookup failed for %s: %s", content_id, exc)

    images: list[TourImage] = []
    try:
        images = await client.get_detail_images(content_id)
    except TourApiError as exc:
        logger.warning("Image lookup failed for %s: %s", content_id, exc)

    return build_detail_view(common, intro, images)


def build_detail_view(
    common: TourDetail,
    intro: TourIntro | None,
    images: Sequence[TourImage] = (),
) -> TourDetailView:
    contacts = reconcile(common, intro, common.contenttypeid)
    location = to_coordinates(common.to_item())
    operating_info = extract_operating_info(intro, common.contenttypeid)

    return TourDetailView(
        content_id=common.contentid,
        content_type_id=common.contenttypeid,
        content_type_name=content_type_name(common.contenttypeid),
        title=common.title,
        address=full_address(common),
        zipcode=clean_field(common.zipcode),
        overview=sanitize_text(common.overview) if not is_blank(common.overview) else None,
        image=primary_image(common),
        phone=contacts.phone,
        homepage=contacts.homepage,
        location=location,
        route=route_urls(location.lat, location.lng, common.title) if location else None,
        gallery=build_gallery(images),
        operating_info=None if operating_info.is_empty() else operating_info,
    )


def full_address(detail: TourDetail) -> str:
    parts = [part.strip() for part in (detail.addr1, detail.addr2) if not is_blank(part)]
    return " ".join(parts)


def primary_image(detail: TourDetail) -> str | None:
    for candidate in (detail.firstimage, detail.firstimage2):
        if candidate and _is_http_url(candidate):
            return candidate.strip()
    return None


def build_gallery(images: Sequence[TourImage]) -> list[GalleryImage]:
    gallery: list[GalleryImage] = []
    for image in images:
        if not image.originimgurl or not _is_http_url(image.originimgurl):
            continue
        gallery.append(
            GalleryImage(
                url=image.originimgurl.strip(),
                thumbnail=image.smallimageurl or None,
                name=clean_field(image.imagename),
            )
        )
    return gallery


def extract_operating_info(intro: TourIntro | None, content_type_id: str | None) -> OperatingInfo:
    """Collect the category-specific opening hours, fees and facility flags."""

    if intro is None:
        return OperatingInfo()

    content_type = ContentType.parse(content_type_id)
    if content_type is ContentType.RESTAURANT:
        operating_time = _first_value(intro, ("opentimefood",))
    else:
        operating_time = _first_value(intro, _OPERATING_TIME_FIELDS)

    is_lodging = content_type is ContentType.ACCOMMODATION
    return OperatingInfo(
        operating_time=operating_time,
        check_in_time=_first_value(intro, ("checkintime",)) if is_lodging else None,
        check_out_time=_first_value(intro, ("checkouttime",)) if is_lodging else None,
        rest_date=_first_value(intro, _REST_DATE_FIELDS),
        fee=_first_value(intro, _FEE_FIELDS),
        parking=_first_value(intro, ("parking",)),
        capacity=_first_value(intro, _CAPACITY_FIELDS),
        experience=_first_value(intro, _EXPERIENCE_FIELDS),
        baby_carriage=_first_value(intro, ("chkbabycarriage",)),
        pets=_first_value(intro, ("chkpet",)),
    )


async def copy_address(detail: TourDetailView, capabilities: ClientCapabilities) -> bool:
    """Copy the full address through the client; False when nothing was copied."""

    if is_blank(detail.address):
        return False
    return await capabilities.copy_text(detail.address)


def _first_value(intro: TourIntro, field_names: Sequence[str]) -> str | None:
    for name in field_names:
        value = clean_field(intro.field(name))
        if value is not None:
            return sanitize_text(value) or None
    return None


def _is_http_url(value: str) -> bool:
    lowered = value.strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")
