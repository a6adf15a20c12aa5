"""Phone and homepage reconciliation across the common and intro records.

The common record is authoritative; the category-specific intro record is
only consulted when the common value is blank. Both resolvers are best-effort
heuristics over free text and never raise.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping
from urllib.parse import urlsplit

from ..data.catalog import ContentType
from ..schemas.upstream import TourDetail, TourIntro
from .text import is_blank

logger = logging.getLogger(__name__)

INFO_CENTER_FIELDS: Mapping[ContentType, str] = MappingProxyType(
    {
        ContentType.TOURIST_SPOT: "infocenter",
        ContentType.CULTURAL_FACILITY: "infocenterculture",
        ContentType.LEISURE_SPORTS: "infocenterleports",
        ContentType.ACCOMMODATION: "infocenterlodging",
        ContentType.SHOPPING: "infocentershopping",
        ContentType.RESTAURANT: "infocenterfood",
    }
)

HOMEPAGE_FIELDS: tuple[str, ...] = (
    "homepage",
    "homepageculture",
    "homepageleports",
    "homepagelodging",
    "homepageshopping",
    "homepagefood",
)

HOMEPAGE_SENTINELS = frozenset({"", "없음", "n/a", "-", "null", "undefined"})

_SEP = r"[-.\s]"
PHONE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"(?<!\d)(\d{{2,3}}){_SEP}(\d{{3,4}}){_SEP}(\d{{4}})(?!\d)"),
    # Not directly after a parenthesised prefix, which the next pattern handles.
    re.compile(rf"(?<![\d)])(?<!\)\s)(\d{{4}}){_SEP}(\d{{4}})(?!\d)"),
    re.compile(rf"\(\s*(\d{{2,3}})\s*\)\s*(\d{{3,4}}){_SEP}(\d{{4}})(?!\d)"),
)
_PHONE_NOISE = re.compile(r"[.\s()]")
_NON_DIGIT = re.compile(r"\D")

MIN_PHONE_DIGITS = 8
MAX_PHONE_DIGITS = 13

_HREF = re.compile(r"""href=["']([^"']+)["']""", re.IGNORECASE)
_ANCHOR_TEXT = re.compile(r"<a[^>]*>([^<]+)</a>", re.IGNORECASE)
_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)
_HOST = re.compile(r"^[^\s/?#@<>\"'\\]+$")


@dataclass(frozen=True, slots=True)
class ContactInfo:
    phone: str | None
    homepage: str | None


def reconcile(
    common: TourDetail,
    intro: TourIntro | None,
    content_type_id: str | None,
) -> ContactInfo:
    """Merge phone and homepage values from both detail records."""

    return ContactInfo(
        phone=resolve_phone(common.tel, intro, content_type_id),
        homepage=resolve_homepage(common.homepage, intro),
    )


def resolve_phone(common_phone: str | None, intro: TourIntro | None, content_type_id: str | None) -> str | None:
    if not is_blank(common_phone):
        return common_phone

    candidate = _info_center_candidate(intro, content_type_id)
    if candidate is None:
        return None
    return extract_phone(candidate)


def _info_center_candidate(intro: TourIntro | None, content_type_id: str | None) -> str | None:
    if intro is None:
        return None
    content_type = ContentType.parse(content_type_id)
    field_name = INFO_CENTER_FIELDS.get(content_type) if content_type else None
    if field_name is None:
        return None
    value = intro.field(field_name)
    if is_blank(value):
        return None
    return value


def extract_phone(candidate: str) -> str:
    """Pull a display phone number out of a free-text info-center field."""

    for pattern in PHONE_PATTERNS:
        match = pattern.search(candidate)
        if match:
            groups = [_PHONE_NOISE.sub("", group) for group in match.groups()]
            return "-".join(groups)

    digits = _NON_DIGIT.sub("", candidate)
    if MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        return format_digits(digits)

    logger.debug("No phone pattern in info-center value %r; using it verbatim", candidate)
    return candidate.strip()


def format_digits(digits: str) -> str:
    if len(digits) == 10:
        return f"{digits[:2]}-{digits[2:6]}-{digits[6:]}"
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    return digits


def resolve_homepage(common_homepage: str | None, intro: TourIntro | None) -> str | None:
    candidate = None if is_blank(common_homepage) else common_homepage
    if candidate is None and intro is not None:
        for field_name in HOMEPAGE_FIELDS:
            value = intro.field(field_name)
            if not is_blank(value):
                candidate = value
                break

    if candidate is None:
        return None
    return normalize_homepage(candidate)


def extract_url_from_html(html: str) -> str | None:
    """Return the link target of an embedded anchor tag, if any."""

    href = _HREF.search(html)
    if href and href.group(1).strip():
        return href.group(1).strip()

    text = _ANCHOR_TEXT.search(html)
    if text:
        url = text.group(1).strip()
        if _ABSOLUTE_URL.match(url):
            return url
    return None


def normalize_homepage(raw: str) -> str | None:
    """Turn a free-text homepage value into an absolute URL, or None."""

    url = raw.strip()
    if "<" in url and ">" in url:
        extracted = extract_url_from_html(url)
        if extracted:
            url = extracted
        else:
            logger.debug("Could not extract a URL from homepage markup %r", url)

    if url.lower() in HOMEPAGE_SENTINELS:
        return None

    if url.startswith("http://") or url.startswith("https://"):
        return url if is_valid_url(url) else None

    absolute = f"https://{url}"
    return absolute if is_valid_url(absolute) else None


def is_valid_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return False
    if parts.scheme not in {"http", "https"} or not hostname:
        return False
    if any(char.isspace() for char in url):
        return False
    return bool(_HOST.match(parts.netloc))
