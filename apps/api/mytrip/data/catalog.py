"""Static catalogs for the upstream tourism API: areas and content types."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


class ContentType(str, enum.Enum):
    """Category codes used by the upstream API."""

    TOURIST_SPOT = "12"
    CULTURAL_FACILITY = "14"
    FESTIVAL = "15"
    TRAVEL_COURSE = "25"
    LEISURE_SPORTS = "28"
    ACCOMMODATION = "32"
    SHOPPING = "38"
    RESTAURANT = "39"

    @classmethod
    def parse(cls, value: str | None) -> "ContentType | None":
        """Return the enum member for a raw code, or None when unknown."""

        if value is None:
            return None
        try:
            return cls(str(value).strip())
        except ValueError:
            return None


CONTENT_TYPE_NAMES: Mapping[ContentType, str] = MappingProxyType(
    {
        ContentType.TOURIST_SPOT: "관광지",
        ContentType.CULTURAL_FACILITY: "문화시설",
        ContentType.FESTIVAL: "축제/행사",
        ContentType.TRAVEL_COURSE: "여행코스",
        ContentType.LEISURE_SPORTS: "레포츠",
        ContentType.ACCOMMODATION: "숙박",
        ContentType.SHOPPING: "쇼핑",
        ContentType.RESTAURANT: "음식점",
    }
)


def content_type_name(code: str | None) -> str:
    """Human readable category name; "기타" for unknown codes."""

    content_type = ContentType.parse(code)
    if content_type is None:
        return "기타"
    return CONTENT_TYPE_NAMES[content_type]


@dataclass(frozen=True, slots=True)
class Area:
    """Province-level area code."""

    code: str
    name: str


AREAS: tuple[Area, ...] = (
    Area(code="1", name="서울"),
    Area(code="2", name="인천"),
    Area(code="3", name="대전"),
    Area(code="4", name="대구"),
    Area(code="5", name="광주"),
    Area(code="6", name="부산"),
    Area(code="7", name="울산"),
    Area(code="8", name="세종"),
    Area(code="31", name="경기도"),
    Area(code="32", name="강원도"),
    Area(code="33", name="충청북도"),
    Area(code="34", name="충청남도"),
    Area(code="35", name="경상북도"),
    Area(code="36", name="경상남도"),
    Area(code="37", name="전라북도"),
    Area(code="38", name="전라남도"),
    Area(code="39", name="제주도"),
)

ALL_AREAS_SENTINEL = "all"
