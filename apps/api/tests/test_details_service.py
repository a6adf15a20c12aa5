"""Tests for detail assembly."""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from mytrip.schemas.upstream import TourDetail, TourImage, TourIntro
from mytrip.services import details as details_service
from mytrip.services.capabilities import NullCapabilities
from mytrip.services.tour_api import TourApiError


def _common(**overrides: str) -> TourDetail:
    fields = {
        "contentid": "126508",
        "contenttypeid": "12",
        "title": "경복궁",
        "addr1": "서울특별시 종로구 사직로 161",
        "addr2": "",
        "zipcode": "03045",
        "tel": "",
        "homepage": '<a href="http://www.royalpalace.go.kr" target="_blank">http://www.royalpalace.go.kr</a>',
        "overview": "조선 왕조의 법궁<br>광화문 &amp; 근정전",
        "firstimage": "",
        "firstimage2": "http://tong.visitkorea.or.kr/cms/resource/thumb.jpg",
        "mapx": "126.9769930325",
        "mapy": "37.5788222356",
    }
    fields.update(overrides)
    return TourDetail(**fields)


def _mock(result: object) -> AsyncMock:
    if isinstance(result, Exception):
        return AsyncMock(side_effect=result)
    return AsyncMock(return_value=result)


def _client(common: TourDetail | None, intro: object = None, images: object = ()) -> SimpleNamespace:
    return SimpleNamespace(
        get_detail_common=AsyncMock(return_value=common),
        get_detail_intro=_mock(intro),
        get_detail_images=_mock(list(images) if not isinstance(images, Exception) else images),
    )


@pytest.mark.asyncio
async def test_unknown_content_returns_none() -> None:
    client = _client(None)

    assert await details_service.get_tour_detail(client, "0") is None
    client.get_detail_intro.assert_not_awaited()


@pytest.mark.asyncio
async def test_detail_view_is_assembled_from_all_records() -> None:
    intro = TourIntro(
        contentid="126508",
        contenttypeid="12",
        infocenter="경복궁 관리소 02-3700-3900",
        usetime="09:00~18:00<br>",
        restdate="매주 화요일",
        parking="없음",
        chkbabycarriage="가능",
    )
    images = [
        TourImage(originimgurl="http://tong.visitkorea.or.kr/a.jpg", smallimageurl="http://tong.visitkorea.or.kr/a_s.jpg", imagename="근정전"),
        TourImage(originimgurl="ftp://example.com/b.jpg"),
    ]
    client = _client(_common(), intro, images)

    view = await details_service.get_tour_detail(client, "126508")

    assert view is not None
    client.get_detail_intro.assert_awaited_once_with("126508", "12")
    assert view.content_type_name == "관광지"
    assert view.address == "서울특별시 종로구 사직로 161"
    assert view.overview == "조선 왕조의 법궁\n광화문 & 근정전"
    assert view.image == "http://tong.visitkorea.or.kr/cms/resource/thumb.jpg"
    assert view.phone == "02-3700-3900"
    assert view.homepage == "http://www.royalpalace.go.kr"
    assert view.location is not None
    assert view.location.lat == pytest.approx(37.5788222356)
    assert view.route is not None
    assert view.route.mobile.startswith("nmap://route/car?dlat=")
    assert [image.name for image in view.gallery] == ["근정전"]
    assert view.operating_info is not None
    assert view.operating_info.operating_time == "09:00~18:00"
    assert view.operating_info.rest_date == "매주 화요일"
    assert view.operating_info.parking is None
    assert view.operating_info.baby_carriage == "가능"
    assert view.operating_info.check_in_time is None


@pytest.mark.asyncio
async def test_intro_and_image_failures_degrade() -> None:
    client = _client(
        _common(mapx="0", mapy="0"),
        TourApiError("intro down"),
        TourApiError("images down"),
    )

    view = await details_service.get_tour_detail(client, "126508")

    assert view is not None
    assert view.phone is None
    assert view.operating_info is None
    assert view.gallery == []
    assert view.location is None
    assert view.route is None


def test_restaurant_and_lodging_operating_fields() -> None:
    food = TourIntro(contenttypeid="39", opentimefood="11:00~21:00", usetime="ignored", restdatefood="연중무휴")
    lodging = TourIntro(contenttypeid="32", checkintime="15:00", checkouttime="11:00", accomcount="100명")

    food_info = details_service.extract_operating_info(food, "39")
    lodging_info = details_service.extract_operating_info(lodging, "32")

    assert food_info.operating_time == "11:00~21:00"
    assert food_info.rest_date == "연중무휴"
    assert lodging_info.check_in_time == "15:00"
    assert lodging_info.check_out_time == "11:00"
    assert lodging_info.capacity == "100명"
    assert details_service.extract_operating_info(None, "12").is_empty()


@pytest.mark.asyncio
async def test_copy_address_uses_client_capability() -> None:
    view = details_service.build_detail_view(_common(addr2="(세종로)"), None)
    copied: list[str] = []

    class Clipboard(NullCapabilities):
        async def copy_text(self, text: str) -> bool:
            copied.append(text)
            return True

    assert await details_service.copy_address(view, Clipboard()) is True
    assert copied == ["서울특별시 종로구 사직로 161 (세종로)"]
    assert await details_service.copy_address(view, NullCapabilities()) is False
