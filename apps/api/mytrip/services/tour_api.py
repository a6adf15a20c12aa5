"""Async client for the Korea Tourism Organization KorService2 API."""
from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..core.config import settings
from ..data.catalog import AREAS
from ..schemas.upstream import AreaCodeRecord, TourDetail, TourImage, TourIntro, TourItem

logger = logging.getLogger(__name__)

SUCCESS_CODE = "0000"

RecordT = TypeVar("RecordT", bound=BaseModel)


class TourApiError(RuntimeError):
    """Raised when an upstream call fails or returns a non-success result code."""


class TourApiClient:
    """Thin wrapper around the upstream read operations.

    Args:
        api_key: Service key (defaults to ``settings.tour_api_key``).
        base_url: API root (defaults to ``settings.tour_api_base_url``).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.tour_api_key
        self._base_url = (base_url or settings.tour_api_base_url).rstrip("/")
        self._timeout = timeout or settings.tour_api_timeout
        self._transport = transport

    async def _request(self, endpoint: str, params: Mapping[str, Any]) -> dict:
        """Call an endpoint and return the ``body`` of a successful envelope."""

        if not self._api_key.strip():
            raise TourApiError("Tour API key missing. Set TOUR_API_KEY.")

        query: dict[str, Any] = {
            "serviceKey": self._api_key,
            "MobileOS": settings.tour_api_mobile_os,
            "MobileApp": settings.tour_api_mobile_app,
            "_type": "json",
        }
        query.update({key: value for key, value in params.items() if value is not None and value != ""})

        logger.info("Tour API call %s params=%s", endpoint, dict(params))
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get(endpoint, params=query)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TourApiError(f"Tour API request failed: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TourApiError(f"Tour API request failed: {exc}") from exc
        except ValueError as exc:
            raise TourApiError("Tour API returned a non-JSON response") from exc

        return _unwrap(payload)

    async def get_area_codes(self) -> list[AreaCodeRecord]:
        """Province list; the fixed catalog names take precedence over upstream names."""

        body = await self._request("/areaCode2", {"numOfRows": 50})
        upstream = _parse_items(body, AreaCodeRecord)

        known = {area.code for area in AREAS}
        merged = [AreaCodeRecord(code=area.code, name=area.name) for area in AREAS]
        merged.extend(record for record in upstream if record.code not in known)
        return merged

    async def get_sub_area_codes(self, area_code: str) -> list[AreaCodeRecord]:
        body = await self._request("/areaCode2", {"areaCode": area_code, "numOfRows": 100})
        return _parse_items(body, AreaCodeRecord)

    async def get_area_based_list(
        self,
        area_code: str | None = None,
        content_type_id: str | None = None,
        page_no: int = 1,
        num_of_rows: int = 10,
    ) -> tuple[list[TourItem], int]:
        body = await self._request(
            "/areaBasedList2",
            {
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "pageNo": page_no,
                "numOfRows": num_of_rows,
            },
        )
        return _parse_items(body, TourItem), _total_count(body)

    async def search_keyword(
        self,
        keyword: str,
        area_code: str | None = None,
        content_type_id: str | None = None,
        page_no: int = 1,
        num_of_rows: int = 10,
    ) -> tuple[list[TourItem], int]:
        body = await self._request(
            "/searchKeyword2",
            {
                "keyword": keyword,
                "areaCode": area_code,
                "contentTypeId": content_type_id,
                "pageNo": page_no,
                "numOfRows": num_of_rows,
            },
        )
        return _parse_items(body, TourItem), _total_count(body)

    async def get_detail_common(self, content_id: str) -> TourDetail | None:
        body = await self._request("/detailCommon2", {"contentId": content_id})
        items = _parse_items(body, TourDetail)
        return items[0] if items else None

    async def get_detail_intro(self, content_id: str, content_type_id: str) -> TourIntro | None:
        body = await self._request(
            "/detailIntro2",
            {"contentId": content_id, "contentTypeId": content_type_id},
        )
        items = _parse_items(body, TourIntro)
        return items[0] if items else None

    async def get_detail_images(self, content_id: str) -> list[TourImage]:
        body = await self._request("/detailImage2", {"contentId": content_id})
        return _parse_items(body, TourImage)


def _unwrap(payload: object) -> dict:
    """Validate the envelope and return its body."""

    if not isinstance(payload, dict):
        raise TourApiError("Malformed Tour API response")
    envelope = payload.get("response", payload)
    if not isinstance(envelope, dict):
        raise TourApiError("Malformed Tour API response")

    header = envelope.get("header")
    if not isinstance(header, dict):
        raise TourApiError("Tour API response has no header")

    code = str(header.get("resultCode", ""))
    if code != SUCCESS_CODE:
        raise TourApiError(f"Tour API error: {code} - {header.get('resultMsg', '')}")

    body = envelope.get("body") or {}
    if not isinstance(body, dict):
        raise TourApiError("Malformed Tour API response body")
    return body


def _raw_items(body: dict) -> list[dict]:
    items = body.get("items")
    if not isinstance(items, dict):
        # An empty result arrives as ``"items": ""``.
        return []
    item = items.get("item")
    if item is None:
        return []
    if isinstance(item, list):
        return [entry for entry in item if isinstance(entry, dict)]
    if isinstance(item, dict):
        return [item]
    return []


def _parse_items(body: dict, model: type[RecordT]) -> list[RecordT]:
    try:
        return [model.model_validate(entry) for entry in _raw_items(body)]
    except ValidationError as exc:
        raise TourApiError(f"Malformed {model.__name__} record") from exc


def _total_count(body: dict) -> int:
    try:
        return int(body.get("totalCount") or 0)
    except (TypeError, ValueError):
        return 0


def get_tour_client() -> TourApiClient:
    """FastAPI dependency returning a client configured from settings."""

    return TourApiClient()
