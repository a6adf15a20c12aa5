"""Area, listing, detail and map endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..schemas import tours as tours_schema
from ..services import details as details_service
from ..services import listing as listing_service
from ..services.maps import build_map_view
from ..services.tour_api import TourApiClient, get_tour_client

router = APIRouter()


def listing_query(
    area_code: str | None = Query(default=None, alias="areaCode"),
    sub_area_code: str | None = Query(default=None, alias="sigunguCode"),
    content_type_id: str | None = Query(default=None, alias="contentTypeId"),
    sort: tours_schema.SortOption = "latest",
    keyword: str | None = None,
) -> listing_service.ListingQuery:
    """Build the listing descriptor from query parameters."""

    return listing_service.ListingQuery(
        area_code=area_code,
        sub_area_code=sub_area_code,
        content_type_ids=content_type_id,
        sort_by=sort,
        keyword=keyword,
    )


@router.get("/areas", response_model=tours_schema.AreaListResponse)
async def list_areas(client: TourApiClient = Depends(get_tour_client)) -> tours_schema.AreaListResponse:
    records = await client.get_area_codes()
    return tours_schema.AreaListResponse(
        areas=[tours_schema.AreaOut(code=record.code, name=record.name) for record in records]
    )


@router.get("/sub-areas", response_model=tours_schema.SubAreaListResponse)
async def list_sub_areas(
    area_code: str | None = Query(default=None, alias="areaCode"),
    client: TourApiClient = Depends(get_tour_client),
) -> tours_schema.SubAreaListResponse:
    """Return the districts of one area."""

    if not area_code or not area_code.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="areaCode is required")

    records = await client.get_sub_area_codes(area_code.strip())
    return tours_schema.SubAreaListResponse(
        sub_areas=[tours_schema.AreaOut(code=record.code, name=record.name) for record in records]
    )


@router.get("/tours", response_model=tours_schema.TourListResponse)
async def list_tours(
    query: listing_service.ListingQuery = Depends(listing_query),
    client: TourApiClient = Depends(get_tour_client),
) -> tours_schema.TourListResponse:
    """Return the first page of the listing, filtered and sorted."""

    page = await listing_service.fetch_listing(client, query)
    return tours_schema.TourListResponse(
        items=[listing_service.to_tour_card(item) for item in page.items],
        total_count=page.total_count,
        has_more=page.has_more,
    )


@router.get("/tours/{content_id}", response_model=tours_schema.TourDetailView)
async def get_tour(
    content_id: str,
    client: TourApiClient = Depends(get_tour_client),
) -> tours_schema.TourDetailView:
    detail = await details_service.get_tour_detail(client, content_id)
    if detail is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tour not found")
    return detail


@router.get("/map", response_model=tours_schema.MapView)
async def get_map(
    query: listing_service.ListingQuery = Depends(listing_query),
    selected: str | None = None,
    client: TourApiClient = Depends(get_tour_client),
) -> tours_schema.MapView:
    """Return markers for the current listing."""

    page = await listing_service.fetch_listing(client, query)
    return build_map_view(page.items, selected_id=selected)
