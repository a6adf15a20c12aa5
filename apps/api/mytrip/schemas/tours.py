"""Schemas for tour listing, detail and map responses."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SortOption = Literal["latest", "name"]


class AreaOut(BaseModel):
    code: str
    name: str


class AreaListResponse(BaseModel):
    areas: list[AreaOut]


class SubAreaListResponse(BaseModel):
    sub_areas: list[AreaOut]


class Coordinates(BaseModel):
    lng: float
    lat: float


class TourCard(BaseModel):
    content_id: str
    content_type_id: str
    content_type_name: str
    title: str
    address: str
    area_code: str | None = None
    image: str | None = None
    tel: str | None = None
    location: Coordinates | None = None
    modified_time: str = ""


class TourListResponse(BaseModel):
    items: list[TourCard]
    total_count: int
    has_more: bool


class RouteLinks(BaseModel):
    mobile: str
    web: str


class GalleryImage(BaseModel):
    url: str
    thumbnail: str | None = None
    name: str | None = None


class OperatingInfo(BaseModel):
    operating_time: str | None = None
    check_in_time: str | None = None
    check_out_time: str | None = None
    rest_date: str | None = None
    fee: str | None = None
    parking: str | None = None
    capacity: str | None = None
    experience: str | None = None
    baby_carriage: str | None = None
    pets: str | None = None

    def is_empty(self) -> bool:
        return not any(value for value in self.model_dump().values())


class TourDetailView(BaseModel):
    content_id: str
    content_type_id: str
    content_type_name: str
    title: str
    address: str
    zipcode: str | None = None
    overview: str | None = None
    image: str | None = None
    phone: str | None = None
    homepage: str | None = None
    location: Coordinates | None = None
    route: RouteLinks | None = None
    gallery: list[GalleryImage] = Field(default_factory=list)
    operating_info: OperatingInfo | None = None


class Marker(BaseModel):
    id: str
    title: str
    lng: float
    lat: float
    color: str
    selected: bool = False


class MapView(BaseModel):
    center: Coordinates
    zoom: int
    markers: list[Marker] = Field(default_factory=list)
