"""Records returned by the upstream tourism API.

Field names mirror the upstream JSON. Values are loosely typed upstream
(numbers arrive as strings or numbers depending on the endpoint), so every
field is coerced to a string on the way in.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class UpstreamRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        return value


class TourItem(UpstreamRecord):
    """One browsable point of interest (areaBasedList2 / searchKeyword2)."""

    contentid: str
    contenttypeid: str = ""
    title: str = ""
    addr1: str = ""
    addr2: str | None = None
    areacode: str | None = None
    mapx: str | None = None
    mapy: str | None = None
    firstimage: str | None = None
    firstimage2: str | None = None
    tel: str | None = None
    cat1: str | None = None
    cat2: str | None = None
    cat3: str | None = None
    modifiedtime: str = ""


class TourDetail(UpstreamRecord):
    """Common record (detailCommon2)."""

    contentid: str
    contenttypeid: str = ""
    title: str = ""
    addr1: str = ""
    addr2: str | None = None
    areacode: str | None = None
    zipcode: str | None = None
    tel: str | None = None
    homepage: str | None = None
    overview: str | None = None
    firstimage: str | None = None
    firstimage2: str | None = None
    mapx: str | None = None
    mapy: str | None = None
    modifiedtime: str = ""

    def to_item(self) -> TourItem:
        """Project the common record onto a listing item."""

        return TourItem(
            contentid=self.contentid,
            contenttypeid=self.contenttypeid,
            title=self.title,
            addr1=self.addr1,
            addr2=self.addr2,
            areacode=self.areacode,
            mapx=self.mapx,
            mapy=self.mapy,
            firstimage=self.firstimage,
            firstimage2=self.firstimage2,
            tel=self.tel,
            modifiedtime=self.modifiedtime,
        )


class TourIntro(UpstreamRecord):
    """Category-specific intro record (detailIntro2).

    Field names differ per category, so unknown fields are kept and read
    through :meth:`field`.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    contentid: str = ""
    contenttypeid: str = ""

    def field(self, name: str) -> str | None:
        value = getattr(self, name, None)
        if value is None:
            return None
        return str(value)


class TourImage(UpstreamRecord):
    """Gallery entry (detailImage2)."""

    contentid: str = ""
    imagename: str | None = None
    originimgurl: str | None = None
    smallimageurl: str | None = None
    serialnum: str | None = None


class AreaCodeRecord(UpstreamRecord):
    """Area or sub-area code (areaCode2)."""

    code: str
    name: str = ""
