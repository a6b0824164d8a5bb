"""Schemas for the secondary listings provider used by the discovery feed."""
from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .properties import PropertyRecord


class _ProviderModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LocationLevel(_ProviderModel):
    id: int | None = None
    level: int = 0
    external_id: str | None = Field(default=None, alias="externalID")
    name: str
    slug: str | None = None


class Photo(_ProviderModel):
    id: int | None = None
    external_id: str | None = Field(default=None, alias="externalID")
    title: str | None = None
    order_index: int | None = Field(default=None, alias="orderIndex")
    url: str


class PhoneNumber(_ProviderModel):
    mobile: str | None = None
    phone: str | None = None


class DiscoveryProperty(_ProviderModel):
    """One hit from the provider's listing index."""

    id: int | str
    external_id: str = Field(alias="externalID")
    title: str = ""
    description: str | None = None
    price: float = 0
    rent_frequency: str | None = Field(default=None, alias="rentFrequency")
    rooms: int = 0
    baths: int = 0
    area: float = 0
    area_unit: str = Field(default="sqft", alias="areaUnit")
    purpose: str = "for-rent"
    property_type: str | None = Field(default=None, alias="propertyType")
    location: list[LocationLevel] = Field(default_factory=list)
    contact_name: str | None = Field(default=None, alias="contactName")
    phone_number: PhoneNumber | None = Field(default=None, alias="phoneNumber")
    photos: list[Photo] = Field(default_factory=list)
    cover_photo: Photo | None = Field(default=None, alias="coverPhoto")
    is_verified: bool = Field(default=False, alias="isVerified")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("external_id", mode="before")
    @classmethod
    def _stringify_external_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("price", "rooms", "baths", "area", mode="before")
    @classmethod
    def _absent_is_zero(cls, value: object) -> object:
        return 0 if value is None else value

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _epoch_seconds(cls, value: object) -> object:
        """The provider reports timestamps as epoch seconds."""

        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        return value

    def main_photo_url(self) -> str | None:
        if self.cover_photo is not None:
            return self.cover_photo.url
        if self.photos:
            return self.photos[0].url
        return None

    def location_string(self) -> str:
        """Most specific two location names, or a placeholder."""

        if not self.location:
            return "Location not specified"
        ordered = sorted(self.location, key=lambda item: item.level, reverse=True)
        return ", ".join(item.name for item in ordered[:2])

    def to_property_record(self) -> PropertyRecord:
        """Project the hit onto the record shape the listing engine works with."""

        city = next((item.name for item in self.location if item.level == 1), "")
        most_specific = max(self.location, key=lambda item: item.level, default=None)
        state = most_specific.name if most_specific is not None and most_specific.level > 1 else ""
        images = [photo.url for photo in self.photos]
        cover = self.main_photo_url()
        if cover and cover not in images:
            images.insert(0, cover)

        return PropertyRecord(
            id=self.external_id,
            title=self.title,
            description=self.description,
            price=int(round(self.price)),
            property_type=self.property_type or "",
            city=city,
            state=state,
            bedrooms=self.rooms,
            bathrooms=self.baths,
            sqft=self.area,
            area_unit=self.area_unit,
            images=images,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class DiscoveryPage(_ProviderModel):
    hits: list[DiscoveryProperty] = Field(default_factory=list)
    nb_hits: int = Field(default=0, alias="nbHits")
    page: int = 0
    nb_pages: int = Field(default=1, alias="nbPages")
    from_sample: bool = Field(default=False, description="True when served from bundled sample data")


class DiscoverySearchFilters(BaseModel):
    location_ids: list[str] | None = None
    purpose: str = Field(default="for-rent", pattern="^for-(rent|sale)$")
    min_price: int | None = Field(default=None, ge=0)
    max_price: int | None = Field(default=None, ge=0)
    rooms_min: int | None = Field(default=None, ge=0)
    rooms_max: int | None = Field(default=None, ge=0)
    baths_min: int | None = Field(default=None, ge=0)
    baths_max: int | None = Field(default=None, ge=0)
    area_min: float | None = Field(default=None, ge=0)
    area_max: float | None = Field(default=None, ge=0)
    category_external_id: str | None = None
    page: int = Field(default=1, ge=0)
    page_size: int = Field(default=20, ge=1, le=100)
    sort: str = "date-desc"


class LocationSuggestion(_ProviderModel):
    id: int | None = None
    name: str
    external_id: str = Field(alias="externalID")

    @field_validator("external_id", mode="before")
    @classmethod
    def _stringify_external_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value


class LocationSuggestionResponse(BaseModel):
    hits: list[LocationSuggestion]


class DiscoveryHomeResponse(BaseModel):
    featured: list[DiscoveryProperty]
    recommended: list[DiscoveryProperty]
    from_sample: bool = False
