"""Schemas for property listings, filter criteria and favorites."""
from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL = "all"
SIZE_THRESHOLD = 1500


class PropertyStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"


class SizeBucket(str, enum.Enum):
    ALL = "all"
    UNDER = "under1500"
    ABOVE = "above1500"


class SortKey(str, enum.Enum):
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    NEWEST = "date-desc"
    OLDEST = "date-asc"
    AREA_DESC = "area-desc"
    AREA_ASC = "area-asc"


class Agent(BaseModel):
    name: str = ""
    phone: str = ""
    email: str = ""


class Coordinates(BaseModel):
    lat: float
    lng: float


class PropertyRecord(BaseModel):
    """One listing as returned by the property service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str
    title: str = ""
    description: str | None = None
    price: int = 0
    property_type: str = Field(default="", alias="type")
    city: str = ""
    state: str = ""
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    sqft: float = Field(default=0, ge=0)
    area_unit: str = Field(default="sqft", alias="areaUnit")
    images: list[str] = Field(default_factory=list)
    address: str | None = None
    zipcode: str | None = None
    coordinates: Coordinates | None = None
    features: list[str] = Field(default_factory=list)
    agent: Agent | None = None
    status: PropertyStatus = PropertyStatus.ACTIVE
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("price", "bedrooms", "bathrooms", "sqft", mode="before")
    @classmethod
    def _absent_is_zero(cls, value: object) -> object:
        """Treat missing numeric fields as zero."""

        if value is None or value == "":
            return 0
        return value

    @field_validator("price", mode="before")
    @classmethod
    def _round_price(cls, value: object) -> object:
        if isinstance(value, float):
            return int(round(value))
        return value

    @field_validator("title", "city", "state", "property_type", mode="before")
    @classmethod
    def _absent_is_blank(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("images", "features", mode="before")
    @classmethod
    def _absent_is_empty(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("status", mode="before")
    @classmethod
    def _fold_status(cls, value: object) -> object:
        if value is None:
            return PropertyStatus.ACTIVE
        if isinstance(value, str):
            return value.strip().lower()
        return value


class FilterCriteria(BaseModel):
    """The user's current filter selection. A new value is built on every change."""

    model_config = ConfigDict(frozen=True)

    search: str = ""
    property_type: str = ALL
    city: str = ALL
    min_bedrooms: int = Field(default=0, ge=0)
    min_bathrooms: int = Field(default=0, ge=0)
    size: SizeBucket = SizeBucket.ALL


class PropertyListEnvelope(BaseModel):
    success: bool
    data: list[PropertyRecord] = Field(default_factory=list)


class PropertyEnvelope(BaseModel):
    success: bool
    data: PropertyRecord | None = None


class FavoriteToggleEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    is_favorite: bool = Field(default=False, alias="isFavorite")


class PropertyListResponse(BaseModel):
    total: int
    items: list[PropertyRecord]
    cities: list[str] = Field(default_factory=list, description="Selector values from the unfiltered collection")
    property_types: list[str] = Field(default_factory=list)


class HomeFeedResponse(BaseModel):
    featured: list[PropertyRecord]
    recommended: list[PropertyRecord]


class ToggleFavoriteRequest(BaseModel):
    user_id: str
    property_id: str
    is_favorite: bool = Field(default=False, description="Membership currently shown to the user")


class ToggleFavoriteResponse(BaseModel):
    property_id: str
    is_favorite: bool
    message: str


class FavoritesResponse(BaseModel):
    user_id: str
    property_ids: list[str]
    items: list[PropertyRecord]
