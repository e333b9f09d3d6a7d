"""Request parameter models for the search and listing pipelines.

Both models accept the camelCase names used on the wire (``placeId``,
``minPrice``, ``ignoreRobotsText`` …) as well as their snake_case field
names.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator


class StayParams(BaseModel):
    """Date range, guest counts and the robots.txt opt-out shared by both pipelines."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    checkin: Optional[str] = None
    checkout: Optional[str] = None
    adults: int = 1
    children: int = 0
    infants: int = 0
    pets: int = 0
    ignore_robots_text: bool = Field(False, alias="ignoreRobotsText")

    @field_validator("adults", "children", "infants", "pets", mode="before")
    @classmethod
    def _coerce_guest_count(cls, value: Any, info: ValidationInfo) -> int:
        """Coerce to a non-negative int; unparseable input falls back to the default."""
        default = cls.model_fields[info.field_name].default
        if value is None or isinstance(value, bool):
            return default
        try:
            count = int(float(str(value).strip()))
        except (TypeError, ValueError, OverflowError):
            return default
        return max(count, 0)

    @property
    def has_guests(self) -> bool:
        return self.adults + self.children > 0


class SearchParams(StayParams):
    location: Optional[str] = None
    place_id: Optional[str] = Field(None, alias="placeId")
    min_price: Optional[float] = Field(None, alias="minPrice")
    max_price: Optional[float] = Field(None, alias="maxPrice")
    cursor: Optional[str] = None

    @model_validator(mode="after")
    def _require_location_or_place(self) -> SearchParams:
        if not (self.location or self.place_id):
            raise ValueError("Either 'location' or 'placeId' is required")
        return self


class ListingParams(StayParams):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("id")
    @classmethod
    def _require_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("'id' must not be empty")
        return value
