"""Data schemas for the Yatra application."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

UserType = Literal["tourist", "driver", "guide"]
DestinationCategory = Literal["heritage", "nature", "adventure", "spiritual", "beach"]
VehicleType = Literal["sedan", "suv", "luxury", "tempo"]
RideStatus = Literal["pending", "accepted", "ongoing", "completed", "cancelled"]
GuideBookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]

USER_TYPES: Tuple[str, ...] = ("tourist", "driver", "guide")
DESTINATION_CATEGORIES: Tuple[str, ...] = ("heritage", "nature", "adventure", "spiritual", "beach")
ACTIVE_STATUSES = frozenset({"pending", "accepted", "confirmed", "ongoing"})

MIN_PASSENGERS = 1
MAX_PASSENGERS = 12
MIN_GUIDE_HOURS = 1
MAX_GUIDE_HOURS = 12


class _Record(BaseModel):
    """Base for rows read from Supabase; unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Profile(_Record):
    """Public profile row created alongside the auth user."""

    id: str
    full_name: str = ""
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    user_type: UserType = "tourist"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Destination(_Record):
    id: str
    name: str
    description: str = ""
    state: str = ""
    city: str = ""
    image_url: Optional[str] = None
    category: DestinationCategory
    rating: float = 0.0
    popular: bool = False
    created_at: Optional[datetime] = None

    def search_fields(self) -> List[str]:
        return [self.name, self.city, self.state]


class Driver(_Record):
    id: str
    user_id: Optional[str] = None
    vehicle_type: VehicleType
    vehicle_number: str = ""
    license_number: Optional[str] = None
    rating: float = 0.0
    total_rides: int = 0
    available: bool = True
    current_location: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:8]


class GuideProfile(_Record):
    """Subset of the guide's profile embedded by the ``profiles:user_id`` join."""

    full_name: str = ""
    avatar_url: Optional[str] = None


class Guide(_Record):
    id: str
    user_id: Optional[str] = None
    specialization: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    experience_years: int = 0
    hourly_rate: float
    rating: float = 0.0
    total_bookings: int = 0
    bio: Optional[str] = None
    available: bool = True

    @field_validator("specialization", "languages", mode="before")
    @classmethod
    def _coerce_none(cls, value: object) -> object:
        return [] if value is None else value


class GuideWithProfile(Guide):
    """Guide row with the embedded profile of its owner."""

    profiles: Optional[GuideProfile] = None

    @property
    def display_name(self) -> str:
        if self.profiles and self.profiles.full_name:
            return self.profiles.full_name
        return "Guide"

    def search_fields(self) -> List[str]:
        fields = [self.profiles.full_name] if self.profiles else []
        return fields + list(self.specialization) + list(self.languages)


class RideBooking(_Record):
    id: str
    tourist_id: str
    driver_id: Optional[str] = None
    pickup_location: str
    dropoff_location: str
    pickup_time: datetime
    passengers: int = 1
    vehicle_preference: str
    status: RideStatus = "pending"
    fare: Optional[float] = None
    created_at: Optional[datetime] = None


class DriverSummary(_Record):
    vehicle_type: str
    vehicle_number: str = ""
    rating: float = 0.0


class RideWithDriver(RideBooking):
    drivers: Optional[DriverSummary] = None

    @property
    def vehicle_label(self) -> str:
        return self.drivers.vehicle_type if self.drivers else self.vehicle_preference


class GuideBooking(_Record):
    id: str
    tourist_id: str
    guide_id: str
    destination_id: Optional[str] = None
    booking_date: date
    duration_hours: int
    status: GuideBookingStatus = "pending"
    total_cost: float
    created_at: Optional[datetime] = None

    @field_validator("booking_date", mode="before")
    @classmethod
    def _date_only(cls, value: object) -> object:
        if isinstance(value, str) and "T" in value:
            return value.split("T")[0]
        return value


class BookedGuide(_Record):
    id: Optional[str] = None
    hourly_rate: Optional[float] = None
    rating: Optional[float] = None
    profiles: Optional[GuideProfile] = None


class DestinationName(_Record):
    name: str


class GuideBookingDetails(GuideBooking):
    guides: Optional[BookedGuide] = None
    destinations: Optional[DestinationName] = None

    @property
    def guide_name(self) -> str:
        if self.guides and self.guides.profiles and self.guides.profiles.full_name:
            return self.guides.profiles.full_name
        return "Guide"


class VehicleOption(BaseModel):
    """Display metadata for a bookable vehicle type."""

    value: VehicleType
    label: str
    capacity: int
    rate_per_km: int

    @property
    def price_label(self) -> str:
        return f"₹{self.rate_per_km}/km"


VEHICLE_OPTIONS: Tuple[VehicleOption, ...] = (
    VehicleOption(value="sedan", label="Sedan", capacity=4, rate_per_km=12),
    VehicleOption(value="suv", label="SUV", capacity=6, rate_per_km=18),
    VehicleOption(value="luxury", label="Luxury", capacity=4, rate_per_km=30),
    VehicleOption(value="tempo", label="Tempo Traveller", capacity=12, rate_per_km=25),
)


def _required_text(value: object, label: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValueError(f"{label} is required")
    return text


class RideRequest(BaseModel):
    """Validated ride booking form."""

    pickup_location: str
    dropoff_location: str
    pickup_time: datetime
    passengers: int = Field(default=1, ge=MIN_PASSENGERS, le=MAX_PASSENGERS)
    vehicle_type: VehicleType = "sedan"

    @field_validator("pickup_location", mode="before")
    @classmethod
    def _pickup_required(cls, value: object) -> str:
        return _required_text(value, "Pickup location")

    @field_validator("dropoff_location", mode="before")
    @classmethod
    def _dropoff_required(cls, value: object) -> str:
        return _required_text(value, "Dropoff location")


class GuideBookingRequest(BaseModel):
    """Validated guide booking form."""

    booking_date: date
    duration_hours: int = Field(default=4, ge=MIN_GUIDE_HOURS, le=MAX_GUIDE_HOURS)
    destination_id: Optional[str] = None


__all__ = [
    "ACTIVE_STATUSES",
    "BookedGuide",
    "DESTINATION_CATEGORIES",
    "Destination",
    "DestinationName",
    "Driver",
    "DriverSummary",
    "Guide",
    "GuideBooking",
    "GuideBookingDetails",
    "GuideBookingRequest",
    "GuideProfile",
    "GuideWithProfile",
    "MAX_GUIDE_HOURS",
    "MAX_PASSENGERS",
    "MIN_GUIDE_HOURS",
    "MIN_PASSENGERS",
    "Profile",
    "RideBooking",
    "RideRequest",
    "RideWithDriver",
    "USER_TYPES",
    "VEHICLE_OPTIONS",
    "VehicleOption",
]
