import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

DEFAULT_TITLE = "Untitled Trip"

ACTIVITY_IDS = {
    # medium diesel car
    "car": "passenger_vehicle-vehicle_type_medium_car-fuel_source_diesel-engine_size_na-vehicle_age_na-vehicle_weight_na",
    # domestic passenger flight, distance only
    "air": "passenger_flight-route_type_domestic",
    # generic passenger rail
    "rail": "passenger_train-route_type_na-fuel_source_na",
}


class TransportMode(str, Enum):
    CAR = "car"
    AIR = "air"
    RAIL = "rail"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def activity_id(self) -> str:
        """Climatiq emission factor used for this mode."""
        return ACTIVITY_IDS[self.value]


class ActivityColor(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    INDIGO = "indigo"
    TEAL = "teal"
    GRAY = "gray"


DEFAULT_COLOR = ActivityColor.GREEN


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEntry(BaseModel):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, description="Stable entry identifier")
    title: str = Field(..., description="Free-text trip title")
    mode: TransportMode
    distance_km: float = Field(..., gt=0, description="Trip distance in kilometers")
    emission_kg: float = Field(..., description="Estimated CO₂e in kilograms, computed once")
    date: datetime = Field(default_factory=_utcnow, description="Creation timestamp")
    color: ActivityColor = DEFAULT_COLOR

    model_config = {"frozen": True}


class ActivityUpdate(BaseModel):
    title: str | None = None
    color: ActivityColor | None = None


class ActivityForm(BaseModel):
    title: str = Field(default="", description="Trip title, blank for a default")
    distance: str = Field(..., description="Distance in km as typed by the user")
    mode: TransportMode = TransportMode.CAR


class EmissionEstimate(BaseModel):
    co2e: float = Field(..., description="Estimated CO₂e")
    unit: str = Field(..., description="Unit of co2e, e.g. kg")


class EstimateRequest(BaseModel):
    distance_km: float = Field(..., gt=0)
    mode: TransportMode


class ActivityView(ActivityEntry):
    mode_display: str
    distance_display: str
    emission_display: str


class ActivityListResponse(BaseModel):
    entries: List[ActivityView]
    total_kg: float = Field(..., description="Sum of emission_kg over all entries")
    total_display: str


class TotalResponse(BaseModel):
    total_kg: float
    total_display: str


class PaletteResponse(BaseModel):
    colors: List[ActivityColor]
    default: ActivityColor


class SubmissionStateResponse(BaseModel):
    status: str
    error_message: str | None = None
