from pydantic import BaseModel


class EmissionFactor(BaseModel):
    activity_id: str
    data_version: str


class EmissionParameters(BaseModel):
    distance: float
    distance_unit: str = "km"
    passengers: int | None = None


class EmissionRequest(BaseModel):
    emission_factor: EmissionFactor
    parameters: EmissionParameters


class EmissionResponse(BaseModel):
    # Wrongly typed values are a decoding failure, not something to coerce
    model_config = {"strict": True}

    co2e: float
    co2e_unit: str
