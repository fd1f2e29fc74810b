from typing import Literal

from pydantic import BaseModel, Field


class GeoPoint(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    model_config = {"frozen": True}


class WeatherSnapshot(BaseModel):
    """Current conditions at one location, read-only for the whole request."""

    temperature: float = 20.0  # °C
    precipitation_probability: float = Field(default=0.0, ge=0, le=100)  # %
    precipitation: float = 0.0  # mm
    visibility: float = Field(default=10.0, ge=0)  # km
    wind_speed: float = Field(default=10.0, ge=0)  # km/h
    cloud_cover: float = 0.0  # %

    model_config = {"frozen": True}


class WeatherScores(BaseModel):
    precipitation: float
    visibility: float
    temperature: float
    wind: float
    overall: float


class WeatherAlert(BaseModel):
    type: Literal["rain", "wind", "visibility"]
    message: str


class WeatherInsights(BaseModel):
    current: WeatherSnapshot
    scores: WeatherScores
    alerts: list[WeatherAlert] = []
