"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class RouteConfigModel(BaseModel):
    travel_time_rate: float = Field(..., ge=0)
    distance_rate: float = Field(..., ge=0)
    per_site_rate: float = Field(..., ge=0)
    avg_speed_kmh: float = Field(..., gt=0)
    max_daily_drive_time: float = Field(..., ge=0)
    max_daily_distance: float = Field(..., ge=0)


class RouteConfigUpdate(BaseModel):
    travel_time_rate: Optional[float] = Field(None, ge=0)
    distance_rate: Optional[float] = Field(None, ge=0)
    per_site_rate: Optional[float] = Field(None, ge=0)
    avg_speed_kmh: Optional[float] = Field(None, gt=0)
    max_daily_drive_time: Optional[float] = Field(None, ge=0)
    max_daily_distance: Optional[float] = Field(None, ge=0)


class RouteRequest(BaseModel):
    consultant_id: int
    day: Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
    mode: Literal["fastest", "balanced"] = "fastest"
    persist: bool = False


class RouteStopModel(BaseModel):
    sequence: int
    site_id: int
    client_name: str
    latitude: float
    longitude: float


class EstimatedPayModel(BaseModel):
    time_pay: float
    distance_pay: float
    site_pay: float
    total: float


class RouteSuggestionModel(BaseModel):
    mode: Literal["fastest", "balanced"]
    stops: List[RouteStopModel]
    total_distance: float
    total_time: float
    estimated_pay: EstimatedPayModel
    cost_per_site: float
    warnings: List[str]


class RouteSuggestionResponse(BaseModel):
    consultant_id: int
    day: str
    suggestion: Optional[RouteSuggestionModel] = None
    message: Optional[str] = None
