"""Availability domain schemas"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import hhmm_to_minutes, validate_hhmm

DayOfWeek = Literal["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY"]


class AvailableSlotsResponse(BaseModel):
    barberId: int
    date: date
    availableSlots: list[str]


class WeeklyAvailabilityItem(BaseModel):
    dayOfWeek: DayOfWeek
    startTime: str
    endTime: str
    isAvailable: bool = True

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        return validate_hhmm(v)

    @model_validator(mode="after")
    def check_range(self):
        if hhmm_to_minutes(self.startTime) >= hhmm_to_minutes(self.endTime):
            raise ValueError("La hora de inicio debe ser anterior a la hora de fin")
        return self


class WeeklyAvailabilityUpdate(BaseModel):
    availability: list[WeeklyAvailabilityItem]


class WeeklyAvailabilityResponse(BaseModel):
    id: int
    dayOfWeek: str
    startTime: str
    endTime: str
    isAvailable: bool


class DayOffCreate(BaseModel):
    date: date
    reason: Optional[str] = None


class DayOffResponse(BaseModel):
    id: int
    barberId: int
    date: date
    reason: Optional[str] = None
