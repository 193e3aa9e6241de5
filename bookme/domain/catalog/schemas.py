"""Service catalog schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator

Gender = Literal["MALE", "FEMALE", "UNISEX"]


def _positive(value, label: str):
    if value is not None and value <= 0:
        raise ValueError(f"{label} debe ser mayor que 0")
    return value


class ServiceCreate(BaseModel):
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    image: Optional[str] = None
    gender: Gender = "UNISEX"

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _positive(v, "El precio")

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _positive(v, "La duración")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("El nombre es requerido")
        return v.strip()


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    duration: Optional[int] = None
    image: Optional[str] = None
    gender: Optional[Gender] = None
    isActive: Optional[bool] = None

    @field_validator("price")
    @classmethod
    def validate_price(cls, v):
        return _positive(v, "El precio")

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        return _positive(v, "La duración")


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    duration: int
    image: Optional[str] = None
    gender: Optional[str] = None
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, service) -> "ServiceResponse":
        return cls(
            id=service.id,
            name=service.name,
            description=service.description,
            price=service.price,
            duration=service.duration,
            image=service.image,
            gender=service.gender,
            isActive=service.is_active,
            createdAt=service.created_at,
        )


class ServiceEnvelope(BaseModel):
    service: ServiceResponse


class ServiceListResponse(BaseModel):
    services: list[ServiceResponse]
