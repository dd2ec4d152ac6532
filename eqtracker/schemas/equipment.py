from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.catalog import normalize_category


class EquipmentCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = "Tools"
    location: Optional[str] = None
    notes: Optional[str] = None
    last_maintenance: Optional[date] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: str) -> str:
        return normalize_category(value)


class EquipmentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, value: Optional[str]) -> Optional[str]:
        return normalize_category(value) if value is not None else None


class OutOfServiceRequest(BaseModel):
    out_of_service: bool = True


class MaintenanceRequest(BaseModel):
    performed_on: Optional[date] = None


class EquipmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    equipment_code: str
    name: str
    category: str
    location: Optional[str]
    status: str
    out_of_service: bool
    last_maintenance: Optional[date]
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
