"""Pydantic schemas for appointment types (services)."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID
from pydantic import BaseModel, Field
from typing import Optional


class AppointmentTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: Optional[str] = None
    duration_minutes: int = Field(60, gt=0, le=24 * 60)
    price: Decimal = Field(Decimal("0"), ge=0)
    color: str = "#667eea"


class AppointmentTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[Decimal] = Field(None, ge=0)
    color: Optional[str] = None


class AppointmentTypeOut(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    duration_minutes: int
    price: Decimal
    color: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
