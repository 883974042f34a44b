"""Pydantic schemas for the business profile.

Working hours and cancellation policy reuse the engine's own models, so what
the owner saves is validated by exactly the rules the engine relies on.
"""

from uuid import UUID
from pydantic import BaseModel
from slotwise.scheduling.types import BusinessHours, CancellationPolicy


class BusinessOut(BaseModel):
    id: UUID
    name: str
    slug: str
    timezone: str
    is_active: bool

    class Config:
        from_attributes = True


class BusinessHoursConfig(BusinessHours):
    """Schema for reading and replacing a business's working hours."""


class CancellationPolicyConfig(CancellationPolicy):
    """Schema for reading and replacing a business's cancellation policy."""
