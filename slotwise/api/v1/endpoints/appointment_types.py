"""Appointment type (service catalogue) endpoints."""

from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from slotwise.core.database import get_db
from slotwise.core.deps import get_current_business
from slotwise.models.appointment_type import AppointmentType
from slotwise.models.business import Business
from slotwise.schemas.appointment import MessageResponse
from slotwise.schemas.appointment_type import (
    AppointmentTypeCreate,
    AppointmentTypeOut,
    AppointmentTypeUpdate,
)
from slotwise.services.booking import get_active_business_by_slug

router = APIRouter()


async def _get_owned_type(db: AsyncSession, business_id: UUID, type_id: UUID) -> AppointmentType:
    result = await db.execute(
        select(AppointmentType).where(
            AppointmentType.id == type_id,
            AppointmentType.business_id == business_id,
        )
    )
    appointment_type = result.scalar_one_or_none()
    if not appointment_type:
        raise HTTPException(status_code=404, detail="Appointment type not found")
    return appointment_type


@router.get("/public/{business_slug}", response_model=list[AppointmentTypeOut])
async def list_public_appointment_types(business_slug: str, db: AsyncSession = Depends(get_db)):
    """Active services shown on the public booking page."""
    business = await get_active_business_by_slug(db, business_slug)
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")

    result = await db.execute(
        select(AppointmentType)
        .where(
            AppointmentType.business_id == business.id,
            AppointmentType.is_active.is_(True),
        )
        .order_by(AppointmentType.name)
    )
    return result.scalars().all()


@router.get("", response_model=list[AppointmentTypeOut])
async def list_appointment_types(
    include_inactive: bool = False,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    query = select(AppointmentType).where(AppointmentType.business_id == business.id)
    if not include_inactive:
        query = query.where(AppointmentType.is_active.is_(True))
    result = await db.execute(query.order_by(AppointmentType.name))
    return result.scalars().all()


@router.post("", response_model=AppointmentTypeOut, status_code=201)
async def create_appointment_type(
    payload: AppointmentTypeCreate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    appointment_type = AppointmentType(**payload.model_dump(), business_id=business.id)
    db.add(appointment_type)
    await db.commit()
    await db.refresh(appointment_type)
    return appointment_type


@router.put("/{type_id}", response_model=AppointmentTypeOut)
async def update_appointment_type(
    type_id: UUID,
    payload: AppointmentTypeUpdate,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Update a service. Existing appointments keep their booked duration and price."""
    appointment_type = await _get_owned_type(db, business.id, type_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(appointment_type, field, value)

    await db.commit()
    await db.refresh(appointment_type)
    return appointment_type


@router.delete("/{type_id}", response_model=MessageResponse)
async def delete_appointment_type(
    type_id: UUID,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the type disappears from booking but old appointments still reference it."""
    appointment_type = await _get_owned_type(db, business.id, type_id)
    appointment_type.is_active = False
    await db.commit()
    return MessageResponse(message="Appointment type deleted")
