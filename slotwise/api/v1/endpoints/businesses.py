"""Business profile endpoints: working hours and cancellation policy."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from slotwise.core.database import get_db
from slotwise.core.deps import get_current_business
from slotwise.models.business import Business
from slotwise.schemas.business import BusinessHoursConfig, BusinessOut, CancellationPolicyConfig

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/me", response_model=BusinessOut)
async def get_my_business(business: Business = Depends(get_current_business)):
    """Get the authenticated owner's business profile."""
    return business


@router.get("/me/hours", response_model=BusinessHoursConfig)
async def get_business_hours(business: Business = Depends(get_current_business)):
    """Get working hours, break and per-day overrides."""
    return business.business_hours()


@router.put("/me/hours", response_model=BusinessHoursConfig)
async def update_business_hours(
    hours: BusinessHoursConfig,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    """Replace working hours.

    Existing appointments are left alone even if they now fall outside the new
    hours; only future availability and admissions change.
    """
    business.apply_business_hours(hours)
    await db.commit()
    await db.refresh(business)

    logger.info(
        "Business %s hours set to %02d:00-%02d:00 on days %s",
        business.id, hours.start_hour, hours.end_hour, hours.working_days,
    )
    return business.business_hours()


@router.get("/me/cancellation-policy", response_model=CancellationPolicyConfig)
async def get_cancellation_policy(business: Business = Depends(get_current_business)):
    return business.cancellation_policy()


@router.put("/me/cancellation-policy", response_model=CancellationPolicyConfig)
async def update_cancellation_policy(
    policy: CancellationPolicyConfig,
    business: Business = Depends(get_current_business),
    db: AsyncSession = Depends(get_db),
):
    business.cancellation_enabled = policy.enabled
    business.cancellation_hours_before = policy.hours_before
    await db.commit()
    await db.refresh(business)
    return business.cancellation_policy()
