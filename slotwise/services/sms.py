"""Twilio SMS service for booking notifications.

Sends best-effort messages to the client:
1. Confirmation when a public booking is made
2. Notice when an appointment is cancelled

A failed or unconfigured SMS never fails the booking itself.
"""

import asyncio
import logging
from twilio.rest import Client
from twilio.base.exceptions import TwilioRestException
from slotwise.core.config import settings

logger = logging.getLogger(__name__)


def _get_twilio_client() -> Client:
    return Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)


async def send_booking_confirmation(
    customer_phone: str,
    business_name: str,
    appointment_date: str,
    start_time: str,
    service: str,
) -> bool:
    """Tell the client their booking request was received."""
    body = (
        f"Hi! Your {service} appointment with {business_name} on "
        f"{appointment_date} at {start_time} has been received. "
        f"We'll see you then."
    )
    return await _send_sms(customer_phone, body)


async def send_cancellation_notice(
    customer_phone: str,
    business_name: str,
    appointment_date: str,
    start_time: str,
) -> bool:
    """Tell the client their appointment was cancelled."""
    body = (
        f"Your appointment with {business_name} on {appointment_date} "
        f"at {start_time} has been cancelled."
    )
    return await _send_sms(customer_phone, body)


async def _send_sms(to: str, body: str) -> bool:
    """Send an SMS via Twilio. Returns True on success."""
    if not to:
        return False

    if not all([settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN, settings.TWILIO_PHONE_NUMBER]):
        logger.warning("Twilio credentials not configured, skipping SMS to %s", to)
        return False

    try:
        client = _get_twilio_client()
        message = await asyncio.to_thread(
            client.messages.create,
            body=body,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=to,
        )
        logger.info("SMS sent to %s, SID: %s", to, message.sid)
        return True
    except TwilioRestException as e:
        logger.error("Twilio error sending SMS to %s: %s", to, e)
        return False
    except Exception as e:
        logger.error("Unexpected error sending SMS to %s: %s", to, e)
        return False
