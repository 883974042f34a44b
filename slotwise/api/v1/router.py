from fastapi import APIRouter
from slotwise.api.v1.endpoints import appointments, appointment_types, businesses

api_router = APIRouter()
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(appointment_types.router, prefix="/appointment-types", tags=["appointment-types"])
api_router.include_router(businesses.router, prefix="/businesses", tags=["businesses"])
