"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from bookingdesk.api.v1 import bookings, currencies

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])

# Currencies
api_router.include_router(currencies.router, prefix="/currencies", tags=["Currencies"])
