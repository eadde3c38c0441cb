from fastapi import APIRouter

from .bookings import router as bookings_router
from .notices import router as notices_router
from .payments import router as payments_router
from .users import router as users_router

api_router = APIRouter()
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(bookings_router, prefix="/bookings", tags=["bookings"])
api_router.include_router(notices_router, prefix="/notices", tags=["notices"])
api_router.include_router(payments_router, prefix="/payments", tags=["payments"])
