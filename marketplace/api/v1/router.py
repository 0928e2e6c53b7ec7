from fastapi import APIRouter

from marketplace.api.v1.endpoints.health import router as health_router
from marketplace.api.v1.endpoints.listings import router as listings_router
from marketplace.api.v1.endpoints.phone_unlocks import router as phone_unlocks_router
from marketplace.api.v1.endpoints.payments import router as payments_router
from marketplace.api.v1.endpoints.admin import router as admin_router
from marketplace.core.config import settings
from marketplace.schemas.common import ErrorResponse


# Every route may answer with the {error, details} body of the exception handlers
router = APIRouter(
    prefix=settings.api_prefix,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        404: {"model": ErrorResponse, "description": "Not found"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
)
router.include_router(health_router, tags=["health"])
router.include_router(listings_router, tags=["listings"])
router.include_router(phone_unlocks_router, tags=["phone-unlocks"])
router.include_router(payments_router, tags=["payments"])
router.include_router(admin_router, tags=["admin"])
