"""Versioned API router."""

from fastapi import APIRouter

from . import admin, auth, bookings, health, payments, pricing, users, vehicles

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(vehicles.router, prefix="/vehicles", tags=["vehicles"])
router.include_router(pricing.router, tags=["pricing"])
router.include_router(payments.router, tags=["payments"])
router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
router.include_router(admin.router, prefix="/admin", tags=["admin"])

__all__ = ["router"]
