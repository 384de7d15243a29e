"""Main API router"""

from fastapi import APIRouter

from .routes import orders, admin, webhooks
from ..core.config import settings

# Main API router
api_router = APIRouter()

# Include all routes
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])


@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "version": settings.VERSION}
