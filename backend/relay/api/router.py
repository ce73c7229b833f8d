"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from relay.api import health, share, uploads

api_router = APIRouter()

# Include route modules
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(share.router, tags=["share"])
api_router.include_router(health.router, tags=["health"])
