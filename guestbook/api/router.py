"""
API router combining all endpoints.
"""
from fastapi import APIRouter
from guestbook.api import admin, comments, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(comments.router, prefix="/api/comments", tags=["comments"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
