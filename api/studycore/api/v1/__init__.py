"""
API v1 router aggregation.
"""
from fastapi import APIRouter
from studycore.api.v1.endpoints import review_items, practice_sessions

api_router = APIRouter()

# Each router defines its own prefix
api_router.include_router(review_items.router)
api_router.include_router(practice_sessions.router)
