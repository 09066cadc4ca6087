"""API v1 router aggregating all endpoints."""

from fastapi import APIRouter

from sabq.api.v1 import playground, templates

api_router = APIRouter()

api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(playground.router, prefix="/playground", tags=["playground"])
