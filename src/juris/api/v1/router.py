from fastapi import APIRouter

from src.juris.api.v1 import admin, records

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(admin.router)
api_router.include_router(records.router)
