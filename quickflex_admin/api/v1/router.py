from fastapi import APIRouter

from quickflex_admin.api.v1.endpoints import drivers, profiles

# Create API router
api_router = APIRouter()

# Profile routes first: their fixed paths must win over /drivers/{driver_id}
api_router.include_router(profiles.router, prefix="/drivers", tags=["Profiles"])
api_router.include_router(drivers.router, prefix="/drivers", tags=["Drivers"])

__all__ = ["api_router"]
