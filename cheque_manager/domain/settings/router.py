"""User settings router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from .schemas import UserSettingsUpdate
from .service import SettingsService, to_response

router = APIRouter(prefix="/user/settings", tags=["User Settings"])


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    """Dependency injection for SettingsService"""
    return SettingsService(db)


@router.get("")
@router.get("/", include_in_schema=False)
async def get_user_settings(service: SettingsService = Depends(get_settings_service)):
    return {"data": to_response(service.get_settings()), "error": None}


@router.put("")
@router.put("/", include_in_schema=False)
async def update_user_settings(
    data: UserSettingsUpdate,
    service: SettingsService = Depends(get_settings_service),
):
    return {"data": to_response(service.update_settings(data)), "error": None}


@router.post("/reset")
async def reset_user_settings(service: SettingsService = Depends(get_settings_service)):
    return {
        "data": to_response(service.reset_settings()),
        "message": "Settings reset to defaults",
        "error": None,
    }
