"""User settings service"""

import logging

from sqlalchemy.orm import Session

from ...errors import ValidationError
from ...models import UserSettings
from ...shared.validators import validate_email
from .repository import SettingsRepository
from .schemas import UserSettingsResponse, UserSettingsUpdate

logger = logging.getLogger(__name__)

# Payload field -> column
FIELD_MAP = {
    "email": "email",
    "name": "name",
    "phone": "phone",
    "companyName": "company_name",
    "defaultCurrency": "default_currency",
    "emailNotifications": "email_notifications",
    "smsNotifications": "sms_notifications",
}


def to_response(settings: UserSettings) -> UserSettingsResponse:
    return UserSettingsResponse(
        email=settings.email or "",
        name=settings.name or "",
        phone=settings.phone or "",
        companyName=settings.company_name or "",
        defaultCurrency=settings.default_currency or "INR",
        emailNotifications=bool(settings.email_notifications),
        smsNotifications=bool(settings.sms_notifications),
        createdAt=settings.created_at,
        updatedAt=settings.updated_at,
    )


class SettingsService:
    """Service layer for the account owner's profile and notification preferences"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = SettingsRepository()

    def get_settings(self) -> UserSettings:
        return self.repo.get_or_create(self.db)

    def update_settings(self, data: UserSettingsUpdate) -> UserSettings:
        updates = data.model_dump(exclude_unset=True)

        if "email" in updates:
            try:
                updates["email"] = validate_email(updates["email"]) or ""
            except ValueError as e:
                raise ValidationError(str(e)) from e

        columns = {FIELD_MAP[key]: value for key, value in updates.items() if value is not None}
        settings = self.repo.update(self.db, self.repo.get_or_create(self.db), **columns)
        logger.info("✅ User settings saved")
        return settings

    def reset_settings(self) -> UserSettings:
        settings = self.repo.reset(self.db)
        logger.info("✅ User settings reset to defaults")
        return settings
