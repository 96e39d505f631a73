"""User settings repository - the single settings row"""

from sqlalchemy.orm import Session

from ...models import UserSettings

SETTINGS_ROW_ID = 1


class SettingsRepository:
    """Repository for the account owner's settings"""

    @staticmethod
    def get_or_create(db: Session) -> UserSettings:
        settings = db.query(UserSettings).filter(UserSettings.id == SETTINGS_ROW_ID).first()
        if settings:
            return settings

        settings = UserSettings(id=SETTINGS_ROW_ID)
        db.add(settings)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def update(db: Session, settings: UserSettings, **updates) -> UserSettings:
        for key, value in updates.items():
            if hasattr(settings, key):
                setattr(settings, key, value)
        db.commit()
        db.refresh(settings)
        return settings

    @staticmethod
    def reset(db: Session) -> UserSettings:
        db.query(UserSettings).delete()
        db.commit()
        return SettingsRepository.get_or_create(db)
