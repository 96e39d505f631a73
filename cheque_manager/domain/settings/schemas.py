"""User settings schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserSettingsUpdate(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    companyName: Optional[str] = None
    defaultCurrency: Optional[str] = None
    emailNotifications: Optional[bool] = None
    smsNotifications: Optional[bool] = None


class UserSettingsResponse(BaseModel):
    email: str
    name: str
    phone: str
    companyName: str
    defaultCurrency: str
    emailNotifications: bool
    smsNotifications: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
