"""Cash domain schemas - Pydantic models for validation"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CashRecordCreate(BaseModel):
    """Schema for logging a cash receipt"""

    amount: float = Field(..., gt=0)
    date: date_type
    reference_person: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = Field(None, max_length=255)
    invoice_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class CashRecordUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    date: Optional[date_type] = None
    reference_person: Optional[str] = Field(None, max_length=255)
    purpose: Optional[str] = Field(None, max_length=255)
    invoice_reference: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class CashRecordResponse(BaseModel):
    id: int
    amount: float
    date: date_type
    reference_person: Optional[str] = None
    purpose: Optional[str] = None
    invoice_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
