"""Cheque domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

ManualChequeStatus = Literal["pending", "deposited", "cleared", "bounced"]


class ChequeCreate(BaseModel):
    """Schema for recording a new cheque"""

    cheque_number: str = Field(..., min_length=1, max_length=50)
    amount: float = Field(..., gt=0)
    payer_name: str = Field(..., min_length=1, max_length=255)
    cheque_date: date
    expected_clear_date: Optional[date] = None
    invoice_reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("cheque_number", "payer_name")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ChequeUpdate(BaseModel):
    """Schema for updating an existing cheque; omitted fields are left untouched"""

    amount: Optional[float] = Field(None, gt=0)
    payer_name: Optional[str] = Field(None, min_length=1, max_length=255)
    cheque_date: Optional[date] = None
    expected_clear_date: Optional[date] = None
    status: Optional[ManualChequeStatus] = None
    invoice_reference: Optional[str] = None
    notes: Optional[str] = None


class ChequeStatusUpdate(BaseModel):
    # Checked by the service so a bad value gets INVALID_STATUS rather than a schema error
    status: Optional[str] = None


class ChequeResponse(BaseModel):
    id: int
    cheque_number: str
    amount: float
    payer_name: str
    cheque_date: date
    expected_clear_date: Optional[date] = None
    actual_clear_date: Optional[date] = None
    status: str
    invoice_reference: Optional[str] = None
    notes: Optional[str] = None
    payment_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CalendarEntry(BaseModel):
    id: int
    cheque_number: str
    amount: float
    payer_name: str
    expected_clear_date: date
    status: str
    daysUntilDue: int
    invoice_reference: Optional[str] = None
    notes: Optional[str] = None
