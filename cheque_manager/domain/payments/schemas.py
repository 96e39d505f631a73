"""Payment domain schemas"""

from typing import Any, Optional, Union

from pydantic import BaseModel


class CreateOrderRequest(BaseModel):
    # Checked by the service so a bad amount gets INVALID_AMOUNT
    amount: Optional[Union[float, str]] = None
    invoiceReference: Optional[str] = None
    chequeId: Optional[int] = None
    customerData: Optional[dict[str, Any]] = None


class VerifyPaymentRequest(BaseModel):
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    signature: Optional[str] = None
    chequeId: Optional[int] = None
