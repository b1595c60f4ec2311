"""Pydantic schemas for Sale API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from barstock.models.enums import PaymentMethod


class SaleCreate(BaseModel):
    """Schema for recording a sale."""

    product_id: UUID
    quantity: int = Field(..., gt=0, le=100000)
    payment_method: PaymentMethod = PaymentMethod.CASH


class SaleRead(BaseModel):
    """Schema for reading a sale from the ledger."""

    id: UUID
    product_id: UUID
    item_name: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    payment_method: PaymentMethod
    sold_by: UUID | None
    sold_at: datetime

    model_config = ConfigDict(from_attributes=True)
