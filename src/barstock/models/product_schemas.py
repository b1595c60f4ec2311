"""Pydantic schemas for catalog, inventory and legacy item APIs."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barstock.core.validators import sanitize_html, validate_price, validate_product_name


class ProductBase(BaseModel):
    """Base schema with common product fields."""

    name: str = Field(..., min_length=1, max_length=120)
    category: str | None = Field(None, max_length=60)
    selling_price: Decimal = Field(..., ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_product_name(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        """Strip markup; ampersands and quotes are kept as typed."""
        if not v:
            return None
        return sanitize_html(v)

    @field_validator("selling_price", mode="before")
    @classmethod
    def validate_selling_price(cls, v):
        return validate_price(v)


class ProductCreate(ProductBase):
    """Schema for adding a product together with its inventory row."""

    initial_quantity: int = Field(0, ge=0, description="Units on hand when the product is added")
    low_stock_threshold: int = Field(10, ge=0)


class ProductUpdate(BaseModel):
    """Schema for updating a product (partial update allowed)."""

    name: str | None = Field(None, min_length=1, max_length=120)
    category: str | None = Field(None, max_length=60)
    selling_price: Decimal | None = Field(None, ge=0)
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return validate_product_name(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        if not v:
            return None
        return sanitize_html(v)

    @field_validator("selling_price", mode="before")
    @classmethod
    def validate_selling_price(cls, v):
        if v is None:
            return None
        return validate_price(v)


class InventoryRead(BaseModel):
    """Live inventory row."""

    product_id: UUID
    quantity: int
    low_stock_threshold: int
    is_low_stock: bool
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductRead(BaseModel):
    """Schema for reading a product with its inventory."""

    id: UUID
    name: str
    category: str | None
    selling_price: Decimal
    is_active: bool
    created_at: datetime
    updated_at: datetime
    inventory: InventoryRead | None = None

    model_config = ConfigDict(from_attributes=True)


class InventoryUpdate(BaseModel):
    """Manual stock adjustment. At least one field must be set."""

    quantity: int | None = Field(None, ge=0)
    low_stock_threshold: int | None = Field(None, ge=0)
    reason: str | None = Field(None, max_length=120)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return sanitize_html(v)


class InventoryItem(BaseModel):
    """Inventory listing row joined with its product."""

    product_id: UUID
    name: str
    category: str | None
    selling_price: Decimal
    quantity: int
    low_stock_threshold: int
    low_stock: bool


class StockMovementRead(BaseModel):
    """One entry of a product's inventory history."""

    id: UUID
    product_id: UUID
    quantity_before: int
    quantity_after: int
    change_amount: int
    reason: str
    changed_by: UUID | None
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Legacy item shape: a product and its inventory row flattened together


class ItemCreate(BaseModel):
    """Legacy create payload."""

    name: str = Field(..., min_length=1, max_length=120)
    quantity: int = Field(..., ge=0)
    price: Decimal = Field(..., ge=0)
    low_stock_threshold: int = Field(10, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_product_name(v, field_name="Item name")

    @field_validator("price", mode="before")
    @classmethod
    def validate_item_price(cls, v):
        return validate_price(v)


class ItemRead(BaseModel):
    """Legacy item view."""

    id: UUID
    name: str
    quantity: int
    price: Decimal
    low_stock_threshold: int
    created_at: datetime
    updated_at: datetime


class ItemHistoryRead(BaseModel):
    """Legacy stock history entry."""

    id: UUID
    item_id: UUID
    item_name: str
    quantity_before: int
    quantity_after: int
    change_amount: int
    change_reason: str
    created_at: datetime
