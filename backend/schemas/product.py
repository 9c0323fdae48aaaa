# backend/schemas/product.py
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict, field_validator, field_serializer
from typing import Any, Optional

from utils.money import parse_price_or_none, round_money
from utils.reconciler import (
    MetadataEdit, MetadataEdits, ProductChange, Restock, SaleAdjustment
)


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Schema for POST /api/add
class ProductCreate(BaseModel):
    category: str
    subcategory: str
    quantity: int = Field(..., ge=0, description="Initial stock level")
    wholesale_price: Decimal = Field(..., ge=0)
    # Missing, malformed or negative values fall back to wholesale_price
    retail_price: Optional[Decimal] = None

    @field_validator("retail_price", mode="before")
    @classmethod
    def lenient_retail_price(cls, value: Any) -> Optional[Decimal]:
        return parse_price_or_none(value)

    @field_validator("wholesale_price")
    @classmethod
    def round_wholesale(cls, value: Decimal) -> Decimal:
        return round_money(value)


class ProductCreated(BaseModel):
    id: int
    product_code: str


# Schema for POST /api/update/{id} - all fields optional.
# original_quantity wins over quantity: a restock, not a sale.
class ProductUpdateRequest(BaseModel):
    category: Optional[str] = None
    subcategory: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0, description="New shelf quantity")
    original_quantity: Optional[int] = Field(None, ge=0, description="New stocked-in quantity")
    wholesale_price: Optional[Decimal] = Field(None, ge=0)
    retail_price: Optional[Decimal] = Field(None, ge=0)

    @field_validator("wholesale_price", "retail_price")
    @classmethod
    def round_prices(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return round_money(value) if value is not None else None

    def to_change(self) -> ProductChange:
        edits = MetadataEdits(
            category=self.category,
            subcategory=self.subcategory,
            wholesale_price=self.wholesale_price,
            retail_price=self.retail_price,
        )
        if self.original_quantity is not None:
            return Restock(new_quantity=self.original_quantity, edits=edits)
        if self.quantity is not None:
            return SaleAdjustment(new_current_quantity=self.quantity, edits=edits)
        return MetadataEdit(edits=edits)


class UpdateResult(BaseModel):
    updated: int


class DeleteResult(BaseModel):
    deleted: int


# Full product representation
class ProductOut(ORMBase):
    id: int
    product_code: Optional[str] = None
    barcode_value: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    original_quantity: Optional[int] = None
    current_quantity: int
    wholesale_price: Decimal
    retail_price: Optional[Decimal] = None
    wholesale_total_price: Optional[Decimal] = None
    retail_total_price: Optional[Decimal] = None

    # Money goes out as JSON numbers
    @field_serializer(
        "wholesale_price", "retail_price", "wholesale_total_price", "retail_total_price"
    )
    def serialize_decimal(self, value: Optional[Decimal]) -> Optional[float]:
        return float(value) if value is not None else None
