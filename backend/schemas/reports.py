# schemas/reports.py
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, field_serializer


# One row of the monthly profit report
class MonthlySalesSummaryItem(BaseModel):
    sale_month: str
    total_items_sold: int
    total_revenue: Decimal
    total_cogs: Decimal
    total_profit: Decimal

    @field_serializer("total_revenue", "total_cogs", "total_profit")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)


# Raw sales log entry
class SalesLogEntryOut(BaseModel):
    log_id: int
    product_id: int
    quantity_sold: int
    sale_price_per_item: Decimal
    wholesale_price_per_item_at_sale: Decimal
    sale_timestamp: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("sale_price_per_item", "wholesale_price_per_item_at_sale")
    def serialize_decimal(self, value: Decimal) -> float:
        return float(value)
