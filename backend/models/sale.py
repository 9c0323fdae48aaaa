# backend/models/sale.py
from sqlalchemy import Column, Integer, Numeric, DateTime, CheckConstraint, func
from database import Base

# Append-only record of a completed sale.
# product_id has no foreign key: entries outlive the product they refer to.
class SalesLogEntry(Base):
    __tablename__ = "sales_log"

    log_id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, index=True)

    quantity_sold = Column(Integer, CheckConstraint("quantity_sold > 0"), nullable=False)

    # Prices captured at sale time, so later price changes do not rewrite history
    sale_price_per_item = Column(Numeric(12, 2), nullable=False)
    wholesale_price_per_item_at_sale = Column(Numeric(12, 2), nullable=False)

    sale_timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
