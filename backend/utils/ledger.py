# backend/utils/ledger.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, literal_column
from sqlalchemy.orm import Session

from database import is_row_id
from models.sale import SalesLogEntry
from utils.errors import ValidationError
from utils.money import round_money

logger = logging.getLogger(__name__)


def append_sale(
    db: Session,
    *,
    product_id: int,
    quantity_sold: int,
    sale_price_per_item: Decimal,
    wholesale_price_per_item_at_sale: Decimal,
    sale_timestamp: Optional[datetime] = None,
    commit: bool = True,
) -> SalesLogEntry:
    """
    Add one entry to the sales log. Entries are never updated afterwards.

    With commit=False the entry joins the caller's transaction.
    """
    if quantity_sold is None or quantity_sold <= 0:
        raise ValidationError("quantity_sold must be positive.")
    if sale_price_per_item is None or sale_price_per_item < 0:
        raise ValidationError("sale_price_per_item must be a non-negative number.")
    if wholesale_price_per_item_at_sale is None or wholesale_price_per_item_at_sale < 0:
        raise ValidationError("wholesale_price_per_item_at_sale must be a non-negative number.")

    entry = SalesLogEntry(
        product_id=product_id,
        quantity_sold=quantity_sold,
        sale_price_per_item=round_money(sale_price_per_item),
        wholesale_price_per_item_at_sale=round_money(wholesale_price_per_item_at_sale),
    )
    if sale_timestamp is not None:
        entry.sale_timestamp = sale_timestamp
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    return entry


def list_sales(db: Session, product_id: Optional[int] = None) -> List[SalesLogEntry]:
    query = db.query(SalesLogEntry)
    if product_id is not None:
        if not is_row_id(product_id):
            return []
        query = query.filter(SalesLogEntry.product_id == product_id)
    return query.order_by(SalesLogEntry.sale_timestamp.desc(), SalesLogEntry.log_id.desc()).all()


# "YYYY-MM" of the sale timestamp, in the dialect's own date formatting
def _month_expr(dialect: str):
    if dialect == "sqlite":
        return func.strftime(literal_column("'%Y-%m'"), SalesLogEntry.sale_timestamp)
    if dialect in ("mysql", "mariadb"):
        return func.date_format(SalesLogEntry.sale_timestamp, literal_column("'%Y-%m'"))
    # postgresql, oracle
    return func.to_char(SalesLogEntry.sale_timestamp, literal_column("'YYYY-MM'"))


def monthly_summary(db: Session) -> List[dict]:
    """Items sold, revenue, cost of goods and profit per calendar month, newest first."""
    month = _month_expr(db.get_bind().dialect.name).label("sale_month")
    rows = (
        db.query(
            month,
            func.sum(SalesLogEntry.quantity_sold).label("total_items_sold"),
            func.sum(SalesLogEntry.quantity_sold * SalesLogEntry.sale_price_per_item).label("total_revenue"),
            func.sum(SalesLogEntry.quantity_sold * SalesLogEntry.wholesale_price_per_item_at_sale).label("total_cogs"),
        )
        .group_by(literal_column("sale_month"))
        .order_by(literal_column("sale_month").desc())
        .all()
    )

    items = []
    for r in rows:
        revenue = round_money(r.total_revenue or 0)
        cogs = round_money(r.total_cogs or 0)
        items.append({
            "sale_month": r.sale_month,
            "total_items_sold": int(r.total_items_sold or 0),
            "total_revenue": revenue,
            "total_cogs": cogs,
            # Profit from the rounded figures so revenue - cogs == profit exactly
            "total_profit": revenue - cogs,
        })
    return items
