# routes/reports.py
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database import get_db
from utils.ledger import list_sales, monthly_summary
from schemas.reports import MonthlySalesSummaryItem, SalesLogEntryOut

router = APIRouter(prefix="/api", tags=["Reports"])

# -----------------------------
# 1) Monthly profit summary
# -----------------------------
@router.get("/sales-summary/monthly", response_model=List[MonthlySalesSummaryItem])
def report_monthly_sales(db: Session = Depends(get_db)):
    return monthly_summary(db)

# -----------------------------
# 2) Raw sales log
# -----------------------------
@router.get("/sales-log", response_model=List[SalesLogEntryOut])
def report_sales_log(
    product_id: Optional[int] = Query(None, description="Only entries for this product id"),
    db: Session = Depends(get_db),
):
    return list_sales(db, product_id=product_id)
