# utils/import_sheet.py
"""
Replace the products table with the rows of a Google Sheet.

    python -m utils.import_sheet

The first sheet row holds the headers (e.g. "Category", "Original Quantity",
"Wholesale Price"); they are normalized to snake_case. The sales log is not
touched, so entries of replaced products stay in the monthly report.
"""
import logging
import re
from decimal import Decimal
from typing import Dict, List, Optional

import requests
from sqlalchemy.orm import Session

from config import settings
from database import SessionLocal, init_db, is_row_id
from models.product import Product
from utils.errors import ValidationError
from utils.money import parse_price_or_none
from utils.product_codes import next_product_code

logger = logging.getLogger(__name__)

SHEETS_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{sheet}"


def _normalize_header(key) -> str:
    return re.sub(r"\s+", "_", str(key or "").strip().lower())


def rows_to_items(values: List[List]) -> List[Dict[str, str]]:
    """Turn a values grid (header row first) into dicts keyed by normalized header."""
    if not values:
        return []
    headers, *rows = values
    keys = [_normalize_header(h) for h in headers]
    items = []
    for row in rows:
        item = {}
        for i, key in enumerate(keys):
            if not key:
                continue
            cell = row[i] if i < len(row) and row[i] is not None else ""
            item[key] = str(cell).strip()
        items.append(item)
    return items


def fetch_sheet_items(
    spreadsheet_id: Optional[str] = None,
    sheet: Optional[str] = None,
    api_key: Optional[str] = None,
) -> List[Dict[str, str]]:
    spreadsheet_id = spreadsheet_id or settings.SHEET_SPREADSHEET_ID
    sheet = sheet or settings.SHEET_NAME
    api_key = api_key or settings.GOOGLE_SHEETS_API_KEY
    if not spreadsheet_id or not api_key:
        raise ValidationError("SHEET_SPREADSHEET_ID and GOOGLE_SHEETS_API_KEY must be configured.")

    url = SHEETS_URL.format(spreadsheet_id=spreadsheet_id, sheet=sheet)
    r = requests.get(url, params={"key": api_key}, timeout=settings.SHEET_TIMEOUT_SECONDS)
    r.raise_for_status()
    values = r.json().get("values") or []
    if not values:
        logger.warning("No data found in the sheet or sheet is empty.")
    return rows_to_items(values)


# parseInt-style: leading digits count, the rest of the cell is ignored ("12 pcs" -> 12)
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def _parse_initial_quantity(item: Dict[str, str]) -> int:
    raw = item.get("original_quantity")
    if raw is None:
        logger.warning("Item missing 'original_quantity': %s", item)
        return 0
    match = _LEADING_INT.match(str(raw))
    number = Decimal(match.group(1)) if match else None
    if number is None or number < 0 or not is_row_id(number):
        logger.warning("Invalid quantity %r, defaulting to 0. Item: %s", raw, item)
        return 0
    return int(number)


def _parse_wholesale(item: Dict[str, str]) -> Decimal:
    raw = item.get("wholesale_price")
    if raw is None:
        logger.warning("Item missing 'wholesale_price': %s", item)
    price = parse_price_or_none(raw)
    if price is None:
        logger.warning("Invalid wholesale_price %r, defaulting to 0.00. Item: %s", raw, item)
        price = Decimal("0.00")
    return price


def build_product(item: Dict[str, str]) -> Product:
    """Product for one sheet row; product_code stays None unless the sheet has one."""
    quantity = _parse_initial_quantity(item)
    wholesale = _parse_wholesale(item)
    retail = parse_price_or_none(item.get("retail_price"))
    if retail is None:
        retail = wholesale

    code = item.get("product_code") or None
    product = Product(
        category=item.get("category") or None,
        subcategory=item.get("subcategory") or None,
        original_quantity=quantity,
        current_quantity=quantity,
        wholesale_price=wholesale,
        retail_price=retail,
        product_code=code,
        barcode_value=item.get("barcode_value") or code,
    )
    product.recompute_totals()
    return product


def _assign_code(db: Session, product: Product):
    if not (product.category and product.subcategory):
        return
    try:
        code = next_product_code(db, product.category, product.subcategory)
    except ValidationError:
        logger.warning("Cannot derive a product code for %s / %s", product.category, product.subcategory)
        return
    product.product_code = code
    if not product.barcode_value:
        product.barcode_value = code


def import_items(db: Session, items: List[Dict[str, str]]) -> int:
    """Clear products and insert items in one transaction; returns the row count."""
    if not items:
        logger.info("No items to import.")
        return 0

    logger.info("Importing %d items...", len(items))
    try:
        db.query(Product).delete()
        products = [build_product(item) for item in items]
        db.add_all(products)
        # Sheet codes go in first so generated ones continue after them
        db.flush()
        for product in products:
            if product.product_code is None:
                _assign_code(db, product)
                db.flush()
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Error during import, transaction rolled back")
        raise
    logger.info("Import complete. %d products committed.", len(items))
    return len(items)


def main():
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format="%(levelname)s %(name)s: %(message)s")
    init_db()
    db = SessionLocal()
    try:
        imported = import_items(db, fetch_sheet_items())
        print(f"✅ Imported {imported} products.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
