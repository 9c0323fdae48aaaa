# backend/utils/product_codes.py
from typing import Optional

from sqlalchemy.orm import Session

from models.product import Product
from utils.errors import ValidationError

SEQUENCE_WIDTH = 3


def code_prefix(category: str, subcategory: str) -> str:
    """'Clothing', 'Shirts' -> 'CL-SHI-'."""
    cat = (category or "").strip()
    sub = (subcategory or "").strip()
    cat_prefix = cat[:2].upper()
    sub_prefix = sub[:3].upper()
    if len(cat_prefix) < 2 or len(sub_prefix) < 1:
        raise ValidationError("Category must be at least 2 chars, Subcategory at least 1 char.")
    return f"{cat_prefix}-{sub_prefix}-"


def _parse_sequence(code: str, prefix: str) -> Optional[int]:
    suffix = code[len(prefix):]
    if not suffix.isdecimal():
        return None
    return int(suffix)


def next_product_code(db: Session, category: str, subcategory: str) -> str:
    """
    Next free code for the category/subcategory prefix.

    Reads the highest existing sequence under the prefix, so two concurrent
    callers can get the same answer; the insert is guarded by the unique
    constraint on product_code and retried by the caller.
    """
    prefix = code_prefix(category, subcategory)
    rows = (
        db.query(Product.product_code)
        .filter(Product.product_code.startswith(prefix, autoescape=True))
        .all()
    )
    sequences = [s for s in (_parse_sequence(r[0], prefix) for r in rows if r[0]) if s is not None]
    next_seq = max(sequences) + 1 if sequences else 1
    return f"{prefix}{str(next_seq).zfill(SEQUENCE_WIDTH)}"
