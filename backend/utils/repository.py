# backend/utils/repository.py
import logging
from decimal import Decimal
from typing import Any, List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.expression import ColumnElement
from sqlalchemy import func

from database import get_db, is_row_id
from models.product import Product
from utils.errors import NotFoundError, StorageError, ValidationError
from utils.money import parse_price, parse_price_or_none, parse_quantity, whole_number
from utils.product_codes import code_prefix, next_product_code

logger = logging.getLogger(__name__)

# Attempts at assigning a product code before giving up on a busy prefix
MAX_CODE_ATTEMPTS = 5


def _require_name(value: Any, field: str) -> str:
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{field} cannot be empty.")
    return text


def _as_row_id(identifier: str) -> Optional[int]:
    """Numeric identifiers such as "12" or "12.0"; None for codes and out-of-range ids."""
    number = whole_number(identifier)
    if number is None or not is_row_id(number):
        return None
    return int(number)


class ProductRepository:
    """Product table access bound to one SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    # ---- writes ----

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Database commit failed")
            raise StorageError("Database error") from e

    def create(
        self,
        category: Any,
        subcategory: Any,
        quantity: Any,
        wholesale_price: Any,
        retail_price: Any = None,
    ) -> Product:
        category = _require_name(category, "category")
        subcategory = _require_name(subcategory, "subcategory")
        code_prefix(category, subcategory)  # validates lengths before touching the store

        initial_quantity = parse_quantity(quantity, "quantity")
        wholesale: Decimal = parse_price(wholesale_price, "wholesale_price")
        retail = parse_price_or_none(retail_price)
        if retail is None:
            retail = wholesale

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            try:
                code = next_product_code(self.db, category, subcategory)
                product = Product(
                    category=category,
                    subcategory=subcategory,
                    original_quantity=initial_quantity,
                    current_quantity=initial_quantity,
                    wholesale_price=wholesale,
                    retail_price=retail,
                    product_code=code,
                    barcode_value=code,
                )
                product.recompute_totals()
                self.db.add(product)
                self.db.commit()
            except IntegrityError:
                # Another writer took the same code; read the sequence again
                self.db.rollback()
                logger.warning("Product code %s already taken (attempt %d)", code, attempt)
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.exception("Error generating product code or inserting product")
                raise StorageError("Failed to add product") from e

            self.db.refresh(product)
            logger.info("Product %s created with id=%s", product.product_code, product.id)
            return product

        raise StorageError(f"Could not assign a unique product code after {MAX_CODE_ATTEMPTS} attempts")

    def delete(self, product_id: int) -> int:
        """Remove one product. Its sales_log entries are left in place."""
        if not is_row_id(product_id):
            return 0
        try:
            deleted = self.db.query(Product).filter(Product.id == product_id).delete()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Error deleting product %s", product_id)
            raise StorageError("Database error") from e
        self.commit()
        if deleted:
            logger.info("Product id=%s deleted", product_id)
        return deleted

    # ---- reads ----

    def get(self, product_id: int, for_update: bool = False) -> Product:
        if not is_row_id(product_id):
            raise NotFoundError("Product not found")
        query = self.db.query(Product).filter(Product.id == product_id)
        if for_update:
            query = query.with_for_update()
        product = query.first()
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_by_identifier(self, identifier: str) -> Product:
        """Look up by numeric id first, then by product code ignoring case."""
        identifier = str(identifier).strip()
        product = None

        product_id = _as_row_id(identifier)
        if product_id is not None:
            product = self.db.query(Product).filter(Product.id == product_id).first()

        if not product and identifier:
            product = (
                self.db.query(Product)
                .filter(func.lower(Product.product_code) == identifier.lower())
                .first()
            )

        if not product:
            raise NotFoundError("Product not found")
        return product

    def list(self, category: Optional[str] = None, subcategory: Optional[str] = None) -> List[Product]:
        query = self.db.query(Product)
        if category:
            query = query.filter(Product.category == category)
        if subcategory:
            query = query.filter(Product.subcategory == subcategory)
        return query.order_by(Product.id.asc()).all()

    def _distinct(self, column: ColumnElement, *criteria) -> List[str]:
        values = (
            self.db.query(column)
            .filter(column != None, column != "", *criteria)  # noqa: E711
            .distinct()
            .order_by(column)
            .all()
        )
        return [v[0] for v in values]

    def categories(self) -> List[str]:
        return self._distinct(Product.category)

    def subcategories(self, category: Optional[str]) -> List[str]:
        if not category:
            return []
        return self._distinct(Product.subcategory, Product.category == category)


def get_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return ProductRepository(db)
