# backend/utils/reconciler.py
"""
Stock and price updates for existing products.

An update arrives as exactly one of three changes:

* ``Restock``        - a fresh stock-in; original and current quantity are
                       both reset to the new level.
* ``SaleAdjustment`` - only the shelf quantity changes. When it goes down,
                       the difference is recorded in the sales log at the
                       price it was sold for and the cost it was bought at.
* ``MetadataEdit``   - category, subcategory or prices only.

Every change may also carry ``MetadataEdits``. Totals are recomputed on
every update, and the product write and the sales log entry are committed
together.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from models.product import Product
from utils.errors import StorageError, ValidationError
from utils.ledger import append_sale
from utils.repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass
class MetadataEdits:
    category: Optional[str] = None
    subcategory: Optional[str] = None
    wholesale_price: Optional[Decimal] = None
    retail_price: Optional[Decimal] = None


@dataclass
class Restock:
    new_quantity: int
    edits: MetadataEdits = field(default_factory=MetadataEdits)


@dataclass
class SaleAdjustment:
    new_current_quantity: int
    edits: MetadataEdits = field(default_factory=MetadataEdits)

    @property
    def price_at_sale(self) -> Optional[Decimal]:
        return self.edits.retail_price


@dataclass
class MetadataEdit:
    edits: MetadataEdits = field(default_factory=MetadataEdits)


ProductChange = Union[Restock, SaleAdjustment, MetadataEdit]


def _clean_edits(edits: MetadataEdits) -> MetadataEdits:
    category = subcategory = None
    if edits.category is not None:
        category = edits.category.strip()
        if not category:
            raise ValidationError("category cannot be empty.")
    if edits.subcategory is not None:
        subcategory = edits.subcategory.strip()
        if not subcategory:
            raise ValidationError("subcategory cannot be empty.")
    for name in ("wholesale_price", "retail_price"):
        value = getattr(edits, name)
        if value is not None and value < 0:
            raise ValidationError(f"{name} must be a non-negative number.")
    return MetadataEdits(category, subcategory, edits.wholesale_price, edits.retail_price)


def _check_quantity(value: Optional[int], name: str):
    if value is None or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer.")


def _apply_edits(product: Product, edits: MetadataEdits):
    if edits.category is not None:
        product.category = edits.category
    if edits.subcategory is not None:
        product.subcategory = edits.subcategory
    if edits.wholesale_price is not None:
        product.wholesale_price = edits.wholesale_price
    if edits.retail_price is not None:
        product.retail_price = edits.retail_price
    if product.retail_price is None:
        product.retail_price = product.wholesale_price


def apply_change(repo: ProductRepository, product_id: int, change: ProductChange) -> int:
    """Apply one change to a product; returns the number of products updated."""
    edits = _clean_edits(change.edits)
    if isinstance(change, Restock):
        _check_quantity(change.new_quantity, "original_quantity")
    elif isinstance(change, SaleAdjustment):
        _check_quantity(change.new_current_quantity, "quantity")

    db = repo.db
    product = repo.get(product_id, for_update=True)

    # Snapshot before any mutation: the sale is priced and costed as it stood
    prior_quantity = product.current_quantity or 0
    prior_wholesale = product.wholesale_price
    prior_retail = product.effective_retail_price

    _apply_edits(product, edits)
    if isinstance(change, Restock):
        product.original_quantity = change.new_quantity
        product.current_quantity = change.new_quantity
    elif isinstance(change, SaleAdjustment):
        product.current_quantity = change.new_current_quantity
    product.recompute_totals()

    try:
        if isinstance(change, SaleAdjustment) and change.new_current_quantity < prior_quantity:
            sold = prior_quantity - change.new_current_quantity
            price = change.price_at_sale if change.price_at_sale is not None else prior_retail
            append_sale(
                db,
                product_id=product.id,
                quantity_sold=sold,
                sale_price_per_item=price,
                wholesale_price_per_item_at_sale=prior_wholesale,
                commit=False,
            )
            logger.info("Sale recorded: product=%s qty=%d price=%s", product.product_code, sold, price)
        elif isinstance(change, Restock):
            logger.info("Product %s restocked to %d", product.product_code, change.new_quantity)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Error updating product %s", product_id)
        raise StorageError("Error updating product") from e
    return 1
