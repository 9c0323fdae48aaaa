# backend/models/product.py
from sqlalchemy import Column, Integer, String, Numeric, CheckConstraint
from database import Base

# Model Product
# A single stock line. original_quantity is the stocked-in amount as of
# the last restock, current_quantity what is left on the shelf.
# Both *_total_price columns are derived from current_quantity.
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    product_code = Column(String, unique=True, nullable=True, index=True)
    barcode_value = Column(String, nullable=True)

    category = Column(String, index=True)
    subcategory = Column(String, index=True)

    # Stock levels
    original_quantity = Column(Integer, CheckConstraint("original_quantity >= 0"))
    current_quantity = Column(Integer, CheckConstraint("current_quantity >= 0"), nullable=False)

    # Unit prices; retail_price may be NULL, falling back to wholesale_price
    wholesale_price = Column(Numeric(12, 2), CheckConstraint("wholesale_price >= 0"), nullable=False)
    retail_price = Column(Numeric(12, 2), CheckConstraint("retail_price >= 0"), nullable=True)

    wholesale_total_price = Column(Numeric(12, 2))
    retail_total_price = Column(Numeric(12, 2))

    @property
    def effective_retail_price(self):
        return self.retail_price if self.retail_price is not None else self.wholesale_price

    def recompute_totals(self):
        """Re-derive both totals from current_quantity and the unit prices."""
        qty = self.current_quantity or 0
        self.wholesale_total_price = qty * self.wholesale_price
        self.retail_total_price = qty * self.effective_retail_price
