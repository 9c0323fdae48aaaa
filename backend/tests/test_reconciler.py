import unittest
from decimal import Decimal
from unittest import mock

from sqlalchemy.exc import SQLAlchemyError

from inventory_testcase import InventoryTestCase
from schemas.product import ProductUpdateRequest
from utils.errors import NotFoundError, StorageError, ValidationError
from utils.ledger import list_sales
from utils.reconciler import (
    MetadataEdit, MetadataEdits, Restock, SaleAdjustment, apply_change
)


class ChangeClassificationTest(unittest.TestCase):
    def test_original_quantity_means_restock(self):
        change = ProductUpdateRequest(original_quantity=20, quantity=3).to_change()
        self.assertIsInstance(change, Restock)
        self.assertEqual(change.new_quantity, 20)

    def test_quantity_means_sale_adjustment(self):
        change = ProductUpdateRequest(quantity=3, retail_price=9).to_change()
        self.assertIsInstance(change, SaleAdjustment)
        self.assertEqual(change.new_current_quantity, 3)
        self.assertEqual(change.price_at_sale, Decimal("9.00"))

    def test_no_quantity_means_metadata_edit(self):
        change = ProductUpdateRequest(category="Toys").to_change()
        self.assertIsInstance(change, MetadataEdit)
        self.assertEqual(change.edits.category, "Toys")


class ApplyChangeTest(InventoryTestCase):
    def setUp(self):
        super().setUp()
        self.product = self.add_product(quantity=10, wholesale_price=5, retail_price=8)
        self.pid = self.product.id

    def _reload(self):
        self.db.expire_all()
        return self.repo.get(self.pid)

    def assertTotalsHold(self, p):
        retail = p.retail_price if p.retail_price is not None else p.wholesale_price
        self.assertEqual(p.wholesale_total_price, p.current_quantity * p.wholesale_price)
        self.assertEqual(p.retail_total_price, p.current_quantity * retail)

    def test_sale_example(self):
        change = SaleAdjustment(7, MetadataEdits(retail_price=Decimal("9")))
        self.assertEqual(apply_change(self.repo, self.pid, change), 1)

        p = self._reload()
        self.assertEqual(p.current_quantity, 7)
        self.assertEqual(p.original_quantity, 10)
        self.assertEqual(p.retail_total_price, Decimal("63"))
        self.assertTotalsHold(p)

        entries = list_sales(self.db, product_id=self.pid)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].quantity_sold, 3)
        self.assertEqual(entries[0].sale_price_per_item, Decimal("9"))
        self.assertEqual(entries[0].wholesale_price_per_item_at_sale, Decimal("5"))

    def test_sale_without_price_uses_stored_retail(self):
        apply_change(self.repo, self.pid, SaleAdjustment(6))
        entry = list_sales(self.db)[0]
        self.assertEqual(entry.quantity_sold, 4)
        self.assertEqual(entry.sale_price_per_item, Decimal("8"))

    def test_cost_is_captured_before_wholesale_change(self):
        change = SaleAdjustment(8, MetadataEdits(wholesale_price=Decimal("6")))
        apply_change(self.repo, self.pid, change)

        p = self._reload()
        self.assertEqual(p.wholesale_price, Decimal("6"))
        self.assertEqual(p.wholesale_total_price, Decimal("48"))
        entry = list_sales(self.db)[0]
        self.assertEqual(entry.wholesale_price_per_item_at_sale, Decimal("5"))

    def test_raising_quantity_logs_nothing(self):
        for qty in (10, 12):
            apply_change(self.repo, self.pid, SaleAdjustment(qty))
        p = self._reload()
        self.assertEqual(p.current_quantity, 12)
        # Upward corrections may exceed the stocked-in amount
        self.assertEqual(p.original_quantity, 10)
        self.assertTotalsHold(p)
        self.assertEqual(list_sales(self.db), [])

    def test_restock_resets_both_quantities_without_logging(self):
        apply_change(self.repo, self.pid, SaleAdjustment(4))
        apply_change(self.repo, self.pid, Restock(2))

        p = self._reload()
        self.assertEqual(p.original_quantity, 2)
        self.assertEqual(p.current_quantity, 2)
        self.assertTotalsHold(p)
        self.assertEqual(len(list_sales(self.db)), 1)

    def test_metadata_edit_recomputes_totals(self):
        change = MetadataEdit(MetadataEdits(
            category="  Apparel ", retail_price=Decimal("10"), wholesale_price=Decimal("7.25"),
        ))
        apply_change(self.repo, self.pid, change)

        p = self._reload()
        self.assertEqual(p.category, "Apparel")
        self.assertEqual(p.current_quantity, 10)
        self.assertEqual(p.wholesale_total_price, Decimal("72.50"))
        self.assertEqual(p.retail_total_price, Decimal("100"))
        self.assertEqual(p.product_code, "CL-SHI-001")
        self.assertEqual(list_sales(self.db), [])

    def test_null_retail_falls_back_to_wholesale(self):
        self.product.retail_price = None
        self.db.commit()

        apply_change(self.repo, self.pid, MetadataEdit(MetadataEdits(wholesale_price=Decimal("3"))))
        p = self._reload()
        self.assertEqual(p.retail_price, Decimal("3"))
        self.assertEqual(p.retail_total_price, Decimal("30"))

    def test_invalid_changes_do_not_mutate(self):
        bad = [
            SaleAdjustment(-1),
            Restock(-5),
            MetadataEdit(MetadataEdits(subcategory="  ")),
            SaleAdjustment(3, MetadataEdits(retail_price=Decimal("-1"))),
        ]
        for change in bad:
            with self.subTest(change=change):
                with self.assertRaises(ValidationError):
                    apply_change(self.repo, self.pid, change)

        p = self._reload()
        self.assertEqual(p.current_quantity, 10)
        self.assertEqual(p.subcategory, "Shirts")
        self.assertEqual(list_sales(self.db), [])

    def test_unknown_product(self):
        with self.assertRaises(NotFoundError):
            apply_change(self.repo, 999, SaleAdjustment(1))

    def test_failed_ledger_write_rolls_back_product(self):
        with mock.patch("utils.reconciler.append_sale", side_effect=SQLAlchemyError("disk full")):
            with self.assertRaises(StorageError):
                apply_change(self.repo, self.pid, SaleAdjustment(5))

        p = self._reload()
        self.assertEqual(p.current_quantity, 10)
        self.assertEqual(p.retail_total_price, Decimal("80"))
        self.assertEqual(list_sales(self.db), [])


if __name__ == "__main__":
    unittest.main()
