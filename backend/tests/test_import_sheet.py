import unittest
from datetime import datetime
from decimal import Decimal
from unittest import mock

from inventory_testcase import InventoryTestCase
from sqlalchemy.exc import IntegrityError
from utils.errors import ValidationError
from utils.import_sheet import fetch_sheet_items, import_items, rows_to_items
from utils.ledger import append_sale, list_sales

SHEET_VALUES = [
    ["Category", "Subcategory", "Original Quantity", "Wholesale Price", "Retail Price", "Product Code"],
    ["Clothing", "Shirts", "12", "5", "8", "CL-SHI-010"],
    ["Clothing", "Shirts", "oops", "2.5", "", ""],
    ["Kitchen", "Mugs", "4", "-1", "3"],
]


class RowsToItemsTest(unittest.TestCase):
    def test_headers_are_normalized_and_cells_trimmed(self):
        items = rows_to_items([[" Wholesale  Price ", "", "Category"], [" 4.5 ", "x", " Toys "]])
        self.assertEqual(items, [{"wholesale_price": "4.5", "category": "Toys"}])

    def test_short_rows_are_padded(self):
        items = rows_to_items(SHEET_VALUES)
        self.assertEqual(items[2]["product_code"], "")
        self.assertEqual(len(items), 3)

    def test_empty_sheet(self):
        self.assertEqual(rows_to_items([]), [])


class FetchSheetItemsTest(unittest.TestCase):
    def test_fetches_values_from_api(self):
        response = mock.Mock()
        response.json.return_value = {"values": SHEET_VALUES}
        with mock.patch("utils.import_sheet.requests.get", return_value=response) as get:
            items = fetch_sheet_items("sheet-id", "inventory", "secret")

        url = get.call_args.args[0]
        self.assertIn("/spreadsheets/sheet-id/values/inventory", url)
        self.assertEqual(get.call_args.kwargs["params"], {"key": "secret"})
        response.raise_for_status.assert_called_once()
        self.assertEqual(items[0]["category"], "Clothing")

    def test_missing_configuration(self):
        with mock.patch("utils.import_sheet.settings") as settings:
            settings.SHEET_SPREADSHEET_ID = None
            settings.GOOGLE_SHEETS_API_KEY = None
            with self.assertRaises(ValidationError):
                fetch_sheet_items()


class ImportItemsTest(InventoryTestCase):
    def test_replaces_products_with_defaults_applied(self):
        old = self.add_product("Garden", "Tools")
        append_sale(
            self.db, product_id=old.id, quantity_sold=1, sale_price_per_item=Decimal("8"),
            wholesale_price_per_item_at_sale=Decimal("5"), sale_timestamp=datetime(2024, 1, 1),
        )

        self.assertEqual(import_items(self.db, rows_to_items(SHEET_VALUES)), 3)

        products = self.repo.list()
        self.assertEqual(len(products), 3)
        self.assertEqual(self.repo.categories(), ["Clothing", "Kitchen"])

        shirt, cheap, mug = products
        self.assertEqual(shirt.product_code, "CL-SHI-010")
        self.assertEqual(shirt.barcode_value, "CL-SHI-010")
        self.assertEqual(shirt.current_quantity, 12)
        self.assertEqual(shirt.retail_total_price, Decimal("96"))

        # Invalid quantity -> 0, blank retail -> wholesale, code continues the sheet's sequence
        self.assertEqual(cheap.original_quantity, 0)
        self.assertEqual(cheap.retail_price, Decimal("2.50"))
        self.assertEqual(cheap.product_code, "CL-SHI-011")

        # Negative wholesale -> 0, no code column in the row -> generated
        self.assertEqual(mug.wholesale_price, Decimal("0"))
        self.assertEqual(mug.retail_price, Decimal("3"))
        self.assertEqual(mug.retail_total_price, Decimal("12"))
        self.assertEqual(mug.product_code, "KI-MUG-001")

        # Ledger is untouched
        self.assertEqual(len(list_sales(self.db)), 1)

    def test_duplicate_codes_roll_back_everything(self):
        existing_id = self.add_product().id
        values = [
            ["category", "subcategory", "original_quantity", "wholesale_price", "product_code"],
            ["Toys", "Cars", "1", "1", "TO-CAR-001"],
            ["Toys", "Cars", "1", "1", "TO-CAR-001"],
        ]
        with self.assertRaises(IntegrityError):
            import_items(self.db, rows_to_items(values))

        self.db.expire_all()
        self.assertEqual([p.id for p in self.repo.list()], [existing_id])

    def test_generated_codes_skip_codes_from_later_rows(self):
        values = [
            ["category", "subcategory", "original_quantity", "wholesale_price", "product_code"],
            ["Clothing", "Shirts", "1", "1", ""],
            ["Clothing", "Shirts", "1", "1", "CL-SHI-001"],
        ]
        self.assertEqual(import_items(self.db, rows_to_items(values)), 2)

        generated, coded = self.repo.list()
        self.assertEqual(coded.product_code, "CL-SHI-001")
        self.assertEqual(generated.product_code, "CL-SHI-002")
        self.assertEqual(generated.barcode_value, "CL-SHI-002")

    def test_quantity_keeps_leading_integer(self):
        values = [["category", "subcategory", "original_quantity", "wholesale_price"]]
        values += [["Toys", "Cars", q, "2"] for q in ("3.7", "12 pcs", "-4", "pcs 5", "99999999999999999999")]
        import_items(self.db, rows_to_items(values))

        quantities = [p.original_quantity for p in self.repo.list()]
        self.assertEqual(quantities, [3, 12, 0, 0, 0])
        self.assertEqual(self.repo.list()[1].wholesale_total_price, Decimal("24"))

    def test_empty_import_keeps_table(self):
        self.add_product()
        self.assertEqual(import_items(self.db, []), 0)
        self.assertEqual(len(self.repo.list()), 1)

    def test_short_category_gets_no_code(self):
        values = [["category", "subcategory", "original_quantity", "wholesale_price"], ["X", "Y", "2", "1"]]
        import_items(self.db, rows_to_items(values))
        product = self.repo.list()[0]
        self.assertIsNone(product.product_code)
        self.assertEqual(product.wholesale_total_price, Decimal("2"))


if __name__ == "__main__":
    unittest.main()
