from django.db import DatabaseError, IntegrityError
from django.test import SimpleTestCase, TestCase, override_settings

from importer.utils.db_insert import _batches, insert_rows
from importer.utils.db_schema import build_table_definition, provision_table
from importer.tests.utils import count_rows, fetch_rows


class BatchesTests(SimpleTestCase):

    def test_splits_in_order(self):
        rows = [{"n": str(i)} for i in range(5)]
        batches = list(_batches(rows, 2))
        self.assertEqual([len(b) for b in batches], [2, 2, 1])
        self.assertEqual([r["n"] for b in batches for r in b], ["0", "1", "2", "3", "4"])


class InsertRowsTests(TestCase):
    mapping = {"id": "id", "Full Name": "full_name", "3rd Col": "col_3rd_col"}

    def setUp(self):
        provision_table(build_table_definition("_load", list(self.mapping.values())))

    def test_inserts_every_row_under_sanitized_columns(self):
        rows = [
            {"id": "1", "Full Name": "Ada", "3rd Col": "x"},
            {"id": "2", "Full Name": "Grace", "3rd Col": ""},
            {"id": "3", "Full Name": "Edsger", "3rd Col": "z"},
        ]

        inserted = insert_rows("_load", self.mapping, rows)

        self.assertEqual(inserted, 3)
        self.assertEqual(
            fetch_rows("_load", order_by="id"),
            [
                {"id": "1", "full_name": "Ada", "col_3rd_col": "x"},
                {"id": "2", "full_name": "Grace", "col_3rd_col": ""},
                {"id": "3", "full_name": "Edsger", "col_3rd_col": "z"},
            ],
        )

    def test_missing_cell_is_null(self):
        insert_rows("_load", self.mapping, [{"id": "1", "Full Name": "Ada"}])
        self.assertIsNone(fetch_rows("_load")[0]["col_3rd_col"])

    def test_batch_size_does_not_change_result(self):
        rows = [{"id": str(i), "Full Name": f"n{i}", "3rd Col": ""} for i in range(7)]

        inserted = insert_rows("_load", self.mapping, rows, batch_size=3)

        self.assertEqual(inserted, 7)
        self.assertEqual(count_rows("_load"), 7)

    @override_settings(CSV_IMPORT_BATCH_SIZE=2)
    def test_default_batch_size_comes_from_settings(self):
        rows = [{"id": str(i), "Full Name": "", "3rd Col": ""} for i in range(5)]
        self.assertEqual(insert_rows("_load", self.mapping, rows), 5)

    def test_invalid_batch_size(self):
        with self.assertRaises(ValueError):
            insert_rows("_load", self.mapping, [{"id": "1"}], batch_size=0)

    def test_failure_rolls_back_every_row(self):
        # third row repeats the primary key of the first
        rows = [
            {"id": "1", "Full Name": "a", "3rd Col": ""},
            {"id": "2", "Full Name": "b", "3rd Col": ""},
            {"id": "1", "Full Name": "c", "3rd Col": ""},
            {"id": "4", "Full Name": "d", "3rd Col": ""},
        ]
        for batch_size in (1, 2, 500):
            with self.subTest(batch_size=batch_size):
                with self.assertRaises(IntegrityError):
                    insert_rows("_load", self.mapping, rows, batch_size=batch_size)
                self.assertEqual(count_rows("_load"), 0)

    def test_values_are_bound_not_interpolated(self):
        payload = "x'); DROP TABLE _load; --"
        insert_rows("_load", self.mapping, [{"id": "1", "Full Name": payload, "3rd Col": "100%"}])

        row = fetch_rows("_load")[0]
        self.assertEqual(row["full_name"], payload)
        self.assertEqual(row["col_3rd_col"], "100%")

    def test_percent_and_quote_in_table_name(self):
        table = 'odd"%name'
        provision_table(build_table_definition(table, ["a"]))

        inserted = insert_rows(table, {"A": "a"}, [{"A": "1"}, {"A": "2"}])

        self.assertEqual(inserted, 2)
        self.assertEqual(count_rows(table), 2)

    def test_missing_table_raises_database_error(self):
        with self.assertRaises(DatabaseError):
            insert_rows("_load_missing", {"a": "a"}, [{"a": "1"}])
