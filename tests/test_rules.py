"""
Tests for the derived-field rules: document numbers, GST, routing sequence,
job progress and attendance arithmetic.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal

import pytest

from shop_erp.schemas.production import RouteOperation
from shop_erp.services.attendance import (
    attendance_percentage,
    build_template_csv,
    month_bounds,
    parse_attendance_csv,
    percentage_tone,
)
from shop_erp.services.billing import compute_invoice_amounts
from shop_erp.services.dashboard import trailing_months
from shop_erp.services.numbering import generate_challan_no, generate_document_no, generate_invoice_no, generate_job_id
from shop_erp.services.production import append_operation, job_progress, next_op_seq


class FixedRandom:
    def __init__(self, value: int) -> None:
        self.value = value

    def randint(self, low: int, high: int) -> int:
        assert (low, high) == (0, 999)
        return self.value


class TestNumbering:
    def test_zero_padded_suffix_and_year(self):
        assert generate_document_no("CH", today=date(2025, 10, 20), rng=FixedRandom(7)) == "CH-2025-007"

    def test_job_prefix_follows_job_type(self):
        today = date(2025, 1, 1)
        assert generate_job_id("CNC", today=today, rng=FixedRandom(42)) == "CNC-2025-042"
        assert generate_job_id("PLATING", today=today, rng=FixedRandom(999)) == "PLT-2025-999"

    def test_default_year_is_current(self):
        year = date.today().year
        assert re.fullmatch(rf"INV-{year}-\d{{3}}", generate_invoice_no())
        assert re.fullmatch(rf"CH-{year}-\d{{3}}", generate_challan_no())


class TestGst:
    @pytest.mark.parametrize(
        "taxable, gst, total",
        [
            ("5000", "900.00", "5900.00"),
            ("7500", "1350.00", "8850.00"),
            ("999.99", "180.00", "1179.99"),
            ("0", "0.00", "0.00"),
        ],
    )
    def test_gst_is_eighteen_percent_rounded(self, taxable, gst, total):
        amounts = compute_invoice_amounts(taxable)
        assert amounts.gst_amount == Decimal(gst)
        assert amounts.total_amount == Decimal(total)
        assert amounts.total_amount == amounts.taxable_amount + amounts.gst_amount


class TestRouting:
    def test_next_sequence_steps_by_ten(self):
        assert next_op_seq([]) == 10
        assert next_op_seq([object(), object()]) == 30

    def test_append_operation(self):
        route = append_operation([RouteOperation(op_seq=10, op_name="Turning")])
        assert [op.op_seq for op in route] == [10, 20]
        assert route[1].op_name is None


class TestProgress:
    def test_progress_is_capped(self):
        assert job_progress(50, 100) == 50.0
        assert job_progress(150, 100) == 100.0

    def test_no_quantity_ordered(self):
        assert job_progress(5, 0) == 0.0
        assert job_progress(None, None) == 0.0


class TestAttendanceArithmetic:
    def test_percentage_one_decimal(self):
        assert attendance_percentage(18, 20) == "90.0"
        assert attendance_percentage(Decimal("20.5"), Decimal("26")) == "78.8"

    def test_percentage_without_working_days(self):
        assert attendance_percentage(0, 0) == "0"

    def test_tones(self):
        assert percentage_tone("90.0") == "success"
        assert percentage_tone("75.0") == "warning"
        assert percentage_tone("74.9") == "danger"
        assert percentage_tone("0") == "danger"

    def test_month_bounds_wrap_the_year(self):
        assert month_bounds(12, 2025) == (date(2025, 12, 1), date(2026, 1, 1))
        assert month_bounds(2, 2024) == (date(2024, 2, 1), date(2024, 3, 1))

    def test_trailing_months(self):
        assert trailing_months(date(2025, 2, 10), 3) == ["2024-12", "2025-01", "2025-02"]


class TestAttendanceCsv:
    def test_template_header(self):
        lines = build_template_csv().splitlines()
        assert lines[0] == "emp_id,date,in_time,out_time,worked_hours"
        assert len(lines) == 3

    def test_rows_missing_emp_id_or_date_are_dropped(self):
        content = (
            "emp_id,date,in_time,out_time,worked_hours\n"
            "1,2025-10-07,08:00,17:00,9.0\n"
            ",2025-10-07,08:00,17:00,9.0\n"
            "2,,08:00,17:00,9.0\n"
            " 3 , 2025-10-08 ,,,\n"
        )
        rows = parse_attendance_csv(content.encode("utf-8"))
        assert [row["emp_id"] for row in rows] == ["1", "3"]
        assert rows[1] == {"emp_id": "3", "date": "2025-10-08", "in_time": "", "out_time": "", "worked_hours": ""}

    def test_missing_columns_are_filled(self):
        rows = parse_attendance_csv("emp_id,date\n5,2025-10-09\n")
        assert rows == [{"emp_id": "5", "date": "2025-10-09", "in_time": "", "out_time": "", "worked_hours": ""}]

    def test_empty_upload(self):
        assert parse_attendance_csv(b"") == []

    def test_row_with_extra_fields_is_skipped(self):
        content = (
            "emp_id,date,in_time,out_time,worked_hours\n"
            "1,2025-10-07,08:00,17:00,9.0\n"
            "2,2025-10-07,08:00,17:00,9.0,extra\n"
            "3,2025-10-07,08:00,17:00,9.0\n"
        )
        rows = parse_attendance_csv(content)
        assert [row["emp_id"] for row in rows] == ["1", "3"]

    def test_short_row_is_padded(self):
        rows = parse_attendance_csv("emp_id,date,in_time,out_time,worked_hours\n4,2025-10-07\n")
        assert rows == [{"emp_id": "4", "date": "2025-10-07", "in_time": "", "out_time": "", "worked_hours": ""}]

    def test_undecodable_bytes_are_replaced(self):
        content = "emp_id,date,in_time,out_time,worked_hours\n5,2025-10-07,08:00,17:00,9.0\n".encode("utf-8")
        content = content.replace(b"08:00", b"08:00\xe9")
        rows = parse_attendance_csv(content)
        assert [row["emp_id"] for row in rows] == ["5"]
        assert rows[0]["in_time"] == "08:00\ufffd"
