"""
Tests for the dialog shell, navigation frame, form helpers and formatting.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from shop_erp.schemas.master_data import CustomerForm
from shop_erp.ui.dialog import FormDialog
from shop_erp.ui.formatting import badge, format_inr, status_badge
from shop_erp.ui.forms import FormField, form_values, parse_form, render_form
from shop_erp.ui.navigation import build_navigation, page_title


class TestFormDialog:
    def test_closed_dialog_renders_nothing(self):
        assert FormDialog("Add Customer", "/customers").render(False, "body") == ""

    def test_open_dialog_wraps_content(self):
        html = FormDialog("Add Customer", "/customers", "lg").render(True, "body-text")
        assert "Add Customer" in html
        assert 'href="/customers"' in html
        assert "dialog-lg" in html
        assert "body-text" in html

    def test_unknown_size_falls_back_to_md(self):
        assert FormDialog("t", "/x", "huge").size == "md"


class TestNavigation:
    def test_active_entry_and_group_expansion(self):
        entries = {entry.label: entry for entry in build_navigation("/parts/P1001/edit")}
        masters = entries["Masters"]
        assert masters.expanded
        assert [child.label for child in masters.children if child.active] == ["Parts"]
        assert not entries["Dashboard"].active

    def test_top_level_entry(self):
        entries = {entry.label: entry for entry in build_navigation("/shop-floor")}
        assert entries["Shop Floor"].active
        assert not entries["Masters"].expanded

    def test_full_tree_order(self):
        labels = [entry.label for entry in build_navigation("/")]
        assert labels[:3] == ["Dashboard", "Masters", "Enquiries"]
        assert labels[-1] == "Reports"
        assert len(labels) == 17

    def test_page_title(self):
        assert page_title("/challans/3/receive") == "Challans"


class TestForms:
    def test_blank_strings_fall_back_to_defaults(self):
        data, errors = parse_form(CustomerForm, {"name": "ABC", "credit_days": "", "gstin": " "})
        assert errors == {}
        assert data.credit_days == 30
        assert data.gstin is None

    def test_errors_keyed_by_field(self):
        data, errors = parse_form(CustomerForm, {"credit_days": "-1"})
        assert data is None
        assert set(errors) == {"name", "credit_days"}

    def test_form_values_from_record(self):
        fields = [FormField("name", "Name"), FormField("last_pm_date", "Last PM", kind="date")]
        record = SimpleNamespace(name="CNC-01", last_pm_date=date(2025, 9, 15))
        assert form_values(record, fields) == {"name": "CNC-01", "last_pm_date": "2025-09-15"}

    def test_render_form_shows_values_and_errors(self):
        fields = [FormField("name", "Name", required=True), FormField("shift", "Shift", kind="select", options=[("A", "A")])]
        html = render_form(fields, action="/employees", values={"shift": "A"}, errors={"name": "Field required"})
        assert 'action="/employees"' in html
        assert "Field required" in html
        assert '<option value="A" selected>' in html


class TestFormatting:
    def test_indian_digit_grouping(self):
        assert format_inr(450000) == "₹4,50,000.00"
        assert format_inr(Decimal("5900")) == "₹5,900.00"
        assert format_inr(12345678.5) == "₹1,23,45,678.50"
        assert format_inr(999) == "₹999.00"
        assert format_inr(None) == ""

    def test_badges(self):
        assert badge("") == ""
        assert 'badge-success' in status_badge("completed")
        assert ">PAID<" in status_badge("paid", "PAID")
        assert "&lt;" in badge("<x>")
