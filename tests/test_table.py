"""
Tests for the Generic List View.

Validates:
- header labels and row order
- action column visibility rules and per-row action order
- the single placeholder row for empty input
- field lookup on mappings, attribute objects and dotted keys
"""

from __future__ import annotations

from types import SimpleNamespace

from markupsafe import Markup

from shop_erp.ui.table import PLACEHOLDER_TEXT, Column, DataTable, field_value, filter_records

COLUMNS = [Column("name", "Name"), Column("qty", "Qty")]


class TestBuild:
    def test_rows_follow_input_order(self):
        view = DataTable(COLUMNS).build([{"name": "b", "qty": 2}, {"name": "a", "qty": 1}])
        assert view.headers == ["Name", "Qty"]
        assert [row.cells for row in view.rows] == [["b", 2], ["a", 1]]
        assert not view.is_empty

    def test_empty_records_give_one_placeholder_spanning_columns(self):
        view = DataTable(COLUMNS, on_edit=lambda r: "/x").build([])
        assert view.rows == []
        assert view.placeholder == PLACEHOLDER_TEXT == "No data available"
        assert view.colspan == 3

    def test_placeholder_without_action_column(self):
        view = DataTable(COLUMNS).build([])
        assert view.colspan == 2

    def test_action_column_needs_a_handler(self):
        assert not DataTable(COLUMNS).show_actions
        assert DataTable(COLUMNS, on_delete=lambda r: "/d").show_actions

    def test_actions_flag_hides_column_even_with_handlers(self):
        table = DataTable(COLUMNS, on_view=lambda r: "/v", actions=False)
        view = table.build([{"name": "a"}])
        assert not view.show_actions
        assert view.rows[0].actions == []

    def test_only_supplied_actions_in_view_edit_delete_order(self):
        table = DataTable(COLUMNS, on_delete=lambda r: f"/d/{r['name']}", on_view=lambda r: f"/v/{r['name']}")
        actions = table.build([{"name": "a"}]).rows[0].actions
        assert [a.kind for a in actions] == ["view", "delete"]
        assert [a.url for a in actions] == ["/v/a", "/d/a"]

    def test_action_labels_can_be_renamed(self):
        table = DataTable(COLUMNS, on_view=lambda r: "/p", on_edit=lambda r: "/pay", labels={"edit": "Mark Paid"})
        actions = table.build([{"name": "a"}]).rows[0].actions
        assert [(a.kind, a.label) for a in actions] == [("view", "View"), ("edit", "Mark Paid")]

    def test_missing_and_none_values_render_empty(self):
        view = DataTable(COLUMNS).build([{"name": None}])
        assert view.rows[0].cells == ["", ""]

    def test_render_function_gets_value_and_record(self):
        column = Column("qty", "Qty", lambda value, record: f"{record['name']}:{value}")
        view = DataTable([column]).build([{"name": "a", "qty": 3}])
        assert view.rows[0].cells == ["a:3"]


class TestRender:
    def test_placeholder_markup(self):
        html = DataTable(COLUMNS).render([])
        assert isinstance(html, Markup)
        assert "No data available" in html
        assert 'colspan="2"' in html

    def test_action_links(self):
        html = DataTable(COLUMNS, on_edit=lambda r: "/items/1/edit").render([{"name": "a", "qty": 1}])
        assert 'data-action="edit"' in html
        assert 'href="/items/1/edit"' in html
        assert "Actions" in html

    def test_cell_text_is_escaped(self):
        html = DataTable(COLUMNS).render([{"name": "<b>x</b>", "qty": 1}])
        assert "<b>x</b>" not in html
        assert "&lt;b&gt;x&lt;/b&gt;" in html


class TestFieldLookup:
    def test_mapping_and_object(self):
        assert field_value({"a": 1}, "a") == 1
        assert field_value(SimpleNamespace(a=2), "a") == 2

    def test_dotted_key_walks_nested_records(self):
        record = SimpleNamespace(customer=SimpleNamespace(name="ABC Corp"))
        assert field_value(record, "customer.name") == "ABC Corp"
        assert field_value({"customer": None}, "customer.name") is None

    def test_filter_records_is_case_insensitive(self):
        records = [{"name": "John Doe"}, {"name": "Jane Smith"}]
        assert filter_records(records, "JOHN", "name") == [{"name": "John Doe"}]
        assert filter_records(records, "  ", "name") == records
