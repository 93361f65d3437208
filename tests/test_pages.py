"""
End-to-end tests of the console pages through the FastAPI TestClient, each
against a fresh SQLite store.
"""

from __future__ import annotations

import json
import re

from conftest import ADMIN, find_code


class TestSession:
    def test_protected_page_redirects_to_login(self, client):
        response = client.get("/jobs", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"

    def test_login_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert 'name="password"' in response.text

    def test_bad_credentials(self, client):
        response = client.post("/login", data={"username": "admin", "password": "nope"})
        assert response.status_code == 401
        assert "Invalid credentials" in response.text

    def test_blank_credentials(self, client):
        response = client.post("/login", data={"username": "", "password": ""})
        assert response.status_code == 401

    def test_login_lands_on_dashboard(self, client):
        response = client.post("/login", data=ADMIN)
        assert response.status_code == 200
        assert "Overview of shop operations" in response.text
        assert "Admin User" in response.text

    def test_signed_in_user_skips_login_page(self, auth_client):
        response = auth_client.get("/", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard"

    def test_logout(self, auth_client):
        response = auth_client.post("/logout", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert auth_client.get("/dashboard", follow_redirects=False).status_code == 303


class TestCustomers:
    def test_create_and_list(self, auth_client):
        response = auth_client.post("/customers", data={"name": "ABC Corp", "credit_days": "45"}, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/customers"
        page = auth_client.get("/customers")
        assert "ABC Corp" in page.text
        assert "45" in page.text

    def test_missing_name_keeps_dialog_open(self, auth_client):
        response = auth_client.post("/customers", data={"name": "", "phone": "555"})
        assert response.status_code == 422
        assert "Add Customer" in response.text
        assert 'value="555"' in response.text

    def test_search_filters_by_name(self, auth_client):
        auth_client.post("/customers", data={"name": "ABC Corp"})
        auth_client.post("/customers", data={"name": "XYZ Industries"})
        page = auth_client.get("/customers", params={"q": "xyz"})
        assert "XYZ Industries" in page.text
        assert "ABC Corp" not in page.text

    def test_edit(self, auth_client):
        auth_client.post("/customers", data={"name": "ABC Corp"})
        dialog = auth_client.get("/customers/1/edit")
        assert "Edit Customer" in dialog.text
        auth_client.post("/customers/1", data={"name": "ABC Corporation", "credit_days": "30"})
        assert "ABC Corporation" in auth_client.get("/customers").text

    def test_delete_asks_first(self, auth_client):
        auth_client.post("/customers", data={"name": "ABC Corp"})
        confirm = auth_client.get("/customers/1/delete")
        assert "Are you sure you want to delete ABC Corp?" in confirm.text
        response = auth_client.post("/customers/1/delete", follow_redirects=False)
        assert response.status_code == 303
        assert "ABC Corp" not in auth_client.get("/customers").text

    def test_unknown_record(self, auth_client):
        assert auth_client.get("/customers/99/edit").status_code == 404
        assert auth_client.get("/customers/abc/edit").status_code == 404


class TestParts:
    def test_part_number_is_kept_on_update(self, shop):
        shop.post("/parts/P1001", data={"part_no": "HACKED", "description": "Spur Gear"})
        page = shop.get("/parts")
        assert "P1001" in page.text
        assert "Spur Gear" in page.text
        assert "HACKED" not in page.text

    def test_duplicate_part_shows_store_message(self, shop):
        response = shop.post("/parts", data={"part_no": "P1001"})
        assert 'role="alert"' in response.text


class TestJobs:
    def test_created_job_is_pending(self, shop, job_id):
        assert job_id.startswith("CNC-")
        page = shop.get("/jobs")
        assert job_id in page.text
        assert "pending" in page.text

    def test_plating_job_prefix(self, shop):
        response = shop.post(
            "/jobs", data={"job_type": "PLATING", "customer_id": "1", "part_no": "P1001", "qty_ordered": "10"}
        )
        assert find_code("PLT", response.text)

    def test_quantity_must_be_positive(self, shop):
        response = shop.post("/jobs", data={"job_type": "CNC", "customer_id": "1", "part_no": "P1001", "qty_ordered": "0"})
        assert response.status_code == 422
        assert "Create Job Order" in response.text

    def test_add_operation_reopens_dialog(self, shop):
        response = shop.post(
            "/jobs",
            data={
                "job_type": "CNC",
                "customer_id": "1",
                "part_no": "P1001",
                "qty_ordered": "5",
                "route-0-op_seq": "10",
                "route-0-op_name": "Facing",
                "action": "add_op",
            },
        )
        assert response.status_code == 200
        assert 'value="Facing"' in response.text
        assert 'name="route-1-op_seq"' in response.text
        assert 'value="20"' in response.text
        assert not re.search(r"CNC-\d{4}-\d{3}", shop.get("/jobs").text)

    def test_route_is_saved(self, shop):
        shop.post(
            "/jobs",
            data={
                "job_type": "CNC",
                "customer_id": "1",
                "part_no": "P1001",
                "qty_ordered": "5",
                "route-0-op_seq": "10",
                "route-0-op_name": "Facing",
                "route-0-machine_id": "1",
            },
        )
        job_id = find_code("CNC", shop.get("/jobs").text)
        edit = shop.get(f"/jobs/{job_id}/edit")
        assert 'value="Facing"' in edit.text

    def test_delete(self, shop, job_id):
        assert f"delete {job_id}?" in shop.get(f"/jobs/{job_id}/delete").text
        shop.post(f"/jobs/{job_id}/delete")
        assert job_id not in shop.get("/jobs").text


class TestShopFloor:
    def test_start_pause_and_complete(self, shop, job_id):
        page = shop.get("/shop-floor")
        assert job_id in page.text
        assert "Progress 0/100" in page.text

        shop.post(f"/shop-floor/{job_id}/start")
        page = shop.get("/shop-floor")
        assert "IN-PROGRESS" in page.text
        assert "Current: Operation 1" in page.text

        shop.post(f"/shop-floor/{job_id}/pause")
        assert "Current: Operation 1" not in shop.get("/shop-floor").text

        shop.post(f"/shop-floor/{job_id}/complete", data={"qty_completed": "40"})
        page = shop.get("/shop-floor")
        assert "Progress 40/100 (40%)" in page.text
        assert "IN-PROGRESS" in page.text

        shop.post(f"/shop-floor/{job_id}/complete", data={"qty_completed": "100"})
        assert job_id not in shop.get("/shop-floor").text
        assert "completed" in shop.get("/jobs").text

    def test_negative_quantity_rejected(self, shop, job_id):
        response = shop.post(f"/shop-floor/{job_id}/complete", data={"qty_completed": "-1"})
        assert response.status_code == 422

    def test_unknown_job(self, shop):
        assert shop.post("/shop-floor/CNC-1999-000/start").status_code == 404


class TestChallans:
    def test_send_and_receive(self, shop, job_id):
        form = shop.get("/challans/new")
        assert "10-15 microns" in form.text

        response = shop.post("/challans", data={"job_id": job_id, "qty_sent": "50", "process_type": "Zinc Plating"})
        assert response.status_code == 200
        challan_no = find_code("CH", response.text)
        assert "1 pending" in response.text
        assert "pending-challan" in shop.get("/jobs").text

        confirm = shop.get("/challans/1/receive")
        assert f"Mark challan {challan_no} as received?" in confirm.text

        shop.post("/challans/1/receive")
        page = shop.get("/challans")
        assert "RECEIVED" in page.text
        assert "0 pending" in page.text
        assert "completed" in shop.get("/jobs").text
        assert "was received on" in shop.get("/challans/1/receive").text

    def test_quantity_required(self, shop, job_id):
        response = shop.post("/challans", data={"job_id": job_id, "qty_sent": ""})
        assert response.status_code == 422


class TestBilling:
    def test_invoice_amounts_and_payment(self, shop, job_id):
        response = shop.post("/billing", data={"job_id": job_id, "customer_id": "1", "taxable_amount": "1000"})
        assert response.status_code == 200
        assert "₹1,000.00" in response.text
        assert "₹180.00" in response.text
        assert "₹1,180.00" in response.text
        assert "PENDING" in response.text
        invoice_no = find_code("INV", response.text)

        printable = shop.get("/billing/1/print")
        assert invoice_no in printable.text
        assert "ABC Corp" in printable.text

        assert "Mark Paid" in shop.get("/billing").text
        confirm = shop.get("/billing/1/pay")
        assert f"Mark invoice {invoice_no} (₹1,180.00) as paid?" in confirm.text
        shop.post("/billing/1/pay")
        assert "PAID" in shop.get("/billing").text
        assert "already paid" in shop.get("/billing/1/pay").text

    def test_negative_amount_rejected(self, shop, job_id):
        response = shop.post("/billing", data={"job_id": job_id, "taxable_amount": "-5"})
        assert response.status_code == 422

    def test_unknown_invoice(self, shop):
        assert shop.get("/billing/42/print").status_code == 404


class TestAttendance:
    def test_mark_requires_employee_and_date(self, shop):
        response = shop.post("/attendance/mark", data={"employee_id": "", "date": ""})
        assert response.status_code == 422
        assert "Please select employee and date" in response.text

    def test_mark_and_edit(self, shop):
        response = shop.post(
            "/attendance/mark",
            data={"employee_id": "1", "date": "2025-10-07", "status": "present", "ot_hours": "2"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/attendance?tab=daily&date=2025-10-07"
        page = shop.get(response.headers["location"])
        assert "John Doe" in page.text
        assert "Present" in page.text

        shop.post("/attendance/mark", data={"employee_id": "1", "date": "2025-10-07", "status": "absent"})
        page = shop.get("/attendance", params={"date": "2025-10-07"})
        assert "Absent" in page.text
        assert page.text.count("John Doe") >= 1

    def test_mark_dialog(self, shop):
        page = shop.get("/attendance", params={"dialog": "mark", "date": "2025-10-07"})
        assert "Mark Attendance" in page.text
        assert 'value="2025-10-07"' in page.text

    def test_bulk_mark(self, shop):
        confirm = shop.get("/attendance/bulk", params={"date": "2025-10-12", "status": "sunday"})
        assert "Mark all active employees as Sunday for 2025-10-12?" in confirm.text
        response = shop.post("/attendance/bulk", data={"date": "2025-10-12", "status": "sunday"})
        assert "Marked 1 employees as Sunday" in response.text

    def test_bulk_mark_rejects_other_statuses(self, shop):
        response = shop.post("/attendance/bulk", data={"date": "2025-10-12", "status": "absent"})
        assert response.status_code == 422

    def test_template_download(self, shop):
        response = shop.get("/attendance/template.csv")
        assert response.status_code == 200
        assert "attendance_template.csv" in response.headers["content-disposition"]
        assert response.text.splitlines()[0] == "emp_id,date,in_time,out_time,worked_hours"

    def test_upload_preview_then_save(self, shop):
        content = (
            "emp_id,date,in_time,out_time,worked_hours\n"
            "1,2025-10-07,08:00,17:00,9.0\n"
            "99,2025-10-07,08:00,17:00,9.0\n"
            ",2025-10-07,08:00,17:00,9.0\n"
        )
        preview = shop.post("/attendance/upload", files={"file": ("attendance.csv", content, "text/csv")})
        assert preview.status_code == 200
        assert "Preview (2 rows" in preview.text

        rows = [
            {"emp_id": "1", "date": "2025-10-07", "in_time": "08:00", "out_time": "17:00", "worked_hours": "9.0"},
            {"emp_id": "99", "date": "2025-10-07", "in_time": "08:00", "out_time": "17:00", "worked_hours": "9.0"},
        ]
        saved = shop.post("/attendance/upload/save", data={"rows": json.dumps(rows)})
        assert "Saved 1 attendance records" in saved.text

        export = shop.get("/attendance/export.csv")
        lines = export.text.splitlines()
        assert lines[0] == "emp_id,employee,date,status,in_time,out_time,worked_hours,ot_hours"
        assert lines[1].startswith("1,John Doe,2025-10-07,present,08:00,17:00")

    def test_upload_with_ragged_row_previews_the_good_rows(self, shop):
        content = (
            "emp_id,date,in_time,out_time,worked_hours\n"
            "1,2025-10-07,08:00,17:00,9.0\n"
            "2,2025-10-07,08:00,17:00,9.0,extra\n"
        )
        response = shop.post("/attendance/upload", files={"file": ("attendance.csv", content, "text/csv")})
        assert response.status_code == 200
        assert "Preview (1 rows" in response.text

    def test_upload_in_another_encoding(self, shop):
        content = "emp_id,date,in_time,out_time,worked_hours\n1,2025-10-07,08:00,17:00,9.0\n".encode("latin-1")
        content += "1,2025-10-08,08:00,17:00,caf\u00e9\n".encode("latin-1")
        response = shop.post("/attendance/upload", files={"file": ("attendance.csv", content, "text/csv")})
        assert response.status_code == 200
        assert "Preview (2 rows" in response.text

    def test_monthly_summary(self, shop):
        shop.post("/attendance/mark", data={"employee_id": "1", "date": "2025-10-07", "status": "present"})
        shop.post("/attendance/mark", data={"employee_id": "1", "date": "2025-10-08", "status": "absent"})
        shop.post("/attendance/mark", data={"employee_id": "1", "date": "2025-10-12", "status": "sunday"})
        response = shop.post("/attendance/summary/rebuild", data={"month": "10", "year": "2025"}, follow_redirects=False)
        assert response.status_code == 303
        page = shop.get(response.headers["location"])
        assert "John Doe" in page.text
        assert "50.0%" in page.text


class TestReports:
    def test_reports_page(self, demo_client):
        page = demo_client.get("/reports")
        assert "Monthly Turnover" in page.text
        assert "CH-2025-001" in page.text

    def test_csv_export(self, demo_client):
        response = demo_client.get("/reports/jobs.csv")
        assert response.status_code == 200
        assert "jobs_report.csv" in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert lines[0] == "job_id,customer,status,total_cost"
        assert any(line.startswith("CNC-2025-001,ABC Corp") for line in lines)

    def test_unknown_report(self, auth_client):
        assert auth_client.get("/reports/payroll.csv").status_code == 404


class TestRegisters:
    def test_enquiries(self, demo_client):
        page = demo_client.get("/enquiries")
        assert "Enquiries &amp; Quotations" in page.text
        assert "ENQ-2025-001" in page.text

    def test_every_register_renders(self, demo_client):
        for path in ("/routing", "/inventory", "/tooling", "/quality", "/maintenance", "/purchase", "/dispatch", "/expenses"):
            assert demo_client.get(path).status_code == 200


class TestDashboard:
    def test_demo_metrics(self, demo_client):
        page = demo_client.get("/dashboard")
        assert "Open Jobs" in page.text
        assert "Receivables" in page.text
        assert "₹5,900" in page.text


class TestApi:
    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["message"] == "Healthy"
        assert response.headers["X-Correlation-ID"]

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_unknown_api_path_uses_error_envelope(self, client):
        response = client.get("/api/v1/nothing")
        assert response.status_code == 404
        body = response.json()
        assert body["status"] == 404
        assert body["error"]["type"] == "http_error"
        assert body["path"] == "/api/v1/nothing"
