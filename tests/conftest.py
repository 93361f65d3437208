"""
Pytest fixtures for the console test suite.

Provides:
- A fresh SQLite database file per test (DATABASE_URL points into tmp_path)
- A TestClient running the application lifespan (tables + admin seeded)
- A signed-in client
- A client on a store seeded with the demonstration rows
"""

from __future__ import annotations

import re
from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from shop_erp.api.main import create_app

ADMIN = {"username": "admin", "password": "admin"}


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    """Point both settings classes at a throwaway database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'shop.db'}")
    monkeypatch.setenv("SESSION_SECRET_KEY", "test-secret")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    return tmp_path


@pytest.fixture
def client(app_env) -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client) -> TestClient:
    response = client.post("/login", data=ADMIN, follow_redirects=False)
    assert response.status_code == 303
    return client


@pytest.fixture
def demo_client(app_env, monkeypatch) -> Iterator[TestClient]:
    monkeypatch.setenv("SEED_DEMO_DATA", "true")
    with TestClient(create_app()) as test_client:
        test_client.post("/login", data=ADMIN, follow_redirects=False)
        yield test_client


def find_code(prefix: str, html: str) -> str:
    """First generated business code with ``prefix`` found in a page."""
    match = re.search(rf"{prefix}-\d{{4}}-\d{{3}}", html)
    assert match, f"no {prefix} code in page"
    return match.group(0)


@pytest.fixture
def shop(auth_client):
    """A customer, an employee, a part and a machine created through the pages."""
    auth_client.post("/customers", data={"name": "ABC Corp", "gstin": "22AAAAA0000A1Z5"})
    auth_client.post("/employees", data={"name": "John Doe", "employee_code": "EMP001", "department": "Machining"})
    auth_client.post("/parts", data={"part_no": "P1001", "description": "Main Gear"})
    auth_client.post("/machines", data={"name": "CNC-01", "type": "CNC Mill"})
    return auth_client


@pytest.fixture
def job_id(shop) -> str:
    response = shop.post(
        "/jobs",
        data={"job_type": "CNC", "customer_id": "1", "part_no": "P1001", "rev": "A", "qty_ordered": "100"},
    )
    assert response.status_code == 200
    return find_code("CNC", response.text)
