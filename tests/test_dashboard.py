import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.storage import MemStorage
from tests.sample_data import FakeClock, ScriptedAnalyzer, product_insert


@pytest.fixture
def storage():
    return MemStorage(clock=FakeClock())


@pytest.fixture
def client(storage):
    return TestClient(create_app(storage=storage, analyzer=ScriptedAnalyzer()))


def test_dashboard_empty(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert "No products analyzed yet" in response.text
    assert "Product Comparison" not in response.text


def test_dashboard_lists_products(client, storage):
    storage.create(product_insert(name="Night Serum"))
    storage.create(product_insert(name="Day Lotion"))

    response = client.get("/")

    assert response.status_code == 200
    assert "Analysis Results (2)" in response.text
    assert response.text.index("Day Lotion") < response.text.index("Night Serum")
    assert "badge-caution" in response.text


def test_dashboard_comparison(client, storage):
    storage.create(product_insert(name="Night Serum"))
    storage.create(product_insert(name="Day Lotion"))

    response = client.get("/?compare=1,2")

    assert response.status_code == 200
    assert "Product Comparison" in response.text
    assert "About 5 months" in response.text


def test_dashboard_comparison_needs_two_products(client, storage):
    storage.create(product_insert(name="Night Serum"))

    response = client.get("/?compare=1,99")

    assert response.status_code == 200
    assert "Product Comparison" not in response.text
    assert "Clear Comparison (1)" in response.text


def test_dashboard_ignores_non_ascii_compare_ids(client, storage):
    storage.create(product_insert(name="Night Serum"))
    storage.create(product_insert(name="Day Lotion"))

    response = client.get("/", params={"compare": "1,²,2"})

    assert response.status_code == 200
    assert "Product Comparison" in response.text


def test_static_assets_are_served(client):
    assert client.get("/static/dashboard.js").status_code == 200
