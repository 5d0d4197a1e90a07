import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.storage import MemStorage
from tests.sample_data import FakeClock, ScriptedAnalyzer, product_insert


@pytest.fixture
def storage():
    return MemStorage(clock=FakeClock())


@pytest.fixture
def analyzer():
    return ScriptedAnalyzer()


@pytest.fixture
def client(storage, analyzer):
    return TestClient(create_app(storage=storage, analyzer=analyzer))


def png(name, data):
    return ("images", (name, data, "image/png"))


def test_list_products_empty(client):
    response = client.get("/api/products")
    assert response.status_code == 200
    assert response.json() == []


def test_list_products_newest_first(client, storage):
    first = storage.create(product_insert(name="First"))
    second = storage.create(product_insert(name="Second"))

    body = client.get("/api/products").json()

    assert [p["id"] for p in body] == [second.id, first.id]
    assert body[0]["usageInstructions"] == "Apply to clean skin twice daily"
    assert body[0]["ingredients"][0]["safetyRating"] == "safe"
    assert "createdAt" in body[0]


def test_list_products_storage_fault_is_500(client, storage, monkeypatch):
    def broken():
        raise RuntimeError("disk on fire")
    monkeypatch.setattr(storage, "list_all", broken)

    response = client.get("/api/products")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch products"}


def test_get_product(client, storage):
    product = storage.create(product_insert())

    response = client.get(f"/api/products/{product.id}")

    assert response.status_code == 200
    assert response.json()["name"] == "Hydrating Face Cream"
    assert response.json()["imageUrl"] is None


def test_get_product_non_integer_id(client):
    response = client.get("/api/products/abc")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid product ID"


@pytest.mark.parametrize("raw_id", ["0_1", "%201", "1.0", "%D9%A1"])
def test_get_product_rejects_loose_integer_forms(client, storage, raw_id):
    storage.create(product_insert())

    response = client.get(f"/api/products/{raw_id}")

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid product ID"


def test_get_product_missing_id(client):
    response = client.get("/api/products/42")
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_analyze_keeps_order_and_isolates_failures(client, storage):
    response = client.post("/api/products/analyze", files=[
        png("one.png", b"first"),
        png("two.png", b"upstream"),
        png("three.png", b"third"),
    ])

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) == 3
    assert results[0]["name"] == "first"
    assert results[1] == {"error": "Empty response from Gemini AI", "filename": "two.png"}
    assert results[2]["name"] == "third"
    assert [p.name for p in storage.list_all()] == ["third", "first"]


def test_analyze_invalid_reply_is_reported_inline(client, storage):
    response = client.post("/api/products/analyze", files=[png("bad.png", b"invalid")])

    assert response.status_code == 200
    result = response.json()["results"][0]
    assert result["filename"] == "bad.png"
    assert "error" in result
    assert storage.list_all() == []


def test_analyze_without_files(client):
    response = client.post("/api/products/analyze")
    assert response.status_code == 400
    assert response.json()["error"] == "No images provided"


def test_analyze_rejects_non_image_before_analysis(client, analyzer):
    response = client.post("/api/products/analyze", files=[
        png("ok.png", b"first"),
        ("images", ("notes.txt", b"hello", "text/plain")),
    ])

    assert response.status_code == 400
    assert response.json()["details"] == [{"field": "notes.txt", "message": "Only image files are allowed"}]
    assert analyzer.calls == []


def test_analyze_rejects_more_than_ten_files(client, analyzer):
    files = [png(f"{i}.png", b"first") for i in range(11)]

    response = client.post("/api/products/analyze", files=files)

    assert response.status_code == 400
    assert analyzer.calls == []


def test_compare_products(client, storage):
    first = storage.create(product_insert(name="First"))
    second = storage.create(product_insert(name="Second"))

    response = client.post("/api/products/compare", json={"productIds": [second.id, first.id]})

    assert response.status_code == 200
    assert [p["name"] for p in response.json()["products"]] == ["Second", "First"]


def test_compare_with_unresolved_id(client, storage):
    storage.create(product_insert())

    response = client.post("/api/products/compare", json={"productIds": [1, 999]})

    assert response.status_code == 400
    assert response.json()["error"] == "At least 2 valid products are required for comparison"


def test_compare_needs_two_ids(client, storage):
    storage.create(product_insert())

    response = client.post("/api/products/compare", json={"productIds": [1]})

    assert response.status_code == 400
    assert response.json()["error"] == "At least 2 product IDs are required for comparison"


@pytest.mark.parametrize("body", [
    {},
    {"productIds": "1,2"},
    {"productIds": ["a", "b"]},
    {"productIds": [True, True]},
    {"productIds": ["1", "2"]},
    {"productIds": [1.0, 2.0]},
])
def test_compare_malformed_body(client, storage, body):
    storage.create(product_insert(name="First"))
    storage.create(product_insert(name="Second"))

    response = client.post("/api/products/compare", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_delete_product(client, storage):
    product = storage.create(product_insert())

    response = client.delete(f"/api/products/{product.id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Product deleted successfully"}
    assert client.get(f"/api/products/{product.id}").status_code == 404


def test_delete_product_errors(client):
    assert client.delete("/api/products/abc").status_code == 400
    assert client.delete("/api/products/42").status_code == 404
