"""Integration tests for product API endpoints."""

from fastapi.testclient import TestClient


VALID_PRODUCT_DATA = {
    "name": "Paracetamol 500mg",
    "mfg_date": "2024-05-01",
    "exp_date": "2026-04-30",
    "quantity_per_box": "10x10",
    "gross_weight": 5.2,
    "net_weight": 4.8,
    "shipping_marks": "FRAGILE",
    "shipper_size": "40x30x30 cm",
    "batches": [{"batch_no": "B24001", "box_from": 1, "box_to": 20}],
}


def create_product(client: TestClient, data: dict | None = None) -> dict:
    """Helper to create a product and return response JSON."""
    response = client.post("/api/products/", json=data or VALID_PRODUCT_DATA)
    assert response.status_code == 201
    return response.json()


def dispatch(client: TestClient, product_id: int, batch_no: str, qty: int) -> dict:
    """Helper to generate a packing list for one batch."""
    response = client.post(
        "/api/packing-lists/",
        json={
            "product_id": product_id,
            "pl_date": "2024-06-01",
            "batches": [{"batch_no": batch_no, "qty": qty}],
        },
    )
    assert response.status_code == 201
    return response.json()


class TestCreateProduct:
    """Tests for POST /api/products/."""

    def test_create_product_success(self, client: TestClient):
        """Happy path: a new product has all its boxes available."""
        data = create_product(client)

        assert data["name"] == "Paracetamol 500mg"
        assert "id" in data
        batch = data["batches"][0]
        assert batch["batch_no"] == "B24001"
        assert batch["total_boxes"] == 20
        assert batch["dispatched_count"] == 0
        assert batch["available_ranges"] == [{"box_from": 1, "box_to": 20}]
        assert batch["is_fully_dispatched"] is False

    def test_create_product_duplicate_batch_returns_409(self, client: TestClient):
        """Batch numbers are unique across products, ignoring case."""
        create_product(client)
        data = {
            **VALID_PRODUCT_DATA,
            "name": "Ibuprofen",
            "batches": [{"batch_no": "b24001", "box_from": 1, "box_to": 5}],
        }
        response = client.post("/api/products/", json=data)

        assert response.status_code == 409
        assert "duplicate" in response.json()["detail"]

    def test_create_product_duplicate_non_ascii_batch_returns_409(self, client: TestClient):
        """Case is ignored for non-ASCII batch numbers too."""
        create_product(
            client,
            {**VALID_PRODUCT_DATA, "batches": [{"batch_no": "ÄB1", "box_from": 1, "box_to": 5}]},
        )
        data = {
            **VALID_PRODUCT_DATA,
            "name": "Ibuprofen",
            "batches": [{"batch_no": "äb1", "box_from": 1, "box_to": 5}],
        }
        response = client.post("/api/products/", json=data)

        assert response.status_code == 409

    def test_create_product_reversed_range_returns_422(self, client: TestClient):
        """box_from greater than box_to is rejected."""
        data = {
            **VALID_PRODUCT_DATA,
            "batches": [{"batch_no": "B24001", "box_from": 10, "box_to": 5}],
        }
        response = client.post("/api/products/", json=data)

        assert response.status_code == 422

    def test_create_product_without_batches_returns_422(self, client: TestClient):
        """A product needs at least one batch."""
        response = client.post("/api/products/", json={**VALID_PRODUCT_DATA, "batches": []})

        assert response.status_code == 422

    def test_create_product_blank_name_returns_422(self, client: TestClient):
        """Whitespace-only names are rejected."""
        response = client.post("/api/products/", json={**VALID_PRODUCT_DATA, "name": "   "})

        assert response.status_code == 422


class TestGetProduct:
    """Tests for GET /api/products/{id}."""

    def test_get_product(self, client: TestClient):
        """Existing product is returned."""
        created = create_product(client)
        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Paracetamol 500mg"

    def test_get_missing_product_returns_404(self, client: TestClient):
        """Unknown product ID returns 404."""
        response = client.get("/api/products/999")

        assert response.status_code == 404


class TestSearchProducts:
    """Tests for GET /api/products/?q=."""

    def test_search_by_name(self, client: TestClient):
        """Plain words match product names."""
        create_product(client)
        create_product(
            client,
            {
                **VALID_PRODUCT_DATA,
                "name": "Ibuprofen",
                "batches": [{"batch_no": "IB001", "box_from": 1, "box_to": 5}],
            },
        )

        response = client.get("/api/products/", params={"q": "paracet"})

        data = response.json()
        assert data["total"] == 1
        assert data["products"][0]["name"] == "Paracetamol 500mg"

    def test_search_by_batch_number(self, client: TestClient):
        """Letters mixed with digits match batch numbers."""
        create_product(
            client,
            {
                **VALID_PRODUCT_DATA,
                "batches": [
                    {"batch_no": "B24001", "box_from": 1, "box_to": 20},
                    {"batch_no": "C24002", "box_from": 1, "box_to": 10},
                ],
            },
        )

        response = client.get("/api/products/", params={"q": "c240"})

        data = response.json()
        assert data["total"] == 1
        assert [b["batch_no"] for b in data["products"][0]["batches"]] == ["C24002"]

    def test_name_search_hides_fully_dispatched_batches(self, client: TestClient):
        """Name search only lists batches that still have boxes."""
        product = create_product(client)
        dispatch(client, product["id"], "B24001", 20)

        response = client.get("/api/products/", params={"q": "paracetamol"})

        assert response.json()["total"] == 0

    def test_empty_query_lists_everything(self, client: TestClient):
        """No query returns every product."""
        create_product(client)

        response = client.get("/api/products/")

        assert response.json()["total"] == 1


class TestDispatchableProducts:
    """Tests for GET /api/products/dispatchable and available batches."""

    def test_fully_dispatched_products_are_not_listed(self, client: TestClient):
        """Products without free boxes drop out of the picker."""
        product = create_product(client)
        assert client.get("/api/products/dispatchable").json()["total"] == 1

        dispatch(client, product["id"], "B24001", 20)

        assert client.get("/api/products/dispatchable").json()["total"] == 0

    def test_available_batches_show_free_ranges(self, client: TestClient):
        """Available batches report what is left to dispatch."""
        product = create_product(client)
        dispatch(client, product["id"], "B24001", 12)

        response = client.get(f"/api/products/{product['id']}/available-batches")

        assert response.status_code == 200
        batches = response.json()["batches"]
        assert batches == [
            {
                "batch_no": "B24001",
                "available_ranges": [{"box_from": 13, "box_to": 20}],
                "available_count": 8,
            }
        ]

    def test_available_batches_for_missing_product(self, client: TestClient):
        """Unknown product ID returns 404."""
        response = client.get("/api/products/999/available-batches")

        assert response.status_code == 404


class TestUpdateProduct:
    """Tests for PUT /api/products/{id}."""

    def test_update_keeps_dispatched_boxes(self, client: TestClient):
        """Extending a batch keeps its dispatch records."""
        product = create_product(client)
        dispatch(client, product["id"], "B24001", 12)
        data = {
            **VALID_PRODUCT_DATA,
            "batches": [{"batch_no": "B24001", "box_from": 1, "box_to": 30}],
        }

        response = client.put(f"/api/products/{product['id']}", json=data)

        assert response.status_code == 200
        batch = response.json()["batches"][0]
        assert batch["dispatched_count"] == 12
        assert batch["available_ranges"] == [{"box_from": 13, "box_to": 30}]

    def test_update_cannot_uncover_dispatched_boxes(self, client: TestClient):
        """Shrinking a batch below its dispatched boxes returns 422."""
        product = create_product(client)
        dispatch(client, product["id"], "B24001", 12)
        data = {
            **VALID_PRODUCT_DATA,
            "batches": [{"batch_no": "B24001", "box_from": 1, "box_to": 10}],
        }

        response = client.put(f"/api/products/{product['id']}", json=data)

        assert response.status_code == 422
        assert "does not cover" in response.json()["detail"]

    def test_update_missing_product_returns_404(self, client: TestClient):
        """Unknown product ID returns 404."""
        response = client.put("/api/products/999", json=VALID_PRODUCT_DATA)

        assert response.status_code == 404


class TestDeleteProduct:
    """Tests for DELETE /api/products/{id}."""

    def test_delete_product(self, client: TestClient):
        """Deleted products and their packing lists are gone."""
        product = create_product(client)
        packing_list = dispatch(client, product["id"], "B24001", 5)

        response = client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 204
        assert client.get(f"/api/products/{product['id']}").status_code == 404
        assert client.get(f"/api/packing-lists/{packing_list['pl_no']}").status_code == 404

    def test_delete_missing_product_returns_404(self, client: TestClient):
        """Unknown product ID returns 404."""
        response = client.delete("/api/products/999")

        assert response.status_code == 404
