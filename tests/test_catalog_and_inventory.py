def _create(client, path: str, payload: dict) -> str:
    response = client.post(path, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["id"]


def test_catalog_setup_and_listing(test_context):
    client, _ = test_context

    store_id = _create(client, "/stores", {"name": "Tienda Centro"})
    warehouse_id = _create(client, f"/stores/{store_id}/warehouses", {"name": "Almacen"})
    area_id = _create(client, f"/stores/{store_id}/sales-areas", {"name": "Piso 1"})
    company_id = _create(client, "/companies", {"name": "Distribuidora Habana"})
    product_id = _create(
        client,
        "/products",
        {"name": "Refresco de cola", "category": "bebidas", "cost_price": 8.5, "sale_price": 19.99},
    )

    stores = client.get("/stores").json()["items"]
    assert stores[0]["id"] == store_id
    assert stores[0]["warehouses"] == [{"id": warehouse_id, "store_id": store_id, "name": "Almacen"}]
    assert stores[0]["sales_areas"][0]["id"] == area_id

    assert client.get("/companies").json()["items"][0]["id"] == company_id

    products = client.get("/products", params={"q": "cola"}).json()
    assert products["items"][0]["id"] == product_id
    assert products["items"][0]["unit"] == "un"
    assert products["items"][0]["sale_price"] == 19.99


def test_duplicate_names_conflict(test_context):
    client, _ = test_context
    store_id = _create(client, "/stores", {"name": "Tienda Centro"})
    _create(client, f"/stores/{store_id}/warehouses", {"name": "Almacen"})

    assert client.post("/stores", json={"name": "Tienda Centro"}).status_code == 409
    duplicate = client.post(f"/stores/{store_id}/warehouses", json={"name": "Almacen"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"]["code"] == "conflict"

    missing = client.post("/stores/nope/sales-areas", json={"name": "Piso 1"})
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "Store not found: nope"


def test_price_update_only_affects_future_records(seeded):
    client, _, ids = seeded
    client.post(
        "/warehouse/inflows",
        json={
            "rows": [
                {
                    "user_id": "almacenero",
                    "warehouse_id": ids["warehouse_id"],
                    "in_type": "FACTURA",
                    "provider_id": ids["company_id"],
                    "product_id": ids["product_id"],
                    "date": "20/02/2024",
                    "quantity": "2",
                }
            ]
        },
    )

    updated = client.patch(f"/products/{ids['product_id']}", json={"sale_price": 25})
    assert updated.status_code == 200, updated.text
    assert updated.json()["sale_price"] == 25.0

    [inflow] = client.get(f"/warehouse/{ids['warehouse_id']}/inflows").json()["items"]
    assert inflow["sale_amount"] == 39.98

    missing = client.patch("/products/nope", json={"sale_price": 1})
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "product_not_found"


def test_inventory_endpoints(seeded):
    client, _, ids = seeded
    client.post(
        "/warehouse/inflows",
        json={
            "rows": [
                {
                    "user_id": "almacenero",
                    "warehouse_id": ids["warehouse_id"],
                    "in_type": "FACTURA",
                    "provider_id": ids["company_id"],
                    "product_id": ids["product_id"],
                    "date": "20/02/2024",
                    "quantity": 4,
                }
            ]
        },
    )
    base = f"/inventory/warehouse/{ids['warehouse_id']}"

    listing = client.get(base, params={"in_stock": True})
    assert listing.status_code == 200
    body = listing.json()
    assert body["items"][0]["quantity"] == 4
    assert body["total_cost_value"] == 34.0

    level = client.get(f"{base}/products/{ids['product_id']}").json()
    assert level == {
        "location_kind": "warehouse",
        "location_id": ids["warehouse_id"],
        "product_id": ids["product_id"],
        "quantity": 4,
        "is_low_stock": False,
    }

    threshold = client.put(f"{base}/products/{ids['product_id']}/min-stock", json={"min_stock": 5})
    assert threshold.status_code == 200, threshold.text
    assert threshold.json()["is_low_stock"] is True

    area_level = client.get(f"/inventory/sales_area/{ids['sales_area_id']}/products/{ids['product_id']}").json()
    assert area_level["quantity"] == 0
    assert area_level["is_low_stock"] is True

    assert client.get(f"/inventory/shelf/{ids['warehouse_id']}").status_code == 422
    assert client.get(f"/inventory/warehouse/{ids['sales_area_id']}").status_code == 404


def test_health_endpoints(test_context):
    client, _ = test_context

    assert client.get("/health").json() == {"ok": True}
    response = client.get("/")
    assert response.json()["app"] == "Retail Ledger Backend"
    assert response.headers["X-Request-ID"]
