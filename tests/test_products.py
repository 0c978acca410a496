from blessed_api.db.Models.product_models import Product, ProductColor, ProductStock
from tests.conftest import product_payload


def test_create_product_seeds_default_sizes(client):
    r = client.post("/api/products", json=product_payload())
    assert r.status_code == 201
    body = r.json()
    assert body["id"] == "remera-blessed"
    assert body["originalPrice"] == 30000
    assert body["isNew"] is False
    assert body["colors"] == []
    assert [s["size"] for s in body["stock"]] == ["S", "M", "L", "XL"]
    assert all(s["stock"] == 0 and s["color"] is None for s in body["stock"])


def test_create_product_stock_is_sizes_times_colors(client):
    payload = product_payload(
        sizes=["M", "L", "S"],
        colors=[{"name": "Negro", "hex": "#000000"}, {"name": "Gris", "hex": "#888888"}],
    )
    r = client.post("/api/products", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert len(body["stock"]) == 6
    assert {c["name"] for c in body["colors"]} == {"Negro", "Gris"}
    assert [s["size"] for s in body["stock"]][:2] == ["S", "S"]


def test_create_product_with_empty_sizes_has_no_stock(client):
    r = client.post("/api/products", json=product_payload(sizes=[]))
    assert r.status_code == 201
    assert r.json()["stock"] == []


def test_create_product_missing_fields_is_400(client):
    payload = product_payload()
    del payload["originalPrice"]
    r = client.post("/api/products", json=payload)
    assert r.status_code == 400


def test_create_duplicate_product_is_conflict_and_rolls_back(client, db_session):
    first = product_payload(colors=[{"name": "Negro", "hex": "#000"}], sizes=["M"])
    assert client.post("/api/products", json=first).status_code == 201

    second = product_payload(
        colors=[{"name": "Rojo", "hex": "#f00"}, {"name": "Azul", "hex": "#00f"}],
        sizes=["S", "M", "L"],
    )
    r = client.post("/api/products", json=second)
    assert r.status_code == 409
    assert db_session.query(ProductColor).count() == 1
    assert db_session.query(ProductStock).count() == 1


def test_list_products_filters(client, db_session):
    client.post("/api/products", json=product_payload(id="a", drop="drop01", cat="tshirts"))
    client.post("/api/products", json=product_payload(id="b", drop="drop02", cat="hoodies"))
    client.post("/api/products", json=product_payload(id="c", drop="drop02", cat="tshirts"))

    assert {p["id"] for p in client.get("/api/products").json()} == {"a", "b", "c"}
    assert {p["id"] for p in client.get("/api/products?drop=drop02").json()} == {"b", "c"}
    assert {p["id"] for p in client.get("/api/products?cat=tshirts").json()} == {"a", "c"}
    assert {p["id"] for p in client.get("/api/products?drop=drop02&cat=tshirts").json()} == {"c"}
    assert {p["id"] for p in client.get("/api/products?drop=all&cat=all").json()} == {"a", "b", "c"}


def test_list_products_newest_first(client):
    for pid in ("first", "second", "third"):
        client.post("/api/products", json=product_payload(id=pid))
    assert [p["id"] for p in client.get("/api/products").json()] == ["third", "second", "first"]


def test_inactive_products_are_hidden(client, db_session):
    client.post("/api/products", json=product_payload(id="hidden"))
    db_session.get(Product, "hidden").active = False
    db_session.commit()

    assert client.get("/api/products").json() == []
    assert client.get("/api/products/hidden").status_code == 404


def test_get_product(client):
    client.post("/api/products", json=product_payload(colors=[{"name": "Negro", "hex": "#000"}], sizes=["L", "36"]))
    r = client.get("/api/products/remera-blessed")
    assert r.status_code == 200
    body = r.json()
    assert body["colors"] == [{"name": "Negro", "hex": "#000"}]
    assert [s["size"] for s in body["stock"]] == ["36", "L"]


def test_get_missing_product_is_404(client):
    assert client.get("/api/products/nope").status_code == 404


def test_delete_product_removes_dependents(client, db_session):
    client.post("/api/products", json=product_payload(colors=[{"name": "Negro", "hex": "#000"}]))
    r = client.delete("/api/products/remera-blessed")
    assert r.status_code == 204
    assert r.content == b""

    assert db_session.query(Product).count() == 0
    assert db_session.query(ProductColor).count() == 0
    assert db_session.query(ProductStock).count() == 0
    assert client.get("/api/stock/remera-blessed").status_code == 404


def test_delete_missing_product_is_404(client):
    assert client.delete("/api/products/nope").status_code == 404


def test_image_list_mutations(client):
    client.post("/api/products", json=product_payload(images=["a.jpg", "b.jpg", "c.jpg"]))
    url = "/api/products/remera-blessed/images"

    r = client.post(url, json={"url": "d.jpg"})
    assert r.json() == {"images": ["a.jpg", "b.jpg", "c.jpg", "d.jpg"]}

    r = client.request("DELETE", url, json={"index": 1})
    assert r.json() == {"images": ["a.jpg", "c.jpg", "d.jpg"]}

    r = client.request("DELETE", url, json={"index": 0})
    assert r.json() == {"images": ["c.jpg", "d.jpg"]}

    r = client.request("DELETE", url, json={"url": "d.jpg"})
    assert r.json() == {"images": ["c.jpg"]}

    r = client.put(url, json={"images": ["z.jpg", "c.jpg"]})
    assert r.json() == {"images": ["z.jpg", "c.jpg"]}
    assert client.get("/api/products/remera-blessed").json()["images"] == ["z.jpg", "c.jpg"]


def test_remove_image_index_out_of_range_keeps_list(client):
    client.post("/api/products", json=product_payload(images=["a.jpg", "b.jpg"]))
    url = "/api/products/remera-blessed/images"
    assert client.request("DELETE", url, json={"index": 5}).json() == {"images": ["a.jpg", "b.jpg"]}
    assert client.request("DELETE", url, json={"index": -1}).json() == {"images": ["a.jpg", "b.jpg"]}


def test_image_routes_validation_and_404(client):
    client.post("/api/products", json=product_payload())
    url = "/api/products/remera-blessed/images"
    assert client.request("DELETE", url, json={}).status_code == 400
    assert client.post(url, json={}).status_code == 400
    assert client.put(url, json={"images": "a.jpg"}).status_code == 400
    assert client.post("/api/products/nope/images", json={"url": "x.jpg"}).status_code == 404
    assert client.put("/api/products/nope/images", json={"images": []}).status_code == 404
