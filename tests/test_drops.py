from tests.conftest import drop_payload


def test_create_drop_defaults_and_camel_case(client):
    payload = drop_payload()
    del payload["hero_image2"]
    del payload["total_pieces"]
    r = client.post("/api/drops", json=payload)
    assert r.status_code == 201
    body = r.json()
    assert body["heroImage"] == "assets/drop01.jpg"
    assert body["heroImage2"] is None
    assert body["accentColor"] == "#e8e4dc"
    assert body["releaseDate"] == "2025-03-01"
    assert body["totalPieces"] == 0
    assert body["active"] is True
    assert "hero_image" not in body


def test_create_drop_accepts_camel_case_body(client):
    r = client.post(
        "/api/drops",
        json={
            "id": "drop02",
            "number": 2,
            "label": "DROP 02",
            "tagline": "Exodus",
            "description": "Segundo drop",
            "heroImage": "assets/drop02.jpg",
            "releaseDate": "2025-06-01",
            "accentColor": "#101010",
        },
    )
    assert r.status_code == 201
    assert r.json()["accentColor"] == "#101010"


def test_create_drop_missing_fields_is_400(client):
    payload = drop_payload()
    del payload["tagline"]
    assert client.post("/api/drops", json=payload).status_code == 400


def test_create_duplicate_drop_is_409(client):
    assert client.post("/api/drops", json=drop_payload()).status_code == 201
    assert client.post("/api/drops", json=drop_payload()).status_code == 409


def test_public_list_only_active_ordered_by_number(client):
    client.post("/api/drops", json=drop_payload(id="d3", number=3))
    client.post("/api/drops", json=drop_payload(id="d1", number=1))
    client.post("/api/drops", json=drop_payload(id="d2", number=2, active=False))

    assert [d["id"] for d in client.get("/api/drops").json()] == ["d1", "d3"]
    assert [d["id"] for d in client.get("/api/drops/admin/all").json()] == ["d1", "d2", "d3"]


def test_get_drop_requires_active(client):
    client.post("/api/drops", json=drop_payload(id="on"))
    client.post("/api/drops", json=drop_payload(id="off", number=2, active=False))
    assert client.get("/api/drops/on").status_code == 200
    assert client.get("/api/drops/off").status_code == 404
    assert client.get("/api/drops/nope").status_code == 404


def test_update_keeps_omitted_fields_but_clears_hero_image2(client):
    client.post("/api/drops", json=drop_payload())
    r = client.put("/api/drops/drop01", json={"label": "DROP 01 (restock)", "total_pieces": 60})
    assert r.status_code == 200
    body = r.json()
    assert body["label"] == "DROP 01 (restock)"
    assert body["totalPieces"] == 60
    assert body["tagline"] == "Genesis"
    assert body["heroImage"] == "assets/drop01.jpg"
    assert body["heroImage2"] is None


def test_update_sets_hero_image2_and_active(client):
    client.post("/api/drops", json=drop_payload(hero_image2=None))
    r = client.put("/api/drops/drop01", json={"heroImage2": "assets/new.jpg", "active": False})
    body = r.json()
    assert body["heroImage2"] == "assets/new.jpg"
    assert body["active"] is False
    assert client.get("/api/drops/drop01").status_code == 404


def test_update_missing_drop_is_404(client):
    assert client.put("/api/drops/nope", json={"label": "x"}).status_code == 404


def test_delete_drop(client):
    client.post("/api/drops", json=drop_payload())
    assert client.delete("/api/drops/drop01").status_code == 204
    assert client.delete("/api/drops/drop01").status_code == 404
    assert client.get("/api/drops/admin/all").json() == []
