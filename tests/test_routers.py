# tests/test_routers.py
import json

ADMIN_TOKEN = "test-admin-token"


def _form(**kw):
    data = {"title": "Red Field", "category": "artworks", "year": "2023", "price": "1200"}
    data.update(kw)
    return data


def _files(make_image, name="Red Field.jpg"):
    return {"image": (name, make_image(2000, 1500), "image/jpeg")}


def _uploads(settings):
    tmp = settings.upload_tmp_path
    return list(tmp.iterdir()) if tmp.exists() else []


# -------- Upload --------


def test_upload_with_form_token(client, settings, make_image):
    resp = client.post(
        "/admin/upload",
        data=_form(token=ADMIN_TOKEN),
        files=_files(make_image),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    item = body["item"]
    assert item["category"] == "painting"
    assert item["year"] == 2023
    assert item["price"] == 1200
    assert item["available"] is True
    assert item["featured"] is False
    assert item["optimizedImage"] == "assets/optimized/artworks/Red Field.jpg"
    assert item["optimizedThumbnail"] == "assets/optimized/artworks/thumbs/Red Field.jpg"

    stored = json.loads(settings.data_path.read_text(encoding="utf-8"))
    assert stored[0]["id"] == item["id"]
    assert _uploads(settings) == []


def test_upload_with_header_token(client, make_image):
    resp = client.post(
        "/admin/upload",
        data=_form(category="photography"),
        files=_files(make_image),
        headers={"X-Admin-Token": ADMIN_TOKEN},
    )

    assert resp.status_code == 200
    assert resp.json()["item"]["id"].startswith("ph-")


def test_upload_without_token_is_rejected_before_writes(client, settings, make_image):
    resp = client.post("/admin/upload", data=_form(), files=_files(make_image))

    assert resp.status_code == 401
    assert resp.json() == {"ok": False, "error": "Invalid admin token"}
    assert not settings.data_path.exists()
    assert not settings.assets_path.exists()
    assert _uploads(settings) == []


def test_upload_with_wrong_token(client, settings, make_image):
    resp = client.post(
        "/admin/upload",
        data=_form(token="guess"),
        files=_files(make_image),
    )

    assert resp.status_code == 401
    assert not settings.data_path.exists()


def test_upload_missing_title(client, settings, make_image):
    resp = client.post(
        "/admin/upload",
        data=_form(title="", token=ADMIN_TOKEN),
        files=_files(make_image),
    )

    assert resp.status_code == 400
    assert resp.json()["ok"] is False
    assert "title" in resp.json()["error"]
    assert not settings.data_path.exists()
    assert _uploads(settings) == []


def test_upload_missing_image(client, settings):
    resp = client.post("/admin/upload", data=_form(token=ADMIN_TOKEN))

    assert resp.status_code == 400
    assert "image" in resp.json()["error"]
    assert not settings.data_path.exists()


def test_upload_broken_image(client, settings):
    resp = client.post(
        "/admin/upload",
        data=_form(token=ADMIN_TOKEN),
        files={"image": ("x.jpg", b"not an image", "image/jpeg")},
    )

    assert resp.status_code == 500
    assert resp.json()["ok"] is False
    assert not settings.data_path.exists()
    assert _uploads(settings) == []


# -------- Catalog reads --------


def _seed(settings, records):
    settings.data_path.write_text(json.dumps(records), encoding="utf-8")


def test_data_document_is_served_as_stored(client, settings):
    records = [{"id": "mz-1", "title": "A", "category": "painting", "extra": True}]
    _seed(settings, records)

    resp = client.get("/data.json")

    assert resp.status_code == 200
    assert resp.json() == records


def test_data_document_unavailable(client):
    resp = client.get("/data.json")

    assert resp.status_code == 503
    assert resp.json()["ok"] is False


def test_featured_endpoint(client, settings):
    _seed(
        settings,
        [
            {"id": "a", "title": "A", "category": "painting", "year": 2020},
            {"id": "b", "title": "B", "category": "painting", "year": 2023},
            {"id": "c", "title": "C", "category": "painting", "year": 2021, "featured": True},
        ],
    )

    resp = client.get("/api/catalog/featured")

    assert resp.status_code == 200
    assert resp.json()["item"]["id"] == "c"


def test_featured_endpoint_empty_catalog(client):
    resp = client.get("/api/catalog/featured")

    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "Catalog is empty"}


def test_listing_endpoint(client, settings):
    _seed(
        settings,
        [
            {"id": "a", "title": "A", "category": "painting", "price": 500,
             "thumbnail": "assets/artworks/a.jpg"},
            {"id": "b", "title": "B", "category": "photography"},
            {"id": "c", "title": "C", "category": "painting", "price": 100},
        ],
    )

    resp = client.get("/api/catalog/items", params={"sort": "priceL"})
    assert [c["item"]["id"] for c in resp.json()] == ["b", "c", "a"]

    card = resp.json()[2]
    assert card["src"] == "assets/optimized/artworks/thumbs/a.jpg"
    assert card["fallbacks"] == ["assets/artworks/thumbs/a.jpg", "assets/artworks/a.jpg"]
    assert card["price_label"] == "$500"

    resp = client.get("/api/catalog/items", params={"hash": "#photos"})
    assert [c["item"]["id"] for c in resp.json()] == ["b"]


def test_detail_endpoint(client, settings):
    _seed(settings, [{"id": "mz-1", "title": "A", "category": "painting",
                      "images": ["assets/artworks/a.jpg"]}])

    resp = client.get("/api/catalog/items/mz-1")
    assert resp.status_code == 200
    assert resp.json()["src"] == "assets/optimized/artworks/a.jpg"
    assert resp.json()["fallbacks"] == ["assets/artworks/a.jpg"]

    resp = client.get("/api/catalog/items/nope")
    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "Work not found"}


def test_health(client):
    assert client.get("/").json() == {"status": "ok", "service": "portfolio-catalog"}


def test_failed_staging_leaves_no_partial_upload(client, settings, make_image, monkeypatch):
    def broken_copy(src, dst, *args, **kwargs):
        dst.write(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr("portfolio.routers.admin.shutil.copyfileobj", broken_copy)

    resp = client.post(
        "/admin/upload",
        data=_form(token=ADMIN_TOKEN),
        files=_files(make_image),
    )

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "Upload failed"}
    assert _uploads(settings) == []
    assert not settings.data_path.exists()
