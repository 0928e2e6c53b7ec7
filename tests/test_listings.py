import pytest
from sqlalchemy.exc import OperationalError

from fakes import InMemoryStorage
from marketplace.main import app
from marketplace.services.storage import get_storage


@pytest.mark.asyncio
async def test_create_listing_returns_pending_listing_and_publish_payment(client, create_listing, upload_store):
    body = await create_listing()
    listing, payment = body["listing"], body["payment"]

    assert listing["id"].startswith("lst_")
    assert listing["status"] == "pending"
    assert listing["paymentStatus"] == "pending"
    assert listing["featured"] is False
    assert listing["rooms"] == 3
    assert listing["price"] == 50000
    assert listing["deposit"] == 100000
    assert listing["propertyType"] == "appartement"
    assert "createdAt" in listing

    assert payment["type"] == "publish"
    assert payment["amount"] == 1500
    assert payment["status"] == "pending"
    assert payment["listingId"] == listing["id"]

    [image_url] = listing["images"]
    assert image_url.startswith("/uploads/images-")
    assert upload_store.resolve_path(image_url).exists()


@pytest.mark.asyncio
async def test_create_listing_keeps_image_order(client, listing_fields, jpeg):
    files = [jpeg(f"p{i}.jpg") for i in range(10)]
    r = await client.post("/api/v1/listings", data=listing_fields, files=files)
    assert r.status_code == 201, r.text
    assert len(r.json()["listing"]["images"]) == 10


@pytest.mark.asyncio
async def test_create_listing_without_images_is_rejected(client, listing_fields):
    r = await client.post("/api/v1/listings", data=listing_fields)
    assert r.status_code == 400
    assert r.json()["error"] == "Au moins une image est requise"


@pytest.mark.asyncio
async def test_create_listing_with_too_many_images_is_rejected(client, listing_fields, jpeg):
    r = await client.post("/api/v1/listings", data=listing_fields, files=[jpeg() for _ in range(11)])
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_create_listing_rejects_non_image_files(client, listing_fields, jpeg, upload_store):
    r = await client.post(
        "/api/v1/listings",
        data=listing_fields,
        files=[jpeg(), jpeg("doc.pdf", content_type="application/pdf")],
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Type de fichier non autorisé. Utilisez JPG, JPEG ou PNG."
    assert list(upload_store.base.iterdir()) == []


@pytest.mark.asyncio
async def test_create_listing_rejects_oversized_files(client, listing_fields, jpeg):
    # upload_store fixture allows 1 KiB
    r = await client.post("/api/v1/listings", data=listing_fields, files=[jpeg(size=2048)])
    assert r.status_code == 400
    assert r.json()["details"][0]["field"] == "images"


@pytest.mark.asyncio
async def test_create_listing_validates_numeric_fields(client, listing_fields, jpeg, upload_store):
    r = await client.post(
        "/api/v1/listings",
        data={**listing_fields, "rooms": "abc", "price": "0"},
        files=[jpeg()],
    )
    assert r.status_code == 400
    fields = {d["field"]: d["message"] for d in r.json()["details"]}
    assert "rooms" in fields
    assert fields["price"] == "Le prix doit être positif"
    assert list(upload_store.base.iterdir()) == []


@pytest.mark.asyncio
async def test_create_listing_rejects_price_beyond_integer_column(client, listing_fields, jpeg, upload_store):
    r = await client.post(
        "/api/v1/listings",
        data={**listing_fields, "price": "99999999999999999999"},
        files=[jpeg()],
    )
    assert r.status_code == 400
    assert "price" in {d["field"] for d in r.json()["details"]}
    assert list(upload_store.base.iterdir()) == []


@pytest.mark.asyncio
async def test_create_listing_stores_image_under_content_type_extension(client, listing_fields, jpeg, upload_store):
    r = await client.post(
        "/api/v1/listings",
        data=listing_fields,
        files=[jpeg("evil.html", content_type="image/png")],
    )
    assert r.status_code == 201, r.text
    [image_url] = r.json()["listing"]["images"]
    assert image_url.endswith(".png")
    assert [p.suffix for p in upload_store.base.iterdir()] == [".png"]

@pytest.mark.asyncio
async def test_create_listing_rejects_server_assigned_fields(client, listing_fields, jpeg):
    r = await client.post(
        "/api/v1/listings",
        data={**listing_fields, "status": "approved"},
        files=[jpeg()],
    )
    assert r.status_code == 400
    assert "status" in r.json()["error"]


@pytest.mark.asyncio
async def test_create_listing_empty_deposit_is_absent(create_listing):
    body = await create_listing(deposit="")
    assert body["listing"]["deposit"] is None


@pytest.mark.asyncio
async def test_get_listing(client, create_listing):
    created = (await create_listing())["listing"]

    r = await client.get(f"/api/v1/listings/{created['id']}")
    assert r.status_code == 200
    fetched = r.json()
    # SQLite hands back naive timestamps, compare the rest
    fetched.pop("createdAt")
    created.pop("createdAt")
    assert fetched == created


@pytest.mark.asyncio
async def test_get_unknown_listing_is_404(client):
    r = await client.get("/api/v1/listings/lst_missing")
    assert r.status_code == 404
    assert r.json() == {"error": "Annonce non trouvée"}


@pytest.mark.asyncio
async def test_public_listings_hide_unmoderated_listings(client, create_listing):
    await create_listing()

    r = await client.get("/api/v1/listings")
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_store_failure_is_reported_as_500(client):
    class BrokenStorage(InMemoryStorage):
        async def get_approved_listings(self):
            raise OperationalError("SELECT", {}, Exception("database is down"))

    app.dependency_overrides[get_storage] = lambda: BrokenStorage()

    r = await client.get("/api/v1/listings")
    assert r.status_code == 500
    assert r.json() == {"error": "Erreur lors de la récupération des annonces"}
