import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import UploadFile

from marketplace.core.config import settings
from marketplace.core.errors import StoreError, from_pydantic
from marketplace.schemas.listing import ListingCreate, ListingCreatedOut, ListingOut
from marketplace.schemas.payment import PaymentOut
from marketplace.services.listings import create_listing_with_payment, get_listing_or_raise
from marketplace.services.storage import MarketplaceStorage, get_storage
from marketplace.services.uploads import LocalUploadStore, get_upload_store

log = logging.getLogger(__name__)
router = APIRouter()

_INT_FIELDS = ("rooms", "price", "deposit")


def _to_int(raw: str) -> Any:
    # Unparseable text is passed through so validation reports the field.
    try:
        return int(raw.strip())
    except ValueError:
        return raw


def _shape_listing_fields(fields: dict[str, str], images: list[str]) -> dict[str, Any]:
    data: dict[str, Any] = dict(fields)
    if not (data.get("deposit") or "").strip():
        data.pop("deposit", None)
    for name in _INT_FIELDS:
        if name in data:
            data[name] = _to_int(data[name])
    data["images"] = images
    return data


@router.post("/listings", response_model=ListingCreatedOut, status_code=201)
async def create_listing(
    request: Request,
    storage: MarketplaceStorage = Depends(get_storage),
    uploads: LocalUploadStore = Depends(get_upload_store),
) -> ListingCreatedOut:
    """
    Multipart form: listing fields plus 1..N files under `images`.
    Creates the listing (pending) and its publication payment.
    """
    form = await request.form()
    files = [f for f in form.getlist("images") if isinstance(f, UploadFile)]
    fields = {k: v for k, v in form.multi_items() if k != "images" and isinstance(v, str)}

    pending_images = await uploads.prepare(files)
    try:
        data = ListingCreate.model_validate(
            _shape_listing_fields(fields, [uploads.url_for(img) for img in pending_images])
        )
    except PydanticValidationError as e:
        raise from_pydantic(e)

    uploads.save(pending_images)

    try:
        listing, payment = await create_listing_with_payment(storage, data, publish_fee=settings.publish_fee)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("creating listing failed")
        raise StoreError("Erreur lors de la création de l'annonce")

    return ListingCreatedOut(
        listing=ListingOut.model_validate(listing),
        payment=PaymentOut.model_validate(payment),
    )


@router.get("/listings", response_model=list[ListingOut])
async def list_public_listings(storage: MarketplaceStorage = Depends(get_storage)) -> list[ListingOut]:
    try:
        rows = await storage.get_approved_listings()
    except SQLAlchemyError:
        log.exception("fetching approved listings failed")
        raise StoreError("Erreur lors de la récupération des annonces")
    return [ListingOut.model_validate(r) for r in rows]


@router.get("/listings/{listing_id}", response_model=ListingOut)
async def get_listing(listing_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> ListingOut:
    try:
        listing = await get_listing_or_raise(storage, listing_id)
    except SQLAlchemyError:
        log.exception("fetching listing %s failed", listing_id)
        raise StoreError("Erreur lors de la récupération de l'annonce")
    return ListingOut.model_validate(listing)
