import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.errors import StoreError
from marketplace.models.base import ListingStatus
from marketplace.schemas.listing import ApproveAllOut, ListingOut
from marketplace.services.listings import approve_all_eligible, approve_all_message, moderate_listing
from marketplace.services.storage import MarketplaceStorage, get_storage

log = logging.getLogger(__name__)
router = APIRouter(prefix="/admin")


@router.get("/listings/pending", response_model=list[ListingOut])
async def list_pending(storage: MarketplaceStorage = Depends(get_storage)) -> list[ListingOut]:
    try:
        rows = await storage.get_pending_listings()
    except SQLAlchemyError:
        log.exception("fetching pending listings failed")
        raise StoreError("Erreur lors de la récupération des annonces en attente")
    return [ListingOut.model_validate(r) for r in rows]


@router.get("/listings/all", response_model=list[ListingOut])
async def list_all(storage: MarketplaceStorage = Depends(get_storage)) -> list[ListingOut]:
    try:
        rows = await storage.get_all_listings()
    except SQLAlchemyError:
        log.exception("fetching all listings failed")
        raise StoreError("Erreur lors de la récupération des annonces")
    return [ListingOut.model_validate(r) for r in rows]


@router.post("/listings/approve-all", response_model=ApproveAllOut)
async def approve_all(storage: MarketplaceStorage = Depends(get_storage)) -> ApproveAllOut:
    try:
        count = await approve_all_eligible(storage)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("bulk approval failed")
        raise StoreError("Erreur lors de l'approbation des annonces")
    return ApproveAllOut(count=count, message=approve_all_message(count))


@router.post("/listings/{listing_id}/approve", response_model=ListingOut)
async def approve(listing_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> ListingOut:
    try:
        listing = await moderate_listing(storage, listing_id, ListingStatus.APPROVED)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("approving listing %s failed", listing_id)
        raise StoreError("Erreur lors de l'approbation de l'annonce")
    return ListingOut.model_validate(listing)


@router.post("/listings/{listing_id}/reject", response_model=ListingOut)
async def reject(listing_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> ListingOut:
    try:
        listing = await moderate_listing(storage, listing_id, ListingStatus.REJECTED)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("rejecting listing %s failed", listing_id)
        raise StoreError("Erreur lors du rejet de l'annonce")
    return ListingOut.model_validate(listing)
