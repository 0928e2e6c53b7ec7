from __future__ import annotations

import logging

from marketplace.core.errors import NotFoundError
from marketplace.models.base import ListingStatus, PaymentType
from marketplace.models.listing import Listing
from marketplace.models.payment import Payment
from marketplace.schemas.listing import ListingCreate
from marketplace.schemas.payment import PaymentCreate
from marketplace.services.storage import MarketplaceStorage

log = logging.getLogger(__name__)

LISTING_NOT_FOUND = "Annonce non trouvée"


async def create_listing_with_payment(
    storage: MarketplaceStorage,
    data: ListingCreate,
    *,
    publish_fee: int,
) -> tuple[Listing, Payment]:
    """
    Create a pending listing and its publication payment.

    Both rows belong to the caller's unit of work; nothing is committed here.
    """
    listing = await storage.create_listing(data)
    payment = await storage.create_payment(
        PaymentCreate(listing_id=listing.id, type=PaymentType.PUBLISH.value, amount=publish_fee)
    )
    log.info("listing %s created with publish payment %s", listing.id, payment.id)
    return listing, payment


async def get_listing_or_raise(storage: MarketplaceStorage, listing_id: str) -> Listing:
    listing = await storage.get_listing(listing_id)
    if listing is None:
        raise NotFoundError(LISTING_NOT_FOUND)
    return listing


async def moderate_listing(storage: MarketplaceStorage, listing_id: str, status: ListingStatus) -> Listing:
    if status not in (ListingStatus.APPROVED, ListingStatus.REJECTED):
        raise ValueError(f"Moderation cannot set status {status!r}")

    listing = await storage.update_listing_status(listing_id, status)
    if listing is None:
        raise NotFoundError(LISTING_NOT_FOUND)
    log.info("listing %s %s", listing.id, listing.status)
    return listing


async def approve_all_eligible(storage: MarketplaceStorage) -> int:
    # Only listings whose publication fee is confirmed are eligible.
    count = await storage.approve_all_pending_listings()
    log.info("bulk approval: %d listing(s) approved", count)
    return count


def approve_all_message(count: int) -> str:
    return f"{count} annonce(s) approuvée(s)"
