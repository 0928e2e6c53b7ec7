from __future__ import annotations

import logging

from marketplace.core.errors import NotFoundError
from marketplace.models.base import PaymentStatus, PaymentType
from marketplace.models.payment import Payment
from marketplace.models.phone_unlock import PhoneUnlock
from marketplace.schemas.payment import PaymentCreate
from marketplace.schemas.phone_unlock import PhoneUnlockCreate
from marketplace.services.listings import LISTING_NOT_FOUND
from marketplace.services.storage import MarketplaceStorage

log = logging.getLogger(__name__)

PAYMENT_NOT_FOUND = "Paiement non trouvé"
UNLOCK_NOT_FOUND = "Déblocage non trouvé"


async def get_payment_or_raise(storage: MarketplaceStorage, payment_id: str) -> Payment:
    payment = await storage.get_payment(payment_id)
    if payment is None:
        raise NotFoundError(PAYMENT_NOT_FOUND)
    return payment


async def confirm_payment(storage: MarketplaceStorage, payment_id: str) -> Payment:
    """
    Mark a payment confirmed.

    A publish payment linked to a listing also confirms that listing's
    payment status. Unlock payments carry no listing and cascade nowhere.
    """
    payment = await storage.update_payment_status(payment_id, PaymentStatus.CONFIRMED)
    if payment is None:
        raise NotFoundError(PAYMENT_NOT_FOUND)

    if payment.listing_id and payment.type == PaymentType.PUBLISH.value:
        listing = await storage.update_listing_payment_status(payment.listing_id, PaymentStatus.CONFIRMED)
        if listing is None:
            log.warning("payment %s references missing listing %s", payment.id, payment.listing_id)

    log.info("payment %s (%s) confirmed", payment.id, payment.type)
    return payment


async def request_phone_unlock(
    storage: MarketplaceStorage,
    data: PhoneUnlockCreate,
    *,
    unlock_fee: int,
) -> tuple[PhoneUnlock, Payment]:
    if await storage.get_listing(data.listing_id) is None:
        raise NotFoundError(LISTING_NOT_FOUND)

    unlock = await storage.create_phone_unlock(data)
    payment = await storage.create_payment(PaymentCreate(type=PaymentType.UNLOCK.value, amount=unlock_fee))
    log.info("phone unlock %s requested for listing %s", unlock.id, data.listing_id)
    return unlock, payment


async def get_phone_unlock_or_raise(storage: MarketplaceStorage, unlock_id: str) -> PhoneUnlock:
    unlock = await storage.get_phone_unlock(unlock_id)
    if unlock is None:
        raise NotFoundError(UNLOCK_NOT_FOUND)
    return unlock


async def confirm_phone_unlock(storage: MarketplaceStorage, unlock_id: str) -> PhoneUnlock:
    unlock = await storage.update_phone_unlock_status(unlock_id, PaymentStatus.CONFIRMED)
    if unlock is None:
        raise NotFoundError(UNLOCK_NOT_FOUND)
    log.info("phone unlock %s confirmed", unlock.id)
    return unlock
