import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.errors import StoreError
from marketplace.schemas.payment import PaymentOut
from marketplace.services.payments import confirm_payment, get_payment_or_raise
from marketplace.services.storage import MarketplaceStorage, get_storage

log = logging.getLogger(__name__)
router = APIRouter()


@router.get("/payments/{payment_id}", response_model=PaymentOut)
async def get_payment(payment_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> PaymentOut:
    try:
        payment = await get_payment_or_raise(storage, payment_id)
    except SQLAlchemyError:
        log.exception("fetching payment %s failed", payment_id)
        raise StoreError("Erreur lors de la récupération du paiement")
    return PaymentOut.model_validate(payment)


@router.post("/payments/{payment_id}/confirm", response_model=PaymentOut)
async def confirm(payment_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> PaymentOut:
    # No gateway: confirmation is an explicit call.
    try:
        payment = await confirm_payment(storage, payment_id)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("confirming payment %s failed", payment_id)
        raise StoreError("Erreur lors de la confirmation du paiement")
    return PaymentOut.model_validate(payment)
