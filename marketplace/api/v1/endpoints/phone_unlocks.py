import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from marketplace.core.config import settings
from marketplace.core.errors import StoreError
from marketplace.schemas.payment import PaymentOut
from marketplace.schemas.phone_unlock import PhoneUnlockCreate, PhoneUnlockCreatedOut, PhoneUnlockOut
from marketplace.services.payments import confirm_phone_unlock, get_phone_unlock_or_raise, request_phone_unlock
from marketplace.services.storage import MarketplaceStorage, get_storage

log = logging.getLogger(__name__)
router = APIRouter()


@router.post("/phone-unlock", response_model=PhoneUnlockCreatedOut, status_code=201)
async def create_phone_unlock(
    payload: PhoneUnlockCreate,
    storage: MarketplaceStorage = Depends(get_storage),
) -> PhoneUnlockCreatedOut:
    try:
        unlock, payment = await request_phone_unlock(storage, payload, unlock_fee=settings.unlock_fee)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("phone unlock for listing %s failed", payload.listing_id)
        raise StoreError("Erreur lors du déblocage du numéro")

    return PhoneUnlockCreatedOut(
        unlock=PhoneUnlockOut.model_validate(unlock),
        payment=PaymentOut.model_validate(payment),
    )


@router.get("/phone-unlock/{unlock_id}", response_model=PhoneUnlockOut)
async def get_phone_unlock(unlock_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> PhoneUnlockOut:
    try:
        unlock = await get_phone_unlock_or_raise(storage, unlock_id)
    except SQLAlchemyError:
        log.exception("fetching phone unlock %s failed", unlock_id)
        raise StoreError("Erreur lors de la récupération du déblocage")
    return PhoneUnlockOut.model_validate(unlock)


@router.post("/phone-unlock/{unlock_id}/confirm", response_model=PhoneUnlockOut)
async def confirm_unlock(unlock_id: str, storage: MarketplaceStorage = Depends(get_storage)) -> PhoneUnlockOut:
    try:
        unlock = await confirm_phone_unlock(storage, unlock_id)
        await storage.commit()
    except SQLAlchemyError:
        log.exception("confirming phone unlock %s failed", unlock_id)
        raise StoreError("Erreur lors de la confirmation du déblocage")
    return PhoneUnlockOut.model_validate(unlock)
