"""
Persistence for listings, payments and phone unlocks.

`MarketplaceStorage` is the interface the workflow services depend on.
`SqlStorage` binds it to the request's AsyncSession: writes are flushed,
the caller commits once per request.
"""

from __future__ import annotations

from typing import Protocol

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.db import get_db
from marketplace.models.base import ListingStatus, PaymentStatus
from marketplace.models.listing import Listing
from marketplace.models.payment import Payment
from marketplace.models.phone_unlock import PhoneUnlock
from marketplace.schemas.listing import ListingCreate
from marketplace.schemas.payment import PaymentCreate
from marketplace.schemas.phone_unlock import PhoneUnlockCreate


class MarketplaceStorage(Protocol):
    async def create_listing(self, data: ListingCreate) -> Listing: ...

    async def get_listing(self, listing_id: str) -> Listing | None: ...

    async def get_all_listings(self) -> list[Listing]: ...

    async def get_approved_listings(self) -> list[Listing]: ...

    async def get_pending_listings(self) -> list[Listing]: ...

    async def update_listing_status(self, listing_id: str, status: ListingStatus) -> Listing | None: ...

    async def update_listing_payment_status(
        self, listing_id: str, payment_status: PaymentStatus
    ) -> Listing | None: ...

    async def approve_all_pending_listings(self) -> int: ...

    async def create_payment(self, data: PaymentCreate) -> Payment: ...

    async def get_payment(self, payment_id: str) -> Payment | None: ...

    async def update_payment_status(self, payment_id: str, status: PaymentStatus) -> Payment | None: ...

    async def create_phone_unlock(self, data: PhoneUnlockCreate) -> PhoneUnlock: ...

    async def get_phone_unlock(self, unlock_id: str) -> PhoneUnlock | None: ...

    async def update_phone_unlock_status(
        self, unlock_id: str, payment_status: PaymentStatus
    ) -> PhoneUnlock | None: ...

    async def commit(self) -> None: ...


def _newest_first(stmt):
    # id breaks ties between rows created in the same instant
    return stmt.order_by(Listing.created_at.desc(), Listing.id.desc())


class SqlStorage:
    def __init__(self, db: AsyncSession):
        self.db = db

    # --- listings ---

    async def create_listing(self, data: ListingCreate) -> Listing:
        listing = Listing(
            **data.model_dump(),
            status=ListingStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            featured=False,
        )
        self.db.add(listing)
        await self.db.flush()
        return listing

    async def get_listing(self, listing_id: str) -> Listing | None:
        stmt = select(Listing).where(Listing.id == listing_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_all_listings(self) -> list[Listing]:
        rows = (await self.db.execute(_newest_first(select(Listing)))).scalars().all()
        return list(rows)

    async def get_approved_listings(self) -> list[Listing]:
        stmt = select(Listing).where(
            Listing.status == ListingStatus.APPROVED.value,
            Listing.payment_status == PaymentStatus.CONFIRMED.value,
        )
        rows = (await self.db.execute(_newest_first(stmt))).scalars().all()
        return list(rows)

    async def get_pending_listings(self) -> list[Listing]:
        stmt = select(Listing).where(Listing.status == ListingStatus.PENDING.value)
        rows = (await self.db.execute(_newest_first(stmt))).scalars().all()
        return list(rows)

    async def update_listing_status(self, listing_id: str, status: ListingStatus) -> Listing | None:
        listing = await self.get_listing(listing_id)
        if listing is None:
            return None
        listing.status = ListingStatus(status).value
        await self.db.flush()
        return listing

    async def update_listing_payment_status(
        self, listing_id: str, payment_status: PaymentStatus
    ) -> Listing | None:
        listing = await self.get_listing(listing_id)
        if listing is None:
            return None
        listing.payment_status = PaymentStatus(payment_status).value
        await self.db.flush()
        return listing

    async def approve_all_pending_listings(self) -> int:
        stmt = (
            update(Listing)
            .where(
                Listing.status == ListingStatus.PENDING.value,
                Listing.payment_status == PaymentStatus.CONFIRMED.value,
            )
            .values(status=ListingStatus.APPROVED.value)
            .execution_options(synchronize_session="evaluate")
        )
        result = await self.db.execute(stmt)
        return result.rowcount or 0

    # --- payments ---

    async def create_payment(self, data: PaymentCreate) -> Payment:
        payment = Payment(**data.model_dump(), status=PaymentStatus.PENDING.value)
        self.db.add(payment)
        await self.db.flush()
        return payment

    async def get_payment(self, payment_id: str) -> Payment | None:
        stmt = select(Payment).where(Payment.id == payment_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def update_payment_status(self, payment_id: str, status: PaymentStatus) -> Payment | None:
        payment = await self.get_payment(payment_id)
        if payment is None:
            return None
        payment.status = PaymentStatus(status).value
        await self.db.flush()
        return payment

    # --- phone unlocks ---

    async def create_phone_unlock(self, data: PhoneUnlockCreate) -> PhoneUnlock:
        unlock = PhoneUnlock(**data.model_dump(), payment_status=PaymentStatus.PENDING.value)
        self.db.add(unlock)
        await self.db.flush()
        return unlock

    async def get_phone_unlock(self, unlock_id: str) -> PhoneUnlock | None:
        stmt = select(PhoneUnlock).where(PhoneUnlock.id == unlock_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def update_phone_unlock_status(
        self, unlock_id: str, payment_status: PaymentStatus
    ) -> PhoneUnlock | None:
        unlock = await self.get_phone_unlock(unlock_id)
        if unlock is None:
            return None
        unlock.payment_status = PaymentStatus(payment_status).value
        await self.db.flush()
        return unlock

    async def commit(self) -> None:
        await self.db.commit()


async def get_storage(db: AsyncSession = Depends(get_db)) -> MarketplaceStorage:
    return SqlStorage(db)
