from marketplace.core import ids
from marketplace.core.ids import gen_id
from marketplace.models.base import ListingStatus, PaymentStatus, utc_now
from marketplace.models.listing import Listing
from marketplace.models.payment import Payment
from marketplace.models.phone_unlock import PhoneUnlock
from marketplace.schemas.listing import ListingCreate
from marketplace.schemas.payment import PaymentCreate
from marketplace.schemas.phone_unlock import PhoneUnlockCreate


def _newest_first(rows):
    return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)


class InMemoryStorage:
    """MarketplaceStorage double backed by dicts of transient ORM objects."""

    def __init__(self):
        self.listings: dict[str, Listing] = {}
        self.payments: dict[str, Payment] = {}
        self.unlocks: dict[str, PhoneUnlock] = {}
        self.commits = 0

    async def create_listing(self, data: ListingCreate) -> Listing:
        listing = Listing(
            id=gen_id(ids.LISTING),
            **data.model_dump(),
            status=ListingStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            featured=False,
            created_at=utc_now(),
        )
        self.listings[listing.id] = listing
        return listing

    async def get_listing(self, listing_id):
        return self.listings.get(listing_id)

    async def get_all_listings(self):
        return _newest_first(self.listings.values())

    async def get_approved_listings(self):
        return _newest_first(r for r in self.listings.values() if r.is_public)

    async def get_pending_listings(self):
        return _newest_first(r for r in self.listings.values() if r.status == ListingStatus.PENDING.value)

    async def update_listing_status(self, listing_id, status):
        listing = self.listings.get(listing_id)
        if listing is not None:
            listing.status = ListingStatus(status).value
        return listing

    async def update_listing_payment_status(self, listing_id, payment_status):
        listing = self.listings.get(listing_id)
        if listing is not None:
            listing.payment_status = PaymentStatus(payment_status).value
        return listing

    async def approve_all_pending_listings(self):
        count = 0
        for listing in self.listings.values():
            if listing.status == ListingStatus.PENDING.value and listing.payment_status == PaymentStatus.CONFIRMED.value:
                listing.status = ListingStatus.APPROVED.value
                count += 1
        return count

    async def create_payment(self, data: PaymentCreate) -> Payment:
        payment = Payment(
            id=gen_id(ids.PAYMENT),
            **data.model_dump(),
            status=PaymentStatus.PENDING.value,
            created_at=utc_now(),
        )
        self.payments[payment.id] = payment
        return payment

    async def get_payment(self, payment_id):
        return self.payments.get(payment_id)

    async def update_payment_status(self, payment_id, status):
        payment = self.payments.get(payment_id)
        if payment is not None:
            payment.status = PaymentStatus(status).value
        return payment

    async def create_phone_unlock(self, data: PhoneUnlockCreate) -> PhoneUnlock:
        unlock = PhoneUnlock(
            id=gen_id(ids.PHONE_UNLOCK),
            **data.model_dump(),
            payment_status=PaymentStatus.PENDING.value,
            created_at=utc_now(),
        )
        self.unlocks[unlock.id] = unlock
        return unlock

    async def get_phone_unlock(self, unlock_id):
        return self.unlocks.get(unlock_id)

    async def update_phone_unlock_status(self, unlock_id, payment_status):
        unlock = self.unlocks.get(unlock_id)
        if unlock is not None:
            unlock.payment_status = PaymentStatus(payment_status).value
        return unlock

    async def commit(self):
        self.commits += 1
