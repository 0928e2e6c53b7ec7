from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.core import ids
from marketplace.core.ids import gen_id

from marketplace.models.base import Base, CreatedAtMixin, PaymentStatus


class PhoneUnlock(CreatedAtMixin, Base):
    __tablename__ = "phone_unlocks"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(ids.PHONE_UNLOCK))

    # Listing whose phone number is being unlocked
    listing_id: Mapped[str] = mapped_column(String, ForeignKey("listings.id"), nullable=False, index=True)

    payment_status: Mapped[str] = mapped_column(String(30), nullable=False, default=PaymentStatus.PENDING.value)
