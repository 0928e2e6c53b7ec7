from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.core import ids
from marketplace.core.ids import gen_id

from marketplace.models.base import Base, CreatedAtMixin, PaymentStatus


class Payment(CreatedAtMixin, Base):
    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(ids.PAYMENT))

    # Only set for publish payments; unlock payments stand alone.
    listing_id: Mapped[str | None] = mapped_column(String, ForeignKey("listings.id"), nullable=True, index=True)

    type: Mapped[str] = mapped_column(String(30), nullable=False)  # "publish" | "unlock"
    amount: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(30), nullable=False, default=PaymentStatus.PENDING.value)
