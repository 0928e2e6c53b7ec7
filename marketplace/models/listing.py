from sqlalchemy import JSON, Boolean, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.core import ids
from marketplace.core.ids import gen_id

from marketplace.models.base import Base, CreatedAtMixin, ListingStatus, PaymentStatus


class Listing(CreatedAtMixin, Base):
    __tablename__ = "listings"
    __table_args__ = (
        # public and approve-all filters
        Index("ix_listings_status_payment_status", "status", "payment_status"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: gen_id(ids.LISTING))

    # Location
    city: Mapped[str] = mapped_column(Text, nullable=False)
    commune: Mapped[str] = mapped_column(Text, nullable=False)
    neighborhood: Mapped[str] = mapped_column(Text, nullable=False)

    rooms: Mapped[int] = mapped_column(Integer, nullable=False)
    property_type: Mapped[str] = mapped_column(Text, nullable=False)
    transaction_type: Mapped[str] = mapped_column(Text, nullable=False)

    # Smallest currency unit
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    deposit: Mapped[int | None] = mapped_column(Integer, nullable=True)

    description: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(Text, nullable=False)

    # Ordered public paths, e.g. "/uploads/images-<hex>.jpg"
    images: Mapped[list] = mapped_column(JSON().with_variant(JSONB, "postgresql"), nullable=False, default=list)

    # "pending" | "approved" | "rejected"
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=ListingStatus.PENDING.value)
    # "pending" | "confirmed"
    payment_status: Mapped[str] = mapped_column(String(30), nullable=False, default=PaymentStatus.PENDING.value)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def is_public(self) -> bool:
        return (
            self.status == ListingStatus.APPROVED.value
            and self.payment_status == PaymentStatus.CONFIRMED.value
        )
