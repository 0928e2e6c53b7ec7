from datetime import datetime
from typing import Literal

from pydantic import Field

from marketplace.schemas.common import CamelModel, CreateModel, OutModel
from marketplace.schemas.payment import PaymentOut


class PhoneUnlockCreate(CreateModel):
    listing_id: str = Field(min_length=1)


class PhoneUnlockOut(OutModel):
    id: str
    listing_id: str
    payment_status: Literal["pending", "confirmed"]
    created_at: datetime


class PhoneUnlockCreatedOut(CamelModel):
    unlock: PhoneUnlockOut
    payment: PaymentOut
