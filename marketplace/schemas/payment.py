from datetime import datetime
from typing import Literal

from pydantic import Field

from marketplace.schemas.common import MAX_DB_INT, CreateModel, OutModel


class PaymentCreate(CreateModel):
    listing_id: str | None = None
    type: Literal["publish", "unlock"]
    amount: int = Field(gt=0, le=MAX_DB_INT)


class PaymentOut(OutModel):
    id: str
    listing_id: str | None
    type: Literal["publish", "unlock"]
    amount: int
    status: Literal["pending", "confirmed"]
    created_at: datetime
