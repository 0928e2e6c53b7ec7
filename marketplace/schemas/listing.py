from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from marketplace.schemas.common import MAX_DB_INT, CamelModel, CreateModel, OutModel
from marketplace.schemas.payment import PaymentOut


class ListingCreate(CreateModel):
    city: str
    commune: str
    neighborhood: str
    rooms: int = Field(le=MAX_DB_INT)
    property_type: str
    transaction_type: str
    price: int = Field(le=MAX_DB_INT)
    deposit: int | None = Field(default=None, ge=0, le=MAX_DB_INT)
    description: str
    phone: str
    images: list[str]

    @field_validator(
        "city", "commune", "neighborhood", "property_type", "transaction_type", "description", "phone"
    )
    @classmethod
    def require_text(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "Ce champ est requis")
        return v

    @field_validator("rooms")
    @classmethod
    def validate_rooms(cls, v: int) -> int:
        if v < 1:
            raise PydanticCustomError("rooms_min", "Le nombre de chambres doit être au moins 1")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: int) -> int:
        if v < 1:
            raise PydanticCustomError("price_min", "Le prix doit être positif")
        return v

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: list[str]) -> list[str]:
        if len(v) < 1:
            raise PydanticCustomError("images_min", "Au moins une photo est requise")
        return v


class ListingOut(OutModel):
    id: str
    city: str
    commune: str
    neighborhood: str
    rooms: int
    property_type: str
    transaction_type: str
    price: int
    deposit: int | None
    description: str
    phone: str
    images: list[str]
    status: Literal["pending", "approved", "rejected"]
    payment_status: Literal["pending", "confirmed"]
    featured: bool
    created_at: datetime


class ListingCreatedOut(CamelModel):
    listing: ListingOut
    payment: PaymentOut


class ApproveAllOut(CamelModel):
    count: int
    message: str
