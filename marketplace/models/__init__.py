from marketplace.models.base import Base  # noqa: F401

from marketplace.models.listing import Listing  # noqa: F401
from marketplace.models.payment import Payment  # noqa: F401
from marketplace.models.phone_unlock import PhoneUnlock  # noqa: F401
