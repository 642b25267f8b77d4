from typing import Optional

from pydantic import BaseModel, Field, model_validator

from models.order import PaymentMethod


class AddressRequest(BaseModel):
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    is_default: bool = False


class PlaceOrderRequest(BaseModel):
    """Checkout body; the address is given inline or picked from the address book."""

    delivery_address: Optional[AddressRequest] = None
    address_id: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CARD
    notes: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _one_address(self):
        if self.delivery_address is None and not self.address_id:
            raise ValueError("delivery_address or address_id is required")
        return self
