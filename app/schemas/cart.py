from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)


class UpdateCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int


class CartItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
