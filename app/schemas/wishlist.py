from pydantic import BaseModel, Field


class WishlistItemRequest(BaseModel):
    product_id: str = Field(min_length=1)
