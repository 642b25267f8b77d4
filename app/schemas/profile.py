from typing import Optional

from pydantic import BaseModel, Field, constr


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[constr(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")] = None
    phone: Optional[constr(pattern=r"^\+?\d{10,13}$")] = None
    profile_image_url: Optional[str] = Field(default=None, max_length=500)


class AddressIdRequest(BaseModel):
    address_id: str = Field(min_length=1)
