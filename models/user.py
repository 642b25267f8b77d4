import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

# Prefix of every guest identity; a session id looks like ``guest:<hex>``.
GUEST_USER_ID = "guest"


def new_guest_id() -> str:
    return f"{GUEST_USER_ID}:{uuid.uuid4().hex}"


def is_guest_id(user_id: Optional[str]) -> bool:
    if not user_id:
        return False
    return user_id == GUEST_USER_ID or user_id.startswith(f"{GUEST_USER_ID}:")


class Address(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    street: str
    city: str
    state: str
    zip_code: str
    is_default: bool = False

    @property
    def full_address(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}"

    def to_dict(self):
        data = self.model_dump()
        data["full_address"] = self.full_address
        return data


class User(BaseModel):
    """Customer profile with a saved address book."""

    id: str
    email: str = ""
    name: str = ""
    phone: Optional[str] = None
    addresses: List[Address] = Field(default_factory=list)
    profile_image_url: Optional[str] = None
    created_at: datetime

    @classmethod
    def blank(cls, user_id: str, now: datetime) -> "User":
        if is_guest_id(user_id):
            return cls(id=user_id, email="guest@grocio.com", name="Guest User", created_at=now)
        return cls(id=user_id, created_at=now)

    @property
    def is_guest(self) -> bool:
        return is_guest_id(self.id)

    @property
    def default_address(self) -> Optional[Address]:
        for address in self.addresses:
            if address.is_default:
                return address
        return self.addresses[0] if self.addresses else None

    def find_address(self, address_id: str) -> Optional[Address]:
        for address in self.addresses:
            if address.id == address_id:
                return address
        return None

    def add_address(self, address: Address) -> Address:
        if not self.addresses:
            address.is_default = True
        elif address.is_default:
            self._clear_default()
        self.addresses.append(address)
        return address

    def remove_address(self, address_id: str) -> Optional[Address]:
        address = self.find_address(address_id)
        if address is None:
            return None
        self.addresses.remove(address)
        if address.is_default and self.addresses:
            self.addresses[0].is_default = True
        return address

    def set_default_address(self, address_id: str) -> Optional[Address]:
        address = self.find_address(address_id)
        if address is None:
            return None
        self._clear_default()
        address.is_default = True
        return address

    def _clear_default(self) -> None:
        for address in self.addresses:
            address.is_default = False

    def to_dict(self):
        default = self.default_address
        return {
            "user_id": self.id,
            "email": self.email,
            "name": self.name,
            "phone": self.phone,
            "profile_image_url": self.profile_image_url,
            "guest": self.is_guest,
            "addresses": [a.to_dict() for a in self.addresses],
            "default_address_id": default.id if default else None,
            "created_at": self.created_at.isoformat(),
        }
