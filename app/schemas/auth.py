from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    user_id: str = Field(min_length=1, max_length=100)


class RefreshRequest(BaseModel):
    refresh_token: str
