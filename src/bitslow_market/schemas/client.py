"""Client and authentication Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class SignupRequest(BaseModel):
    """Registration form submitted by a new client."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=1)
    phone: str | None = Field(None, alias="phoneNumber")
    address: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class ClientOut(BaseModel):
    """Public view of a client; never includes the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str | None = None
    address: str | None = None


class AuthResponse(BaseModel):
    """Returned by signup and login alongside the ``Authentificate`` header."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    id: int
    name: str
    email: str
    phone: str | None = None
    address: str | None = None
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class ProtectedResponse(BaseModel):
    message: str
    user: ClientOut


class RefreshResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")


class MessageResponse(BaseModel):
    message: str
