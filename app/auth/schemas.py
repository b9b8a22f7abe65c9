from pydantic import Field

from app.core.schemas import CamelModel


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    session_id: str


class ValidateResponse(CamelModel):
    authenticated: bool
