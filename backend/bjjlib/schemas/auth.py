from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Admin login body."""

    password: str


class SessionStatus(BaseModel):
    """Whether the caller holds a valid admin session."""

    is_admin: bool
