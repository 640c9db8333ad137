"""
Pydantic schemas for admin authentication endpoints.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """
    Login request body.

    Both fields must be present and non-empty; anything else is a
    VALIDATION_ERROR before rate limiting or credential checks run.
    """
    username: str = Field(..., min_length=1, description="Admin username")
    password: str = Field(..., min_length=1, description="Admin password")


class AdminIdentity(BaseModel):
    """Authenticated admin as exposed to clients and route handlers."""
    id: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    success: bool = True
    admin: AdminIdentity


class LogoutResponse(BaseModel):
    success: bool = True


class VerifyResponse(BaseModel):
    """
    Session check result.

    ``admin`` is set when authenticated; ``error``/``code`` when not.
    """
    authenticated: bool
    admin: Optional[AdminIdentity] = None
    error: Optional[str] = None
    code: Optional[str] = None
