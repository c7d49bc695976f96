"""
Request DTOs for authentication endpoints.

RegisterRequest — POST /auth/register  (form-encoded)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Form body for POST /auth/register.

    The widget also posts ``arcaptcha-token``; the verification gate reads it
    from the raw form before this model is built.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=8, max_length=128)
    user_name: str | None = None
