"""
Response DTOs for authentication endpoints.

CaptchaConfigResponse — GET /auth/captcha  (200)
RegisterResponse      — POST /auth/register  (201)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class CaptchaConfigResponse(BaseModel):
    """Public widget configuration: the value for data-site-key and the form field name."""

    model_config = ConfigDict(populate_by_name=True)

    site_key: str
    token_param: str


class RegisterResponse(BaseModel):
    """Returned once the challenge passed and registration may proceed."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    email: str
    user_name: Optional[str] = None
