"""Pulls the ArCaptcha completion token out of submitted form data."""

from __future__ import annotations

from typing import Any, Mapping

from errors import MissingTokenError

TOKEN_PARAM = "arcaptcha-token"


def extract_token(params: Mapping[str, Any]) -> str:
    """
    Return the submitted challenge token.

    Accepts any mapping, including Starlette FormData and QueryParams.
    Raises MissingTokenError when the parameter is absent, blank or not a
    string (e.g. an uploaded file under the same name).
    """
    raw = params.get(TOKEN_PARAM)
    if not isinstance(raw, str):
        raise MissingTokenError(f"'{TOKEN_PARAM}' was not submitted")

    token = raw.strip()
    if not token:
        raise MissingTokenError(f"'{TOKEN_PARAM}' is empty")
    return token
