"""
ArCaptcha verification services.

This package holds the server-side half of the challenge protocol: loading
credentials, reading the submitted token, classifying the remote verdict and
gating the registration flow on it.
"""

from .classifier import classify
from .credentials import CredentialStore
from .gate import VerificationGate
from .retry import verify_with_retry
from .token_extractor import TOKEN_PARAM, extract_token

__all__ = [
    "classify",
    "CredentialStore",
    "VerificationGate",
    "verify_with_retry",
    "TOKEN_PARAM",
    "extract_token",
]
