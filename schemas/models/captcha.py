"""
ArCaptcha verification data model.

CredentialPair        — site key + secret key, loaded once, immutable
VerificationRequest   — JSON body POSTed to the verify endpoint
VerificationResponse  — parsed verify endpoint body
ErrorCode             — error-code variants, with an UNKNOWN fallback
VerificationOutcome   — classifier decision (accepted / rejected + reason)
GateResult            — terminal state of one gate invocation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, SecretStr, StrictBool, field_validator

# Alternate spelling used by other siteverify-style services
_FALLBACK_ERROR_CODES_FIELD = "error-codes"


class ErrorCode(str, Enum):
    MISSING_SECRET = "missing-input-secret"
    INVALID_SECRET = "invalid-input-secret"
    MISSING_RESPONSE = "missing-input-response"
    INVALID_RESPONSE = "invalid-input-response"
    MISSING_SITE = "missing-input-sitekey"
    INVALID_SITE = "invalid-input-sitekey"
    UNKNOWN = "unknown"


def parse_error_code(wire: str) -> ErrorCode:
    """Map a wire error string to its ErrorCode; anything not matching exactly is UNKNOWN."""
    try:
        return ErrorCode(wire)
    except ValueError:
        return ErrorCode.UNKNOWN


# Codes the end user can fix by retaking the challenge
CLIENT_ERROR_CODES = frozenset({ErrorCode.MISSING_RESPONSE, ErrorCode.INVALID_RESPONSE})


class CredentialPair(BaseModel):
    """Site/secret key pair. secret_key never leaves the backend."""

    model_config = ConfigDict(frozen=True)

    site_key: str
    secret_key: SecretStr


class VerificationRequest(BaseModel):
    """Body of one verification attempt. Built fresh per call, never stored."""

    model_config = ConfigDict(frozen=True)

    challenge_id: str
    site_key: str
    secret_key: SecretStr

    @classmethod
    def build(cls, token: str, credentials: CredentialPair) -> "VerificationRequest":
        return cls(
            challenge_id=token,
            site_key=credentials.site_key,
            secret_key=credentials.secret_key,
        )

    def to_wire(self) -> dict[str, str]:
        return {
            "challenge_id": self.challenge_id,
            "site_key": self.site_key,
            "secret_key": self.secret_key.get_secret_value(),
        }


class VerificationResponse(BaseModel):
    """
    Parsed verify endpoint response.

    Unknown fields are ignored. A missing or null ``success`` is False, any
    non-boolean ``success`` is a validation error, and a missing or null
    error-code field is the empty set.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # Strict: "yes", 1, "true" etc. break the schema rather than pass
    success: StrictBool = False
    error_codes: frozenset[ErrorCode] = frozenset()

    @field_validator("success", mode="before")
    @classmethod
    def _null_success_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("error_codes", mode="before")
    @classmethod
    def _parse_wire_codes(cls, v: Any) -> frozenset[ErrorCode]:
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        elif isinstance(v, dict):
            # Map-shaped payloads carry the codes as keys
            v = list(v.keys())
        elif not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError(f"error codes must be a list, got {type(v).__name__}")

        codes = set()
        for item in v:
            if isinstance(item, ErrorCode):
                codes.add(item)
            elif isinstance(item, str):
                codes.add(parse_error_code(item))
            else:
                raise ValueError(f"error code must be a string, got {item!r}")
        return frozenset(codes)

    @classmethod
    def from_payload(
        cls, payload: Any, error_codes_field: str = "errorCodes"
    ) -> "VerificationResponse":
        """Validate a decoded JSON body. Raises ValueError on schema mismatch."""
        if not isinstance(payload, dict):
            raise ValueError(
                f"verify response must be a JSON object, got {type(payload).__name__}"
            )
        raw_codes = payload.get(error_codes_field)
        if raw_codes is None:
            raw_codes = payload.get(_FALLBACK_ERROR_CODES_FIELD)
        return cls.model_validate(
            {"success": payload.get("success"), "error_codes": raw_codes}
        )


class RejectionReason(str, Enum):
    CLIENT_FAULT = "client_fault"
    SERVER_FAULT = "server_fault"


@dataclass(frozen=True)
class VerificationOutcome:
    accepted: bool
    reason: Optional[RejectionReason] = None
    error_codes: frozenset[ErrorCode] = field(default_factory=frozenset)

    @classmethod
    def accept(cls) -> "VerificationOutcome":
        return cls(accepted=True)

    @classmethod
    def reject(
        cls, reason: RejectionReason, error_codes: frozenset[ErrorCode] = frozenset()
    ) -> "VerificationOutcome":
        return cls(accepted=False, reason=reason, error_codes=error_codes)


class GateStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    MISSING_TOKEN = "missing_token"
    TRANSPORT_ERROR = "transport_error"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED_STATUS = "unexpected_status"


# Failures where the remote service gave no usable answer
INDETERMINATE_STATUSES = frozenset(
    {
        GateStatus.TRANSPORT_ERROR,
        GateStatus.MALFORMED_RESPONSE,
        GateStatus.UNEXPECTED_STATUS,
    }
)

# Failures a caller may retry; the token was never consumed by a verdict
RETRYABLE_STATUSES = frozenset(
    {GateStatus.TRANSPORT_ERROR, GateStatus.UNEXPECTED_STATUS}
)


@dataclass(frozen=True)
class GateResult:
    """
    Terminal result of one gate invocation.

    ``reason`` and ``error_codes`` are only set for REJECTED. ``detail`` is an
    operator-facing message for the failure statuses; it is never shown to
    end users.
    """

    status: GateStatus
    reason: Optional[RejectionReason] = None
    error_codes: frozenset[ErrorCode] = field(default_factory=frozenset)
    detail: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status is GateStatus.ACCEPTED

    @property
    def indeterminate(self) -> bool:
        return self.status in INDETERMINATE_STATUSES

    @property
    def retryable(self) -> bool:
        return self.status in RETRYABLE_STATUSES

    @classmethod
    def from_outcome(cls, outcome: VerificationOutcome) -> "GateResult":
        if outcome.accepted:
            return cls(status=GateStatus.ACCEPTED)
        return cls(
            status=GateStatus.REJECTED,
            reason=outcome.reason,
            error_codes=outcome.error_codes,
        )

    @classmethod
    def failure(cls, status: GateStatus, detail: str) -> "GateResult":
        return cls(status=status, detail=detail)
