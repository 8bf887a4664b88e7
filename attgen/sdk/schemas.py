"""Credential schema construction.

Turns an attestation request into the JSON credential payload and the
canonical byte pre-image that gets hashed and signed.

Endorsement pre-image:  0x00 | issuer address bytes | status byte
Audit report pre-image: utf8(snap id) | reason byte (empty when no reason)
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from attgen.sdk.did import PKH_ETH_TAG, address_to_bytes, format_content_did, format_identity_did
from attgen.sdk.errors import InvalidSubject, ReasonLookupFailed, UnsupportedKind
from attgen.sdk.models import (
    DEFAULT_DISPUTE_REASON,
    AttestationKind,
    ContentId,
    CredentialPayload,
    CredentialSubject,
    CurrentStatus,
    Identity,
    ReasonFormat,
    StatusReason,
    StatusReasonDetail,
    TrustLevel,
)

logger = logging.getLogger(__name__)


class AttestationRequest(BaseModel):
    """What to attest: kind, subject and the optional variant parameters."""
    model_config = ConfigDict(frozen=True)

    kind: AttestationKind | str
    subject: Identity | ContentId
    level: int | None = None
    status_reason: StatusReason | str | None = None


class BuiltSchema(BaseModel):
    """Unsigned payload with its canonical pre-image."""
    model_config = ConfigDict(frozen=True)

    payload: CredentialPayload
    canonical_bytes: bytes


def resolve_kind(kind: AttestationKind | str) -> AttestationKind:
    """Map a kind name onto the closed kind enumeration."""
    try:
        return AttestationKind(kind)
    except ValueError as e:
        raise UnsupportedKind(f"Unsupported attestation kind: {kind}") from e


def lookup_reason_code(reason: StatusReason | str) -> bytes:
    """Return the one-byte code of a status reason."""
    try:
        return StatusReason(reason).code
    except ValueError as e:
        raise ReasonLookupFailed(f"Unknown status reason: {reason}") from e


def encode_status_reason(reason: StatusReason | str) -> bytes:
    """Reason code for the pre-image, empty when the reason is not in the vocabulary."""
    try:
        return lookup_reason_code(reason)
    except ReasonLookupFailed as e:
        logger.warning("Data integrity: %s; signing without reason bytes", e)
        return b""


def render_status_reason(reason: StatusReason | str, reason_format: ReasonFormat) -> StatusReasonDetail | str:
    """Render a status reason as free text or as a structured reason object."""
    text = reason.value if isinstance(reason, StatusReason) else str(reason)
    if reason_format is ReasonFormat.TEXT:
        return text
    try:
        return StatusReasonDetail.from_reason(StatusReason(text))
    except ValueError:
        return StatusReasonDetail(type=text, value=text)


def build_schema(
    request: AttestationRequest,
    issuer: Identity | str,
    reason_format: ReasonFormat = ReasonFormat.TEXT,
) -> BuiltSchema:
    """Build the credential payload and canonical bytes for a request."""
    kind = resolve_kind(request.kind)
    issuer_address = issuer.address if isinstance(issuer, Identity) else issuer

    if kind.is_endorsement:
        return _build_endorsement(kind, request, issuer_address, reason_format)
    return _build_audit_report(kind, request, issuer_address, reason_format)


def _build_endorsement(
    kind: AttestationKind,
    request: AttestationRequest,
    issuer_address: str,
    reason_format: ReasonFormat,
) -> BuiltSchema:
    subject = request.subject
    if not isinstance(subject, Identity):
        raise InvalidSubject(f"{kind.value} requires a wallet identity subject")

    issuer_bytes = address_to_bytes(issuer_address)
    details: dict[str, Any] = {}

    if request.level is not None:
        if request.status_reason is not None:
            raise ValueError("Level endorsements do not carry a statusReason")
        details["trustworthiness"] = [TrustLevel(level=request.level)]
        # No textual status in level mode, so the status byte is never Endorsed
        status_code = b"\x00"
    else:
        status = CurrentStatus.ENDORSED if kind is AttestationKind.ENDORSEMENT else CurrentStatus.DISPUTED
        details["current_status"] = status
        if kind is AttestationKind.DISPUTE:
            details["status_reason"] = _dispute_reason(request.status_reason, reason_format)
        elif request.status_reason is not None:
            raise ValueError(f"{kind.value} does not carry a statusReason")
        status_code = status.code

    payload = _build_payload(kind, issuer_address, format_identity_did(subject.address), details)
    return BuiltSchema(payload=payload, canonical_bytes=PKH_ETH_TAG + issuer_bytes + status_code)


def _dispute_reason(reason: StatusReason | str | None, reason_format: ReasonFormat) -> StatusReasonDetail | str:
    if reason is not None:
        return render_status_reason(reason, reason_format)
    if reason_format is ReasonFormat.TEXT:
        return DEFAULT_DISPUTE_REASON
    return StatusReasonDetail.from_reason(StatusReason.SCAM)


def _build_audit_report(
    kind: AttestationKind,
    request: AttestationRequest,
    issuer_address: str,
    reason_format: ReasonFormat,
) -> BuiltSchema:
    subject = request.subject
    if not isinstance(subject, ContentId):
        raise InvalidSubject(f"{kind.value} requires a content identifier subject")
    if request.level is not None:
        raise ValueError(f"{kind.value} does not carry a trust level")

    details: dict[str, Any] = {}
    reason_bytes = b""

    if kind is AttestationKind.AUDIT_DISAPPROVE:
        if request.status_reason is None:
            raise ValueError(f"{kind.value} requires a statusReason")
        details["status_reason"] = render_status_reason(request.status_reason, reason_format)
        reason_bytes = encode_status_reason(request.status_reason)
    elif request.status_reason is not None:
        raise ValueError(f"{kind.value} does not carry a statusReason")

    payload = _build_payload(kind, issuer_address, format_content_did(subject.value), details)
    return BuiltSchema(payload=payload, canonical_bytes=subject.value.encode("utf-8") + reason_bytes)


def _build_payload(
    kind: AttestationKind,
    issuer_address: str,
    subject_did: str,
    details: dict[str, Any],
) -> CredentialPayload:
    return CredentialPayload(
        type=kind,
        issuer=format_identity_did(issuer_address),
        credential_subject=CredentialSubject(id=subject_did, **details),
    )
