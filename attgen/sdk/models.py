"""Pydantic models for attestation payloads.

Closed enumerations for attestation kinds and status reasons, the
kind-to-schema-id table consumed by the indexer, and the credential models
whose validation enforces which subject fields each kind carries.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AttestationKind(str, Enum):
    """Credential variants, split into endorsement and audit-report families."""
    ENDORSEMENT = "EndorsementCredential"
    DISPUTE = "DisputeCredential"
    AUDIT_APPROVE = "AuditReportApproveCredential"
    AUDIT_DISAPPROVE = "AuditReportDisapproveCredential"

    @property
    def is_endorsement(self) -> bool:
        return self in ENDORSEMENT_KINDS

    @property
    def is_audit_report(self) -> bool:
        return self in AUDIT_REPORT_KINDS


ENDORSEMENT_KINDS = (AttestationKind.ENDORSEMENT, AttestationKind.DISPUTE)
AUDIT_REPORT_KINDS = (AttestationKind.AUDIT_APPROVE, AttestationKind.AUDIT_DISAPPROVE)


class StatusReason(str, Enum):
    """Reason vocabulary for disapproving audit reports."""
    UNRELIABLE = "Unreliable"
    SCAM = "Scam"
    INCOMPLETE = "Incomplete"

    @property
    def code(self) -> bytes:
        """Single-byte canonical encoding."""
        return STATUS_REASON_CODES[self.value]

    @property
    def description(self) -> str:
        return STATUS_REASON_DESCRIPTIONS[self.value]


STATUS_REASON_CODES: dict[str, bytes] = {
    StatusReason.UNRELIABLE.value: b"\x00",
    StatusReason.SCAM.value: b"\x01",
    StatusReason.INCOMPLETE.value: b"\x02",
}

STATUS_REASON_DESCRIPTIONS: dict[str, str] = {
    StatusReason.UNRELIABLE.value: "Behaves inconsistently or fails unexpectedly",
    StatusReason.SCAM.value: "Interact with a fraudulent smart contract",
    StatusReason.INCOMPLETE.value: "Missing functionality or documentation",
}


class CurrentStatus(str, Enum):
    """Endorsement status carried in status-mode endorsements."""
    ENDORSED = "Endorsed"
    DISPUTED = "Disputed"

    @property
    def code(self) -> bytes:
        return b"\x01" if self is CurrentStatus.ENDORSED else b"\x00"


class ReasonFormat(str, Enum):
    """How statusReason is rendered in the payload."""
    TEXT = "text"
    STRUCTURED = "structured"


class EndorsementMode(str, Enum):
    """Which endorsement variant the batch generator requests."""
    STATUS = "status"
    LEVEL = "level"


# Consumed by the indexer; both endorsement kinds share one schema.
SCHEMA_IDS: dict[str, int] = {
    AttestationKind.AUDIT_APPROVE.value: 2,
    AttestationKind.AUDIT_DISAPPROVE.value: 3,
    AttestationKind.ENDORSEMENT.value: 4,
    AttestationKind.DISPUTE.value: 4,
}
UNKNOWN_SCHEMA_ID = 0

TRUST_LEVELS = (1, -1)
DEFAULT_TRUST_SCOPE = "Software security"
DEFAULT_TRUST_REASON = "Not provided"
DEFAULT_DISPUTE_REASON = "None"


class Identity(BaseModel):
    """Wallet identity, a hex-encoded address."""
    model_config = ConfigDict(frozen=True)

    address: str = Field(..., min_length=1, description="Hex address")


class ContentId(BaseModel):
    """Content identifier of an audited snap."""
    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1, description="Snap identifier")


class StatusReasonDetail(BaseModel):
    """Structured statusReason object."""
    model_config = ConfigDict(frozen=True)

    type: str
    value: str
    lang: str = "en"

    @classmethod
    def from_reason(cls, reason: StatusReason) -> StatusReasonDetail:
        return cls(type=reason.value, value=reason.description)


class TrustLevel(BaseModel):
    """One trustworthiness entry of a level-mode endorsement."""
    model_config = ConfigDict(frozen=True)

    scope: str = DEFAULT_TRUST_SCOPE
    level: int
    reason: list[str] = Field(default_factory=lambda: [DEFAULT_TRUST_REASON])


class CredentialSubject(BaseModel):
    """Subject of a credential plus its kind-specific fields."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    current_status: CurrentStatus | None = Field(default=None, alias="currentStatus")
    status_reason: StatusReasonDetail | str | None = Field(default=None, alias="statusReason")
    trustworthiness: list[TrustLevel] | None = None

    def variant_fields(self) -> frozenset[str]:
        """Aliases of the kind-specific fields that are present."""
        dumped = self.model_dump(by_alias=True, exclude_none=True)
        return frozenset(key for key in dumped if key != "id")


def allowed_subject_fields(kind: AttestationKind) -> tuple[frozenset[str], ...]:
    """Field sets a subject of the given kind may carry, one per variant."""
    level_variant = frozenset({"trustworthiness"})
    if kind is AttestationKind.ENDORSEMENT:
        return (frozenset({"currentStatus"}), level_variant)
    if kind is AttestationKind.DISPUTE:
        return (frozenset({"currentStatus", "statusReason"}), level_variant)
    if kind is AttestationKind.AUDIT_DISAPPROVE:
        return (frozenset({"statusReason"}),)
    return (frozenset(),)


class CredentialPayload(BaseModel):
    """Unsigned credential claim."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: AttestationKind
    issuer: str
    credential_subject: CredentialSubject = Field(..., alias="credentialSubject")

    @model_validator(mode="after")
    def check_subject_fields(self) -> CredentialPayload:
        """Subject fields must be exactly the ones the kind requires."""
        present = self.credential_subject.variant_fields()
        if present not in allowed_subject_fields(self.type):
            raise ValueError(f"{self.type.value} subject cannot carry fields {sorted(present)}")

        status = self.credential_subject.current_status
        expected = {
            AttestationKind.ENDORSEMENT: CurrentStatus.ENDORSED,
            AttestationKind.DISPUTE: CurrentStatus.DISPUTED,
        }.get(self.type)
        if status is not None and status is not expected:
            raise ValueError(f"{self.type.value} cannot have currentStatus {status.value}")
        return self

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with wire field names and absent fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Proof(BaseModel):
    """Signature over the credential digest."""
    model_config = ConfigDict(frozen=True)

    signature: str


class SignedAttestation(CredentialPayload):
    """Credential payload with its proof attached. Written once into an export row."""

    proof: Proof

    @classmethod
    def from_payload(cls, payload: CredentialPayload, signature: str) -> SignedAttestation:
        return cls(
            type=payload.type,
            issuer=payload.issuer,
            credential_subject=payload.credential_subject,
            proof=Proof(signature=signature),
        )

    def unsigned(self) -> CredentialPayload:
        return CredentialPayload(
            type=self.type,
            issuer=self.issuer,
            credential_subject=self.credential_subject,
        )


class ExportRow(NamedTuple):
    """One indexer row: hex id, epoch-millis timestamp, schema id, payload JSON."""
    id: str
    timestamp: str
    schema_id: int
    payload: str
