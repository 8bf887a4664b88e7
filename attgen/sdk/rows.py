"""Export row encoding for the indexer CSV format."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from attgen.sdk.hashing import serialize_json
from attgen.sdk.models import (
    SCHEMA_IDS,
    UNKNOWN_SCHEMA_ID,
    AttestationKind,
    ExportRow,
    SignedAttestation,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def schema_id_for(kind: AttestationKind | str) -> int:
    """Indexer schema id of an attestation type, UNKNOWN_SCHEMA_ID when unmapped."""
    key = getattr(kind, "value", kind)
    return SCHEMA_IDS.get(key, UNKNOWN_SCHEMA_ID)


def epoch_millis(moment: datetime) -> str:
    return str(int(moment.timestamp()) * 1000 + moment.microsecond // 1000)


def encode_row(attestation: SignedAttestation, ordinal: int, clock: Clock = utc_now) -> ExportRow:
    """Encode one attestation; the id is the 1-based ordinal in hex."""
    return ExportRow(
        id=format(ordinal + 1, "x"),
        timestamp=epoch_millis(clock()),
        schema_id=schema_id_for(attestation.type),
        payload=serialize_json(attestation.to_dict()),
    )


def encode_batch(attestations: Sequence[SignedAttestation], clock: Clock = utc_now) -> list[ExportRow]:
    return [encode_row(attestation, i, clock) for i, attestation in enumerate(attestations)]
