"""Test SDK hashing functionality.

Ensures canonicalization is stable and the two strategies stay distinct.
"""

from __future__ import annotations

import pytest
from eth_account.messages import defunct_hash_message

from attgen.sdk.hashing import (
    Canonicalization,
    compute_digest,
    hash_message,
    keccak256,
    serialize_json,
    serialize_payload,
)
from attgen.sdk.models import AttestationKind, ContentId, Identity
from attgen.sdk.schemas import AttestationRequest, BuiltSchema, build_schema
from tests.helpers import ISSUER_ADDRESS, SUBJECT_ADDRESS


@pytest.fixture
def approve_schema() -> BuiltSchema:
    request = AttestationRequest(kind=AttestationKind.AUDIT_APPROVE, subject=ContentId(value="abc123"))
    return build_schema(request, ISSUER_ADDRESS)


def test_keccak256_known_vector() -> None:
    """Keccak-256, not NIST SHA3-256."""
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_hash_message_known_vector() -> None:
    """EIP-191 personal message hash matches ethers' hashMessage."""
    expected = "d9eba16ed0ecae432b71fe008c98cc872bb4cc214d3220a36f365326cf807d68"
    assert hash_message("hello world").hex() == expected
    assert hash_message(b"hello world").hex() == expected


def test_serialize_json_compact_in_field_order() -> None:
    """Serialization keeps insertion order and has no whitespace."""
    assert serialize_json({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'


def test_serialize_payload(approve_schema: BuiltSchema) -> None:
    assert serialize_payload(approve_schema.payload) == (
        '{"type":"AuditReportApproveCredential",'
        f'"issuer":"did:pkh:eth:{ISSUER_ADDRESS}",'
        '"credentialSubject":{"id":"snap://abc123"}}'
    )


def test_serialize_payload_keeps_non_ascii() -> None:
    """Non-ASCII text is written as raw UTF-8, not \\u escapes."""
    request = AttestationRequest(kind=AttestationKind.AUDIT_APPROVE, subject=ContentId(value="snäp"))
    serialized = serialize_payload(build_schema(request, ISSUER_ADDRESS).payload)

    assert serialized.endswith('"credentialSubject":{"id":"snap://snäp"}}')
    assert "\\u" not in serialized


def test_message_hash_digest_over_utf8_payload() -> None:
    request = AttestationRequest(kind=AttestationKind.AUDIT_APPROVE, subject=ContentId(value="snäp"))
    built = build_schema(request, ISSUER_ADDRESS)

    digest = compute_digest(built, Canonicalization.MESSAGE_HASH)

    expected_text = serialize_payload(built.payload)
    assert digest == bytes(defunct_hash_message(text=expected_text))
    assert digest == hash_message(expected_text.encode("utf-8"))


def test_hash_message_length_prefix_counts_bytes() -> None:
    """The EIP-191 length prefix counts UTF-8 bytes, not characters."""
    message = "snäp"
    assert hash_message(message) == keccak256(b"\x19Ethereum Signed Message:\n5" + message.encode("utf-8"))


def test_byte_concat_digest(approve_schema: BuiltSchema) -> None:
    """Byte-concat hashes the canonical pre-image."""
    digest = compute_digest(approve_schema, Canonicalization.BYTE_CONCAT)
    assert digest == keccak256(b"abc123")
    assert len(digest) == 32


def test_message_hash_digest(approve_schema: BuiltSchema) -> None:
    """Message-hash signs the literal JSON serialization."""
    digest = compute_digest(approve_schema, Canonicalization.MESSAGE_HASH)
    assert digest == hash_message(serialize_payload(approve_schema.payload))


def test_strategies_are_not_interchangeable(approve_schema: BuiltSchema) -> None:
    assert compute_digest(approve_schema, Canonicalization.BYTE_CONCAT) != compute_digest(
        approve_schema, Canonicalization.MESSAGE_HASH
    )


def test_message_hash_sensitive_to_payload_only_fields() -> None:
    """Dispute reasons change the message-hash digest but not the byte-concat digest."""
    def dispute(reason: str) -> BuiltSchema:
        request = AttestationRequest(
            kind=AttestationKind.DISPUTE,
            subject=Identity(address=SUBJECT_ADDRESS),
            status_reason=reason,
        )
        return build_schema(request, ISSUER_ADDRESS)

    first, second = dispute("Spam"), dispute("Fake")
    assert compute_digest(first) == compute_digest(second)
    assert compute_digest(first, Canonicalization.MESSAGE_HASH) != compute_digest(
        second, Canonicalization.MESSAGE_HASH
    )


def test_digest_stable(approve_schema: BuiltSchema) -> None:
    expected = compute_digest(approve_schema)
    for _ in range(5):
        assert compute_digest(approve_schema) == expected


def test_empty_canonical_bytes_raises(approve_schema: BuiltSchema) -> None:
    empty = approve_schema.model_copy(update={"canonical_bytes": b""})
    with pytest.raises(ValueError, match="Canonical bytes cannot be empty"):
        compute_digest(empty)


def test_canonicalization_from_config_value() -> None:
    assert Canonicalization("message-hash") is Canonicalization.MESSAGE_HASH
    with pytest.raises(ValueError):
        Canonicalization("sha256")
