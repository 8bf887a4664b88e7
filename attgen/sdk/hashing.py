"""Canonicalization and hashing for attestation signing.

Two canonicalization strategies exist and are not interchangeable:
byte-concat hashes the structural pre-image with keccak256, message-hash
takes the EIP-191 hash of the compact JSON payload.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from eth_account.messages import defunct_hash_message
from eth_utils import keccak

from attgen.sdk.models import CredentialPayload
from attgen.sdk.schemas import BuiltSchema


class Canonicalization(str, Enum):
    """Pre-image the signature is computed over."""
    BYTE_CONCAT = "byte-concat"
    MESSAGE_HASH = "message-hash"


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest of raw bytes."""
    return keccak(primitive=data)


def hash_message(message: bytes | str) -> bytes:
    """EIP-191 personal message hash."""
    if isinstance(message, str):
        return bytes(defunct_hash_message(text=message))
    return bytes(defunct_hash_message(primitive=message))


def serialize_json(data: dict[str, Any]) -> str:
    """Compact JSON in field order, the same text the indexer stores."""
    return json.dumps(data, separators=(',', ':'), ensure_ascii=False)


def serialize_payload(payload: CredentialPayload) -> str:
    return serialize_json(payload.to_dict())


def compute_digest(built: BuiltSchema, strategy: Canonicalization = Canonicalization.BYTE_CONCAT) -> bytes:
    """Digest to sign for a built schema under the given strategy.

    Args:
        built: Payload and canonical bytes from the schema builder
        strategy: Canonicalization strategy

    Returns:
        32-byte digest
    """
    if strategy is Canonicalization.MESSAGE_HASH:
        return hash_message(serialize_payload(built.payload))
    if not built.canonical_bytes:
        raise ValueError("Canonical bytes cannot be empty")
    return keccak256(built.canonical_bytes)
