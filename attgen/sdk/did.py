"""Decentralized identifier formatting.

did:pkh:eth identifiers for wallet identities and snap:// identifiers for
audited content. Formatting does not validate its input.
"""

from __future__ import annotations

from eth_utils import decode_hex

from attgen.sdk.errors import InvalidSubject

IDENTITY_DID_PREFIX = "did:pkh:eth:"
CONTENT_DID_PREFIX = "snap://"

# Leading tag byte of endorsement pre-images, stands for pkh:eth
PKH_ETH_TAG = b"\x00"


def format_identity_did(address: str) -> str:
    """Format a wallet address as did:pkh:eth."""
    return f"{IDENTITY_DID_PREFIX}{address}"


def format_content_did(content_id: str) -> str:
    """Format a snap identifier as a snap:// DID."""
    return f"{CONTENT_DID_PREFIX}{content_id}"


def parse_identity_did(did: str) -> str:
    """Return the address embedded in a did:pkh:eth identifier."""
    if not did.startswith(IDENTITY_DID_PREFIX) or len(did) == len(IDENTITY_DID_PREFIX):
        raise ValueError(f"Invalid did:pkh:eth identifier: {did}")
    return did[len(IDENTITY_DID_PREFIX):]


def parse_content_did(did: str) -> str:
    """Return the snap identifier embedded in a snap:// identifier."""
    if not did.startswith(CONTENT_DID_PREFIX) or len(did) == len(CONTENT_DID_PREFIX):
        raise ValueError(f"Invalid snap identifier: {did}")
    return did[len(CONTENT_DID_PREFIX):]


def address_to_bytes(address: str) -> bytes:
    """Decode a hex address (with or without 0x) into its raw bytes."""
    try:
        raw = decode_hex(address)
    except ValueError as e:
        raise InvalidSubject(f"Address is not valid hex: {address}") from e
    if not raw:
        raise InvalidSubject("Address cannot be empty")
    return raw
