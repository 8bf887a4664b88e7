"""Test DID formatting and address decoding."""

from __future__ import annotations

import pytest

from attgen.sdk.did import (
    address_to_bytes,
    format_content_did,
    format_identity_did,
    parse_content_did,
    parse_identity_did,
)
from attgen.sdk.errors import InvalidSubject


def test_format_identity_did() -> None:
    """Identity DIDs prefix the address unchanged."""
    assert format_identity_did("0xAbC123") == "did:pkh:eth:0xAbC123"


def test_format_content_did() -> None:
    """Content DIDs use the snap:// scheme."""
    assert format_content_did("abc123") == "snap://abc123"


def test_formatting_does_not_validate() -> None:
    """Formatters are total and leave validation to callers."""
    assert format_identity_did("not-an-address") == "did:pkh:eth:not-an-address"
    assert format_content_did("") == "snap://"


def test_parse_round_trip() -> None:
    """Parsing recovers the formatted input."""
    assert parse_identity_did(format_identity_did("0xabc")) == "0xabc"
    assert parse_content_did(format_content_did("0x1234")) == "0x1234"


@pytest.mark.parametrize("did", ["did:key:z6Mk", "did:pkh:eth:", "snap://x"])
def test_parse_identity_did_rejects_other_schemes(did: str) -> None:
    with pytest.raises(ValueError, match="Invalid did:pkh:eth"):
        parse_identity_did(did)


def test_parse_content_did_rejects_identity() -> None:
    with pytest.raises(ValueError, match="Invalid snap"):
        parse_content_did("did:pkh:eth:0xabc")


def test_address_to_bytes() -> None:
    """Hex addresses decode to raw bytes with or without 0x."""
    assert address_to_bytes("0x" + "bb" * 20) == b"\xbb" * 20
    assert address_to_bytes("0102ff") == b"\x01\x02\xff"


def test_address_to_bytes_checksummed() -> None:
    """Mixed-case checksummed addresses decode like lowercase ones."""
    checksummed = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
    assert address_to_bytes(checksummed) == bytes.fromhex(checksummed[2:].lower())


@pytest.mark.parametrize("address", ["0xzz", "0x123", "", "0x"])
def test_address_to_bytes_invalid(address: str) -> None:
    with pytest.raises(InvalidSubject):
        address_to_bytes(address)
