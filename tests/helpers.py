"""Test helper functions for deterministic signing and fixed clocks.

Stub key providers produce reproducible signatures so payloads can be
compared byte for byte; the failing and delayed variants exercise error
propagation and completion-order independence.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from attgen.sdk.hashing import keccak256

ISSUER_ADDRESS = "0x" + "bb" * 20
SUBJECT_ADDRESS = "0x" + "aa" * 20

# eth-account documentation key pair
KNOWN_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
KNOWN_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"

FIXED_TIME = datetime(2024, 1, 15, 10, 30, 45, 123000, tzinfo=timezone.utc)
FIXED_MILLIS = "1705314645123"


def fixed_clock() -> datetime:
    return FIXED_TIME


class StubKeyProvider:
    """Deterministic signer: signature is keccak(address | digest)."""

    def __init__(self, address: str = ISSUER_ADDRESS):
        self.address = address
        self.signed: list[bytes] = []

    async def sign(self, digest: bytes) -> str:
        self.signed.append(digest)
        return "0x" + keccak256(self.address.encode() + digest).hex()


class FailingKeyProvider:
    """Signer whose backend always errors."""

    def __init__(self, address: str = ISSUER_ADDRESS, error: Exception | None = None):
        self.address = address
        self.error = error or ConnectionError("signer unavailable")

    async def sign(self, digest: bytes) -> str:
        raise self.error


class DelayedKeyProvider(StubKeyProvider):
    """Stub signer that finishes after a fixed delay."""

    def __init__(self, address: str, delay: float):
        super().__init__(address)
        self.delay = delay

    async def sign(self, digest: bytes) -> str:
        await asyncio.sleep(self.delay)
        return await super().sign(digest)


def stub_wallets(count: int) -> list[StubKeyProvider]:
    """Key factory returning stub wallets with distinct hex addresses."""
    return [StubKeyProvider("0x" + f"{i + 1:040x}") for i in range(count)]
