"""Key providers and random fixture material.

A key provider exposes an address and an async sign(digest) operation.
EthKeyProvider personal-signs (EIP-191) the 0x-hex text of the digest,
the same message ethers' wallet.signMessage(hexDigest) produces.
"""

from __future__ import annotations

import asyncio
import random
import secrets
from typing import Protocol

from eth_account import Account
from eth_account.messages import SignableMessage, encode_defunct
from eth_account.signers.local import LocalAccount

from attgen.sdk.hashing import keccak256

SNAP_ID_LENGTH = 42


class KeyProvider(Protocol):
    """Identity that can sign attestation digests."""

    @property
    def address(self) -> str: ...

    async def sign(self, digest: bytes) -> str: ...


class EthKeyProvider:
    """secp256k1 wallet backed by eth-account."""

    def __init__(self, account: LocalAccount):
        if account is None:
            raise ValueError("Account is required")
        self._account = account

    @classmethod
    def generate(cls) -> EthKeyProvider:
        return cls(Account.create())

    @classmethod
    def from_key(cls, private_key: str | bytes) -> EthKeyProvider:
        return cls(Account.from_key(private_key))

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def private_key_hex(self) -> str:
        return "0x" + bytes(self._account.key).hex()

    async def sign(self, digest: bytes) -> str:
        """Sign a digest off the event loop and return a 0x-hex signature."""
        return await asyncio.to_thread(self._sign_digest, digest)

    def _sign_digest(self, digest: bytes) -> str:
        signed = self._account.sign_message(digest_message(digest))
        return "0x" + bytes(signed.signature).hex()

    def __repr__(self) -> str:
        return f"EthKeyProvider(address={self.address!r})"


def digest_message(digest: bytes) -> SignableMessage:
    """EIP-191 message wrapping the 0x-hex text of a digest."""
    if not digest:
        raise ValueError("Digest cannot be empty")
    return encode_defunct(text="0x" + digest.hex())


def recover_signer(digest: bytes, signature: str) -> str:
    """Recover the checksummed address that signed a digest."""
    return Account.recover_message(digest_message(digest), signature=signature)


def generate_wallets(count: int) -> list[EthKeyProvider]:
    """Generate fresh random wallets."""
    if count < 0:
        raise ValueError("Wallet count cannot be negative")
    return [EthKeyProvider.generate() for _ in range(count)]


def generate_snap_ids(count: int, rng: random.Random | None = None) -> list[str]:
    """Generate snap identifiers: truncated keccak of 32 random bytes."""
    if count < 0:
        raise ValueError("Snap count cannot be negative")
    return [_snap_id(rng) for _ in range(count)]


def _snap_id(rng: random.Random | None) -> str:
    seed = rng.randbytes(32) if rng else secrets.token_bytes(32)
    return ("0x" + keccak256(seed).hex())[:SNAP_ID_LENGTH]
