"""Attestation signing.

Hashes built schemas under the configured canonicalization strategy and
attaches the key provider's signature as the credential proof.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import NamedTuple

from attgen.sdk.errors import SigningFailed
from attgen.sdk.hashing import Canonicalization, compute_digest
from attgen.sdk.keys import KeyProvider
from attgen.sdk.models import SignedAttestation
from attgen.sdk.schemas import BuiltSchema

logger = logging.getLogger(__name__)


class SigningJob(NamedTuple):
    built: BuiltSchema
    key_provider: KeyProvider


class AttestationSigner:
    """Signs built schemas with a key provider."""

    def __init__(self, strategy: Canonicalization = Canonicalization.BYTE_CONCAT):
        """Initialize signer.

        Args:
            strategy: Canonicalization the digest is computed with
        """
        self.strategy = Canonicalization(strategy)

    def digest(self, built: BuiltSchema) -> bytes:
        """Digest the key provider is asked to sign."""
        return compute_digest(built, self.strategy)

    async def sign(self, built: BuiltSchema, key_provider: KeyProvider) -> SignedAttestation:
        """Sign one built schema. Failures surface as SigningFailed, never retried."""
        digest = self.digest(built)
        try:
            signature = await key_provider.sign(digest)
        except Exception as e:
            raise SigningFailed(f"Failed to sign digest 0x{digest.hex()}: {e}", cause=e) from e
        return SignedAttestation.from_payload(built.payload, signature)

    async def sign_batch(self, jobs: Sequence[SigningJob]) -> list[SignedAttestation]:
        """Sign all jobs concurrently; results keep the order of jobs."""
        logger.debug("Signing %d attestations with %s", len(jobs), self.strategy.value)
        results = await asyncio.gather(*(self.sign(job.built, job.key_provider) for job in jobs))
        return list(results)
