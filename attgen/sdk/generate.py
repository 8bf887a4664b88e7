"""Batch generation of synthetic attestations.

Plans random endorsement and audit-report requests over a pool of wallets
and snaps, signs them concurrently and exports the batch in request order.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import NamedTuple

from pydantic import BaseModel, Field, model_validator

from attgen.sdk.export import DEFAULT_DELIMITER, CsvSink
from attgen.sdk.hashing import Canonicalization
from attgen.sdk.keys import KeyProvider, generate_snap_ids, generate_wallets
from attgen.sdk.models import (
    AUDIT_REPORT_KINDS,
    ENDORSEMENT_KINDS,
    TRUST_LEVELS,
    AttestationKind,
    ContentId,
    EndorsementMode,
    Identity,
    ReasonFormat,
    SignedAttestation,
    StatusReason,
)
from attgen.sdk.rows import Clock, encode_batch, utc_now
from attgen.sdk.schemas import AttestationRequest, build_schema
from attgen.sdk.signer import AttestationSigner, SigningJob

logger = logging.getLogger(__name__)


class GenerationCounts(BaseModel):
    """Sizes of one generation run."""

    wallets: int = Field(default=4, ge=0)
    snaps: int = Field(default=4, ge=0)
    p2p_attestations: int = Field(default=1, ge=0)
    snap_attestations: int = Field(default=1, ge=0)

    @model_validator(mode="after")
    def check_pools(self) -> GenerationCounts:
        """Attestations need wallets to issue them and snaps to target."""
        if (self.p2p_attestations or self.snap_attestations) and not self.wallets:
            raise ValueError("At least one wallet is required to issue attestations")
        if self.snap_attestations and not self.snaps:
            raise ValueError("At least one snap is required for snap attestations")
        return self


class PlannedAttestation(NamedTuple):
    issuer: KeyProvider
    request: AttestationRequest


def plan_endorsements(
    wallets: Sequence[KeyProvider],
    count: int,
    mode: EndorsementMode,
    rng: random.Random,
) -> list[PlannedAttestation]:
    """Random peer-to-peer endorsements between wallets."""
    planned = []
    for _ in range(count):
        issuer = rng.choice(wallets)
        subject = Identity(address=rng.choice(wallets).address)
        if mode is EndorsementMode.LEVEL:
            level = rng.choice(TRUST_LEVELS)
            kind = AttestationKind.ENDORSEMENT if level > 0 else AttestationKind.DISPUTE
            request = AttestationRequest(kind=kind, subject=subject, level=level)
        else:
            request = AttestationRequest(kind=rng.choice(ENDORSEMENT_KINDS), subject=subject)
        planned.append(PlannedAttestation(issuer, request))
    return planned


def plan_audit_reports(
    wallets: Sequence[KeyProvider],
    snaps: Sequence[str],
    count: int,
    rng: random.Random,
) -> list[PlannedAttestation]:
    """Random audit reports about snaps; disapprovals get a random reason."""
    planned = []
    for _ in range(count):
        issuer = rng.choice(wallets)
        subject = ContentId(value=rng.choice(snaps))
        kind = rng.choice(AUDIT_REPORT_KINDS)
        reason = rng.choice(list(StatusReason)) if kind is AttestationKind.AUDIT_DISAPPROVE else None
        request = AttestationRequest(kind=kind, subject=subject, status_reason=reason)
        planned.append(PlannedAttestation(issuer, request))
    return planned


async def generate_attestations(
    plan: Sequence[PlannedAttestation],
    signer: AttestationSigner,
    reason_format: ReasonFormat = ReasonFormat.TEXT,
) -> list[SignedAttestation]:
    """Build and sign every planned attestation; output order is plan order."""
    jobs = [
        SigningJob(build_schema(item.request, item.issuer.address, reason_format), item.issuer)
        for item in plan
    ]
    return await signer.sign_batch(jobs)


def run_generation(
    counts: GenerationCounts,
    output_dir: Path,
    *,
    canonicalization: Canonicalization = Canonicalization.BYTE_CONCAT,
    reason_format: ReasonFormat = ReasonFormat.TEXT,
    endorsement_mode: EndorsementMode = EndorsementMode.STATUS,
    delimiter: str = DEFAULT_DELIMITER,
    seed: int | None = None,
    clock: Clock = utc_now,
    key_factory: Callable[[int], Sequence[KeyProvider]] = generate_wallets,
) -> tuple[Path, list[SignedAttestation]]:
    """Generate a batch and write it as CSV. Returns the file path and the batch."""
    logger.info(
        "Generating %d wallets, %d snaps, %d p2p attestations, %d snap attestations",
        counts.wallets, counts.snaps, counts.p2p_attestations, counts.snap_attestations,
    )
    rng = random.Random(seed)
    wallets = list(key_factory(counts.wallets))
    snaps = generate_snap_ids(counts.snaps, rng)

    plan = plan_endorsements(wallets, counts.p2p_attestations, EndorsementMode(endorsement_mode), rng)
    plan += plan_audit_reports(wallets, snaps, counts.snap_attestations, rng)

    signer = AttestationSigner(canonicalization)
    attestations = asyncio.run(generate_attestations(plan, signer, ReasonFormat(reason_format)))

    rows = encode_batch(attestations, clock)
    path = CsvSink(output_dir, clock, delimiter).write(rows)
    return path, attestations
