"""Errors raised while building and signing attestations."""

from __future__ import annotations


class AttestationError(Exception):
    """Base class for attestation construction failures."""


class UnsupportedKind(AttestationError, ValueError):
    """Attestation kind is outside the endorsement and audit-report families."""


class InvalidSubject(AttestationError, ValueError):
    """Subject or issuer does not match what the attestation family expects."""


class ReasonLookupFailed(AttestationError, LookupError):
    """Status reason is not part of the reason vocabulary."""


class SigningFailed(AttestationError, RuntimeError):
    """Key provider could not produce a signature."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
