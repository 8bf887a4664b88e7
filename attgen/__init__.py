"""Synthetic attestation generator for seeding the trust indexer."""

__version__ = "0.1.0"
