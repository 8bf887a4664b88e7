"""CLI configuration management using pydantic-settings.

Output location, canonicalization strategy and payload rendering options,
read from ATTGEN_* environment variables or a .env file.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from attgen.sdk.hashing import Canonicalization
from attgen.sdk.models import EndorsementMode, ReasonFormat


class AttgenConfig(BaseSettings):
    """Generator configuration using pydantic-settings BaseSettings."""

    model_config = SettingsConfigDict(
        env_prefix='ATTGEN_',
        env_file='.env',
        env_file_encoding='utf-8',
    )

    output_dir: Path = Field(
        default=Path("output"),
        description="Directory CSV batches are written to"
    )
    canonicalization: Canonicalization = Field(
        default=Canonicalization.BYTE_CONCAT,
        description="Pre-image signed for each attestation"
    )
    reason_format: ReasonFormat = Field(
        default=ReasonFormat.TEXT,
        description="Render statusReason as free text or a structured object"
    )
    endorsement_mode: EndorsementMode = Field(
        default=EndorsementMode.STATUS,
        description="Generate status endorsements or trust-level endorsements"
    )
    delimiter: str = Field(
        default=";",
        description="CSV field delimiter"
    )
    seed: int | None = Field(
        default=None,
        description="Seed for a reproducible request plan"
    )

    @field_validator('delimiter')
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """Delimiter must be a single character."""
        if len(v) != 1:
            raise ValueError("Delimiter must be a single character")
        return v
