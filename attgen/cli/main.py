"""Typer CLI for the attestation generator.

Provides commands: generate, sign, and the did command group.
Main entrypoint for the attgen command-line interface.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from attgen import __version__
from attgen.cli.config import AttgenConfig
from attgen.cli.did_commands import app as did_app, load_wallet
from attgen.sdk.generate import GenerationCounts, run_generation
from attgen.sdk.keys import EthKeyProvider
from attgen.sdk.models import ContentId, Identity
from attgen.sdk.schemas import AttestationRequest, build_schema, resolve_kind
from attgen.sdk.signer import AttestationSigner


app = typer.Typer(
    name="attgen",
    help="Synthetic attestation generator - signed test data for the trust indexer",
    add_completion=False,
    rich_markup_mode="rich"
)
console = Console()

app.add_typer(did_app, name="did", help="DID formatting and wallet commands")


def version_callback(show_version: bool) -> None:
    """Show version and exit."""
    if show_version:
        console.print(f"attgen version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True
    )
) -> None:
    """Synthetic attestation generator CLI."""
    pass


@app.command()
def generate(
    wallets: int = typer.Argument(..., min=0, help="Wallets count"),
    snaps: int = typer.Argument(..., min=0, help="Snaps count"),
    p2p_attestations: int = typer.Argument(..., min=0, help="Peer-to-peer attestations count"),
    snap_attestations: int = typer.Argument(..., min=0, help="Snap attestations count")
) -> None:
    """Generate a batch of signed attestations and save it as CSV."""
    try:
        config = AttgenConfig()
        counts = GenerationCounts(
            wallets=wallets,
            snaps=snaps,
            p2p_attestations=p2p_attestations,
            snap_attestations=snap_attestations,
        )

        path, attestations = run_generation(
            counts,
            config.output_dir,
            canonicalization=config.canonicalization,
            reason_format=config.reason_format,
            endorsement_mode=config.endorsement_mode,
            delimiter=config.delimiter,
            seed=config.seed,
        )

        console.print(f"✅ {len(attestations)} attestations saved to [bold]{path}[/bold]")

    except Exception as e:
        console.print(f"❌ Error generating attestations: {escape(str(e))}")
        raise typer.Exit(1)


app.command("g", hidden=True, help="Alias for generate")(generate)


@app.command()
def sign(
    kind: str = typer.Argument(..., help="Attestation kind, e.g. EndorsementCredential"),
    subject: str = typer.Argument(..., help="Subject wallet address or snap id"),
    level: int | None = typer.Option(None, "--level", "-l", help="Trust level for level endorsements"),
    reason: str | None = typer.Option(None, "--reason", "-r", help="Status reason"),
    key_file: Path | None = typer.Option(None, "--key-file", "-k", help="Issuer private key file")
) -> None:
    """Build and sign a single attestation and print it as JSON."""
    try:
        config = AttgenConfig()
        issuer = _load_issuer(key_file)
        request = _build_request(kind, subject, level, reason)

        built = build_schema(request, issuer.address, config.reason_format)
        signer = AttestationSigner(config.canonicalization)
        attestation = asyncio.run(signer.sign(built, issuer))

        # print() keeps the JSON free of rich markup
        print(json.dumps(attestation.to_dict(), indent=2))

    except Exception as e:
        console.print(f"❌ Error signing attestation: {escape(str(e))}")
        raise typer.Exit(1)


def _load_issuer(key_file: Path | None) -> EthKeyProvider:
    """Load the issuing wallet, or generate one when no key file is given."""
    if key_file is None:
        return EthKeyProvider.generate()
    if not key_file.exists():
        raise ValueError(f"Key file not found: {key_file}")
    return load_wallet(key_file)


def _build_request(kind: str, subject: str, level: int | None, reason: str | None) -> AttestationRequest:
    """Pick the subject type the attestation family expects."""
    resolved = resolve_kind(kind)
    subject_model = Identity(address=subject) if resolved.is_endorsement else ContentId(value=subject)
    return AttestationRequest(kind=resolved, subject=subject_model, level=level, status_reason=reason)


if __name__ == "__main__":
    app()
