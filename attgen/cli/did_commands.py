"""DID CLI commands.

Formats identifiers the way attestations embed them and generates
Ethereum wallets to issue attestations with.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console

from attgen.sdk.did import format_content_did, format_identity_did
from attgen.sdk.hashing import keccak256
from attgen.sdk.keys import EthKeyProvider

app = typer.Typer(name="did", help="DID formatting and wallet commands")
console = Console()


@app.command("identity")
def identity_command(
    address: str = typer.Argument(..., help="Wallet address")
) -> None:
    """Print the did:pkh:eth identifier of a wallet address."""
    print(format_identity_did(address))


@app.command("content")
def content_command(
    content_id: str = typer.Argument(..., help="Snap identifier")
) -> None:
    """Print the snap:// identifier of a content id."""
    print(format_content_did(content_id))


@app.command("keygen")
def keygen_command(
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file for private key"),
    seed: str | None = typer.Option(None, "--seed", help="Deterministic seed for key generation"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing key file")
) -> None:
    """Generate an Ethereum wallet and print its did:pkh:eth identifier."""
    if output and output.exists() and not force:
        console.print(f"[red]Error: Key file {output} already exists. Use --force to overwrite.[/red]")
        raise typer.Exit(1)

    wallet = _generate_from_seed(seed) if seed else EthKeyProvider.generate()
    _output_key_result(wallet, output)


def load_wallet(key_file: Path) -> EthKeyProvider:
    """Load a wallet from a keygen JSON file or a bare hex private key."""
    text = key_file.read_text().strip()
    try:
        private_key = json.loads(text)["private_key"]
    except (json.JSONDecodeError, KeyError, TypeError):
        private_key = text
    return EthKeyProvider.from_key(private_key)


def _generate_from_seed(seed: str) -> EthKeyProvider:
    """Derive a deterministic wallet from a seed phrase."""
    return EthKeyProvider.from_key(keccak256(seed.encode("utf-8")))


def _output_key_result(wallet: EthKeyProvider, output: Path | None) -> None:
    """Output key generation result."""
    # print() keeps the DID on one unstyled line
    print(format_identity_did(wallet.address))

    if output:
        key_data = {"private_key": wallet.private_key_hex, "address": wallet.address}
        output.write_text(json.dumps(key_data, indent=2))
        console.print(f"[green]Private key saved to {output}[/green]")
