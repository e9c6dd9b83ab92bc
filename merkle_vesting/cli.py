"""CLI entry point for building and checking merkle vesting distributions.

Usage:
    merkle-vesting build entitlements.csv
    merkle-vesting proof 0x70997970C51812dc3A010C7d01b50e0d17dc79C8
    merkle-vesting verify 0x70997970C51812dc3A010C7d01b50e0d17dc79C8 1000
"""

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import get_config
from .distribution import (
    generate_merkle_data,
    load_distribution,
    load_entitlements,
    proof_from_distribution,
    save_json,
)
from .encoding import leaf_hash, normalize_address, verify_proof
from .exceptions import MerkleVestingError
from .tree import build as build_commitment

app = typer.Typer(
    name="merkle-vesting",
    help="Merkle root and proof tooling for one-time token claims",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else get_config().log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


def _tree_path(tree: Optional[Path]) -> Path:
    return tree if tree is not None else get_config().tree_file


def _fail(e: MerkleVestingError) -> None:
    console.print(f"[red]{escape(e.message)}[/]")
    raise typer.Exit(1)


@app.command()
def build(
    input_file: Path = typer.Argument(..., help="Entitlements file (.csv with address,amount or .json)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Where to write the distribution file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Build the merkle root and proofs for a list of entitlements."""
    setup_logging(verbose)
    try:
        commitment = build_commitment(load_entitlements(input_file))
    except MerkleVestingError as e:
        _fail(e)

    data = generate_merkle_data(commitment)
    path = save_json(data, _tree_path(out))

    table = Table(title="Entitlements")
    table.add_column("Address")
    table.add_column("Amount", justify="right")
    table.add_column("Proof length", justify="right")
    for address, claim in data["claims"].items():
        table.add_row(address, claim["amount"], str(len(claim["proof"])))
    console.print(table)
    console.print(f"[bold]Merkle root:[/] {data['merkleRoot']}")
    console.print(f"Token total: {data['tokenTotal']}")
    console.print(f"Wrote {path}")


@app.command()
def proof(
    address: str = typer.Argument(..., help="Claimant address (0x... or Tron T...)"),
    tree: Optional[Path] = typer.Option(None, "--tree", "-t", help="Distribution file"),
) -> None:
    """Print the amount and proof for an address."""
    try:
        data = load_distribution(_tree_path(tree))
        amount, hex_proof = proof_from_distribution(data, address)
    except MerkleVestingError as e:
        _fail(e)
    payload = {"address": normalize_address(address), "amount": str(amount), "proof": hex_proof}
    console.print_json(json.dumps(payload))


@app.command()
def verify(
    address: str = typer.Argument(..., help="Claimant address"),
    amount: int = typer.Argument(..., help="Amount being claimed"),
    tree: Optional[Path] = typer.Option(None, "--tree", "-t", help="Distribution file"),
) -> None:
    """Check that the stored proof for an address folds to the root for this amount."""
    try:
        data = load_distribution(_tree_path(tree))
        _, hex_proof = proof_from_distribution(data, address)
        ok = verify_proof(hex_proof, data["merkleRoot"], leaf_hash(address, amount))
    except MerkleVestingError as e:
        _fail(e)
    console.print(f"Valid proof: {ok}")
    if not ok:
        raise typer.Exit(1)


@app.command()
def root(
    tree: Optional[Path] = typer.Option(None, "--tree", "-t", help="Distribution file"),
) -> None:
    """Print the merkle root stored in a distribution file."""
    try:
        data = load_distribution(_tree_path(tree))
    except MerkleVestingError as e:
        _fail(e)
    console.print(data["merkleRoot"])


def main() -> None:
    app()


if __name__ == "__main__":
    main()
