"""Entitlement input files and the merkleTree.json distribution file."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import get_config
from .encoding import normalize_address, to_bytes32
from .exceptions import InvalidInput
from .ledger import Ledger
from .tree import Commitment, Entitlement
from .verifier import ClaimVerifier

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _load_csv(path: Path) -> List[Entitlement]:
    out: List[Entitlement] = []
    with open(path, newline="") as f:
        rdr = csv.DictReader(f)
        if not rdr.fieldnames or "address" not in rdr.fieldnames or "amount" not in rdr.fieldnames:
            raise InvalidInput("file", str(path), "CSV needs header: address,amount")
        for r in rdr:
            a = (r.get("address") or "").strip()
            v = (r.get("amount") or "").strip()
            if not a and not v:
                continue
            if not a or not v:
                raise InvalidInput("file", str(path), f"line {rdr.line_num}: missing address or amount")
            out.append(Entitlement(a, v))
    return out


def _load_json(path: Path) -> List[Entitlement]:
    with open(path) as f:
        raw = json.load(f)
    if isinstance(raw, dict):
        return [Entitlement(a, v) for a, v in raw.items()]
    if isinstance(raw, list):
        try:
            return [Entitlement(r["address"], r["amount"]) for r in raw]
        except (KeyError, TypeError) as e:
            raise InvalidInput("file", str(path), f"bad entry: {e}") from e
    raise InvalidInput("file", str(path), "expected a list or an address->amount mapping")


def load_entitlements(path: PathLike) -> List[Entitlement]:
    """Read entitlements from a `.csv` (address,amount) or `.json` file."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        ents = _load_csv(path)
    elif suffix == ".json":
        ents = _load_json(path)
    else:
        raise InvalidInput("file", str(path), "unsupported format, use .csv or .json")
    if not ents:
        raise InvalidInput("file", str(path), "no valid rows")
    logger.info(f"Loaded {len(ents)} entitlements from {path}")
    return ents


def generate_merkle_data(commitment: Commitment) -> Dict[str, Any]:
    claims: Dict[str, Dict[str, Any]] = {}
    for ent in commitment.entitlements:
        claims[ent.address] = {
            "index": commitment.index_of(ent),
            "amount": str(ent.amount),
            "leaf": "0x" + ent.leaf.hex(),
            "proof": commitment.get_hex_proof(ent),
        }
    return {
        "merkleRoot": commitment.hex_root,
        "entitlementCount": len(commitment.entitlements),
        "tokenTotal": str(commitment.total_amount),
        "claims": claims,
    }


def save_json(data: Dict[str, Any], path: PathLike) -> Path:
    path = Path(path)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved: {path}")
    return path


def load_distribution(path: PathLike) -> Dict[str, Any]:
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict) or "merkleRoot" not in data:
        raise InvalidInput("file", str(path), "missing merkleRoot")
    to_bytes32(data["merkleRoot"], "merkleRoot")
    data.setdefault("claims", {})
    return data


def proof_from_distribution(data: Dict[str, Any], address: str) -> Tuple[int, List[str]]:
    """Return the (amount, hex proof) stored for an address."""
    addr = normalize_address(address)
    claim = data["claims"].get(addr)
    if claim is None:
        raise InvalidInput("address", addr, "address not in claims")
    return int(claim["amount"]), list(claim["proof"])


def deploy(
    tree_file: Optional[PathLike] = None,
    admin: Optional[str] = None,
    ledger: Optional[Ledger] = None,
) -> ClaimVerifier:
    """Construct a claim verifier seeded with the root from a distribution file."""
    config = get_config()
    tree_file = Path(tree_file) if tree_file else config.tree_file
    if admin is None:
        if not config.has_admin():
            raise InvalidInput("admin", None, "no admin given and MERKLE_VESTING_ADMIN unset")
        admin = config.admin_address

    data = load_distribution(tree_file)
    logger.info(f"Deploying claim verifier with the account: {normalize_address(admin)}")
    return ClaimVerifier(data["merkleRoot"], admin, ledger)
