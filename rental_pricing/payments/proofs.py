"""
Payment proof hashing and wallet address checks.

The orchestration layer uses these to check a payment proof before it
asks for a quote or meters a rental. Nothing here touches a chain.
"""

import hashlib
import hmac
import re

_EVM_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")
_BASE58_ADDRESS = re.compile(r"[1-9A-HJ-NP-Za-km-z]{32,44}")


def sha256_hex(text: str) -> str:
    """SHA-256 of the UTF-8 text as lowercase hex."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def sha3_256_hex(text: str) -> str:
    """SHA3-256 of the UTF-8 text as lowercase hex."""
    return hashlib.sha3_256(text.encode("utf-8")).hexdigest()


def generate_payment_proof_hash(payment_id: str, proof: str) -> str:
    """Hash binding a proof to its payment: sha256("<payment_id>:<proof>")."""
    return sha256_hex(f"{payment_id}:{proof}")


def verify_payment_proof(payment_id: str, proof: str, expected_hash: str) -> bool:
    """Check a proof against the hash recorded for the payment."""
    if not isinstance(expected_hash, str) or not expected_hash.isascii():
        return False
    actual = generate_payment_proof_hash(payment_id, proof)
    return hmac.compare_digest(actual, expected_hash)


def validate_wallet_address(address: str) -> bool:
    """Syntactic check for EVM (0x + 40 hex) or Solana (base58, 32-44 chars) addresses."""
    if not isinstance(address, str):
        return False
    if address.startswith("0x"):
        return _EVM_ADDRESS.fullmatch(address) is not None
    return _BASE58_ADDRESS.fullmatch(address) is not None
