"""
Payment-side helpers consumed by the orchestration layer.

Proof hashing, wallet address checks and identifier generation.
"""

from .ids import generate_metering_record_id, generate_payment_id, generate_quote_id
from .proofs import (
    generate_payment_proof_hash,
    sha256_hex,
    sha3_256_hex,
    validate_wallet_address,
    verify_payment_proof,
)

__all__ = [
    "generate_metering_record_id",
    "generate_payment_id",
    "generate_quote_id",
    "generate_payment_proof_hash",
    "sha256_hex",
    "sha3_256_hex",
    "validate_wallet_address",
    "verify_payment_proof",
]
