# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from zk_payroll.crypto.commitment import (
    BN254_SCALAR_FIELD,
    CommitmentScheme,
    Sha256CommitmentScheme,
    derive_payment_nullifier,
    generate_blinding_factor,
    recipient_hash,
    scalar_to_le_bytes,
)
from zk_payroll.crypto.groth16 import (
    Groth16Proof,
    PairingBackend,
    PairingError,
    StructuralPairingBackend,
    VerificationKey,
)

__all__ = [
    "BN254_SCALAR_FIELD",
    "CommitmentScheme",
    "Groth16Proof",
    "PairingBackend",
    "PairingError",
    "Sha256CommitmentScheme",
    "StructuralPairingBackend",
    "VerificationKey",
    "derive_payment_nullifier",
    "generate_blinding_factor",
    "recipient_hash",
    "scalar_to_le_bytes",
]
