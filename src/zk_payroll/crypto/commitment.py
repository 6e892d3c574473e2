# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Salary commitments and the off-chain helpers that feed the payment circuit.

A commitment binds a salary to a random blinding factor without revealing
either. The protocol never interprets commitment bytes; it only compares them
or passes them as public inputs to the proof verifier, so the scheme sits
behind the :class:`CommitmentScheme` interface.

:class:`Sha256CommitmentScheme` computes
``sha256(amount_le16 ‖ blinding)``, the stand-in used until a Poseidon
backend is injected. It is hiding and binding under the usual random-oracle
assumptions but is not circuit-friendly.
"""

from __future__ import annotations

import hashlib
import secrets
from abc import ABC, abstractmethod

from zk_payroll.errors import InvalidCommitmentInput
from zk_payroll.types import DIGEST_SIZE

# Order of the BN254 (alt_bn128) scalar field.
BN254_SCALAR_FIELD: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

# Domain separation tags. Keep these stable; they carry a version suffix.
_DOMAIN_PREFIX = b"zk-payroll/"
RECIPIENT_DOMAIN = _DOMAIN_PREFIX + b"recipient/v1"
NULLIFIER_DOMAIN = _DOMAIN_PREFIX + b"payment-nullifier/v1"

_AMOUNT_BYTES = 16

# Largest salary the 16-byte signed encoding holds.
MAX_AMOUNT: int = 2 ** (8 * _AMOUNT_BYTES - 1) - 1


class CommitmentScheme(ABC):
    """Computes the opaque 32-byte digest stored for a salary."""

    name: str = "abstract"

    @abstractmethod
    def commit(self, amount: int, blinding: bytes) -> bytes:
        ...

    def can_encode(self, amount: int) -> bool:
        """Whether ``amount`` is a salary this scheme can commit to."""
        return amount >= 0


class Sha256CommitmentScheme(CommitmentScheme):
    """
    ``sha256(amount ‖ blinding)`` with the amount encoded as a 16-byte
    little-endian signed integer.

    Example::

        scheme = Sha256CommitmentScheme()
        blinding = generate_blinding_factor()
        digest = scheme.commit(5_000, blinding)
        assert len(digest) == 32
    """

    name = "sha256"

    def can_encode(self, amount: int) -> bool:
        return 0 <= amount <= MAX_AMOUNT

    def commit(self, amount: int, blinding: bytes) -> bytes:
        if not self.can_encode(amount):
            raise InvalidCommitmentInput(f"amount must be in [0, {MAX_AMOUNT}]; got {amount}.")
        if len(blinding) != DIGEST_SIZE:
            raise InvalidCommitmentInput(
                f"blinding must be exactly {DIGEST_SIZE} bytes; got {len(blinding)}."
            )
        preimage = amount.to_bytes(_AMOUNT_BYTES, "little", signed=True) + bytes(blinding)
        return hashlib.sha256(preimage).digest()


# ---------------------------------------------------------------------------
# Field-element helpers
# ---------------------------------------------------------------------------


def scalar_to_le_bytes(value: int) -> bytes:
    """Reduce ``value`` modulo the BN254 scalar field and encode it as 32 LE bytes."""
    return (value % BN254_SCALAR_FIELD).to_bytes(DIGEST_SIZE, "little")


def generate_blinding_factor() -> bytes:
    """
    Return a uniformly random BN254 scalar as 32 little-endian bytes.

    Reads 64 bytes from the OS CSPRNG and reduces them modulo the field
    order; the bias of the reduction is below 2**-254.
    """
    while True:
        wide = int.from_bytes(secrets.token_bytes(64), "little")
        encoded = scalar_to_le_bytes(wide)
        if any(encoded):
            return encoded


def recipient_hash(employee: str) -> bytes:
    """Public-input encoding of the payee address."""
    if not employee:
        raise InvalidCommitmentInput("employee must be a non-empty string.")
    return hashlib.sha256(RECIPIENT_DOMAIN + b"\x00" + employee.encode("utf-8")).digest()


def derive_payment_nullifier(blinding: bytes, employee: str, period: int) -> bytes:
    """
    Derive the one-time token for paying ``employee`` in ``period``.

    Only the holder of the blinding factor can compute it, and it is stable
    for a given (employee, period), so re-proving the same payment yields the
    same nullifier.
    """
    if len(blinding) != DIGEST_SIZE:
        raise InvalidCommitmentInput(f"blinding must be exactly {DIGEST_SIZE} bytes.")
    if period < 0:
        raise InvalidCommitmentInput(f"period must be >= 0; got {period}.")
    preimage = (
        NULLIFIER_DOMAIN
        + b"\x00"
        + bytes(blinding)
        + employee.encode("utf-8")
        + b"\x00"
        + period.to_bytes(8, "big")
    )
    return hashlib.sha256(preimage).digest()
