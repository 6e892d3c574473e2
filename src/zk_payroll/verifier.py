# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging

from zk_payroll.crypto.commitment import BN254_SCALAR_FIELD
from zk_payroll.crypto.groth16 import (
    Groth16Proof,
    PairingBackend,
    PairingError,
    StructuralPairingBackend,
    VerificationKey,
)
from zk_payroll.errors import AlreadyInitialized, NotInitialized
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.types import DIGEST_SIZE

logger = logging.getLogger("zk_payroll.verifier")

_NAMESPACE = "verifier"
_KEY = "verification_key"


class ProofVerifier:
    """
    Groth16 verification gate for payment and range proofs.

    Holds a write-once verification key and checks

        e(A, B) = e(alpha, beta) · e(IC_sum, gamma) · e(C, delta)

    with ``IC_sum = ic[0] + Σ ic[i + 1] · input[i]``, delegating all curve
    arithmetic to the injected :class:`PairingBackend`. Public inputs are
    32-byte big-endian values reduced modulo the BN254 scalar field.

    Verification is pure: it reads the key and never writes.

    Example::

        verifier = ProofVerifier(host)
        verifier.initialize_verifier(vk)
        ok = verifier.verify_payment_proof(proof, commitment, nullifier, recipient)
    """

    def __init__(self, host: HostEnvironment, backend: PairingBackend | None = None) -> None:
        self._host = host
        self._backend = backend or StructuralPairingBackend()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def initialize_verifier(self, vk: VerificationKey) -> None:
        """
        Set the verification key. Allowed exactly once.

        Raises:
            AlreadyInitialized: If a key was already set.
        """
        with self._host.invoke("initialize_verifier"):
            if self._host.storage.has(_NAMESPACE, _KEY):
                raise AlreadyInitialized("ProofVerifier")
            self._host.storage.set(_NAMESPACE, _KEY, vk)
            logger.info("verifier_initialized", extra={"input_count": vk.input_count})

    def is_initialized(self) -> bool:
        return self._host.storage.has(_NAMESPACE, _KEY)

    def verify_proof(self, proof: Groth16Proof, public_inputs: list[bytes]) -> bool:
        """
        Check ``proof`` against ``public_inputs``.

        Returns False when the number of inputs does not match the key or
        when the backend rejects a malformed point.

        Raises:
            NotInitialized: If no verification key was set.
        """
        vk = self._load_key()
        if len(public_inputs) != vk.input_count:
            logger.debug(
                "public_input_count_mismatch",
                extra={"expected": vk.input_count, "got": len(public_inputs)},
            )
            return False
        try:
            return self._pairing_holds(proof, vk, public_inputs)
        except PairingError as exc:
            logger.debug("pairing_backend_rejected", extra={"reason": str(exc)})
            return False

    def verify_payment_proof(
        self,
        proof: Groth16Proof,
        commitment: bytes,
        nullifier: bytes,
        recipient_hash: bytes,
    ) -> bool:
        return self.verify_proof(proof, [commitment, nullifier, recipient_hash])

    def verify_range_proof(
        self,
        proof: Groth16Proof,
        commitment: bytes,
        min_value: int,
        max_value: int,
    ) -> bool:
        """Check a proof that the committed salary lies in ``[min_value, max_value]``."""
        if min_value < 0 or min_value > max_value:
            return False
        inputs = [
            commitment,
            min_value.to_bytes(DIGEST_SIZE, "big"),
            max_value.to_bytes(DIGEST_SIZE, "big"),
        ]
        return self.verify_proof(proof, inputs)

    def verify_batch_proofs(
        self,
        proofs: list[Groth16Proof],
        commitments: list[bytes],
        nullifiers: list[bytes],
        recipient_hashes: list[bytes],
    ) -> bool:
        """
        Verify parallel arrays of payment proofs.

        Returns False on any length mismatch and stops at the first proof
        that fails.
        """
        count = len(proofs)
        if not (len(commitments) == len(nullifiers) == len(recipient_hashes) == count):
            return False
        for proof, commitment, nullifier, recipient in zip(
            proofs, commitments, nullifiers, recipient_hashes
        ):
            if not self.verify_payment_proof(proof, commitment, nullifier, recipient):
                return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_key(self) -> VerificationKey:
        vk: VerificationKey | None = self._host.storage.get(_NAMESPACE, _KEY)
        if vk is None:
            raise NotInitialized("ProofVerifier")
        return vk

    def _pairing_holds(
        self,
        proof: Groth16Proof,
        vk: VerificationKey,
        public_inputs: list[bytes],
    ) -> bool:
        backend = self._backend
        ic_sum = vk.ic[0]
        for point, raw in zip(vk.ic[1:], public_inputs):
            ic_sum = backend.g1_add(ic_sum, backend.g1_mul(point, _to_scalar(raw)))
        return backend.pairing_check(
            [
                (backend.g1_negate(proof.a), proof.b),
                (vk.alpha, vk.beta),
                (ic_sum, vk.gamma),
                (proof.c, vk.delta),
            ]
        )


def _to_scalar(raw: bytes) -> int:
    if len(raw) != DIGEST_SIZE:
        raise PairingError(f"public input must be {DIGEST_SIZE} bytes; got {len(raw)}.")
    return int.from_bytes(raw, "big") % BN254_SCALAR_FIELD
