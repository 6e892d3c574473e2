# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
Groth16 proof and verification-key records, and the pairing backend the
proof verifier delegates curve arithmetic to.

Points are carried in their uncompressed serialized form: a G1 point is
``x ‖ y`` (64 bytes) and a G2 point ``x0 ‖ x1 ‖ y0 ‖ y1`` (128 bytes).
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Annotated

from pydantic import BaseModel, Field

from zk_payroll.types import G1_SIZE, G2_SIZE, G1Point, G2Point


class PairingError(ValueError):
    """Raised by a backend for malformed or off-curve points."""


class Groth16Proof(BaseModel, frozen=True):
    """
    A Groth16 proof.

    Attributes:
        a: Proof element A in G1.
        b: Proof element B in G2.
        c: Proof element C in G1.
    """

    a: G1Point
    b: G2Point
    c: G1Point


class VerificationKey(BaseModel, frozen=True):
    """
    Verification key for one circuit.

    ``ic[0]`` is the constant term of the public-input linear combination;
    ``ic[i + 1]`` is the coefficient point for public input ``i``. A key for
    a circuit with ``n`` public inputs therefore carries ``n + 1`` points.
    """

    alpha: G1Point
    beta: G2Point
    gamma: G2Point
    delta: G2Point
    ic: Annotated[tuple[G1Point, ...], Field(min_length=1)]

    @property
    def input_count(self) -> int:
        return len(self.ic) - 1


class PairingBackend(ABC):
    """
    BN254 group operations needed by Groth16 verification.

    Implementations raise :class:`PairingError` for points that do not
    decode. The verifier reports any such error as a failed verification.
    """

    @abstractmethod
    def g1_add(self, p: bytes, q: bytes) -> bytes:
        ...

    @abstractmethod
    def g1_mul(self, p: bytes, scalar: int) -> bytes:
        ...

    @abstractmethod
    def g1_negate(self, p: bytes) -> bytes:
        ...

    @abstractmethod
    def pairing_check(self, pairs: list[tuple[bytes, bytes]]) -> bool:
        """Return True iff the product of ``e(g1, g2)`` over ``pairs`` is one."""


class StructuralPairingBackend(PairingBackend):
    """
    Development backend with symbolic point arithmetic.

    Group operations return domain-separated SHA-256 expansions of their
    operands, and :meth:`pairing_check` accepts any list of correctly sized
    points. It checks shape only and provides no soundness: deploy with a
    real BN254 backend.
    """

    def g1_add(self, p: bytes, q: bytes) -> bytes:
        _check_g1(p)
        _check_g1(q)
        return _expand(b"g1_add", p, q)

    def g1_mul(self, p: bytes, scalar: int) -> bytes:
        _check_g1(p)
        if scalar < 0:
            raise PairingError(f"scalar must be >= 0; got {scalar}.")
        return _expand(b"g1_mul", p, scalar.to_bytes(32, "big"))

    def g1_negate(self, p: bytes) -> bytes:
        _check_g1(p)
        return _expand(b"g1_negate", p)

    def pairing_check(self, pairs: list[tuple[bytes, bytes]]) -> bool:
        if not pairs:
            raise PairingError("pairing_check requires at least one pair.")
        for g1, g2 in pairs:
            _check_g1(g1)
            _check_g2(g2)
        return True


def _check_g1(point: bytes) -> None:
    if len(point) != G1_SIZE:
        raise PairingError(f"G1 point must be {G1_SIZE} bytes; got {len(point)}.")


def _check_g2(point: bytes) -> None:
    if len(point) != G2_SIZE:
        raise PairingError(f"G2 point must be {G2_SIZE} bytes; got {len(point)}.")


def _expand(tag: bytes, *parts: bytes) -> bytes:
    body = b"zk-payroll/structural/" + tag + b"".join(parts)
    return hashlib.sha256(body + b"\x00").digest() + hashlib.sha256(body + b"\x01").digest()
