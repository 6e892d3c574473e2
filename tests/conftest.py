# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for zk-payroll tests."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from zk_payroll.crypto.commitment import derive_payment_nullifier, scalar_to_le_bytes
from zk_payroll.crypto.groth16 import Groth16Proof, StructuralPairingBackend, VerificationKey
from zk_payroll.host.clock import ManualClock
from zk_payroll.protocol import PayrollProtocol

GENESIS_TIME = 1_700_000_000
GENESIS_SEQUENCE = 1_000


class RejectingPairingBackend(StructuralPairingBackend):
    """Structurally checks points, then rejects every proof."""

    def pairing_check(self, pairs: list[tuple[bytes, bytes]]) -> bool:
        super().pairing_check(pairs)
        return False


def make_vk(inputs: int = 3) -> VerificationKey:
    return VerificationKey(
        alpha=bytes(64),
        beta=bytes(128),
        gamma=bytes(128),
        delta=bytes(128),
        ic=tuple(bytes([i]) * 64 for i in range(inputs + 1)),
    )


def make_proof(tag: int = 0) -> Groth16Proof:
    return Groth16Proof(a=bytes([tag]) * 64, b=bytes([tag]) * 128, c=bytes([tag]) * 64)


@dataclass
class Payroll:
    """A protocol with one funded company and one enrolled employee."""

    protocol: PayrollProtocol
    clock: ManualClock
    company_id: int
    blinding: bytes
    commitment: bytes

    def nullifier(self, employee: str = "GEMP", period: int = 1) -> bytes:
        return derive_payment_nullifier(self.blinding, employee, period)


@pytest.fixture
def clock() -> ManualClock:
    """A manual ledger clock at a fixed genesis point."""
    return ManualClock(timestamp=GENESIS_TIME, sequence=GENESIS_SEQUENCE)


@pytest.fixture
def vk() -> VerificationKey:
    """A three-input verification key (commitment, nullifier, recipient)."""
    return make_vk()


@pytest.fixture
def proof() -> Groth16Proof:
    """A structurally valid proof."""
    return make_proof()


@pytest.fixture
def protocol(clock: ManualClock) -> PayrollProtocol:
    """A freshly built protocol with default config and an open authenticator."""
    return PayrollProtocol(clock=clock)


@pytest.fixture
def payroll(protocol: PayrollProtocol, clock: ManualClock, vk: VerificationKey) -> Payroll:
    """
    Company 0 (admin 'GADMIN', treasury 'GTREASURY' holding 10,000) with
    employee 'GEMP' enrolled at a committed salary of 5,000.
    """
    protocol.verifier.initialize_verifier(vk)
    company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
    blinding = scalar_to_le_bytes(123)
    commitment = protocol.commitments.compute_commitment(5_000, blinding)
    protocol.registry.add_employee(company_id, "GEMP", commitment)
    protocol.token.mint("GTREASURY", 10_000)
    return Payroll(
        protocol=protocol,
        clock=clock,
        company_id=company_id,
        blinding=blinding,
        commitment=commitment,
    )
