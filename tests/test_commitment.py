# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Tests for CommitmentStore and NullifierRegistry.
"""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from zk_payroll.commitment.nullifier import NullifierRegistry
from zk_payroll.commitment.store import CommitmentStore
from zk_payroll.crypto.commitment import MAX_AMOUNT, scalar_to_le_bytes
from zk_payroll.errors import CommitmentNotFound, NullifierAlreadyUsed
from zk_payroll.host.clock import ManualClock
from zk_payroll.host.environment import HostEnvironment


@pytest.fixture
def host(clock: ManualClock) -> HostEnvironment:
    return HostEnvironment(clock=clock)


@pytest.fixture
def store(host: HostEnvironment) -> CommitmentStore:
    return CommitmentStore(host)


# ---------------------------------------------------------------------------
# TestCommitmentStore
# ---------------------------------------------------------------------------


class TestCommitmentStore:
    def test_store_creates_version_one(self, store: CommitmentStore, clock: ManualClock) -> None:
        record = store.store_commitment("GEMP", b"\x2a" * 32)
        assert record.version == 1
        assert record.commitment == b"\x2a" * 32
        assert record.company_id is None
        assert record.created_at == record.updated_at == clock.timestamp()
        assert store.get_commitment("GEMP") == record

    def test_store_again_resets_version(self, store: CommitmentStore) -> None:
        store.store_commitment("GEMP", b"\x01" * 32)
        store.update_commitment("GEMP", b"\x02" * 32)
        record = store.store_commitment("GEMP", b"\x03" * 32, company_id=4)
        assert record.version == 1
        assert record.company_id == 4

    def test_update_increments_version_and_timestamp(
        self, store: CommitmentStore, clock: ManualClock
    ) -> None:
        created = store.store_commitment("GEMP", b"\x01" * 32)
        clock.advance(seconds=30)
        updated = store.update_commitment("GEMP", b"\x02" * 32)
        assert updated.version == 2
        assert updated.commitment == b"\x02" * 32
        assert updated.created_at == created.created_at
        assert updated.updated_at == created.updated_at + 30

    def test_update_missing_raises(self, store: CommitmentStore) -> None:
        with pytest.raises(CommitmentNotFound, match="GHOST"):
            store.update_commitment("GHOST", b"\x01" * 32)

    def test_get_missing_raises(self, store: CommitmentStore) -> None:
        with pytest.raises(CommitmentNotFound):
            store.get_commitment("GHOST")

    def test_has_commitment(self, store: CommitmentStore) -> None:
        assert store.has_commitment("GEMP") is False
        store.store_commitment("GEMP", b"\x01" * 32)
        assert store.has_commitment("GEMP") is True

    def test_batch_update_applies_in_order(self, store: CommitmentStore) -> None:
        store.store_commitment("GEMP1", b"\x01" * 32)
        store.store_commitment("GEMP2", b"\x02" * 32)
        records = store.batch_update_commitments(
            [("GEMP1", b"\x0a" * 32), ("GEMP2", b"\x14" * 32), ("GEMP1", b"\x0b" * 32)]
        )
        assert [r.version for r in records] == [2, 2, 3]
        assert store.get_commitment("GEMP1").commitment == b"\x0b" * 32
        assert store.get_commitment("GEMP2").commitment == b"\x14" * 32

    def test_batch_update_with_missing_employee_changes_nothing(
        self, store: CommitmentStore
    ) -> None:
        store.store_commitment("GEMP1", b"\x01" * 32)
        with pytest.raises(CommitmentNotFound) as excinfo:
            store.batch_update_commitments([("GEMP1", b"\x0a" * 32), ("GHOST", b"\x0b" * 32)])
        assert excinfo.value.reverted is True
        record = store.get_commitment("GEMP1")
        assert record.version == 1
        assert record.commitment == b"\x01" * 32

    def test_remove_commitment(self, store: CommitmentStore) -> None:
        store.store_commitment("GEMP", b"\x01" * 32)
        assert store.remove_commitment("GEMP") is True
        assert store.remove_commitment("GEMP") is False
        assert store.has_commitment("GEMP") is False

    def test_verify_commitment_checks_opening(self, store: CommitmentStore) -> None:
        blinding = scalar_to_le_bytes(123)
        store.store_commitment("GEMP", store.compute_commitment(5_000, blinding))
        assert store.verify_commitment("GEMP", 5_000, blinding) is True
        assert store.verify_commitment("GEMP", 5_001, blinding) is False
        assert store.verify_commitment("GEMP", 5_000, scalar_to_le_bytes(124)) is False

    @pytest.mark.parametrize("claimed", [-1, -5_000, MAX_AMOUNT + 1])
    def test_unencodable_salary_opens_nothing(self, store: CommitmentStore, claimed: int) -> None:
        blinding = scalar_to_le_bytes(123)
        digest = store.compute_commitment(5_000, blinding)
        store.store_commitment("GEMP", digest)
        assert store.verify_commitment("GEMP", claimed, blinding) is False
        assert store.opens(digest, claimed, blinding) is False
        assert store.opens(digest, 5_000, blinding) is True

    def test_compute_commitment_uses_injected_scheme(self, store: CommitmentStore) -> None:
        blinding = scalar_to_le_bytes(9)
        assert store.compute_commitment(10, blinding) == store.scheme.commit(10, blinding)


# ---------------------------------------------------------------------------
# TestNullifierRegistry
# ---------------------------------------------------------------------------


class TestNullifierRegistry:
    def test_record_then_used(self, host: HostEnvironment, clock: ManualClock) -> None:
        registry = NullifierRegistry(host)
        nullifier = registry.record_nullifier(b"\x04" * 32)
        assert nullifier.used_at == clock.timestamp()
        assert registry.is_nullifier_used(b"\x04" * 32) is True
        assert registry.get_nullifier(b"\x04" * 32) == nullifier

    def test_second_record_fails(self, host: HostEnvironment) -> None:
        registry = NullifierRegistry(host)
        registry.record_nullifier(b"\x04" * 32)
        with pytest.raises(NullifierAlreadyUsed) as excinfo:
            registry.record_nullifier(b"\x04" * 32)
        assert excinfo.value.code == "NULLIFIER_ALREADY_USED"
        assert excinfo.value.reverted is False

    def test_unknown_nullifier_is_unused(self, host: HostEnvironment) -> None:
        registry = NullifierRegistry(host)
        assert registry.is_nullifier_used(b"\x05" * 32) is False
        assert registry.get_nullifier(b"\x05" * 32) is None

    @given(value=st.binary(min_size=32, max_size=32), attempts=st.integers(1, 5))
    def test_nullifier_is_consumed_exactly_once(self, value: bytes, attempts: int) -> None:
        registry = NullifierRegistry(HostEnvironment())
        registry.record_nullifier(value)
        for _ in range(attempts):
            with pytest.raises(NullifierAlreadyUsed):
                registry.record_nullifier(value)
        assert registry.is_nullifier_used(value)
