# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Tests for PayrollRegistry.
"""

from __future__ import annotations

import pytest

from zk_payroll.errors import (
    CompanyNotFound,
    EmployeeAlreadyEnrolled,
    EmployeeNotFound,
    Unauthorized,
)
from zk_payroll.host.auth import MockAuthenticator
from zk_payroll.host.clock import ManualClock
from zk_payroll.protocol import PayrollProtocol

C1 = b"\x01" * 32
C2 = b"\x02" * 32


# ---------------------------------------------------------------------------
# TestCompanies
# ---------------------------------------------------------------------------


class TestCompanies:
    def test_ids_are_sequential_from_zero(self, protocol: PayrollProtocol) -> None:
        ids = [protocol.registry.register_company(f"GADMIN{i}", "GTREASURY") for i in range(3)]
        assert ids == [0, 1, 2]
        assert protocol.registry.company_count() == 3

    def test_company_record(self, protocol: PayrollProtocol, clock: ManualClock) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        company = protocol.registry.get_company(company_id)
        assert company.admin == "GADMIN"
        assert company.treasury == "GTREASURY"
        assert company.employee_count == 0
        assert company.registered_at == clock.timestamp()

    def test_register_requires_admin_signature(self, clock: ManualClock) -> None:
        protocol = PayrollProtocol(clock=clock, authenticator=MockAuthenticator(authorize_all=False))
        with pytest.raises(Unauthorized):
            protocol.registry.register_company("GADMIN", "GTREASURY")
        assert protocol.registry.company_count() == 0

    def test_unknown_company_raises(self, protocol: PayrollProtocol) -> None:
        with pytest.raises(CompanyNotFound):
            protocol.registry.get_company(7)
        assert protocol.registry.has_company(7) is False


# ---------------------------------------------------------------------------
# TestEnrollment
# ---------------------------------------------------------------------------


class TestEnrollment:
    def test_add_employee_relays_commitment(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        binding = protocol.registry.add_employee(company_id, "GEMP", C1)

        assert binding.company_id == company_id
        assert binding.commitment == C1
        record = protocol.commitments.get_commitment("GEMP")
        assert record.version == 1
        assert record.company_id == company_id
        assert protocol.registry.get_company(company_id).employee_count == 1
        assert protocol.registry.is_employee(company_id, "GEMP") is True

    def test_add_employee_to_unknown_company(self, protocol: PayrollProtocol) -> None:
        with pytest.raises(CompanyNotFound):
            protocol.registry.add_employee(3, "GEMP", C1)
        assert protocol.commitments.has_commitment("GEMP") is False

    def test_stored_admin_must_sign_not_caller(self, clock: ManualClock) -> None:
        auth = MockAuthenticator(authorize_all=False)
        protocol = PayrollProtocol(clock=clock, authenticator=auth)
        auth.authorize("GADMIN")
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")

        auth.deauthorize("GADMIN")
        auth.authorize("GMALLORY")
        with pytest.raises(Unauthorized) as excinfo:
            protocol.registry.add_employee(company_id, "GEMP", C1)
        assert excinfo.value.principal == "GADMIN"
        assert protocol.registry.is_employee(company_id, "GEMP") is False

    def test_employee_cannot_join_two_companies(self, protocol: PayrollProtocol) -> None:
        first = protocol.registry.register_company("GADMIN", "GTREASURY")
        second = protocol.registry.register_company("GADMIN2", "GTREASURY2")
        protocol.registry.add_employee(first, "GEMP", C1)
        with pytest.raises(EmployeeAlreadyEnrolled) as excinfo:
            protocol.registry.add_employee(second, "GEMP", C2)
        assert excinfo.value.company_id == first
        assert protocol.commitments.get_commitment("GEMP").commitment == C1

    def test_remove_employee_hard_deletes(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        protocol.registry.remove_employee(company_id, "GEMP")

        assert protocol.registry.is_employee(company_id, "GEMP") is False
        assert protocol.commitments.has_commitment("GEMP") is False
        assert protocol.registry.get_company(company_id).employee_count == 0
        with pytest.raises(EmployeeNotFound):
            protocol.registry.update_commitment(company_id, "GEMP", C2)

    def test_removed_employee_can_enroll_elsewhere(self, protocol: PayrollProtocol) -> None:
        first = protocol.registry.register_company("GADMIN", "GTREASURY")
        second = protocol.registry.register_company("GADMIN2", "GTREASURY2")
        protocol.registry.add_employee(first, "GEMP", C1)
        protocol.registry.remove_employee(first, "GEMP")
        protocol.registry.add_employee(second, "GEMP", C2)
        assert protocol.registry.get_employee(second, "GEMP").commitment == C2

    def test_remove_unknown_employee_raises(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        with pytest.raises(EmployeeNotFound):
            protocol.registry.remove_employee(company_id, "GEMP")

    def test_employee_of_other_company_is_not_found(self, protocol: PayrollProtocol) -> None:
        first = protocol.registry.register_company("GADMIN", "GTREASURY")
        second = protocol.registry.register_company("GADMIN2", "GTREASURY2")
        protocol.registry.add_employee(first, "GEMP", C1)
        with pytest.raises(EmployeeNotFound):
            protocol.registry.get_employee(second, "GEMP")
        with pytest.raises(EmployeeNotFound):
            protocol.registry.remove_employee(second, "GEMP")


# ---------------------------------------------------------------------------
# TestCommitmentUpdates
# ---------------------------------------------------------------------------


class TestCommitmentUpdates:
    def test_update_replaces_binding_and_bumps_version(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        record = protocol.registry.update_commitment(company_id, "GEMP", C2)

        assert record.version == 2
        assert record.commitment == C2
        assert protocol.registry.get_employee(company_id, "GEMP").commitment == C2

    def test_update_requires_stored_admin(self, clock: ManualClock) -> None:
        auth = MockAuthenticator(authorize_all=False)
        protocol = PayrollProtocol(clock=clock, authenticator=auth)
        auth.authorize("GADMIN")
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        auth.deauthorize("GADMIN")

        with pytest.raises(Unauthorized):
            protocol.registry.update_commitment(company_id, "GEMP", C2)
        assert protocol.commitments.get_commitment("GEMP").version == 1


# ---------------------------------------------------------------------------
# TestPaymentStamp
# ---------------------------------------------------------------------------


class TestPaymentStamp:
    def test_new_binding_has_no_payment(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        binding = protocol.registry.add_employee(company_id, "GEMP", C1)
        assert binding.last_payment_at is None

    def test_record_payment_stamps_binding(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        updated = protocol.registry.record_payment(company_id, "GEMP", 1_234)

        assert updated.last_payment_at == 1_234
        stored = protocol.registry.get_employee(company_id, "GEMP")
        assert stored.last_payment_at == 1_234
        assert stored.commitment == C1

    def test_record_payment_for_unbound_employee(self, protocol: PayrollProtocol) -> None:
        first = protocol.registry.register_company("GADMIN", "GTREASURY")
        second = protocol.registry.register_company("GADMIN2", "GTREASURY2")
        protocol.registry.add_employee(first, "GEMP", C1)
        with pytest.raises(EmployeeNotFound):
            protocol.registry.record_payment(second, "GEMP", 1_234)
        with pytest.raises(EmployeeNotFound):
            protocol.registry.record_payment(first, "GNOBODY", 1_234)
        assert protocol.registry.get_employee(first, "GEMP").last_payment_at is None

    def test_record_payment_requires_stored_admin(self, clock: ManualClock) -> None:
        auth = MockAuthenticator(authorize_all=False)
        protocol = PayrollProtocol(clock=clock, authenticator=auth)
        auth.authorize("GADMIN")
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        auth.deauthorize("GADMIN")

        with pytest.raises(Unauthorized):
            protocol.registry.record_payment(company_id, "GEMP", 1_234)


# ---------------------------------------------------------------------------
# TestListing
# ---------------------------------------------------------------------------


class TestListing:
    def test_list_employees_in_enrollment_order(
        self, protocol: PayrollProtocol, clock: ManualClock
    ) -> None:
        first = protocol.registry.register_company("GADMIN", "GTREASURY")
        second = protocol.registry.register_company("GADMIN2", "GTREASURY2")
        protocol.registry.add_employee(first, "GZED", C1)
        clock.advance(seconds=1)
        protocol.registry.add_employee(first, "GAMY", C2)
        protocol.registry.add_employee(second, "GOTHER", C1)

        names = [b.employee for b in protocol.registry.list_employees(first)]
        assert names == ["GZED", "GAMY"]
        assert protocol.registry.list_employees(5) == []

    def test_find_employee_across_companies(self, protocol: PayrollProtocol) -> None:
        company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
        protocol.registry.add_employee(company_id, "GEMP", C1)
        binding = protocol.registry.find_employee("GEMP")
        assert binding is not None and binding.company_id == company_id
        assert protocol.registry.find_employee("GNOBODY") is None
