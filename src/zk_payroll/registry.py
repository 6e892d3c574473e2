# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from typing import Annotated

from pydantic import BaseModel, Field

from zk_payroll.commitment.store import CommitmentStore, EmployeeCommitment
from zk_payroll.errors import CompanyNotFound, EmployeeAlreadyEnrolled, EmployeeNotFound
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.types import Digest, Principal

logger = logging.getLogger("zk_payroll.registry")

_NAMESPACE = "registry"
_COMPANY_COUNT = "company_count"


class Company(BaseModel, frozen=True):
    """
    A registered employer.

    Attributes:
        id: Sequence number assigned at registration, starting at 0.
        admin: Principal whose signature every company mutation requires.
        treasury: Principal that funds payroll.
        employee_count: Number of currently enrolled employees.
        registered_at: Host timestamp of registration.
    """

    id: Annotated[int, Field(ge=0)]
    admin: Principal
    treasury: Principal
    employee_count: Annotated[int, Field(ge=0)] = 0
    registered_at: int


class EmployeeBinding(BaseModel, frozen=True):
    """Registry-side membership of one employee in one company."""

    company_id: int
    employee: Principal
    commitment: Digest
    enrolled_at: int
    last_payment_at: int | None = None


class PayrollRegistry:
    """
    Owns companies and the employee-to-company bindings.

    Every mutation of a company requires the signature of the admin stored
    at registration, never an admin named by the caller. Enrollment and
    commitment updates are relayed to the :class:`CommitmentStore` in the
    same host transaction.

    Example::

        registry = PayrollRegistry(host, commitments)
        company_id = registry.register_company("GADMIN", "GTREASURY")
        registry.add_employee(company_id, "GEMP", commitment)
        assert registry.is_employee(company_id, "GEMP")
    """

    def __init__(self, host: HostEnvironment, commitments: CommitmentStore) -> None:
        self._host = host
        self._commitments = commitments

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register_company(self, admin: str, treasury: str) -> int:
        """
        Register a company and return its id.

        Ids are assigned from a counter stored beside the company table:
        0, 1, 2, ... and never reused.

        Raises:
            Unauthorized: If ``admin`` has not signed the call.
        """
        with self._host.invoke("register_company"):
            self._host.require_auth(admin)
            company_id: int = self._host.storage.get(_NAMESPACE, _COMPANY_COUNT) or 0
            company = Company(
                id=company_id,
                admin=admin,
                treasury=treasury,
                registered_at=self._host.now(),
            )
            self._host.storage.set(_NAMESPACE, ("company", company_id), company)
            self._host.storage.set(_NAMESPACE, _COMPANY_COUNT, company_id + 1)
            logger.info(
                "company_registered",
                extra={"company_id": company_id, "admin": admin},
            )
            return company_id

    def add_employee(self, company_id: int, employee: str, commitment: bytes) -> EmployeeBinding:
        """
        Enroll ``employee`` in a company with an initial salary commitment.

        Args:
            company_id: The enrolling company.
            employee: Principal of the employee.
            commitment: Opaque 32-byte salary commitment.

        Returns:
            The stored :class:`EmployeeBinding`.

        Raises:
            CompanyNotFound: If ``company_id`` was never registered.
            Unauthorized: If the company's stored admin has not signed.
            EmployeeAlreadyEnrolled: If the employee belongs to any company.
        """
        with self._host.invoke("add_employee"):
            company = self.get_company(company_id)
            self._host.require_auth(company.admin)

            existing = self._binding(employee)
            if existing is not None:
                raise EmployeeAlreadyEnrolled(employee, existing.company_id)

            binding = EmployeeBinding(
                company_id=company_id,
                employee=employee,
                commitment=commitment,
                enrolled_at=self._host.now(),
            )
            self._host.storage.set(_NAMESPACE, ("employee", employee), binding)
            self._commitments.store_commitment(employee, commitment, company_id=company_id)
            self._save_company(
                company.model_copy(update={"employee_count": company.employee_count + 1})
            )
            logger.info(
                "employee_enrolled",
                extra={"company_id": company_id, "employee": employee},
            )
            return binding

    def remove_employee(self, company_id: int, employee: str) -> None:
        """
        Hard-delete the employee's binding and commitment.

        Raises:
            CompanyNotFound: If ``company_id`` was never registered.
            Unauthorized: If the company's stored admin has not signed.
            EmployeeNotFound: If the employee is not bound to this company.
        """
        with self._host.invoke("remove_employee"):
            company = self.get_company(company_id)
            self._host.require_auth(company.admin)
            self.get_employee(company_id, employee)

            self._host.storage.remove(_NAMESPACE, ("employee", employee))
            self._commitments.remove_commitment(employee)
            self._save_company(
                company.model_copy(update={"employee_count": company.employee_count - 1})
            )
            logger.info(
                "employee_removed",
                extra={"company_id": company_id, "employee": employee},
            )

    def update_commitment(
        self, company_id: int, employee: str, new_commitment: bytes
    ) -> EmployeeCommitment:
        """
        Replace the employee's salary commitment.

        The binding is updated and the change relayed to the commitment
        store, whose version counter increments.

        Raises:
            CompanyNotFound: If ``company_id`` was never registered.
            Unauthorized: If the company's stored admin has not signed.
            EmployeeNotFound: If the employee is not bound to this company.
        """
        with self._host.invoke("update_commitment"):
            company = self.get_company(company_id)
            self._host.require_auth(company.admin)
            binding = self.get_employee(company_id, employee)

            updated = EmployeeBinding.model_validate(
                {**binding.model_dump(), "commitment": new_commitment}
            )
            self._host.storage.set(_NAMESPACE, ("employee", employee), updated)
            record = self._commitments.update_commitment(employee, new_commitment)
            logger.info(
                "employee_commitment_updated",
                extra={"company_id": company_id, "employee": employee, "version": record.version},
            )
            return record

    def record_payment(self, company_id: int, employee: str, timestamp: int) -> EmployeeBinding:
        """
        Stamp the employee's binding with the time of their latest payment.

        Called by the payment executor as part of settlement, so a batch that
        fails later discards the stamp with the rest of its writes.

        Raises:
            CompanyNotFound: If ``company_id`` was never registered.
            Unauthorized: If the company's stored admin has not signed.
            EmployeeNotFound: If the employee is not bound to this company.
        """
        with self._host.invoke("record_payment"):
            company = self.get_company(company_id)
            self._host.require_auth(company.admin)
            binding = self.get_employee(company_id, employee)

            updated = binding.model_copy(update={"last_payment_at": timestamp})
            self._host.storage.set(_NAMESPACE, ("employee", employee), updated)
            return updated

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_company(self, company_id: int) -> Company:
        company: Company | None = self._host.storage.get(_NAMESPACE, ("company", company_id))
        if company is None:
            raise CompanyNotFound(company_id)
        return company

    def has_company(self, company_id: int) -> bool:
        return self._host.storage.has(_NAMESPACE, ("company", company_id))

    def get_employee(self, company_id: int, employee: str) -> EmployeeBinding:
        """
        Return the employee's binding to ``company_id``.

        Raises:
            EmployeeNotFound: If the employee is unbound or bound elsewhere.
        """
        binding = self._binding(employee)
        if binding is None or binding.company_id != company_id:
            raise EmployeeNotFound(employee, company_id)
        return binding

    def find_employee(self, employee: str) -> EmployeeBinding | None:
        """Return the employee's binding to whichever company holds it, if any."""
        return self._binding(employee)

    def is_employee(self, company_id: int, employee: str) -> bool:
        binding = self._binding(employee)
        return binding is not None and binding.company_id == company_id

    def list_employees(self, company_id: int) -> list[EmployeeBinding]:
        """Bindings of ``company_id``, ordered by enrollment time then principal."""
        bindings = [
            value
            for key, value in self._host.storage.items(_NAMESPACE)
            if isinstance(key, tuple) and key[0] == "employee" and value.company_id == company_id
        ]
        return sorted(bindings, key=lambda b: (b.enrolled_at, b.employee))

    def company_count(self) -> int:
        return self._host.storage.get(_NAMESPACE, _COMPANY_COUNT) or 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _binding(self, employee: str) -> EmployeeBinding | None:
        return self._host.storage.get(_NAMESPACE, ("employee", employee))

    def _save_company(self, company: Company) -> None:
        self._host.storage.set(_NAMESPACE, ("company", company.id), company)
