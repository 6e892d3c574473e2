# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from typing import Annotated

from pydantic import BaseModel, Field

from zk_payroll.crypto.commitment import CommitmentScheme, Sha256CommitmentScheme
from zk_payroll.errors import CommitmentNotFound
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.types import Digest, Principal

logger = logging.getLogger("zk_payroll.commitment")

_NAMESPACE = "commitment"


class EmployeeCommitment(BaseModel, frozen=True):
    """
    The active salary commitment for one employee.

    Attributes:
        employee: The employee's principal.
        company_id: Owning company when enrolled through the registry;
            None for commitments stored directly.
        commitment: Opaque 32-byte digest. Never interpreted, only compared
            or handed to the proof verifier.
        version: 1 on creation, incremented by every update.
        created_at: Host timestamp of the creating write.
        updated_at: Host timestamp of the latest write.
    """

    employee: Principal
    company_id: int | None = None
    commitment: Digest
    version: Annotated[int, Field(ge=1)] = 1
    created_at: int
    updated_at: int


class CommitmentStore:
    """
    Owns per-employee salary commitments and their version counter.

    The store performs no authorization of its own; it is reached through
    the registry, whose entry points require the company admin's signature.

    Example::

        store = CommitmentStore(host)
        record = store.store_commitment("GEMP", digest)
        assert record.version == 1
        store.update_commitment("GEMP", new_digest).version  # 2
    """

    def __init__(
        self,
        host: HostEnvironment,
        scheme: CommitmentScheme | None = None,
    ) -> None:
        self._host = host
        self._scheme = scheme or Sha256CommitmentScheme()

    @property
    def scheme(self) -> CommitmentScheme:
        return self._scheme

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def store_commitment(
        self,
        employee: str,
        commitment: bytes,
        company_id: int | None = None,
    ) -> EmployeeCommitment:
        """
        Create the employee's commitment at version 1.

        An existing record is overwritten and its version reset; use
        :meth:`update_commitment` to keep the version history.
        """
        with self._host.invoke("store_commitment"):
            now = self._host.now()
            record = EmployeeCommitment(
                employee=employee,
                company_id=company_id,
                commitment=commitment,
                version=1,
                created_at=now,
                updated_at=now,
            )
            self._host.storage.set(_NAMESPACE, employee, record)
            logger.info(
                "commitment_stored",
                extra={"employee": employee, "company_id": company_id},
            )
            return record

    def update_commitment(self, employee: str, new_commitment: bytes) -> EmployeeCommitment:
        """
        Replace the employee's digest and increment its version.

        Raises:
            CommitmentNotFound: If the employee has no commitment.
        """
        with self._host.invoke("update_commitment"):
            return self._apply_update(employee, new_commitment)

    def batch_update_commitments(
        self, updates: list[tuple[str, bytes]]
    ) -> list[EmployeeCommitment]:
        """
        Apply ``(employee, new_commitment)`` updates in list order.

        Updates are written in place. If any employee has no commitment the
        call raises and the host transaction discards every earlier update
        of the batch.

        Raises:
            CommitmentNotFound: For the first employee without a record.
        """
        with self._host.invoke("batch_update_commitments"):
            records = [self._apply_update(employee, digest) for employee, digest in updates]
            logger.info("commitments_batch_updated", extra={"count": len(records)})
            return records

    def remove_commitment(self, employee: str) -> bool:
        """Hard-delete the employee's commitment. Returns False if none existed."""
        with self._host.invoke("remove_commitment"):
            removed = self._host.storage.remove(_NAMESPACE, employee)
            if removed:
                logger.info("commitment_removed", extra={"employee": employee})
            return removed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_commitment(self, employee: str) -> EmployeeCommitment:
        record: EmployeeCommitment | None = self._host.storage.get(_NAMESPACE, employee)
        if record is None:
            raise CommitmentNotFound(employee)
        return record

    def has_commitment(self, employee: str) -> bool:
        return self._host.storage.has(_NAMESPACE, employee)

    def compute_commitment(self, salary: int, blinding: bytes) -> bytes:
        return self._scheme.commit(salary, blinding)

    def verify_commitment(self, employee: str, claimed_salary: int, blinding: bytes) -> bool:
        """
        Check an opening of the employee's stored commitment.

        Raises:
            CommitmentNotFound: If the employee has no commitment.
        """
        stored = self.get_commitment(employee)
        return self.opens(stored.commitment, claimed_salary, blinding)

    def opens(self, commitment: bytes, claimed_salary: int, blinding: bytes) -> bool:
        """
        Whether ``(claimed_salary, blinding)`` is an opening of ``commitment``.

        A salary outside the range the scheme encodes opens nothing, so it
        yields ``False`` rather than an error.
        """
        if not self._scheme.can_encode(claimed_salary):
            return False
        return self._scheme.commit(claimed_salary, blinding) == bytes(commitment)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply_update(self, employee: str, new_commitment: bytes) -> EmployeeCommitment:
        existing = self.get_commitment(employee)
        updated = EmployeeCommitment.model_validate(
            {
                **existing.model_dump(),
                "commitment": new_commitment,
                "version": existing.version + 1,
                "updated_at": self._host.now(),
            }
        )
        self._host.storage.set(_NAMESPACE, employee, updated)
        logger.debug(
            "commitment_updated",
            extra={"employee": employee, "version": updated.version},
        )
        return updated
