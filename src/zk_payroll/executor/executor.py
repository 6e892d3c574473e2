# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging

from zk_payroll.commitment.nullifier import NullifierRegistry
from zk_payroll.commitment.store import CommitmentStore
from zk_payroll.config import ExecutorConfig
from zk_payroll.crypto.commitment import recipient_hash
from zk_payroll.crypto.groth16 import Groth16Proof
from zk_payroll.errors import (
    AlreadyPaid,
    ArrayLengthMismatch,
    BatchTooLarge,
    CommitmentMismatch,
    InvalidAmount,
    InvalidPeriod,
    InvalidProof,
    NotInitialized,
    PaymentNotFound,
)
from zk_payroll.executor.types import PaymentAttempt, PaymentRecord
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.host.events import PAYROLL_PROCESSED
from zk_payroll.registry import Company, PayrollRegistry
from zk_payroll.token import TokenLedger
from zk_payroll.types import PaymentState
from zk_payroll.verifier import ProofVerifier

logger = logging.getLogger("zk_payroll.executor")

_NAMESPACE = "executor"


class PaymentExecutor:
    """
    Settles payroll batches against zero-knowledge payment proofs.

    Each entry is processed in a fixed order:

    1. Whole-batch structural checks (array lengths, batch size, positive
       amounts, initialized verifier, known company, admin signature).
       Nothing is written if any of them fails.
    2. Membership in the paying company, then the stored commitment,
       cross-checked against the registry binding.
    3. Proof verification with public inputs
       ``[commitment, nullifier, recipient_hash(employee)]``.
    4. Nullifier consumption.
    5. Payment record, running total and the registry's last-payment
       stamp, then the token transfer from the company treasury. State is
       written before the external call.
    6. ``PayrollProcessed`` event.

    The first failing entry aborts the batch; the host transaction discards
    everything earlier entries wrote.

    Example::

        executor = PaymentExecutor(host, registry, commitments, nullifiers, verifier, ledger)
        records = executor.execute_batch_payroll(
            company_id, ["GEMP"], [5_000], [proof], [nullifier], period=202601,
        )
    """

    def __init__(
        self,
        host: HostEnvironment,
        registry: PayrollRegistry,
        commitments: CommitmentStore,
        nullifiers: NullifierRegistry,
        verifier: ProofVerifier,
        token: TokenLedger,
        config: ExecutorConfig | None = None,
    ) -> None:
        self._host = host
        self._registry = registry
        self._commitments = commitments
        self._nullifiers = nullifiers
        self._verifier = verifier
        self._token = token
        self._config = config or ExecutorConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute_payment(
        self,
        company_id: int,
        employee: str,
        amount: int,
        proof: Groth16Proof,
        nullifier: bytes,
        period: int,
    ) -> PaymentRecord:
        """Settle a single payment. See :meth:`execute_batch_payroll`."""
        records = self.execute_batch_payroll(
            company_id, [employee], [amount], [proof], [nullifier], period
        )
        return records[0]

    def execute_batch_payroll(
        self,
        company_id: int,
        employees: list[str],
        amounts: list[int],
        proofs: list[Groth16Proof],
        nullifiers: list[bytes],
        period: int,
    ) -> list[PaymentRecord]:
        """
        Settle a batch of payments for one company and period.

        Args:
            company_id: The paying company; its treasury funds the batch.
            employees: Payees, one per entry.
            amounts: Positive amounts, parallel to ``employees``.
            proofs: Payment proofs, parallel to ``employees``.
            nullifiers: One-time tokens, parallel to ``employees``.
            period: Payroll period number shared by every entry.

        Returns:
            The :class:`PaymentRecord` of every entry, in batch order.

        Raises:
            ArrayLengthMismatch: If the parallel arrays differ in length.
            BatchTooLarge: If the batch exceeds ``max_batch_size``.
            InvalidAmount: If an amount is not positive.
            NotInitialized: If the proof verifier has no key.
            CompanyNotFound: If ``company_id`` was never registered.
            Unauthorized: If the company admin has not signed.
            EmployeeNotFound: If a payee is not enrolled in this company.
            CommitmentNotFound: If a payee has no stored commitment.
            CommitmentMismatch: If the registry binding and stored
                commitment disagree.
            InvalidProof: If a proof does not verify.
            NullifierAlreadyUsed: If a nullifier was consumed before.
            AlreadyPaid: If a payee was already paid for ``period``.
            InsufficientBalance: If the treasury cannot cover an entry.
        """
        with self._host.invoke("execute_batch_payroll"):
            company = self._check_batch(
                company_id, employees, amounts, proofs, nullifiers, period
            )
            logger.info(
                "payroll_batch_started",
                extra={"company_id": company_id, "period": period, "size": len(employees)},
            )

            records: list[PaymentRecord] = []
            for index, (employee, amount, proof, nullifier) in enumerate(
                zip(employees, amounts, proofs, nullifiers)
            ):
                attempt = PaymentAttempt(index, employee)
                try:
                    records.append(
                        self._settle(company, attempt, amount, proof, bytes(nullifier), period)
                    )
                except Exception as exc:
                    if not attempt.is_terminal:
                        attempt.advance(PaymentState.REJECTED)
                    logger.info(
                        "payment_rejected",
                        extra={
                            "company_id": company_id,
                            "employee": employee,
                            "index": index,
                            "error": type(exc).__name__,
                        },
                    )
                    raise

            logger.info(
                "payroll_batch_settled",
                extra={"company_id": company_id, "period": period, "size": len(records)},
            )
            return records

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_payment(self, employee: str, period: int) -> PaymentRecord:
        record: PaymentRecord | None = self._host.storage.get(
            _NAMESPACE, ("payment", employee, period)
        )
        if record is None:
            raise PaymentNotFound(employee, period)
        return record

    def is_paid(self, employee: str, period: int) -> bool:
        return self._host.storage.has(_NAMESPACE, ("payment", employee, period))

    def get_total_paid(self, company_id: int) -> int:
        return self._host.storage.get(_NAMESPACE, ("total_paid", company_id)) or 0

    def list_payments(
        self,
        company_id: int,
        since: int | None = None,
        until: int | None = None,
    ) -> list[PaymentRecord]:
        """
        Payment records of a company, oldest first.

        ``since`` and ``until`` bound the settlement timestamp inclusively.
        """
        results: list[PaymentRecord] = []
        for key, record in self._host.storage.items(_NAMESPACE):
            if not (isinstance(key, tuple) and key[0] == "payment"):
                continue
            if record.company_id != company_id:
                continue
            if since is not None and record.timestamp < since:
                continue
            if until is not None and record.timestamp > until:
                continue
            results.append(record)
        return sorted(results, key=lambda r: (r.timestamp, r.period, r.employee))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_batch(
        self,
        company_id: int,
        employees: list[str],
        amounts: list[int],
        proofs: list[Groth16Proof],
        nullifiers: list[bytes],
        period: int,
    ) -> Company:
        lengths = {
            "employees": len(employees),
            "amounts": len(amounts),
            "proofs": len(proofs),
            "nullifiers": len(nullifiers),
        }
        if len(set(lengths.values())) != 1:
            raise ArrayLengthMismatch(lengths)
        if len(employees) > self._config.max_batch_size:
            raise BatchTooLarge(len(employees), self._config.max_batch_size)
        for amount in amounts:
            if amount <= 0:
                raise InvalidAmount(amount)
        if period < 0:
            raise InvalidPeriod(f"period must be >= 0; got {period}.")
        if not self._verifier.is_initialized():
            raise NotInitialized("ProofVerifier")

        company = self._registry.get_company(company_id)
        self._host.require_auth(company.admin)
        return company

    def _settle(
        self,
        company: Company,
        attempt: PaymentAttempt,
        amount: int,
        proof: Groth16Proof,
        nullifier: bytes,
        period: int,
    ) -> PaymentRecord:
        employee = attempt.employee

        binding = self._registry.get_employee(company.id, employee)
        stored = self._commitments.get_commitment(employee)
        if binding.commitment != stored.commitment:
            raise CommitmentMismatch(employee)

        if not self._verifier.verify_payment_proof(
            proof, stored.commitment, nullifier, recipient_hash(employee)
        ):
            raise InvalidProof(employee, index=attempt.index)
        attempt.advance(PaymentState.VERIFIED)

        self._nullifiers.record_nullifier(nullifier)

        key = ("payment", employee, period)
        if self._host.storage.has(_NAMESPACE, key):
            raise AlreadyPaid(employee, period)
        record = PaymentRecord(
            company_id=company.id,
            employee=employee,
            amount=amount,
            proof_hash=nullifier,
            timestamp=self._host.now(),
            period=period,
        )
        self._host.storage.set(_NAMESPACE, key, record)
        self._host.storage.set(
            _NAMESPACE,
            ("total_paid", company.id),
            self.get_total_paid(company.id) + amount,
        )
        self._registry.record_payment(company.id, employee, record.timestamp)

        self._token.transfer(company.treasury, employee, amount)
        attempt.advance(PaymentState.SETTLED)

        if self._config.emit_events:
            self._host.events.publish(
                (PAYROLL_PROCESSED, company.id),
                (employee, amount, period),
            )
        logger.info(
            "payment_settled",
            extra={"company_id": company.id, "employee": employee, "period": period},
        )
        return record
