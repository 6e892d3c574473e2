# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging

from zk_payroll.audit.report import AuditReport
from zk_payroll.audit.view_key import ViewKey, derive_view_key_id
from zk_payroll.commitment.store import CommitmentStore
from zk_payroll.config import AuditConfig
from zk_payroll.errors import (
    InsufficientScope,
    InvalidPeriod,
    InvalidScopeParameters,
    KeyExpired,
    KeyNotFound,
    NotKeyGranter,
    Unauthorized,
    WrongAuditor,
)
from zk_payroll.executor.executor import PaymentExecutor
from zk_payroll.host.environment import HostEnvironment
from zk_payroll.registry import PayrollRegistry
from zk_payroll.types import AuditScope

logger = logging.getLogger("zk_payroll.audit")

_KEYS = "audit_key"
_NAMESPACE = "audit"


class AuditModule:
    """
    Selective disclosure of payroll facts to auditors through view keys.

    A company admin issues a view key to an auditor with a scope and a
    lifetime. The auditor presents the key to check that a claimed salary
    opens a stored commitment, or to obtain aggregate totals. The salary
    itself is never returned, only whether the opening matches.

    Keys live in the host's temporary storage tier. Expiry is evaluated on
    every use against the host clock:

    - timestamp basis (default): valid while ``now < expires_at``.
    - sequence basis: valid while ``sequence <= expires_at``.

    When constructed with a registry and an executor, admin identity is
    checked against the stored company and aggregate reports carry live
    totals (``verified=True``).

    Example::

        audit = AuditModule(host, commitments, registry=registry, executor=executor)
        key = audit.generate_view_key(
            company_id, "GADMIN", "GAUDITOR", AuditScope.FULL_COMPANY, duration=86_400,
        )
        audit.verify_employee_commitment(key.id, "GAUDITOR", "GEMP", 5_000, blinding)
    """

    def __init__(
        self,
        host: HostEnvironment,
        commitments: CommitmentStore,
        registry: PayrollRegistry | None = None,
        executor: PaymentExecutor | None = None,
        config: AuditConfig | None = None,
    ) -> None:
        self._host = host
        self._commitments = commitments
        self._registry = registry
        self._executor = executor
        self._config = config or AuditConfig()

    # ------------------------------------------------------------------
    # View-key lifecycle
    # ------------------------------------------------------------------

    def generate_view_key(
        self,
        company_id: int,
        admin: str,
        auditor: str,
        scope: AuditScope,
        duration: int | None = None,
        employees: list[str] | None = None,
        period_start: int | None = None,
        period_end: int | None = None,
    ) -> ViewKey:
        """
        Issue a view key to ``auditor``.

        Args:
            company_id: The company whose payroll the key opens.
            admin: Issuing admin; must sign, and must be the company's
                stored admin when a registry is wired.
            auditor: Principal the key is issued to.
            scope: What the auditor may examine.
            duration: Lifetime in seconds, or in ledgers on the sequence
                basis. Defaults to ``AuditConfig.default_view_key_duration``.
            employees: Covered employees; required for EMPLOYEE_LIST only.
            period_start: Window start; required for TIME_RANGE only.
            period_end: Window end; required for TIME_RANGE only.

        Returns:
            The stored :class:`ViewKey`.

        Raises:
            InvalidScopeParameters: If ``auditor`` is empty or the scope
                parameters do not match ``scope``.
            Unauthorized: If ``admin`` has not signed or is not the admin.
            CompanyNotFound: If a registry is wired and the company is unknown.
            InvalidPeriod: If ``duration`` is not positive or exceeds the
                configured maximum, or the TIME_RANGE window is inverted.
        """
        if not auditor:
            raise InvalidScopeParameters(scope.name, "auditor must be a non-empty principal.")
        _check_scope_parameters(scope, employees, period_start, period_end)

        duration = self._config.default_view_key_duration if duration is None else duration
        if duration <= 0:
            raise InvalidPeriod(f"duration must be > 0; got {duration}.")
        max_duration = self._config.max_view_key_duration
        if max_duration is not None and duration > max_duration:
            raise InvalidPeriod(f"duration {duration} exceeds the maximum of {max_duration}.")

        with self._host.invoke("generate_view_key"):
            self._host.require_auth(admin)
            if self._registry is not None:
                company = self._registry.get_company(company_id)
                if company.admin != admin:
                    raise Unauthorized(admin, reason=f"not the admin of company {company_id}")

            nonce_key = ("nonce", company_id, auditor)
            nonce: int = self._host.storage.get(_NAMESPACE, nonce_key) or 0
            basis = self._config.expiry_basis
            start = self._host.sequence() if basis == "sequence" else self._host.now()

            key = ViewKey(
                id=derive_view_key_id(company_id, auditor, nonce),
                company_id=company_id,
                auditor=auditor,
                granted_by=admin,
                created_at=self._host.now(),
                expires_at=start + duration,
                scope=scope,
                nonce=nonce,
                expiry_basis=basis,
                employees=tuple(employees) if employees is not None else None,
                period_start=period_start,
                period_end=period_end,
            )
            self._host.storage.set(_NAMESPACE, nonce_key, nonce + 1)
            self._host.storage.set_temporary(_KEYS, key.id, key, key.expires_at, basis)
            logger.info(
                "view_key_issued",
                extra={
                    "company_id": company_id,
                    "auditor": auditor,
                    "scope": scope.name,
                    "expires_at": key.expires_at,
                    "expiry_basis": basis,
                },
            )
            return key

    def verify_access(self, key_id: str, auditor: str) -> bool:
        """True iff the key exists, belongs to ``auditor`` and has not expired."""
        key = self._lookup(key_id)
        if key is None or key.auditor != auditor:
            return False
        return key.is_active(self._host.now(), self._host.sequence())

    def revoke_view_key(self, admin: str, key_id: str) -> None:
        """
        Delete a view key before its natural expiry.

        Raises:
            Unauthorized: If ``admin`` has not signed.
            KeyNotFound: If the key does not exist.
            NotKeyGranter: If ``admin`` did not issue the key.
        """
        with self._host.invoke("revoke_view_key"):
            self._host.require_auth(admin)
            key = self._lookup(key_id)
            if key is None:
                raise KeyNotFound(key_id)
            if key.granted_by != admin:
                raise NotKeyGranter(key_id, admin)
            self._host.storage.remove_temporary(_KEYS, key_id)
            logger.info(
                "view_key_revoked",
                extra={"company_id": key.company_id, "auditor": key.auditor},
            )

    def get_view_key(self, key_id: str) -> ViewKey:
        key = self._lookup(key_id)
        if key is None:
            raise KeyNotFound(key_id)
        return key

    def list_view_keys(self, company_id: int, active_only: bool = False) -> list[ViewKey]:
        """Keys issued by ``company_id`` that are still stored, oldest first."""
        now, sequence = self._host.now(), self._host.sequence()
        keys = [
            entry.value
            for _, entry in self._host.storage.temporary_entries(_KEYS)
            if entry.value.company_id == company_id
            and (not active_only or entry.value.is_active(now, sequence))
        ]
        return sorted(keys, key=lambda k: (k.created_at, k.auditor, k.nonce))

    # ------------------------------------------------------------------
    # Audit operations
    # ------------------------------------------------------------------

    def verify_commitment_with_key(
        self,
        key_id: str,
        auditor: str,
        stored_commitment: bytes,
        claimed_amount: int,
        blinding: bytes,
        scope: AuditScope | None = None,
    ) -> bool:
        """
        Check that ``(claimed_amount, blinding)`` opens ``stored_commitment``.

        The effective scope is the narrower of the key's scope and
        ``scope``. Only the equality is returned.

        Raises:
            Unauthorized: If ``auditor`` has not signed.
            KeyNotFound: If the key does not exist.
            WrongAuditor: If the key was issued to someone else.
            KeyExpired: If the key has expired.
            InsufficientScope: If the effective scope is AGGREGATE_ONLY.
        """
        key = self._authorize_key(key_id, auditor)
        effective = AuditScope.narrowest(key.scope, scope)
        if not effective.reveals_individuals():
            raise InsufficientScope(key_id, effective.name, "per-employee verification")
        matches = self._commitments.opens(stored_commitment, claimed_amount, blinding)
        logger.info(
            "commitment_checked_with_key",
            extra={"company_id": key.company_id, "auditor": auditor, "matches": matches},
        )
        return matches

    def verify_employee_commitment(
        self,
        key_id: str,
        auditor: str,
        employee: str,
        claimed_amount: int,
        blinding: bytes,
    ) -> bool:
        """
        Check a claimed salary against the employee's stored commitment.

        Raises:
            Unauthorized: If ``auditor`` has not signed.
            KeyNotFound: If the key does not exist.
            WrongAuditor: If the key was issued to someone else.
            KeyExpired: If the key has expired.
            InsufficientScope: If the key does not cover ``employee``, or the
                commitment belongs to a different company.
            CommitmentNotFound: If the employee has no commitment.
        """
        key = self._authorize_key(key_id, auditor)
        if not key.covers_employee(employee):
            raise InsufficientScope(key_id, key.scope.name, f"employee '{employee}' not covered")
        record = self._commitments.get_commitment(employee)
        if record.company_id is not None and record.company_id != key.company_id:
            raise InsufficientScope(key_id, key.scope.name, "commitment belongs to another company")
        matches = self._commitments.opens(record.commitment, claimed_amount, blinding)
        logger.info(
            "employee_commitment_checked",
            extra={"company_id": key.company_id, "auditor": auditor, "matches": matches},
        )
        return matches

    def generate_aggregate_report(
        self,
        key_id: str,
        auditor: str,
        period_start: int,
        period_end: int,
    ) -> AuditReport:
        """
        Aggregate totals over ``[period_start, period_end]``.

        Every scope may request a report. TIME_RANGE keys are limited to
        their window and EMPLOYEE_LIST keys to their listed employees.

        Raises:
            Unauthorized: If ``auditor`` has not signed.
            KeyNotFound: If the key does not exist.
            WrongAuditor: If the key was issued to someone else.
            KeyExpired: If the key has expired.
            InvalidPeriod: If ``period_start > period_end``.
            InsufficientScope: If the window lies outside a TIME_RANGE key.
        """
        key = self._authorize_key(key_id, auditor)
        if period_start > period_end:
            raise InvalidPeriod(
                f"period_start {period_start} is after period_end {period_end}."
            )
        if not key.covers_period(period_start, period_end):
            raise InsufficientScope(key_id, key.scope.name, "period outside the granted range")

        if self._registry is None or self._executor is None:
            report = AuditReport(
                company_id=key.company_id,
                period_start=period_start,
                period_end=period_end,
                verified=False,
            )
        else:
            report = self._live_report(
                key, self._registry, self._executor, period_start, period_end
            )

        logger.info(
            "audit_report_generated",
            extra={
                "company_id": key.company_id,
                "auditor": auditor,
                "verified": report.verified,
            },
        )
        return report

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _lookup(self, key_id: str) -> ViewKey | None:
        entry = self._host.storage.get_temporary(_KEYS, key_id)
        return None if entry is None else entry.value

    def _authorize_key(self, key_id: str, auditor: str) -> ViewKey:
        self._host.require_auth(auditor)
        key = self._lookup(key_id)
        if key is None:
            raise KeyNotFound(key_id)
        if key.auditor != auditor:
            raise WrongAuditor(key_id, auditor)
        if not key.is_active(self._host.now(), self._host.sequence()):
            raise KeyExpired(key_id, key.expires_at)
        return key

    def _live_report(
        self,
        key: ViewKey,
        registry: PayrollRegistry,
        executor: PaymentExecutor,
        period_start: int,
        period_end: int,
    ) -> AuditReport:
        payments = executor.list_payments(
            key.company_id, since=period_start, until=period_end
        )
        if key.scope is AuditScope.EMPLOYEE_LIST and key.employees is not None:
            listed = set(key.employees)
            payments = [p for p in payments if p.employee in listed]
            total_employees = sum(
                1 for employee in listed if registry.is_employee(key.company_id, employee)
            )
        else:
            total_employees = registry.get_company(key.company_id).employee_count

        return AuditReport(
            company_id=key.company_id,
            total_employees=total_employees,
            total_paid=sum(p.amount for p in payments),
            payment_count=len(payments),
            period_start=period_start,
            period_end=period_end,
            verified=True,
        )


def _check_scope_parameters(
    scope: AuditScope,
    employees: list[str] | None,
    period_start: int | None,
    period_end: int | None,
) -> None:
    if scope is AuditScope.EMPLOYEE_LIST:
        if not employees:
            raise InvalidScopeParameters(scope.name, "a non-empty employees list is required.")
    elif employees is not None:
        raise InvalidScopeParameters(scope.name, "employees is only accepted for EMPLOYEE_LIST.")

    if scope is AuditScope.TIME_RANGE:
        if period_start is None or period_end is None:
            raise InvalidScopeParameters(scope.name, "period_start and period_end are required.")
        if period_start > period_end:
            raise InvalidPeriod(
                f"period_start {period_start} is after period_end {period_end}."
            )
    elif period_start is not None or period_end is not None:
        raise InvalidScopeParameters(scope.name, "period bounds are only accepted for TIME_RANGE.")
