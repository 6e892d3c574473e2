# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations


class ZkPayrollError(Exception):
    """
    Base class for all zk-payroll protocol errors.

    Attributes:
        code: Stable upper-snake identifier for the failure.
        message: Human-readable description.
        reverted: Set by the host transaction boundary when the failed call
            had already written state that was then discarded. Errors raised
            before the first write keep ``reverted=False``.
    """

    def __init__(self, message: str, code: str = "ZK_PAYROLL_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.reverted = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(ZkPayrollError):
    """Rejected before any state mutation."""


class IntegrityError(ZkPayrollError):
    """Integrity failure; the host transaction discards any prior writes."""


class NotFoundError(ZkPayrollError):
    """A referenced record does not exist."""


# ---------------------------------------------------------------------------
# Lookup failures
# ---------------------------------------------------------------------------


class CompanyNotFound(NotFoundError):
    """Raised when a company id has never been registered."""

    def __init__(self, company_id: int) -> None:
        super().__init__(
            f"Company {company_id} does not exist. "
            "Register it first with PayrollRegistry.register_company().",
            code="COMPANY_NOT_FOUND",
        )
        self.company_id = company_id


class EmployeeNotFound(NotFoundError):
    """Raised when an employee is not bound to the given company."""

    def __init__(self, employee: str, company_id: int | None = None) -> None:
        company_text = f" in company {company_id}" if company_id is not None else ""
        super().__init__(
            f"Employee '{employee}' is not enrolled{company_text}.",
            code="EMPLOYEE_NOT_FOUND",
        )
        self.employee = employee
        self.company_id = company_id


class CommitmentNotFound(NotFoundError):
    """Raised when no salary commitment is stored for an employee."""

    def __init__(self, employee: str) -> None:
        super().__init__(
            f"Commitment not found for employee '{employee}'.",
            code="COMMITMENT_NOT_FOUND",
        )
        self.employee = employee


class KeyNotFound(NotFoundError):
    """Raised when a view key id is unknown (never issued, or revoked)."""

    def __init__(self, key_id: str) -> None:
        super().__init__(f"View key '{key_id}' not found.", code="KEY_NOT_FOUND")
        self.key_id = key_id


class PaymentNotFound(NotFoundError):
    """Raised when no payment record exists for an employee and period."""

    def __init__(self, employee: str, period: int) -> None:
        super().__init__(
            f"Payment not found for employee '{employee}' in period {period}.",
            code="PAYMENT_NOT_FOUND",
        )
        self.employee = employee
        self.period = period


# ---------------------------------------------------------------------------
# Authorization and validation
# ---------------------------------------------------------------------------


class Unauthorized(ValidationError):
    """
    Raised when the authorization primitive fails for a principal.

    Attributes:
        principal: The principal whose signature was required.
    """

    def __init__(self, principal: str, reason: str | None = None) -> None:
        reason_text = f": {reason}" if reason else ""
        super().__init__(
            f"Principal '{principal}' has not authorized this call{reason_text}.",
            code="UNAUTHORIZED",
        )
        self.principal = principal


class NotKeyGranter(ValidationError):
    """Raised when a principal other than the granter tries to revoke a view key."""

    def __init__(self, key_id: str, admin: str) -> None:
        super().__init__(
            f"Principal '{admin}' did not grant view key '{key_id}' and cannot revoke it.",
            code="NOT_KEY_GRANTER",
        )
        self.key_id = key_id
        self.admin = admin


class WrongAuditor(ValidationError):
    """Raised when a view key is presented by a principal it was not issued to."""

    def __init__(self, key_id: str, auditor: str) -> None:
        super().__init__(
            f"View key '{key_id}' was not issued to auditor '{auditor}'.",
            code="WRONG_AUDITOR",
        )
        self.key_id = key_id
        self.auditor = auditor


class KeyExpired(ValidationError):
    """Raised when a view key is used after its expiry."""

    def __init__(self, key_id: str, expires_at: int) -> None:
        super().__init__(
            f"View key '{key_id}' expired at {expires_at}.",
            code="KEY_EXPIRED",
        )
        self.key_id = key_id
        self.expires_at = expires_at


class InsufficientScope(ValidationError):
    """
    Raised when a view key's scope does not cover the requested operation.

    Attributes:
        key_id: The view key presented.
        scope: Name of the effective scope that was evaluated.
    """

    def __init__(self, key_id: str, scope: str, detail: str | None = None) -> None:
        detail_text = f" ({detail})" if detail else ""
        super().__init__(
            f"View key '{key_id}' with scope {scope} cannot perform this operation{detail_text}.",
            code="INSUFFICIENT_SCOPE",
        )
        self.key_id = key_id
        self.scope = scope


class ArrayLengthMismatch(ValidationError):
    """Raised when the parallel arrays of a batch differ in length."""

    def __init__(self, lengths: dict[str, int]) -> None:
        shown = ", ".join(f"{name}={size}" for name, size in lengths.items())
        super().__init__(f"Array length mismatch: {shown}.", code="ARRAY_LENGTH_MISMATCH")
        self.lengths = dict(lengths)


class BatchTooLarge(ValidationError):
    """Raised when a batch exceeds the configured maximum size."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            f"Batch of {size} entries exceeds the maximum of {max_size}.",
            code="BATCH_TOO_LARGE",
        )
        self.size = size
        self.max_size = max_size


class InvalidAmount(ValidationError):
    """Raised when a payment or transfer amount is not positive."""

    def __init__(self, amount: int) -> None:
        super().__init__(f"Amount must be positive; got {amount}.", code="INVALID_AMOUNT")
        self.amount = amount


class InvalidPeriod(ValidationError):
    """Raised for an empty or inverted time window or a non-positive duration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_PERIOD")


class InvalidScopeParameters(ValidationError):
    """
    Raised when view-key parameters are missing or do not fit the scope.

    Attributes:
        scope: Name of the requested scope.
    """

    def __init__(self, scope: str, detail: str) -> None:
        super().__init__(
            f"Invalid parameters for a {scope} view key: {detail}",
            code="INVALID_SCOPE_PARAMETERS",
        )
        self.scope = scope


class InvalidCommitmentInput(ValidationError):
    """Raised when a salary or blinding factor cannot be committed to."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="INVALID_COMMITMENT_INPUT")


# ---------------------------------------------------------------------------
# Integrity failures
# ---------------------------------------------------------------------------


class CommitmentMismatch(IntegrityError):
    """Raised when the registry binding and the commitment store disagree."""

    def __init__(self, employee: str) -> None:
        super().__init__(
            f"Registry commitment for employee '{employee}' does not match the stored commitment.",
            code="COMMITMENT_MISMATCH",
        )
        self.employee = employee


class NullifierAlreadyUsed(IntegrityError):
    """Raised when a nullifier is presented a second time."""

    def __init__(self, nullifier: bytes) -> None:
        super().__init__(
            f"Nullifier already used: {nullifier.hex()[:16]}...",
            code="NULLIFIER_ALREADY_USED",
        )
        self.nullifier = nullifier


class AlreadyPaid(IntegrityError):
    """Raised when a payment record already exists for an employee and period."""

    def __init__(self, employee: str, period: int) -> None:
        super().__init__(
            f"Payment already made to '{employee}' for period {period}.",
            code="ALREADY_PAID",
        )
        self.employee = employee
        self.period = period


class InvalidProof(IntegrityError):
    """Raised when the proof verifier rejects a payment proof."""

    def __init__(self, employee: str, index: int | None = None) -> None:
        index_text = f" (batch entry {index})" if index is not None else ""
        super().__init__(
            f"Invalid payment proof for employee '{employee}'{index_text}.",
            code="INVALID_PROOF",
        )
        self.employee = employee
        self.index = index


class InsufficientBalance(IntegrityError):
    """Raised by the token ledger when a transfer exceeds the sender's balance."""

    def __init__(self, holder: str, requested: int, available: int) -> None:
        super().__init__(
            f"Balance of '{holder}' is {available} but {requested} was requested.",
            code="INSUFFICIENT_BALANCE",
        )
        self.holder = holder
        self.requested = requested
        self.available = available


# ---------------------------------------------------------------------------
# Lifecycle and configuration
# ---------------------------------------------------------------------------


class AlreadyInitialized(ZkPayrollError):
    """Raised when a write-once component is initialized a second time."""

    def __init__(self, component: str) -> None:
        super().__init__(f"{component} is already initialized.", code="ALREADY_INITIALIZED")
        self.component = component


class NotInitialized(ZkPayrollError):
    """Raised when a component is used before initialization."""

    def __init__(self, component: str) -> None:
        super().__init__(f"{component} is not initialized.", code="NOT_INITIALIZED")
        self.component = component


class EmployeeAlreadyEnrolled(ZkPayrollError):
    """Raised when an employee is already bound to a company."""

    def __init__(self, employee: str, company_id: int) -> None:
        super().__init__(
            f"Employee '{employee}' is already enrolled in company {company_id}.",
            code="EMPLOYEE_ALREADY_ENROLLED",
        )
        self.employee = employee
        self.company_id = company_id


class ConfigurationError(ZkPayrollError):
    """Raised when the protocol is wired or configured incorrectly."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
