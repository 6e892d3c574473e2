# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
zk_payroll: privacy-preserving payroll settlement.

Employers commit to salaries with hiding commitments, pay employees against
zero-knowledge proofs that a payment matches the stored commitment, and
prevent double payment with one-time nullifiers. Auditors receive
time-bounded, scope-limited view keys instead of raw payroll data.

Quick start::

    from zk_payroll import (
        AuditScope, ManualClock, PayrollProtocol,
        derive_payment_nullifier, generate_blinding_factor,
    )

    protocol = PayrollProtocol(clock=ManualClock(timestamp=1_700_000_000))
    protocol.verifier.initialize_verifier(vk)

    company_id = protocol.registry.register_company("GADMIN", "GTREASURY")
    blinding = generate_blinding_factor()
    commitment = protocol.commitments.compute_commitment(5_000, blinding)
    protocol.registry.add_employee(company_id, "GEMP", commitment)
    protocol.token.mint("GTREASURY", 10_000)

    nullifier = derive_payment_nullifier(blinding, "GEMP", period=1)
    protocol.executor.execute_payment(company_id, "GEMP", 5_000, proof, nullifier, period=1)

    key = protocol.audit.generate_view_key(
        company_id, "GADMIN", "GAUDITOR", AuditScope.AGGREGATE_ONLY, duration=86_400,
    )
    report = protocol.audit.generate_aggregate_report(key.id, "GAUDITOR", 0, 2_000_000_000)
"""

from zk_payroll.audit import AuditModule, AuditReport, ViewKey
from zk_payroll.commitment import CommitmentStore, EmployeeCommitment, Nullifier, NullifierRegistry
from zk_payroll.config import AuditConfig, ExecutorConfig, HostConfig, ProtocolConfig
from zk_payroll.crypto import (
    BN254_SCALAR_FIELD,
    CommitmentScheme,
    Groth16Proof,
    PairingBackend,
    Sha256CommitmentScheme,
    StructuralPairingBackend,
    VerificationKey,
    derive_payment_nullifier,
    generate_blinding_factor,
    recipient_hash,
)
from zk_payroll.errors import (
    AlreadyInitialized,
    AlreadyPaid,
    ArrayLengthMismatch,
    BatchTooLarge,
    CommitmentMismatch,
    CommitmentNotFound,
    CompanyNotFound,
    ConfigurationError,
    EmployeeAlreadyEnrolled,
    EmployeeNotFound,
    InsufficientBalance,
    InsufficientScope,
    IntegrityError,
    InvalidAmount,
    InvalidCommitmentInput,
    InvalidPeriod,
    InvalidProof,
    InvalidScopeParameters,
    KeyExpired,
    KeyNotFound,
    NotFoundError,
    NotInitialized,
    NotKeyGranter,
    NullifierAlreadyUsed,
    PaymentNotFound,
    Unauthorized,
    ValidationError,
    WrongAuditor,
    ZkPayrollError,
)
from zk_payroll.executor import PaymentExecutor, PaymentRecord
from zk_payroll.host import (
    EventFilter,
    HostEnvironment,
    ManualClock,
    MemoryStorage,
    MockAuthenticator,
    PaymentProcessedEvent,
    SystemClock,
)
from zk_payroll.protocol import PayrollProtocol
from zk_payroll.registry import Company, EmployeeBinding, PayrollRegistry
from zk_payroll.token import MemoryTokenLedger, TokenLedger
from zk_payroll.types import AuditScope, PaymentState
from zk_payroll.verifier import ProofVerifier

__version__ = "0.1.0"

__all__ = [
    # Composition
    "PayrollProtocol",
    # Components
    "AuditModule",
    "CommitmentStore",
    "NullifierRegistry",
    "PaymentExecutor",
    "PayrollRegistry",
    "ProofVerifier",
    "MemoryTokenLedger",
    "TokenLedger",
    # Host
    "EventFilter",
    "HostEnvironment",
    "ManualClock",
    "MemoryStorage",
    "MockAuthenticator",
    "SystemClock",
    # Records
    "AuditReport",
    "Company",
    "EmployeeBinding",
    "EmployeeCommitment",
    "Nullifier",
    "PaymentProcessedEvent",
    "PaymentRecord",
    "ViewKey",
    # Crypto
    "BN254_SCALAR_FIELD",
    "CommitmentScheme",
    "Groth16Proof",
    "PairingBackend",
    "Sha256CommitmentScheme",
    "StructuralPairingBackend",
    "VerificationKey",
    "derive_payment_nullifier",
    "generate_blinding_factor",
    "recipient_hash",
    # Config
    "AuditConfig",
    "ExecutorConfig",
    "HostConfig",
    "ProtocolConfig",
    # Types
    "AuditScope",
    "PaymentState",
    # Errors
    "AlreadyInitialized",
    "AlreadyPaid",
    "ArrayLengthMismatch",
    "BatchTooLarge",
    "CommitmentMismatch",
    "CommitmentNotFound",
    "CompanyNotFound",
    "ConfigurationError",
    "EmployeeAlreadyEnrolled",
    "EmployeeNotFound",
    "InsufficientBalance",
    "InsufficientScope",
    "IntegrityError",
    "InvalidAmount",
    "InvalidCommitmentInput",
    "InvalidPeriod",
    "InvalidProof",
    "InvalidScopeParameters",
    "KeyExpired",
    "KeyNotFound",
    "NotFoundError",
    "NotInitialized",
    "NotKeyGranter",
    "NullifierAlreadyUsed",
    "PaymentNotFound",
    "Unauthorized",
    "ValidationError",
    "WrongAuditor",
    "ZkPayrollError",
    "__version__",
]
