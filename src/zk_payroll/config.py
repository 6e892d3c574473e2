# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, model_validator

from zk_payroll.types import ExpiryBasis

THIRTY_DAYS = 30 * 86_400


class ExecutorConfig(BaseModel, frozen=True):
    """
    Configuration for the PaymentExecutor.

    Attributes:
        max_batch_size: Largest number of entries accepted by a single
            batch call. Larger batches are rejected before any state is
            touched.
        emit_events: When True, every settled payment publishes a
            ``PayrollProcessed`` event for off-chain reconciliation.
    """

    max_batch_size: Annotated[int, Field(gt=0)] = 50
    emit_events: bool = True


class AuditConfig(BaseModel, frozen=True):
    """
    Configuration for the AuditModule.

    Attributes:
        expiry_basis: ``'timestamp'`` (default) measures view-key lifetime
            in clock seconds and treats ``expires_at`` as exclusive.
            ``'sequence'`` measures it in ledger sequence numbers and treats
            ``expires_at`` as the last valid ledger (inclusive).
        default_view_key_duration: Duration used when a caller does not pass
            one, in seconds or ledgers depending on ``expiry_basis``.
        max_view_key_duration: Upper bound on a requested duration. None
            disables the bound.
    """

    expiry_basis: ExpiryBasis = "timestamp"
    default_view_key_duration: Annotated[int, Field(gt=0)] = THIRTY_DAYS
    max_view_key_duration: Annotated[int, Field(gt=0)] | None = None

    @model_validator(mode="after")
    def _default_within_max(self) -> AuditConfig:
        if (
            self.max_view_key_duration is not None
            and self.default_view_key_duration > self.max_view_key_duration
        ):
            raise ValueError(
                "default_view_key_duration must not exceed max_view_key_duration."
            )
        return self


class HostConfig(BaseModel, frozen=True):
    """
    Configuration for the in-process host environment.

    Attributes:
        ledger_close_seconds: Interval used by :class:`SystemClock` to derive
            a ledger sequence number from wall-clock time.
        evict_on_commit: When True, expired entries in the temporary storage
            tier are swept after each successful outermost transaction.
    """

    ledger_close_seconds: Annotated[int, Field(gt=0)] = 5
    evict_on_commit: bool = False


class ProtocolConfig(BaseModel, frozen=True):
    """
    Top-level configuration for :class:`~zk_payroll.protocol.PayrollProtocol`.

    All fields are optional; sensible defaults are provided.

    Example::

        config = ProtocolConfig(
            executor=ExecutorConfig(max_batch_size=25),
            audit=AuditConfig(expiry_basis="sequence"),
        )
        protocol = PayrollProtocol(config=config)
    """

    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    host: HostConfig = Field(default_factory=HostConfig)
