# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from enum import Enum, IntEnum
from typing import Annotated, Literal

from pydantic import Field

# Opaque 32-byte digest (commitments, nullifiers, recipient hashes, key ids).
Digest = Annotated[bytes, Field(min_length=32, max_length=32)]

# Serialized curve points: G1 is x ‖ y, G2 is x0 ‖ x1 ‖ y0 ‖ y1, 32 bytes each.
G1Point = Annotated[bytes, Field(min_length=64, max_length=64)]
G2Point = Annotated[bytes, Field(min_length=128, max_length=128)]

# An address-like identifier for any party that can authorize a call.
Principal = Annotated[str, Field(min_length=1)]

DIGEST_SIZE = 32
G1_SIZE = 64
G2_SIZE = 128

ExpiryBasis = Literal["timestamp", "sequence"]


class AuditScope(IntEnum):
    """
    What an auditor holding a view key may examine.

    Scopes are ordered broad to narrow: a larger value grants less.
    """

    FULL_COMPANY = 0
    TIME_RANGE = 1
    EMPLOYEE_LIST = 2
    AGGREGATE_ONLY = 3

    def reveals_individuals(self) -> bool:
        """True when the scope permits per-employee facts."""
        return self is not AuditScope.AGGREGATE_ONLY

    @staticmethod
    def narrowest(*scopes: AuditScope | None) -> AuditScope:
        """Return the most restrictive of the given scopes, ignoring None."""
        present = [scope for scope in scopes if scope is not None]
        if not present:
            raise ValueError("at least one scope is required.")
        return AuditScope(max(int(scope) for scope in present))


class PaymentState(str, Enum):
    """Lifecycle of a single payment attempt inside the executor."""

    PENDING = "pending"
    VERIFIED = "verified"
    SETTLED = "settled"
    REJECTED = "rejected"
