# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from zk_payroll.executor.executor import PaymentExecutor
from zk_payroll.executor.types import PaymentAttempt, PaymentRecord

__all__ = ["PaymentAttempt", "PaymentExecutor", "PaymentRecord"]
