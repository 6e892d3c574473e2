# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from zk_payroll.errors import Unauthorized

logger = logging.getLogger("zk_payroll.host.auth")


class Authenticator(ABC):
    """
    The host's authorization primitive.

    ``require_auth(principal)`` returns normally when the principal has
    signed the current call and raises
    :class:`~zk_payroll.errors.Unauthorized` otherwise. Credentials are never
    carried in-band; the protocol only ever names the principal whose
    signature it needs.
    """

    @abstractmethod
    def require_auth(self, principal: str) -> None:
        ...


class MockAuthenticator(Authenticator):
    """
    Test double for the authorization primitive.

    With ``authorize_all=True`` every principal is treated as having signed.
    Otherwise only principals passed to :meth:`authorize` are accepted.
    Every successful check is recorded so tests can assert on who was
    asked to sign.

    Example::

        auth = MockAuthenticator(authorize_all=False)
        auth.authorize("GADMIN")
        auth.require_auth("GADMIN")      # ok
        auth.require_auth("GMALLORY")    # raises Unauthorized
        assert auth.auths() == ["GADMIN"]
    """

    def __init__(self, authorize_all: bool = True) -> None:
        self._authorize_all = authorize_all
        self._authorized: set[str] = set()
        self._auths: list[str] = []

    def require_auth(self, principal: str) -> None:
        if not principal:
            raise Unauthorized(principal, reason="empty principal")
        if not self._authorize_all and principal not in self._authorized:
            logger.debug("auth_denied", extra={"principal": principal})
            raise Unauthorized(principal)
        self._auths.append(principal)

    def authorize(self, *principals: str) -> None:
        """Treat ``principals`` as having signed subsequent calls."""
        self._authorized.update(principals)

    def deauthorize(self, *principals: str) -> None:
        """Withdraw previously granted signatures."""
        for principal in principals:
            self._authorized.discard(principal)

    def set_authorize_all(self, enabled: bool) -> None:
        self._authorize_all = enabled

    def auths(self) -> list[str]:
        """Principals whose authorization was checked successfully, in order."""
        return list(self._auths)

    def clear(self) -> None:
        """Forget recorded auth checks (signatures are kept)."""
        self._auths.clear()
