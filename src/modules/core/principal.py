"""The authenticated caller, passed explicitly into every service call."""

from __future__ import annotations

from dataclasses import dataclass

from rest_framework.request import Request


@dataclass(frozen=True)
class Principal:
    """Identity of the caller: local user id plus the e-mail used as actor label."""

    user_id: int
    email: str

    @property
    def actor(self) -> str:
        """Label stored in status history entries."""
        return self.email or f"user:{self.user_id}"


def principal_from_request(request: Request) -> Principal:
    """Build a ``Principal`` from an authenticated DRF request.

    Token issuance and validation happen upstream (SimpleJWT); this only
    reads the resolved user.
    """
    user = request.user
    return Principal(user_id=user.pk, email=getattr(user, "email", "") or "")
