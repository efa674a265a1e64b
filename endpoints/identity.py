from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from fastapi import HTTPException, Request

Role = Literal["employee", "manager", "owner"]
ROLES: tuple[Role, ...] = ("employee", "manager", "owner")

USER_ID_HEADER = "X-User-Id"
USER_EMAIL_HEADER = "X-User-Email"
USER_ROLE_HEADER = "X-User-Role"


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str | None
    role: Role

    @property
    def can_audit(self) -> bool:
        return self.role in ("manager", "owner")


class IdentityProvider(Protocol):
    def resolve(self, request: Request) -> Identity | None:
        ...


class HeaderIdentityProvider(IdentityProvider):
    """
    Reads identity from headers set by a trusted auth proxy in front of the app.
    Requests without a user id are anonymous employees.
    """

    def resolve(self, request: Request) -> Identity | None:
        user_id = (request.headers.get(USER_ID_HEADER) or "").strip()
        if not user_id:
            return None
        role = (request.headers.get(USER_ROLE_HEADER) or "employee").strip().lower()
        if role not in ROLES:
            role = "employee"
        email = (request.headers.get(USER_EMAIL_HEADER) or "").strip() or None
        return Identity(user_id=user_id, email=email, role=role)  # type: ignore[arg-type]


def current_identity(request: Request) -> Identity | None:
    provider: IdentityProvider = request.app.state.identity_provider
    return provider.resolve(request)


def require_auditor(request: Request) -> Identity:
    identity = current_identity(request)
    if identity is None or not identity.can_audit:
        raise HTTPException(status_code=403, detail="Manager or owner role required")
    return identity
