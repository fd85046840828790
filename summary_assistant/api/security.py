"""Caller identity and capability checks for the HTTP handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional

from fastapi import Depends, Header, HTTPException, status


@dataclass(slots=True, frozen=True)
class Identity:
    user_id: int
    capabilities: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(slots=True, frozen=True)
class AccessDenied:
    error: str
    details: str


def validate_request(identity: Optional[Identity], capability: str) -> Optional[AccessDenied]:
    """Return ``None`` when access is allowed, otherwise the reason."""
    if identity is None:
        return AccessDenied("unauthorized", "Niet ingelogd")
    if capability not in identity.capabilities:
        return AccessDenied("forbidden", "Onvoldoende rechten")
    return None


def get_identity(
    x_user_id: Optional[str] = Header(default=None),
    x_user_capabilities: Optional[str] = Header(default=None),
) -> Optional[Identity]:
    if not x_user_id:
        return None
    try:
        user_id = int(x_user_id)
    except ValueError:
        return None
    capabilities = frozenset(
        item.strip() for item in (x_user_capabilities or "").split(",") if item.strip()
    )
    return Identity(user_id=user_id, capabilities=capabilities)


def require_capability(capability: str) -> Callable[..., Identity]:
    """Build a dependency that admits only callers holding ``capability``."""

    def dependency(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
        denied = validate_request(identity, capability)
        if denied is not None:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"error": denied.error, "details": denied.details},
            )
        return identity

    return dependency
