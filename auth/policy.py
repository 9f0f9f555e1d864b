"""
auth/policy.py -- Ownership-based authorization for individual records.

A record is accessible to its owner and to any admin. Nothing else is
consulted. Handlers call authorize_owned() after loading the record so that
the existence check always comes first: a missing record is 404 for every
caller, an existing record owned by someone else is 403 for non-admins.

Layer rule: no imports from api/ or tasks/. Any object with an owner_id
attribute satisfies the Owned protocol.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from auth.errors import AuthorizationError, NotFoundError
from auth.models import IdentityClaim


class Owned(Protocol):
    owner_id: str


OwnedT = TypeVar("OwnedT", bound=Owned)


def can_access(identity: IdentityClaim, owner_id: str) -> bool:
    """Return True iff identity is an admin or owns the resource."""
    return identity.is_admin or identity.subject_id == owner_id


def authorize_owned(identity: IdentityClaim, resource: OwnedT | None, kind: str = "Resource") -> OwnedT:
    """Return resource if identity may act on it.

    Raises NotFoundError when resource is None (regardless of role) and
    AuthorizationError when it exists but is neither owned nor admin-accessible.
    """
    if resource is None:
        raise NotFoundError(f"{kind} not found.")
    if not can_access(identity, resource.owner_id):
        raise AuthorizationError(f"You do not have access to this {kind.lower()}.")
    return resource
