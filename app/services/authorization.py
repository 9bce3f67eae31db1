from pydantic import BaseModel
from typing import Literal, Optional, Union
import logging

from app import config
from app.errors import AuthorizationDenied
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)


class Allowed(BaseModel):
    decision: Literal["allowed"] = "allowed"


class Denied(BaseModel):
    decision: Literal["denied"] = "denied"
    reason: str


Decision = Union[Allowed, Denied]


def is_owner(identity: Optional[Identity]) -> bool:
    super_admin = config.super_admin_user_id()
    return bool(identity and super_admin and identity.id == super_admin)


def authorize_profile_change(identity: Identity, record: dict) -> Decision:
    """Edit/delete of a profile: its owning user or the super-admin."""
    if is_owner(identity):
        return Allowed()
    if record.get("user_id") and record.get("user_id") == identity.id:
        return Allowed()
    return Denied(reason="Permission denied: you can only edit or delete your own profile")


def require(decision: Decision):
    if isinstance(decision, Denied):
        logger.warning(f"Refused action: {decision.reason}")
        raise AuthorizationDenied(decision.reason)


def apply_profile_write_policy(identity: Identity, submitted: dict, existing: Optional[dict] = None) -> dict:
    """Strip privileged fields from a profile write.

    The super-admin may set role, is_active and user_id freely. Anyone else
    always writes role=member with themselves as owning user, and cannot flip
    is_active (new profiles start active).
    """
    data = dict(submitted)

    if is_owner(identity):
        if not data.get("role"):
            data["role"] = existing.get("role", "member") if existing else "member"
        if data.get("is_active") is None:
            data["is_active"] = existing.get("is_active", True) if existing else True
        if not data.get("user_id"):
            data["user_id"] = existing.get("user_id") if existing else identity.id
        return data

    data["role"] = "member"
    data["user_id"] = identity.id
    data["is_active"] = existing.get("is_active", True) if existing else True
    return data
