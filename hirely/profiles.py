"""Profiles keyed by the auth provider's subject id."""
from __future__ import annotations

from hirely.errors import ValidationError
from hirely.log import get_logger
from hirely.models import Profile, Role
from hirely.store import Store

log = get_logger(__name__)


def _display_name(full_name: str | None, email: str) -> str:
    if full_name and full_name.strip():
        return full_name.strip()
    local = (email or "").split("@")[0]
    return local or "User"


def ensure_profile(
    store: Store,
    uid: str,
    email: str,
    full_name: str | None = None,
    intended_role: str | Role = Role.CANDIDATE,
) -> Profile:
    """Existing profile for ``uid``, or a new one created on first sign-in."""
    if not uid:
        raise ValidationError("uid is required")
    existing = store.profiles.get(uid)
    if existing is not None:
        return existing

    try:
        role = Role(intended_role)
    except ValueError:
        raise ValidationError(f"Unknown role {intended_role!r}") from None
    profile = Profile(uid=uid, email=email or "", role=role, name=_display_name(full_name, email))
    result = store.profiles.create(profile)
    log.info("Created %s profile for %s (synced=%s)", role.value, uid, result.synced)
    return profile


def candidates(store: Store) -> list[Profile]:
    return [p for p in store.profiles.list() if p.role == Role.CANDIDATE]
