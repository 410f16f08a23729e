"""Institutions and invitations the import materializes."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from outreach_import.domain.model.base import Entity, utcnow
from outreach_import.domain.model.enums import InstitutionType, InviteRole, InviteStatus

if TYPE_CHECKING:
    from datetime import datetime, timedelta
    from uuid import UUID

FALLBACK_INSTITUTION_NAME = "Imported Institution"
UNKNOWN = "Unknown"


def placeholder_registration_number(now: datetime) -> str:
    """Registration identifier for institutions created without one."""
    return f"IMP-{int(now.timestamp() * 1000)}-{secrets.token_hex(3)}"


def normalize_name(name: str) -> str:
    return name.strip().casefold()


@dataclass(eq=False, kw_only=True)
class Institution(Entity):
    legal_name: str
    registration_number: str
    trading_name: str | None = None
    institution_type: InstitutionType = InstitutionType.OTHER
    province: str = UNKNOWN
    physical_address: str = UNKNOWN
    created_at: datetime = field(default_factory=utcnow)
    legal_name_key: str = field(init=False, default="", repr=False)
    trading_name_key: str | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        # Match keys are folded here; SQL lower() is ASCII-only on SQLite.
        self.legal_name_key = normalize_name(self.legal_name)
        self.trading_name_key = normalize_name(self.trading_name) if self.trading_name else None

    @classmethod
    def placeholder(cls, name: str | None, *, now: datetime) -> Institution:
        """Create an institution for an unmatched name from an imported row."""
        return cls(
            legal_name=(name or "").strip() or FALLBACK_INSTITUTION_NAME,
            registration_number=placeholder_registration_number(now),
            created_at=now,
        )

    def answers_to(self, name: str) -> bool:
        """Case-insensitive exact match on the legal or trading name."""
        wanted = normalize_name(name)
        names = (self.legal_name, self.trading_name)
        return any(candidate and normalize_name(candidate) == wanted for candidate in names)


@dataclass(eq=False, kw_only=True)
class Invite(Entity):
    email: str
    institution_id: UUID
    expires_at: datetime
    role: InviteRole = InviteRole.INSTITUTION_ADMIN
    status: InviteStatus = InviteStatus.QUEUED
    token: str = field(default_factory=lambda: secrets.token_urlsafe(32), repr=False)
    invited_by: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @classmethod
    def issue(
        cls,
        *,
        email: str,
        institution_id: UUID,
        now: datetime,
        ttl: timedelta,
        role: InviteRole = InviteRole.INSTITUTION_ADMIN,
        invited_by: str | None = None,
    ) -> Invite:
        return cls(
            email=email,
            institution_id=institution_id,
            role=role,
            invited_by=invited_by,
            expires_at=now + ttl,
            created_at=now,
        )
