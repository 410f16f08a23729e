"""Row normalization: candidate emails and an organization name per row."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

EMAIL_SHAPE: Final = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_TOKEN_SEPARATORS: Final = re.compile(r"[;,\s]+")
_TRAILING_PUNCTUATION: Final = ";,."


class ColumnRole(StrEnum):
    ORGANIZATION = "organization"
    EMAIL = "email"


@dataclass(frozen=True, slots=True)
class ColumnRule:
    """A role assigned to every header label containing one of ``fragments``."""

    role: ColumnRole
    fragments: tuple[str, ...]

    def matches(self, label: str) -> bool:
        lowered = label.casefold()
        return any(fragment in lowered for fragment in self.fragments)


# Ordered by priority. Emails are read from any cell containing "@", so the
# EMAIL rule only serves to flag labels that also look like organization columns.
COLUMN_RULES: Final[tuple[ColumnRule, ...]] = (
    ColumnRule(ColumnRole.ORGANIZATION, ("org", "company", "institution", "provider", "name")),
    ColumnRule(ColumnRole.EMAIL, ("mail",)),
)


@dataclass(frozen=True, slots=True)
class HeaderProfile:
    """Roles resolved once per header and reused for every row of a slice."""

    organization_labels: tuple[str, ...]
    ambiguous_labels: tuple[str, ...] = ()

    @classmethod
    def from_labels(
        cls,
        labels: Iterable[str],
        rules: tuple[ColumnRule, ...] = COLUMN_RULES,
    ) -> HeaderProfile:
        organization: list[str] = []
        ambiguous: list[str] = []
        for label in labels:
            roles = {rule.role for rule in rules if rule.matches(label)}
            if ColumnRole.ORGANIZATION in roles:
                organization.append(label)
                if ColumnRole.EMAIL in roles:
                    ambiguous.append(label)
        return cls(organization_labels=tuple(organization), ambiguous_labels=tuple(ambiguous))


@dataclass(frozen=True, slots=True)
class CandidateEmail:
    raw: str
    normalized: str


@dataclass(frozen=True, slots=True)
class NormalizedRow:
    row_number: int
    emails: tuple[CandidateEmail, ...]
    institution_name: str | None

    @property
    def normalized_emails(self) -> tuple[str, ...]:
        return tuple(candidate.normalized for candidate in self.emails)


def normalize_email(token: str) -> str | None:
    """Return the normalized form of ``token`` or ``None`` if it is not email-shaped."""

    candidate = token.strip().rstrip(_TRAILING_PUNCTUATION).lower()
    if EMAIL_SHAPE.match(candidate):
        return candidate
    return None


def extract_emails(values: Iterable[object]) -> tuple[CandidateEmail, ...]:
    found: dict[str, CandidateEmail] = {}
    for value in values:
        if not isinstance(value, str) or "@" not in value:
            continue
        for token in _TOKEN_SEPARATORS.split(value):
            normalized = normalize_email(token)
            if normalized is None or normalized in found:
                continue
            found[normalized] = CandidateEmail(
                raw=token.strip().rstrip(_TRAILING_PUNCTUATION), normalized=normalized
            )
    return tuple(found.values())


def organization_name(row: Mapping[str, object], profile: HeaderProfile) -> str | None:
    for label in profile.organization_labels:
        value = row.get(label)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def normalize_row(
    row: Mapping[str, object],
    row_number: int,
    profile: HeaderProfile | None = None,
) -> NormalizedRow:
    """Normalize one raw row. Never raises; a row without emails is still a row."""

    active_profile = profile or HeaderProfile.from_labels(row.keys())
    return NormalizedRow(
        row_number=row_number,
        emails=extract_emails(row.values()),
        institution_name=organization_name(row, active_profile),
    )
