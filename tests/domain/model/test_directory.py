from __future__ import annotations

from datetime import timedelta
from uuid import uuid4

from outreach_import.domain.model import (
    FALLBACK_INSTITUTION_NAME,
    Institution,
    InstitutionType,
    Invite,
    InviteRole,
    InviteStatus,
)
from tests.helpers.import_jobs import FIXED_NOW


def test_placeholder_institution_defaults() -> None:
    institution = Institution.placeholder("  Acme Training  ", now=FIXED_NOW)

    assert institution.legal_name == "Acme Training"
    assert institution.institution_type is InstitutionType.OTHER
    assert institution.province == "Unknown"
    assert institution.physical_address == "Unknown"
    assert institution.created_at == FIXED_NOW
    millis = int(FIXED_NOW.timestamp() * 1000)
    assert institution.registration_number.startswith(f"IMP-{millis}-")


def test_placeholder_without_name_uses_fallback() -> None:
    assert Institution.placeholder(None, now=FIXED_NOW).legal_name == FALLBACK_INSTITUTION_NAME
    assert Institution.placeholder(" ", now=FIXED_NOW).legal_name == FALLBACK_INSTITUTION_NAME


def test_placeholder_registration_numbers_are_unique() -> None:
    numbers = {Institution.placeholder("A", now=FIXED_NOW).registration_number for _ in range(50)}

    assert len(numbers) == 50


def test_institution_answers_to_legal_or_trading_name() -> None:
    institution = Institution(
        legal_name="Acme Holdings (Pty) Ltd",
        trading_name="Acme",
        registration_number="R1",
    )

    assert institution.answers_to("ACME")
    assert institution.answers_to(" acme holdings (pty) ltd ")
    assert not institution.answers_to("Acme Holdings")


def test_issued_invite_defaults() -> None:
    institution_id = uuid4()

    invite = Invite.issue(
        email="a@x.com",
        institution_id=institution_id,
        now=FIXED_NOW,
        ttl=timedelta(days=7),
        invited_by="admin",
    )

    assert invite.role is InviteRole.INSTITUTION_ADMIN
    assert invite.status is InviteStatus.QUEUED
    assert invite.expires_at == FIXED_NOW + timedelta(days=7)
    assert invite.created_at == FIXED_NOW
    assert len(invite.token) >= 32
    assert "token" not in repr(invite)


def test_institution_match_keys_are_casefolded() -> None:
    institution = Institution(
        legal_name=" École Nord ",
        trading_name="STRAẞE Campus",
        registration_number="R2",
    )

    assert institution.legal_name_key == "école nord"
    assert institution.trading_name_key == "strasse campus"
    assert Institution.placeholder("Acme", now=FIXED_NOW).trading_name_key is None
