from __future__ import annotations

import pytest

from outreach_import.domain.import_pipeline.normalization import (
    COLUMN_RULES,
    ColumnRole,
    ColumnRule,
    HeaderProfile,
    extract_emails,
    normalize_email,
    normalize_row,
)
from outreach_import.domain.import_pipeline.rows import parse_rows


@pytest.mark.parametrize(
    ("token", "expected"),
    [
        ("Alice@Acme.COM", "alice@acme.com"),
        ("  bob@acme.com.  ", "bob@acme.com"),
        ("carol@acme.org;,", "carol@acme.org"),
        ("not-an-email", None),
        ("missing@tld", None),
        ("@acme.com", None),
        ("two@@acme.com", None),
    ],
)
def test_normalize_email(token: str, expected: str | None) -> None:
    assert normalize_email(token) == expected


def test_extract_emails_splits_cells_on_separators_and_whitespace() -> None:
    emails = extract_emails(["a@x.com; b@x.com,c@x.com  d@x.com"])

    assert [email.normalized for email in emails] == ["a@x.com", "b@x.com", "c@x.com", "d@x.com"]


def test_extract_emails_deduplicates_across_columns_in_first_seen_order() -> None:
    emails = extract_emails(["B@x.com", "a@x.com", "b@X.com"])

    assert [email.normalized for email in emails] == ["b@x.com", "a@x.com"]
    assert emails[0].raw == "B@x.com"


def test_extract_emails_reads_every_column_containing_an_at_sign() -> None:
    row = {"Contact": "alice@acme.com", "Notes": "cc boss@acme.com please", "Phone": "555"}

    emails = extract_emails(row.values())

    assert [email.normalized for email in emails] == ["alice@acme.com", "boss@acme.com"]


def test_extract_emails_ignores_cells_without_at_sign() -> None:
    assert extract_emails(["Acme Inc.", "", "x.com"]) == ()


def test_header_profile_orders_organization_labels_by_header_position() -> None:
    profile = HeaderProfile.from_labels(["Email", "Provider Name", "Company", "City"])

    assert profile.organization_labels == ("Provider Name", "Company")
    assert profile.ambiguous_labels == ()


def test_header_profile_flags_labels_matching_both_roles() -> None:
    profile = HeaderProfile.from_labels(["Email Name", "Org"])

    assert profile.organization_labels == ("Email Name", "Org")
    assert profile.ambiguous_labels == ("Email Name",)


def test_header_profile_accepts_custom_rules() -> None:
    rules = (ColumnRule(ColumnRole.ORGANIZATION, ("school",)), *COLUMN_RULES[1:])

    profile = HeaderProfile.from_labels(["School", "Company"], rules)

    assert profile.organization_labels == ("School",)


def test_normalize_row_uses_first_non_empty_organization_column() -> None:
    row = {"email": "a@x.com", "Organisation": " ", "Company": " Acme ", "Institution": "Other"}

    normalized = normalize_row(row, 7)

    assert normalized.row_number == 7
    assert normalized.institution_name == "Acme"
    assert normalized.normalized_emails == ("a@x.com",)


def test_normalize_row_without_emails_still_yields_a_row() -> None:
    normalized = normalize_row({"email": "n/a", "institution": "Acme"}, 3)

    assert normalized.emails == ()
    assert normalized.institution_name == "Acme"


def test_normalize_row_without_organization_column() -> None:
    normalized = normalize_row({"email": "a@x.com"}, 1)

    assert normalized.institution_name is None


def test_unlabeled_index_column_is_not_an_organization_column() -> None:
    parsed = parse_rows(b",email,company\n0,a@x.com,Acme\n1,b@x.com,Beta\n")
    profile = HeaderProfile.from_labels(parsed.header)

    names = [
        normalize_row(row, number, profile).institution_name
        for number, row in enumerate(parsed.rows, 1)
    ]

    assert profile.organization_labels == ("company",)
    assert names == ["Acme", "Beta"]
