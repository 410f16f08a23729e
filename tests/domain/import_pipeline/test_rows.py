from __future__ import annotations

import pytest

from outreach_import.domain.errors import SourceParseError
from outreach_import.domain.import_pipeline.rows import parse_rows
from tests.helpers.import_jobs import csv_bytes


def test_parse_rows_keys_cells_by_trimmed_header_label() -> None:
    content = b" Email , Institution \n alice@acme.com ,  Acme \n"

    parsed = parse_rows(content)

    assert parsed.header == ("Email", "Institution")
    assert parsed.rows == [{"Email": "alice@acme.com", "Institution": "Acme"}]
    assert len(parsed) == 1


def test_parse_rows_ignores_byte_order_mark() -> None:
    parsed = parse_rows(csv_bytes(["email"], [["a@x.com"]], bom=True))

    assert parsed.header == ("email",)
    assert parsed.rows[0]["email"] == "a@x.com"


def test_parse_rows_skips_blank_lines() -> None:
    content = b"email,name\na@x.com,A\n\n\nb@x.com,B\n"

    parsed = parse_rows(content)

    assert [row["email"] for row in parsed.rows] == ["a@x.com", "b@x.com"]


def test_parse_rows_pads_short_rows_and_drops_surplus_cells() -> None:
    content = b"email,name,notes\na@x.com\nb@x.com,B,n,extra,more\n"

    parsed = parse_rows(content)

    assert parsed.rows[0] == {"email": "a@x.com", "name": "", "notes": ""}
    assert parsed.rows[1] == {"email": "b@x.com", "name": "B", "notes": "n"}


def test_parse_rows_keeps_quoted_cells_with_separators() -> None:
    content = b'email,name\n"a@x.com; b@x.com","Acme, Inc."\n'

    parsed = parse_rows(content)

    assert parsed.rows[0] == {"email": "a@x.com; b@x.com", "name": "Acme, Inc."}


def test_parse_rows_returns_no_rows_for_empty_or_header_only_content() -> None:
    assert len(parse_rows(b"")) == 0
    assert len(parse_rows(b"  \n\n")) == 0

    header_only = parse_rows(b"email,institution\n")
    assert header_only.header == ("email", "institution")
    assert header_only.rows == []


def test_parse_rows_does_not_coerce_values() -> None:
    content = b"email,code,flag\na@x.com,007,NA\n"

    parsed = parse_rows(content)

    assert parsed.rows[0] == {"email": "a@x.com", "code": "007", "flag": "NA"}


def test_parse_rows_rejects_content_that_is_not_utf8() -> None:
    with pytest.raises(SourceParseError):
        parse_rows(b"email\n\xff\xfe\xfa@x.com\n")


def test_parse_rows_is_deterministic() -> None:
    content = csv_bytes(["email", "org"], [["a@x.com", "A"], ["b@x.com", "B"]])

    assert parse_rows(content) == parse_rows(content)


def test_parse_rows_keeps_blank_header_cells_blank() -> None:
    parsed = parse_rows(b",email,company\n0,a@x.com,Acme\n")

    assert parsed.header == ("", "email", "company")
    assert parsed.rows == [{"": "0", "email": "a@x.com", "company": "Acme"}]
