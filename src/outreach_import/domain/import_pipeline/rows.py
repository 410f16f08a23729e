"""Parse uploaded CSV content into rows keyed by header label."""

from __future__ import annotations

import io
import warnings
from dataclasses import dataclass, field

import pandas as pd
from pandas.errors import EmptyDataError, ParserWarning

from outreach_import.domain.errors import SourceParseError

type Row = dict[str, str]


@dataclass(frozen=True, slots=True)
class ParsedSource:
    """Header and data rows of one uploaded file, in file order."""

    header: tuple[str, ...] = ()
    rows: list[Row] = field(default_factory=list[Row])

    def __len__(self) -> int:
        return len(self.rows)


def _keep_leading_fields(bad_line: list[str]) -> list[str]:
    # pandas drops the surplus cells of over-long rows returned from here.
    return bad_line


def _header_label(label: object, position: int) -> str:
    text = str(label).strip()
    # pandas names blank header cells "Unnamed: <position>"; keep them blank.
    return "" if text == f"Unnamed: {position}" else text


def parse_rows(content: bytes) -> ParsedSource:
    """Parse CSV bytes: first line is the header, every later non-blank line a row.

    A UTF-8 byte-order mark is ignored, cells and labels are trimmed, short rows
    are padded with empty strings and long rows lose their surplus cells. The
    result depends on ``content`` only, so repeated parses of one upload agree.
    """

    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise SourceParseError(f"Source is not valid UTF-8: {exc}") from exc

    if not text.strip():
        return ParsedSource()

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ParserWarning)
            frame = pd.read_csv(
                io.StringIO(text),
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
                engine="python",
                on_bad_lines=_keep_leading_fields,
            )
    except EmptyDataError:
        return ParsedSource()
    except ValueError as exc:
        raise SourceParseError(f"Source is not parseable as CSV: {exc}") from exc

    frame = frame.fillna("")
    labels = [_header_label(label, position) for position, label in enumerate(frame.columns)]
    rows: list[Row] = [
        {label: str(value).strip() for label, value in zip(labels, values, strict=True)}
        for values in frame.itertuples(index=False, name=None)
    ]
    return ParsedSource(header=tuple(labels), rows=rows)
