"""Two-phase, resumable CSV import: VALIDATE classifies rows, IMPORT materializes them."""

from __future__ import annotations

from .context import AdvanceResult, SliceContext
from .materialization import ImportPhase
from .rows import ParsedSource, parse_rows
from .runner import PHASES_BY_ACTION, advance, coerce_action, run_to_completion
from .validation import ValidationPhase

__all__ = [
    "PHASES_BY_ACTION",
    "AdvanceResult",
    "ImportPhase",
    "ParsedSource",
    "SliceContext",
    "ValidationPhase",
    "advance",
    "coerce_action",
    "parse_rows",
    "run_to_completion",
]
