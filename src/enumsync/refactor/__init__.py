"""Hardcoded enum value scanner and rewriter."""

from enumsync.refactor.casts import CastInfo, CastTable, build_cast_table
from enumsync.refactor.keys import KeyNormalizationIssue, KeyNormalizationResult
from enumsync.refactor.ops import ApplyResult, ProposedChange, RefactorOps
from enumsync.refactor.scanner import EnumScanner, ScanIssue
from enumsync.refactor.suggestions import generate_suggestion

__all__ = [
    "ApplyResult",
    "CastInfo",
    "CastTable",
    "EnumScanner",
    "KeyNormalizationIssue",
    "KeyNormalizationResult",
    "ProposedChange",
    "RefactorOps",
    "ScanIssue",
    "build_cast_table",
    "generate_suggestion",
]
