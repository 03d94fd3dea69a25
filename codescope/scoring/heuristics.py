"""
Deterministic quality sub-scores on a 0-10 scale.

code_style, naming and best_practices: higher is better.
complexity: higher means MORE complex (1 = simple, 10 = very complex).
"""

from __future__ import annotations

from collections import Counter
from statistics import mean
from typing import Iterable, Sequence

from ..constants import (
    ComplexityBands,
    PracticeDeductions,
    ScoreDefaults,
    ScoreWeights,
    StyleDeductions,
)
from ..dialects import DialectRules
from ..lexing.source import LexedSource
from ..metrics.issues import ACCEPTED_SHORT_NAMES, DeclaredName
from ..models.metrics import CodeIssue, FileMetrics


def clamp_score(value: float, low: float = 0.0, high: float = ScoreWeights.SCALE_MAX) -> float:
    return round(max(low, min(high, value)), 1)


def _band_points(value: float, bands: Sequence[tuple[int, int]], maximum: int) -> int:
    for upper, points in bands:
        if value <= upper:
            return points
    return maximum


def count_trailing_whitespace(source: LexedSource) -> int:
    return sum(1 for line in source.raw_lines if line and line != line.rstrip())


def has_mixed_indentation(source: LexedSource) -> bool:
    """True when some lines indent with tabs and others with spaces."""
    tabs = spaces = False
    for line in source.raw_lines:
        if line.startswith('\t'):
            tabs = True
        elif line.startswith(' ') and line.strip():
            spaces = True
        if tabs and spaces:
            return True
    return False


def is_short_name(name: str) -> bool:
    return len(name) == 1 and name not in ACCEPTED_SHORT_NAMES


def code_style_score(source: LexedSource, metrics: FileMetrics) -> float:
    lines = max(1, metrics.line_count)
    score = ScoreWeights.SCALE_MAX
    score -= min(StyleDeductions.LONG_LINE_CAP,
                 metrics.long_line_count / lines * StyleDeductions.LONG_LINE_FACTOR)
    score -= min(StyleDeductions.TRAILING_WHITESPACE_CAP,
                 count_trailing_whitespace(source) / lines * StyleDeductions.TRAILING_WHITESPACE_FACTOR)
    if has_mixed_indentation(source):
        score -= StyleDeductions.MIXED_INDENTATION
    return clamp_score(score)


def naming_conformance(names: Iterable[DeclaredName], rules: DialectRules) -> tuple[int, int]:
    """(conforming, total) declared names for the dialect's convention."""
    conforming = total = 0
    for declared in names:
        pattern = rules.function_name_pattern if declared.kind == 'function' else rules.variable_name_pattern
        total += 1
        if pattern.match(declared.name):
            conforming += 1
    return conforming, total


def naming_score(names: Sequence[DeclaredName], rules: DialectRules) -> float:
    """Conformance ratio scaled to 10, minus short-name penalties.

    Files that declare nothing score ScoreDefaults.NEUTRAL.
    """
    conforming, total = naming_conformance(names, rules)
    if total == 0:
        return ScoreDefaults.NEUTRAL
    short = sum(1 for declared in names if is_short_name(declared.name))
    score = ScoreWeights.SCALE_MAX * conforming / total
    score -= min(StyleDeductions.SHORT_NAME_CAP, short * StyleDeductions.SHORT_NAME)
    return clamp_score(score)


def average_cyclomatic(metrics: FileMetrics) -> float:
    if metrics.functions:
        return mean(unit.cyclomatic_complexity for unit in metrics.functions)
    return float(metrics.cyclomatic_complexity)


def complexity_score(metrics: FileMetrics) -> float:
    """1 (simple) to 10 (very complex)."""
    length_points = _band_points(metrics.average_function_length,
                                 ComplexityBands.FUNCTION_LENGTH, ComplexityBands.FUNCTION_LENGTH_MAX)
    nesting_points = _band_points(metrics.max_nesting_depth,
                                  ComplexityBands.NESTING, ComplexityBands.NESTING_MAX)
    score = round((length_points + nesting_points) / 2)
    cyclomatic = average_cyclomatic(metrics)
    for lower, extra in ComplexityBands.CYCLOMATIC:
        if cyclomatic > lower:
            score += extra
            break
    return clamp_score(score, low=1.0)


def best_practices_score(issues: Iterable[CodeIssue]) -> float:
    counts = Counter(issue.rule for issue in issues)
    score = ScoreWeights.SCALE_MAX
    score -= min(PracticeDeductions.DEBUG_OUTPUT_CAP, counts['debug-output'] * PracticeDeductions.DEBUG_OUTPUT)
    score -= min(PracticeDeductions.TODO_CAP, counts['todo-comment'] * PracticeDeductions.TODO)
    score -= min(PracticeDeductions.LEGACY_DECLARATION_CAP,
                 counts['legacy-declaration'] * PracticeDeductions.LEGACY_DECLARATION)
    if counts['low-comment-ratio']:
        score -= PracticeDeductions.LOW_COMMENTS
    score -= min(PracticeDeductions.LONG_FUNCTION_CAP, counts['long-function'] * PracticeDeductions.LONG_FUNCTION)
    return clamp_score(score)
