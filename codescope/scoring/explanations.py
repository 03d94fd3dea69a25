"""
Banded explanation text for the quality sub-scores.
"""

from __future__ import annotations

from ..constants import ScoreDefaults, ScoreWeights
from ..dialects import DialectRules
from ..models.metrics import FileMetrics


def score_level(value: float) -> str:
    """Band label for a 0-10 score where higher is better."""
    if value >= ScoreDefaults.EXCELLENT:
        return 'excellent'
    if value >= ScoreDefaults.GOOD:
        return 'good'
    if value >= ScoreDefaults.FAIR:
        return 'fair'
    return 'needs improvement'


def explain_code_style(value: float, metrics: FileMetrics, trailing: int, mixed: bool) -> str:
    parts = [f"Code style {value:.1f}/10 ({score_level(value)})."]
    if metrics.long_line_count:
        parts.append(f"{metrics.long_line_count} lines exceed 100 characters.")
    if trailing:
        parts.append(f"{trailing} lines end with trailing whitespace.")
    if mixed:
        parts.append("Indentation mixes tabs and spaces.")
    return ' '.join(parts)


def explain_naming(value: float, rules: DialectRules, conforming: int, total: int, short: int) -> str:
    parts = [f"Naming {value:.1f}/10 ({score_level(value)})."]
    if total == 0:
        parts.append("No declared names to check.")
    else:
        parts.append(f"{conforming} of {total} names follow {rules.naming_convention}.")
    if short:
        parts.append(f"{short} single-letter names outside loop counters.")
    return ' '.join(parts)


def explain_complexity(value: float, metrics: FileMetrics) -> str:
    # Higher complexity is worse, so band on the inverted value
    level = score_level(ScoreWeights.SCALE_MAX - value)
    parts = [
        f"Complexity {value:.1f}/10 ({level}).",
        f"Average function length {metrics.average_function_length:.1f} lines,",
        f"maximum nesting depth {metrics.max_nesting_depth},",
        f"cyclomatic complexity {metrics.cyclomatic_complexity}.",
    ]
    if metrics.degraded:
        parts.append("Function boundaries could not be determined; the file was measured as one unit.")
    return ' '.join(parts)


def explain_best_practices(value: float, issue_counts: dict[str, int]) -> str:
    parts = [f"Best practices {value:.1f}/10 ({score_level(value)})."]
    labels = (
        ('debug-output', "debug output statements"),
        ('todo-comment', "TODO/FIXME markers"),
        ('legacy-declaration', "discouraged declarations"),
        ('long-function', "functions longer than 50 lines"),
    )
    for rule, label in labels:
        if issue_counts.get(rule):
            parts.append(f"{issue_counts[rule]} {label}.")
    if issue_counts.get('low-comment-ratio'):
        parts.append("Comment ratio is below 10%.")
    return ' '.join(parts)
