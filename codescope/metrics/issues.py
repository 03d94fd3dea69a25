"""
Line-level code issue detection

Flags long lines, leftover TODO/FIXME markers, debug output, discouraged
declarations, one-letter names, long or deeply nested functions and a
low comment ratio. Also collects declared names for naming checks.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..constants import LineThresholds
from ..lexing.source import LexedSource
from ..models.metrics import CodeIssue, FileMetrics, IssueSeverity, IssueType
from .functions import match_declaration

_TODO = re.compile(r'\b(?:TODO|FIXME|XXX|HACK)\b')

# One-letter names accepted by convention (loop counters, coordinates, errors)
ACCEPTED_SHORT_NAMES = frozenset({'i', 'j', 'k', 'n', 'x', 'y', 'z', '_', 'e', 't'})

MAX_FUNCTION_NESTING = 4
MODULE_UNIT = '<module>'


@dataclass(frozen=True)
class DeclaredName:
    kind: str  # 'function' or 'variable'
    name: str
    line: int  # 1-indexed


def collect_declared_names(source: LexedSource) -> list[DeclaredName]:
    """Function and variable names declared in the file, in order."""
    rules = source.rules
    names: list[DeclaredName] = []
    for index, line in enumerate(source.stripped_lines):
        match = match_declaration(line, rules)
        if match is not None:
            # C++ qualified names are checked on their last segment
            short = match.group('name').rsplit('::', 1)[-1].lstrip('~')
            names.append(DeclaredName('function', short, index + 1))
            continue
        for pattern in rules.declaration_patterns:
            for found in pattern.finditer(line):
                name = found.group('name')
                if name not in rules.keywords and name not in rules.literal_words:
                    names.append(DeclaredName('variable', name, index + 1))
    return names


def _line_issues(source: LexedSource) -> list[CodeIssue]:
    rules = source.rules
    issues: list[CodeIssue] = []
    for index, (raw, code) in enumerate(zip(source.raw_lines, source.stripped_lines)):
        line_number = index + 1
        if len(raw) > LineThresholds.LONG_LINE:
            issues.append(CodeIssue(
                type=IssueType.CODE_STYLE,
                severity=IssueSeverity.LOW,
                message=f"Line is {len(raw)} characters long (limit {LineThresholds.LONG_LINE})",
                line=line_number,
                suggestion="Split the expression or extract a variable to shorten the line.",
                rule='long-line',
            ))
        if _TODO.search(raw):
            issues.append(CodeIssue(
                type=IssueType.BEST_PRACTICE,
                severity=IssueSeverity.LOW,
                message="Unresolved TODO/FIXME marker",
                line=line_number,
                suggestion="Resolve the task or track it in the issue tracker.",
                rule='todo-comment',
            ))
        if rules.debug_output is not None and rules.debug_output.search(code):
            issues.append(CodeIssue(
                type=IssueType.BEST_PRACTICE,
                severity=IssueSeverity.LOW,
                message="Debug output left in code",
                line=line_number,
                suggestion="Use the project's logger or remove the statement.",
                rule='debug-output',
            ))
        if rules.legacy_declaration is not None and rules.legacy_declaration.search(code):
            issues.append(CodeIssue(
                type=IssueType.BEST_PRACTICE,
                severity=IssueSeverity.MEDIUM,
                message="'var' declaration has function scope",
                line=line_number,
                suggestion="Use 'let' or 'const' instead of 'var'.",
                rule='legacy-declaration',
            ))
    return issues


def _naming_issues(names: list[DeclaredName]) -> list[CodeIssue]:
    return [
        CodeIssue(
            type=IssueType.NAMING,
            severity=IssueSeverity.LOW,
            message=f"Name '{declared.name}' is too short to convey meaning",
            line=declared.line,
            suggestion="Use a descriptive name.",
            rule='short-name',
        )
        for declared in names
        if len(declared.name) == 1 and declared.name not in ACCEPTED_SHORT_NAMES
    ]


def _function_issues(metrics: FileMetrics) -> list[CodeIssue]:
    issues: list[CodeIssue] = []
    for unit in metrics.functions:
        if unit.name == MODULE_UNIT:
            continue
        if unit.line_count > LineThresholds.LONG_FUNCTION:
            issues.append(CodeIssue(
                type=IssueType.COMPLEXITY,
                severity=IssueSeverity.MEDIUM,
                message=f"Function '{unit.name}' is {unit.line_count} lines long",
                line=unit.start_line,
                suggestion="Split it into smaller functions with one responsibility each.",
                rule='long-function',
            ))
        if unit.nesting_depth > MAX_FUNCTION_NESTING:
            issues.append(CodeIssue(
                type=IssueType.COMPLEXITY,
                severity=IssueSeverity.MEDIUM,
                message=f"Function '{unit.name}' nests {unit.nesting_depth} levels deep",
                line=unit.start_line,
                suggestion="Use early returns or extract the inner blocks.",
                rule='deep-nesting',
            ))
    return issues


def detect_issues(source: LexedSource, metrics: FileMetrics, names: list[DeclaredName] | None = None) -> list[CodeIssue]:
    """All code issues for one file, line issues first."""
    if names is None:
        names = collect_declared_names(source)
    issues = _line_issues(source)
    issues.extend(_naming_issues(names))
    issues.extend(_function_issues(metrics))
    if (
        metrics.line_count > LineThresholds.LOW_COMMENT_MIN_LINES
        and metrics.comment_ratio < LineThresholds.LOW_COMMENT_RATIO
    ):
        issues.append(CodeIssue(
            type=IssueType.BEST_PRACTICE,
            severity=IssueSeverity.LOW,
            message=f"Only {metrics.comment_ratio:.0%} of lines are comments",
            line=None,
            suggestion="Document the intent of non-obvious code.",
            rule='low-comment-ratio',
        ))
    return issues
