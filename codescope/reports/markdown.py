"""
Markdown report generators

Pure formatting over result models; no analysis happens here.
"""

from __future__ import annotations

from typing import List

from ..models.code import DuplicateKind, DuplicatePair, DuplicationStats, Impact
from ..models.results import FileAnalysisResult, RepositoryAnalysisResult
from ..models.security import FindingOrigin, SecurityReport, Severity
from ..security.matcher import security_grade

TOP_DUPLICATES = 5
TOP_HOTSPOTS = 5

_IMPACT_ORDER = {Impact.HIGH: 0, Impact.MEDIUM: 1, Impact.LOW: 2}

_SEVERITY_LABELS = {
    Severity.CRITICAL: '[CRITICAL]',
    Severity.HIGH: '[HIGH]',
    Severity.MEDIUM: '[MEDIUM]',
    Severity.LOW: '[LOW]',
    Severity.INFO: '[INFO]',
}


def _impact_level(impact_score: int) -> str:
    if impact_score < 30:
        return 'Low'
    if impact_score < 70:
        return 'Medium'
    return 'High'


def generate_duplication_report(pairs: List[DuplicatePair], stats: DuplicationStats) -> str:
    """Markdown summary of one file's duplicate pairs."""
    lines = [
        '# Code Duplication Report',
        '',
        '## Summary',
        f'- Duplicate lines: {stats.total_duplicate_lines} of {stats.total_lines} '
        f'({stats.duplicate_percentage}%)',
        f'- Duplicate pairs: {stats.duplicate_blocks}',
        f'- Average block size: {stats.average_block_size} lines',
        f'- Impact: {stats.impact_score}/100 ({_impact_level(stats.impact_score)})',
        '',
    ]

    if not pairs:
        lines.append('No duplicate code found.')
        return '\n'.join(lines) + '\n'

    lines.append('## By kind')
    for kind in DuplicateKind:
        count = sum(1 for pair in pairs if pair.kind == kind)
        lines.append(f'- {kind.value}: {count}')
    lines.append('')

    if stats.recommendations:
        lines.append('## Recommendations')
        lines.extend(f'- {rec}' for rec in stats.recommendations)
        lines.append('')

    top = sorted(pairs, key=lambda p: (_IMPACT_ORDER[p.impact], -p.similarity))[:TOP_DUPLICATES]
    lines.append(f'## Top {len(top)} duplicates')
    lines.append('')
    for number, pair in enumerate(top, start=1):
        a, b = pair.block_a, pair.block_b
        lines.append(
            f'### {number}. {pair.kind.value} ({pair.similarity:.0%} similar, {pair.impact.value} impact)'
        )
        lines.append(f'- Lines {a.start_line}-{a.end_line} and {b.start_line}-{b.end_line}')
        if pair.estimator_used:
            lines.append('- Similarity blended with an estimator')
        if a.source_code:
            lines.extend(['```', a.source_code, '```'])
        lines.append('')
    return '\n'.join(lines)


def generate_security_report(report: SecurityReport) -> str:
    """Markdown security report: grade, counts, advice, then each finding."""
    summary = report.summary
    lines = [
        '# Security Report',
        '',
        '## Summary',
        f'- Security score: {summary.score}/100 (grade {security_grade(summary.score)})',
        f'- Findings: {summary.total}',
        f'  - Critical: {summary.critical}',
        f'  - High: {summary.high}',
        f'  - Medium: {summary.medium}',
        f'  - Low: {summary.low}',
        f'  - Info: {summary.info}',
    ]
    if report.estimated_count:
        lines.append(f'- Estimated (possible) findings: {report.estimated_count}')
    lines.append('')

    lines.append('## Recommendations')
    lines.extend(f'- {rec}' for rec in report.recommendations)
    lines.append('')

    if not report.findings:
        lines.append('## No vulnerabilities')
        lines.append('No vulnerabilities were detected.')
        return '\n'.join(lines) + '\n'

    lines.append('## Findings')
    lines.append('')
    total = len(report.findings)
    for number, finding in enumerate(report.findings, start=1):
        possible = ' (possible)' if finding.origin == FindingOrigin.ESTIMATED else ''
        lines.append(f'### {_SEVERITY_LABELS[finding.severity]} {finding.type.value}{possible} ({number}/{total})')
        lines.append(f'- Line: {finding.line}')
        lines.append(f'- Message: {finding.message}')
        if finding.cwe:
            lines.append(f'- CWE: {finding.cwe}')
        lines.append(f'- Code: `{finding.matched_text}`')
        lines.append(f'- False positive likelihood: {finding.false_positive_likelihood.value}')
        if finding.recommendation:
            lines.append(f'- Fix: {finding.recommendation}')
        if finding.example_fix:
            lines.extend(['- Example:', '```', finding.example_fix, '```'])
        if finding.references:
            lines.append('- References:')
            lines.extend(f'  - {ref}' for ref in finding.references)
        lines.append('')
    return '\n'.join(lines)


def _file_row(result: FileAnalysisResult) -> str:
    return (
        f'| {result.file_path} | {result.language.value} | {result.metrics.line_count} '
        f'| {result.metrics.cyclomatic_complexity} | {result.duplication.duplicate_percentage}% '
        f'| {len(result.security.findings)} | {result.overall_score} |'
    )


def generate_repository_summary(result: RepositoryAnalysisResult) -> str:
    """Markdown overview of a repository run."""
    title = result.repository_name or 'Repository'
    lines = [
        f'# {title} analysis',
        '',
        f'- Overall score: {result.overall_score}/100',
        f'- Files analyzed: {len(result.files)}',
        f'- Files skipped: {result.skipped_count}',
        f'- Duplicate pairs: {result.total_duplicate_pairs}',
        f'- Security findings: {result.total_findings}',
        '',
    ]
    if result.language_breakdown:
        lines.append('## Languages')
        lines.extend(f'- {language}: {share}%' for language, share in result.language_breakdown.items())
        lines.append('')
    if result.files:
        lines.extend([
            '## Files',
            '',
            '| File | Language | Lines | Cyclomatic | Duplicated | Findings | Score |',
            '|------|----------|-------|------------|------------|----------|-------|',
        ])
        lines.extend(_file_row(f) for f in result.files)
        lines.append('')
    hotspots = sorted(
        ((f.file_path, unit) for f in result.files for unit in f.metrics.hotspots()),
        key=lambda item: -item[1].complexity_score,
    )[:TOP_HOTSPOTS]
    if hotspots:
        lines.append('## Complexity hotspots')
        lines.extend(
            f'- {path}:{unit.start_line} `{unit.name}`: score {unit.complexity_score}, '
            f'cyclomatic {unit.cyclomatic_complexity}, nesting {unit.nesting_depth}, '
            f'{unit.line_count} lines'
            for path, unit in hotspots
        )
        lines.append('')
    if result.skipped_files:
        lines.append('## Skipped')
        lines.extend(
            f'- {s.file_path}: {s.reason.value}' + (f' ({s.detail})' if s.detail else '')
            for s in result.skipped_files
        )
        lines.append('')
    return '\n'.join(lines)
