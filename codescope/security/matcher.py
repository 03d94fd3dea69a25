"""
Security Pattern Matcher

Runs the dialect's rule table over a file and, when a vulnerability
estimator is available, a keyword-proximity pass that surfaces weaker
"possible" findings. Findings are never deduplicated across rules: two
rules flagging the same line produce two findings.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, List

from ..config import AnalysisSettings
from ..constants import SecurityDeductions, SecurityDefaults, SecurityGrades
from ..dialects import LanguageDialect
from ..estimators.base import EstimatorGateway
from ..estimators.features import FeatureExtractor, one_hot
from ..lexing.source import LexedSource
from ..log import get_logger
from ..models.security import (
    FindingOrigin,
    Likelihood,
    SecurityFinding,
    SecurityReport,
    SecuritySummary,
    Severity,
    VulnerabilityType,
)
from .rules import ESTIMATED_MESSAGES, KEYWORDS, SecurityRule, category_recommendation, rules_for

logger = get_logger('security')

_DEDUCTIONS = {
    Severity.CRITICAL: SecurityDeductions.CRITICAL,
    Severity.HIGH: SecurityDeductions.HIGH,
    Severity.MEDIUM: SecurityDeductions.MEDIUM,
    Severity.LOW: SecurityDeductions.LOW,
    Severity.INFO: SecurityDeductions.INFO,
}


class LineIndex:
    """Maps character offsets to 1-indexed line numbers."""

    def __init__(self, text: str) -> None:
        self._newlines = [i for i, ch in enumerate(text) if ch == '\n']

    def line_of(self, offset: int) -> int:
        return bisect_right(self._newlines, offset - 1) + 1


def _matched_line(source: LexedSource, line: int) -> str:
    if 1 <= line <= len(source.raw_lines):
        return source.raw_lines[line - 1].strip()
    return ''


def match_rules(source: LexedSource, rules: Iterable[SecurityRule]) -> List[SecurityFinding]:
    """One finding per match per rule, in rule order then text order."""
    stripped = source.scan.stripped
    stripped_index = LineIndex(stripped)
    raw_index = LineIndex(source.text)
    findings: List[SecurityFinding] = []
    for rule in rules:
        text, index = (source.text, raw_index) if rule.match_raw else (stripped, stripped_index)
        for match in rule.pattern.finditer(text):
            line = index.line_of(match.start())
            findings.append(SecurityFinding(
                type=rule.type,
                severity=rule.severity,
                line=line,
                message=rule.message,
                matched_text=_matched_line(source, line),
                cwe=rule.cwe,
                recommendation=rule.recommendation,
                example_fix=rule.example_fix,
                references=list(rule.references),
                false_positive_likelihood=Likelihood.MEDIUM,
                origin=FindingOrigin.RULE,
                confidence=SecurityDefaults.RULE_CONFIDENCE,
            ))
    return findings


def estimate_findings(
    source: LexedSource,
    gateway: EstimatorGateway | None,
    features: FeatureExtractor | None = None,
) -> List[SecurityFinding]:
    """Keyword-proximity findings for categories the estimator flags.

    Returns nothing unless the gateway is available. Every finding is
    marked ``estimated`` with a high false-positive likelihood.
    """
    if gateway is None or not gateway.available:
        return []
    base = (features or FeatureExtractor).security_features(source, KEYWORDS)
    categories = list(KEYWORDS)
    findings: List[SecurityFinding] = []
    for index, vtype in enumerate(categories):
        keywords = KEYWORDS[vtype]
        if not keywords:
            continue
        likelihood = gateway.estimate(base + one_hot(index, len(categories)), fallback=0.0).value
        if likelihood <= SecurityDefaults.LIKELIHOOD_THRESHOLD:
            continue
        severity = Severity.HIGH if likelihood > SecurityDefaults.HIGH_LIKELIHOOD else Severity.MEDIUM
        for number, line in enumerate(source.raw_lines, start=1):
            if any(keyword in line for keyword in keywords):
                findings.append(SecurityFinding(
                    type=vtype,
                    severity=severity,
                    line=number,
                    message=ESTIMATED_MESSAGES[vtype],
                    matched_text=line.strip(),
                    recommendation=category_recommendation(vtype, source.dialect),
                    false_positive_likelihood=Likelihood.HIGH,
                    origin=FindingOrigin.ESTIMATED,
                    confidence=round(SecurityDefaults.ESTIMATED_CONFIDENCE_FACTOR * likelihood, 3),
                ))
    logger.debug("%d estimated findings", len(findings))
    return findings


def summarize(findings: List[SecurityFinding]) -> SecuritySummary:
    """Counts by severity and ``clamp(0, 100, 100 - deductions)``."""
    counts = {severity: 0 for severity in Severity}
    deduction = 0
    for finding in findings:
        counts[finding.severity] += 1
        deduction += _DEDUCTIONS[finding.severity]
    return SecuritySummary(
        critical=counts[Severity.CRITICAL],
        high=counts[Severity.HIGH],
        medium=counts[Severity.MEDIUM],
        low=counts[Severity.LOW],
        info=counts[Severity.INFO],
        score=max(0, min(100, 100 - deduction)),
    )


def security_grade(score: int) -> str:
    """Letter grade for a 0-100 security score."""
    for minimum, grade in SecurityGrades.BANDS:
        if score >= minimum:
            return grade
    return SecurityGrades.FAILING


def build_recommendations(findings: List[SecurityFinding], dialect: LanguageDialect) -> List[str]:
    """Language-aware overall advice. Never empty."""
    present = {finding.type for finding in findings}
    recommendations: List[str] = []

    if dialect in (LanguageDialect.JAVASCRIPT, LanguageDialect.TYPESCRIPT):
        if VulnerabilityType.XSS in present:
            recommendations.append(
                "Rely on framework escaping (React, Vue, Angular) or sanitize HTML with DOMPurify."
            )
        if VulnerabilityType.INJECTION in present:
            recommendations.append("Avoid eval() and new Function(); use JSON.parse for data.")
            recommendations.append(
                "Prefer child_process.execFile over exec to prevent command injection."
            )
    elif dialect == LanguageDialect.PYTHON:
        if VulnerabilityType.INJECTION in present:
            recommendations.append(
                "Call subprocess with an argument list and shell=False to prevent command injection."
            )
            recommendations.append("Build SQL with parameterized queries, never string formatting.")
        if VulnerabilityType.SENSITIVE_DATA_EXPOSURE in present:
            recommendations.append(
                "Manage secrets with environment variables, configparser or dotenv."
            )
    elif dialect in (LanguageDialect.C, LanguageDialect.CPP):
        if findings:
            recommendations.append(
                "Use bounded string functions and compile with stack protection and sanitizers."
            )
    elif VulnerabilityType.INJECTION in present:
        recommendations.append("Pass user input to queries and commands only as bound parameters.")

    if len(findings) > 5:
        recommendations.append("Automate security testing and run it in continuous integration.")
    if VulnerabilityType.SECURITY_MISCONFIGURATION in present:
        recommendations.append("Keep a security configuration checklist and review it before each deployment.")
    if not recommendations:
        recommendations.append("Follow general security best practices and schedule regular security reviews.")
    return list(dict.fromkeys(recommendations))


def scan_security(
    source: LexedSource,
    settings: AnalysisSettings | None = None,
    vulnerability: EstimatorGateway | None = None,
    features: FeatureExtractor | None = None,
) -> SecurityReport:
    """Rule matches plus optional estimated findings, filtered and sorted."""
    settings = settings or AnalysisSettings()
    findings = match_rules(source, rules_for(source.dialect))
    findings.extend(estimate_findings(source, vulnerability, features))

    floor = settings.min_severity.rank
    kept = [f for f in findings if f.severity.rank >= floor]
    # Stable: equal severities keep rule order then line order
    kept.sort(key=lambda f: -f.severity.rank)

    if len(kept) != len(findings):
        logger.debug("Dropped %d findings below %s", len(findings) - len(kept), settings.min_severity.value)

    return SecurityReport(
        findings=kept,
        summary=summarize(kept),
        recommendations=build_recommendations(kept, source.dialect),
    )
