"""Regex security rules and the pattern matcher."""

from .matcher import (
    LineIndex,
    build_recommendations,
    estimate_findings,
    match_rules,
    scan_security,
    security_grade,
    summarize,
)
from .rules import KEYWORDS, RULES, SecurityRule, category_recommendation, rules_for

__all__ = [
    'LineIndex',
    'build_recommendations',
    'estimate_findings',
    'match_rules',
    'scan_security',
    'security_grade',
    'summarize',
    'KEYWORDS',
    'RULES',
    'SecurityRule',
    'category_recommendation',
    'rules_for',
]
