"""Complexity metrics, function extraction and code issues."""

from .complexity import (
    NestingProfile,
    nesting_profile,
    cyclomatic_complexity,
    cognitive_complexity,
    halstead_metrics,
    maintainability_index,
)
from .functions import FunctionSpan, count_parameters, extract_functions, find_functions
from .issues import DeclaredName, collect_declared_names, detect_issues
from .extractor import extract_metrics

__all__ = [
    'NestingProfile',
    'nesting_profile',
    'cyclomatic_complexity',
    'cognitive_complexity',
    'halstead_metrics',
    'maintainability_index',
    'FunctionSpan',
    'count_parameters',
    'extract_functions',
    'find_functions',
    'DeclaredName',
    'collect_declared_names',
    'detect_issues',
    'extract_metrics',
]
