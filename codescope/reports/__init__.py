"""Markdown report generators."""

from .markdown import (
    generate_duplication_report,
    generate_repository_summary,
    generate_security_report,
)

__all__ = [
    'generate_duplication_report',
    'generate_repository_summary',
    'generate_security_report',
]
