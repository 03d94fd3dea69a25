"""
Pydantic models for the analysis engine

This package contains the immutable result models produced by the engine,
using Pydantic v2.

Models:
- CodeBlock / DuplicatePair / DuplicationStats: duplicate detection output
- FunctionUnit / HalsteadMetrics / FileMetrics / CodeIssue: metrics output
- SecurityFinding / SecuritySummary / SecurityReport: security output
- FileAnalysisResult / RepositoryAnalysisResult: top-level results
"""

from .code import (
    CodeBlock,
    DuplicatePair,
    DuplicationStats,
    DuplicateKind,
    Impact,
)

from .metrics import (
    FunctionUnit,
    HalsteadMetrics,
    FileMetrics,
    CodeIssue,
    IssueType,
    IssueSeverity,
)

from .security import (
    SecurityFinding,
    SecuritySummary,
    SecurityReport,
    Severity,
    VulnerabilityType,
    FindingOrigin,
    Likelihood,
)

from .results import (
    SubScore,
    QualityScores,
    ScoreSource,
    SourceFile,
    SkippedFile,
    SkipReason,
    FileAnalysisResult,
    RepositoryAnalysisResult,
)

__all__ = [
    # code
    'CodeBlock',
    'DuplicatePair',
    'DuplicationStats',
    'DuplicateKind',
    'Impact',

    # metrics
    'FunctionUnit',
    'HalsteadMetrics',
    'FileMetrics',
    'CodeIssue',
    'IssueType',
    'IssueSeverity',

    # security
    'SecurityFinding',
    'SecuritySummary',
    'SecurityReport',
    'Severity',
    'VulnerabilityType',
    'FindingOrigin',
    'Likelihood',

    # results
    'SubScore',
    'QualityScores',
    'ScoreSource',
    'SourceFile',
    'SkippedFile',
    'SkipReason',
    'FileAnalysisResult',
    'RepositoryAnalysisResult',
]
