"""
Analysis result models

Top-level models returned by the engine: per-file results with their four
quality sub-scores, and the repository result that folds them together.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Dict
from pydantic import BaseModel, Field, computed_field

from ..dialects import LanguageDialect
from .code import DuplicatePair, DuplicationStats
from .metrics import FileMetrics, CodeIssue
from .security import SecurityReport


class ScoreSource(str, Enum):
    HEURISTIC = "heuristic"
    ESTIMATOR = "estimator"


class SubScore(BaseModel):
    """A 0-10 quality sub-score with its heuristic fallback retained"""

    value: float = Field(..., ge=0.0, le=10.0)
    heuristic_value: float = Field(..., ge=0.0, le=10.0)
    source: ScoreSource = ScoreSource.HEURISTIC
    explanation: str = ""

    model_config = {"frozen": True}


class QualityScores(BaseModel):
    """The four sub-scores. For complexity, higher means more complex."""

    code_style: SubScore
    naming: SubScore
    complexity: SubScore
    best_practices: SubScore

    model_config = {"frozen": True}


class SourceFile(BaseModel):
    """One file handed to the engine by a retrieval collaborator"""

    file_name: str
    file_path: str
    content: str = ""
    language_id: Optional[str] = Field(None, description="Dialect name; derived from the extension when absent")

    model_config = {"frozen": True}


class SkipReason(str, Enum):
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    FILE_LIMIT = "file_limit"
    ANALYSIS_ERROR = "analysis_error"


class SkippedFile(BaseModel):
    file_name: str
    file_path: str
    reason: SkipReason
    detail: str = ""

    model_config = {"frozen": True}


class FileAnalysisResult(BaseModel):
    """Everything the engine computed for one file"""

    file_name: str
    file_path: str
    language: LanguageDialect
    content_hash: str = Field(..., description="SHA-256 of the raw source text")
    metrics: FileMetrics
    duplicates: List[DuplicatePair] = Field(default_factory=list)
    duplication: DuplicationStats = Field(default_factory=DuplicationStats)
    security: SecurityReport = Field(default_factory=SecurityReport)
    issues: List[CodeIssue] = Field(default_factory=list)
    scores: QualityScores
    overall_score: float = Field(..., ge=0.0, le=100.0)

    model_config = {"frozen": True}

    def to_summary_dict(self) -> Dict[str, object]:
        """Compact summary for CLI and log output"""
        return {
            'file_path': self.file_path,
            'language': self.language.value,
            'lines': self.metrics.line_count,
            'functions': self.metrics.function_count,
            'cyclomatic_complexity': self.metrics.cyclomatic_complexity,
            'maintainability_index': self.metrics.maintainability_index,
            'overall_complexity': self.metrics.overall_complexity,
            'duplicate_pairs': len(self.duplicates),
            'duplicate_percentage': self.duplication.duplicate_percentage,
            'security_findings': len(self.security.findings),
            'security_score': self.security.summary.score,
            'overall_score': self.overall_score,
        }


class RepositoryAnalysisResult(BaseModel):
    """Ordered per-file results for one analysis run"""

    repository_name: str = ""
    files: List[FileAnalysisResult] = Field(default_factory=list)
    skipped_files: List[SkippedFile] = Field(default_factory=list)
    language_bytes: Dict[str, int] = Field(default_factory=dict, description="Bytes of source per language")
    overall_score: float = Field(0.0, ge=0.0, le=100.0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    @computed_field
    @property
    def skipped_count(self) -> int:
        return len(self.skipped_files)

    @computed_field
    @property
    def language_breakdown(self) -> Dict[str, float]:
        """Percentage of bytes per language"""
        total = sum(self.language_bytes.values())
        if total == 0:
            return {}
        return {
            language: round(size / total * 100, 1)
            for language, size in sorted(self.language_bytes.items(), key=lambda kv: -kv[1])
        }

    @computed_field
    @property
    def total_findings(self) -> int:
        return sum(len(f.security.findings) for f in self.files)

    @computed_field
    @property
    def total_duplicate_pairs(self) -> int:
        return sum(len(f.duplicates) for f in self.files)
