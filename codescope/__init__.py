"""
codescope - static code analysis engine

Computes complexity metrics, duplicate blocks, security findings and
quality scores for source files in eight languages, one file at a time
or as a repository batch.

    from codescope import AnalysisEngine

    with AnalysisEngine() as engine:
        result = engine.analyze_file('app.js', 'src/app.js', text)
"""

__version__ = '1.0.0'

from .config import AnalysisSettings, EngineConfig, build_settings
from .dialects import LanguageDialect
from .engine import AnalysisEngine
from .errors import (
    CodescopeError,
    ConfigurationError,
    EstimatorError,
    UnsupportedLanguageError,
)
from .estimators import Estimator, Estimators, FunctionEstimator, NullEstimator
from .languages import detect_language
from .models import (
    DuplicatePair,
    FileAnalysisResult,
    FileMetrics,
    QualityScores,
    RepositoryAnalysisResult,
    SecurityFinding,
    SecurityReport,
    Severity,
    SkippedFile,
    SourceFile,
)
from .reports import (
    generate_duplication_report,
    generate_repository_summary,
    generate_security_report,
)

__all__ = [
    '__version__',
    'AnalysisEngine',
    'AnalysisSettings',
    'EngineConfig',
    'build_settings',
    'LanguageDialect',
    'detect_language',
    'CodescopeError',
    'ConfigurationError',
    'EstimatorError',
    'UnsupportedLanguageError',
    'Estimator',
    'Estimators',
    'FunctionEstimator',
    'NullEstimator',
    'DuplicatePair',
    'FileAnalysisResult',
    'FileMetrics',
    'QualityScores',
    'RepositoryAnalysisResult',
    'SecurityFinding',
    'SecurityReport',
    'Severity',
    'SkippedFile',
    'SourceFile',
    'generate_duplication_report',
    'generate_repository_summary',
    'generate_security_report',
]
