"""
Score Aggregator

Combines the heuristic sub-scores, optionally replaced by a quality
estimator, into QualityScores and the 0-100 overall score.
"""

from __future__ import annotations

from collections import Counter
from statistics import mean
from typing import Iterable, Sequence

from ..constants import ScoreWeights
from ..estimators.base import EstimatorGateway
from ..estimators.features import FeatureExtractor, one_hot
from ..lexing.source import LexedSource
from ..log import get_logger
from ..metrics.issues import DeclaredName
from ..models.metrics import CodeIssue, FileMetrics
from ..models.results import FileAnalysisResult, QualityScores, ScoreSource, SubScore
from . import explanations
from .heuristics import (
    best_practices_score,
    code_style_score,
    complexity_score,
    count_trailing_whitespace,
    has_mixed_indentation,
    is_short_name,
    naming_conformance,
    naming_score,
)

logger = get_logger('scoring')

SUB_SCORES = ('code_style', 'naming', 'complexity', 'best_practices')


def _resolve(
    index: int,
    heuristic: float,
    explanation: str,
    quality: EstimatorGateway | None,
    base_features: list[float] | None,
) -> SubScore:
    if quality is None or base_features is None or not quality.available:
        return SubScore(value=heuristic, heuristic_value=heuristic, explanation=explanation)
    scale = ScoreWeights.SCALE_MAX
    features = base_features + one_hot(index, len(SUB_SCORES))
    estimate = quality.estimate(features, fallback=heuristic / scale)
    if not estimate.used_estimator:
        return SubScore(value=heuristic, heuristic_value=heuristic, explanation=explanation)
    return SubScore(
        value=round(estimate.value * scale, 1),
        heuristic_value=heuristic,
        source=ScoreSource.ESTIMATOR,
        explanation=explanation,
    )


def score_file(
    source: LexedSource,
    metrics: FileMetrics,
    issues: Sequence[CodeIssue],
    names: Sequence[DeclaredName],
    quality: EstimatorGateway | None = None,
) -> QualityScores:
    """The four sub-scores for one file.

    Each sub-score comes from the quality estimator when one answers,
    otherwise from the heuristic. The heuristic value is always kept.
    """
    rules = source.rules
    trailing = count_trailing_whitespace(source)
    mixed = has_mixed_indentation(source)
    conforming, total = naming_conformance(names, rules)
    short = sum(1 for declared in names if is_short_name(declared.name))
    issue_counts = dict(Counter(issue.rule for issue in issues))

    style = code_style_score(source, metrics)
    naming = naming_score(names, rules)
    complexity = complexity_score(metrics)
    practices = best_practices_score(issues)

    heuristic = {
        'code_style': (style, explanations.explain_code_style(style, metrics, trailing, mixed)),
        'naming': (naming, explanations.explain_naming(naming, rules, conforming, total, short)),
        'complexity': (complexity, explanations.explain_complexity(complexity, metrics)),
        'best_practices': (practices, explanations.explain_best_practices(practices, issue_counts)),
    }

    base_features = None
    if quality is not None and quality.available:
        base_features = FeatureExtractor.quality_features(metrics, len(issues))

    resolved = {
        name: _resolve(index, value, text, quality, base_features)
        for index, (name, (value, text)) in enumerate(heuristic.items())
    }
    logger.debug(
        "Scores: %s",
        ', '.join(f"{name}={score.value} ({score.source.value})" for name, score in resolved.items()),
    )
    return QualityScores(**resolved)


def overall_score(scores: QualityScores) -> float:
    """Weighted 0-100 score. Complexity is inverted since higher is worse."""
    scale = ScoreWeights.SCALE_MAX
    weighted = (
        scores.code_style.value * ScoreWeights.CODE_STYLE
        + scores.naming.value * ScoreWeights.NAMING
        + (scale - scores.complexity.value) * ScoreWeights.COMPLEXITY
        + scores.best_practices.value * ScoreWeights.BEST_PRACTICES
    )
    return round(max(0.0, min(100.0, weighted * ScoreWeights.OVERALL_MULTIPLIER)), 1)


def repository_score(results: Iterable[FileAnalysisResult]) -> float:
    """Unweighted mean of the files' overall scores, 0 when there are none."""
    values = [result.overall_score for result in results]
    if not values:
        return 0.0
    return round(mean(values), 1)
