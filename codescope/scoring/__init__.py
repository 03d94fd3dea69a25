"""Quality sub-scores, explanations and the overall score."""

from .aggregator import SUB_SCORES, overall_score, repository_score, score_file
from .explanations import score_level
from .heuristics import (
    best_practices_score,
    code_style_score,
    complexity_score,
    naming_score,
)

__all__ = [
    'SUB_SCORES',
    'overall_score',
    'repository_score',
    'score_file',
    'score_level',
    'best_practices_score',
    'code_style_score',
    'complexity_score',
    'naming_score',
]
