"""
Feature vectors for the optional estimators

Block features are memoized in an LRU keyed by block hash, since identical
blocks recur across files and runs. All features are plain floats so any
estimator (a model's predict, a remote call wrapper) can consume them.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Mapping, Sequence

from ..cache import LRUCache
from ..constants import EngineDefaults, LineThresholds
from ..lexing.source import LexedSource
from ..models.code import CodeBlock
from ..models.metrics import FileMetrics


def one_hot(index: int, size: int) -> list[float]:
    """Indicator vector with a 1.0 at ``index``."""
    if not 0 <= index < size:
        raise ValueError(f"index {index} out of range for size {size}")
    return [1.0 if i == index else 0.0 for i in range(size)]


def _is_operator_text(text: str) -> bool:
    return not (text[0].isalnum() or text[0] in '_$"\'`')


class FeatureExtractor:
    """Builds estimator inputs; owns the per-block feature cache."""

    def __init__(self, cache_size: int = EngineDefaults.FEATURE_CACHE_SIZE) -> None:
        self.cache: LRUCache[str, tuple[float, ...]] = LRUCache(cache_size)

    def block_features(self, block: CodeBlock) -> tuple[float, ...]:
        """[tokens, unique ratio, lines, operator ratio, literal ratio, mean token length]"""
        return self.cache.get_or_compute(block.block_hash, lambda: self._compute_block(block))

    @staticmethod
    def _compute_block(block: CodeBlock) -> tuple[float, ...]:
        tokens = block.tokens
        count = len(tokens)
        if count == 0:
            return (0.0, 0.0, float(block.line_count), 0.0, 0.0, 0.0)
        operators = sum(1 for t in tokens if _is_operator_text(t))
        literals = sum(1 for t in tokens if t[0].isdigit() or t[0] in '"\'`')
        return (
            float(count),
            len(set(tokens)) / count,
            float(block.line_count),
            operators / count,
            literals / count,
            sum(len(t) for t in tokens) / count,
        )

    def pair_features(self, a: CodeBlock, b: CodeBlock, jaccard: float) -> list[float]:
        """Both blocks' features plus Jaccard, sequence ratio and size ratio."""
        ratio = SequenceMatcher(None, a.tokens, b.tokens, autojunk=False).ratio()
        sizes = sorted((len(a.tokens), len(b.tokens)))
        size_ratio = sizes[0] / sizes[1] if sizes[1] else 0.0
        return [
            *self.block_features(a),
            *self.block_features(b),
            jaccard,
            ratio,
            size_ratio,
        ]

    @staticmethod
    def security_features(
        source: LexedSource,
        keyword_table: Mapping[object, Sequence[str]],
    ) -> list[float]:
        """Per-category share of lines mentioning a category keyword, plus size."""
        lines = source.stripped_lines
        total = max(1, len(lines))
        features = []
        for keywords in keyword_table.values():
            hits = sum(1 for line in lines if any(k in line for k in keywords)) if keywords else 0
            features.append(hits / total)
        features.append(min(1.0, len(lines) / 1000))
        return features

    @staticmethod
    def quality_features(metrics: FileMetrics, issue_count: int) -> list[float]:
        """File metrics squashed to roughly [0, 1]."""
        lines = max(1, metrics.line_count)
        return [
            min(1.0, metrics.line_count / 1000),
            metrics.comment_ratio,
            metrics.long_line_count / lines,
            min(1.0, metrics.max_nesting_depth / 10),
            min(1.0, metrics.cyclomatic_complexity / 100),
            metrics.maintainability_index / 100,
            min(1.0, metrics.average_function_length / (LineThresholds.LONG_FUNCTION * 2)),
            min(1.0, issue_count / lines),
        ]
