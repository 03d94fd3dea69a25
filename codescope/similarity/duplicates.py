"""
Duplicate Detector

Pure per-file pipeline:
- Exact matching: blocks grouped by hash, each later member paired with
  the first member of its bucket
- Near duplicates: Jaccard similarity over token sets, blended with an
  optional similarity estimator by simple mean once Jaccard passes the gate
- Overlap resolution: greedy, highest similarity first, with separate
  claimed-line sets for the A side and the B side
- Statistics: duplicate lines, percentage, impact score, recommendations
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List

from ..config import AnalysisSettings
from ..constants import DuplicationImpact, DuplicationLevels
from ..dialects import LanguageDialect
from ..estimators.base import EstimatorGateway
from ..estimators.features import FeatureExtractor
from ..lexing.source import LexedSource
from ..log import get_logger
from ..models.code import CodeBlock, DuplicateKind, DuplicatePair, DuplicationStats, Impact
from .blocks import extract_blocks

logger = get_logger('duplicates')


@dataclass
class DuplicationResult:
    pairs: List[DuplicatePair] = field(default_factory=list)
    stats: DuplicationStats = field(default_factory=DuplicationStats)


def jaccard_similarity(set1: set[str], set2: set[str]) -> float:
    """Calculate Jaccard similarity |A ∩ B| / |A ∪ B| (0.0 when both are empty)."""
    union = len(set1 | set2)
    if union == 0:
        return 0.0
    return len(set1 & set2) / union


def classify_impact(block: CodeBlock) -> Impact:
    if block.line_count >= DuplicationImpact.HIGH_MIN_LINES:
        return Impact.HIGH
    if block.line_count >= DuplicationImpact.MEDIUM_MIN_LINES:
        return Impact.MEDIUM
    return Impact.LOW


def _group_by_exact_hash(blocks: List[CodeBlock]) -> Dict[str, List[CodeBlock]]:
    """Group blocks by block hash, preserving line order within each bucket."""
    hash_groups: Dict[str, List[CodeBlock]] = defaultdict(list)
    for block in blocks:
        hash_groups[block.block_hash].append(block)
    return hash_groups


def find_exact_pairs(blocks: List[CodeBlock]) -> List[DuplicatePair]:
    """One pair per extra bucket member, against the bucket's first member.

    Members overlapping the first member are not duplicates of it; they are
    the same lines seen through a shifted window.
    """
    pairs: List[DuplicatePair] = []
    for bucket in _group_by_exact_hash(blocks).values():
        if len(bucket) < 2:
            continue
        first = bucket[0]
        for member in bucket[1:]:
            if member.overlaps(first):
                continue
            pairs.append(DuplicatePair(
                block_a=first,
                block_b=member,
                similarity=1.0,
                kind=DuplicateKind.EXACT,
                impact=classify_impact(first),
            ))
    return pairs


def _max_reachable(bound: float, settings: AnalysisSettings, can_blend: bool) -> float:
    """Best final score a pair with Jaccard at most ``bound`` could reach."""
    if can_blend and bound > settings.blend_gate:
        return (bound + 1.0) / 2
    return bound


def find_near_pairs(
    blocks: List[CodeBlock],
    settings: AnalysisSettings,
    similarity: EstimatorGateway | None = None,
    features: FeatureExtractor | None = None,
) -> List[DuplicatePair]:
    """Near-duplicate pairs among non-overlapping blocks with different hashes."""
    can_blend = similarity is not None and similarity.available and features is not None
    token_sets = [set(block.tokens) for block in blocks]
    pairs: List[DuplicatePair] = []

    for i, block_a in enumerate(blocks):
        set_a = token_sets[i]
        for j in range(i + 1, len(blocks)):
            block_b = blocks[j]
            if block_a.overlaps(block_b) or block_a.block_hash == block_b.block_hash:
                continue
            set_b = token_sets[j]
            # |A ∩ B| / |A ∪ B| can never exceed min/max of the set sizes
            small, large = sorted((len(set_a), len(set_b)))
            bound = small / large if large else 0.0
            if _max_reachable(bound, settings, can_blend) < settings.similarity_threshold:
                continue

            score = jaccard_similarity(set_a, set_b)
            used_estimator = False
            if can_blend and score > settings.blend_gate:
                estimate = similarity.estimate(features.pair_features(block_a, block_b, score), fallback=score)
                if estimate.used_estimator:
                    score = (score + estimate.value) / 2
                    used_estimator = True

            if score < settings.similarity_threshold:
                continue
            # Distinct hashes are never exact, even if the token sets coincide
            score = min(score, 0.9999)
            kind = DuplicateKind.NEAR_EXACT if score > settings.near_exact_threshold else DuplicateKind.REFACTORABLE
            pairs.append(DuplicatePair(
                block_a=block_a,
                block_b=block_b,
                similarity=round(score, 4),
                kind=kind,
                impact=classify_impact(block_a),
                estimator_used=used_estimator,
            ))
    return pairs


def resolve_overlaps(candidates: List[DuplicatePair]) -> List[DuplicatePair]:
    """Greedy highest-similarity-first selection.

    A pair is accepted only when its A range avoids every line already
    claimed on the A side and its B range avoids every line claimed on
    the B side. The sort is stable, so ties keep discovery order.
    """
    claimed_a: set[int] = set()
    claimed_b: set[int] = set()
    accepted: List[DuplicatePair] = []
    for pair in sorted(candidates, key=lambda p: -p.similarity):
        range_a = pair.block_a.line_range()
        range_b = pair.block_b.line_range()
        if claimed_a.isdisjoint(range_a) and claimed_b.isdisjoint(range_b):
            accepted.append(pair)
            claimed_a.update(range_a)
            claimed_b.update(range_b)
    return accepted


def build_recommendations(
    percentage: float,
    pair_count: int,
    impact_score: int,
    dialect: LanguageDialect,
) -> List[str]:
    recommendations: List[str] = []
    if percentage > DuplicationLevels.HIGH_PCT:
        recommendations.append(
            "Duplication is high. Extract the shared functionality into a common module."
        )
    if pair_count > 3:
        if dialect in (LanguageDialect.JAVASCRIPT, LanguageDialect.TYPESCRIPT):
            recommendations.append("Create utility functions to centralize the repeated logic.")
        elif dialect == LanguageDialect.PYTHON:
            recommendations.append("Extract the repeated code into helper functions.")
        else:
            recommendations.append("Move the repeated code into shared functions or methods.")
    if impact_score > 70:
        recommendations.append(
            "Prioritize refactoring the duplicated sections to improve maintainability."
        )
    # Unique, order kept
    return list(dict.fromkeys(recommendations))


def compute_stats(pairs: List[DuplicatePair], total_lines: int, dialect: LanguageDialect) -> DuplicationStats:
    """Duplicate line union, percentage and weighted impact score."""
    duplicate_lines: set[int] = set()
    for pair in pairs:
        duplicate_lines.update(pair.block_a.line_range())
        duplicate_lines.update(pair.block_b.line_range())

    count = len(duplicate_lines)
    percentage = round(count / total_lines * 100, 1) if total_lines else 0.0
    average = round(sum(p.block_a.line_count for p in pairs) / len(pairs), 1) if pairs else 0.0

    impact = min(DuplicationImpact.MAX_SCORE, round(percentage * DuplicationImpact.PERCENT_MULTIPLIER))
    if len(pairs) > DuplicationImpact.MANY_BLOCKS:
        impact += DuplicationImpact.MANY_BLOCKS_BONUS
    if average > DuplicationImpact.LARGE_BLOCK_LINES:
        impact += DuplicationImpact.LARGE_BLOCK_BONUS
    impact = min(DuplicationImpact.MAX_SCORE, impact)

    return DuplicationStats(
        total_lines=total_lines,
        total_duplicate_lines=count,
        duplicate_percentage=min(100.0, percentage),
        duplicate_blocks=len(pairs),
        average_block_size=average,
        impact_score=impact,
        recommendations=build_recommendations(percentage, len(pairs), impact, dialect),
    )


def detect_duplicates(
    source: LexedSource,
    source_id: str,
    settings: AnalysisSettings,
    similarity: EstimatorGateway | None = None,
    features: FeatureExtractor | None = None,
) -> DuplicationResult:
    """Run the full duplicate pipeline over one file."""
    blocks = extract_blocks(
        source,
        source_id,
        settings.window_size,
        settings.min_block_tokens,
        settings.min_block_chars,
    )
    exact = find_exact_pairs(blocks)
    near = find_near_pairs(blocks, settings, similarity, features)
    pairs = resolve_overlaps(exact + near)
    logger.debug(
        "%s: %d blocks, %d exact and %d near candidates, %d accepted",
        source_id, len(blocks), len(exact), len(near), len(pairs),
    )
    return DuplicationResult(pairs=pairs, stats=compute_stats(pairs, source.line_count, source.dialect))
