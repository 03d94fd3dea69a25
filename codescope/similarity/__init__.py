"""Block extraction and duplicate detection."""

from .blocks import extract_blocks
from .duplicates import (
    DuplicationResult,
    classify_impact,
    compute_stats,
    detect_duplicates,
    find_exact_pairs,
    find_near_pairs,
    jaccard_similarity,
    resolve_overlaps,
)

__all__ = [
    'extract_blocks',
    'DuplicationResult',
    'classify_impact',
    'compute_stats',
    'detect_duplicates',
    'find_exact_pairs',
    'find_near_pairs',
    'jaccard_similarity',
    'resolve_overlaps',
]
