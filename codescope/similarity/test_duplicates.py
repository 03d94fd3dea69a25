"""
Tests for block extraction and duplicate detection.

Run with: python -m pytest codescope/similarity/test_duplicates.py -v
"""

import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from codescope.config import AnalysisSettings
from codescope.dialects import LanguageDialect
from codescope.estimators import EstimatorGateway, FeatureExtractor, FunctionEstimator
from codescope.lexing.source import LexedSource
from codescope.lexing.tokenizer import block_hash
from codescope.models.code import CodeBlock, DuplicateKind, DuplicatePair, Impact
from codescope.similarity import (
    classify_impact,
    compute_stats,
    detect_duplicates,
    extract_blocks,
    find_exact_pairs,
    find_near_pairs,
    jaccard_similarity,
    resolve_overlaps,
)

JS = LanguageDialect.JAVASCRIPT
PY = LanguageDialect.PYTHON

CHUNK = [
    "const total = price * quantity;",
    "const tax = total * rate;",
    "const shipping = weight * cost;",
    "const grand = total + tax + shipping;",
    "console.log(grand);",
]


def make_block(start, end, tokens, source_id='f.js'):
    return CodeBlock(
        source_id=source_id,
        start_line=start,
        end_line=end,
        tokens=tokens,
        block_hash=block_hash(tokens),
    )


def make_pair(start_a, start_b, similarity, size=5):
    a = make_block(start_a, start_a + size - 1, ['a', str(start_a)])
    b = make_block(start_b, start_b + size - 1, ['b', str(start_b)])
    return DuplicatePair(
        block_a=a,
        block_b=b,
        similarity=similarity,
        kind=DuplicateKind.REFACTORABLE,
        impact=Impact.LOW,
    )


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=False)


class TestJaccard:
    """Tests for jaccard_similarity."""

    def test_identical_sets(self):
        assert jaccard_similarity({'a', 'b'}, {'a', 'b'}) == 1.0

    def test_partial_overlap(self):
        """Test 3 shared out of 5 distinct tokens gives 0.6."""
        assert jaccard_similarity({'a', 'b', 'c', 'd'}, {'a', 'b', 'c', 'e'}) == pytest.approx(0.6)

    def test_empty_sets(self):
        assert jaccard_similarity(set(), set()) == 0.0


class TestExtractBlocks:
    """Tests for extract_blocks."""

    def test_window_count_and_lines(self):
        source = LexedSource.from_text('\n'.join(CHUNK * 2), JS)
        blocks = extract_blocks(source, 'f.js', 5, 10, 20)
        assert len(blocks) == 6
        assert (blocks[0].start_line, blocks[0].end_line) == (1, 5)
        assert (blocks[-1].start_line, blocks[-1].end_line) == (6, 10)
        assert blocks[0].source_code == '\n'.join(CHUNK)

    def test_file_shorter_than_window(self):
        source = LexedSource.from_text('\n'.join(CHUNK[:3]), JS)
        assert extract_blocks(source, 'f.js', 5, 0, 0) == []

    def test_comment_only_windows_skipped(self):
        """Test windows whose stripped text is too short are skipped."""
        text = '\n'.join(['// note'] * 5)
        source = LexedSource.from_text(text, JS)
        assert extract_blocks(source, 'f.js', 5, 0, 1) == []

    def test_comments_do_not_change_hash(self):
        plain = LexedSource.from_text('\n'.join(CHUNK), JS)
        commented = LexedSource.from_text('\n'.join(line + ' // why' for line in CHUNK), JS)
        a = extract_blocks(plain, 'a.js', 5, 0, 0)[0]
        b = extract_blocks(commented, 'b.js', 5, 0, 0)[0]
        assert a.block_hash == b.block_hash


class TestExactPairs:
    """Tests for find_exact_pairs."""

    def test_repeated_chunk_yields_one_pair(self):
        source = LexedSource.from_text('\n'.join(CHUNK * 2), JS)
        pairs = find_exact_pairs(extract_blocks(source, 'f.js', 5, 10, 20))
        assert len(pairs) == 1
        pair = pairs[0]
        assert pair.kind == DuplicateKind.EXACT
        assert pair.similarity == 1.0
        assert pair.block_a.line_range() == range(1, 6)
        assert pair.block_b.line_range() == range(6, 11)

    def test_overlapping_members_skipped(self):
        """Test identical shifted windows over the same lines are not paired."""
        source = LexedSource.from_text('\n'.join(["x = compute(a, b);"] * 10), JS)
        pairs = find_exact_pairs(extract_blocks(source, 'f.js', 5, 10, 20))
        assert [(p.block_a.start_line, p.block_b.start_line) for p in pairs] == [(1, 6)]

    def test_exact_pair_requires_identity(self):
        a = make_block(1, 5, ['a'])
        b = make_block(6, 10, ['b'])
        with pytest.raises(ValueError):
            DuplicatePair(block_a=a, block_b=b, similarity=1.0, kind=DuplicateKind.EXACT, impact=Impact.LOW)


class TestNearPairs:
    """Tests for find_near_pairs."""

    def test_refactorable_pair(self):
        a = make_block(1, 5, ['let', 'a', '=', 'b', '+', 'c', ';'])
        b = make_block(10, 14, ['let', 'a', '=', 'b', '+', 'd', ';'])
        pairs = find_near_pairs([a, b], AnalysisSettings())
        assert len(pairs) == 1
        assert pairs[0].similarity == pytest.approx(0.75)
        assert pairs[0].kind == DuplicateKind.REFACTORABLE
        assert not pairs[0].estimator_used

    def test_near_exact_pair(self):
        shared = [f't{i}' for i in range(19)]
        a = make_block(1, 5, shared + ['x'])
        b = make_block(10, 14, shared + ['y'])
        pairs = find_near_pairs([a, b], AnalysisSettings())
        assert len(pairs) == 1
        assert pairs[0].kind == DuplicateKind.NEAR_EXACT

    def test_below_threshold_rejected(self):
        a = make_block(1, 5, ['a', 'b', 'c', 'd'])
        b = make_block(10, 14, ['a', 'b', 'c', 'e'])
        assert find_near_pairs([a, b], AnalysisSettings()) == []

    def test_overlapping_blocks_not_compared(self):
        a = make_block(1, 5, ['let', 'a', '=', 'b', '+', 'c', ';'])
        b = make_block(3, 7, ['let', 'a', '=', 'b', '+', 'd', ';'])
        assert find_near_pairs([a, b], AnalysisSettings()) == []

    def test_estimator_blend_lifts_pair(self, executor):
        """Test Jaccard 0.6 blended with an estimate of 1.0 gives 0.8."""
        gateway = EstimatorGateway(FunctionEstimator(lambda f: 1.0), 1.0, executor, 'similarity')
        a = make_block(1, 5, ['a', 'b', 'c', 'd'])
        b = make_block(10, 14, ['a', 'b', 'c', 'e'])
        pairs = find_near_pairs([a, b], AnalysisSettings(), gateway, FeatureExtractor())
        assert len(pairs) == 1
        assert pairs[0].similarity == pytest.approx(0.8)
        assert pairs[0].estimator_used

    def test_failing_estimator_falls_back(self, executor):
        def broken(features):
            raise RuntimeError("model not loaded")

        gateway = EstimatorGateway(FunctionEstimator(broken), 1.0, executor, 'similarity')
        a = make_block(1, 5, ['a', 'b', 'c', 'd'])
        b = make_block(10, 14, ['a', 'b', 'c', 'e'])
        assert find_near_pairs([a, b], AnalysisSettings(), gateway, FeatureExtractor()) == []

    def test_slow_estimator_falls_back(self, executor):
        def slow(features):
            time.sleep(0.5)
            return 1.0

        gateway = EstimatorGateway(FunctionEstimator(slow), 0.05, executor, 'similarity')
        a = make_block(1, 5, ['let', 'a', '=', 'b', '+', 'c', ';'])
        b = make_block(10, 14, ['let', 'a', '=', 'b', '+', 'd', ';'])
        pairs = find_near_pairs([a, b], AnalysisSettings(), gateway, FeatureExtractor())
        assert len(pairs) == 1
        assert pairs[0].similarity == pytest.approx(0.75)
        assert not pairs[0].estimator_used


class TestResolveOverlaps:
    """Tests for resolve_overlaps."""

    def test_highest_similarity_wins(self):
        low = make_pair(1, 11, 0.8)
        high = make_pair(3, 20, 0.95)
        assert resolve_overlaps([low, high]) == [high]

    def test_sides_claimed_separately(self):
        """Test a B range may reuse lines claimed only on the A side."""
        first = make_pair(3, 20, 0.95)
        second = make_pair(30, 3, 0.9)
        assert resolve_overlaps([first, second]) == [first, second]

    def test_ties_keep_discovery_order(self):
        first = make_pair(1, 11, 0.8)
        second = make_pair(2, 30, 0.8)
        assert resolve_overlaps([first, second]) == [first]


class TestStats:
    """Tests for compute_stats and classify_impact."""

    def test_impact_by_block_size(self):
        assert classify_impact(make_block(1, 20, ['a'])) == Impact.HIGH
        assert classify_impact(make_block(1, 10, ['a'])) == Impact.MEDIUM
        assert classify_impact(make_block(1, 9, ['a'])) == Impact.LOW

    def test_no_pairs(self):
        stats = compute_stats([], 40, JS)
        assert stats.total_duplicate_lines == 0
        assert stats.duplicate_percentage == 0.0
        assert stats.impact_score == 0
        assert stats.recommendations == []

    def test_many_pairs_python(self):
        pairs = [make_pair(start, start + 5, 0.8) for start in (1, 11, 21, 31)]
        stats = compute_stats(pairs, 100, PY)
        assert stats.total_duplicate_lines == 40
        assert stats.duplicate_percentage == 40.0
        assert stats.average_block_size == 5.0
        assert stats.impact_score == 80
        assert len(stats.recommendations) == 3
        assert any('helper functions' in r for r in stats.recommendations)


class TestDetectDuplicates:
    """Tests for the full per-file pipeline."""

    def test_repeated_chunk(self):
        source = LexedSource.from_text('\n'.join(CHUNK * 2), JS)
        result = detect_duplicates(source, 'f.js', AnalysisSettings())
        assert len(result.pairs) == 1
        assert result.stats.total_duplicate_lines == 10
        assert result.stats.duplicate_percentage == 100.0
        assert result.stats.impact_score == 100

    def test_empty_file(self):
        result = detect_duplicates(LexedSource.from_text('', JS), 'f.js', AnalysisSettings())
        assert result.pairs == []
        assert result.stats.total_lines == 0

    def test_accepted_pairs_never_share_claimed_lines(self):
        text = '\n'.join(CHUNK * 4)
        result = detect_duplicates(LexedSource.from_text(text, JS), 'f.js', AnalysisSettings())
        a_lines, b_lines = [], []
        for pair in result.pairs:
            a_lines.extend(pair.block_a.line_range())
            b_lines.extend(pair.block_b.line_range())
        assert len(a_lines) == len(set(a_lines))
        assert len(b_lines) == len(set(b_lines))
