"""
Tests for the analysis engine: single files, caching and repository batches.

Run with: python -m pytest codescope/test_engine.py -v
"""

import json
import math
import time

import pytest

from codescope.config import AnalysisSettings
from codescope.dialects import LanguageDialect
from codescope.engine import AnalysisEngine, content_digest
from codescope.errors import ConfigurationError, UnsupportedLanguageError
from codescope.estimators import Estimators, FunctionEstimator
from codescope.models.code import DuplicateKind
from codescope.models.results import ScoreSource, SkipReason, SourceFile
from codescope.models.security import VulnerabilityType

EVAL_SNIPPET = "if (a == null) { eval(x); }\n" * 10

PY_FILE = '''def add(first, second):
    return first + second
'''


@pytest.fixture
def engine():
    with AnalysisEngine(AnalysisSettings()) as instance:
        yield instance


class TestAnalyzeFile:
    """Tests for AnalysisEngine.analyze_file."""

    def test_eval_scenario(self, engine):
        """Test repeated eval lines give an exact pair, injection findings and branches."""
        result = engine.analyze_file('app.js', 'src/app.js', EVAL_SNIPPET)

        assert result.language == LanguageDialect.JAVASCRIPT
        assert result.metrics.line_count == 10
        assert result.metrics.cyclomatic_complexity >= 6

        assert len(result.duplicates) == 1
        pair = result.duplicates[0]
        assert pair.kind == DuplicateKind.EXACT
        assert (pair.block_a.start_line, pair.block_b.start_line) == (1, 6)

        types = {f.type for f in result.security.findings}
        assert VulnerabilityType.INJECTION in types
        assert VulnerabilityType.XSS not in types
        assert 0.0 <= result.overall_score <= 100.0

    def test_empty_file(self, engine):
        """Test an empty file analyzes to zero lines and a finite score."""
        result = engine.analyze_file('empty.py', 'empty.py', '')

        assert result.metrics.line_count == 0
        assert result.duplicates == []
        assert result.security.findings == []
        assert math.isfinite(result.overall_score)

    def test_content_hash_is_sha256_of_raw_text(self, engine):
        result = engine.analyze_file('util.py', 'util.py', PY_FILE)
        assert result.content_hash == content_digest(PY_FILE)
        assert len(result.content_hash) == 64

    def test_explicit_language_id_wins(self, engine):
        """Test language_id overrides the extension."""
        result = engine.analyze_file('snippet.txt', 'snippet.txt', PY_FILE, language_id='python')
        assert result.language == LanguageDialect.PYTHON

    def test_unknown_extension_raises(self, engine):
        with pytest.raises(UnsupportedLanguageError):
            engine.analyze_file('notes.md', 'notes.md', '# hello')

    def test_unknown_language_id_raises(self, engine):
        with pytest.raises(UnsupportedLanguageError) as excinfo:
            engine.analyze_file('a.js', 'a.js', 'x = 1', language_id='cobol')
        assert excinfo.value.language_id == 'cobol'

    def test_notebook_code_cells(self, engine):
        """Test a notebook is analyzed as its code cells only."""
        notebook = json.dumps({
            'cells': [
                {'cell_type': 'markdown', 'source': ['# eval(title)\n']},
                {'cell_type': 'code', 'source': ['eval(data)\n']},
            ],
        })
        result = engine.analyze_file('analysis.ipynb', 'nb/analysis.ipynb', notebook)

        assert result.language == LanguageDialect.PYTHON
        assert result.metrics.line_count == 1
        assert [f.line for f in result.security.findings if f.type == VulnerabilityType.INJECTION] == [1]

    def test_results_are_deterministic(self):
        """Test two fresh engines agree on the same input."""
        first = AnalysisEngine(AnalysisSettings()).analyze_file('app.js', 'app.js', EVAL_SNIPPET)
        second = AnalysisEngine(AnalysisSettings()).analyze_file('app.js', 'app.js', EVAL_SNIPPET)
        assert first == second


class TestCaching:
    """Tests for the per-engine result cache."""

    def test_cache_hit_relabels_path(self, engine):
        first = engine.analyze_file('a.js', 'src/a.js', EVAL_SNIPPET)
        second = engine.analyze_file('b.js', 'lib/b.js', EVAL_SNIPPET)

        assert second.file_name == 'b.js'
        assert second.file_path == 'lib/b.js'
        assert second.metrics == first.metrics
        assert engine.cache_stats['hits'] == 1

    def test_cache_hit_relabels_duplicate_blocks(self, engine):
        """Test duplicate blocks of a cached result name the new file."""
        first = engine.analyze_file('a.js', 'src/a.js', EVAL_SNIPPET)
        second = engine.analyze_file('b.js', 'lib/b.js', EVAL_SNIPPET)

        sources = {p.block_a.source_id for p in second.duplicates} | {p.block_b.source_id for p in second.duplicates}
        assert sources == {'lib/b.js'}
        assert {p.block_a.source_id for p in first.duplicates} == {'src/a.js'}
        assert [(p.block_a.start_line, p.block_b.start_line) for p in second.duplicates] == [(1, 6)]

    def test_settings_change_misses_cache(self):
        """Test engines with different thresholds never share results."""
        settings = AnalysisSettings()
        narrow = AnalysisSettings(window_size=3)
        assert settings.fingerprint() != narrow.fingerprint()

    def test_clear_cache(self, engine):
        engine.analyze_file('a.js', 'a.js', EVAL_SNIPPET)
        engine.clear_cache()
        assert engine.cache_stats['size'] == 0

    def test_cache_disabled(self):
        with AnalysisEngine(AnalysisSettings(cache_size=0)) as instance:
            instance.analyze_file('a.js', 'a.js', EVAL_SNIPPET)
            instance.analyze_file('a.js', 'a.js', EVAL_SNIPPET)
            assert instance.cache_stats['size'] == 0
            assert instance.cache_stats['hits'] == 0


class TestConfiguration:
    """Tests for engine construction."""

    def test_overrides_applied(self):
        with AnalysisEngine(window_size=7, similarity_threshold=0.8) as instance:
            assert instance.settings.window_size == 7
            assert instance.settings.similarity_threshold == 0.8

    def test_overrides_on_explicit_settings(self):
        with AnalysisEngine(AnalysisSettings(), max_files=3) as instance:
            assert instance.settings.max_files == 3

    def test_invalid_override_raises(self):
        with pytest.raises(ConfigurationError):
            AnalysisEngine(window_size=0)

    def test_timings_collected_when_enabled(self):
        with AnalysisEngine(AnalysisSettings(collect_timings=True)) as instance:
            instance.analyze_file('a.js', 'a.js', EVAL_SNIPPET)
            timings = instance.timings()
        assert set(timings) == {'lex', 'metrics', 'duplicates', 'security', 'scoring'}
        assert timings['lex']['calls'] == 1

    def test_timings_empty_by_default(self, engine):
        engine.analyze_file('a.js', 'a.js', EVAL_SNIPPET)
        assert engine.timings() == {}


class TestEstimators:
    """Tests for optional estimators wired through the engine."""

    def test_quality_estimator_replaces_scores(self):
        estimators = Estimators(quality=FunctionEstimator(lambda features: 0.5))
        with AnalysisEngine(AnalysisSettings(), estimators=estimators) as instance:
            result = instance.analyze_file('util.py', 'util.py', PY_FILE)

        assert result.scores.naming.value == 5.0
        assert result.scores.naming.source == ScoreSource.ESTIMATOR

    def test_slow_estimator_falls_back(self):
        """Test an estimator past its timeout leaves the heuristic scores."""
        def slow(features):
            time.sleep(0.5)
            return 0.5

        estimators = Estimators(quality=FunctionEstimator(slow))
        settings = AnalysisSettings(estimator_timeout=0.05)
        with AnalysisEngine(settings, estimators=estimators) as instance:
            result = instance.analyze_file('util.py', 'util.py', PY_FILE)
        baseline = AnalysisEngine(AnalysisSettings()).analyze_file('util.py', 'util.py', PY_FILE)

        assert result.scores == baseline.scores
        assert result.scores.code_style.source == ScoreSource.HEURISTIC

    def test_failing_estimator_falls_back(self):
        def broken(features):
            raise RuntimeError("model not loaded")

        estimators = Estimators(vulnerability=FunctionEstimator(broken))
        with AnalysisEngine(AnalysisSettings(), estimators=estimators) as instance:
            result = instance.analyze_file('app.js', 'app.js', EVAL_SNIPPET)
        assert all(f.type == VulnerabilityType.INJECTION for f in result.security.findings)


class TestAnalyzeRepository:
    """Tests for AnalysisEngine.analyze_repository."""

    def files(self):
        return [
            SourceFile(file_name='a.js', file_path='src/a.js', content=EVAL_SNIPPET),
            {'file_name': 'README.md', 'file_path': 'README.md', 'content': '# Demo'},
            SourceFile(file_name='b.py', file_path='src/b.py', content=PY_FILE),
            {'file_name': 'c.go', 'file_path': 'src/c.go', 'content': 'package main\n'},
        ]

    def test_input_order_and_skips(self, engine):
        result = engine.analyze_repository(self.files(), repository_name='demo')

        assert result.repository_name == 'demo'
        assert [f.file_path for f in result.files] == ['src/a.js', 'src/b.py', 'src/c.go']
        assert [(s.file_path, s.reason) for s in result.skipped_files] == [
            ('README.md', SkipReason.UNSUPPORTED_LANGUAGE),
        ]
        assert result.skipped_count == 1
        assert 0.0 <= result.overall_score <= 100.0

    def test_file_limit(self, engine):
        result = engine.analyze_repository(self.files(), max_files=2)

        assert [f.file_path for f in result.files] == ['src/a.js', 'src/b.py']
        assert [(s.file_path, s.reason) for s in result.skipped_files] == [
            ('README.md', SkipReason.UNSUPPORTED_LANGUAGE),
            ('src/c.go', SkipReason.FILE_LIMIT),
        ]

    def test_invalid_file_limit_raises(self, engine):
        with pytest.raises(ConfigurationError):
            engine.analyze_repository(self.files(), max_files=0)

    def test_analysis_error_skips_file(self, engine, monkeypatch):
        """Test one failing file is skipped and the rest still analyzed."""
        real = engine._run_pipeline

        def flaky(file, text, dialect):
            if file.file_path == 'src/b.py':
                raise RuntimeError("boom")
            return real(file, text, dialect)

        monkeypatch.setattr(engine, '_run_pipeline', flaky)
        result = engine.analyze_repository(self.files())

        assert [f.file_path for f in result.files] == ['src/a.js', 'src/c.go']
        errors = [s for s in result.skipped_files if s.reason == SkipReason.ANALYSIS_ERROR]
        assert len(errors) == 1
        assert errors[0].file_path == 'src/b.py'
        assert 'boom' in errors[0].detail

    def test_language_bytes_computed(self, engine):
        result = engine.analyze_repository(self.files())

        assert result.language_bytes['javascript'] == len(EVAL_SNIPPET.encode('utf-8'))
        assert result.language_bytes['python'] == len(PY_FILE.encode('utf-8'))
        assert 'markdown' not in result.language_bytes
        assert sum(result.language_breakdown.values()) == pytest.approx(100.0, abs=0.2)

    def test_language_stats_override(self, engine):
        result = engine.analyze_repository(self.files(), language_stats={'javascript': 300, 'python': 100})
        assert result.language_breakdown == {'javascript': 75.0, 'python': 25.0}

    def test_empty_batch(self, engine):
        result = engine.analyze_repository([])
        assert result.files == []
        assert result.overall_score == 0.0
        assert result.language_bytes == {}

    def test_single_worker_matches_pool(self, engine):
        sequential = engine.analyze_repository(self.files(), max_workers=1)
        pooled = engine.analyze_repository(self.files(), max_workers=4)
        assert [f.overall_score for f in sequential.files] == [f.overall_score for f in pooled.files]
