"""
Analysis Engine

Entry point for single-file and repository analysis. The engine owns every
piece of shared state: the validated settings, the result cache, the block
feature cache, the optional estimators and the executor their calls run on.
Per-file analysis itself is pure; the engine only routes, caches and
collects.

Pipeline per file:
  lex -> metrics + issues -> duplicates -> security -> scoring
"""

from __future__ import annotations

import hashlib
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Mapping

from .cache import LRUCache
from .config import AnalysisSettings, build_settings
from .constants import EngineDefaults
from .dialects import LanguageDialect
from .errors import UnsupportedLanguageError
from .estimators.base import EstimatorGateway, Estimators
from .estimators.features import FeatureExtractor
from .languages import prepare_content, resolve_source_language
from .lexing.source import LexedSource
from .log import get_logger
from .metrics.extractor import extract_metrics
from .metrics.issues import collect_declared_names, detect_issues
from .models.code import DuplicatePair
from .models.results import (
    FileAnalysisResult,
    RepositoryAnalysisResult,
    SkippedFile,
    SkipReason,
    SourceFile,
)
from .scoring.aggregator import overall_score, repository_score, score_file
from .security.matcher import scan_security
from .similarity.duplicates import detect_duplicates
from .utils.timing import StageTimer

logger = get_logger('engine')


def content_digest(text: str) -> str:
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


class AnalysisEngine:
    """Runs the analysis pipeline over files and repositories.

    Usage:
        with AnalysisEngine(window_size=6) as engine:
            result = engine.analyze_file('app.js', 'src/app.js', text)
            repo = engine.analyze_repository(files, repository_name='demo')

    Raises:
        ConfigurationError: If settings or overrides are out of bounds
    """

    def __init__(
        self,
        settings: AnalysisSettings | None = None,
        estimators: Estimators | None = None,
        **overrides,
    ) -> None:
        if settings is None:
            settings = AnalysisSettings.from_env(**overrides)
        elif overrides:
            settings = _with_overrides(settings, overrides)
        self.settings = settings
        self.estimators = estimators or Estimators()
        self._fingerprint = settings.fingerprint()
        self._cache: LRUCache[tuple[str, str, str], FileAnalysisResult] = LRUCache(settings.cache_size)
        self._features = FeatureExtractor(EngineDefaults.FEATURE_CACHE_SIZE)
        self.timer = StageTimer(enabled=settings.collect_timings)

        wanted = [self.estimators.similarity, self.estimators.vulnerability, self.estimators.quality]
        self._estimator_pool: ThreadPoolExecutor | None = None
        if any(getattr(estimator, 'available', False) for estimator in wanted):
            self._estimator_pool = ThreadPoolExecutor(
                max_workers=EngineDefaults.ESTIMATOR_WORKERS,
                thread_name_prefix='codescope-estimator',
            )
        timeout = settings.estimator_timeout
        self._similarity = EstimatorGateway(self.estimators.similarity, timeout, self._estimator_pool, 'similarity')
        self._vulnerability = EstimatorGateway(self.estimators.vulnerability, timeout, self._estimator_pool, 'vulnerability')
        self._quality = EstimatorGateway(self.estimators.quality, timeout, self._estimator_pool, 'quality')

        logger.debug("Engine ready: %s", settings.model_dump(mode='json'))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the estimator executor."""
        if self._estimator_pool is not None:
            self._estimator_pool.shutdown(wait=False, cancel_futures=True)
            self._estimator_pool = None

    def __enter__(self) -> AnalysisEngine:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def clear_cache(self) -> None:
        self._cache.clear()
        self._features.cache.clear()

    @property
    def cache_stats(self) -> dict:
        return self._cache.stats()

    def timings(self) -> dict[str, dict]:
        """Per-stage timings; empty unless collect_timings is set."""
        return self.timer.snapshot()

    # ------------------------------------------------------------------
    # Single file
    # ------------------------------------------------------------------

    def analyze_file(
        self,
        file_name: str,
        file_path: str,
        content: str,
        language_id: str | LanguageDialect | None = None,
    ) -> FileAnalysisResult:
        """Analyze one file.

        The language comes from ``language_id`` when given, otherwise from
        the file extension. Notebooks are reduced to their code cells.

        Raises:
            UnsupportedLanguageError: If no dialect matches
        """
        source_file = SourceFile(
            file_name=file_name,
            file_path=file_path,
            content=content or '',
            language_id=language_id.value if isinstance(language_id, LanguageDialect) else language_id,
        )
        dialect = resolve_source_language(source_file)
        if dialect is None:
            raise UnsupportedLanguageError(file_path or file_name)
        return self._analyze(source_file, dialect)

    def _analyze(self, file: SourceFile, dialect: LanguageDialect) -> FileAnalysisResult:
        text = prepare_content(file)
        key = (content_digest(text), dialect.value, self._fingerprint)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", file.file_path)
            return cached.model_copy(update={
                'file_name': file.file_name,
                'file_path': file.file_path,
                'content_hash': content_digest(file.content),
                'duplicates': _relabel_pairs(cached.duplicates, file.file_path or file.file_name),
            })
        result = self._run_pipeline(file, text, dialect)
        self._cache.put(key, result)
        return result

    def _run_pipeline(self, file: SourceFile, text: str, dialect: LanguageDialect) -> FileAnalysisResult:
        settings = self.settings
        source_id = file.file_path or file.file_name

        with self.timer.stage('lex'):
            source = LexedSource.from_text(text, dialect)
        with self.timer.stage('metrics'):
            metrics = extract_metrics(source, source_id)
            names = collect_declared_names(source)
            issues = detect_issues(source, metrics, names)
        with self.timer.stage('duplicates'):
            duplication = detect_duplicates(source, source_id, settings, self._similarity, self._features)
        with self.timer.stage('security'):
            security = scan_security(source, settings, self._vulnerability, self._features)
        with self.timer.stage('scoring'):
            scores = score_file(source, metrics, issues, names, self._quality)

        result = FileAnalysisResult(
            file_name=file.file_name,
            file_path=file.file_path,
            language=dialect,
            content_hash=content_digest(file.content),
            metrics=metrics,
            duplicates=duplication.pairs,
            duplication=duplication.stats,
            security=security,
            issues=issues,
            scores=scores,
            overall_score=overall_score(scores),
        )
        logger.debug(
            "Analyzed %s (%s): %d lines, %d pairs, %d findings, score %.1f",
            source_id, dialect.value, metrics.line_count, len(duplication.pairs),
            len(security.findings), result.overall_score,
        )
        return result

    # ------------------------------------------------------------------
    # Repository batch
    # ------------------------------------------------------------------

    def analyze_repository(
        self,
        files: Iterable[SourceFile | Mapping[str, object]],
        repository_name: str = '',
        language_stats: Mapping[str, int] | None = None,
        max_files: int | None = None,
        max_workers: int | None = None,
    ) -> RepositoryAnalysisResult:
        """Analyze a batch of files concurrently.

        Unsupported files and files past ``max_files`` are listed in
        ``skipped_files``; a file whose analysis fails unexpectedly is
        logged and skipped rather than failing the batch. Results keep
        input order.

        Raises:
            ConfigurationError: If ``max_files`` or ``max_workers`` is out of bounds
        """
        settings = self.settings
        if max_files is not None or max_workers is not None:
            settings = _with_overrides(settings, {'max_files': max_files, 'max_workers': max_workers})

        skipped: list[tuple[int, SkippedFile]] = []
        supported: list[tuple[int, SourceFile, LanguageDialect]] = []
        for index, item in enumerate(files):
            file = item if isinstance(item, SourceFile) else SourceFile.model_validate(item)
            try:
                dialect = resolve_source_language(file)
            except UnsupportedLanguageError as exc:
                skipped.append((index, _skip(file, SkipReason.UNSUPPORTED_LANGUAGE, str(exc))))
                continue
            if dialect is None:
                skipped.append((index, _skip(file, SkipReason.UNSUPPORTED_LANGUAGE, 'unknown extension')))
                continue
            supported.append((index, file, dialect))

        jobs = supported[:settings.max_files]
        for index, file, _ in supported[settings.max_files:]:
            skipped.append((index, _skip(file, SkipReason.FILE_LIMIT, f'limit is {settings.max_files} files')))
        if len(supported) > len(jobs):
            logger.info("File limit reached: analyzing %d of %d supported files", len(jobs), len(supported))

        results: list[FileAnalysisResult | None] = [None] * len(jobs)
        if jobs:
            workers = min(len(jobs), settings.max_workers or os.cpu_count() or 1)
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='codescope-file') as executor:
                future_to_slot = {
                    executor.submit(self._analyze, file, dialect): slot
                    for slot, (_, file, dialect) in enumerate(jobs)
                }
                for future in as_completed(future_to_slot):
                    slot = future_to_slot[future]
                    index, file, _ = jobs[slot]
                    try:
                        results[slot] = future.result()
                    except Exception as exc:
                        logger.exception("Analysis failed for %s", file.file_path)
                        skipped.append((index, _skip(file, SkipReason.ANALYSIS_ERROR, f'{type(exc).__name__}: {exc}')))

        analyzed = [result for result in results if result is not None]
        if language_stats is not None:
            language_bytes = {str(language): int(size) for language, size in language_stats.items()}
        else:
            language_bytes = _language_bytes(jobs, results)

        skipped.sort(key=lambda entry: entry[0])
        repository = RepositoryAnalysisResult(
            repository_name=repository_name,
            files=analyzed,
            skipped_files=[entry for _, entry in skipped],
            language_bytes=language_bytes,
            overall_score=repository_score(analyzed),
        )
        logger.info(
            "Analyzed %d files (%d skipped), overall score %.1f",
            len(analyzed), repository.skipped_count, repository.overall_score,
        )
        return repository


def _with_overrides(settings: AnalysisSettings, overrides: Mapping[str, object]) -> AnalysisSettings:
    values = settings.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return build_settings(**values)


def _skip(file: SourceFile, reason: SkipReason, detail: str = '') -> SkippedFile:
    return SkippedFile(file_name=file.file_name, file_path=file.file_path, reason=reason, detail=detail)


def _relabel_pairs(pairs: list[DuplicatePair], source_id: str) -> list[DuplicatePair]:
    """Pairs with both blocks pointing at ``source_id``."""
    return [
        pair.model_copy(update={
            'block_a': pair.block_a.model_copy(update={'source_id': source_id}),
            'block_b': pair.block_b.model_copy(update={'source_id': source_id}),
        })
        if pair.block_a.source_id != source_id or pair.block_b.source_id != source_id
        else pair
        for pair in pairs
    ]


def _language_bytes(
    jobs: list[tuple[int, SourceFile, LanguageDialect]],
    results: list[FileAnalysisResult | None],
) -> dict[str, int]:
    totals: dict[str, int] = {}
    for (_, file, dialect), result in zip(jobs, results):
        if result is None:
            continue
        totals[dialect.value] = totals.get(dialect.value, 0) + len(file.content.encode('utf-8'))
    return totals


__all__ = ['AnalysisEngine', 'content_digest']
