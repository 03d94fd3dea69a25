"""
Command-line adapter

    python -m codescope src/ lib/util.py --report security

Reads files from disk, runs one repository analysis and prints a Markdown
report or JSON. All file I/O of the package lives here.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterator, Sequence

from . import __version__
from .engine import AnalysisEngine
from .errors import ConfigurationError
from .languages import is_supported
from .log import configure_logging, get_logger
from .models.results import RepositoryAnalysisResult, SourceFile
from .models.security import Severity
from .reports.markdown import (
    generate_duplication_report,
    generate_repository_summary,
    generate_security_report,
)

logger = get_logger('cli')

SKIP_DIRS = frozenset({'.git', 'node_modules', '__pycache__', '.venv', 'venv', 'dist', 'build'})
REPORTS = ('summary', 'duplicates', 'security', 'json')


def iter_source_paths(paths: Sequence[Path]) -> Iterator[Path]:
    """Files named directly, plus supported files found under directories."""
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob('*')):
                if any(part in SKIP_DIRS for part in candidate.relative_to(path).parts[:-1]):
                    continue
                if candidate.is_file() and is_supported(candidate.name):
                    yield candidate
        elif path.is_file():
            yield path
        else:
            logger.warning("No such file or directory: %s", path)


def read_sources(paths: Sequence[Path]) -> list[SourceFile]:
    files = []
    for path in iter_source_paths(paths):
        try:
            content = path.read_text(encoding='utf-8', errors='replace')
        except OSError as exc:
            logger.warning("Cannot read %s: %s", path, exc)
            continue
        files.append(SourceFile(file_name=path.name, file_path=path.as_posix(), content=content))
    return files


def render(result: RepositoryAnalysisResult, report: str) -> str:
    if report == 'json':
        return result.model_dump_json(indent=2)
    if report == 'summary':
        return generate_repository_summary(result)
    sections = []
    for file_result in result.files:
        if report == 'duplicates':
            body = generate_duplication_report(file_result.duplicates, file_result.duplication)
        else:
            body = generate_security_report(file_result.security)
        sections.append(f'<!-- {file_result.file_path} -->\n{body}')
    return '\n'.join(sections) if sections else 'No files analyzed.\n'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='codescope',
        description='Static code analysis: complexity, duplicates and security patterns',
    )
    parser.add_argument('paths', nargs='+', type=Path, help='Files or directories to analyze')
    parser.add_argument('--max-files', type=int, help='Maximum number of files to analyze')
    parser.add_argument('--window-size', type=int, help='Lines per duplicate-search block')
    parser.add_argument('--threshold', type=float, help='Minimum near-duplicate similarity (0-1)')
    parser.add_argument('--min-severity', choices=[s.value for s in Severity],
                        help='Drop security findings below this severity')
    parser.add_argument('--report', choices=REPORTS, default='summary', help='Output format')
    parser.add_argument('--name', default='', help='Repository name shown in the summary')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--log-file', type=Path, help='Also write logs to this file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        engine = AnalysisEngine(
            window_size=args.window_size,
            similarity_threshold=args.threshold,
            min_severity=args.min_severity,
            max_files=args.max_files,
        )
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    files = read_sources(args.paths)
    if not files:
        print("Error: no readable source files found", file=sys.stderr)
        return 1

    with engine:
        result = engine.analyze_repository(files, repository_name=args.name)
        if engine.settings.collect_timings:
            for stage, stats in engine.timings().items():
                logger.debug("%s: %s", stage, stats)

    sys.stdout.write(render(result, args.report))
    if not result.files:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
