"""
Metrics Extractor

Combines line counting, nesting, complexity, Halstead and function
extraction into one FileMetrics record. A function extraction failure
degrades to a single whole-file unit instead of aborting.
"""

from __future__ import annotations

from ..constants import LineThresholds
from ..errors import UnbalancedBlockError
from ..lexing.source import LexedSource
from ..log import get_logger
from ..models.metrics import FileMetrics, FunctionUnit
from .complexity import (
    NestingProfile,
    cognitive_complexity,
    cyclomatic_complexity,
    halstead_metrics,
    maintainability_index,
    nesting_profile,
)
from .functions import extract_functions
from .issues import MODULE_UNIT

logger = get_logger('metrics')


def _whole_file_unit(source: LexedSource, profile: NestingProfile, cyclomatic: int, cognitive: int) -> FunctionUnit:
    return FunctionUnit(
        name=MODULE_UNIT,
        start_line=1,
        end_line=max(1, source.line_count),
        cyclomatic_complexity=cyclomatic,
        cognitive_complexity=cognitive,
        nesting_depth=profile.max_depth,
        parameter_count=0,
    )


def extract_metrics(source: LexedSource, source_id: str = '') -> FileMetrics:
    """Compute every file-level metric for ``source``."""
    rules = source.rules
    profile = nesting_profile(source)
    tokens = source.tokens()

    cyclomatic = cyclomatic_complexity(tokens, rules)
    cognitive = cognitive_complexity(source, profile)
    halstead = halstead_metrics(tokens)

    blank_lines = {i + 1 for i, line in enumerate(source.raw_lines) if not line.strip()}
    comment_lines = {
        n for n in source.scan.pure_comment_lines()
        if n <= source.line_count and n not in blank_lines
    }
    code_line_count = source.line_count - len(blank_lines) - len(comment_lines)
    long_lines = sum(1 for line in source.raw_lines if len(line) > LineThresholds.LONG_LINE)

    degraded = False
    try:
        functions = extract_functions(source, profile)
    except UnbalancedBlockError as exc:
        logger.warning("%s: %s; measuring the whole file as one unit", source_id or '<source>', exc)
        functions = [_whole_file_unit(source, profile, cyclomatic, cognitive)]
        degraded = True

    return FileMetrics(
        line_count=source.line_count,
        code_line_count=code_line_count,
        comment_line_count=len(comment_lines),
        blank_line_count=len(blank_lines),
        long_line_count=long_lines,
        function_count=len(functions),
        functions=functions,
        max_nesting_depth=profile.max_depth,
        nesting_levels=profile.line_levels,
        cyclomatic_complexity=cyclomatic,
        cognitive_complexity=cognitive,
        halstead=halstead,
        maintainability_index=maintainability_index(halstead.volume, cyclomatic, code_line_count),
        degraded=degraded,
    )
