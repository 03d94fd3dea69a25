"""
Complexity metrics over lexed source

Nesting, cyclomatic and cognitive complexity, Halstead metrics and the
Maintainability Index. The algorithms are the same for every dialect;
only the nesting model differs between brace and indentation blocks.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..constants import MaintainabilityIndex
from ..dialects import DialectRules
from ..lexing.source import LexedSource
from ..lexing.tokenizer import Token, TokenKind
from ..models.metrics import HalsteadMetrics


@dataclass(frozen=True)
class NestingProfile:
    """Per-line nesting information.

    Attributes:
        line_levels: Nesting level at the start of each line
        line_peaks: Deepest level reached on each line
        token_depths: Nesting level at each token, per line
        max_depth: Deepest level anywhere in the file
    """

    line_levels: list[int]
    line_peaks: list[int]
    token_depths: list[list[int]]
    max_depth: int


def indent_width(line: str, unit: int) -> int:
    width = 0
    for ch in line:
        if ch == ' ':
            width += 1
        elif ch == '\t':
            width += unit
        else:
            break
    return width


def _brace_profile(source: LexedSource) -> NestingProfile:
    depth = 0
    levels: list[int] = []
    peaks: list[int] = []
    token_depths: list[list[int]] = []
    for tokens in source.line_tokens:
        levels.append(depth)
        peak = depth
        depths = []
        for token in tokens:
            depths.append(depth)
            if token.text == '{':
                depth += 1
                peak = max(peak, depth)
            elif token.text == '}':
                depth = max(0, depth - 1)
        peaks.append(peak)
        token_depths.append(depths)
    return NestingProfile(levels, peaks, token_depths, max(peaks, default=0))


def _indent_profile(source: LexedSource) -> NestingProfile:
    unit = source.rules.indent_unit
    levels: list[int] = []
    token_depths: list[list[int]] = []
    previous_level = 0
    opens_block = False
    for line, tokens in zip(source.stripped_lines, source.line_tokens):
        if not line.strip():
            levels.append(previous_level)
            token_depths.append([])
            continue
        level = indent_width(line, unit) // unit
        if opens_block:
            level = max(level, previous_level + 1)
        levels.append(level)
        token_depths.append([level] * len(tokens))
        previous_level = level
        opens_block = line.rstrip().endswith(':')
    return NestingProfile(levels, list(levels), token_depths, max(levels, default=0))


def nesting_profile(source: LexedSource) -> NestingProfile:
    """Nesting levels by brace counting or by indentation, per dialect."""
    if source.rules.is_brace:
        return _brace_profile(source)
    return _indent_profile(source)


def is_decision_point(token: Token, rules: DialectRules) -> bool:
    return token.kind in (TokenKind.KEYWORD, TokenKind.OPERATOR) and token.text in rules.decision_points


def cyclomatic_complexity(tokens: Iterable[Token], rules: DialectRules) -> int:
    """1 + number of decision-point tokens."""
    return 1 + sum(1 for t in tokens if is_decision_point(t, rules))


def cognitive_complexity(
    source: LexedSource,
    profile: NestingProfile,
    start: int = 0,
    end: int | None = None,
    base_depth: int = 0,
) -> int:
    """Decision points weighted by their nesting level.

    Each decision point on lines ``[start, end)`` contributes
    ``max(1, depth - base_depth)``.
    """
    rules = source.rules
    end = source.line_count if end is None else end
    total = 0
    for index in range(start, end):
        for token, depth in zip(source.line_tokens[index], profile.token_depths[index]):
            if is_decision_point(token, rules):
                total += max(1, depth - base_depth)
    return total


def halstead_metrics(tokens: Sequence[Token]) -> HalsteadMetrics:
    """Operators are operator and keyword tokens; operands are the rest."""
    operators = [t.text for t in tokens if t.is_operator_like]
    operands = [t.text for t in tokens if not t.is_operator_like]
    n1 = len(set(operators))
    n2 = len(set(operands))
    N1 = len(operators)
    N2 = len(operands)
    vocabulary = n1 + n2
    length = N1 + N2
    volume = length * math.log2(max(1, vocabulary))
    difficulty = (n1 / 2) * (N2 / max(1, n2))
    return HalsteadMetrics(
        n1=n1,
        n2=n2,
        N1=N1,
        N2=N2,
        vocabulary=vocabulary,
        length=length,
        volume=round(volume, 2),
        difficulty=round(difficulty, 2),
        effort=round(difficulty * volume, 2),
    )


def maintainability_index(volume: float, cyclomatic: int, loc: int) -> float:
    """Maintainability Index rescaled to 0-100."""
    raw = (
        MaintainabilityIndex.BASE
        - MaintainabilityIndex.VOLUME_WEIGHT * math.log(max(1.0, volume))
        - MaintainabilityIndex.CYCLOMATIC_WEIGHT * cyclomatic
        - MaintainabilityIndex.LOC_WEIGHT * math.log(max(1, loc))
    )
    return round(min(100.0, max(0.0, raw * 100 / MaintainabilityIndex.BASE)), 2)
