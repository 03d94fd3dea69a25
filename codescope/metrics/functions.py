"""
Function extraction

Finds function declarations line by line with the dialect's patterns,
then locates each body end by brace balance (brace dialects) or by the
first later line indented no deeper than the declaration (indent
dialects). Unbalanced braces raise UnbalancedBlockError so the caller can
fall back to treating the whole file as a single unit.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..dialects import NON_TYPE_WORDS, DialectRules, LanguageDialect
from ..errors import UnbalancedBlockError
from ..lexing.source import LexedSource
from ..lexing.tokenizer import Token, tokenize
from ..models.metrics import FunctionUnit
from .complexity import (
    NestingProfile,
    indent_width,
    cognitive_complexity,
    cyclomatic_complexity,
)

# Lines scanned after a declaration for its opening brace or signature end
BRACE_LOOKAHEAD = 3
SIGNATURE_LOOKAHEAD = 20

_IGNORED_PYTHON_PARAMETERS = frozenset({'self', 'cls', '*', '/'})
_OPENERS = '([{'
_CLOSERS = ')]}'


@dataclass(frozen=True)
class FunctionSpan:
    """A located function; lines are 0-indexed and inclusive."""

    name: str
    start: int
    end: int
    parameter_count: int
    has_body: bool = True


def match_declaration(line: str, rules: DialectRules):
    """Return the first declaration match on ``line``, or None."""
    for pattern in rules.function_patterns:
        match = pattern.search(line)
        if not match:
            continue
        name = match.group('name')
        rtype = match.groupdict().get('rtype')
        short_name = name.rsplit('::', 1)[-1].lstrip('~')
        if short_name in rules.keywords or name in NON_TYPE_WORDS:
            continue
        if rtype and rtype.strip() in NON_TYPE_WORDS:
            continue
        return match
    return None


def count_parameters(signature: str, rules: DialectRules) -> int:
    """Count top-level comma separated entries of the first parameter list.

    ``signature`` starts right after the function name. An arrow function
    whose ``=>`` comes before any parenthesis has a single bare parameter.
    """
    open_index = signature.find('(')
    arrow_index = signature.find('=>')
    if open_index == -1 or (arrow_index != -1 and arrow_index < open_index):
        return 1 if arrow_index != -1 else 0

    depth = 0
    current: list[str] = []
    entries: list[str] = []
    for ch in signature[open_index + 1:]:
        if ch in _OPENERS or (rules.typed_parameters and ch == '<'):
            depth += 1
        elif ch in _CLOSERS or (rules.typed_parameters and ch == '>'):
            if depth == 0 and ch == ')':
                break
            depth = max(0, depth - 1)
        elif ch == ',' and depth == 0:
            entries.append(''.join(current))
            current = []
            continue
        current.append(ch)
    entries.append(''.join(current))

    names = [e.strip() for e in entries if e.strip()]
    if rules.dialect == LanguageDialect.PYTHON:
        names = [
            n for n in names
            if n.split(':')[0].split('=')[0].strip() not in _IGNORED_PYTHON_PARAMETERS
        ]
    return len(names)


def _brace_end(
    source: LexedSource,
    start: int,
    name: str,
    head: list[Token] | None = None,
) -> tuple[int, bool]:
    """Return (end line, has_body) for a brace-dialect declaration.

    ``head`` replaces the tokens of the declaration line, starting at the
    function name. Braces inside the parameter list (destructuring, object
    defaults, inline types) never open the body.
    """
    total = source.line_count
    depth = 0
    signature_depth = 0
    opened = False
    for index in range(start, total):
        tokens = head if index == start and head is not None else source.line_tokens[index]
        for token in tokens:
            if not opened:
                if token.text in ('(', '['):
                    signature_depth += 1
                elif token.text in (')', ']'):
                    signature_depth = max(0, signature_depth - 1)
                elif signature_depth > 0:
                    continue
                elif token.text == ';':
                    return index, False
                elif token.text == '{':
                    opened = True
                    depth = 1
                continue
            if token.text == '{':
                depth += 1
            elif token.text == '}':
                depth -= 1
                if depth == 0:
                    return index, True
        if not opened:
            scanned = index - start + 1
            if scanned >= SIGNATURE_LOOKAHEAD or (signature_depth == 0 and scanned >= BRACE_LOOKAHEAD):
                return start, False
    if not opened:
        return start, False
    raise UnbalancedBlockError(name, start + 1)


def _signature_end(source: LexedSource, start: int) -> int:
    depth = 0
    last = min(source.line_count, start + SIGNATURE_LOOKAHEAD)
    for index in range(start, last):
        for token in source.line_tokens[index]:
            if token.text in _OPENERS:
                depth += 1
            elif token.text in _CLOSERS:
                depth -= 1
        if depth <= 0:
            return index
    return start


def _indent_end(source: LexedSource, start: int) -> int:
    unit = source.rules.indent_unit
    indent = indent_width(source.stripped_lines[start], unit)
    end = _signature_end(source, start)
    for index in range(end + 1, source.line_count):
        line = source.stripped_lines[index]
        if not line.strip():
            continue
        if indent_width(line, unit) <= indent:
            break
        end = index
    return end


def find_functions(source: LexedSource) -> list[FunctionSpan]:
    """Locate every function declaration in the file.

    Raises:
        UnbalancedBlockError: If a brace-delimited body never closes
    """
    rules = source.rules
    spans: list[FunctionSpan] = []
    for index, line in enumerate(source.stripped_lines):
        match = match_declaration(line, rules)
        if match is None:
            continue
        name = match.group('name')
        signature = '\n'.join(
            [line[match.end('name'):]] + source.stripped_lines[index + 1:index + SIGNATURE_LOOKAHEAD]
        )
        parameters = count_parameters(signature, rules)
        if rules.is_brace:
            head = tokenize(line[match.start('name'):], rules)
            end, has_body = _brace_end(source, index, name, head)
        else:
            end, has_body = _indent_end(source, index), True
        spans.append(FunctionSpan(name, index, end, parameters, has_body))
    return spans


def measure_function(span: FunctionSpan, source: LexedSource, profile: NestingProfile) -> FunctionUnit:
    """Metrics for one located function."""
    base = profile.line_levels[span.start]
    peak = max(profile.line_peaks[span.start:span.end + 1], default=base)
    # The body's own block is level 1 relative to the declaration
    nesting = max(0, peak - base - (1 if span.has_body else 0))
    return FunctionUnit(
        name=span.name,
        start_line=span.start + 1,
        end_line=span.end + 1,
        cyclomatic_complexity=cyclomatic_complexity(source.tokens(span.start, span.end + 1), source.rules),
        cognitive_complexity=cognitive_complexity(source, profile, span.start, span.end + 1, base),
        nesting_depth=nesting,
        parameter_count=span.parameter_count,
    )


def extract_functions(source: LexedSource, profile: NestingProfile) -> list[FunctionUnit]:
    """Locate and measure every function.

    Raises:
        UnbalancedBlockError: If a brace-delimited body never closes
    """
    return [measure_function(span, source, profile) for span in find_functions(source)]
