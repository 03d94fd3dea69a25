"""
Normalizer - comment stripping and whitespace collapsing

A single stateful character scan removes line comments, block comments and
(for Python) triple-quoted strings while skipping over string literals so
that comment markers inside strings survive. Newlines are always kept, so
line numbers of the stripped text match the original.

Malformed input never raises: an unterminated block comment runs to end of
file and an unterminated single-line string closes at the newline.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..dialects import DialectRules, LanguageDialect, get_rules

_WHITESPACE_RUN = re.compile(r'\s+')


@dataclass(frozen=True)
class CommentScan:
    """Result of one comment-stripping scan.

    Attributes:
        stripped: Source with comments removed and newlines preserved
        comment_lines: 1-indexed lines containing comment text
        code_lines: 1-indexed lines containing non-comment text
    """

    stripped: str
    comment_lines: frozenset[int] = field(default_factory=frozenset)
    code_lines: frozenset[int] = field(default_factory=frozenset)

    def pure_comment_lines(self) -> frozenset[int]:
        """Lines with comment text and nothing else."""
        return self.comment_lines - self.code_lines


def _as_rules(dialect: LanguageDialect | DialectRules) -> DialectRules:
    if isinstance(dialect, DialectRules):
        return dialect
    return get_rules(dialect)


def _string_end(text: str, start: int, quote: str, multiline: bool) -> int:
    """Index just past the string literal opened at ``start``."""
    i = start + 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '\\':
            i += 2
            continue
        if ch == quote:
            return i + 1
        if ch == '\n' and not multiline:
            return i
        i += 1
    return n


def scan_comments(text: str, dialect: LanguageDialect | DialectRules) -> CommentScan:
    """Strip comments from ``text`` and record which lines held comments."""
    rules = _as_rules(dialect)
    line_comment = rules.line_comment
    block_open, block_close = rules.block_comment or (None, None)
    docstrings = rules.docstring_delimiters
    quotes = rules.string_quotes
    multiline = rules.multiline_quotes

    out: list[str] = []
    comment_lines: set[int] = set()
    code_lines: set[int] = set()
    line = 1
    i = 0
    n = len(text)

    def consume_comment(stop: int) -> None:
        nonlocal line
        span = text[i:stop]
        newlines = span.count('\n')
        comment_lines.update(range(line, line + newlines + 1))
        out.append('\n' * newlines)
        line += newlines

    while i < n:
        ch = text[i]

        if ch == '\n':
            out.append(ch)
            line += 1
            i += 1
            continue

        if block_open and text.startswith(block_open, i):
            end = text.find(block_close, i + len(block_open))
            stop = n if end == -1 else end + len(block_close)
            consume_comment(stop)
            i = stop
            continue

        delimiter = next((d for d in docstrings if text.startswith(d, i)), None)
        if delimiter:
            end = text.find(delimiter, i + len(delimiter))
            stop = n if end == -1 else end + len(delimiter)
            consume_comment(stop)
            i = stop
            continue

        if line_comment and text.startswith(line_comment, i):
            end = text.find('\n', i)
            stop = n if end == -1 else end
            comment_lines.add(line)
            i = stop
            continue

        if ch in quotes:
            stop = _string_end(text, i, ch, ch in multiline)
            literal = text[i:stop]
            newlines = literal.count('\n')
            code_lines.update(range(line, line + newlines + 1))
            out.append(literal)
            line += newlines
            i = stop
            continue

        if not ch.isspace():
            code_lines.add(line)
        out.append(ch)
        i += 1

    return CommentScan(
        stripped=''.join(out),
        comment_lines=frozenset(comment_lines),
        code_lines=frozenset(code_lines),
    )


def strip_comments(text: str, dialect: LanguageDialect | DialectRules) -> str:
    """Remove comments, keeping every newline in place."""
    return scan_comments(text, dialect).stripped


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces and trim the ends."""
    return _WHITESPACE_RUN.sub(' ', text).strip()


def normalize(text: str, dialect: LanguageDialect | DialectRules) -> str:
    """Comment-free, whitespace-collapsed text used for hashing."""
    return collapse_whitespace(strip_comments(text, dialect))


def split_lines(text: str) -> list[str]:
    """Split on newlines the way editors count lines.

    A single trailing newline does not start a new line, carriage returns
    are dropped, and empty text has no lines at all.
    """
    if not text:
        return []
    lines = text.split('\n')
    if lines[-1] == '':
        lines.pop()
    return [line[:-1] if line.endswith('\r') else line for line in lines]
