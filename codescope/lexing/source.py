"""
LexedSource - one file lexed once and shared by every analysis.

Holds the raw lines, the comment-stripped lines (same count, same
numbering) and the tokens of each stripped line.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain

from ..dialects import DialectRules, LanguageDialect, get_rules
from .normalizer import CommentScan, scan_comments, split_lines
from .tokenizer import Token, tokenize


@dataclass(frozen=True)
class LexedSource:
    text: str
    rules: DialectRules
    raw_lines: list[str]
    stripped_lines: list[str]
    line_tokens: list[list[Token]]
    scan: CommentScan

    @classmethod
    def from_text(cls, text: str, dialect: LanguageDialect | DialectRules) -> LexedSource:
        rules = dialect if isinstance(dialect, DialectRules) else get_rules(dialect)
        raw_lines = split_lines(text)
        scan = scan_comments(text, rules)
        # Newlines survive stripping, so the first len(raw_lines) segments align
        segments = scan.stripped.split('\n')[:len(raw_lines)]
        stripped_lines = [s[:-1] if s.endswith('\r') else s for s in segments]
        stripped_lines.extend([''] * (len(raw_lines) - len(stripped_lines)))
        line_tokens = [tokenize(line, rules) for line in stripped_lines]
        return cls(
            text=text,
            rules=rules,
            raw_lines=raw_lines,
            stripped_lines=stripped_lines,
            line_tokens=line_tokens,
            scan=scan,
        )

    @property
    def dialect(self) -> LanguageDialect:
        return self.rules.dialect

    @property
    def line_count(self) -> int:
        return len(self.raw_lines)

    def tokens(self, start: int = 0, end: int | None = None) -> list[Token]:
        """Tokens of lines ``[start, end)`` (0-indexed), in order."""
        return list(chain.from_iterable(self.line_tokens[start:end]))
