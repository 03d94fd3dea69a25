"""
Tokenizer - flat token sequences from normalized text

One compiled pattern per dialect matches string and numeric literals,
words and a fixed operator alphabet. Words are then classified as
keywords, literal words (true, None, nil...) or identifiers.

Tokenization is total and deterministic: the same text always yields the
same tokens, which keeps block hashes stable across runs.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..dialects import DialectRules, LanguageDialect, get_rules


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    LITERAL = "literal"
    OPERATOR = "operator"


@dataclass(frozen=True)
class Token:
    """A lexeme with its dialect-agnostic class."""

    kind: TokenKind
    text: str

    @property
    def is_operator_like(self) -> bool:
        """Halstead operators are operator and keyword tokens."""
        return self.kind in (TokenKind.OPERATOR, TokenKind.KEYWORD)


def tokenize(normalized_text: str, dialect: LanguageDialect | DialectRules) -> list[Token]:
    """Split text into tokens. Never fails."""
    rules = dialect if isinstance(dialect, DialectRules) else get_rules(dialect)
    tokens: list[Token] = []
    for match in rules.token_pattern.finditer(normalized_text):
        group = match.lastgroup
        text = match.group()
        if group == 'word':
            if text in rules.keywords:
                kind = TokenKind.KEYWORD
            elif text in rules.literal_words:
                kind = TokenKind.LITERAL
            else:
                kind = TokenKind.IDENTIFIER
        elif group in ('string', 'number'):
            kind = TokenKind.LITERAL
        else:
            kind = TokenKind.OPERATOR
        tokens.append(Token(kind, text))
    return tokens


def token_texts(tokens: Iterable[Token]) -> list[str]:
    return [t.text for t in tokens]


def block_hash(texts: Iterable[str]) -> str:
    """SHA-256 over length-prefixed token texts.

    Length prefixes keep ``["ab", "c"]`` and ``["a", "bc"]`` apart, so equal
    hashes mean identical token sequences.
    """
    digest = hashlib.sha256()
    for text in texts:
        encoded = text.encode('utf-8')
        digest.update(f'{len(encoded)}:'.encode('ascii'))
        digest.update(encoded)
    return digest.hexdigest()
