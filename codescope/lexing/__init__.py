"""Comment stripping, whitespace normalization and tokenization."""

from .normalizer import (
    CommentScan,
    scan_comments,
    strip_comments,
    collapse_whitespace,
    normalize,
    split_lines,
)
from .tokenizer import Token, TokenKind, tokenize, token_texts, block_hash
from .source import LexedSource

__all__ = [
    'CommentScan',
    'scan_comments',
    'strip_comments',
    'collapse_whitespace',
    'normalize',
    'split_lines',
    'Token',
    'TokenKind',
    'tokenize',
    'token_texts',
    'block_hash',
    'LexedSource',
]
