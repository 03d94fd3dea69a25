"""
Block extraction for duplicate search

Slides a fixed-size line window over one file. Each window's
comment-stripped tokens are hashed into a CodeBlock; windows with too
little text or too few tokens are skipped as noise.
"""

from __future__ import annotations

from itertools import chain

from ..lexing.normalizer import collapse_whitespace
from ..lexing.source import LexedSource
from ..lexing.tokenizer import block_hash
from ..models.code import CodeBlock


def extract_blocks(
    source: LexedSource,
    source_id: str,
    window_size: int,
    min_tokens: int,
    min_chars: int,
) -> list[CodeBlock]:
    """Every qualifying ``window_size``-line block, in line order."""
    blocks: list[CodeBlock] = []
    for start in range(0, source.line_count - window_size + 1):
        end = start + window_size
        normalized = collapse_whitespace('\n'.join(source.stripped_lines[start:end]))
        if len(normalized) < min_chars:
            continue
        texts = [t.text for t in chain.from_iterable(source.line_tokens[start:end])]
        if len(texts) < min_tokens:
            continue
        blocks.append(CodeBlock(
            source_id=source_id,
            start_line=start + 1,
            end_line=end,
            tokens=texts,
            block_hash=block_hash(texts),
            source_code='\n'.join(source.raw_lines[start:end]),
        ))
    return blocks
