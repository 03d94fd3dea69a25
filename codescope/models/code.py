"""
Code block and duplicate pair models

A CodeBlock is a fixed-size window of lines considered as one unit for
duplicate search. A DuplicatePair links two blocks from the same file and
records how similar they are.
"""

from enum import Enum
from typing import List
from pydantic import BaseModel, Field, computed_field, model_validator


class DuplicateKind(str, Enum):
    """How closely two blocks match"""
    EXACT = "exact"                  # identical normalized token sequence
    NEAR_EXACT = "near_exact"        # similarity above the near-exact cutoff
    REFACTORABLE = "refactorable"    # similar enough to share an abstraction


class Impact(str, Enum):
    """Impact of a duplicate pair, by block size"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CodeBlock(BaseModel):
    """A contiguous, 1-indexed, inclusive line range of one source file"""

    source_id: str = Field(..., description="Identifier of the source file (usually its path)")
    start_line: int = Field(..., ge=1, description="First line of the block")
    end_line: int = Field(..., ge=1, description="Last line of the block (inclusive)")
    tokens: List[str] = Field(default_factory=list, description="Normalized token texts in order")
    block_hash: str = Field(..., description="SHA-256 of the normalized token sequence")
    source_code: str = Field("", description="Original text of the block")

    model_config = {"frozen": True}

    @computed_field
    @property
    def line_count(self) -> int:
        """Number of lines covered by the block"""
        return self.end_line - self.start_line + 1

    def line_range(self) -> range:
        """Lines covered by the block, for set arithmetic"""
        return range(self.start_line, self.end_line + 1)

    def overlaps(self, other: "CodeBlock") -> bool:
        """True when both blocks share at least one line"""
        return self.start_line <= other.end_line and other.start_line <= self.end_line


class DuplicatePair(BaseModel):
    """Two blocks of the same file that duplicate each other"""

    block_a: CodeBlock = Field(..., description="The earlier block")
    block_b: CodeBlock = Field(..., description="The later block")
    similarity: float = Field(..., ge=0.0, le=1.0, description="Similarity score")
    kind: DuplicateKind = Field(..., description="Exact, near-exact or refactorable")
    impact: Impact = Field(..., description="Impact derived from block size")
    estimator_used: bool = Field(False, description="Whether a similarity estimator was blended in")

    model_config = {"frozen": True}

    @model_validator(mode='after')
    def check_kind(self) -> "DuplicatePair":
        """An exact pair has similarity 1.0 and identical hashes, and vice versa"""
        identical = self.similarity == 1.0 and self.block_a.block_hash == self.block_b.block_hash
        if (self.kind == DuplicateKind.EXACT) != identical:
            raise ValueError(
                f"kind={self.kind.value} is inconsistent with similarity={self.similarity} "
                f"and block hashes"
            )
        return self


class DuplicationStats(BaseModel):
    """Aggregate duplication figures for one file"""

    total_lines: int = Field(0, ge=0, description="Lines in the file")
    total_duplicate_lines: int = Field(0, ge=0, description="Lines covered by accepted pairs")
    duplicate_percentage: float = Field(0.0, ge=0.0, le=100.0, description="Duplicate lines as % of file")
    duplicate_blocks: int = Field(0, ge=0, description="Number of accepted pairs")
    average_block_size: float = Field(0.0, ge=0.0, description="Average A-side block size in lines")
    impact_score: int = Field(0, ge=0, le=100, description="Weighted duplication impact")
    recommendations: List[str] = Field(default_factory=list, description="Refactoring advice")

    model_config = {"frozen": True}
