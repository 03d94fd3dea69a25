"""
Metric models - per-function and per-file complexity figures, plus the
code issues found while measuring them.
"""

import math
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field

from ..constants import FunctionComplexityWeights


class FunctionUnit(BaseModel):
    """Metrics for one detected function (or the whole file in degraded mode)"""

    name: str = Field(..., description="Function name, or '<module>' for the whole file")
    start_line: int = Field(..., ge=1, description="Declaration line")
    end_line: int = Field(..., ge=1, description="Last line of the body (inclusive)")
    cyclomatic_complexity: int = Field(1, ge=1, description="1 + decision points")
    cognitive_complexity: int = Field(0, ge=0, description="Nesting-weighted decision points")
    nesting_depth: int = Field(0, ge=0, description="Deepest nesting inside the body")
    parameter_count: int = Field(0, ge=0, description="Declared parameters")

    model_config = {"frozen": True}

    @computed_field
    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    @computed_field
    @property
    def complexity_score(self) -> float:
        """0-1 blend of branching, nesting, parameters and length"""
        w = FunctionComplexityWeights
        raw = (
            self.cyclomatic_complexity * w.CYCLOMATIC
            + self.nesting_depth * w.NESTING
            + self.parameter_count * w.PARAMETERS
            + self.line_count / w.LENGTH_SCALE * w.LENGTH
        ) / w.DIVISOR
        return round(min(1.0, raw), 3)


class HalsteadMetrics(BaseModel):
    """Halstead size and difficulty estimates"""

    n1: int = Field(0, ge=0, description="Distinct operators")
    n2: int = Field(0, ge=0, description="Distinct operands")
    N1: int = Field(0, ge=0, description="Total operators")
    N2: int = Field(0, ge=0, description="Total operands")
    vocabulary: int = Field(0, ge=0, description="n1 + n2")
    length: int = Field(0, ge=0, description="N1 + N2")
    volume: float = Field(0.0, ge=0.0, description="length * log2(vocabulary)")
    difficulty: float = Field(0.0, ge=0.0, description="(n1 / 2) * (N2 / n2)")
    effort: float = Field(0.0, ge=0.0, description="difficulty * volume")

    model_config = {"frozen": True}


class FileMetrics(BaseModel):
    """Complexity metrics for one source file"""

    line_count: int = Field(0, ge=0)
    code_line_count: int = Field(0, ge=0)
    comment_line_count: int = Field(0, ge=0)
    blank_line_count: int = Field(0, ge=0)
    long_line_count: int = Field(0, ge=0, description="Lines longer than 100 characters")
    function_count: int = Field(0, ge=0)
    functions: List[FunctionUnit] = Field(default_factory=list)
    max_nesting_depth: int = Field(0, ge=0)
    nesting_levels: List[int] = Field(default_factory=list, description="Nesting level at the start of each line")
    cyclomatic_complexity: int = Field(1, ge=1)
    cognitive_complexity: int = Field(0, ge=0)
    halstead: HalsteadMetrics = Field(default_factory=HalsteadMetrics)
    maintainability_index: float = Field(100.0, ge=0.0, le=100.0)
    degraded: bool = Field(False, description="Function extraction fell back to a whole-file unit")

    model_config = {"frozen": True}

    @computed_field
    @property
    def comment_ratio(self) -> float:
        """Comment lines as a fraction of non-blank lines"""
        non_blank = self.code_line_count + self.comment_line_count
        if non_blank == 0:
            return 0.0
        return round(self.comment_line_count / non_blank, 3)

    @computed_field
    @property
    def average_function_length(self) -> float:
        if not self.functions:
            return float(self.code_line_count)
        return round(sum(f.line_count for f in self.functions) / len(self.functions), 2)

    @computed_field
    @property
    def overall_complexity(self) -> int:
        """0-10 mean of function scores, weighted by sqrt(line count)"""
        if not self.functions:
            return 0
        weights = [math.sqrt(f.line_count) for f in self.functions]
        total = sum(f.complexity_score * w for f, w in zip(self.functions, weights))
        return round(total / sum(weights) * FunctionComplexityWeights.FILE_SCALE)

    def line_heat(self) -> List[float]:
        """Per-line complexity: each line takes the score of the function covering it.

        Lines outside any function are 0.0. Where functions nest, the one
        declared later (the inner one) wins.
        """
        heat = [0.0] * self.line_count
        for unit in self.functions:
            for index in range(unit.start_line - 1, min(unit.end_line, self.line_count)):
                heat[index] = unit.complexity_score
        return heat

    def hotspots(self, limit: int = FunctionComplexityWeights.HOTSPOTS) -> List[FunctionUnit]:
        """The most complex functions, highest score first (stable for ties)"""
        return sorted(self.functions, key=lambda f: -f.complexity_score)[:limit]


class IssueType(str, Enum):
    """Category of a code issue"""
    CODE_STYLE = "code_style"
    NAMING = "naming"
    COMPLEXITY = "complexity"
    BEST_PRACTICE = "best_practice"


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CodeIssue(BaseModel):
    """A quality issue located on one line"""

    type: IssueType
    severity: IssueSeverity
    message: str
    line: Optional[int] = Field(None, ge=1, description="1-indexed line, None for file-level issues")
    suggestion: str = ""
    rule: str = Field(..., description="Short identifier of the check that raised it")

    model_config = {"frozen": True}
