"""
Security finding models

Findings come from two origins: deterministic regex rules, and the
optional keyword-proximity pass driven by a vulnerability estimator.
Estimated findings always carry a high false-positive likelihood.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field


class Severity(str, Enum):
    """Severity of a security finding"""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Higher is more severe"""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
    Severity.INFO: 0,
}


class VulnerabilityType(str, Enum):
    """Top-10 style vulnerability taxonomy"""
    INJECTION = "injection"
    BROKEN_AUTHENTICATION = "broken_authentication"
    SENSITIVE_DATA_EXPOSURE = "sensitive_data_exposure"
    XXE = "xxe"
    BROKEN_ACCESS_CONTROL = "broken_access_control"
    SECURITY_MISCONFIGURATION = "security_misconfiguration"
    XSS = "xss"
    INSECURE_DESERIALIZATION = "insecure_deserialization"
    VULNERABLE_COMPONENTS = "vulnerable_components"
    INSUFFICIENT_LOGGING = "insufficient_logging"
    OTHER = "other"


class FindingOrigin(str, Enum):
    RULE = "rule"
    ESTIMATED = "estimated"


class Likelihood(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SecurityFinding(BaseModel):
    """One regex match of one rule, or one estimated hit"""

    type: VulnerabilityType
    severity: Severity
    line: int = Field(..., ge=1, description="1-indexed line of the match")
    message: str
    matched_text: str = Field("", description="Trimmed source line containing the match")
    cwe: Optional[str] = Field(None, description="Common Weakness Enumeration id, e.g. CWE-95")
    recommendation: str = ""
    example_fix: Optional[str] = None
    references: List[str] = Field(default_factory=list)
    false_positive_likelihood: Likelihood = Likelihood.MEDIUM
    origin: FindingOrigin = FindingOrigin.RULE
    confidence: float = Field(0.8, ge=0.0, le=1.0)

    model_config = {"frozen": True}


class SecuritySummary(BaseModel):
    """Finding counts by severity and the deduction-based score"""

    critical: int = Field(0, ge=0)
    high: int = Field(0, ge=0)
    medium: int = Field(0, ge=0)
    low: int = Field(0, ge=0)
    info: int = Field(0, ge=0)
    score: int = Field(100, ge=0, le=100, description="100 minus severity-weighted deductions")

    model_config = {"frozen": True}

    @computed_field
    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low + self.info


class SecurityReport(BaseModel):
    """Findings for one file, ordered by severity, with a summary"""

    findings: List[SecurityFinding] = Field(default_factory=list)
    summary: SecuritySummary = Field(default_factory=SecuritySummary)
    recommendations: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @computed_field
    @property
    def estimated_count(self) -> int:
        """Findings produced by the estimator pass rather than by rules"""
        return sum(1 for f in self.findings if f.origin == FindingOrigin.ESTIMATED)
