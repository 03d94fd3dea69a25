"""
Engine Configuration

Centralized configuration for duplicate detection, security filtering,
batch limits and estimator timeouts. Defaults come from environment
variables so thresholds can be tuned without modifying code; callers get
a validated, immutable AnalysisSettings built from them.
"""

from __future__ import annotations

import hashlib
import json
import os
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .constants import DuplicationDefaults, EngineDefaults
from .errors import ConfigurationError
from .models.security import Severity


def _optional_int(name: str) -> int | None:
    value = os.getenv(name, '').strip()
    return int(value) if value else None


class EngineConfig:
    """Environment-driven defaults for the analysis engine."""

    # Debug mode - set CODESCOPE_DEBUG=1 to enable verbose output and stage timing
    DEBUG = os.environ.get('CODESCOPE_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Duplicate detection
    WINDOW_SIZE = int(os.getenv('CODESCOPE_WINDOW_SIZE', str(DuplicationDefaults.WINDOW_SIZE)))
    MIN_BLOCK_TOKENS = int(os.getenv('CODESCOPE_MIN_BLOCK_TOKENS', str(DuplicationDefaults.MIN_BLOCK_TOKENS)))
    MIN_BLOCK_CHARS = int(os.getenv('CODESCOPE_MIN_BLOCK_CHARS', str(DuplicationDefaults.MIN_BLOCK_CHARS)))
    SIMILARITY_THRESHOLD = float(os.getenv('CODESCOPE_SIMILARITY_THRESHOLD', str(DuplicationDefaults.SIMILARITY_THRESHOLD)))
    NEAR_EXACT_THRESHOLD = float(os.getenv('CODESCOPE_NEAR_EXACT_THRESHOLD', str(DuplicationDefaults.NEAR_EXACT_THRESHOLD)))
    BLEND_GATE = float(os.getenv('CODESCOPE_BLEND_GATE', str(DuplicationDefaults.BLEND_GATE)))

    # Security
    MIN_SEVERITY = os.getenv('CODESCOPE_MIN_SEVERITY', Severity.INFO.value)

    # Batch and resources
    MAX_FILES = int(os.getenv('CODESCOPE_MAX_FILES', str(EngineDefaults.MAX_FILES)))
    MAX_WORKERS = _optional_int('CODESCOPE_MAX_WORKERS')  # None: one per CPU
    CACHE_SIZE = int(os.getenv('CODESCOPE_CACHE_SIZE', str(EngineDefaults.CACHE_SIZE)))
    ESTIMATOR_TIMEOUT = float(os.getenv('CODESCOPE_ESTIMATOR_TIMEOUT', str(EngineDefaults.ESTIMATOR_TIMEOUT)))

    @classmethod
    def to_dict(cls) -> dict:
        """Export configuration as dictionary."""
        return {
            'duplicates': {
                'window_size': cls.WINDOW_SIZE,
                'min_block_tokens': cls.MIN_BLOCK_TOKENS,
                'min_block_chars': cls.MIN_BLOCK_CHARS,
                'similarity_threshold': cls.SIMILARITY_THRESHOLD,
                'near_exact_threshold': cls.NEAR_EXACT_THRESHOLD,
                'blend_gate': cls.BLEND_GATE,
            },
            'security': {
                'min_severity': cls.MIN_SEVERITY,
            },
            'engine': {
                'max_files': cls.MAX_FILES,
                'max_workers': cls.MAX_WORKERS,
                'cache_size': cls.CACHE_SIZE,
                'estimator_timeout': cls.ESTIMATOR_TIMEOUT,
            },
            'debug': cls.DEBUG,
        }


class AnalysisSettings(BaseModel):
    """Validated settings for one engine instance"""

    window_size: int = Field(DuplicationDefaults.WINDOW_SIZE, ge=1, description="Lines per duplicate-search block")
    min_block_tokens: int = Field(DuplicationDefaults.MIN_BLOCK_TOKENS, ge=0, description="Blocks with fewer tokens are ignored")
    min_block_chars: int = Field(DuplicationDefaults.MIN_BLOCK_CHARS, ge=0, description="Blocks with shorter normalized text are ignored")
    similarity_threshold: float = Field(DuplicationDefaults.SIMILARITY_THRESHOLD, ge=0.0, le=1.0, description="Minimum near-duplicate similarity")
    near_exact_threshold: float = Field(DuplicationDefaults.NEAR_EXACT_THRESHOLD, ge=0.0, le=1.0, description="Similarity above which a pair is near-exact")
    blend_gate: float = Field(DuplicationDefaults.BLEND_GATE, ge=0.0, le=1.0, description="Jaccard above which the estimator is blended in")
    min_severity: Severity = Field(Severity.INFO, description="Security findings below this severity are dropped")
    max_files: int = Field(EngineDefaults.MAX_FILES, ge=1, description="Files analyzed per repository run")
    max_workers: Optional[int] = Field(None, ge=1, description="Worker threads; None means one per CPU")
    cache_size: int = Field(EngineDefaults.CACHE_SIZE, ge=0, description="Result cache entries; 0 disables caching")
    estimator_timeout: float = Field(EngineDefaults.ESTIMATOR_TIMEOUT, gt=0.0, description="Seconds to wait for an estimator")
    collect_timings: bool = Field(False, description="Record per-stage timings")

    model_config = {"frozen": True}

    @field_validator('min_severity', mode='before')
    @classmethod
    def normalize_severity(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_env(cls, **overrides) -> AnalysisSettings:
        """Settings from EngineConfig defaults, with keyword overrides."""
        values = {
            'window_size': EngineConfig.WINDOW_SIZE,
            'min_block_tokens': EngineConfig.MIN_BLOCK_TOKENS,
            'min_block_chars': EngineConfig.MIN_BLOCK_CHARS,
            'similarity_threshold': EngineConfig.SIMILARITY_THRESHOLD,
            'near_exact_threshold': EngineConfig.NEAR_EXACT_THRESHOLD,
            'blend_gate': EngineConfig.BLEND_GATE,
            'min_severity': EngineConfig.MIN_SEVERITY,
            'max_files': EngineConfig.MAX_FILES,
            'max_workers': EngineConfig.MAX_WORKERS,
            'cache_size': EngineConfig.CACHE_SIZE,
            'estimator_timeout': EngineConfig.ESTIMATOR_TIMEOUT,
            'collect_timings': EngineConfig.DEBUG,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return build_settings(**values)

    def fingerprint(self) -> str:
        """Short digest of the settings that change analysis output"""
        relevant = self.model_dump(mode='json', exclude={'max_files', 'max_workers', 'cache_size', 'collect_timings'})
        encoded = json.dumps(relevant, sort_keys=True).encode('utf-8')
        return hashlib.sha256(encoded).hexdigest()[:16]


def build_settings(**values) -> AnalysisSettings:
    """Validate settings, surfacing failures as ConfigurationError.

    Raises:
        ConfigurationError: If any value violates its bounds
    """
    try:
        return AnalysisSettings(**values)
    except ValidationError as exc:
        problems = '; '.join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigurationError(f"Invalid analysis settings: {problems}") from exc
