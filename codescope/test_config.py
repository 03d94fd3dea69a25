"""
Tests for engine configuration and settings validation.

Run with: python -m pytest codescope/test_config.py -v
"""

import pytest

from codescope.config import AnalysisSettings, EngineConfig, build_settings
from codescope.constants import DuplicationDefaults, EngineDefaults
from codescope.errors import ConfigurationError
from codescope.models.security import Severity


class TestAnalysisSettings:
    """Tests for AnalysisSettings defaults and bounds."""

    def test_defaults(self):
        settings = AnalysisSettings()
        assert settings.window_size == DuplicationDefaults.WINDOW_SIZE
        assert settings.similarity_threshold == DuplicationDefaults.SIMILARITY_THRESHOLD
        assert settings.max_files == EngineDefaults.MAX_FILES
        assert settings.min_severity == Severity.INFO
        assert settings.max_workers is None

    def test_severity_normalized(self):
        assert build_settings(min_severity=' HIGH ').min_severity == Severity.HIGH

    @pytest.mark.parametrize('field,value', [
        ('window_size', 0),
        ('similarity_threshold', 1.5),
        ('similarity_threshold', -0.1),
        ('max_files', 0),
        ('max_workers', 0),
        ('cache_size', -1),
        ('estimator_timeout', 0),
        ('min_severity', 'severe'),
    ])
    def test_out_of_bounds(self, field, value):
        with pytest.raises(ConfigurationError) as excinfo:
            build_settings(**{field: value})
        assert field in str(excinfo.value)

    def test_frozen(self):
        settings = AnalysisSettings()
        with pytest.raises(Exception):
            settings.window_size = 9


class TestFromEnv:
    """Tests for environment-driven defaults."""

    def test_uses_engine_config(self, monkeypatch):
        monkeypatch.setattr(EngineConfig, 'WINDOW_SIZE', 8)
        monkeypatch.setattr(EngineConfig, 'MIN_SEVERITY', 'medium')
        settings = AnalysisSettings.from_env()
        assert settings.window_size == 8
        assert settings.min_severity == Severity.MEDIUM

    def test_overrides_beat_environment(self, monkeypatch):
        monkeypatch.setattr(EngineConfig, 'WINDOW_SIZE', 8)
        assert AnalysisSettings.from_env(window_size=4).window_size == 4

    def test_none_override_ignored(self, monkeypatch):
        monkeypatch.setattr(EngineConfig, 'MAX_FILES', 25)
        assert AnalysisSettings.from_env(max_files=None).max_files == 25

    def test_invalid_environment_raises(self, monkeypatch):
        monkeypatch.setattr(EngineConfig, 'SIMILARITY_THRESHOLD', 2.0)
        with pytest.raises(ConfigurationError):
            AnalysisSettings.from_env()

    def test_to_dict_sections(self):
        config = EngineConfig.to_dict()
        assert set(config) == {'duplicates', 'security', 'engine', 'debug'}
        assert config['duplicates']['window_size'] == EngineConfig.WINDOW_SIZE


class TestFingerprint:
    """Tests for the settings fingerprint used in cache keys."""

    def test_stable(self):
        assert AnalysisSettings().fingerprint() == AnalysisSettings().fingerprint()

    def test_analysis_settings_change_it(self):
        assert AnalysisSettings().fingerprint() != AnalysisSettings(similarity_threshold=0.8).fingerprint()
        assert AnalysisSettings().fingerprint() != AnalysisSettings(min_severity='high').fingerprint()

    def test_resource_settings_do_not(self):
        base = AnalysisSettings().fingerprint()
        assert AnalysisSettings(max_files=50, cache_size=0, max_workers=2).fingerprint() == base
