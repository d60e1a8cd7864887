#!/usr/bin/env python3
"""
Tests for src/config.py

Tests cover:
- Configuration imports
- validate_config() function
- YAML run overrides
"""
from __future__ import annotations

import pytest
from pathlib import Path
from unittest.mock import patch


class TestConfigImports:
    """Tests for configuration module imports."""

    def test_import_distance_settings(self):
        from config import (
            EARTH_RADIUS_M,
            WGS84_A,
            WGS84_B,
            WGS84_F,
            VINCENTY_TOLERANCE,
            VINCENTY_MAX_ITER,
            DEFAULT_DIST_FUNCTION,
        )
        assert EARTH_RADIUS_M == 6_371_008.8
        assert WGS84_B == pytest.approx(6_356_752.314245, abs=1e-3)
        assert 0 < WGS84_F < 0.01
        assert WGS84_A > WGS84_B
        assert VINCENTY_TOLERANCE == 1e-12
        assert VINCENTY_MAX_ITER == 200
        assert DEFAULT_DIST_FUNCTION == 'Haversine'

    def test_import_interpolation_settings(self):
        from config import DEFAULT_DIST_TRANSFORM, DEFAULT_DECAY, MIN_WEIGHT_DISTANCE_M
        assert DEFAULT_DIST_TRANSFORM == 'level'
        assert DEFAULT_DECAY == 2
        assert MIN_WEIGHT_DISTANCE_M > 0

    def test_import_parallel_settings(self):
        from config import PARALLEL_ENABLED, PARALLEL_MAX_WORKERS, CANCEL_CHECK_EVERY
        assert isinstance(PARALLEL_ENABLED, bool)
        assert PARALLEL_MAX_WORKERS is None or PARALLEL_MAX_WORKERS > 0
        assert CANCEL_CHECK_EVERY >= 1

    def test_project_root(self):
        from config import PROJECT_ROOT
        assert isinstance(PROJECT_ROOT, Path)
        assert (PROJECT_ROOT / 'src').exists()


class TestValidateConfig:
    """Tests for validate_config() function."""

    def test_valid_config(self):
        from config import validate_config
        assert validate_config() is True

    def test_invalid_function(self):
        import config
        with patch.object(config, 'DEFAULT_DIST_FUNCTION', 'Euclidean'):
            with pytest.raises(ValueError, match='DEFAULT_DIST_FUNCTION'):
                config.validate_config()

    def test_collects_all_errors(self):
        import config
        with patch.object(config, 'VINCENTY_MAX_ITER', 0), \
                patch.object(config, 'DEFAULT_DECAY', -1):
            with pytest.raises(ValueError) as exc_info:
                config.validate_config()
        message = str(exc_info.value)
        assert 'VINCENTY_MAX_ITER' in message
        assert 'DEFAULT_DECAY' in message


class TestLoadOverrides:
    """Tests for load_overrides() function."""

    def test_defaults(self):
        from config import load_overrides, OVERRIDABLE
        assert load_overrides() == OVERRIDABLE

    def test_does_not_mutate_defaults(self, tmp_path):
        from config import load_overrides, OVERRIDABLE
        path = tmp_path / 'run.yml'
        path.write_text("decay: 3\n")
        settings = load_overrides(path)
        assert settings['decay'] == 3
        assert OVERRIDABLE['decay'] == 2.0

    def test_partial_override(self, tmp_path):
        from config import load_overrides
        path = tmp_path / 'run.yml'
        path.write_text("dist_function: Vincenty\nlon_col: longitude\n")
        settings = load_overrides(path)
        assert settings['dist_function'] == 'Vincenty'
        assert settings['lon_col'] == 'longitude'
        assert settings['lat_col'] == 'lat'

    def test_unknown_key(self, tmp_path):
        from config import load_overrides
        path = tmp_path / 'run.yml'
        path.write_text("earth_radius: 1\n")
        with pytest.raises(ValueError, match='Unknown config keys'):
            load_overrides(path)

    def test_missing_file(self, tmp_path):
        from config import load_overrides
        with pytest.raises(FileNotFoundError):
            load_overrides(tmp_path / 'missing.yml')
