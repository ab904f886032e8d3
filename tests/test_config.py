"""
Tests for configuration loading.
"""

from datetime import date

import pytest

from clinicgrid.config import AppConfig, GridConfig, WorkingHoursConfig
from clinicgrid.domain.models import WorkingHours


class TestAppConfig:
    """Tests for AppConfig validation and helpers."""

    def test_defaults(self):
        """Defaults match the reference clinic grid."""
        config = AppConfig()

        assert config.working_hours.to_working_hours() == WorkingHours(start=8, end=17)
        assert config.grid.to_time_grid().slot_minutes == 15
        assert config.grid.hold_delay_ms == 300
        assert config.exclude_days == [5, 6]

    def test_invalid_hour_raises(self):
        with pytest.raises(ValueError, match="Hour must be between 0 and 24"):
            WorkingHoursConfig(start=-1, end=17)

    def test_invalid_slot_minutes_raises(self):
        with pytest.raises(ValueError, match="slot_minutes must divide 60"):
            GridConfig(slot_minutes=7)

    def test_exclude_days_are_validated_and_deduplicated(self):
        """Duplicates are dropped and out-of-range days rejected."""
        assert AppConfig(exclude_days=[6, 5, 6]).exclude_days == [6, 5]

        with pytest.raises(ValueError, match="exclude_days must be between 0 and 6"):
            AppConfig(exclude_days=[7])

    def test_all_days_excluded_raises(self):
        with pytest.raises(ValueError, match="at least one open weekday"):
            AppConfig(exclude_days=list(range(7)))

    def test_base_hours_for_excluded_day_is_closed(self):
        """Excluded weekdays resolve to a closed base, not to None."""
        config = AppConfig()

        saturday = config.base_hours_for(date(2024, 8, 10))
        monday = config.base_hours_for(date(2024, 8, 12))

        assert saturday == WorkingHours(start=0, end=0)
        assert saturday.is_closed
        assert monday == WorkingHours(start=8, end=17)


class TestLoadFromYaml:
    """Tests for AppConfig.load_from_yaml."""

    def test_load_valid_file(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "working_hours:\n  start: 7.5\n  end: 19\n"
            "grid:\n  slot_minutes: 30\n"
            "exclude_days: [6]\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)

        assert config.working_hours.start == 7.5
        assert config.grid.slot_minutes == 30
        assert config.exclude_days == [6]

    def test_empty_file_uses_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        assert AppConfig.load_from_yaml(config_path) == AppConfig()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_non_mapping_root_raises(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping at the root level"):
            AppConfig.load_from_yaml(config_path)

    def test_invalid_yaml_raises(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("working_hours: [unclosed\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)
