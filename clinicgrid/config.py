"""
Configuration management using Pydantic models loaded from YAML.
"""

from datetime import date, datetime
from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.availability import day_window
from .domain.grid import TimeGrid
from .domain.models import WorkingHours


class WorkingHoursConfig(BaseModel):
    """Base opening hours as fractional hours (9.5 = 09:30)."""
    start: float = 8.0
    end: float = 17.0

    @field_validator("start", "end")
    @classmethod
    def validate_hour(cls, v: float) -> float:
        """Validate hour is between 0 and 24."""
        if not 0 <= v <= 24:
            raise ValueError(f"Hour must be between 0 and 24, got {v}")
        return v

    def to_working_hours(self) -> WorkingHours:
        return WorkingHours(start=self.start, end=self.end)


class GridConfig(BaseModel):
    """Slot grid and gesture timing."""
    slot_minutes: int = 15
    hold_delay_ms: int = 300
    slot_height_px: float = 12.0

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, value: int) -> int:
        """Slots must tile an hour exactly."""
        if value <= 0 or 60 % value != 0:
            raise ValueError(f"slot_minutes must divide 60, got {value}")
        return value

    @field_validator("hold_delay_ms")
    @classmethod
    def validate_hold_delay(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("hold_delay_ms must be greater than zero")
        return value

    @field_validator("slot_height_px")
    @classmethod
    def validate_slot_height(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("slot_height_px must be greater than zero")
        return value

    def to_time_grid(self) -> TimeGrid:
        return TimeGrid(
            slot_minutes=self.slot_minutes,
            hold_delay_ms=self.hold_delay_ms,
            slot_height_px=self.slot_height_px,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    working_hours: WorkingHoursConfig = Field(default_factory=WorkingHoursConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    exclude_days: List[int] = Field(default_factory=lambda: [5, 6])  # Saturday, Sunday
    show_non_working_hours: bool = False

    @field_validator("exclude_days")
    @classmethod
    def validate_exclude_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"exclude_days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @model_validator(mode="after")
    def validate_weekly_schedule(self) -> "AppConfig":
        """A schedule closed on every weekday is almost certainly a typo."""
        if len(self.exclude_days) == 7:
            raise ValueError("exclude_days must leave at least one open weekday")
        return self

    def base_hours_for(self, day: date | datetime) -> WorkingHours:
        """
        Base working hours for a calendar day.

        Excluded weekdays come back closed as WorkingHours(0, 0), so an
        EXTRA_OPEN exception can still open them.
        """
        weekday = day_window(day).start.weekday()
        if weekday in self.exclude_days:
            return WorkingHours(start=0, end=0)
        return self.working_hours.to_working_hours()

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.
        
        Args:
            config_path: Path to the YAML config file
            
        Returns:
            AppConfig instance
            
        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"
    
    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"
    
    return config_path
