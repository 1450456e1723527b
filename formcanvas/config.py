"""
Form Canvas Configuration

Uses pydantic-settings for environment variable loading with validation.
Every tunable of the drag-and-drop engine (zone thresholds, row capacity,
fallback policies) lives here.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Environment variables can be set directly or via .env file, e.g.
    FORMCANVAS_MAX_ROW_CHILDREN=12.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMCANVAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Zone Classification
    # ==========================================================================
    vertical_threshold: float = Field(
        default=0.3,
        gt=0.0,
        le=0.5,
        description="Fraction of the target height treated as the top/bottom band"
    )

    horizontal_threshold: float = Field(
        default=0.25,
        gt=0.0,
        le=0.5,
        description="Fraction of the target width treated as the left/right band"
    )

    classification_strategy: Literal["vertical-first", "dominant-axis"] = Field(
        default="vertical-first",
        description="Which axis wins when the pointer sits in a corner"
    )

    # ==========================================================================
    # Container Policy
    # ==========================================================================
    max_row_children: int = Field(
        default=4,
        ge=2,
        description="Maximum number of direct children a row container may hold"
    )

    dissolve_single_child_rows: bool = Field(
        default=True,
        description="Replace a row by its only child once a move leaves it with one"
    )

    missing_target_policy: Literal["reject", "append-to-root"] = Field(
        default="reject",
        description="What an insert does when its target vanished between hover and drop"
    )

    # ==========================================================================
    # Drag Session
    # ==========================================================================
    drag_distance_threshold: float = Field(
        default=4.0,
        ge=0.0,
        description="Pointer travel in pixels before a press turns into a drag"
    )

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level used by configure_logging()"
    )

    @computed_field
    @property
    def has_center_band(self) -> bool:
        """True when some area of a target classifies as Center."""
        return self.vertical_threshold < 0.5 and self.horizontal_threshold < 0.5


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
