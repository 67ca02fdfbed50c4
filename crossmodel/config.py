"""Configuration management for the crossmodel engine."""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging Configuration
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Calibration defaults
    conflict_high_confidence_threshold: float = 0.8
    confidence_spread_medium: float = 0.3
    low_similarity_threshold: float = 25.0

    # Output limits (unset keeps everything)
    max_common_findings: Optional[int] = None
    max_recommended_actions: Optional[int] = None

    model_config = SettingsConfigDict(
        env_prefix="CROSSMODEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class EngineConfig(BaseModel):
    """Calibration constants for conflict detection and consolidation."""

    conflict_high_confidence_threshold: float = Field(0.8, ge=0.0, le=1.0)
    confidence_spread_medium: float = Field(0.3, ge=0.0, le=1.0)
    low_similarity_threshold: float = Field(25.0, ge=0.0, le=100.0)

    # Output limits (None keeps everything)
    max_common_findings: Optional[int] = Field(None, ge=0)
    max_recommended_actions: Optional[int] = Field(None, ge=0)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "EngineConfig":
        """Build engine calibration from application settings."""
        settings = settings or get_settings()
        return cls(
            conflict_high_confidence_threshold=settings.conflict_high_confidence_threshold,
            confidence_spread_medium=settings.confidence_spread_medium,
            low_similarity_threshold=settings.low_similarity_threshold,
            max_common_findings=settings.max_common_findings,
            max_recommended_actions=settings.max_recommended_actions,
        )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create settings singleton instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
