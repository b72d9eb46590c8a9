"""casegraph configuration via environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CASEGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Case context ---
    ACTIVE_CASE_ID: str | None = None

    # --- Extraction ---
    INFERRED_CONNECTION_STRENGTH: float = 0.4

    # --- Centrality ---
    CENTRALITY_DEGREE_WEIGHT: float = 0.4
    CENTRALITY_BETWEENNESS_WEIGHT: float = 0.6

    # --- Communities ---
    COMMUNITY_MIN_SIZE: int = 2
    COMMUNITY_MODULARITY_THRESHOLD: float = 1e-4

    # --- Logging ---
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("COMMUNITY_MIN_SIZE")
    @classmethod
    def _min_size_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("COMMUNITY_MIN_SIZE must be at least 1")
        return v

    @field_validator("INFERRED_CONNECTION_STRENGTH")
    @classmethod
    def _clamp_strength(cls, v: float) -> float:
        return min(1.0, max(0.0, v))

    @model_validator(mode="after")
    def _check_weights(self) -> "Settings":
        if self.CENTRALITY_DEGREE_WEIGHT < 0 or self.CENTRALITY_BETWEENNESS_WEIGHT < 0:
            raise ValueError("centrality weights must be non-negative")
        if self.CENTRALITY_DEGREE_WEIGHT + self.CENTRALITY_BETWEENNESS_WEIGHT == 0:
            raise ValueError("centrality weights cannot both be zero")
        return self


settings = Settings()
