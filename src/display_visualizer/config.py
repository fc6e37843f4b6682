from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Loads from process env (VISUALIZER_*) and a local .env file.
    model_config = SettingsConfigDict(
        env_prefix="VISUALIZER_", extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )

    data_dir: str = "data"

    # Presets
    presets_key: str = "ga-visualizer-presets"
    presets_cap: int = 10

    # Image transform
    scale_min: float = 0.5
    scale_max: float = 1.5
    scale_step: float = 0.05

    # Export
    export_pixel_ratio: int = 2
    export_cache_bust: bool = True

    # Design
    default_accent_color: str = "#EF4444"
    accent_swatches: list[str] = [
        "#EF4444",
        "#EA4335",
        "#FBBC04",
        "#34A853",
        "#4285F4",
        "#111827",
    ]

    # Copy compliance
    headline_limit: int = 30
    subhead_limit: int = 90
    cta_limit: int = 15


settings = Settings()
