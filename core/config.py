from __future__ import annotations

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    session_file: str = "session_data.json"
    log_level: str = "INFO"

    # Demo inventory used when no real feed is configured
    demo_development_count: int = 15
    demo_section_heights: List[int] = [12, 16, 10, 14, 8, 11]
    demo_units_per_floor: int = 4
    demo_seed: Optional[int] = None

    model_config = SettingsConfigDict(
        env_prefix="UNITGRID_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


settings = Settings()
