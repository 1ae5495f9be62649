from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "WinbackVerifier"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "sqlite:///./winback.db"

    catalog_path: str = "data/own_brand_catalog.json"

    match_threshold: int = 65
    high_confidence_threshold: int = 95
    noise_floor: int = 60

    flagship_brand_keyword: str = "SOPREMA"
    flagship_policy: str = "floor"
    flagship_floor_score: int = 80
    flagship_additive_bonus: int = 40

    inclusion_bonus: int = 20
    secondary_keyword_bonus: int = 10
    secondary_keyword_bonus_cap: int = 30

    enable_candidate_pruning: bool = True
    min_pruned_candidates: int = 10
    priority_scan_limit: int = 1000

    verification_deadline_seconds: Optional[float] = None
    verification_concurrency: int = 4


settings = Settings()
