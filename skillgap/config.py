from pathlib import Path

from pydantic_settings import BaseSettings

DATA_DIR = Path(__file__).resolve().parent / "data"


class Settings(BaseSettings):
    # Static data assets
    taxonomy_path: str = str(DATA_DIR / "taxonomy.yaml")
    resources_path: str = str(DATA_DIR / "learning_resources.yaml")
    keyword_tables_path: str = str(DATA_DIR / "keyword_tables.yaml")

    # Extraction / matching
    context_window: int = 50  # chars captured on each side of a direct match
    fuzzy_threshold: float = 0.8  # similarity must be strictly greater

    # Analysis cache
    cache_ttl_minutes: int = 30
    cache_max_entries: int = 50
    cache_evict_fraction: float = 0.2

    # Job content validation
    min_content_length: int = 50
    min_job_keywords: int = 2

    # Recommendations / history
    max_resources_per_skill: int = 5
    history_limit: int = 100

    model_config = {"env_prefix": "SKILLGAP_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
