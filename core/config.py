"""
SUBCRACK - Configuration Management
Centralized configuration using pydantic-settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
    DATA_DIR: Path = PROJECT_ROOT / "cryptanalysis" / "data"
    REFERENCE_PATH: Path = DATA_DIR / "english_ngrams.txt"

    # Key search
    ITERATIONS: int = 1000
    KEEP_CHANCE: float = 0.0
    CHAINS: int = 1
    PATIENCE: int = 0  # 0 disables early stop
    SEED: Optional[int] = None

    # Scoring
    SCORER: str = "ngram"  # "ngram" | "language"
    BIGRAM_WEIGHT: float = 0.2
    TRIGRAM_WEIGHT: float = 0.9
    SCALE_REFERENCE: bool = False
    LANGUAGE: str = "en"

    COUNT_WORKERS: int = 4

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Path = PROJECT_ROOT / "subcrack.log"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
