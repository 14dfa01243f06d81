"""
Configuration management for the HR assistant pipeline.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent
DATA_DIR = ROOT_DIR / "data"


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "hr_assistant"
    username: str | None = None
    password: str | None = None

    documents_collection: str = "hr_documents"
    query_log_collection: str = "query_logs"

    @property
    def connection_string(self) -> str:
        """Generate MongoDB connection string."""
        if self.username and self.password:
            return f"mongodb://{self.username}:{self.password}@{self.host}:{self.port}"
        return f"mongodb://{self.host}:{self.port}"


class ExtractionSettings(BaseSettings):
    """Upload limits and text extraction thresholds."""

    model_config = SettingsConfigDict(env_prefix="EXTRACTION_")

    max_file_size_bytes: int = 10 * 1024 * 1024
    # Below this many characters pdfplumber output is considered a miss
    min_pdf_text_chars: int = 50


class AnalysisSettings(BaseSettings):
    """Document analysis configuration."""

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    max_chars: int = 20000
    summary_max_chars: int = 600
    summary_sentences: int = 3
    max_keywords: int = 15

    # Use the generation provider for summary, sentiment and contact info
    use_llm: bool = False
    timeout_seconds: float = 30.0

    # Experience level thresholds (years)
    senior_years: float = 6.0
    mid_years: float = 3.0

    @model_validator(mode="after")
    def validate_thresholds(self) -> "AnalysisSettings":
        if self.mid_years > self.senior_years:
            raise ValueError("mid_years must not exceed senior_years")
        return self


class EmbeddingSettings(BaseSettings):
    """Embedding model and indexing configuration."""

    model_config = SettingsConfigDict(env_prefix="EMBEDDING_")

    provider: Literal["sentence_transformers", "openai"] = "sentence_transformers"
    model: str = "sentence-transformers/all-MiniLM-L6-v2"
    dimension: int = 384
    # Bump to invalidate every stored embedding
    version: str = "v1"

    # Device settings
    device: Literal["cpu", "cuda", "mps", "auto"] = "auto"
    batch_size: int = 32

    max_chars: int = 20000
    backfill_limit: int = 50
    concurrency: int = 4
    timeout_seconds: float = 30.0

    @field_validator("device")
    @classmethod
    def validate_device(cls, v: str) -> str:
        """Auto-detect device if set to auto."""
        if v == "auto":
            try:
                import torch

                if torch.cuda.is_available():
                    return "cuda"
                elif torch.backends.mps.is_available():
                    return "mps"
            except ImportError:
                pass
            return "cpu"
        return v


class RetrievalSettings(BaseSettings):
    """Search ranking configuration."""

    model_config = SettingsConfigDict(env_prefix="RETRIEVAL_")

    lexical_weight: float = Field(default=0.4, ge=0.0)
    semantic_weight: float = Field(default=0.6, ge=0.0)
    semantic_threshold: float = Field(default=0.3, ge=0.0, le=1.0)

    top_k: int = 20
    candidate_limit: int = Field(default=500, ge=1)
    preview_chars: int = 500
    max_highlights: int = 2

    @model_validator(mode="after")
    def validate_weights(self) -> "RetrievalSettings":
        if self.lexical_weight + self.semantic_weight <= 0:
            raise ValueError("lexical_weight and semantic_weight cannot both be zero")
        return self


class GenerationSettings(BaseSettings):
    """Generation provider (LLM) configuration."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    model: str = "gpt-4o-mini"
    api_key: SecretStr | None = None
    base_url: str | None = None
    temperature: float = 0.1
    max_tokens: int = 800
    timeout_seconds: float = 60.0
    max_retries: int = 3

    # Context assembly
    context_top_k: int = Field(default=5, ge=1, le=10)
    excerpt_chars: int = 1200


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "hr_assistant.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True
    file_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "HR-Assistant"
    version: str = "0.1.0"
    description: str = "Document intelligence and retrieval for HR teams"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
