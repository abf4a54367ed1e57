"""Application settings using Pydantic BaseSettings for environment variable management."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """
    Global application settings loaded from environment variables.

    Attributes:
        prompts_root: Directory under which rendered evaluation prompts are written
        vocabulary_paths: JSON-LD vocabulary snapshots, in precedence order
        report_path_marker: URL path fragment marking a report-backed primary source
        short_id_length: Hex digits of the evidence id kept in prompt filenames
        default_method: Evaluation method used when none is requested
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
    """

    prompts_root: str = Field(
        default="_scratch/evals/prompts",
        description="Root directory for rendered evaluation prompts"
    )
    vocabulary_paths: list[str] = Field(
        default_factory=list,
        description="JSON-LD vocabulary snapshots; earlier files win on duplicate terms"
    )
    report_path_marker: str = Field(
        default="/evidence/reports/",
        description="Path fragment identifying report-backed primary sources"
    )
    short_id_length: int = Field(
        default=12,
        ge=4,
        description="Number of evidence-id hex digits used in prompt filenames"
    )
    default_method: str = Field(
        default="temporal-validity/owl-sameAs/Person@v1",
        description="Evaluation method key used when the caller names none"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - import this throughout the application
settings = Settings()
