from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: Optional[str] = None

    # Log Level
    LOG_LEVEL: str = "INFO"  # e.g., DEBUG, INFO, WARNING, ERROR

    # Logging Configuration
    LOGGING_FRAME_DEPTH: int = (
        6  # Frame depth for finding logging call origin in stack trace
    )

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "LogAudit-API"
    VERSION: str = "1.0.0"

    # CORS
    ALLOWED_ORIGINS: List[str] = []

    # Groq
    GROQ_API_KEY: Optional[str] = None
    GROQ_LLM_MODEL: Optional[str] = None

    # Gemini
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_LLM_MODEL: Optional[str] = None

    # Log Summary (open-ended generative standard)
    LOG_SUMMARY_LLM_TEMPERATURE: float = 0.0
    LOG_SUMMARY_MAX_INPUT_CHARS: int = (
        100000  # Logs longer than this are truncated before summarization
    )

    # Batch Analysis
    BATCH_MAX_CONCURRENCY: Optional[int] = (
        None  # Parallel (document, standard) evaluations; None = CPU count
    )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    # --------- Properties ---------
    @property
    def is_local(self) -> bool:
        """
        Check if running in local development environment.

        Supported values:
        - "local" or "local_dev" → True (local development)
        - "dev", "staging", "prod", or anything else → False (deployed)
        """
        if not self.ENVIRONMENT:
            return False
        return self.ENVIRONMENT.lower() in ["local", "local_dev"]


settings = Settings()
