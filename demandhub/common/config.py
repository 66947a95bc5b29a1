"""
Configuration settings for the demand client.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path


class Config:
    """Central configuration class for all client settings."""

    def __init__(self) -> None:
        # Backend settings
        self.API_BASE_URL: str = os.getenv(
            "DEMANDHUB_API_URL", "http://localhost:8080/api/v1"
        ).rstrip("/")
        self.HTTP_TIMEOUT: float = float(os.getenv("DEMANDHUB_HTTP_TIMEOUT", "10"))

        # File paths
        self.BASE_DIR: Path = Path(
            os.getenv("DEMANDHUB_HOME", str(Path.home() / ".demandhub"))
        )
        self.TOKEN_FILE_PATH: Path = Path(
            os.getenv("DEMANDHUB_TOKEN_FILE", str(self.BASE_DIR / "token"))
        )

        # Workflow rules
        self.REJECTION_COMMENT_MIN: int = 10
        self.REJECTION_COMMENT_MAX: int = 500

        # Demand form rules
        self.TITLE_MIN: int = 3
        self.TITLE_MAX: int = 100
        self.DESCRIPTION_MIN: int = 10
        self.DESCRIPTION_MAX: int = 500
        self.ARTICLE_NAME_MIN: int = 2
        self.ARTICLE_NAME_MAX: int = 50
        self.ARTICLE_DESCRIPTION_MIN: int = 5
        self.ARTICLE_DESCRIPTION_MAX: int = 200
        self.ARTICLE_QUANTITY_MAX: int = 1000
        self.ARTICLE_PRICE_MAX: int = 999999

        # Attachments
        self.ATTACHMENT_MAX_BYTES: int = 10 * 1024 * 1024  # 10MB
        self.ATTACHMENT_EXTENSIONS: dict[str, str] = {
            ".pdf": "application/pdf",
            ".doc": "application/msword",
            ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }

        # Logging
        self.LOG_LEVEL: int = logging.getLevelName(
            os.getenv("DEMANDHUB_LOG_LEVEL", "INFO").upper()
        )


# Defaults for model field constraints
DEFAULTS = Config()
