"""Infrastructure layer: Configuration loading.
"""

from __future__ import annotations

import logging
from pathlib import Path

from demandhub.common import Configurable, setup_logger
from demandhub.common.config import Config
from demandhub.common.models import ClientConfig

PACKAGE_LOGGER = "demandhub"


class ConfigLoader(Configurable):
    """Resolves per-client overrides against the environment defaults."""

    api_url: str
    token_file: Path
    log_level: int
    http_timeout: float

    def __init__(self, client_config: ClientConfig | None = None):
        self.config: Config = Config()
        client_config = client_config or ClientConfig()

        self.apply_overrides(
            client_config.model_dump(),
            self.config,
            ["api_url", "token_file", "log_level", "http_timeout"],
        )
        self.api_url = self.api_url.rstrip("/")
        self.token_file = Path(self.token_file).expanduser()

        # Setup logging
        self.logger = logging.getLogger(PACKAGE_LOGGER)
        setup_logger(self.logger, self.log_level)
