import logging
from pathlib import Path
from typing import Any

import pytest

from demandhub.client.infrastructure.config_loader import ConfigLoader
from demandhub.common.config import Config
from demandhub.common.models import ClientConfig

ENV_VARS = (
    "DEMANDHUB_API_URL",
    "DEMANDHUB_HTTP_TIMEOUT",
    "DEMANDHUB_HOME",
    "DEMANDHUB_TOKEN_FILE",
    "DEMANDHUB_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch: Any) -> Any:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_config_rule_constants() -> None:
    config = Config()
    assert config.REJECTION_COMMENT_MIN == 10  # noqa: PLR2004
    assert config.REJECTION_COMMENT_MAX == 500  # noqa: PLR2004
    assert config.ATTACHMENT_MAX_BYTES == 10 * 1024 * 1024
    assert set(config.ATTACHMENT_EXTENSIONS) == {".pdf", ".doc", ".docx"}


def test_config_defaults(clean_env: Any) -> None:
    config = Config()
    assert config.API_BASE_URL == "http://localhost:8080/api/v1"
    assert config.HTTP_TIMEOUT == 10  # noqa: PLR2004
    assert Path.home() / ".demandhub" == config.BASE_DIR
    assert config.BASE_DIR / "token" == config.TOKEN_FILE_PATH
    assert config.LOG_LEVEL == logging.INFO


def test_config_from_environment(clean_env: Any, tmp_path: Path) -> None:
    clean_env.setenv("DEMANDHUB_API_URL", "https://demands.example.com/api/v1/")
    clean_env.setenv("DEMANDHUB_HTTP_TIMEOUT", "2.5")
    clean_env.setenv("DEMANDHUB_HOME", str(tmp_path))
    clean_env.setenv("DEMANDHUB_LOG_LEVEL", "debug")

    config = Config()

    assert config.API_BASE_URL == "https://demands.example.com/api/v1"
    assert config.HTTP_TIMEOUT == 2.5  # noqa: PLR2004
    assert tmp_path / "token" == config.TOKEN_FILE_PATH
    assert config.LOG_LEVEL == logging.DEBUG


def test_loader_prefers_overrides(clean_env: Any, tmp_path: Path) -> None:
    loader = ConfigLoader(
        ClientConfig(
            api_url="http://backend.test/api/v1/",
            token_file=tmp_path / "session",
            log_level=logging.WARNING,
            http_timeout=3,
        )
    )
    assert loader.api_url == "http://backend.test/api/v1"
    assert tmp_path / "session" == loader.token_file
    assert loader.http_timeout == 3  # noqa: PLR2004
    assert logging.getLogger("demandhub").level == logging.WARNING


def test_loader_falls_back_to_environment(clean_env: Any, tmp_path: Path) -> None:
    clean_env.setenv("DEMANDHUB_TOKEN_FILE", str(tmp_path / "from-env"))
    loader = ConfigLoader()
    assert loader.api_url == "http://localhost:8080/api/v1"
    assert tmp_path / "from-env" == loader.token_file
    assert loader.log_level == logging.INFO


def test_logger_handler_added_once(clean_env: Any) -> None:
    ConfigLoader()
    ConfigLoader(ClientConfig(log_level=logging.ERROR))
    logger = logging.getLogger("demandhub")
    assert len(logger.handlers) == 1
    assert logger.handlers[0].level == logging.ERROR
