from pathlib import Path

import pytest
import requests
from _support import API_URL, StubHTTP, agent_token, responsable_token

from demandhub.client.client import DemandClient
from demandhub.client.infrastructure.token_storage import MemoryTokenStorage


@pytest.fixture
def stub_http() -> StubHTTP:
    return StubHTTP()


@pytest.fixture
def http_session(stub_http: StubHTTP) -> requests.Session:
    session = requests.Session()
    session.request = stub_http  # type: ignore[method-assign]
    return session


@pytest.fixture
def token_storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture
def client(http_session: requests.Session, token_storage: MemoryTokenStorage) -> DemandClient:
    """DemandClient wired to the stubbed backend."""
    return DemandClient(
        api_url=API_URL,
        token_storage=token_storage,
        http_session=http_session,
    )


@pytest.fixture
def agent_client(client: DemandClient, stub_http: StubHTTP) -> DemandClient:
    stub_http.add("POST", "/auth/login", body={"token": agent_token()})
    client.login("agent@chaabi.com", "password")
    return client


@pytest.fixture
def responsable_client(client: DemandClient, stub_http: StubHTTP) -> DemandClient:
    stub_http.add("POST", "/auth/login", body={"token": responsable_token()})
    client.login("responsable@chaabi.com", "password")
    return client


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    path = tmp_path / "quote.pdf"
    path.write_bytes(b"%PDF-1.4 test")
    return path
