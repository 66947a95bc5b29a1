# Integration tests against a fake backend served by uvicorn
import socket
import threading
import time
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
import requests
import uvicorn
from _support import make_token
from fastapi import FastAPI, Header, HTTPException, Request, Response
from fastapi.responses import JSONResponse

from demandhub.client.client import DemandClient
from demandhub.client.infrastructure.token_storage import FileTokenStorage
from demandhub.common.exceptions import AuthError, HttpError, PermissionDenied
from demandhub.common.models import DemandStatus, Role

USERS = {
    "agent@chaabi.com": {"id": 7, "name": "Amine Agent", "role": "AGENT"},
    "responsable@chaabi.com": {"id": 12, "name": "Rania Responsable", "role": "RESPONSABLE"},
}
PASSWORD = "password123"


def create_backend() -> FastAPI:
    """In-memory demand backend speaking the same wire format as the real one."""
    app = FastAPI()
    tokens: dict[str, str] = {}
    demands: dict[int, dict[str, Any]] = {}
    counter = {"next": 1}

    def current_user(authorization: str | None) -> str:
        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(401, "Full authentication is required")
        email = tokens.get(authorization.removeprefix("Bearer "))
        if email is None:
            raise HTTPException(401, "Invalid token")
        return email

    @app.exception_handler(HTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse({"message": exc.detail}, status_code=exc.status_code)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "timestamp": int(time.time())}

    @app.post("/api/v1/auth/login")
    def login(body: dict[str, str]) -> dict[str, str]:
        user = USERS.get(body.get("email", ""))
        if user is None or body.get("password") != PASSWORD:
            raise HTTPException(401, "Bad credentials")
        token = make_token(
            id=user["id"],
            email=body["email"],
            name=user["name"],
            role=user["role"],
            iat=int(time.time()),
            exp=int(time.time()) + 3600,
        )
        tokens[token] = body["email"]
        return {"token": token}

    @app.post("/api/v1/auth/logout")
    def logout(authorization: str | None = Header(default=None)) -> Response:
        current_user(authorization)
        tokens.pop(authorization.removeprefix("Bearer "), None)  # type: ignore[union-attr]
        return Response(status_code=204)

    @app.get("/api/v1/demands")
    def list_demands(
        status: str | None = None, authorization: str | None = Header(default=None)
    ) -> list[dict[str, Any]]:
        current_user(authorization)
        records = sorted(demands.values(), key=lambda d: d["id"], reverse=True)
        if status:
            records = [d for d in records if d["status"] == status]
        return records

    @app.get("/api/v1/demands/{demand_id}")
    def get_demand(
        demand_id: int, authorization: str | None = Header(default=None)
    ) -> dict[str, Any]:
        current_user(authorization)
        if demand_id not in demands:
            raise HTTPException(404, f"Demand {demand_id} not found")
        return demands[demand_id]

    @app.post("/api/v1/demands", status_code=201)
    async def create_demand(request: Request) -> dict[str, Any]:
        email = current_user(request.headers.get("authorization"))
        form = await request.form()
        articles = []
        index = 0
        while f"articles[{index}].name" in form:
            prefix = f"articles[{index}]"
            articles.append(
                {
                    "id": 100 * counter["next"] + index,
                    "name": form[f"{prefix}.name"],
                    "description": form[f"{prefix}.description"],
                    "quantity": int(form[f"{prefix}.quantity"]),  # type: ignore[arg-type]
                    "price": float(form[f"{prefix}.price"]),  # type: ignore[arg-type]
                }
            )
            index += 1
        attachment = form.get("attachedFile")
        demand_id = counter["next"]
        counter["next"] += 1
        demands[demand_id] = {
            "id": demand_id,
            "title": form["title"],
            "description": form["description"],
            "articles": articles,
            "fileName": getattr(attachment, "filename", None),
            "status": "pending",
            "createdAt": datetime(2024, 5, 2, 9, 30).isoformat(),
            "createdBy": email,
        }
        return demands[demand_id]

    @app.patch("/api/v1/demands/{demand_id}/status")
    def update_status(
        demand_id: int,
        body: dict[str, str],
        authorization: str | None = Header(default=None),
    ) -> dict[str, Any]:
        email = current_user(authorization)
        if USERS[email]["role"] != "RESPONSABLE":
            raise HTTPException(403, "Access Denied")
        demand = demands[demand_id]
        demand["status"] = body["status"]
        if body.get("comment"):
            demand["rejectionComment"] = body["comment"]
        return demand

    @app.delete("/api/v1/demands/{demand_id}")
    def delete_demand(
        demand_id: int, authorization: str | None = Header(default=None)
    ) -> Response:
        current_user(authorization)
        demands.pop(demand_id, None)
        return Response(status_code=204)

    return app


@pytest.fixture(scope="module")
def backend_url() -> Any:
    """Run the fake backend on a free port for the duration of the module."""
    server_host = "127.0.0.1"
    # Find a free port
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((server_host, 0))
        server_port = s.getsockname()[1]

    config = uvicorn.Config(
        create_backend(), host=server_host, port=server_port, log_level="warning"
    )
    server = uvicorn.Server(config)
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()

    base = f"http://{server_host}:{server_port}"
    deadline = time.time() + 10
    while time.time() < deadline:
        try:
            if requests.get(f"{base}/health", timeout=1).ok:
                break
        except requests.ConnectionError:
            time.sleep(0.05)
    else:
        pytest.fail("Fake backend did not start")

    yield f"{base}/api/v1"

    server.should_exit = True
    thread.join(timeout=5)


def make_client(backend_url: str, token_file: Path) -> DemandClient:
    return DemandClient(api_url=backend_url, token_storage=FileTokenStorage(token_file))


def test_full_demand_lifecycle(backend_url: str, tmp_path: Path, pdf_file: Path) -> None:
    agent = make_client(backend_url, tmp_path / "agent-token")
    responsable = make_client(backend_url, tmp_path / "responsable-token")

    assert agent.login("agent@chaabi.com", PASSWORD).role is Role.AGENT
    created = agent.create_demand(
        title="New laptops",
        description="Laptops for the two new hires",
        articles=[
            {"name": "Laptop", "description": "14 inch laptop", "quantity": 2, "price": "1200.50"},
            {"name": "Mouse", "description": "Wireless mouse", "quantity": 3, "price": "15"},
        ],
        attachment=pdf_file,
    )
    assert created.status is DemandStatus.PENDING
    assert created.file_name == "quote.pdf"
    assert created.total == Decimal("2446")

    responsable.login("responsable@chaabi.com", PASSWORD)
    listed = responsable.list_demands()
    assert created.id in [d.id for d in listed]

    with pytest.raises(PermissionDenied):
        agent.approve(created.id)

    rejected = responsable.reject(created.id, "Budget constraints this quarter")
    assert rejected.status is DemandStatus.REJECTED
    assert rejected.rejection_comment == "Budget constraints this quarter"
    assert agent.get_demand(created.id).status is DemandStatus.REJECTED

    agent.delete_demand(created.id)
    with pytest.raises(HttpError) as exc_info:
        agent.get_demand(created.id)
    assert exc_info.value.status == 404  # noqa: PLR2004

    agent.close()
    responsable.close()


def test_session_survives_restart(backend_url: str, tmp_path: Path) -> None:
    token_file = tmp_path / "token"
    first = make_client(backend_url, token_file)
    first.login("responsable@chaabi.com", PASSWORD)
    first.close()

    second = make_client(backend_url, token_file)
    identity = second.restore()
    assert identity is not None
    assert identity.role is Role.RESPONSABLE
    assert second.list_demands() is not None

    second.logout()
    assert not token_file.exists()
    second.close()


def test_revoked_token_is_rejected(backend_url: str, tmp_path: Path) -> None:
    client = make_client(backend_url, tmp_path / "token")
    client.login("agent@chaabi.com", PASSWORD)
    token = client.session.bearer_token()
    client.logout()

    requests_session = requests.Session()
    response = requests_session.get(
        f"{backend_url}/demands", headers={"Authorization": f"Bearer {token}"}, timeout=5
    )
    assert response.status_code == 401  # noqa: PLR2004
    client.close()


def test_bad_credentials(backend_url: str, tmp_path: Path) -> None:
    client = make_client(backend_url, tmp_path / "token")
    with pytest.raises(AuthError, match="Invalid email or password"):
        client.login("agent@chaabi.com", "wrong")
    client.close()
