import importlib
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from notemanager.client.context import ClientContext


def _reload_server():
    # api modules read APP_DATA_DIR at import time
    import notemanager.api.auth
    import notemanager.api.notes
    import notemanager.main
    importlib.reload(notemanager.api.auth)
    importlib.reload(notemanager.api.notes)
    importlib.reload(notemanager.main)
    return notemanager.main.app


@pytest.fixture()
def server_app(tmp_path, monkeypatch):
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path / "server"))
    monkeypatch.setenv("JWT_SECRET", "dev-secret-for-tests")
    monkeypatch.setenv("JWT_EXP_MINUTES", "15")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    return _reload_server()


@pytest.fixture()
def client(server_app):
    return TestClient(server_app)


class FakeRemote:
    """In-memory stand-in for the remote store, plugged in through httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.users = {"ada@example.com": "correct-horse"}
        self.valid_tokens: set[str] = set()
        self.notes: dict[str, dict] = {}
        self.forced: dict[tuple[str, str], int] = {}

    def force(self, method: str, path_prefix: str, status: int) -> None:
        self.forced[(method, path_prefix)] = status

    def note_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/api/notes")]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        for (method, prefix), status in self.forced.items():
            if request.method == method and path.startswith(prefix):
                return httpx.Response(status, json={"message": "forced failure"})

        if path == "/api/auth/signup":
            body = json.loads(request.content)
            if body["email"] in self.users:
                return httpx.Response(400, json={"message": "Email already in use"})
            self.users[body["email"]] = body["password"]
            return httpx.Response(201, json={"message": "User created successfully"})

        if path == "/api/auth/login":
            body = json.loads(request.content)
            if self.users.get(body["email"]) != body["password"]:
                return httpx.Response(400, json={"message": "Invalid email or password"})
            token = f"tok-{body['email']}"
            self.valid_tokens.add(token)
            return httpx.Response(200, json={"token": token, "email": body["email"]})

        auth = request.headers.get("Authorization")
        if not auth:
            return httpx.Response(401)
        if auth.split(" ", 1)[-1] not in self.valid_tokens:
            return httpx.Response(403)

        note_id = path[len("/api/notes/"):] if path.startswith("/api/notes/") else None
        if request.method == "GET":
            ordered = sorted(self.notes.values(), key=lambda n: n["createdAt"], reverse=True)
            return httpx.Response(200, json=ordered)
        if request.method == "POST":
            body = json.loads(request.content)
            self.notes[body["id"]] = body
            return httpx.Response(201, json=body)
        if note_id not in self.notes:
            return httpx.Response(404, json={"message": "Note not found or access denied"})
        if request.method == "PUT":
            self.notes[note_id].update(json.loads(request.content))
            return httpx.Response(200, json=self.notes[note_id])
        if request.method == "DELETE":
            del self.notes[note_id]
            return httpx.Response(200, json={"message": "Note deleted successfully"})
        return httpx.Response(405)


@pytest.fixture()
def fake_remote():
    return FakeRemote()


@pytest.fixture()
def opened_links():
    return []


@pytest.fixture()
def make_context(tmp_path, fake_remote, opened_links):
    def _make(transport=None):
        return ClientContext(
            base_url="http://notes.test",
            state_path=tmp_path / "state",
            transport=transport or httpx.MockTransport(fake_remote.handler),
            opener=opened_links.append,
        )

    return _make
