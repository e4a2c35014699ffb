import json

import httpx
import pytest
from fastapi.testclient import TestClient

from keygate.core.config import Settings
from keygate.core.openrouter import OpenRouterKeysClient
from keygate.core.registration import StaticConfigProvider
from keygate.main import create_app

ADMIN_TOKEN = "admin-secret"


class FakeOpenRouter:
    """In-memory stand-in for the OpenRouter keys API"""

    def __init__(self):
        self.keys = []
        self.requests = []
        self.fail_hashes = set()
        self.malformed_hashes = set()
        self.create_error = None
        self.list_error = None
        self._created = 0

    def add_key(self, name, key_hash=None, disabled=False, **extra):
        record = {
            "name": name,
            "hash": key_hash or f"hash-{len(self.keys)}",
            "label": name,
            "limit": 5,
            "disabled": disabled,
        }
        record.update(extra)
        self.keys.append(record)
        return record

    def calls(self, method):
        return [r for r in self.requests if r.method == method]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        assert path.startswith("/api/v1/keys")
        key_hash = path[len("/api/v1/keys/"):] if path.startswith("/api/v1/keys/") else None

        if request.method == "GET" and key_hash is None:
            return self._list(request)
        if request.method == "POST" and key_hash is None:
            return self._create(request)
        if key_hash in self.fail_hashes:
            return httpx.Response(500, json={"error": {"code": 500, "message": f"boom on {key_hash}"}})
        if key_hash in self.malformed_hashes:
            return httpx.Response(200, json={"data": {"hash": None}})

        record = next((k for k in self.keys if k["hash"] == key_hash), None)
        if record is None:
            return httpx.Response(404, json={"error": {"code": 404, "message": "Key not found"}})

        if request.method == "PATCH":
            record.update(json.loads(request.content))
            return httpx.Response(200, json={"data": record})
        if request.method == "DELETE":
            self.keys.remove(record)
            return httpx.Response(200, json={"data": {"success": True}})
        return httpx.Response(405)

    def _list(self, request):
        if self.list_error:
            return httpx.Response(self.list_error, json={"error": {"code": self.list_error, "message": "listing unavailable"}})
        offset = int(request.url.params.get("offset", 0))
        include_disabled = request.url.params.get("include_disabled") == "true"
        visible = [k for k in self.keys if include_disabled or not k["disabled"]]
        return httpx.Response(200, json={"data": visible[offset:offset + 100]})

    def _create(self, request):
        if self.create_error:
            status_code, payload = self.create_error
            return httpx.Response(status_code, json=payload)
        body = json.loads(request.content)
        self._created += 1
        record = self.add_key(body["name"], key_hash=f"created-{self._created}")
        record["label"] = body["label"]
        record["limit"] = body["limit"]
        return httpx.Response(201, json={"data": record, "key": f"sk-or-v1-test-{self._created}"})


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        OPENROUTER_API_KEY="provisioning-key",
        ADMIN_SECRET_TOKEN=ADMIN_TOKEN,
        REGISTRATION_CONFIG_PATH=tmp_path / "config.json",
        STATIC_DIR=tmp_path / "public",
        LOG_TO_FILE=False,
    )


@pytest.fixture
def fake_openrouter():
    return FakeOpenRouter()


@pytest.fixture
def keys_client(settings, fake_openrouter):
    return OpenRouterKeysClient(settings, transport=httpx.MockTransport(fake_openrouter.handler))


@pytest.fixture
def config_provider():
    return StaticConfigProvider(enabled=True)


@pytest.fixture
def client(settings, config_provider, keys_client):
    app = create_app(settings, config_provider=config_provider, keys_client=keys_client)
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"x-admin-token": ADMIN_TOKEN}
